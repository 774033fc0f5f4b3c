"""
Form handling for the catalog's write paths.

Every submission goes through the same pipeline:

1. ``form_to_dict`` flattens the multipart/urlencoded body, keeping repeated
   keys as lists.
2. ``trim_fields`` trims every declared field. Multi-valued fields are first
   coerced to a list with ``as_list`` and each element is trimmed.
3. ``validate_form`` checks the trimmed values against a pydantic form model,
   so length limits count the characters the user typed. It reports at most
   one violation per field.
4. ``escape_fields`` HTML-escapes the values last.

The escaped values are what gets persisted, and also what the form is
redisplayed with when validation fails.
"""
from dataclasses import dataclass
from datetime import date
from typing import Any, ClassVar, Dict, Iterable, List, Optional, Tuple, Type, TypeVar

from markupsafe import escape
from pydantic import BaseModel, ValidationError
from pydantic_core import PydanticCustomError

from locallibrary.database import is_storable_id

FormT = TypeVar("FormT", bound="FormModel")


@dataclass(frozen=True)
class Violation:
    field: str
    msg: str


class FormModel(BaseModel):
    # Fields that may arrive as one value, several values, or not at all
    multi_valued: ClassVar[Tuple[str, ...]] = ()


def as_list(value: Any) -> List[Any]:
    """Coerce a possibly multi-valued form field to a list.

    Absent (None) becomes [], a scalar becomes [scalar] and any list or
    tuple is copied as a list.
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def form_to_dict(form) -> Dict[str, Any]:
    """Flatten a starlette FormData: one value stays scalar, repeats become a list."""
    data: Dict[str, Any] = {}
    for key in form.keys():
        values = form.getlist(key)
        data[key] = values[0] if len(values) == 1 else values
    return data


def trim(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def clean(value: Any) -> str:
    """Trim and HTML-escape one submitted value."""
    return str(escape(trim(value)))


def trim_fields(form_cls: Type[FormModel], raw: Dict[str, Any]) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for name in form_cls.model_fields:
        if name in form_cls.multi_valued:
            values[name] = [trim(item) for item in as_list(raw.get(name))]
        else:
            value = raw.get(name)
            # A repeated scalar field keeps its last value
            if isinstance(value, (list, tuple)):
                value = value[-1] if value else None
            values[name] = trim(value)
    return values


def escape_fields(values: Dict[str, Any]) -> Dict[str, Any]:
    """HTML-escape the string values of a form, element by element for lists."""
    escaped: Dict[str, Any] = {}
    for name, value in values.items():
        if isinstance(value, str):
            escaped[name] = str(escape(value))
        elif isinstance(value, list):
            escaped[name] = [str(escape(item)) if isinstance(item, str) else item for item in value]
        else:
            escaped[name] = value
    return escaped


def validate_form(
    form_cls: Type[FormT], raw: Dict[str, Any]
) -> Tuple[Dict[str, Any], Optional[FormT], List[Violation]]:
    """Trim ``raw``, validate it against ``form_cls`` and escape the result.

    Returns the escaped values, the validated form with its text fields
    escaped (None on failure) and the list of violations.
    """
    trimmed = trim_fields(form_cls, raw)
    values = escape_fields(trimmed)
    try:
        form = form_cls.model_validate(trimmed)
    except ValidationError as exc:
        return values, None, violations_from(exc)

    # Parsed values such as dates stay as validated
    escaped = escape_fields(dict(form))
    return values, form.model_copy(update=escaped), []


def violations_from(exc: ValidationError) -> List[Violation]:
    violations = []
    seen = set()
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else ""
        if field in seen:
            continue
        seen.add(field)
        violations.append(Violation(field=field, msg=error["msg"]))
    return violations


def mark_selected(choices: Iterable[Any], selected_ids: Iterable[Any]) -> Dict[int, bool]:
    """Selection overlay for a choice list: choice id -> previously selected.

    Selected ids may be the submitted strings or integers.
    """
    selected = {str(value) for value in selected_ids}
    return {choice.id: str(choice.id) in selected for choice in choices}


# Reusable checks, used as pydantic AfterValidator/BeforeValidator functions

def required(message: str):
    def check(value: str) -> str:
        if len(value) < 1:
            raise PydanticCustomError("required", message)
        return value
    return check


def min_length(minimum: int, message: str):
    def check(value: str) -> str:
        if len(value) < minimum:
            raise PydanticCustomError("min_length", message)
        return value
    return check


def max_length(maximum: int, message: str):
    def check(value: str) -> str:
        if len(value) > maximum:
            raise PydanticCustomError("max_length", message)
        return value
    return check


def alphanumeric(message: str):
    def check(value: str) -> str:
        if not value.isalnum():
            raise PydanticCustomError("alphanumeric", message)
        return value
    return check


def one_of(options: Iterable[str], message: str):
    allowed = tuple(options)

    def check(value: str) -> str:
        if value not in allowed:
            raise PydanticCustomError("one_of", message)
        return value
    return check


def optional_iso_date(message: str):
    """Empty means no date; anything else must be an ISO 8601 date."""
    def check(value: Any) -> Optional[date]:
        if value in (None, ""):
            return None
        if isinstance(value, date):
            return value
        try:
            return date.fromisoformat(str(value))
        except ValueError:
            raise PydanticCustomError("iso_date", message)
    return check


def reference_id(value: str) -> Optional[int]:
    """Parse a submitted reference id; None when it cannot name a record.

    Only ASCII digits count, since ``str.isdigit`` also accepts characters
    such as superscripts that ``int`` rejects.
    """
    if not (value.isascii() and value.isdecimal()):
        return None
    record_id = int(value)
    return record_id if is_storable_id(record_id) else None
