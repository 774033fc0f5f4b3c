# Form models for each catalog entity
from datetime import date
from typing import Annotated, ClassVar, List, Optional, Tuple

from pydantic import AfterValidator, BeforeValidator

from locallibrary.models import BOOK_INSTANCE_STATUSES
from locallibrary.services.forms import (
    FormModel, required, min_length, max_length, alphanumeric, one_of, optional_iso_date
)


class BookForm(FormModel):
    multi_valued: ClassVar[Tuple[str, ...]] = ("genre",)

    title: Annotated[str, AfterValidator(required("Title must not be empty."))]
    author: Annotated[str, AfterValidator(required("Author must not be empty."))]
    summary: Annotated[str, AfterValidator(required("Summary must not be empty."))]
    isbn: Annotated[str, AfterValidator(required("ISBN must not be empty."))]
    genre: List[str] = []


class AuthorForm(FormModel):
    first_name: Annotated[
        str,
        AfterValidator(required("First name must be specified.")),
        AfterValidator(alphanumeric("First name has non-alphanumeric characters.")),
        AfterValidator(max_length(100, "First name must not exceed 100 characters.")),
    ]
    family_name: Annotated[
        str,
        AfterValidator(required("Family name must be specified.")),
        AfterValidator(alphanumeric("Family name has non-alphanumeric characters.")),
        AfterValidator(max_length(100, "Family name must not exceed 100 characters.")),
    ]
    date_of_birth: Annotated[Optional[date], BeforeValidator(optional_iso_date("Invalid date of birth"))] = None
    date_of_death: Annotated[Optional[date], BeforeValidator(optional_iso_date("Invalid date of death"))] = None


class GenreForm(FormModel):
    name: Annotated[
        str,
        AfterValidator(min_length(3, "Genre name must contain at least 3 characters")),
        AfterValidator(max_length(100, "Genre name must not exceed 100 characters.")),
    ]


class BookInstanceForm(FormModel):
    book: Annotated[str, AfterValidator(required("Book must be specified"))]
    imprint: Annotated[str, AfterValidator(required("Imprint must be specified"))]
    status: Annotated[str, AfterValidator(one_of(BOOK_INSTANCE_STATUSES, "Invalid status"))]
    due_back: Annotated[Optional[date], BeforeValidator(optional_iso_date("Invalid date"))] = None
