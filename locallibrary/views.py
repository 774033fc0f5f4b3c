from pathlib import Path

from fastapi import Request
from fastapi.templating import Jinja2Templates
from markupsafe import Markup

TEMPLATES_DIR = Path(__file__).parent / "templates"
STATIC_DIR = Path(__file__).parent / "static"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def stored(value) -> Markup:
    """Emit a value that was escaped on its way into the store as-is."""
    if value is None:
        return Markup("")
    return Markup(str(value))


templates.env.filters["stored"] = stored


def render(request: Request, name: str, context: dict, status_code: int = 200):
    return templates.TemplateResponse(request, f"{name}.html", context, status_code=status_code)
