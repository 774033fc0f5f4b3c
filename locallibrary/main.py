# main.py: application factory, error pages and route wiring
import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from locallibrary.config import Settings, settings as default_settings
from locallibrary.controllers import author, book, bookinstance, catalog, genre
from locallibrary.database import build_engine, build_sessionmaker, init_db
from locallibrary.views import STATIC_DIR, render

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting up Local Library...")
    await init_db(app.state.engine)
    logger.info("Database tables created successfully")

    yield

    logger.info("Shutting down Local Library...")
    await app.state.engine.dispose()


async def http_error(request: Request, exc: StarletteHTTPException):
    return render(request, "error", {
        "title": "Error",
        "message": exc.detail,
        "status_code": exc.status_code,
    }, status_code=exc.status_code)


async def invalid_request(request: Request, exc: RequestValidationError):
    """A path id that is not an integer names no record, so it is a 404.

    Form bodies are read and validated by the controllers, which leaves the
    path ids as the only parameters FastAPI rejects. The message is generic
    because the rejected id is checked before any controller knows which
    record it was meant to find. Ids that parse but lie outside the store's
    range reach the controllers and get the same page as any unknown id,
    such as "Book not found".
    """
    return render(request, "error", {
        "title": "Error",
        "message": "Not Found",
        "status_code": 404,
    }, status_code=404)


async def store_error(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.method} {request.url.path}", exc_info=exc)
    return render(request, "error", {
        "title": "Error",
        "message": "Something went wrong. Please try again later.",
        "status_code": 500,
    }, status_code=500)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    app = FastAPI(title=settings.APP_TITLE, lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = build_engine(settings)
    app.state.sessionmaker = build_sessionmaker(app.state.engine)

    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    app.add_exception_handler(StarletteHTTPException, http_error)
    app.add_exception_handler(RequestValidationError, invalid_request)
    app.add_exception_handler(SQLAlchemyError, store_error)

    for module in (catalog, book, author, genre, bookinstance):
        app.include_router(module.router, prefix="/catalog")

    @app.get("/", include_in_schema=False)
    async def home():
        return RedirectResponse("/catalog/", status_code=303)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("locallibrary.main:app", host="127.0.0.1", port=8000, reload=True)
