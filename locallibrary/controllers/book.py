# controllers/book.py
import logging
from functools import partial
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import sessionmaker

from locallibrary.crud import author as author_crud
from locallibrary.crud import book as book_crud
from locallibrary.crud import bookinstance as instance_crud
from locallibrary.crud import genre as genre_crud
from locallibrary.database import get_db, get_sessionmaker, gather_reads
from locallibrary.models import Book
from locallibrary.schemas import BookCreate
from locallibrary.services.catalog_forms import BookForm
from locallibrary.services.forms import (
    Violation, form_to_dict, mark_selected, reference_id, validate_form
)
from locallibrary.views import render

logger = logging.getLogger(__name__)

router = APIRouter(tags=["books"])

BOOK_LIST_URL = "/catalog/books"


def book_form_values(book: Book) -> dict:
    """The form's view of a stored book, shaped like an escaped submission."""
    return {
        "title": book.title,
        "author": str(book.author_id),
        "summary": book.summary,
        "isbn": book.isbn,
        "genre": [str(genre.id) for genre in book.genres],
    }


def render_book_form(request: Request, title: str, authors, genres, book: Optional[dict] = None, errors=None):
    selected = book["genre"] if book else []
    return render(request, "book_form", {
        "title": title,
        "authors": authors,
        "genres": genres,
        "checked": mark_selected(genres, selected),
        "book": book,
        "errors": errors or [],
    })


async def read_book_form(request: Request, db: AsyncSession):
    """Sanitize and validate a submitted book form.

    Returns the escaped values, the data to persist (None when invalid) and
    the violations.
    """
    values, form, violations = validate_form(BookForm, form_to_dict(await request.form()))
    if form is None:
        return values, None, violations

    author_id = reference_id(form.author)
    if author_id is None or await author_crud.get_author(db, author_id) is None:
        return values, None, [Violation(field="author", msg="Author does not exist.")]

    book_data = BookCreate(
        title=form.title,
        author_id=author_id,
        summary=form.summary,
        isbn=form.isbn,
        genre_ids=[genre_id for genre_id in map(reference_id, form.genre) if genre_id is not None],
    )
    return values, book_data, []


# Display list of all books.
@router.get("/books")
async def book_list(request: Request, db: AsyncSession = Depends(get_db)):
    books = await book_crud.get_books(db)
    return render(request, "book_list", {"title": "Book List", "book_list": books})


# Display book create form on GET.
@router.get("/book/create")
async def book_create_get(request: Request, session_factory: sessionmaker = Depends(get_sessionmaker)):
    authors, genres = await gather_reads(session_factory, author_crud.get_authors, genre_crud.get_genres)
    return render_book_form(request, "Create Book", authors, genres)


# Handle book create on POST.
@router.post("/book/create")
async def book_create_post(
    request: Request,
    db: AsyncSession = Depends(get_db),
    session_factory: sessionmaker = Depends(get_sessionmaker),
):
    values, book_data, errors = await read_book_form(request, db)

    if errors:
        # Render the form again with the escaped values and messages
        authors, genres = await gather_reads(session_factory, author_crud.get_authors, genre_crud.get_genres)
        return render_book_form(request, "Create Book", authors, genres, book=values, errors=errors)

    book = await book_crud.create_book(db, book_data)
    return RedirectResponse(book.url, status_code=303)


# Display book delete form on GET.
@router.get("/book/{book_id}/delete")
async def book_delete_get(
    book_id: int,
    request: Request,
    session_factory: sessionmaker = Depends(get_sessionmaker),
):
    book, book_instances = await gather_reads(
        session_factory,
        partial(book_crud.get_book, book_id=book_id),
        partial(instance_crud.get_instances_for_book, book_id=book_id),
    )
    if book is None:
        return RedirectResponse(BOOK_LIST_URL, status_code=303)

    return render(request, "book_delete", {
        "title": "Delete Book",
        "book": book,
        "book_instances": book_instances,
    })


# Handle book delete on POST.
@router.post("/book/{book_id}/delete")
async def book_delete_post(
    book_id: int,
    request: Request,
    db: AsyncSession = Depends(get_db),
    session_factory: sessionmaker = Depends(get_sessionmaker),
):
    book, book_instances = await gather_reads(
        session_factory,
        partial(book_crud.get_book, book_id=book_id),
        partial(instance_crud.get_instances_for_book, book_id=book_id),
    )
    if book is None:
        return RedirectResponse(BOOK_LIST_URL, status_code=303)

    if book_instances:
        # Copies still reference this book, show them instead of deleting
        logger.warning(f"Refusing to delete book {book_id}: {len(book_instances)} copies remain")
        return render(request, "book_delete", {
            "title": "Delete Book",
            "book": book,
            "book_instances": book_instances,
        })

    await book_crud.delete_book(db, book_id)
    return RedirectResponse(BOOK_LIST_URL, status_code=303)


# Display book update form on GET.
@router.get("/book/{book_id}/update")
async def book_update_get(
    book_id: int,
    request: Request,
    session_factory: sessionmaker = Depends(get_sessionmaker),
):
    book, authors, genres = await gather_reads(
        session_factory,
        partial(book_crud.get_book, book_id=book_id),
        author_crud.get_authors,
        genre_crud.get_genres,
    )
    if book is None:
        raise HTTPException(status_code=404, detail="Book not found")

    return render_book_form(request, "Update Book", authors, genres, book=book_form_values(book))


# Handle book update on POST.
@router.post("/book/{book_id}/update")
async def book_update_post(
    book_id: int,
    request: Request,
    db: AsyncSession = Depends(get_db),
    session_factory: sessionmaker = Depends(get_sessionmaker),
):
    values, book_data, errors = await read_book_form(request, db)

    if errors:
        authors, genres = await gather_reads(session_factory, author_crud.get_authors, genre_crud.get_genres)
        return render_book_form(request, "Update Book", authors, genres, book=values, errors=errors)

    # Same id as before: the record is updated in place
    book = await book_crud.update_book(db, book_id, book_data)
    if book is None:
        raise HTTPException(status_code=404, detail="Book not found")
    return RedirectResponse(book.url, status_code=303)


# Display detail page for a specific book.
@router.get("/book/{book_id}")
async def book_detail(
    book_id: int,
    request: Request,
    session_factory: sessionmaker = Depends(get_sessionmaker),
):
    book, book_instances = await gather_reads(
        session_factory,
        partial(book_crud.get_book, book_id=book_id),
        partial(instance_crud.get_instances_for_book, book_id=book_id),
    )
    if book is None:
        raise HTTPException(status_code=404, detail="Book not found")

    return render(request, "book_detail", {
        "title": book.title,
        "book": book,
        "book_instances": book_instances,
    })
