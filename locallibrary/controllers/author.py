# controllers/author.py
import logging
from functools import partial

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import sessionmaker

from locallibrary.crud import author as author_crud
from locallibrary.crud import book as book_crud
from locallibrary.database import get_db, get_sessionmaker, gather_reads
from locallibrary.models import Author
from locallibrary.schemas import AuthorCreate
from locallibrary.services.catalog_forms import AuthorForm
from locallibrary.services.forms import form_to_dict, validate_form
from locallibrary.views import render

logger = logging.getLogger(__name__)

router = APIRouter(tags=["authors"])

AUTHOR_LIST_URL = "/catalog/authors"


def author_form_values(author: Author) -> dict:
    return {
        "first_name": author.first_name,
        "family_name": author.family_name,
        "date_of_birth": author.date_of_birth.isoformat() if author.date_of_birth else "",
        "date_of_death": author.date_of_death.isoformat() if author.date_of_death else "",
    }


async def read_author_form(request: Request):
    values, form, errors = validate_form(AuthorForm, form_to_dict(await request.form()))
    if form is None:
        return values, None, errors
    return values, AuthorCreate(**form.model_dump()), []


@router.get("/authors")
async def author_list(request: Request, db: AsyncSession = Depends(get_db)):
    authors = await author_crud.get_authors(db)
    return render(request, "author_list", {"title": "Author List", "author_list": authors})


@router.get("/author/create")
async def author_create_get(request: Request):
    return render(request, "author_form", {"title": "Create Author", "author": None, "errors": []})


@router.post("/author/create")
async def author_create_post(request: Request, db: AsyncSession = Depends(get_db)):
    values, author_data, errors = await read_author_form(request)
    if errors:
        return render(request, "author_form", {"title": "Create Author", "author": values, "errors": errors})

    author = await author_crud.create_author(db, author_data)
    return RedirectResponse(author.url, status_code=303)


@router.get("/author/{author_id}/delete")
async def author_delete_get(
    author_id: int,
    request: Request,
    session_factory: sessionmaker = Depends(get_sessionmaker),
):
    author, author_books = await gather_reads(
        session_factory,
        partial(author_crud.get_author, author_id=author_id),
        partial(book_crud.get_books_by_author, author_id=author_id),
    )
    if author is None:
        return RedirectResponse(AUTHOR_LIST_URL, status_code=303)

    return render(request, "author_delete", {
        "title": "Delete Author",
        "author": author,
        "author_books": author_books,
    })


@router.post("/author/{author_id}/delete")
async def author_delete_post(
    author_id: int,
    request: Request,
    db: AsyncSession = Depends(get_db),
    session_factory: sessionmaker = Depends(get_sessionmaker),
):
    author, author_books = await gather_reads(
        session_factory,
        partial(author_crud.get_author, author_id=author_id),
        partial(book_crud.get_books_by_author, author_id=author_id),
    )
    if author is None:
        return RedirectResponse(AUTHOR_LIST_URL, status_code=303)

    if author_books:
        logger.warning(f"Refusing to delete author {author_id}: {len(author_books)} books remain")
        return render(request, "author_delete", {
            "title": "Delete Author",
            "author": author,
            "author_books": author_books,
        })

    await author_crud.delete_author(db, author_id)
    return RedirectResponse(AUTHOR_LIST_URL, status_code=303)


@router.get("/author/{author_id}/update")
async def author_update_get(author_id: int, request: Request, db: AsyncSession = Depends(get_db)):
    author = await author_crud.get_author(db, author_id)
    if author is None:
        raise HTTPException(status_code=404, detail="Author not found")

    return render(request, "author_form", {
        "title": "Update Author",
        "author": author_form_values(author),
        "errors": [],
    })


@router.post("/author/{author_id}/update")
async def author_update_post(author_id: int, request: Request, db: AsyncSession = Depends(get_db)):
    values, author_data, errors = await read_author_form(request)
    if errors:
        return render(request, "author_form", {"title": "Update Author", "author": values, "errors": errors})

    author = await author_crud.update_author(db, author_id, author_data)
    if author is None:
        raise HTTPException(status_code=404, detail="Author not found")
    return RedirectResponse(author.url, status_code=303)


@router.get("/author/{author_id}")
async def author_detail(
    author_id: int,
    request: Request,
    session_factory: sessionmaker = Depends(get_sessionmaker),
):
    author, author_books = await gather_reads(
        session_factory,
        partial(author_crud.get_author, author_id=author_id),
        partial(book_crud.get_books_by_author, author_id=author_id),
    )
    if author is None:
        raise HTTPException(status_code=404, detail="Author not found")

    return render(request, "author_detail", {
        "title": "Author Detail",
        "author": author,
        "author_books": author_books,
    })
