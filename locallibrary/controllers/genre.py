# controllers/genre.py
import logging
from functools import partial

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import sessionmaker

from locallibrary.crud import book as book_crud
from locallibrary.crud import genre as genre_crud
from locallibrary.database import get_db, get_sessionmaker, gather_reads
from locallibrary.schemas import GenreCreate
from locallibrary.services.catalog_forms import GenreForm
from locallibrary.services.forms import form_to_dict, validate_form
from locallibrary.views import render

logger = logging.getLogger(__name__)

router = APIRouter(tags=["genres"])

GENRE_LIST_URL = "/catalog/genres"


@router.get("/genres")
async def genre_list(request: Request, db: AsyncSession = Depends(get_db)):
    genres = await genre_crud.get_genres(db)
    return render(request, "genre_list", {"title": "Genre List", "genre_list": genres})


@router.get("/genre/create")
async def genre_create_get(request: Request):
    return render(request, "genre_form", {"title": "Create Genre", "genre": None, "errors": []})


@router.post("/genre/create")
async def genre_create_post(request: Request, db: AsyncSession = Depends(get_db)):
    values, form, errors = validate_form(GenreForm, form_to_dict(await request.form()))
    if errors:
        return render(request, "genre_form", {"title": "Create Genre", "genre": values, "errors": errors})

    # Names are unique ignoring case; send the user to the genre that has it
    existing = await genre_crud.find_genre_by_name(db, form.name)
    if existing is not None:
        return RedirectResponse(existing.url, status_code=303)

    genre = await genre_crud.create_genre(db, GenreCreate(name=form.name))
    return RedirectResponse(genre.url, status_code=303)


@router.get("/genre/{genre_id}/delete")
async def genre_delete_get(
    genre_id: int,
    request: Request,
    session_factory: sessionmaker = Depends(get_sessionmaker),
):
    genre, genre_books = await gather_reads(
        session_factory,
        partial(genre_crud.get_genre, genre_id=genre_id),
        partial(book_crud.get_books_by_genre, genre_id=genre_id),
    )
    if genre is None:
        return RedirectResponse(GENRE_LIST_URL, status_code=303)

    return render(request, "genre_delete", {
        "title": "Delete Genre",
        "genre": genre,
        "genre_books": genre_books,
    })


@router.post("/genre/{genre_id}/delete")
async def genre_delete_post(
    genre_id: int,
    request: Request,
    db: AsyncSession = Depends(get_db),
    session_factory: sessionmaker = Depends(get_sessionmaker),
):
    genre, genre_books = await gather_reads(
        session_factory,
        partial(genre_crud.get_genre, genre_id=genre_id),
        partial(book_crud.get_books_by_genre, genre_id=genre_id),
    )
    if genre is None:
        return RedirectResponse(GENRE_LIST_URL, status_code=303)

    if genre_books:
        logger.warning(f"Refusing to delete genre {genre_id}: {len(genre_books)} books remain")
        return render(request, "genre_delete", {
            "title": "Delete Genre",
            "genre": genre,
            "genre_books": genre_books,
        })

    await genre_crud.delete_genre(db, genre_id)
    return RedirectResponse(GENRE_LIST_URL, status_code=303)


@router.get("/genre/{genre_id}/update")
async def genre_update_get(genre_id: int, request: Request, db: AsyncSession = Depends(get_db)):
    genre = await genre_crud.get_genre(db, genre_id)
    if genre is None:
        raise HTTPException(status_code=404, detail="Genre not found")

    return render(request, "genre_form", {"title": "Update Genre", "genre": {"name": genre.name}, "errors": []})


@router.post("/genre/{genre_id}/update")
async def genre_update_post(genre_id: int, request: Request, db: AsyncSession = Depends(get_db)):
    values, form, errors = validate_form(GenreForm, form_to_dict(await request.form()))
    if errors:
        return render(request, "genre_form", {"title": "Update Genre", "genre": values, "errors": errors})

    existing = await genre_crud.find_genre_by_name(db, form.name)
    if existing is not None and existing.id != genre_id:
        return RedirectResponse(existing.url, status_code=303)

    genre = await genre_crud.update_genre(db, genre_id, GenreCreate(name=form.name))
    if genre is None:
        raise HTTPException(status_code=404, detail="Genre not found")
    return RedirectResponse(genre.url, status_code=303)


@router.get("/genre/{genre_id}")
async def genre_detail(
    genre_id: int,
    request: Request,
    session_factory: sessionmaker = Depends(get_sessionmaker),
):
    genre, genre_books = await gather_reads(
        session_factory,
        partial(genre_crud.get_genre, genre_id=genre_id),
        partial(book_crud.get_books_by_genre, genre_id=genre_id),
    )
    if genre is None:
        raise HTTPException(status_code=404, detail="Genre not found")

    return render(request, "genre_detail", {
        "title": "Genre Detail",
        "genre": genre,
        "genre_books": genre_books,
    })
