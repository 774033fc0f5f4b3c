# controllers/catalog.py
from functools import partial

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import sessionmaker

from locallibrary.crud import author as author_crud
from locallibrary.crud import book as book_crud
from locallibrary.crud import bookinstance as instance_crud
from locallibrary.crud import genre as genre_crud
from locallibrary.database import get_sessionmaker, gather_reads
from locallibrary.views import render

router = APIRouter(tags=["catalog"])


@router.get("/")
async def index(request: Request, session_factory: sessionmaker = Depends(get_sessionmaker)):
    # All five counts run in parallel; any failure fails the page
    (
        book_count,
        book_instance_count,
        book_instance_available_count,
        author_count,
        genre_count,
    ) = await gather_reads(
        session_factory,
        book_crud.count_books,
        instance_crud.count_book_instances,
        partial(instance_crud.count_book_instances, status="Available"),
        author_crud.count_authors,
        genre_crud.count_genres,
    )

    return render(request, "index", {
        "title": "Local Library Home",
        "book_count": book_count,
        "book_instance_count": book_instance_count,
        "book_instance_available_count": book_instance_available_count,
        "author_count": author_count,
        "genre_count": genre_count,
    })
