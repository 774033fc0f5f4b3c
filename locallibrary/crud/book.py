# crud/book.py
import logging
from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from locallibrary.database import is_storable_id
from locallibrary.models import Book, Genre, book_genre
from locallibrary.schemas import BookCreate

logger = logging.getLogger(__name__)


async def get_books(db: AsyncSession) -> List[Book]:
    result = await db.execute(select(Book).order_by(Book.title))
    return list(result.scalars().all())


async def get_book(db: AsyncSession, book_id: int) -> Optional[Book]:
    if not is_storable_id(book_id):
        return None
    result = await db.execute(select(Book).where(Book.id == book_id))
    return result.scalar_one_or_none()


async def get_books_by_author(db: AsyncSession, author_id: int) -> List[Book]:
    if not is_storable_id(author_id):
        return []
    result = await db.execute(
        select(Book).where(Book.author_id == author_id).order_by(Book.title)
    )
    return list(result.scalars().all())


async def get_books_by_genre(db: AsyncSession, genre_id: int) -> List[Book]:
    if not is_storable_id(genre_id):
        return []
    result = await db.execute(
        select(Book)
        .join(book_genre, book_genre.c.book_id == Book.id)
        .where(book_genre.c.genre_id == genre_id)
        .order_by(Book.title)
    )
    return list(result.scalars().all())


async def count_books(db: AsyncSession) -> int:
    result = await db.execute(select(func.count(Book.id)))
    return result.scalar() or 0


async def _load_genres(db: AsyncSession, genre_ids: List[int]) -> List[Genre]:
    """Genres for the given ids; ids that do not resolve are dropped."""
    genre_ids = [genre_id for genre_id in genre_ids if is_storable_id(genre_id)]
    if not genre_ids:
        return []
    result = await db.execute(select(Genre).where(Genre.id.in_(genre_ids)))
    return list(result.scalars().all())


async def create_book(db: AsyncSession, book_data: BookCreate) -> Book:
    data = book_data.model_dump(exclude={"genre_ids"})
    book = Book(**data, genres=await _load_genres(db, book_data.genre_ids))
    db.add(book)
    await db.commit()
    await db.refresh(book)
    logger.info(f"Created book {book.id}: {book.title}")
    return book


async def update_book(db: AsyncSession, book_id: int, book_data: BookCreate) -> Optional[Book]:
    book = await get_book(db, book_id)
    if not book:
        return None

    for field, value in book_data.model_dump(exclude={"genre_ids"}).items():
        setattr(book, field, value)
    book.genres = await _load_genres(db, book_data.genre_ids)

    await db.commit()
    await db.refresh(book)
    logger.info(f"Updated book {book.id}: {book.title}")
    return book


async def delete_book(db: AsyncSession, book_id: int) -> bool:
    book = await get_book(db, book_id)
    if not book:
        return False

    await db.delete(book)
    await db.commit()
    logger.info(f"Deleted book {book_id}")
    return True
