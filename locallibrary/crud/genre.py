# crud/genre.py
import logging
from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from locallibrary.database import is_storable_id
from locallibrary.models import Genre
from locallibrary.schemas import GenreCreate

logger = logging.getLogger(__name__)


async def get_genres(db: AsyncSession) -> List[Genre]:
    result = await db.execute(select(Genre).order_by(Genre.name))
    return list(result.scalars().all())


async def get_genre(db: AsyncSession, genre_id: int) -> Optional[Genre]:
    if not is_storable_id(genre_id):
        return None
    result = await db.execute(select(Genre).where(Genre.id == genre_id))
    return result.scalar_one_or_none()


async def find_genre_by_name(db: AsyncSession, name: str) -> Optional[Genre]:
    """Case-insensitive lookup, so 'Fantasy' and 'fantasy' are the same genre."""
    result = await db.execute(
        select(Genre).where(func.lower(Genre.name) == name.lower()).order_by(Genre.id)
    )
    return result.scalars().first()


async def count_genres(db: AsyncSession) -> int:
    result = await db.execute(select(func.count(Genre.id)))
    return result.scalar() or 0


async def create_genre(db: AsyncSession, genre_data: GenreCreate) -> Genre:
    genre = Genre(**genre_data.model_dump())
    db.add(genre)
    await db.commit()
    await db.refresh(genre)
    logger.info(f"Created genre {genre.id}: {genre.name}")
    return genre


async def update_genre(db: AsyncSession, genre_id: int, genre_data: GenreCreate) -> Optional[Genre]:
    genre = await get_genre(db, genre_id)
    if not genre:
        return None

    genre.name = genre_data.name
    await db.commit()
    await db.refresh(genre)
    logger.info(f"Updated genre {genre.id}: {genre.name}")
    return genre


async def delete_genre(db: AsyncSession, genre_id: int) -> bool:
    genre = await get_genre(db, genre_id)
    if not genre:
        return False

    await db.delete(genre)
    await db.commit()
    logger.info(f"Deleted genre {genre_id}")
    return True
