# crud/author.py
import logging
from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from locallibrary.database import is_storable_id
from locallibrary.models import Author
from locallibrary.schemas import AuthorCreate

logger = logging.getLogger(__name__)


async def get_authors(db: AsyncSession) -> List[Author]:
    result = await db.execute(select(Author).order_by(Author.family_name, Author.first_name))
    return list(result.scalars().all())


async def get_author(db: AsyncSession, author_id: int) -> Optional[Author]:
    if not is_storable_id(author_id):
        return None
    result = await db.execute(select(Author).where(Author.id == author_id))
    return result.scalar_one_or_none()


async def count_authors(db: AsyncSession) -> int:
    result = await db.execute(select(func.count(Author.id)))
    return result.scalar() or 0


async def create_author(db: AsyncSession, author_data: AuthorCreate) -> Author:
    author = Author(**author_data.model_dump())
    db.add(author)
    await db.commit()
    await db.refresh(author)
    logger.info(f"Created author {author.id}: {author.name}")
    return author


async def update_author(db: AsyncSession, author_id: int, author_data: AuthorCreate) -> Optional[Author]:
    author = await get_author(db, author_id)
    if not author:
        return None

    for field, value in author_data.model_dump().items():
        setattr(author, field, value)

    await db.commit()
    await db.refresh(author)
    logger.info(f"Updated author {author.id}: {author.name}")
    return author


async def delete_author(db: AsyncSession, author_id: int) -> bool:
    author = await get_author(db, author_id)
    if not author:
        return False

    await db.delete(author)
    await db.commit()
    logger.info(f"Deleted author {author_id}")
    return True
