# crud/bookinstance.py
import logging
from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from locallibrary.database import is_storable_id
from locallibrary.models import BookInstance
from locallibrary.schemas import BookInstanceCreate

logger = logging.getLogger(__name__)


async def get_book_instances(db: AsyncSession) -> List[BookInstance]:
    result = await db.execute(select(BookInstance).order_by(BookInstance.id))
    return list(result.scalars().all())


async def get_book_instance(db: AsyncSession, instance_id: int) -> Optional[BookInstance]:
    if not is_storable_id(instance_id):
        return None
    result = await db.execute(select(BookInstance).where(BookInstance.id == instance_id))
    return result.scalar_one_or_none()


async def get_instances_for_book(db: AsyncSession, book_id: int) -> List[BookInstance]:
    if not is_storable_id(book_id):
        return []
    result = await db.execute(
        select(BookInstance).where(BookInstance.book_id == book_id).order_by(BookInstance.id)
    )
    return list(result.scalars().all())


async def count_book_instances(db: AsyncSession, status: Optional[str] = None) -> int:
    query = select(func.count(BookInstance.id))
    if status is not None:
        query = query.where(BookInstance.status == status)
    result = await db.execute(query)
    return result.scalar() or 0


async def create_book_instance(db: AsyncSession, instance_data: BookInstanceCreate) -> BookInstance:
    instance = BookInstance(**instance_data.model_dump())
    db.add(instance)
    await db.commit()
    await db.refresh(instance)
    logger.info(f"Created book instance {instance.id} of book {instance.book_id}")
    return instance


async def update_book_instance(
    db: AsyncSession,
    instance_id: int,
    instance_data: BookInstanceCreate
) -> Optional[BookInstance]:
    instance = await get_book_instance(db, instance_id)
    if not instance:
        return None

    for field, value in instance_data.model_dump().items():
        setattr(instance, field, value)

    await db.commit()
    await db.refresh(instance)
    logger.info(f"Updated book instance {instance.id}")
    return instance


async def delete_book_instance(db: AsyncSession, instance_id: int) -> bool:
    instance = await get_book_instance(db, instance_id)
    if not instance:
        return False

    await db.delete(instance)
    await db.commit()
    logger.info(f"Deleted book instance {instance_id}")
    return True
