from asyncio import gather
from typing import Any, Awaitable, Callable

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, AsyncEngine
from sqlalchemy.orm import declarative_base, sessionmaker

from locallibrary.config import Settings

Base = declarative_base()

Read = Callable[[AsyncSession], Awaitable[Any]]

# SQLite stores INTEGER as a signed 64-bit value and row ids start at 1
MAX_ID = 2**63 - 1


def is_storable_id(value: int) -> bool:
    """Whether ``value`` can be a row id; larger ints overflow the SQLite driver."""
    return 1 <= value <= MAX_ID


def build_engine(settings: Settings) -> AsyncEngine:
    connect_args = {}
    if settings.DATABASE_URL.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_async_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO, connect_args=connect_args)


def build_sessionmaker(engine: AsyncEngine) -> sessionmaker:
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db(engine: AsyncEngine):
    # Importing the models registers their tables on Base.metadata
    import locallibrary.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


def get_sessionmaker(request: Request) -> sessionmaker:
    return request.app.state.sessionmaker


async def get_db(session_factory: sessionmaker = Depends(get_sessionmaker)):
    async with session_factory() as session:
        yield session


async def gather_reads(session_factory: sessionmaker, *reads: Read) -> list:
    """Run independent reads concurrently and return their results in order.

    Each read gets its own session, since one AsyncSession cannot run
    statements concurrently. The first failing read fails the whole group.
    """
    async def run(read: Read):
        async with session_factory() as session:
            return await read(session)

    return list(await gather(*(run(read) for read in reads)))
