# populatedb.py – one-time script to seed a fresh database with sample records
"""
Usage:
    python -m locallibrary.populatedb
    python -m locallibrary.populatedb --database-url sqlite+aiosqlite:///./library.db
"""
import argparse
import asyncio
import logging
from datetime import date

from locallibrary.config import Settings
from locallibrary.crud.author import create_author
from locallibrary.crud.book import create_book
from locallibrary.crud.bookinstance import create_book_instance
from locallibrary.crud.genre import create_genre
from locallibrary.database import build_engine, build_sessionmaker, init_db
from locallibrary.schemas import AuthorCreate, BookCreate, BookInstanceCreate, GenreCreate
from locallibrary.services.forms import clean

logger = logging.getLogger(__name__)

AUTHORS = [
    ("Patrick", "Rothfuss", date(1973, 6, 6), None),
    ("Ben", "Bova", date(1932, 11, 8), None),
    ("Isaac", "Asimov", date(1920, 1, 2), date(1992, 4, 6)),
    ("Bob", "Billings", None, None),
    ("Jim", "Jones", date(1971, 12, 16), None),
]

GENRES = ["Fantasy", "Science Fiction", "French Poetry"]

# (title, summary, isbn, author index, genre indexes)
BOOKS = [
    ("The Name of the Wind (The Kingkiller Chronicle, #1)",
     "I have stolen princesses back from sleeping barrow kings. I burned down the town of Trebon.",
     "9781473211896", 0, [0]),
    ("The Wise Man's Fear (The Kingkiller Chronicle, #2)",
     "Picking up the tale of Kvothe Kingkiller once again, we follow him into exile.",
     "9788401352836", 0, [0]),
    ("The Slow Regard of Silent Things (Kingkiller Chronicle)",
     "Deep below the University, there is a dark place. Few people know of it.",
     "9780756411336", 0, [0]),
    ("Apes and Angels",
     "Humankind headed out to the stars not for conquest, nor exploration, nor even for curiosity.",
     "9780765379528", 1, [1]),
    ("Death Wave",
     "In Ben Bova's previous novel New Earth, Jordan Kell led the first human mission beyond the solar system.",
     "9780765379504", 1, [1]),
    ("Test Book 1", "Summary of test book 1", "ISBN111111", 4, [0, 1]),
    ("Test Book 2", "Summary of test book 2", "ISBN222222", 4, []),
]

# (book index, imprint, status, due back)
INSTANCES = [
    (0, "London Gollancz, 2014.", "Available", None),
    (1, " Gollancz, 2011.", "Loaned", None),
    (2, " Gollancz, 2015.", "Available", None),
    (3, "New York Tom Doherty Associates, 2016.", "Available", None),
    (3, "New York Tom Doherty Associates, 2016.", "Available", None),
    (3, "New York Tom Doherty Associates, 2016.", "Available", None),
    (4, "New York, NY Tom Doherty Associates, LLC, 2015.", "Available", None),
    (4, "New York, NY Tom Doherty Associates, LLC, 2015.", "Maintenance", None),
    (4, "New York, NY Tom Doherty Associates, LLC, 2015.", "Loaned", None),
    (0, "Imprint XXX2", "Maintenance", None),
    (1, "Imprint XXX3", "Reserved", date(2030, 1, 1)),
]


async def populate(settings: Settings):
    engine = build_engine(settings)
    await init_db(engine)
    session_factory = build_sessionmaker(engine)

    async with session_factory() as db:
        authors = [
            await create_author(db, AuthorCreate(
                first_name=clean(first_name),
                family_name=clean(family_name),
                date_of_birth=born,
                date_of_death=died,
            ))
            for first_name, family_name, born, died in AUTHORS
        ]
        genres = [await create_genre(db, GenreCreate(name=clean(name))) for name in GENRES]
        books = [
            await create_book(db, BookCreate(
                title=clean(title),
                summary=clean(summary),
                isbn=clean(isbn),
                author_id=authors[author_index].id,
                genre_ids=[genres[i].id for i in genre_indexes],
            ))
            for title, summary, isbn, author_index, genre_indexes in BOOKS
        ]
        for book_index, imprint, status, due_back in INSTANCES:
            await create_book_instance(db, BookInstanceCreate(
                book_id=books[book_index].id,
                imprint=clean(imprint),
                status=status,
                due_back=due_back,
            ))

    await engine.dispose()
    logger.info(
        f"Added {len(AUTHORS)} authors, {len(GENRES)} genres, "
        f"{len(BOOKS)} books and {len(INSTANCES)} copies"
    )


def main():
    parser = argparse.ArgumentParser(description="Seed the Local Library database with sample data")
    parser.add_argument("--database-url", default=None, help="SQLAlchemy async database URL")
    args = parser.parse_args()

    settings = Settings(DATABASE_URL=args.database_url) if args.database_url else Settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    asyncio.run(populate(settings))


if __name__ == "__main__":
    main()
