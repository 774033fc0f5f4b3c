# models.py
from datetime import date
from typing import Optional

from sqlalchemy import Column, Integer, String, Text, Date, ForeignKey, Table
from sqlalchemy.orm import relationship

from locallibrary.database import Base

BOOK_INSTANCE_STATUSES = ["Available", "Maintenance", "Loaned", "Reserved"]


def detail_url(kind: str, record_id) -> str:
    return f"/catalog/{kind}/{record_id}"


def format_date(value: Optional[date]) -> str:
    """Medium UK-style date, e.g. '12 Jan 1920'. Empty for a missing date."""
    if value is None:
        return ""
    return f"{value.day} {value:%b %Y}"


def author_name(first_name: Optional[str], family_name: Optional[str]) -> str:
    # An author missing either part has no display name
    if first_name and family_name:
        return f"{family_name}, {first_name}"
    return ""


def author_lifespan(date_of_birth: Optional[date], date_of_death: Optional[date]) -> str:
    lifespan = ""
    if date_of_birth:
        lifespan += "Born: " + format_date(date_of_birth)
    if date_of_death:
        lifespan += " - Died: " + format_date(date_of_death)
    return lifespan


book_genre = Table(
    "book_genre",
    Base.metadata,
    Column("book_id", Integer, ForeignKey("books.id"), primary_key=True),
    Column("genre_id", Integer, ForeignKey("genres.id"), primary_key=True),
)


class Author(Base):
    __tablename__ = "authors"
    id = Column(Integer, primary_key=True)
    first_name = Column(String(100), nullable=False)
    family_name = Column(String(100), nullable=False, index=True)
    date_of_birth = Column(Date, nullable=True)
    date_of_death = Column(Date, nullable=True)

    @property
    def name(self) -> str:
        return author_name(self.first_name, self.family_name)

    @property
    def lifespan(self) -> str:
        return author_lifespan(self.date_of_birth, self.date_of_death)

    @property
    def url(self) -> str:
        return detail_url("author", self.id)

    def __repr__(self):
        return f"<Author(name='{self.name}')>"


class Genre(Base):
    __tablename__ = "genres"
    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False, index=True)

    @property
    def url(self) -> str:
        return detail_url("genre", self.id)

    def __repr__(self):
        return f"<Genre(name='{self.name}')>"


class Book(Base):
    __tablename__ = "books"
    id = Column(Integer, primary_key=True)
    title = Column(String, nullable=False, index=True)
    author_id = Column(Integer, ForeignKey("authors.id"), nullable=False, index=True)
    summary = Column(Text, nullable=False)
    isbn = Column(String, nullable=False)

    # Loaded eagerly: records outlive the session that read them
    author = relationship("Author", lazy="selectin")
    genres = relationship("Genre", secondary=book_genre, lazy="selectin", order_by="Genre.name")

    @property
    def url(self) -> str:
        return detail_url("book", self.id)

    def __repr__(self):
        return f"<Book(title='{self.title}')>"


class BookInstance(Base):
    __tablename__ = "book_instances"
    id = Column(Integer, primary_key=True)
    book_id = Column(Integer, ForeignKey("books.id"), nullable=False, index=True)
    imprint = Column(String, nullable=False)
    status = Column(String(20), nullable=False, default="Maintenance", index=True)
    due_back = Column(Date, nullable=True)

    book = relationship("Book", lazy="selectin")

    @property
    def due_back_formatted(self) -> str:
        return format_date(self.due_back)

    @property
    def url(self) -> str:
        return detail_url("bookinstance", self.id)

    def __repr__(self):
        return f"<BookInstance(imprint='{self.imprint}', status='{self.status}')>"
