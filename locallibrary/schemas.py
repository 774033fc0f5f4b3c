from datetime import date
from typing import List, Optional

from pydantic import BaseModel


class AuthorBase(BaseModel):
    first_name: str
    family_name: str
    date_of_birth: Optional[date] = None
    date_of_death: Optional[date] = None


class AuthorCreate(AuthorBase):
    pass


class GenreBase(BaseModel):
    name: str


class GenreCreate(GenreBase):
    pass


class BookBase(BaseModel):
    title: str
    author_id: int
    summary: str
    isbn: str
    genre_ids: List[int] = []


class BookCreate(BookBase):
    pass


class BookInstanceBase(BaseModel):
    book_id: int
    imprint: str
    status: str = "Maintenance"
    due_back: Optional[date] = None


class BookInstanceCreate(BookInstanceBase):
    pass
