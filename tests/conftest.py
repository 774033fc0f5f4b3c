"""Shared fixtures: one app and SQLite file per test."""
import pytest
from fastapi.testclient import TestClient

from locallibrary.config import Settings
from locallibrary.main import create_app


def created_id(response) -> int:
    """Id of the record a successful create redirected to."""
    assert response.status_code == 303, response.text
    return int(response.headers["location"].rstrip("/").rsplit("/", 1)[-1])


@pytest.fixture
def app(tmp_path):
    return create_app(Settings(DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'library.db'}"))


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def run_query(app, client):
    """Run ``read(db)`` against the app's store on the app's event loop."""
    def run(read):
        async def go():
            async with app.state.sessionmaker() as db:
                return await read(db)
        return client.portal.call(go)
    return run


@pytest.fixture
def make_author(client):
    def make(first_name="Frank", family_name="Herbert", **extra):
        data = {"first_name": first_name, "family_name": family_name, **extra}
        return created_id(client.post("/catalog/author/create", data=data, follow_redirects=False))
    return make


@pytest.fixture
def make_genre(client):
    def make(name="Science Fiction"):
        return created_id(client.post("/catalog/genre/create", data={"name": name}, follow_redirects=False))
    return make


@pytest.fixture
def make_book(client, make_author):
    def make(title="Dune", author=None, summary="Desert planet", isbn="9780441013593", genre=()):
        data = {
            "title": title,
            "author": str(author if author is not None else make_author()),
            "summary": summary,
            "isbn": isbn,
            "genre": [str(genre_id) for genre_id in genre],
        }
        return created_id(client.post("/catalog/book/create", data=data, follow_redirects=False))
    return make


@pytest.fixture
def make_instance(client):
    def make(book, imprint="Chilton Books, 1965", status="Available", due_back=""):
        data = {"book": str(book), "imprint": imprint, "status": status, "due_back": due_back}
        return created_id(client.post("/catalog/bookinstance/create", data=data, follow_redirects=False))
    return make
