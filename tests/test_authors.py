"""Tests for the author pages."""
from datetime import date
from functools import partial

from locallibrary.crud.author import count_authors, get_author


def test_create_author_with_dates(client, run_query):
    """Test that a valid author is stored with parsed dates."""
    response = client.post("/catalog/author/create", data={
        "first_name": " Isaac ",
        "family_name": "Asimov",
        "date_of_birth": "1920-01-02",
        "date_of_death": "1992-04-06",
    }, follow_redirects=False)

    assert response.status_code == 303
    author_id = int(response.headers["location"].rsplit("/", 1)[-1])
    assert response.headers["location"] == f"/catalog/author/{author_id}"

    author = run_query(partial(get_author, author_id=author_id))
    assert author.first_name == "Isaac"
    assert author.date_of_birth == date(1920, 1, 2)
    assert author.date_of_death == date(1992, 4, 6)

    page = client.get(f"/catalog/author/{author_id}")
    assert "Asimov, Isaac" in page.text
    assert "Born: 2 Jan 1920 - Died: 6 Apr 1992" in page.text


def test_create_author_without_dates(client, make_author, run_query):
    """Test that both dates are optional."""
    author_id = make_author(date_of_birth="", date_of_death="")

    author = run_query(partial(get_author, author_id=author_id))
    assert author.date_of_birth is None
    assert author.date_of_death is None


def test_create_author_missing_first_name(client, run_query):
    """Test that a missing name gives one message and stores nothing."""
    response = client.post("/catalog/author/create", data={"first_name": "", "family_name": "Asimov"})

    assert response.status_code == 200
    assert response.text.count("First name must be specified.") == 1
    assert "First name has non-alphanumeric characters." not in response.text
    assert 'value="Asimov"' in response.text
    assert run_query(count_authors) == 0


def test_create_author_rejects_non_alphanumeric_name(client, run_query):
    """Test that names must be alphanumeric."""
    response = client.post("/catalog/author/create", data={"first_name": "Ann-Marie", "family_name": "Smith"})

    assert response.status_code == 200
    assert "First name has non-alphanumeric characters." in response.text
    assert run_query(count_authors) == 0


def test_create_author_rejects_bad_dates(client, run_query):
    """Test that dates must be ISO 8601."""
    response = client.post("/catalog/author/create", data={
        "first_name": "Isaac",
        "family_name": "Asimov",
        "date_of_birth": "second of January",
        "date_of_death": "1992-13-45",
    })

    assert response.status_code == 200
    assert "Invalid date of birth" in response.text
    assert "Invalid date of death" in response.text
    assert run_query(count_authors) == 0


def test_author_list_sorted_by_family_name(client, make_author):
    """Test that authors are listed by family name."""
    make_author("Ben", "Bova")
    make_author("Isaac", "Asimov")

    response = client.get("/catalog/authors")

    assert response.text.index("Asimov, Isaac") < response.text.index("Bova, Ben")


def test_author_detail_not_found(client):
    """Test that an unknown author id is a 404."""
    response = client.get("/catalog/author/999")

    assert response.status_code == 404
    assert "Author not found" in response.text


def test_author_detail_lists_books(client, make_author, make_book):
    """Test that an author's page lists their books."""
    author_id = make_author()
    make_book(title="Dune", author=author_id)
    make_book(title="Children of Dune", author=make_author("Brian", "Herbert"))

    response = client.get(f"/catalog/author/{author_id}")

    assert "Dune" in response.text
    assert "Children of Dune" not in response.text


def test_update_author_keeps_identifier(client, make_author, run_query):
    """Test that an author is updated in place."""
    author_id = make_author()

    form = client.get(f"/catalog/author/{author_id}/update")
    assert 'value="Frank"' in form.text

    response = client.post(f"/catalog/author/{author_id}/update", data={
        "first_name": "Franklin",
        "family_name": "Herbert",
        "date_of_birth": "1920-10-08",
    }, follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == f"/catalog/author/{author_id}"
    author = run_query(partial(get_author, author_id=author_id))
    assert author.first_name == "Franklin"
    assert author.date_of_birth == date(1920, 10, 8)
    assert run_query(count_authors) == 1


def test_update_author_not_found(client):
    """Test that updating an unknown author is a 404."""
    assert client.get("/catalog/author/999/update").status_code == 404


def test_delete_author_blocked_by_books(client, make_author, make_book, run_query):
    """Test that an author with books is not deleted."""
    author_id = make_author()
    make_book(author=author_id)

    response = client.post(f"/catalog/author/{author_id}/delete", follow_redirects=False)

    assert response.status_code == 200
    assert "Delete the following books before attempting to delete this author." in response.text
    assert run_query(partial(get_author, author_id=author_id)) is not None


def test_delete_author_without_books(client, make_author, run_query):
    """Test that an author with no books is removed."""
    author_id = make_author()

    confirm = client.get(f"/catalog/author/{author_id}/delete")
    assert "Do you really want to delete this Author?" in confirm.text

    response = client.post(f"/catalog/author/{author_id}/delete", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/catalog/authors"
    assert run_query(partial(get_author, author_id=author_id)) is None


def test_delete_unknown_author_redirects(client):
    """Test that deleting an unknown author sends the user back to the list."""
    response = client.get("/catalog/author/999/delete", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/catalog/authors"
