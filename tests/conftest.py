import pytest
from fastapi.testclient import TestClient

from bookstore.errors import BookConflictError
from bookstore.main import create_app
from bookstore.utils.dependencies import get_book_repository

POWER_UP = {
    "isbn": "0691161518",
    "amazon_url": "http://a.co/eobPtX2",
    "author": "Matthew Lane",
    "language": "english",
    "pages": 264,
    "publisher": "Princeton University Press",
    "title": "Power-up: Unlocking the Hidden Mathematics in Video Games",
    "year": 2017,
}


class InMemoryBookRepository:
    """Dict-backed stand-in with the same contract as BookRepository."""

    def __init__(self):
        self.rows = {}

    async def list_all(self):
        return sorted(self.rows.values(), key=lambda row: row["title"])

    async def get_by_isbn(self, isbn):
        return self.rows.get(isbn)

    async def create(self, book):
        if book["isbn"] in self.rows:
            raise BookConflictError(book["isbn"])
        self.rows[book["isbn"]] = dict(book)
        return self.rows[book["isbn"]]

    async def update(self, isbn, book):
        if isbn not in self.rows:
            return None
        self.rows[isbn] = {**book, "isbn": isbn}
        return self.rows[isbn]

    async def delete(self, isbn):
        return self.rows.pop(isbn, None) is not None


@pytest.fixture
def repository():
    repo = InMemoryBookRepository()
    repo.rows[POWER_UP["isbn"]] = dict(POWER_UP)
    return repo


@pytest.fixture
def client(repository):
    app = create_app()
    app.dependency_overrides[get_book_repository] = lambda: repository
    # Not entered as a context manager, so the lifespan never opens a real pool
    return TestClient(app)


@pytest.fixture
def new_book():
    return {
        "isbn": "12345678",
        "amazon_url": "https://google.com",
        "author": "author",
        "language": "english",
        "pages": 251,
        "publisher": "publishing inc",
        "title": "A day in the life",
        "year": 1993,
    }


@pytest.fixture
def updated_fields():
    return {
        "isbn": "12345678",
        "amazon_url": "https://google.com/new-book",
        "author": "new-author",
        "language": "french",
        "pages": 300,
        "publisher": "new publishing inc",
        "title": "A NEW day in the life",
        "year": 2020,
    }
