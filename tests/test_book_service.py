import asyncio

import asyncpg
import pytest

from bookstore.config import Settings
from bookstore.db import connection
from bookstore.errors import BookConflictError, BookValidationError, StoreUnavailableError
from bookstore.services.book_service import BookRepository

from tests.conftest import POWER_UP


class FakeConnection:
    def __init__(self, row=None, rows=None, error=None):
        self.row = row
        self.rows = rows or []
        self.error = error
        self.calls = []

    async def fetch(self, query, *args):
        self.calls.append((query, args))
        return self.rows

    async def fetchrow(self, query, *args):
        self.calls.append((query, args))
        if self.error is not None:
            raise self.error
        return self.row


class FakeAcquire:
    def __init__(self, conn):
        self.conn = conn

    async def __aenter__(self):
        return self.conn

    async def __aexit__(self, *exc_info):
        return False


class FakePool:
    def __init__(self, conn):
        self.conn = conn

    def acquire(self):
        return FakeAcquire(self.conn)


class UnreachablePool:
    def acquire(self):
        raise ConnectionRefusedError("connection refused")


def run(coro):
    return asyncio.run(coro)


def test_list_all_selects_every_column():
    conn = FakeConnection(rows=[POWER_UP])
    books = run(BookRepository(FakePool(conn)).list_all())
    assert books == [POWER_UP]
    query, args = conn.calls[0]
    assert "isbn, amazon_url, author, language, pages, publisher, title, year" in query
    assert args == ()


def test_get_by_isbn_missing_returns_none():
    conn = FakeConnection(row=None)
    assert run(BookRepository(FakePool(conn)).get_by_isbn("88888888")) is None
    assert conn.calls[0][1] == ("88888888",)


def test_create_passes_fields_in_column_order():
    conn = FakeConnection(row=POWER_UP)
    row = run(BookRepository(FakePool(conn)).create(dict(POWER_UP)))
    assert row == POWER_UP
    _, args = conn.calls[0]
    assert args == (
        "0691161518",
        "http://a.co/eobPtX2",
        "Matthew Lane",
        "english",
        264,
        "Princeton University Press",
        POWER_UP["title"],
        2017,
    )


def test_create_duplicate_raises_conflict():
    conn = FakeConnection(error=asyncpg.exceptions.UniqueViolationError("duplicate key"))
    with pytest.raises(BookConflictError) as excinfo:
        run(BookRepository(FakePool(conn)).create(dict(POWER_UP)))
    assert excinfo.value.isbn == POWER_UP["isbn"]
    assert excinfo.value.status_code == 409


def test_update_uses_route_isbn():
    conn = FakeConnection(row={**POWER_UP, "pages": 300})
    fields = {key: value for key, value in POWER_UP.items() if key != "isbn"}
    run(BookRepository(FakePool(conn)).update("0691161518", fields))
    query, args = conn.calls[0]
    assert "WHERE isbn = $8" in query
    assert args[-1] == "0691161518"
    assert "0691161518" not in args[:-1]


def test_update_missing_returns_none():
    conn = FakeConnection(row=None)
    fields = {key: value for key, value in POWER_UP.items() if key != "isbn"}
    assert run(BookRepository(FakePool(conn)).update("99999999", fields)) is None


def test_delete_reports_whether_a_row_was_removed():
    assert run(BookRepository(FakePool(FakeConnection(row={"isbn": "1"}))).delete("1")) is True
    assert run(BookRepository(FakePool(FakeConnection(row=None))).delete("2")) is False


def test_unreachable_store_raises_store_unavailable():
    with pytest.raises(StoreUnavailableError) as excinfo:
        run(BookRepository(UnreachablePool()).list_all())
    assert excinfo.value.status_code == 500


def test_store_rejected_values_raise_validation_error():
    conn = FakeConnection(
        error=asyncpg.exceptions.DataError(
            "invalid input for query argument $5: 1099511627776 (value out of int32 range)"
        )
    )
    with pytest.raises(BookValidationError) as excinfo:
        run(BookRepository(FakePool(conn)).create(dict(POWER_UP)))
    assert excinfo.value.status_code == 400
    assert "out of int32 range" in excinfo.value.errors[0]


def test_create_pool_closes_pool_when_schema_setup_fails(monkeypatch):
    pool = UnreachablePool()
    pool.closed = False

    async def close():
        pool.closed = True

    async def fake_create_pool(**kwargs):
        return pool

    pool.close = close
    monkeypatch.setattr(connection.asyncpg, "create_pool", fake_create_pool)

    with pytest.raises(ConnectionRefusedError):
        run(connection.create_pool(Settings()))
    assert pool.closed
