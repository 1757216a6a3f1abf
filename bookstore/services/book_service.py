"""Book repository over the ``books`` table."""
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

import asyncpg

from bookstore.errors import BookConflictError, BookValidationError, StoreUnavailableError
from bookstore.utils.logger import get_logger

logger = get_logger(__name__)

BOOK_COLUMNS = "isbn, amazon_url, author, language, pages, publisher, title, year"


def _is_rejected_input(exc: Exception) -> bool:
    """True when the driver or server refused the values themselves (SQLSTATE class 22)."""
    if isinstance(exc, (asyncpg.exceptions.DataError, ValueError)):
        return True
    return (getattr(exc, "sqlstate", None) or "").startswith("22")


class BookRepository:
    """Runs exactly one statement per operation against the pool it was given.

    Missing rows come back as ``None``/``False``; a duplicate isbn raises
    ``BookConflictError``, values the store refuses raise
    ``BookValidationError`` and any other driver or connection failure raises
    ``StoreUnavailableError``.
    """

    def __init__(self, pool: asyncpg.pool.Pool):
        self.pool = pool

    @asynccontextmanager
    async def _connection(self) -> AsyncIterator[asyncpg.Connection]:
        try:
            async with self.pool.acquire() as conn:
                yield conn
        except (asyncpg.exceptions.PostgresError, asyncpg.exceptions.InterfaceError, OSError) as exc:
            if _is_rejected_input(exc):
                logger.info("Book store rejected payload: %s", exc)
                raise BookValidationError([f"Book store rejected the payload: {exc}"]) from exc
            logger.error("Book store unavailable: %s", exc)
            raise StoreUnavailableError(f"Book store unavailable: {exc}") from exc

    async def list_all(self) -> List[asyncpg.Record]:
        async with self._connection() as conn:
            return await conn.fetch(f"SELECT {BOOK_COLUMNS} FROM books ORDER BY title")

    async def get_by_isbn(self, isbn: str) -> Optional[asyncpg.Record]:
        async with self._connection() as conn:
            return await conn.fetchrow(
                f"SELECT {BOOK_COLUMNS} FROM books WHERE isbn = $1", isbn
            )

    async def create(self, book: dict) -> asyncpg.Record:
        """Insert a new book and return the stored row."""
        async with self._connection() as conn:
            try:
                row = await conn.fetchrow(
                    f"""
                    INSERT INTO books ({BOOK_COLUMNS})
                    VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
                    RETURNING {BOOK_COLUMNS}
                    """,
                    book["isbn"],
                    book["amazon_url"],
                    book["author"],
                    book["language"],
                    book["pages"],
                    book["publisher"],
                    book["title"],
                    book["year"],
                )
            except asyncpg.exceptions.UniqueViolationError:
                logger.info("Rejected duplicate isbn %s", book["isbn"])
                raise BookConflictError(book["isbn"])
        logger.info("Created book %s", row["isbn"])
        return row

    async def update(self, isbn: str, book: dict) -> Optional[asyncpg.Record]:
        """Overwrite every column but the isbn. Returns None when no book matches."""
        async with self._connection() as conn:
            row = await conn.fetchrow(
                f"""
                UPDATE books
                SET amazon_url = $1,
                    author = $2,
                    language = $3,
                    pages = $4,
                    publisher = $5,
                    title = $6,
                    year = $7
                WHERE isbn = $8
                RETURNING {BOOK_COLUMNS}
                """,
                book["amazon_url"],
                book["author"],
                book["language"],
                book["pages"],
                book["publisher"],
                book["title"],
                book["year"],
                isbn,
            )
        if row is not None:
            logger.info("Updated book %s", isbn)
        return row

    async def delete(self, isbn: str) -> bool:
        async with self._connection() as conn:
            row = await conn.fetchrow(
                "DELETE FROM books WHERE isbn = $1 RETURNING isbn", isbn
            )
        if row is None:
            return False
        logger.info("Deleted book %s", isbn)
        return True
