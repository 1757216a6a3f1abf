"""Asyncpg connection utilities."""
from pathlib import Path

import asyncpg

from bookstore.config import Settings
from bookstore.utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_PATH = Path(__file__).parent / "schema.sql"


async def ensure_schema_exists(pool: asyncpg.pool.Pool) -> None:
    """Create the books table if it doesn't exist."""
    async with pool.acquire() as conn:
        table_exists = await conn.fetchval(
            """
            SELECT COUNT(*)
            FROM information_schema.tables
            WHERE table_schema = 'public'
            AND table_name = 'books'
            """
        )
        if table_exists:
            logger.info("Database schema already exists")
            return

        await conn.execute(SCHEMA_PATH.read_text())
        logger.info("Database schema created")


async def create_pool(settings: Settings) -> asyncpg.pool.Pool:
    """Open the connection pool used by request handlers and ensure the schema."""
    pool = await asyncpg.create_pool(
        dsn=settings.database_dsn,
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
    )
    logger.info(
        "Connection pool open (min=%d, max=%d)",
        settings.db_pool_min_size,
        settings.db_pool_max_size,
    )
    try:
        await ensure_schema_exists(pool)
    except BaseException:
        await pool.close()
        raise
    return pool


async def close_pool(pool: asyncpg.pool.Pool) -> None:
    await pool.close()
    logger.info("Connection pool closed")
