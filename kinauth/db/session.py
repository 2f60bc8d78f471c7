import asyncio
import logging
import asyncpg
from asyncpg.pool import Pool
from asyncpg import Connection
from typing import AsyncGenerator
from kinauth.core.config import settings
from kinauth.core.exceptions import StorageUnavailableException

logger = logging.getLogger(__name__)

db_pool: Pool | None = None


async def connect_db_pool():
    global db_pool
    if db_pool is None:
        try:
            db_pool = await asyncpg.create_pool(
                dsn=settings.asyncpg_url,
                min_size=settings.DB_POOL_MIN_SIZE,
                max_size=settings.DB_POOL_MAX_SIZE,
                timeout=30,
                command_timeout=settings.DB_COMMAND_TIMEOUT,
            )
            logger.info("AsyncPG connection pool created (%s:%s/%s)", settings.DB_HOST, settings.DB_PORT, settings.DB_NAME)
        except Exception:
            logger.exception("Error connecting to database")
            raise


async def close_db_pool():
    global db_pool
    if db_pool:
        await db_pool.close()
        db_pool = None
        logger.info("AsyncPG connection pool closed.")


async def get_db_connection() -> AsyncGenerator[Connection, None]:
    if db_pool is None:
        logger.error("Database pool is not initialized.")
        raise StorageUnavailableException()
    try:
        connection = await db_pool.acquire(timeout=settings.DB_COMMAND_TIMEOUT)
    except (OSError, asyncpg.PostgresError, asyncpg.InterfaceError, asyncio.TimeoutError):
        logger.exception("Could not acquire a database connection")
        raise StorageUnavailableException()
    try:
        yield connection
    finally:
        await db_pool.release(connection)
