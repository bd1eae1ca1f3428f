# services/database_pool_adapter.py
import logging
from contextlib import asynccontextmanager

import aiopg

from config.services_config import DatabaseConfig
from exceptions import DatabaseConnectionError
from utils.retry import retry_db_connect

logger = logging.getLogger(__name__)


class DatabasePoolAdapter:
    """Adapter around the aiopg pool so repositories only ever see acquire()"""

    def __init__(self, db_pool):
        self._pool = db_pool

    @asynccontextmanager
    async def acquire(self):
        """Acquire database connection"""
        conn = await self._pool.acquire()
        try:
            yield conn
        finally:
            self._pool.release(conn)

    async def close(self) -> None:
        """Close the pool and wait for connections to finish"""
        self._pool.close()
        await self._pool.wait_closed()
        logger.info("[DB] PostgreSQL connection pool closed")


@retry_db_connect
async def _create_pool(db_config: DatabaseConfig):
    return await aiopg.create_pool(**db_config.as_pool_kwargs())


async def create_database_pool(db_config: DatabaseConfig) -> DatabasePoolAdapter:
    """Create the shared aiopg pool, retrying while the database comes up"""
    masked_config = db_config.as_pool_kwargs()
    masked_config["password"] = "***" if masked_config["password"] else None
    logger.info(f"Database connection config: {masked_config}")

    try:
        db_pool = await _create_pool(db_config)
    except Exception as e:
        raise DatabaseConnectionError(str(e))
    return DatabasePoolAdapter(db_pool)
