"""Postgres connection pool shared by the query modules"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional
import psycopg
from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool

from counsy.exceptions import wrap_external_exception

logger = logging.getLogger(__name__)


class Database:
    """
    Async connection pool for one Postgres database

    Built once by the service container and handed to every service; there
    is no module-level instance. Rows come back as dicts.
    """

    def __init__(
        self,
        connection_string: str,
        min_size: int = 2,
        max_size: int = 10,
        open_timeout: float = 10.0,
    ):
        self.connection_string = connection_string
        self.min_size = min_size
        self.max_size = max_size
        self.open_timeout = open_timeout
        self._pool: Optional[AsyncConnectionPool] = None

    @property
    def is_initialized(self) -> bool:
        return self._pool is not None

    async def init_pool(self) -> None:
        """
        Open the pool and wait for min_size connections

        Raises:
            ConnectionError: the database could not be reached in open_timeout
        """
        if self._pool is not None:
            return

        logger.info(f"Opening database pool (min={self.min_size}, max={self.max_size})")
        pool = AsyncConnectionPool(
            self.connection_string,
            min_size=self.min_size,
            max_size=self.max_size,
            kwargs={"row_factory": dict_row},
            open=False,
        )
        try:
            await pool.open(wait=True, timeout=self.open_timeout)
        except psycopg.Error as e:
            await pool.close()
            raise wrap_external_exception(e, operation="init_pool")

        self._pool = pool

    async def close_pool(self) -> None:
        if self._pool is not None:
            logger.info("Closing database pool")
            await self._pool.close()
            self._pool = None

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[psycopg.AsyncConnection]:
        """Borrow a connection; it goes back to the pool on exit"""
        if self._pool is None:
            raise RuntimeError("Database pool not initialized, call init_pool() first")

        async with self._pool.connection() as conn:
            yield conn

    async def ping(self) -> bool:
        """True if a trivial query succeeds"""
        if self._pool is None:
            return False
        try:
            async with self.connection() as conn:
                await conn.execute("SELECT 1")
            return True
        except psycopg.Error as e:
            logger.warning(f"Database ping failed: {e}")
            return False
