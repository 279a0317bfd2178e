"""asyncpg pool ownership and snapshot sessions for history reads."""

import asyncpg
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional
from abc import ABC, abstractmethod

import logging
logger = logging.getLogger(__name__)


class DatabaseHandler(ABC):
    """Hold the asyncpg pool a service reads the history tables through.

    The pool is either created from a DSN on ``init_pool`` (and then owned
    here) or handed in ready-made, e.g. shared between services or tests.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Service name used in log lines."""
        ...

    def __init__(
            self,
            dsn: str | None = None,
            pool: Optional[asyncpg.Pool] = None) -> None:
        """
        Args:
            dsn (str | None): DSN of the history database.
            pool (asyncpg.Pool | None): Pool to read through instead of creating one.

        Raises:
            ValueError: If neither ``dsn`` nor ``pool`` is provided.
        """
        if not dsn and not pool:
            logger.error(f"{self.name}: no DSN or pool given for the history database")
            raise ValueError("Provide either dsn or pool")
        self._dsn = dsn
        self._pool: Optional[asyncpg.Pool] = pool

    @property
    def pool(self) -> asyncpg.Pool:
        """The pool; raises ``RuntimeError`` before ``init_pool``."""
        if self._pool is None:
            raise RuntimeError(f"{self.name} pool not started yet")
        return self._pool

    async def init_pool(self) -> None:
        """Connect to the history database unless a pool was handed in."""
        if self._pool is None:
            self._pool = await asyncpg.create_pool(self._dsn)
            logger.info(f"{self.name}: history database pool created")

    async def close_pool(self) -> None:
        """Close the pool if it is still open."""
        if self._pool is not None and not self._pool._closed:   # type: ignore
            await self._pool.close()
            logger.info(f"{self.name}: history database pool closed")

    @asynccontextmanager
    async def read_snapshot(self) -> AsyncIterator[asyncpg.Connection]:
        """Yield a connection inside a read-only REPEATABLE READ transaction.

        Every statement issued on the yielded connection sees the same
        snapshot, so lookups made while composing a query agree with the
        query itself.
        """
        async with self.pool.acquire() as conn:
            async with conn.transaction(isolation='repeatable_read', readonly=True):
                yield conn
