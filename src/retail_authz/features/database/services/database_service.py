"""Database feature service owning the asyncpg connection pool.

The authorization engine only reads, apart from administrative writes and
audit inserts, so one pool per process is enough. The pool is created
lazily on first use and closed on shutdown.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import asyncpg

from ....core.exceptions import ConfigurationError, DatabaseError
from ..utils.error_handling import DRIVER_ERRORS

logger = logging.getLogger(__name__)


class DatabaseService:
    """High-level database service handing out pooled connections."""

    def __init__(
        self,
        dsn: Optional[str],
        min_size: int = 2,
        max_size: int = 10,
        command_timeout: float = 5.0,
    ):
        self.dsn = dsn
        self.min_size = min_size
        self.max_size = max_size
        self.command_timeout = command_timeout

        self._pool: Optional[asyncpg.Pool] = None
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings) -> "DatabaseService":
        """Build the service from AuthzSettings."""
        return cls(
            dsn=settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            command_timeout=settings.db_command_timeout,
        )

    @property
    def is_initialized(self) -> bool:
        """Check whether the pool has been created."""
        return self._pool is not None

    async def initialize(self) -> None:
        """Create the connection pool if it does not exist yet."""
        if self._pool is not None:
            return

        if not self.dsn:
            raise ConfigurationError("AUTHZ_DATABASE_URL is not configured")

        async with self._lock:
            if self._pool is not None:  # Double-check
                return
            try:
                self._pool = await asyncpg.create_pool(
                    dsn=self.dsn,
                    min_size=self.min_size,
                    max_size=self.max_size,
                    command_timeout=self.command_timeout,
                )
            except DRIVER_ERRORS as e:
                raise DatabaseError(f"Failed to create connection pool: {e}") from e

            logger.info(f"Created connection pool: min={self.min_size}, max={self.max_size}")

    async def close(self) -> None:
        """Close the connection pool."""
        if self._pool is None:
            return
        pool, self._pool = self._pool, None
        await pool.close()
        logger.info("Closed connection pool")

    @asynccontextmanager
    async def get_connection(self) -> AsyncIterator[asyncpg.Connection]:
        """Get a pooled connection with automatic release."""
        await self.initialize()
        try:
            connection = await self._pool.acquire(timeout=self.command_timeout)
        except DRIVER_ERRORS as e:
            raise DatabaseError(f"Failed to acquire database connection: {e}") from e

        try:
            yield connection
        finally:
            await self._pool.release(connection)
