"""
CertLedger -- PostgreSQL Client

Async connection pool management for callers of the certificate store.

The store itself never touches this client: callers open a transaction here
and hand the connection to CertificateStore explicitly.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, AsyncIterator

import asyncpg
import structlog

if TYPE_CHECKING:
    from certledger.config import PostgresConfig

logger = structlog.get_logger()


class PostgresClient:
    """
    Async PostgreSQL client with connection pooling.
    """

    def __init__(self, config: PostgresConfig) -> None:
        self._config = config
        self._pool: asyncpg.Pool | None = None

    async def connect(self) -> None:
        """Create the connection pool."""
        self._pool = await asyncpg.create_pool(
            dsn=self._config.dsn,
            min_size=1,
            max_size=self._config.pool_size,
            command_timeout=self._config.statement_timeout_s,
            ssl="require" if self._config.ssl else None,
        )
        logger.info(
            "postgres_connected",
            host=self._config.host,
            database=self._config.database,
        )

    async def close(self) -> None:
        """Close the connection pool."""
        if self._pool:
            await self._pool.close()
            self._pool = None
            logger.info("postgres_disconnected")

    @property
    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise RuntimeError("Postgres client not connected. Call connect() first.")
        return self._pool

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[asyncpg.Connection]:
        """
        Acquire a connection and open a transaction on it.

        Commits when the block exits normally, rolls back when it raises.
        The connection goes back to the pool either way.
        """
        async with self.pool.acquire() as conn:
            async with conn.transaction():
                yield conn

    async def health_check(self) -> dict[str, Any]:
        """Check connectivity."""
        try:
            async with self.pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
            return {"status": "connected"}
        except Exception as e:
            logger.error("postgres_health_check_failed", error=str(e))
            return {"status": "disconnected", "error": str(e)}
