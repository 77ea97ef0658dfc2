"""PostgreSQL read access to logged webhook interactions."""

import logging
from typing import Any
from contextlib import asynccontextmanager

import asyncpg

from models import InteractionRecord
from inboxlens.config import Settings
from inboxlens.errors import DatabaseNotConfiguredError

logger = logging.getLogger(__name__)


class Database:
    """Read-only PostgreSQL client.

    One instance is created per process by the app lifespan and handed to
    request handlers. The pool is small on purpose: with ``max_size=1``
    concurrent requests wait for the single connection.
    """

    def __init__(self, settings: Settings):
        self._settings = settings
        self._pool: asyncpg.Pool | None = None

    @property
    def configured(self) -> bool:
        return bool(self._settings.database_url)

    def require_configured(self):
        """Raise if no connection string is available."""
        if not self.configured:
            raise DatabaseNotConfiguredError()

    async def connect(self):
        """Create connection pool."""
        if not self.configured:
            logger.warning("DATABASE_URL is not set; queries will fail until it is configured")
            return
        options: dict[str, Any] = {
            "min_size": self._settings.db_pool_min_size,
            "max_size": self._settings.db_pool_max_size,
        }
        if self._settings.db_ssl:
            options["ssl"] = self._settings.db_ssl
        if self._settings.db_command_timeout is not None:
            options["command_timeout"] = self._settings.db_command_timeout
        self._pool = await asyncpg.create_pool(self._settings.database_url, **options)
        logger.info(
            f"Created database pool for {self._settings.database_url_preview} "
            f"(max_size={self._settings.db_pool_max_size})"
        )

    async def disconnect(self):
        """Close connection pool."""
        if self._pool:
            await self._pool.close()
            self._pool = None
            logger.info("Closed database pool")

    @asynccontextmanager
    async def connection(self):
        """Get a connection from the pool."""
        self.require_configured()
        if not self._pool:
            raise RuntimeError("Database not connected")
        async with self._pool.acquire() as conn:
            yield conn

    # ============= Interactions =============

    async def list_interactions(self) -> list[InteractionRecord]:
        """Fetch every logged interaction."""
        table = self._settings.interactions_table
        async with self.connection() as conn:
            rows = await conn.fetch(
                f"SELECT * FROM {table} ORDER BY sender_id, receiver_id, created_at"
            )
        logger.debug(f"Fetched {len(rows)} interaction rows")
        return [self._row_to_interaction(row) for row in rows]

    async def list_receiver_ids(self) -> list[str]:
        """Distinct receiver IDs, sorted."""
        table = self._settings.interactions_table
        async with self.connection() as conn:
            rows = await conn.fetch(
                f"SELECT DISTINCT receiver_id FROM {table} ORDER BY receiver_id"
            )
        return [str(row["receiver_id"]) for row in rows]

    def _row_to_interaction(self, row: asyncpg.Record) -> InteractionRecord:
        return InteractionRecord.model_validate(dict(row))

    # ============= LLM Diagnostics =============

    async def find_trace_id(self, sender_id: str, input_query: str) -> Any:
        """Trace ID of the first interaction matching sender and query exactly."""
        table = self._settings.interactions_table
        async with self.connection() as conn:
            row = await conn.fetchrow(
                f"SELECT trace_id FROM {table} WHERE sender_id = $1 AND input_query = $2 LIMIT 1",
                sender_id,
                input_query,
            )
        if not row:
            return None
        return row["trace_id"]

    async def get_llm_analytics(self, trace_id: str) -> dict[str, Any] | None:
        """The llm_analytics row for a trace."""
        table = self._settings.llm_analytics_table
        async with self.connection() as conn:
            row = await conn.fetchrow(
                f"SELECT * FROM {table} WHERE trace_id = $1 LIMIT 1", trace_id
            )
        if not row:
            return None
        return dict(row)

    async def list_llm_calls(self, analytics_id: Any) -> list[dict[str, Any]]:
        """All llm_calls rows recorded under an analytics row."""
        table = self._settings.llm_calls_table
        async with self.connection() as conn:
            rows = await conn.fetch(
                f"SELECT * FROM {table} WHERE analytics_id = $1", analytics_id
            )
        return [dict(row) for row in rows]
