"""
Async database access helpers (raw SQL) using asyncpg.

`Database` owns the connection pool. FastAPI creates one per process in the
lifespan (see `api/main.py`) and keeps it on `app.state.db`; tests construct
it with a substitute pool instead.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
- identifiers cannot be bound, so they go through `quote_identifier`.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import asyncpg

from .settings import DatabaseSettings

logger = logging.getLogger(__name__)


def quote_identifier(name: str) -> str:
    if not isinstance(name, str) or not name:
        raise ValueError("SQL identifier must be a non-empty string.")
    if "\x00" in name:
        raise ValueError("SQL identifier must not contain NUL characters.")
    return '"' + name.replace('"', '""') + '"'


def affected_rows(status: str | None) -> int:
    """
    Parse the row count out of a command status tag.

    "UPDATE 3" -> 3, "DELETE 0" -> 0, "INSERT 0 1" -> 1.
    """
    parts = (status or "").split()
    if not parts:
        return 0
    try:
        return int(parts[-1])
    except ValueError:
        return 0


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


class Database:
    def __init__(self, settings: DatabaseSettings, *, pool: Any | None = None) -> None:
        self.settings = settings
        self._pool = pool
        self._lock = asyncio.Lock()

    @property
    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise RuntimeError("DB pool is not initialized. Call connect() on startup.")
        return self._pool

    @property
    def is_connected(self) -> bool:
        return self._pool is not None

    async def connect(self) -> None:
        if self._pool is not None:
            return None
        async with self._lock:
            if self._pool is not None:
                return None
            s = self.settings
            if s.dsn:
                self._pool = await asyncpg.create_pool(
                    dsn=s.dsn,
                    min_size=s.min_size,
                    max_size=s.max_size,
                    command_timeout=s.command_timeout,
                )
            else:
                self._pool = await asyncpg.create_pool(
                    host=s.host,
                    port=s.port,
                    user=s.user,
                    password=s.password,
                    database=s.database,
                    min_size=s.min_size,
                    max_size=s.max_size,
                    command_timeout=s.command_timeout,
                )
            logger.info("db_pool_created max_size=%s", s.max_size)

    async def close(self) -> None:
        if self._pool is None:
            return None
        await self._pool.close()
        self._pool = None

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        """
        Run a query and return a single row as a dict (or None).
        """
        await self.connect()
        row = await self.pool.fetchrow(sql, *args)
        return _record_to_dict(row) if row is not None else None

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        """
        Run a query and return all rows as a list of dicts.
        """
        await self.connect()
        rows = await self.pool.fetch(sql, *args)
        return [_record_to_dict(r) for r in rows]

    async def fetch_value(self, sql: str, *args: Any) -> Any:
        await self.connect()
        return await self.pool.fetchval(sql, *args)

    async def execute(self, sql: str, *args: Any) -> int:
        """
        Run a statement (UPDATE/DELETE/DDL) and return the affected row count.
        """
        await self.connect()
        status = await self.pool.execute(sql, *args)
        return affected_rows(status)
