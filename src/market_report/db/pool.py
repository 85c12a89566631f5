"""Pooled aiosqlite connections for read-only report queries."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import aiosqlite

from market_report.errors import StoreUnavailableError
from market_report.logging import get_logger

logger = get_logger(__name__)


class ConnectionPool:
    """A bounded pool of aiosqlite connections.

    Connections are opened lazily up to ``size``. A caller that cannot get a
    connection within ``acquire_timeout`` seconds gets StoreUnavailableError,
    which fails the request rather than the process.
    """

    def __init__(self, db_path: str, *, size: int = 5, acquire_timeout: float = 2.0) -> None:
        """Initialize the pool.

        Args:
            db_path: Path to SQLite database file, or ":memory:" for in-memory.
            size: Maximum number of open connections.
            acquire_timeout: Seconds to wait for a free connection.
        """
        self.db_path = db_path
        # Each :memory: connection would be a separate empty database
        self.size = 1 if db_path == ":memory:" else size
        self.acquire_timeout = acquire_timeout
        self._idle: asyncio.LifoQueue[aiosqlite.Connection] = asyncio.LifoQueue()
        self._slots = asyncio.Semaphore(self.size)
        self._all: list[aiosqlite.Connection] = []
        self._closed = False

    def _ensure_directory(self) -> None:
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

    async def _open(self) -> aiosqlite.Connection:
        self._ensure_directory()
        conn = await aiosqlite.connect(self.db_path)
        conn.row_factory = aiosqlite.Row
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA busy_timeout=5000")
        await conn.execute("PRAGMA cache_size=-64000")
        self._all.append(conn)
        logger.debug("pool_connection_opened", db_path=self.db_path, open=len(self._all))
        return conn

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """Borrow a connection for the duration of the block.

        Raises:
            StoreUnavailableError: If the pool is closed, exhausted past the
                timeout, or a new connection cannot be opened.
        """
        if self._closed:
            raise StoreUnavailableError("connection pool is closed")
        try:
            await asyncio.wait_for(self._slots.acquire(), timeout=self.acquire_timeout)
        except TimeoutError as e:
            logger.warning("pool_exhausted", size=self.size, timeout=self.acquire_timeout)
            raise StoreUnavailableError("connection pool exhausted") from e

        try:
            if self._idle.empty():
                try:
                    conn = await self._open()
                except (aiosqlite.Error, OSError) as e:
                    logger.error("pool_connect_failed", db_path=self.db_path, error=str(e))
                    raise StoreUnavailableError("could not connect to listings store") from e
            else:
                conn = self._idle.get_nowait()
            try:
                yield conn
            finally:
                self._idle.put_nowait(conn)
        finally:
            self._slots.release()

    async def fetch_all(self, sql: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
        """Run a query and return every row as a dict.

        Raises:
            StoreUnavailableError: On any driver error; the SQL is logged, never raised.
        """
        async with self.acquire() as conn:
            try:
                cursor = await conn.execute(sql, tuple(params))
                rows = await cursor.fetchall()
                await cursor.close()
            except aiosqlite.Error as e:
                logger.error("store_query_failed", error=str(e), sql=sql)
                raise StoreUnavailableError("listings store query failed") from e
        return [dict(row) for row in rows]

    async def fetch_one(self, sql: str, params: Sequence[Any] = ()) -> dict[str, Any] | None:
        """Run a query and return the first row as a dict, or None."""
        rows = await self.fetch_all(sql, params)
        return rows[0] if rows else None

    async def execute_script(self, statements: Sequence[str]) -> None:
        """Run DDL statements in one transaction (schema setup only)."""
        async with self.acquire() as conn:
            try:
                for statement in statements:
                    await conn.execute(statement)
                await conn.commit()
            except aiosqlite.Error as e:
                logger.error("store_script_failed", error=str(e))
                raise StoreUnavailableError("listings store setup failed") from e

    async def close(self) -> None:
        """Close every connection the pool opened."""
        self._closed = True
        while self._all:
            conn = self._all.pop()
            await conn.close()
        while not self._idle.empty():
            self._idle.get_nowait()
        logger.debug("pool_closed", db_path=self.db_path)
