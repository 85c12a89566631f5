"""SQLite listings store: connection pool, schema setup and report queries."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date

from market_report.config import Settings
from market_report.db.market_queries import MarketQueryService
from market_report.db.pool import ConnectionPool
from market_report.db.schema import Tables
from market_report.logging import get_logger

logger = get_logger(__name__)


class ListingStore:
    """Owns the connection pool and the query service over the listings tables."""

    def __init__(
        self,
        db_path: str,
        *,
        tables: Tables | None = None,
        pool_size: int = 5,
        pool_timeout: float = 2.0,
        today: Callable[[], date] = date.today,
        window_days: int = 30,
    ) -> None:
        """Initialize the store.

        Args:
            db_path: Path to SQLite database file, or ":memory:" for in-memory.
            tables: Listings and development table names.
            pool_size: Maximum open connections.
            pool_timeout: Seconds to wait for a connection before failing.
            today: Clock used for trailing windows and days on market.
            window_days: Length of the trailing window in days.
        """
        self.db_path = db_path
        self.tables = tables or Tables()
        self.pool = ConnectionPool(db_path, size=pool_size, acquire_timeout=pool_timeout)
        self.queries = MarketQueryService(
            self.pool, self.tables, today=today, window_days=window_days
        )

    @classmethod
    def from_settings(
        cls, settings: Settings, *, today: Callable[[], date] = date.today
    ) -> ListingStore:
        return cls(
            settings.database_path,
            tables=Tables(
                listings=settings.listings_table,
                developments=settings.developments_table,
            ),
            pool_size=settings.pool_size,
            pool_timeout=settings.pool_timeout_seconds,
            today=today,
            window_days=settings.trailing_window_days,
        )

    async def initialize(self) -> None:
        """Create the listings and development tables when absent.

        Only used for local development and tests; serving never writes.
        """
        await self.pool.execute_script(self.tables.schema_statements())
        logger.info(
            "schema_initialized",
            db_path=self.db_path,
            listings=self.tables.listings,
            developments=self.tables.developments,
        )

    async def close(self) -> None:
        """Close all pooled connections."""
        await self.pool.close()
