"""Listings store access: pooled connections, SQL assembly and report queries."""

from market_report.db.market_queries import MarketQueryService
from market_report.db.pool import ConnectionPool
from market_report.db.schema import Tables
from market_report.db.storage import ListingStore

__all__ = ["ConnectionPool", "ListingStore", "MarketQueryService", "Tables"]
