"""Area profile providers: static table and live database lookup."""

from market_report.areas.base import AreaProfileProvider, city_profile, single_value_profile
from market_report.areas.database import DatabaseAreaProvider
from market_report.areas.static import AREA_PROFILES, StaticAreaProvider
from market_report.config import Settings
from market_report.db.pool import ConnectionPool
from market_report.db.schema import Tables


def create_area_provider(
    settings: Settings, pool: ConnectionPool, tables: Tables | None = None
) -> AreaProfileProvider:
    """Select the provider named by ``settings.area_source``."""
    if settings.area_source == "static":
        return StaticAreaProvider()
    return DatabaseAreaProvider(
        pool,
        tables
        or Tables(listings=settings.listings_table, developments=settings.developments_table),
    )


__all__ = [
    "AREA_PROFILES",
    "AreaProfileProvider",
    "DatabaseAreaProvider",
    "StaticAreaProvider",
    "city_profile",
    "create_area_provider",
    "single_value_profile",
]
