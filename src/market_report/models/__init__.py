"""Pydantic models for listings, reports and area profiles."""

from market_report.models.areas import (
    DEVELOPMENT_JOIN_TYPES,
    LOOKUP_AREA_TYPES,
    AreaFilters,
    AreaProfile,
    AreaType,
    parse_area_type,
)
from market_report.models.core import (
    CitySummary,
    ListingStatus,
    MarketStats,
    PriceChangeProperty,
    Property,
    ReportKind,
    SearchCriteria,
)

__all__ = [
    "DEVELOPMENT_JOIN_TYPES",
    "LOOKUP_AREA_TYPES",
    "AreaFilters",
    "AreaProfile",
    "AreaType",
    "CitySummary",
    "ListingStatus",
    "MarketStats",
    "PriceChangeProperty",
    "Property",
    "ReportKind",
    "SearchCriteria",
    "parse_area_type",
]
