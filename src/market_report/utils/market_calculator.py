"""Derived listing fields: days on market and price changes."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from typing import Any, Final

from market_report.models.core import ListingStatus
from market_report.utils.coercion import clean_text, parse_date, parse_number

UNDER_CONTRACT_STATUSES: Final = frozenset(
    {ListingStatus.ACTIVE_UNDER_CONTRACT.value, ListingStatus.PENDING.value}
)


def _elapsed_days(start: date | None, end: date | None) -> int | None:
    if start is None or end is None:
        return None
    return (end - start).days


def calculate_days_on_market(row: Mapping[str, Any], today: date) -> int:
    """Days on market for a resolved listing, by status.

    - Closed: sold_date - listing_date
    - Active Under Contract / Pending: under_contract_date - listing_date
    - Active: today - listing_date
    - anything else, or a missing date: 0

    Args:
        row: Resolved listing row (raw text columns).
        today: Reference date for active listings.

    Returns:
        Whole days; never raises on malformed dates.
    """
    status = clean_text(row.get("status"))
    listing_date = parse_date(row.get("listing_date"))
    if listing_date is None:
        return 0

    days: int | None = None
    if status == ListingStatus.CLOSED:
        days = _elapsed_days(listing_date, parse_date(row.get("sold_date")))
    elif status in UNDER_CONTRACT_STATUSES:
        days = _elapsed_days(listing_date, parse_date(row.get("under_contract_date")))
    elif status == ListingStatus.ACTIVE:
        days = _elapsed_days(listing_date, today)
    return days if days is not None else 0


@dataclass(frozen=True)
class PriceChange:
    """Price movement between the prior and current list price."""

    previous_price: float
    current_price: float

    @property
    def change(self) -> float:
        return self.current_price - self.previous_price

    @property
    def percent(self) -> float:
        """Change relative to the previous price, rounded to one decimal."""
        if self.previous_price <= 0:
            return 0.0
        return round(self.change / self.previous_price * 100, 1)


def calculate_price_change(row: Mapping[str, Any]) -> PriceChange:
    """Build the price change from prior_list_price -> list_price (0 when unparseable)."""
    return PriceChange(
        previous_price=parse_number(row.get("prior_list_price")),
        current_price=parse_number(row.get("list_price")),
    )
