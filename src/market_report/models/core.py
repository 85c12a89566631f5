"""Core listing, report and statistics models."""

from datetime import UTC, datetime
from enum import StrEnum
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class ListingStatus(StrEnum):
    """Known MLS statuses. The store treats status as an open set of strings."""

    ACTIVE = "Active"
    CLOSED = "Closed"
    ACTIVE_UNDER_CONTRACT = "Active Under Contract"
    PENDING = "Pending"
    COMING_SOON = "Coming Soon"


class ReportKind(StrEnum):
    """Report kinds served for an area."""

    ACTIVE_LISTINGS = "active-listings"
    RECENT_SALES = "recent-sales"
    UNDER_CONTRACT = "under-contract"
    COMING_SOON = "coming-soon"
    PRICE_CHANGES = "price-changes"
    STATS = "stats"


class ApiModel(BaseModel):
    """Frozen model serialized with camelCase keys for the frontend."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class Property(ApiModel):
    """A resolved listing in the application's property shape."""

    id: str
    mls_id: str | None = None
    address: str = ""
    city: str | None = None
    subdivision: str | None = None
    bedrooms: int = 0
    bathrooms: float = 0.0
    half_baths: float = 0.0
    has_pool: bool = False
    living_area: int = 0
    total_area: int = 0
    lot_size: int = 0
    year_built: int = 0
    waterfront: bool = False
    waterfrontage: str | None = None
    list_price: float = 0.0
    sold_price: float = 0.0
    original_price: float = 0.0
    prior_price: float = 0.0
    listing_date: str | None = None
    sold_date: str | None = None
    contract_date: str | None = None
    status_change_date: str | None = None
    days_on_market: int = 0
    cumulative_dom: int = 0
    status: str | None = None
    property_type: str | None = None
    construction: str | None = None
    parking: str | None = None
    garage_spaces: int = 0
    description: str | None = None
    interior_features: str | None = None
    exterior_features: str | None = None
    heating: str | None = None
    cooling: str | None = None
    flooring: str | None = None
    view: str | None = None
    gated_community: bool = False
    hoa: float = 0.0
    taxes: float = 0.0
    tax_year: int = 0
    zoning: str | None = None
    parcel_id: str | None = None
    mls_number: str | None = None
    listing_agent: str | None = None
    listing_office: str | None = None
    latitude: float = 0.0
    longitude: float = 0.0
    last_updated: str | None = None
    # Present only when the development join supplied them
    development_name: str | None = None
    zone_name: str | None = None
    region_name: str | None = None


class PriceChangeProperty(Property):
    """A listing whose list price moved inside the trailing window."""

    previous_price: float = 0.0
    current_price: float = 0.0
    price_change: float = 0.0
    price_change_percent: float = 0.0


class MarketStats(ApiModel):
    """Request-scoped aggregate over the resolved listings of an area.

    Counts are zero when nothing matches; averages and bounds are None when no
    row qualifies for them.
    """

    total_active_listings: int = 0
    total_sales_last_30_days: int = 0
    total_under_contract: int = 0
    total_coming_soon: int = 0
    total_price_changes_last_30_days: int = 0
    average_days_on_market: int | None = None
    average_sold_price: int | None = None
    average_list_price: int | None = None
    min_list_price: int | None = None
    max_list_price: int | None = None
    last_updated: datetime = Field(default_factory=lambda: datetime.now(UTC))


class CitySummary(ApiModel):
    """A city present in the resolved listings."""

    id: str
    name: str
    active_listings: int = 0


class SearchCriteria(BaseModel):
    """Free-form property search over resolved listings."""

    model_config = ConfigDict(frozen=True)

    status: str = ListingStatus.ACTIVE.value
    city: str | None = None
    min_price: float | None = Field(default=None, ge=0)
    max_price: float | None = Field(default=None, ge=0)
    min_beds: int | None = Field(default=None, ge=0)
    max_beds: int | None = Field(default=None, ge=0)
    min_baths: float | None = Field(default=None, ge=0)
    max_baths: float | None = Field(default=None, ge=0)
    has_pool: bool = False
    waterfront: bool = False
    limit: int = Field(default=50, ge=1)

    @model_validator(mode="after")
    def check_price_range(self) -> Self:
        """Ensure min_price <= max_price when both are set."""
        if (
            self.min_price is not None
            and self.max_price is not None
            and self.min_price > self.max_price
        ):
            raise ValueError("min_price must be <= max_price")
        return self
