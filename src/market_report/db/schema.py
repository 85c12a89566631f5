"""Table layouts for the listings and development stores, and the snapshot resolver."""

from dataclasses import dataclass
from typing import Final

LISTING_COLUMNS: Final = (
    "listing_id",
    "timestamp",
    "status",
    "mls_identifier",
    "street_number",
    "street_name",
    "unit_number",
    "city",
    "subdivision",
    "parcel_id",
    "total_bedrooms",
    "baths_total",
    "baths_half",
    "private_pool",
    "sqft_living",
    "sqft_total",
    "lot_sqft",
    "year_built",
    "waterfront",
    "waterfrontage",
    "list_price",
    "sold_price",
    "original_list_price",
    "prior_list_price",
    "listing_date",
    "sold_date",
    "under_contract_date",
    "status_change_date",
    "price_change_timestamp",
    "days_on_market",
    "cumulative_dom",
    "property_type",
    "construction",
    "parking",
    "garage_spaces",
    "public_remarks",
    "interior_features",
    "exterior_features",
    "heating",
    "cooling",
    "flooring",
    "view",
    "gated_community",
    "hoa_poa_coa_monthly",
    "taxes",
    "tax_year",
    "zoning",
    "listingmembername",
    "listingofficename",
    "geo_lat",
    "geo_lon",
)

DEVELOPMENT_COLUMNS: Final = (
    "parcel_number",
    "property_address_line_1",
    "development_name",
    "subdivision_name",
    "zone_name",
    "region_name",
)


@dataclass(frozen=True)
class Tables:
    """Names of the two store tables (validated identifiers from Settings)."""

    listings: str = "listings"
    developments: str = "development_data"

    def schema_statements(self) -> list[str]:
        """DDL for local development and tests; the service itself never writes."""
        listing_cols = ",\n    ".join(f'"{c}" TEXT' for c in LISTING_COLUMNS)
        development_cols = ",\n    ".join(f'"{c}" TEXT' for c in DEVELOPMENT_COLUMNS)
        return [
            f"CREATE TABLE IF NOT EXISTS {self.listings} (\n    {listing_cols}\n)",
            f"CREATE INDEX IF NOT EXISTS idx_{self.listings}_listing_ts "
            f"ON {self.listings}(listing_id, timestamp)",
            f"CREATE INDEX IF NOT EXISTS idx_{self.listings}_city ON {self.listings}(city)",
            f"CREATE TABLE IF NOT EXISTS {self.developments} (\n    {development_cols}\n)",
            f"CREATE INDEX IF NOT EXISTS idx_{self.developments}_parcel "
            f"ON {self.developments}(parcel_number)",
        ]


def latest_listings_cte(tables: Tables) -> str:
    """CTE resolving the append-only store to one row per listing_id.

    The newest timestamp wins; rowid breaks timestamp ties so the last
    inserted snapshot is chosen deterministically. Rows without a listing_id
    never appear.
    """
    return f"""
WITH ranked_listings AS (
    SELECT s.*,
           ROW_NUMBER() OVER (
               PARTITION BY s.listing_id
               ORDER BY s.timestamp DESC, s.rowid DESC
           ) AS rn
    FROM {tables.listings} s
    WHERE s.listing_id IS NOT NULL
),
latest_listings AS (
    SELECT * FROM ranked_listings WHERE rn = 1
)"""
