"""Map resolved listing rows to application models."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from typing import Any

from market_report.models import PriceChangeProperty, Property
from market_report.utils.coercion import (
    clean_text,
    parse_int,
    parse_number,
    yes_to_bool,
)
from market_report.utils.market_calculator import (
    calculate_days_on_market,
    calculate_price_change,
)
from market_report.utils.text import format_street_address, title_case


def _property_fields(row: Mapping[str, Any], today: date) -> dict[str, Any]:
    """Coerce every raw text column of a resolved listing.

    Missing or unparseable numbers become 0, flags are True only for the
    literal "Yes", and free text is stripped to None when blank.
    """
    return {
        "id": str(row.get("listing_id") or ""),
        "mls_id": clean_text(row.get("mls_identifier")),
        "address": format_street_address(
            row.get("street_number"), row.get("street_name"), row.get("unit_number")
        ),
        "city": clean_text(row.get("city")),
        "subdivision": title_case(clean_text(row.get("subdivision"))),
        "bedrooms": parse_int(row.get("total_bedrooms")),
        "bathrooms": parse_number(row.get("baths_total")),
        "half_baths": parse_number(row.get("baths_half")),
        "has_pool": yes_to_bool(row.get("private_pool")),
        "living_area": parse_int(row.get("sqft_living")),
        "total_area": parse_int(row.get("sqft_total")),
        "lot_size": parse_int(row.get("lot_sqft")),
        "year_built": parse_int(row.get("year_built")),
        "waterfront": yes_to_bool(row.get("waterfront")),
        "waterfrontage": clean_text(row.get("waterfrontage")),
        "list_price": parse_number(row.get("list_price")),
        "sold_price": parse_number(row.get("sold_price")),
        "original_price": parse_number(row.get("original_list_price")),
        "prior_price": parse_number(row.get("prior_list_price")),
        "listing_date": clean_text(row.get("listing_date")),
        "sold_date": clean_text(row.get("sold_date")),
        "contract_date": clean_text(row.get("under_contract_date")),
        "status_change_date": clean_text(row.get("status_change_date")),
        "days_on_market": calculate_days_on_market(row, today),
        "cumulative_dom": parse_int(row.get("cumulative_dom")),
        "status": clean_text(row.get("status")),
        "property_type": clean_text(row.get("property_type")),
        "construction": clean_text(row.get("construction")),
        "parking": clean_text(row.get("parking")),
        "garage_spaces": parse_int(row.get("garage_spaces")),
        "description": clean_text(row.get("public_remarks")),
        "interior_features": clean_text(row.get("interior_features")),
        "exterior_features": clean_text(row.get("exterior_features")),
        "heating": clean_text(row.get("heating")),
        "cooling": clean_text(row.get("cooling")),
        "flooring": clean_text(row.get("flooring")),
        "view": clean_text(row.get("view")),
        "gated_community": yes_to_bool(row.get("gated_community")),
        "hoa": parse_number(row.get("hoa_poa_coa_monthly")),
        "taxes": parse_number(row.get("taxes")),
        "tax_year": parse_int(row.get("tax_year")),
        "zoning": clean_text(row.get("zoning")),
        "parcel_id": clean_text(row.get("parcel_id")),
        "mls_number": clean_text(row.get("mls_identifier")),
        "listing_agent": clean_text(row.get("listingmembername")),
        "listing_office": clean_text(row.get("listingofficename")),
        "latitude": parse_number(row.get("geo_lat")),
        "longitude": parse_number(row.get("geo_lon")),
        "last_updated": clean_text(row.get("timestamp")),
        "development_name": clean_text(row.get("development_name")),
        "zone_name": clean_text(row.get("zone_name")),
        "region_name": clean_text(row.get("region_name")),
    }


def row_to_property(row: Mapping[str, Any], today: date) -> Property:
    """Convert a resolved listing row to a Property.

    Args:
        row: Row from the snapshot resolver (optionally with development columns).
        today: Reference date for days-on-market of active listings.

    Returns:
        Property instance; malformed values degrade to defaults.
    """
    return Property(**_property_fields(row, today))


def row_to_price_change(row: Mapping[str, Any], today: date) -> PriceChangeProperty:
    """Convert a price-changes report row, adding previous/current price and deltas."""
    change = calculate_price_change(row)
    return PriceChangeProperty(
        **_property_fields(row, today),
        previous_price=change.previous_price,
        current_price=change.current_price,
        price_change=change.change,
        price_change_percent=change.percent,
    )
