"""Tests for mapping resolved listing rows to Property models."""

from datetime import date

from market_report.db.row_mappers import row_to_price_change, row_to_property

TODAY = date(2025, 3, 1)


class TestRowToProperty:
    def test_full_row(self) -> None:
        row = {
            "listing_id": "RX-1",
            "mls_identifier": " RX-10001 ",
            "street_number": "100",
            "street_name": "Ocean Dr",
            "unit_number": "5B",
            "city": "Jupiter",
            "subdivision": "JUPITER INLET COLONY",
            "total_bedrooms": "3",
            "baths_total": "2.5",
            "private_pool": "Yes",
            "sqft_living": "2,150",
            "waterfront": "No",
            "list_price": "$1,250,000",
            "status": "Active",
            "listing_date": "2025-02-01",
            "public_remarks": "  Ocean views  ",
            "hoa_poa_coa_monthly": "450",
            "geo_lat": "26.94",
            "geo_lon": "-80.07",
            "timestamp": "2025-02-02T08:00:00",
            "listingmembername": "Pat Agent",
        }
        prop = row_to_property(row, TODAY)
        assert prop.id == "RX-1"
        assert prop.mls_id == prop.mls_number == "RX-10001"
        assert prop.address == "100 Ocean Dr #5B"
        assert prop.subdivision == "Jupiter Inlet Colony"
        assert prop.bedrooms == 3
        assert prop.bathrooms == 2.5
        assert prop.has_pool is True
        assert prop.living_area == 2150
        assert prop.waterfront is False
        assert prop.list_price == 1250000.0
        assert prop.days_on_market == 28
        assert prop.description == "Ocean views"
        assert prop.hoa == 450.0
        assert prop.latitude == 26.94
        assert prop.last_updated == "2025-02-02T08:00:00"
        assert prop.listing_agent == "Pat Agent"
        assert prop.development_name is None

    def test_sparse_row_degrades_to_defaults(self) -> None:
        prop = row_to_property({"listing_id": "X", "list_price": "n/a", "year_built": ""}, TODAY)
        assert prop.list_price == 0.0
        assert prop.year_built == 0
        assert prop.address == ""
        assert prop.city is None
        assert prop.has_pool is False
        assert prop.days_on_market == 0

    def test_development_columns_carried(self) -> None:
        row = {"listing_id": "X", "development_name": "Alicante", "zone_name": "Inlet"}
        prop = row_to_property(row, TODAY)
        assert prop.development_name == "Alicante"
        assert prop.zone_name == "Inlet"

    def test_serializes_with_camel_case(self) -> None:
        data = row_to_property({"listing_id": "X", "list_price": "1"}, TODAY).model_dump(
            by_alias=True
        )
        assert data["listPrice"] == 1.0
        assert "daysOnMarket" in data


class TestRowToPriceChange:
    def test_deltas_added(self) -> None:
        row = {"listing_id": "X", "prior_list_price": "400000", "list_price": "380000"}
        change = row_to_price_change(row, TODAY)
        assert change.prior_price == change.previous_price == 400000.0
        assert change.current_price == change.list_price == 380000.0
        assert change.price_change == -20000.0
        assert change.price_change_percent == -5.0
