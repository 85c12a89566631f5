"""Tests for report and search query-parameter parsing."""

import pytest

from market_report.web.filters import (
    ReportParams,
    _first,
    _parse_flag,
    _parse_optional_float,
    _parse_optional_int,
)

CONTEXT = {"default_limit": 50, "max_limit": 500}


class TestParsers:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("450000", 450000.0),
            ("1,250,000", 1250000.0),
            (" 12.5 ", 12.5),
            (7, 7.0),
            ("", None),
            ("abc", None),
            ("-5", None),
            ("nan", None),
            ("inf", None),
            (None, None),
        ],
    )
    def test_optional_float(self, raw: object, expected: float | None) -> None:
        assert _parse_optional_float(raw) == expected

    def test_optional_int_truncates(self) -> None:
        assert _parse_optional_int("3.9") == 3
        assert _parse_optional_int("x") is None

    def test_flag(self) -> None:
        assert _parse_flag("true") is True
        assert _parse_flag(" TRUE ") is True
        assert _parse_flag("yes") is False
        assert _parse_flag(None) is False

    def test_first_skips_blank(self) -> None:
        assert _first(None, "  ", "b") == "b"
        assert _first(None, None) is None


class TestReportParams:
    def test_defaults(self) -> None:
        params = ReportParams.model_validate({}, context=CONTEXT)
        assert params.limit == 50
        assert params.min_price is None
        assert params.area_type is None

    def test_blank_limit_uses_default(self) -> None:
        context = {**CONTEXT, "default_limit": 20}
        params = ReportParams.model_validate({"limit": ""}, context=context)
        assert params.limit == 20

    @pytest.mark.parametrize(("raw", "expected"), [("0", 1), ("10", 10), ("100000", 500)])
    def test_limit_clamped(self, raw: str, expected: int) -> None:
        assert ReportParams.model_validate({"limit": raw}, context=CONTEXT).limit == expected

    def test_invalid_prices_ignored(self) -> None:
        params = ReportParams.model_validate(
            {"min_price": "cheap", "max_price": "900000"}, context=CONTEXT
        )
        assert params.min_price is None
        assert params.max_price == 900000.0

    def test_area_type_blank_is_none(self) -> None:
        assert ReportParams.model_validate({"area_type": "  "}, context=CONTEXT).area_type is None
        assert (
            ReportParams.model_validate({"area_type": " zone "}, context=CONTEXT).area_type
            == "zone"
        )
