"""Tests for text-value coercion."""

from datetime import date, datetime

import pytest

from market_report.utils.coercion import (
    clean_text,
    parse_date,
    parse_int,
    parse_number,
    yes_to_bool,
)


class TestCleanText:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, None),
            ("", None),
            ("   ", None),
            ("  Jupiter ", "Jupiter"),
            (42, "42"),
        ],
    )
    def test_clean_text(self, value: object, expected: str | None) -> None:
        assert clean_text(value) == expected


class TestYesToBool:
    def test_literal_yes(self) -> None:
        assert yes_to_bool("Yes") is True
        assert yes_to_bool(" Yes ") is True

    @pytest.mark.parametrize("value", ["No", "", None, "yes", "Y", "true", "1"])
    def test_everything_else_false(self, value: object) -> None:
        assert yes_to_bool(value) is False


class TestParseNumber:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("450000", 450000.0),
            ("450000.50", 450000.5),
            ("$1,250,000", 1250000.0),
            (" 2.5 ", 2.5),
            (12, 12.0),
            (3.25, 3.25),
        ],
    )
    def test_parses(self, value: object, expected: float) -> None:
        assert parse_number(value) == expected

    @pytest.mark.parametrize(
        "value", [None, "", "  ", "n/a", "12abc", "nan", "inf", "1_000", "0x1A", "$", True]
    )
    def test_malformed_defaults_to_zero(self, value: object) -> None:
        assert parse_number(value) == 0.0

    def test_custom_default(self) -> None:
        assert parse_number("", default=-1.0) == -1.0


class TestParseInt:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [("3", 3), ("3.0", 3), ("2,450", 2450), ("4.9", 4), (7, 7)],
    )
    def test_parses(self, value: object, expected: int) -> None:
        assert parse_int(value) == expected

    @pytest.mark.parametrize("value", [None, "", "three", "nan"])
    def test_malformed_defaults_to_zero(self, value: object) -> None:
        assert parse_int(value) == 0


class TestParseDate:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("2025-01-31", date(2025, 1, 31)),
            ("2025-01-31T14:22:00", date(2025, 1, 31)),
            ("2025-01-31 14:22:00.123", date(2025, 1, 31)),
            (" 2025-01-31 ", date(2025, 1, 31)),
        ],
    )
    def test_iso_forms(self, value: str, expected: date) -> None:
        assert parse_date(value) == expected

    def test_passthrough(self) -> None:
        assert parse_date(date(2025, 2, 1)) == date(2025, 2, 1)
        assert parse_date(datetime(2025, 2, 1, 9, 30)) == date(2025, 2, 1)

    @pytest.mark.parametrize("value", [None, "", "01/31/2025", "2025-13-01", "yesterday", 20250131])
    def test_unparseable_is_none(self, value: object) -> None:
        assert parse_date(value) is None
