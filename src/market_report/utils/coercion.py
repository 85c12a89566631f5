"""Coercion of text-typed store values.

Every numeric, date and flag column in the listings store is free-form text
that may be NULL, empty or junk. These helpers are total: a value that cannot
be parsed degrades to the caller's default instead of raising.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime
from typing import Final

# YYYY-MM-DD prefix; the compact YYYYMMDD form is not understood by SQLite
_ISO_DATE_PREFIX: Final = re.compile(r"^\d{4}-\d{2}-\d{2}")

# Plain decimal or exponent literal, the forms SQLite treats as numeric text
_NUMBER_LITERAL: Final = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def clean_text(value: object) -> str | None:
    """Strip a text value, returning None for NULL or blank."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def yes_to_bool(value: object) -> bool:
    """The store encodes flags as the literal "Yes"; anything else is False."""
    return clean_text(value) == "Yes"


def parse_number(value: object, default: float = 0.0) -> float:
    """Parse a float from text, tolerating thousands separators and "$".

    Agrees with the SQL-side ``cast_number``: the same text parses, or
    fails, on both sides.

    Examples:
        "450000" -> 450000.0
        "$1,250,000.50" -> 1250000.5
        "" / None / "n/a" -> default
    """
    if isinstance(value, bool):
        return default
    if isinstance(value, int | float):
        return float(value) if math.isfinite(value) else default
    text = clean_text(value)
    if text is None:
        return default
    text = text.replace(",", "").replace("$", "").strip()
    if not _NUMBER_LITERAL.fullmatch(text):
        return default
    try:
        number = float(text)
    except ValueError:
        return default
    return number if math.isfinite(number) else default


def parse_int(value: object, default: int = 0) -> int:
    """Parse an int from text, accepting decimal forms such as "3.0"."""
    number = parse_number(value, default=math.nan)
    if math.isnan(number):
        return default
    return int(number)


def parse_date(value: object) -> date | None:
    """Parse the date part of ISO date or datetime text.

    Only ISO forms are accepted, matching what SQLite's date() understands,
    so Python-side and SQL-side day counts agree.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = clean_text(value)
    if text is None or not _ISO_DATE_PREFIX.match(text):
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None
