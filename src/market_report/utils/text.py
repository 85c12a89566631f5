"""Text normalization: slugs, display names, title case, street addresses."""

import re
from collections.abc import Sequence
from typing import Final

# Cities whose stored spelling cannot be derived from the slug alone, plus
# display-name aliases so both forms resolve to the stored value.
CITY_SLUG_MAP: Final[dict[str, str]] = {
    "jupiter": "Jupiter",
    "juno-beach": "Juno Beach",
    "singer-island": "Singer Island",
    "palm-beach-shores": "Palm Beach Shores",
    "west-palm-beach": "West Palm Beach",
    "north-palm-beach": "North Palm Beach",
    "palm-beach-gardens": "Palm Beach Gardens",
    "tequesta": "Tequesta",
}

# Articles, conjunctions and short prepositions stay lowercase mid-title
SMALL_WORDS: Final = frozenset(
    {
        "a",
        "an",
        "and",
        "as",
        "at",
        "but",
        "by",
        "for",
        "in",
        "nor",
        "of",
        "on",
        "or",
        "per",
        "the",
        "to",
        "via",
        "vs",
    }
)

_WHITESPACE = re.compile(r"\s+")
_SLUG_SEPARATORS = re.compile(r"[\s_]+")


def collapse_whitespace(value: str) -> str:
    """Trim and collapse internal runs of whitespace to single spaces."""
    return _WHITESPACE.sub(" ", value).strip()


def slugify(name: str) -> str:
    """Convert a display name to an area slug.

    Example: "Harbour Ridge Yacht Club" -> "harbour-ridge-yacht-club"
    """
    return _SLUG_SEPARATORS.sub("-", name.strip().lower())


def _capitalize_word(word: str) -> str:
    # Hyphenated words capitalize each part ("st-andrews" -> "St-Andrews")
    return "-".join(part[:1].upper() + part[1:].lower() for part in word.split("-"))


def slug_to_display_name(slug: str) -> str:
    """Resolve a city slug (or display name) to its stored display name.

    Uses CITY_SLUG_MAP first, otherwise capitalizes each hyphen-separated word:
    "west-palm-beach" -> "West Palm Beach".
    """
    key = slugify(slug)
    if key in CITY_SLUG_MAP:
        return CITY_SLUG_MAP[key]
    return " ".join(_capitalize_word(word) for word in key.split("-") if word)


def canonical_city_name(spellings: Sequence[str]) -> str:
    """Pick the display name for stored city spellings that share a slug.

    The canonical name wins when it equals a stored spelling up to case,
    since city filters compare case-insensitively. Otherwise the first
    spelling is kept verbatim.
    """
    canonical = slug_to_display_name(spellings[0])
    if any(s.lower() == canonical.lower() for s in spellings):
        return canonical
    return spellings[0]


def title_case(value: str | None) -> str | None:
    """Title-case a name, keeping small words lowercase unless first or last.

    Examples:
        "PARK PLAZA APTS CONDO" -> "Park Plaza Apts Condo"
        "VILLAGE OF THE PALMS" -> "Village of the Palms"
    """
    if value is None:
        return None
    words = collapse_whitespace(value).split(" ")
    if words == [""]:
        return ""
    last = len(words) - 1
    result: list[str] = []
    for i, word in enumerate(words):
        lowered = word.lower()
        if 0 < i < last and lowered in SMALL_WORDS:
            result.append(lowered)
        else:
            result.append(_capitalize_word(word))
    return " ".join(result)


def format_street_address(
    street_number: str | None, street_name: str | None, unit_number: str | None = None
) -> str:
    """Join street number and name, appending "#unit" when a unit is present."""
    address = collapse_whitespace(f"{street_number or ''} {street_name or ''}")
    unit = (unit_number or "").strip()
    if unit:
        address = f"{address} #{unit}".strip()
    return address
