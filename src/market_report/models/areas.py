"""Area profile models."""

from enum import StrEnum
from typing import Final

from market_report.errors import InvalidFilterTypeError
from market_report.models.core import ApiModel


class AreaType(StrEnum):
    """Geography a profile selects listings by."""

    CITY = "city"
    DEVELOPMENT = "development"
    SUBDIVISION = "subdivision"
    ZONE = "zone"
    REGION = "region"
    LIFESTYLE = "lifestyle"


DEVELOPMENT_JOIN_TYPES: Final = frozenset(
    {AreaType.DEVELOPMENT, AreaType.SUBDIVISION, AreaType.ZONE, AreaType.REGION}
)

# Types a caller may name when looking an area up; lifestyle profiles are
# composites that only exist in the static table.
LOOKUP_AREA_TYPES: Final = (
    AreaType.CITY,
    AreaType.DEVELOPMENT,
    AreaType.SUBDIVISION,
    AreaType.ZONE,
    AreaType.REGION,
)


def parse_area_type(token: str | None, *, allow_lifestyle: bool = False) -> AreaType | None:
    """Parse a caller-supplied area-type token.

    Returns None for a missing/blank token; raises InvalidFilterTypeError for
    anything outside the lookup types. ``allow_lifestyle`` admits the
    lifestyle type where profiles are only being listed.
    """
    if token is None or not token.strip():
        return None
    cleaned = token.strip().lower()
    accepted = (*LOOKUP_AREA_TYPES, AreaType.LIFESTYLE) if allow_lifestyle else LOOKUP_AREA_TYPES
    for area_type in accepted:
        if area_type.value == cleaned:
            return area_type
    raise InvalidFilterTypeError(token)


class AreaFilters(ApiModel):
    """Predicate set of an area profile. Unset keys add no predicate."""

    city: str | None = None
    development_name: str | None = None
    subdivision_name: str | None = None
    zone_name: str | None = None
    region_name: str | None = None
    waterfront: bool | None = None
    min_price: float | None = None
    max_price: float | None = None

    @property
    def requires_development_join(self) -> bool:
        return any(
            [self.development_name, self.subdivision_name, self.zone_name, self.region_name]
        )


class AreaProfile(ApiModel):
    """A named, typed filter descriptor for one area."""

    id: str
    name: str
    description: str = ""
    type: AreaType
    filters: AreaFilters
