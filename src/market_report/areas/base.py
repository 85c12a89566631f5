"""Area profile provider interface."""

from abc import ABC, abstractmethod

from market_report.errors import AreaNotFoundError
from market_report.models import AreaFilters, AreaProfile, AreaType
from market_report.utils.text import slug_to_display_name, slugify

_DESCRIPTION_LABELS = {
    AreaType.CITY: "area",
    AreaType.DEVELOPMENT: "development",
    AreaType.SUBDIVISION: "subdivision",
    AreaType.ZONE: "zone",
    AreaType.REGION: "region",
}

# AreaType -> AreaFilters key holding the stored value
FILTER_KEYS = {
    AreaType.CITY: "city",
    AreaType.DEVELOPMENT: "development_name",
    AreaType.SUBDIVISION: "subdivision_name",
    AreaType.ZONE: "zone_name",
    AreaType.REGION: "region_name",
}


def describe(name: str, area_type: AreaType) -> str:
    label = _DESCRIPTION_LABELS.get(area_type, "area")
    return f"{name} {label} properties and market data"


def single_value_profile(area_type: AreaType, name: str, area_id: str | None = None) -> AreaProfile:
    """Profile that filters on one stored value for its type.

    Args:
        area_type: Any type except lifestyle.
        name: Stored value, used verbatim as the filter and display name.
        area_id: Slug; derived from the name when omitted.
    """
    return AreaProfile(
        id=area_id or slugify(name),
        name=name,
        description=describe(name, area_type),
        type=area_type,
        filters=AreaFilters(**{FILTER_KEYS[area_type]: name}),
    )


def city_profile(city_or_slug: str) -> AreaProfile:
    """City profile for the legacy city endpoints ("west-palm-beach" or "West Palm Beach")."""
    return single_value_profile(AreaType.CITY, slug_to_display_name(city_or_slug))


class AreaProfileProvider(ABC):
    """Resolves area identifiers to profiles."""

    @abstractmethod
    async def get_profile(
        self, area_id: str, area_type: AreaType | None = None
    ) -> AreaProfile | None:
        """Resolve an area id, preferring ``area_type`` when given.

        Returns:
            The profile, or None when the id matches no known area.
        """
        ...

    @abstractmethod
    async def list_profiles(self, area_type: AreaType | None = None) -> list[AreaProfile]:
        """All known profiles, optionally restricted to one type."""
        ...

    async def require_profile(self, area_id: str, area_type: AreaType | None = None) -> AreaProfile:
        """Like get_profile, but raises AreaNotFoundError instead of returning None."""
        profile = await self.get_profile(area_id, area_type)
        if profile is None:
            raise AreaNotFoundError(area_id, area_type.value if area_type else None)
        return profile
