"""Area profiles from a fixed configuration table."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Final

from market_report.areas.base import AreaProfileProvider, single_value_profile
from market_report.models import AreaFilters, AreaProfile, AreaType


def _lifestyle(area_id: str, name: str, description: str, **filters: object) -> AreaProfile:
    return AreaProfile(
        id=area_id,
        name=name,
        description=description,
        type=AreaType.LIFESTYLE,
        filters=AreaFilters(**filters),
    )


AREA_PROFILES: Final[dict[str, AreaProfile]] = {
    profile.id: profile
    for profile in (
        # Cities
        single_value_profile(AreaType.CITY, "Jupiter"),
        single_value_profile(AreaType.CITY, "Juno Beach"),
        single_value_profile(AreaType.CITY, "Singer Island"),
        single_value_profile(AreaType.CITY, "Palm Beach Shores"),
        # Developments
        single_value_profile(AreaType.DEVELOPMENT, "Admirals Cove"),
        single_value_profile(AreaType.DEVELOPMENT, "Alicante"),
        single_value_profile(AreaType.DEVELOPMENT, "Harbour Ridge Yacht Club"),
        single_value_profile(AreaType.DEVELOPMENT, "Jupiter Yacht Club"),
        # Zones
        single_value_profile(AreaType.ZONE, "Center Street Canals"),
        # Lifestyle composites
        _lifestyle(
            "jupiter-waterfront",
            "Jupiter Waterfront",
            "Waterfront homes across Jupiter",
            city="Jupiter",
            waterfront=True,
        ),
        _lifestyle(
            "jupiter-luxury",
            "Jupiter Luxury",
            "Jupiter homes listed at $1M and above",
            city="Jupiter",
            min_price=1_000_000,
        ),
        _lifestyle(
            "singer-island-luxury",
            "Singer Island Luxury",
            "Singer Island homes listed at $1M and above",
            city="Singer Island",
            min_price=1_000_000,
        ),
    )
}


class StaticAreaProvider(AreaProfileProvider):
    """Serves profiles from an in-memory table keyed by slug.

    Ids are unique across types, so an expected type never changes which
    profile an id resolves to.
    """

    def __init__(self, profiles: Iterable[AreaProfile] | None = None) -> None:
        source = AREA_PROFILES.values() if profiles is None else profiles
        self._profiles = {p.id: p for p in source}

    async def get_profile(
        self, area_id: str, area_type: AreaType | None = None
    ) -> AreaProfile | None:
        return self._profiles.get(area_id.strip().lower())

    async def list_profiles(self, area_type: AreaType | None = None) -> list[AreaProfile]:
        return [p for p in self._profiles.values() if area_type is None or p.type == area_type]
