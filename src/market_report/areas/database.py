"""Area profiles looked up live from distinct values in the store.

The store is the source of truth for which areas exist and how their names
are spelled, so profiles never go stale against the data. Cities come from the
listings table; developments, subdivisions, zones and regions from the
development table.
"""

from __future__ import annotations

from market_report.areas.base import AreaProfileProvider, single_value_profile
from market_report.db.pool import ConnectionPool
from market_report.db.schema import Tables
from market_report.db.sql import present
from market_report.logging import get_logger
from market_report.models import (
    DEVELOPMENT_JOIN_TYPES,
    LOOKUP_AREA_TYPES,
    AreaProfile,
    AreaType,
)
from market_report.utils.text import canonical_city_name, slugify

logger = get_logger(__name__)

_COLUMNS = {
    AreaType.CITY: "city",
    AreaType.DEVELOPMENT: "development_name",
    AreaType.SUBDIVISION: "subdivision_name",
    AreaType.ZONE: "zone_name",
    AreaType.REGION: "region_name",
}


class DatabaseAreaProvider(AreaProfileProvider):
    """Resolves slugs against distinct stored values.

    Stored values are grouped by ``slugify`` so listing and lookup agree on
    ids: every listed id resolves, and spellings differing only in case or
    separators collapse into one profile. Store failures propagate; they are
    never reported as a missing area.
    """

    def __init__(self, pool: ConnectionPool, tables: Tables | None = None) -> None:
        self._pool = pool
        self._tables = tables or Tables()

    def _source(self, area_type: AreaType) -> tuple[str, str]:
        table = (
            self._tables.developments
            if area_type in DEVELOPMENT_JOIN_TYPES
            else self._tables.listings
        )
        return table, _COLUMNS[area_type]

    async def _names_by_slug(self, area_type: AreaType) -> dict[str, str]:
        """Slug -> stored value used as the filter and display name, ordered by name."""
        table, column = self._source(area_type)
        rows = await self._pool.fetch_all(
            f"""
            SELECT DISTINCT TRIM({column}) AS name FROM {table}
            WHERE {present(f"TRIM({column})")}
            ORDER BY name
            """
        )
        groups: dict[str, list[str]] = {}
        for row in rows:
            groups.setdefault(slugify(row["name"]), []).append(row["name"])

        if area_type == AreaType.CITY:
            names = {slug: canonical_city_name(spellings) for slug, spellings in groups.items()}
        else:
            names = {slug: spellings[0] for slug, spellings in groups.items()}
        return dict(sorted(names.items(), key=lambda item: item[1]))

    async def _lookup(self, area_type: AreaType, area_id: str) -> AreaProfile | None:
        slug = slugify(area_id)
        name = (await self._names_by_slug(area_type)).get(slug)
        if name is None:
            return None
        return single_value_profile(area_type, name, slug)

    async def get_profile(
        self, area_id: str, area_type: AreaType | None = None
    ) -> AreaProfile | None:
        """Try the expected type first, then every lookup type in order."""
        if not area_id.strip():
            return None
        tried: set[AreaType] = set()
        if area_type in _COLUMNS:
            profile = await self._lookup(area_type, area_id)
            if profile is not None:
                return profile
            tried.add(area_type)

        for candidate in LOOKUP_AREA_TYPES:
            if candidate in tried:
                continue
            profile = await self._lookup(candidate, area_id)
            if profile is not None:
                if area_type is not None and candidate != area_type:
                    logger.info(
                        "area_type_fallback",
                        area_id=area_id,
                        expected=area_type.value,
                        resolved=candidate.value,
                    )
                return profile

        logger.debug("area_not_found", area_id=area_id, area_type=area_type)
        return None

    async def list_profiles(self, area_type: AreaType | None = None) -> list[AreaProfile]:
        types = LOOKUP_AREA_TYPES if area_type is None else (area_type,)
        profiles: list[AreaProfile] = []
        for candidate in types:
            if candidate not in _COLUMNS:
                # Lifestyle composites only exist in the static table
                continue
            names = await self._names_by_slug(candidate)
            profiles.extend(
                single_value_profile(candidate, name, slug) for slug, name in names.items()
            )
        return profiles
