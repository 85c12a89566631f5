"""Compile area profiles into join clauses and WHERE predicates.

City-type profiles filter the resolved listing directly. Development,
subdivision, zone and region profiles need the development table, joined per
listing by parcel number when the listing has one, otherwise by a normalized
"street_number street_name" == property_address_line_1 comparison. Address
matching is approximate: formatting differences between the two feeds simply
produce no match, never an error.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from market_report.db.schema import Tables
from market_report.db.sql import Predicate, SqlFragment, normalized_text, present
from market_report.models.areas import AreaProfile

LISTING_ALIAS = "l"
DEVELOPMENT_ALIAS = "d"

# Profile filter key -> development table column
_DEVELOPMENT_FILTER_COLUMNS = (
    ("development_name", "development_name"),
    ("subdivision_name", "subdivision_name"),
    ("zone_name", "zone_name"),
    ("region_name", "region_name"),
)


@dataclass(frozen=True)
class CompiledAreaFilter:
    """Join and predicates for one area profile.

    ``param_count`` tells callers how many positional parameters the join and
    predicates consume, so caller-supplied predicates continue numbering
    after them.
    """

    join_required: bool
    join: SqlFragment = field(default_factory=lambda: SqlFragment(""))
    predicates: tuple[Predicate, ...] = ()

    @property
    def predicate_fragments(self) -> list[SqlFragment]:
        return [p.to_fragment() for p in self.predicates]

    @property
    def params(self) -> tuple[Any, ...]:
        return self.join.params + tuple(p for f in self.predicate_fragments for p in f.params)

    @property
    def param_count(self) -> int:
        return len(self.params)


NO_AREA_FILTER = CompiledAreaFilter(join_required=False)


def development_join(tables: Tables) -> SqlFragment:
    """First-match join from a resolved listing to its development record.

    Listings with a parcel id match on parcel number only. Listings without
    one match on normalized street address, and only when that address is
    non-blank. Each branch picks a single development row (lowest rowid), so
    several records sharing a parcel or address cannot fan one listing out
    into duplicate rows. A listing matching neither joins nothing.
    """
    la, da = LISTING_ALIAS, DEVELOPMENT_ALIAS
    listing_address = normalized_text(f"{la}.street_number || ' ' || {la}.street_name")
    return SqlFragment(
        f"""JOIN {tables.developments} {da} ON {da}.rowid = CASE
    WHEN {present(f"{la}.parcel_id")} THEN (
        SELECT dm.rowid FROM {tables.developments} dm
        WHERE dm.parcel_number = {la}.parcel_id
        ORDER BY dm.rowid
        LIMIT 1
    )
    WHEN {listing_address} != '' THEN (
        SELECT dm.rowid FROM {tables.developments} dm
        WHERE {normalized_text("dm.property_address_line_1")} = {listing_address}
        ORDER BY dm.rowid
        LIMIT 1
    )
END"""
    )


class AreaFilterCompiler:
    """Turns an AreaProfile into a CompiledAreaFilter against the resolved listings."""

    def __init__(self, tables: Tables) -> None:
        self._tables = tables

    def compile(self, profile: AreaProfile | None) -> CompiledAreaFilter:
        """Compile a profile; None means no area restriction.

        Args:
            profile: Resolved area profile, or None for all areas.

        Returns:
            Join requirement, join clause and ordered predicates.
        """
        if profile is None:
            return NO_AREA_FILTER

        filters = profile.filters
        la, da = LISTING_ALIAS, DEVELOPMENT_ALIAS
        predicates: list[Predicate] = []

        if filters.city:
            # Stored city casing varies between historical loads
            predicates.append(Predicate(f"{la}.city", "=", filters.city, case_insensitive=True))

        join_required = filters.requires_development_join
        for key, column in _DEVELOPMENT_FILTER_COLUMNS:
            value = getattr(filters, key)
            if value:
                predicates.append(Predicate(f"{da}.{column}", "=", value))

        if filters.waterfront is True:
            predicates.append(Predicate(f"{la}.waterfront", "=", "Yes"))
        if filters.min_price is not None:
            predicates.append(Predicate(f"{la}.list_price", ">=", filters.min_price, numeric=True))
        if filters.max_price is not None:
            predicates.append(Predicate(f"{la}.list_price", "<=", filters.max_price, numeric=True))

        return CompiledAreaFilter(
            join_required=join_required,
            join=development_join(self._tables) if join_required else SqlFragment(""),
            predicates=tuple(predicates),
        )
