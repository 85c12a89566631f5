"""Report queries over the resolved listings.

Every operation issues exactly one statement: the snapshot resolver CTE, the
compiled area join and predicates, the report's status and window predicates,
caller price bounds, ordering and limit. Resolving and aggregating inside one
statement keeps counts and returned rows consistent while the store is being
appended to.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from datetime import date
from typing import Any

from market_report.db.area_filters import DEVELOPMENT_ALIAS, AreaFilterCompiler, CompiledAreaFilter
from market_report.db.pool import ConnectionPool
from market_report.db.row_mappers import row_to_price_change, row_to_property
from market_report.db.schema import Tables, latest_listings_cte
from market_report.db.sql import (
    Predicate,
    SqlFragment,
    WhereBuilder,
    and_all,
    cast_date,
    cast_number,
    cast_timestamp,
    days_between,
    join_fragments,
    or_any,
    present,
    render,
)
from market_report.logging import get_logger
from market_report.models import (
    AreaProfile,
    CitySummary,
    ListingStatus,
    MarketStats,
    PriceChangeProperty,
    Property,
    SearchCriteria,
)
from market_report.utils.text import canonical_city_name, slug_to_display_name, slugify

logger = get_logger(__name__)

DEFAULT_LIMIT = 50

ACTIVE = ListingStatus.ACTIVE.value
CLOSED = ListingStatus.CLOSED.value
COMING_SOON = ListingStatus.COMING_SOON.value
UNDER_CONTRACT = (ListingStatus.ACTIVE_UNDER_CONTRACT.value, ListingStatus.PENDING.value)


def status_is(status: str) -> SqlFragment:
    return SqlFragment("l.status = ?", (status,))


def status_in(statuses: Sequence[str]) -> SqlFragment:
    markers = ", ".join("?" for _ in statuses)
    return SqlFragment(f"l.status IN ({markers})", tuple(statuses))


def price_bounds(
    column: str, min_price: float | None, max_price: float | None
) -> list[SqlFragment]:
    """Guarded numeric bounds on a text price column; unset bounds add nothing."""
    fragments = []
    if min_price is not None:
        fragments.append(Predicate(column, ">=", min_price, numeric=True).to_fragment())
    if max_price is not None:
        fragments.append(Predicate(column, "<=", max_price, numeric=True).to_fragment())
    return fragments


def wrap(template: str, inner: SqlFragment) -> SqlFragment:
    """Embed a fragment into a ``{}`` template, keeping its parameters."""
    return SqlFragment(template.format(inner.sql), inner.params)


def _round_or_none(value: Any) -> int | None:
    # Halves round up (2.5 -> 3), not to even
    return None if value is None else math.floor(value + 0.5)


class MarketQueryService:
    """Query assembler for the area reports.

    ``today`` is a clock callable so trailing windows and days on market can
    be pinned in tests; it is read once per query and bound as a parameter.
    """

    def __init__(
        self,
        pool: ConnectionPool,
        tables: Tables | None = None,
        *,
        today: Callable[[], date] = date.today,
        window_days: int = 30,
    ) -> None:
        self._pool = pool
        self._tables = tables or Tables()
        self._today = today
        self._window = f"-{window_days} days"
        self._compiler = AreaFilterCompiler(self._tables)

    # ------------------------------------------------------------------
    # Building blocks
    # ------------------------------------------------------------------

    def _date_in_window(self, column: str, today: date) -> SqlFragment:
        return SqlFragment(
            f"{cast_date(column)} >= date(?, ?)", (today.isoformat(), self._window)
        )

    def _timestamp_in_window(self, column: str, today: date) -> SqlFragment:
        return SqlFragment(
            f"{cast_timestamp(column)} >= datetime(?, ?)", (today.isoformat(), self._window)
        )

    def _price_change_conditions(self, today: date) -> list[SqlFragment]:
        # Textual inequality: "500000" vs "500000.00" counts as a change
        return [
            status_is(ACTIVE),
            self._timestamp_in_window("l.price_change_timestamp", today),
            SqlFragment(f"({present('l.prior_list_price')})"),
            SqlFragment("l.prior_list_price != l.list_price"),
        ]

    def _select_listings(
        self,
        area: CompiledAreaFilter,
        conditions: Sequence[SqlFragment],
        order_column: str,
        limit: int,
    ) -> tuple[str, tuple[Any, ...]]:
        columns = "l.*"
        if area.join_required:
            d = DEVELOPMENT_ALIAS
            columns += f", {d}.development_name, {d}.zone_name, {d}.region_name"

        where = WhereBuilder().extend(area.predicate_fragments).extend(conditions)
        fragments = [
            SqlFragment(latest_listings_cte(self._tables)),
            SqlFragment(f"SELECT {columns}\nFROM latest_listings l"),
            area.join,
            SqlFragment("WHERE"),
            where.build(),
            SqlFragment(f"ORDER BY {order_column} DESC NULLS LAST, l.listing_id"),
            SqlFragment("LIMIT ?", (limit,)),
        ]
        return render(f for f in fragments if f.sql)

    async def _fetch_properties(
        self,
        report: str,
        profile: AreaProfile | None,
        conditions: Sequence[SqlFragment],
        order_column: str,
        limit: int,
        today: date,
    ) -> list[dict[str, Any]]:
        area = self._compiler.compile(profile)
        sql, params = self._select_listings(area, conditions, order_column, limit)
        rows = await self._pool.fetch_all(sql, params)
        logger.debug(
            "report_query_executed",
            report=report,
            area=profile.id if profile else None,
            join=area.join_required,
            rows=len(rows),
        )
        return rows

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    async def get_active_listings(
        self,
        profile: AreaProfile | None = None,
        limit: int = DEFAULT_LIMIT,
        min_price: float | None = None,
        max_price: float | None = None,
    ) -> list[Property]:
        """Active listings, newest listing date first; bounds on list_price."""
        today = self._today()
        conditions = [status_is(ACTIVE), *price_bounds("l.list_price", min_price, max_price)]
        rows = await self._fetch_properties(
            "active-listings", profile, conditions, cast_date("l.listing_date"), limit, today
        )
        return [row_to_property(row, today) for row in rows]

    async def get_recent_sales(
        self,
        profile: AreaProfile | None = None,
        limit: int = DEFAULT_LIMIT,
        min_price: float | None = None,
        max_price: float | None = None,
    ) -> list[Property]:
        """Closed listings sold inside the trailing window; bounds on sold_price."""
        today = self._today()
        conditions = [
            status_is(CLOSED),
            self._date_in_window("l.sold_date", today),
            *price_bounds("l.sold_price", min_price, max_price),
        ]
        rows = await self._fetch_properties(
            "recent-sales", profile, conditions, cast_date("l.sold_date"), limit, today
        )
        return [row_to_property(row, today) for row in rows]

    async def get_under_contract(
        self,
        profile: AreaProfile | None = None,
        limit: int = DEFAULT_LIMIT,
        min_price: float | None = None,
        max_price: float | None = None,
    ) -> list[Property]:
        """Active Under Contract and Pending listings, newest contract first."""
        today = self._today()
        conditions = [
            status_in(UNDER_CONTRACT),
            *price_bounds("l.list_price", min_price, max_price),
        ]
        rows = await self._fetch_properties(
            "under-contract", profile, conditions, cast_date("l.under_contract_date"), limit, today
        )
        return [row_to_property(row, today) for row in rows]

    async def get_coming_soon(
        self,
        profile: AreaProfile | None = None,
        limit: int = DEFAULT_LIMIT,
        min_price: float | None = None,
        max_price: float | None = None,
    ) -> list[Property]:
        today = self._today()
        conditions = [status_is(COMING_SOON), *price_bounds("l.list_price", min_price, max_price)]
        rows = await self._fetch_properties(
            "coming-soon", profile, conditions, cast_date("l.listing_date"), limit, today
        )
        return [row_to_property(row, today) for row in rows]

    async def get_price_changes(
        self,
        profile: AreaProfile | None = None,
        limit: int = DEFAULT_LIMIT,
        min_price: float | None = None,
        max_price: float | None = None,
    ) -> list[PriceChangeProperty]:
        """Active listings whose list price moved inside the trailing window.

        A listing qualifies when price_change_timestamp falls in the window and
        prior_list_price is set and textually differs from list_price. Bounds
        apply to the current list_price.
        """
        today = self._today()
        conditions = [
            *self._price_change_conditions(today),
            *price_bounds("l.list_price", min_price, max_price),
        ]
        rows = await self._fetch_properties(
            "price-changes",
            profile,
            conditions,
            cast_timestamp("l.price_change_timestamp"),
            limit,
            today,
        )
        return [row_to_price_change(row, today) for row in rows]

    async def get_market_stats(
        self,
        profile: AreaProfile | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
    ) -> MarketStats:
        """Aggregate counts and price/DOM figures for an area in one statement.

        Price bounds apply to sold_price for Closed rows and to list_price for
        every other status.
        """
        today = self._today()
        area = self._compiler.compile(profile)

        filters = list(area.predicate_fragments)
        if min_price is not None or max_price is not None:
            sold = and_all([status_is(CLOSED), *price_bounds("l.sold_price", min_price, max_price)])
            listed = and_all(
                [
                    SqlFragment("COALESCE(l.status, '') != ?", (CLOSED,)),
                    *price_bounds("l.list_price", min_price, max_price),
                ]
            )
            filters.append(or_any([wrap("({})", sold), wrap("({})", listed)]))

        recent_sale = and_all([status_is(CLOSED), self._date_in_window("l.sold_date", today)])
        price_change = and_all(self._price_change_conditions(today))
        active_dom = SqlFragment(
            f"CASE WHEN l.status = ? THEN {days_between('l.listing_date', 'date(?)')} END",
            (ACTIVE, today.isoformat()),
        )
        active_price = SqlFragment(
            f"CASE WHEN l.status = ? THEN {cast_number('l.list_price')} END", (ACTIVE,)
        )
        sold_price = cast_number("l.sold_price")

        select_list = join_fragments(
            [
                wrap("COUNT(CASE WHEN {} THEN 1 END) AS total_active_listings", status_is(ACTIVE)),
                wrap("COUNT(CASE WHEN {} THEN 1 END) AS total_sales_last_30_days", recent_sale),
                wrap(
                    "COUNT(CASE WHEN {} THEN 1 END) AS total_under_contract",
                    status_in(UNDER_CONTRACT),
                ),
                wrap("COUNT(CASE WHEN {} THEN 1 END) AS total_coming_soon", status_is(COMING_SOON)),
                wrap(
                    "COUNT(CASE WHEN {} THEN 1 END) AS total_price_changes_last_30_days",
                    price_change,
                ),
                SqlFragment(
                    "AVG(CASE WHEN calculated_dom > 0 THEN calculated_dom END)"
                    " AS average_days_on_market"
                ),
                wrap(
                    "AVG(CASE WHEN {} THEN " + sold_price + " END) AS average_sold_price",
                    recent_sale,
                ),
                SqlFragment("AVG(active_list_price) AS average_list_price"),
                SqlFragment("MIN(active_list_price) AS min_list_price"),
                SqlFragment("MAX(active_list_price) AS max_list_price"),
            ],
            separator=",\n    ",
        )

        fragments = [
            SqlFragment(latest_listings_cte(self._tables) + ","),
            SqlFragment("area_listings AS (\nSELECT l.*,"),
            wrap("    {} AS calculated_dom,", active_dom),
            wrap("    {} AS active_list_price", active_price),
            SqlFragment("FROM latest_listings l"),
            area.join,
            SqlFragment("WHERE"),
            and_all(filters),
            SqlFragment(")"),
            SqlFragment("SELECT"),
            wrap("    {}", select_list),
            SqlFragment("FROM area_listings l"),
        ]
        sql, params = render(f for f in fragments if f.sql)
        row = await self._pool.fetch_one(sql, params) or {}
        logger.debug("stats_query_executed", area=profile.id if profile else None)

        return MarketStats(
            total_active_listings=row.get("total_active_listings") or 0,
            total_sales_last_30_days=row.get("total_sales_last_30_days") or 0,
            total_under_contract=row.get("total_under_contract") or 0,
            total_coming_soon=row.get("total_coming_soon") or 0,
            total_price_changes_last_30_days=row.get("total_price_changes_last_30_days") or 0,
            average_days_on_market=_round_or_none(row.get("average_days_on_market")),
            average_sold_price=_round_or_none(row.get("average_sold_price")),
            average_list_price=_round_or_none(row.get("average_list_price")),
            min_list_price=_round_or_none(row.get("min_list_price")),
            max_list_price=_round_or_none(row.get("max_list_price")),
        )

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    async def get_listing_by_id(self, listing_id: str) -> Property | None:
        """Current state of one listing, or None when the id is unknown."""
        today = self._today()
        sql, params = render(
            [
                SqlFragment(latest_listings_cte(self._tables)),
                SqlFragment(
                    "SELECT l.* FROM latest_listings l WHERE l.listing_id = ?", (listing_id,)
                ),
                SqlFragment("LIMIT 1"),
            ]
        )
        row = await self._pool.fetch_one(sql, params)
        return row_to_property(row, today) if row else None

    async def search_listings(self, criteria: SearchCriteria) -> list[Property]:
        """Free-form search; every numeric bound is guarded against blank text."""
        today = self._today()
        where = WhereBuilder().add_fragment(status_is(criteria.status))
        if criteria.city and criteria.city.lower() != "all":
            where.add_predicate(
                Predicate("l.city", "=", slug_to_display_name(criteria.city), case_insensitive=True)
            )
        where.extend(price_bounds("l.list_price", criteria.min_price, criteria.max_price))
        for column, operator, value in (
            ("l.total_bedrooms", ">=", criteria.min_beds),
            ("l.total_bedrooms", "<=", criteria.max_beds),
            ("l.baths_total", ">=", criteria.min_baths),
            ("l.baths_total", "<=", criteria.max_baths),
        ):
            if value is not None:
                where.add_predicate(Predicate(column, operator, value, numeric=True))
        if criteria.has_pool:
            where.add("l.private_pool = ?", "Yes")
        if criteria.waterfront:
            where.add("l.waterfront = ?", "Yes")

        sql, params = render(
            [
                SqlFragment(latest_listings_cte(self._tables)),
                SqlFragment("SELECT l.* FROM latest_listings l"),
                SqlFragment("WHERE"),
                where.build(),
                SqlFragment(
                    f"ORDER BY {cast_date('l.listing_date')} DESC NULLS LAST, l.listing_id"
                ),
                SqlFragment("LIMIT ?", (criteria.limit,)),
            ]
        )
        rows = await self._pool.fetch_all(sql, params)
        logger.debug("search_query_executed", rows=len(rows), predicates=len(where.fragments))
        return [row_to_property(row, today) for row in rows]

    async def get_available_cities(self) -> list[CitySummary]:
        """Distinct resolved-listing cities with their active listing counts.

        Cities differing only in case are merged under the canonical name.
        """
        sql, params = render(
            [
                SqlFragment(latest_listings_cte(self._tables)),
                SqlFragment(
                    "SELECT MAX(TRIM(l.city)) AS name,\n"
                    "       COUNT(CASE WHEN l.status = ? THEN 1 END) AS active_listings\n"
                    "FROM latest_listings l",
                    (ACTIVE,),
                ),
                SqlFragment(f"WHERE {present('TRIM(l.city)')}"),
                SqlFragment("GROUP BY LOWER(TRIM(l.city))\nORDER BY name"),
            ]
        )
        rows = await self._pool.fetch_all(sql, params)
        return [
            CitySummary(
                id=slugify(row["name"]),
                name=canonical_city_name([row["name"]]),
                active_listings=row["active_listings"],
            )
            for row in rows
        ]
