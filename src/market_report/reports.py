"""Area report service: resolve an area, then run the requested report."""

from __future__ import annotations

from market_report.areas import AreaProfileProvider, city_profile
from market_report.db.market_queries import DEFAULT_LIMIT, MarketQueryService
from market_report.logging import get_logger
from market_report.models import (
    AreaProfile,
    AreaType,
    MarketStats,
    PriceChangeProperty,
    Property,
    ReportKind,
)

logger = get_logger(__name__)

ReportResult = list[Property] | list[PriceChangeProperty] | MarketStats


class AreaReportService:
    """Dispatches report kinds to the query assembler for a resolved area."""

    def __init__(self, provider: AreaProfileProvider, queries: MarketQueryService) -> None:
        self.provider = provider
        self.queries = queries

    async def run(
        self,
        kind: ReportKind,
        profile: AreaProfile | None,
        *,
        limit: int = DEFAULT_LIMIT,
        min_price: float | None = None,
        max_price: float | None = None,
    ) -> ReportResult:
        """Run one report against an already-resolved profile (None = all areas)."""
        q = self.queries
        match kind:
            case ReportKind.ACTIVE_LISTINGS:
                return await q.get_active_listings(profile, limit, min_price, max_price)
            case ReportKind.RECENT_SALES:
                return await q.get_recent_sales(profile, limit, min_price, max_price)
            case ReportKind.UNDER_CONTRACT:
                return await q.get_under_contract(profile, limit, min_price, max_price)
            case ReportKind.COMING_SOON:
                return await q.get_coming_soon(profile, limit, min_price, max_price)
            case ReportKind.PRICE_CHANGES:
                return await q.get_price_changes(profile, limit, min_price, max_price)
            case ReportKind.STATS:
                return await q.get_market_stats(profile, min_price, max_price)
        raise ValueError(f"unknown report kind: {kind!r}")

    async def get_report(
        self,
        kind: ReportKind,
        area_id: str,
        *,
        area_type: AreaType | None = None,
        limit: int = DEFAULT_LIMIT,
        min_price: float | None = None,
        max_price: float | None = None,
    ) -> ReportResult:
        """Resolve ``area_id`` and run the report for it.

        Raises:
            AreaNotFoundError: If the id matches no area. An area that exists
                but has no matching listings returns an empty result instead.
            StoreUnavailableError: If the store cannot serve the query.
        """
        profile = await self.provider.require_profile(area_id, area_type)
        result = await self.run(
            kind, profile, limit=limit, min_price=min_price, max_price=max_price
        )
        logger.info(
            "report_served",
            kind=kind.value,
            area=profile.id,
            area_type=profile.type.value,
            rows=len(result) if isinstance(result, list) else None,
        )
        return result

    async def get_city_report(
        self,
        kind: ReportKind,
        city: str | None,
        *,
        limit: int = DEFAULT_LIMIT,
        min_price: float | None = None,
        max_price: float | None = None,
    ) -> ReportResult:
        """City-only report without profile resolution; None or "all" means every city."""
        profile = None
        if city and city.strip() and city.strip().lower() != "all":
            profile = city_profile(city)
        return await self.run(
            kind, profile, limit=limit, min_price=min_price, max_price=max_price
        )

    async def get_featured_listing(
        self,
        area_id: str,
        *,
        area_type: AreaType | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
    ) -> Property | None:
        """Newest active listing for the area, or None when it has none."""
        profile = await self.provider.require_profile(area_id, area_type)
        listings = await self.queries.get_active_listings(profile, 1, min_price, max_price)
        return listings[0] if listings else None
