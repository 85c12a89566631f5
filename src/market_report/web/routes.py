"""JSON API routes for area profiles, market reports and property lookups."""

from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from market_report.errors import AreaNotFoundError, InvalidFilterTypeError
from market_report.logging import get_logger
from market_report.models import MarketStats, ReportKind, parse_area_type
from market_report.reports import AreaReportService, ReportResult
from market_report.web.filters import ReportParamsDep, SearchDep

logger = get_logger(__name__)

router = APIRouter()

# Error label per report for the generic 500 message
_REPORT_LABELS = {
    ReportKind.ACTIVE_LISTINGS: "active listings",
    ReportKind.RECENT_SALES: "recent sales",
    ReportKind.UNDER_CONTRACT: "under contract listings",
    ReportKind.COMING_SOON: "coming soon listings",
    ReportKind.PRICE_CHANGES: "price changes",
    ReportKind.STATS: "market stats",
}


def _get_reports(request: Request) -> AreaReportService:
    return request.app.state.reports  # type: ignore[no-any-return]


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def _serialize(result: ReportResult) -> Any:
    if isinstance(result, MarketStats):
        return result.model_dump(mode="json", by_alias=True)
    return [item.model_dump(mode="json", by_alias=True) for item in result]


def _not_found() -> JSONResponse:
    return _error("Area profile not found", 404)


def _invalid_type(e: InvalidFilterTypeError) -> JSONResponse:
    return _error(f"Invalid area type: {e.token}", 400)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


@router.get("/health")
@router.get("/api/health")
async def health_check() -> JSONResponse:
    """Liveness check; does not touch the store."""
    return JSONResponse({"status": "ok", "timestamp": datetime.now(UTC).isoformat()})


# ---------------------------------------------------------------------------
# Area profiles
# ---------------------------------------------------------------------------


@router.get("/api/areas")
async def list_areas(request: Request, type: str | None = None) -> JSONResponse:  # noqa: A002
    """All known area profiles, optionally of one type."""
    reports = _get_reports(request)
    try:
        area_type = parse_area_type(type, allow_lifestyle=True)
        profiles = await reports.provider.list_profiles(area_type)
    except InvalidFilterTypeError as e:
        return _invalid_type(e)
    except Exception:
        logger.error("area_list_failed", area_type=type, exc_info=True)
        return _error("Failed to fetch area profiles", 500)
    return JSONResponse([p.model_dump(mode="json", by_alias=True) for p in profiles])


@router.get("/api/areas/{area_id}")
async def get_area(
    request: Request, area_id: str, type: str | None = None  # noqa: A002
) -> JSONResponse:
    """One area profile; 404 when the id is unknown."""
    reports = _get_reports(request)
    try:
        area_type = parse_area_type(type)
        profile = await reports.provider.require_profile(area_id, area_type)
    except InvalidFilterTypeError as e:
        return _invalid_type(e)
    except AreaNotFoundError:
        return _not_found()
    except Exception:
        logger.error("area_lookup_failed", area_id=area_id, exc_info=True)
        return _error("Failed to fetch area profile", 500)
    return JSONResponse(profile.model_dump(mode="json", by_alias=True))


@router.get("/api/areas/{area_id}/featured")
async def get_featured(request: Request, area_id: str, params: ReportParamsDep) -> JSONResponse:
    """Newest active listing for the area, or null."""
    reports = _get_reports(request)
    try:
        listing = await reports.get_featured_listing(
            area_id,
            area_type=parse_area_type(params.area_type),
            min_price=params.min_price,
            max_price=params.max_price,
        )
    except InvalidFilterTypeError as e:
        return _invalid_type(e)
    except AreaNotFoundError:
        return _not_found()
    except Exception:
        logger.error("featured_query_failed", area_id=area_id, exc_info=True)
        return _error("Failed to fetch featured property", 500)
    return JSONResponse(listing.model_dump(mode="json", by_alias=True) if listing else None)


@router.get("/api/areas/{area_id}/{report}")
async def get_area_report(
    request: Request, area_id: str, report: ReportKind, params: ReportParamsDep
) -> JSONResponse:
    """Run one report for an area profile."""
    reports = _get_reports(request)
    try:
        result = await reports.get_report(
            report,
            area_id,
            area_type=parse_area_type(params.area_type),
            limit=params.limit,
            min_price=params.min_price,
            max_price=params.max_price,
        )
    except InvalidFilterTypeError as e:
        return _invalid_type(e)
    except AreaNotFoundError:
        return _not_found()
    except Exception:
        logger.error("area_report_failed", area_id=area_id, report=report.value, exc_info=True)
        return _error(f"Failed to fetch area {_REPORT_LABELS[report]}", 500)
    return JSONResponse(_serialize(result))


# ---------------------------------------------------------------------------
# City-level market reports
# ---------------------------------------------------------------------------


@router.get("/api/market/{report}")
async def get_market_report(
    request: Request,
    report: ReportKind,
    params: ReportParamsDep,
    city: str | None = None,
    area: str | None = None,
) -> JSONResponse:
    """Report across one city (``city`` or ``area``) or every city."""
    reports = _get_reports(request)
    try:
        result = await reports.get_city_report(
            report,
            city or area,
            limit=params.limit,
            min_price=params.min_price,
            max_price=params.max_price,
        )
    except Exception:
        logger.error("market_report_failed", city=city or area, report=report.value, exc_info=True)
        return _error(f"Failed to fetch {_REPORT_LABELS[report]}", 500)
    return JSONResponse(_serialize(result))


# ---------------------------------------------------------------------------
# Properties and cities
# ---------------------------------------------------------------------------


@router.get("/api/properties/search")
async def search_properties(request: Request, criteria: SearchDep) -> JSONResponse:
    reports = _get_reports(request)
    try:
        results = await reports.queries.search_listings(criteria)
    except Exception:
        logger.error("property_search_failed", exc_info=True)
        return _error("Failed to search properties", 500)
    return JSONResponse([p.model_dump(mode="json", by_alias=True) for p in results])


@router.get("/api/properties/{listing_id}")
async def get_property(request: Request, listing_id: str) -> JSONResponse:
    reports = _get_reports(request)
    try:
        listing = await reports.queries.get_listing_by_id(listing_id)
    except Exception:
        logger.error("property_query_failed", listing_id=listing_id, exc_info=True)
        return _error("Failed to fetch property", 500)
    if listing is None:
        return _error("Property not found", 404)
    return JSONResponse(listing.model_dump(mode="json", by_alias=True))


@router.get("/api/cities")
async def list_cities(request: Request) -> JSONResponse:
    reports = _get_reports(request)
    try:
        cities = await reports.queries.get_available_cities()
    except Exception:
        logger.error("city_query_failed", exc_info=True)
        return _error("Failed to fetch cities", 500)
    return JSONResponse([c.model_dump(mode="json", by_alias=True) for c in cities])
