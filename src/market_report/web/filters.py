"""Query-parameter models and FastAPI dependencies for report and search endpoints.

The frontend sends camelCase names (``minPrice``); scripts tend to send
snake_case (``min_price``). Both are accepted, camelCase winning when both
are present.
"""

from __future__ import annotations

import math
from typing import Annotated, Any

from fastapi import Depends, HTTPException, Request
from pydantic import BaseModel, ValidationError, ValidationInfo, field_validator

from market_report.models import ListingStatus, SearchCriteria


def _parse_optional_float(value: object) -> float | None:
    """Parse a string to a non-negative float, or None for blank/invalid values."""
    if value is None:
        return None
    if isinstance(value, int | float) and not isinstance(value, bool):
        number = float(value)
    else:
        text = str(value).strip().replace(",", "")
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if not math.isfinite(number) or number < 0:
        return None
    return number


def _parse_optional_int(value: object) -> int | None:
    number = _parse_optional_float(value)
    return None if number is None else int(number)


def _parse_flag(value: object) -> bool:
    return str(value).strip().lower() == "true" if value is not None else False


def _first(*values: str | None) -> str | None:
    for value in values:
        if value is not None and value.strip():
            return value
    return None


# ---------------------------------------------------------------------------
# Report parameters
# ---------------------------------------------------------------------------


class ReportParams(BaseModel):
    """Validated report query parameters.

    Unparseable prices are ignored rather than rejected. ``limit`` is clamped
    to 1..max_limit, where max_limit comes from the validation context.
    """

    limit: int = 50
    min_price: float | None = None
    max_price: float | None = None
    area_type: str | None = None

    @field_validator("min_price", "max_price", mode="before")
    @classmethod
    def coerce_price(cls, v: object) -> float | None:
        return _parse_optional_float(v)

    @field_validator("limit", mode="before")
    @classmethod
    def clamp_limit(cls, v: object, info: ValidationInfo) -> int:
        context: dict[str, Any] = info.context or {}
        default = context.get("default_limit", 50)
        max_limit = context.get("max_limit", 500)
        parsed = _parse_optional_int(v)
        if parsed is None:
            parsed = default
        return max(1, min(max_limit, parsed))

    @field_validator("area_type", mode="before")
    @classmethod
    def clean_area_type(cls, v: object) -> str | None:
        if v is None:
            return None
        s = str(v).strip()
        return s if s else None


def _limit_context(request: Request) -> dict[str, int]:
    settings = request.app.state.settings
    return {"default_limit": settings.default_limit, "max_limit": settings.max_limit}


def parse_report_params(
    request: Request,
    limit: str | None = None,
    minPrice: str | None = None,  # noqa: N803
    maxPrice: str | None = None,  # noqa: N803
    min_price: str | None = None,
    max_price: str | None = None,
    type: str | None = None,  # noqa: A002
) -> ReportParams:
    """FastAPI dependency that parses query params into ReportParams."""
    return ReportParams.model_validate(
        {
            "limit": limit,
            "min_price": _first(minPrice, min_price),
            "max_price": _first(maxPrice, max_price),
            "area_type": type,
        },
        context=_limit_context(request),
    )


ReportParamsDep = Annotated[ReportParams, Depends(parse_report_params)]


# ---------------------------------------------------------------------------
# Property search
# ---------------------------------------------------------------------------


def parse_search_criteria(
    request: Request,
    city: str | None = None,
    area: str | None = None,
    status: str | None = None,
    limit: str | None = None,
    minPrice: str | None = None,  # noqa: N803
    maxPrice: str | None = None,  # noqa: N803
    minBeds: str | None = None,  # noqa: N803
    maxBeds: str | None = None,  # noqa: N803
    minBaths: str | None = None,  # noqa: N803
    maxBaths: str | None = None,  # noqa: N803
    hasPool: str | None = None,  # noqa: N803
    waterfront: str | None = None,
    min_price: str | None = None,
    max_price: str | None = None,
    min_beds: str | None = None,
    max_beds: str | None = None,
    min_baths: str | None = None,
    max_baths: str | None = None,
    has_pool: str | None = None,
) -> SearchCriteria:
    """FastAPI dependency that parses property search params.

    Raises:
        HTTPException: 400 when the bounds are contradictory (min above max).
    """
    context = _limit_context(request)
    parsed_limit = _parse_optional_int(limit)
    try:
        return SearchCriteria(
            city=_first(city, area),
            status=(status or "").strip() or ListingStatus.ACTIVE.value,
            min_price=_parse_optional_float(_first(minPrice, min_price)),
            max_price=_parse_optional_float(_first(maxPrice, max_price)),
            min_beds=_parse_optional_int(_first(minBeds, min_beds)),
            max_beds=_parse_optional_int(_first(maxBeds, max_beds)),
            min_baths=_parse_optional_float(_first(minBaths, min_baths)),
            max_baths=_parse_optional_float(_first(maxBaths, max_baths)),
            has_pool=_parse_flag(_first(hasPool, has_pool)),
            waterfront=_parse_flag(waterfront),
            limit=max(
                1,
                min(
                    context["max_limit"],
                    parsed_limit if parsed_limit is not None else context["default_limit"],
                ),
            ),
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail="Invalid search parameters") from e


SearchDep = Annotated[SearchCriteria, Depends(parse_search_criteria)]
