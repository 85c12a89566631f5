"""Exceptions raised by the market report core."""


class MarketReportError(Exception):
    """Base class for market report failures."""


class AreaNotFoundError(MarketReportError):
    """Raised when an area identifier matches no known area profile."""

    def __init__(self, area_id: str, area_type: str | None = None) -> None:
        self.area_id = area_id
        self.area_type = area_type
        label = f"{area_type}/{area_id}" if area_type else area_id
        super().__init__(f"Area profile not found: {label}")


class InvalidFilterTypeError(MarketReportError, ValueError):
    """Raised when an area-type token is outside the recognized set."""

    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__(f"Invalid area filter type: {token!r}")


class StoreUnavailableError(MarketReportError):
    """Raised when the listings store cannot serve a query.

    Covers pool exhaustion, connection failures and query execution errors.
    The message never carries SQL text.
    """
