"""HTTP surface for the market reports."""

from market_report.web.app import create_app

__all__ = ["create_app"]
