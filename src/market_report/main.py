"""Command-line entry point: serve the API, print a report, or create the schema."""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from typing import Any

from market_report.areas import create_area_provider
from market_report.config import Settings
from market_report.db import ListingStore
from market_report.errors import AreaNotFoundError, InvalidFilterTypeError, StoreUnavailableError
from market_report.logging import configure_logging, get_logger
from market_report.models import MarketStats, ReportKind, parse_area_type
from market_report.reports import AreaReportService

logger = get_logger(__name__)

EXIT_STORE_FAILURE = 1
EXIT_BAD_AREA = 2


async def run_report(
    settings: Settings,
    kind: ReportKind,
    *,
    area: str | None = None,
    area_type: str | None = None,
    limit: int = 50,
    min_price: float | None = None,
    max_price: float | None = None,
) -> Any:
    """Run one report and return it as JSON-ready data.

    Without ``area`` the report covers every city.

    Raises:
        AreaNotFoundError: Unknown area id.
        InvalidFilterTypeError: Unknown area type token.
        StoreUnavailableError: The store could not serve the query.
    """
    parsed_type = parse_area_type(area_type)
    store = ListingStore.from_settings(settings)
    try:
        service = AreaReportService(
            create_area_provider(settings, store.pool, store.tables), store.queries
        )
        limit = max(1, min(settings.max_limit, limit))
        if area:
            result = await service.get_report(
                kind,
                area,
                area_type=parsed_type,
                limit=limit,
                min_price=min_price,
                max_price=max_price,
            )
        else:
            result = await service.get_city_report(
                kind, None, limit=limit, min_price=min_price, max_price=max_price
            )
    finally:
        await store.close()

    if isinstance(result, MarketStats):
        return result.model_dump(mode="json", by_alias=True)
    return [item.model_dump(mode="json", by_alias=True) for item in result]


async def run_init_db(settings: Settings) -> None:
    """Create the listings and development tables in the configured database."""
    store = ListingStore.from_settings(settings)
    try:
        await store.initialize()
    finally:
        await store.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Market Report - per-area real-estate market data from MLS snapshots"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug-level logging for troubleshooting",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("serve", help="Start the HTTP API server")
    subparsers.add_parser("init-db", help="Create the listings and development tables")

    report = subparsers.add_parser("report", help="Print one report as JSON")
    report.add_argument("kind", choices=[k.value for k in ReportKind], help="Report kind")
    report.add_argument("--area", default=None, help="Area id (slug); omit for every city")
    report.add_argument(
        "--type",
        dest="area_type",
        default=None,
        help="Expected area type: city, development, subdivision, zone or region",
    )
    report.add_argument("--limit", type=int, default=50, help="Maximum rows to return")
    report.add_argument("--min-price", type=float, default=None, help="Lower price bound")
    report.add_argument("--max-price", type=float, default=None, help="Upper price bound")
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        settings = Settings()
    except Exception as e:
        print(f"Error: Failed to load settings. {e}", file=sys.stderr)
        print("Settings are read from MARKET_REPORT_* variables or .env", file=sys.stderr)
        sys.exit(EXIT_STORE_FAILURE)

    configure_logging(
        json_output=settings.log_json,
        level=logging.DEBUG if args.debug else settings.log_level,
    )

    if args.command == "serve":
        import uvicorn

        from market_report.web.app import create_app

        app = create_app(settings)
        uvicorn.run(app, host=settings.web_host, port=settings.web_port, log_level="info")
    elif args.command == "init-db":
        try:
            asyncio.run(run_init_db(settings))
        except StoreUnavailableError as e:
            logger.error("init_db_failed", error=str(e))
            sys.exit(EXIT_STORE_FAILURE)
    else:
        try:
            data = asyncio.run(
                run_report(
                    settings,
                    ReportKind(args.kind),
                    area=args.area,
                    area_type=args.area_type,
                    limit=args.limit,
                    min_price=args.min_price,
                    max_price=args.max_price,
                )
            )
        except (AreaNotFoundError, InvalidFilterTypeError) as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(EXIT_BAD_AREA)
        except StoreUnavailableError as e:
            logger.error("report_failed", kind=args.kind, error=str(e))
            sys.exit(EXIT_STORE_FAILURE)
        print(json.dumps(data, indent=2))


if __name__ == "__main__":
    main()
