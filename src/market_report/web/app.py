"""FastAPI application factory for the market report API."""

from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import date

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from market_report import __version__
from market_report.areas import create_area_provider
from market_report.config import Settings
from market_report.db import ListingStore
from market_report.logging import configure_logging, get_logger
from market_report.reports import AreaReportService

logger = get_logger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response


def create_app(
    settings: Settings | None = None,
    *,
    initialize_schema: bool = False,
    today: Callable[[], date] = date.today,
) -> FastAPI:
    """Create the FastAPI application.

    Args:
        settings: Application settings. Loaded from env if not provided.
        initialize_schema: Create the store tables on startup (local development).
        today: Clock for trailing windows and days on market.
    """
    if settings is None:
        settings = Settings()

    configure_logging(json_output=settings.log_json, level=settings.log_level)

    store = ListingStore.from_settings(settings, today=today)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if initialize_schema:
            await store.initialize()
        app.state.settings = settings
        app.state.store = store
        app.state.reports = AreaReportService(
            create_area_provider(settings, store.pool, store.tables), store.queries
        )
        logger.info(
            "web_server_started",
            db_path=settings.database_path,
            area_source=settings.area_source,
            pool_size=store.pool.size,
        )

        yield

        await store.close()
        logger.info("web_server_stopped")

    app = FastAPI(title="Market Report", version=__version__, lifespan=lifespan)

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    from market_report.web.routes import router

    app.include_router(router)

    return app
