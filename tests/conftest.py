"""Shared pytest fixtures."""

import os
import sqlite3
import sys
from collections.abc import AsyncGenerator, Callable, Iterable, Iterator, Mapping
from datetime import date
from pathlib import Path

import pytest
import pytest_asyncio
import structlog
from hypothesis import HealthCheck, settings

from market_report.config import Settings
from market_report.db import ListingStore, Tables

# Fixed clock for trailing windows and days on market.
# The 30-day window starts at 2025-01-30.
TODAY = date(2025, 3, 1)


def pytest_configure(config: pytest.Config) -> None:
    """Force line-buffered stdout when piped."""
    if hasattr(sys.stdout, "reconfigure") and not sys.stdout.isatty():
        sys.stdout.reconfigure(line_buffering=True)
    if hasattr(sys.stderr, "reconfigure") and not sys.stderr.isatty():
        sys.stderr.reconfigure(line_buffering=True)


# Hypothesis settings profiles for different environments
settings.register_profile("fast", max_examples=10)
settings.register_profile(
    "ci",
    max_examples=200,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "fast"))


@pytest.fixture(autouse=True)
def _isolate_settings_from_dotenv(monkeypatch: pytest.MonkeyPatch) -> None:
    """Prevent the local .env file from leaking into test Settings instances."""
    monkeypatch.setattr(
        Settings,
        "model_config",
        {**Settings.model_config, "env_file": None},
    )


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Drop logging configuration made by the code under test (it may hold a captured stream)."""
    yield
    structlog.reset_defaults()


# ---------------------------------------------------------------------------
# Store seeding
# ---------------------------------------------------------------------------

Row = dict[str, str | None]


def _make_listing(listing_id: str | None, **fields: str | None) -> Row:
    """A raw snapshot row with defaults; every value is text, like the feed."""
    row: Row = {
        "listing_id": listing_id,
        "timestamp": "2025-02-01T00:00:00",
        "status": "Active",
        "city": "Jupiter",
        "street_number": "100",
        "street_name": "Ocean Dr",
        "parcel_id": "",
        "list_price": "500000",
        "listing_date": "2025-02-01",
    }
    row.update(fields)
    return row


def _make_development(name: str | None, **fields: str | None) -> Row:
    row: Row = {
        "parcel_number": "",
        "property_address_line_1": "",
        "development_name": name,
        "subdivision_name": None,
        "zone_name": None,
        "region_name": None,
    }
    row.update(fields)
    return row


def _insert(conn: sqlite3.Connection, table: str, row: Mapping[str, str | None]) -> None:
    columns = list(row)
    quoted = ", ".join(f'"{c}"' for c in columns)
    markers = ", ".join("?" for _ in columns)
    conn.execute(f"INSERT INTO {table} ({quoted}) VALUES ({markers})", [row[c] for c in columns])


def _seed_store(
    db_path: Path,
    listings: Iterable[Mapping[str, str | None]] = (),
    developments: Iterable[Mapping[str, str | None]] = (),
    tables: Tables | None = None,
) -> None:
    """Create the schema and insert rows synchronously, in the given order."""
    tables = tables or Tables()
    conn = sqlite3.connect(db_path)
    try:
        for statement in tables.schema_statements():
            conn.execute(statement)
        for row in listings:
            _insert(conn, tables.listings, row)
        for row in developments:
            _insert(conn, tables.developments, row)
        conn.commit()
    finally:
        conn.close()


@pytest.fixture(scope="session")
def today() -> date:
    return TODAY


@pytest.fixture(scope="session")
def listing() -> Callable[..., Row]:
    """Factory for raw listing snapshot rows."""
    return _make_listing


@pytest.fixture(scope="session")
def development() -> Callable[..., Row]:
    """Factory for development table rows."""
    return _make_development


@pytest.fixture(scope="session")
def seed_store() -> Callable[..., None]:
    """Synchronous seeding of a database file with listings and developments."""
    return _seed_store


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "mls.db"


@pytest_asyncio.fixture
async def make_store(
    tmp_path: Path,
) -> AsyncGenerator[Callable[..., ListingStore], None]:
    """Factory that seeds a fresh database file and returns a store over it."""
    stores: list[ListingStore] = []

    def _make(
        listings: Iterable[Mapping[str, str | None]] = (),
        developments: Iterable[Mapping[str, str | None]] = (),
        **kwargs: object,
    ) -> ListingStore:
        path = tmp_path / f"mls_{len(stores)}.db"
        _seed_store(path, listings, developments)
        store = ListingStore(str(path), today=lambda: TODAY, **kwargs)  # type: ignore[arg-type]
        stores.append(store)
        return store

    yield _make

    for store in stores:
        await store.close()
