"""Property-based tests using Hypothesis.

Tests invariants of the core helpers: total coercion of text columns, slug
round trips, placeholder numbering, and the snapshot resolver.
"""

import sqlite3
from datetime import date

from hypothesis import given
from hypothesis import strategies as st

from market_report.db.schema import Tables, latest_listings_cte
from market_report.db.sql import SqlFragment, render
from market_report.utils.coercion import parse_date, parse_int, parse_number
from market_report.utils.market_calculator import calculate_days_on_market
from market_report.utils.text import slug_to_display_name, slugify

# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

store_text = st.one_of(st.none(), st.text(max_size=20))
words = st.lists(
    st.text(alphabet="abcdefghijklmnopqrstuvwxyz", min_size=1, max_size=8),
    min_size=1,
    max_size=4,
)
statuses = st.sampled_from(
    ["Active", "Closed", "Pending", "Active Under Contract", "Coming Soon", "Withdrawn", ""]
)
iso_dates = st.dates(min_value=date(2000, 1, 1), max_value=date(2030, 12, 31)).map(
    date.isoformat
)


# ---------------------------------------------------------------------------
# Coercion
# ---------------------------------------------------------------------------


class TestCoercionIsTotal:
    @given(value=store_text)
    def test_parse_number_never_raises(self, value: str | None) -> None:
        result = parse_number(value)
        assert isinstance(result, float)
        assert result == result  # never NaN

    @given(value=store_text)
    def test_parse_int_never_raises(self, value: str | None) -> None:
        assert isinstance(parse_int(value), int)

    @given(value=store_text)
    def test_parse_date_never_raises(self, value: str | None) -> None:
        result = parse_date(value)
        assert result is None or isinstance(result, date)

    @given(
        row=st.fixed_dictionaries(
            {
                "status": statuses,
                "listing_date": st.one_of(store_text, iso_dates),
                "sold_date": st.one_of(store_text, iso_dates),
                "under_contract_date": st.one_of(store_text, iso_dates),
            }
        )
    )
    def test_days_on_market_never_raises(self, row: dict[str, str | None]) -> None:
        assert isinstance(calculate_days_on_market(row, date(2025, 3, 1)), int)


# ---------------------------------------------------------------------------
# Slugs
# ---------------------------------------------------------------------------


class TestSlugs:
    @given(parts=words)
    def test_display_name_round_trips(self, parts: list[str]) -> None:
        name = " ".join(p.capitalize() for p in parts)
        assert slugify(slug_to_display_name(slugify(name))) == slugify(name)

    @given(name=st.text(alphabet="abcXYZ _-", max_size=30))
    def test_slug_has_no_spaces(self, name: str) -> None:
        slug = slugify(name)
        assert " " not in slug
        assert slug == slug.lower()


# ---------------------------------------------------------------------------
# Placeholder numbering
# ---------------------------------------------------------------------------


class TestRender:
    @given(counts=st.lists(st.integers(min_value=0, max_value=4), max_size=8))
    def test_numbering_is_dense_and_ordered(self, counts: list[int]) -> None:
        fragments = []
        value = 0
        for count in counts:
            params = tuple(range(value, value + count))
            value += count
            fragments.append(SqlFragment(" ".join("?" for _ in params) or "x", params))

        sql, params = render(fragments, "dollar")
        assert params == tuple(range(value))
        for index in range(1, value + 1):
            assert f"${index}" in sql
        assert f"${value + 1}" not in sql


# ---------------------------------------------------------------------------
# Snapshot resolver
# ---------------------------------------------------------------------------

snapshot = st.tuples(
    st.sampled_from(["A", "B", "C", None]),
    st.sampled_from(["2025-01-01T00:00:00", "2025-01-02T00:00:00", "2025-01-03T00:00:00"]),
)


class TestSnapshotResolver:
    @given(rows=st.lists(snapshot, max_size=12))
    def test_one_row_per_id_latest_then_last_inserted(
        self, rows: list[tuple[str | None, str]]
    ) -> None:
        tables = Tables()
        conn = sqlite3.connect(":memory:")
        try:
            conn.execute(
                f"CREATE TABLE {tables.listings} (listing_id TEXT, timestamp TEXT, seq INT)"
            )
            conn.executemany(
                f"INSERT INTO {tables.listings} VALUES (?, ?, ?)",
                [(lid, ts, seq) for seq, (lid, ts) in enumerate(rows)],
            )
            resolved = conn.execute(
                latest_listings_cte(tables) + " SELECT listing_id, seq FROM latest_listings"
            ).fetchall()
        finally:
            conn.close()

        expected: dict[str, tuple[str, int]] = {}
        for seq, (lid, ts) in enumerate(rows):
            if lid is None:
                continue
            if lid not in expected or ts >= expected[lid][0]:
                expected[lid] = (ts, seq)

        assert len(resolved) == len({lid for lid, _ in resolved})
        assert dict(resolved) == {lid: seq for lid, (_, seq) in expected.items()}
