"""Structured SQL assembly with positional parameters.

Fragments are written with ``?`` markers and carry their bound values in
textual order. Numbering happens once, in ``render``, so predicates can be
added or dropped conditionally without tracking placeholder indexes by hand.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any, Final, Literal

ParamStyle = Literal["qmark", "numeric", "dollar"]

_MARKER: Final = re.compile(r"\?")
_COMPARISON_OPERATORS: Final = frozenset({"=", "!=", "<", "<=", ">", ">="})
_COLLAPSE_PASSES: Final = 6


@dataclass(frozen=True)
class SqlFragment:
    """A piece of SQL and the values bound to its ``?`` markers."""

    sql: str
    params: tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        markers = len(_MARKER.findall(self.sql))
        if markers != len(self.params):
            msg = f"fragment has {markers} markers but {len(self.params)} params"
            raise ValueError(msg)

    @property
    def param_count(self) -> int:
        return len(self.params)


def join_fragments(fragments: Iterable[SqlFragment], separator: str = "\n") -> SqlFragment:
    """Concatenate fragments, keeping parameters in textual order."""
    parts = list(fragments)
    return SqlFragment(
        separator.join(p.sql for p in parts),
        tuple(value for p in parts for value in p.params),
    )


def and_all(fragments: Sequence[SqlFragment]) -> SqlFragment:
    """AND predicates together; an empty list is always true."""
    if not fragments:
        return SqlFragment("1=1")
    return join_fragments(fragments, separator="\n  AND ")


def or_any(fragments: Sequence[SqlFragment]) -> SqlFragment:
    """OR predicates together inside parentheses; an empty list is always false."""
    if not fragments:
        return SqlFragment("1=0")
    inner = join_fragments(fragments, separator=" OR ")
    return SqlFragment(f"({inner.sql})", inner.params)


def render(
    fragments: Iterable[SqlFragment], style: ParamStyle = "qmark"
) -> tuple[str, tuple[Any, ...]]:
    """Render fragments into final SQL text and a flat parameter tuple.

    Args:
        fragments: Query pieces in textual order.
        style: ``qmark`` keeps ``?``; ``numeric`` emits ``?1, ?2 ...`` (SQLite);
            ``dollar`` emits ``$1, $2 ...`` (PostgreSQL drivers).

    Returns:
        Tuple of (sql, params).
    """
    combined = join_fragments(fragments)
    if style == "qmark":
        return combined.sql, combined.params

    prefix = "?" if style == "numeric" else "$"
    counter = iter(range(1, combined.param_count + 1))
    sql = _MARKER.sub(lambda _: f"{prefix}{next(counter)}", combined.sql)
    return sql, combined.params


# ---------------------------------------------------------------------------
# Guarded casts for text-typed columns
# ---------------------------------------------------------------------------


def present(column: str) -> str:
    """Non-null, non-empty guard for a text column."""
    return f"{column} IS NOT NULL AND {column} != ''"


def numeric_text(column: str) -> str:
    """Text column with "$" and thousands separators removed."""
    return f"TRIM(REPLACE(REPLACE({column}, ',', ''), '$', ''))"


def cast_number(column: str) -> str:
    """Numeric value of a text column, or NULL when blank or not a number.

    CAST turns junk such as "n/a" into 0.0, while a REAL-affinity comparison
    converts only well-formed numeric text, so the self-comparison keeps real
    numbers and drops junk. Accepts exactly what ``parse_number`` accepts.
    """
    text = numeric_text(column)
    return (
        f"(CASE WHEN {present(column)} AND CAST({text} AS REAL) = {text}"
        f" THEN CAST({text} AS REAL) ELSE NULL END)"
    )


def cast_date(column: str) -> str:
    """Date value of a text column, or NULL when blank or unparseable."""
    return f"(CASE WHEN {present(column)} THEN date({column}) ELSE NULL END)"


def cast_timestamp(column: str) -> str:
    """Timestamp value of a text column, or NULL when blank or unparseable."""
    return f"(CASE WHEN {present(column)} THEN datetime({column}) ELSE NULL END)"


def days_between(start_column: str, end_expr: str) -> str:
    """Whole days from a text date column to a date expression, truncated toward zero."""
    return f"CAST(julianday({end_expr}) - julianday({cast_date(start_column)}) AS INTEGER)"


def normalized_text(expr: str) -> str:
    """Lowercased, trimmed text with whitespace runs collapsed to one space.

    Tabs and line breaks become spaces; each REPLACE pass halves a run of
    spaces, so runs of up to 64 collapse fully.
    """
    spaced = f"COALESCE({expr}, '')"
    for char_code in (9, 10, 13):
        spaced = f"REPLACE({spaced}, char({char_code}), ' ')"
    for _ in range(_COLLAPSE_PASSES):
        spaced = f"REPLACE({spaced}, '  ', ' ')"
    return f"LOWER(TRIM({spaced}))"


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Predicate:
    """A single comparison ``field operator value``.

    Numeric predicates compare the guarded numeric cast of a text column, so
    blank and junk values drop out instead of comparing as zero.
    """

    field: str
    operator: str
    value: Any
    numeric: bool = False
    case_insensitive: bool = False

    def __post_init__(self) -> None:
        if self.operator not in _COMPARISON_OPERATORS:
            raise ValueError(f"unsupported operator: {self.operator!r}")

    def to_fragment(self) -> SqlFragment:
        if self.numeric:
            return SqlFragment(f"{cast_number(self.field)} {self.operator} ?", (self.value,))
        if self.case_insensitive:
            return SqlFragment(f"LOWER(TRIM({self.field})) {self.operator} LOWER(?)", (self.value,))
        return SqlFragment(f"{self.field} {self.operator} ?", (self.value,))


@dataclass
class WhereBuilder:
    """Accumulates predicate fragments for a WHERE clause."""

    fragments: list[SqlFragment] = field(default_factory=list)

    def add(self, sql: str, *params: Any) -> WhereBuilder:
        self.fragments.append(SqlFragment(sql, params))
        return self

    def add_fragment(self, frag: SqlFragment) -> WhereBuilder:
        self.fragments.append(frag)
        return self

    def add_predicate(self, predicate: Predicate) -> WhereBuilder:
        self.fragments.append(predicate.to_fragment())
        return self

    def extend(self, fragments: Iterable[SqlFragment]) -> WhereBuilder:
        self.fragments.extend(fragments)
        return self

    @property
    def param_count(self) -> int:
        return sum(f.param_count for f in self.fragments)

    def build(self) -> SqlFragment:
        return and_all(self.fragments)
