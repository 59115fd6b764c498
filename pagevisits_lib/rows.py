"""Typed views of raw report rows.

Raw rows are positional tuples whose layout follows the query's
dimensions then metrics. They are parsed here once so the reconciler and
projector never index into tuples.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from typing import Any

from .date_range import parse_compact_date


@dataclass(frozen=True)
class SeriesRow:
    path: str
    date: date
    value: Any


@dataclass(frozen=True)
class RankedRow:
    label: str
    value: Any


def _check_arity(row: Sequence, expected: int) -> None:
    if isinstance(row, (str, bytes)) or len(row) != expected:
        raise ValueError(f"Expected a row of {expected} fields. got={row!r}")


def parse_series_rows(rows: Iterable[Sequence] | None) -> list[SeriesRow] | None:
    """Parse ``(path, YYYYMMDD, value)`` tuples.

    ``None`` is passed through as "no data". A malformed date raises
    ``ValueError``.
    """
    if rows is None:
        return None
    parsed: list[SeriesRow] = []
    for row in rows:
        _check_arity(row, 3)
        path, day, value = row
        parsed.append(SeriesRow(path=str(path), date=parse_compact_date(day), value=value))
    return parsed


def parse_ranked_rows(rows: Iterable[Sequence] | None) -> list[RankedRow] | None:
    """Parse ``(label, value)`` tuples, keeping order. ``None`` passes through."""
    if rows is None:
        return None
    parsed: list[RankedRow] = []
    for row in rows:
        _check_arity(row, 2)
        label, value = row
        parsed.append(RankedRow(label=str(label), value=value))
    return parsed
