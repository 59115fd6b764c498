"""Ranked lists (top referrers, most visited pages)."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import pandas as pd

from .rows import RankedRow


@dataclass(frozen=True)
class RankedRecord:
    label: str
    value: Any


def project(rows: Iterable[RankedRow] | None) -> list[RankedRecord]:
    """Map rows 1:1 to records in the order the service returned them."""
    if rows is None:
        return []
    return [RankedRecord(label=row.label, value=row.value) for row in rows]


def records_to_frame(
    records: Iterable[RankedRecord],
    *,
    label: str = "url",
    value: str = "pageViews",
) -> pd.DataFrame:
    """Return DataFrame[label, value] keeping record order."""
    return pd.DataFrame(
        [(r.label, r.value) for r in records],
        columns=[label, value],
    )
