"""Zero-filled per-URL daily series.

The report service omits days with no traffic, so the series is built as
a scaffold of zeros first and observed rows are laid over it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime
from zoneinfo import ZoneInfo

import pandas as pd

from .date_range import DateRange, iter_scaffold_days, to_time_point
from .rows import SeriesRow

logger = logging.getLogger(__name__)

Series = dict[str, dict[int, object]]


def build_scaffold(
    urls: Iterable[str],
    date_range: DateRange,
    tz: ZoneInfo | None = None,
) -> Series:
    """Return ``{url: {time_point: 0, ...}}`` with identical keys per URL."""
    points = [to_time_point(day, tz) for day in iter_scaffold_days(date_range)]
    return {url: dict.fromkeys(points, 0) for url in urls}


def reconcile(
    urls: Iterable[str],
    date_range: DateRange,
    rows: Iterable[SeriesRow] | None,
    *,
    tz: ZoneInfo | None = None,
) -> Series:
    """Overlay *rows* onto a zero scaffold for *urls* over *date_range*.

    Rows for unrequested paths or days outside the scaffold are dropped.
    Repeated ``(path, date)`` rows overwrite each other; the last one wins.
    """
    series = build_scaffold(urls, date_range, tz)
    if rows is None:
        return series

    dropped = 0
    for row in rows:
        points = series.get(row.path)
        time_point = to_time_point(row.date, tz)
        if points is None or time_point not in points:
            dropped += 1
            continue
        points[time_point] = row.value

    if dropped:
        logger.debug("Dropped %d row(s) outside requested urls/range", dropped)
    return series


def series_to_frame(series: Series, tz: ZoneInfo | None = None) -> pd.DataFrame:
    """Flatten a series into DataFrame[url, time_point, date, visits]."""
    records = [
        {
            "url": url,
            "time_point": tp,
            "date": datetime.fromtimestamp(tp // 1000, tz).date(),
            "visits": value,
        }
        for url, points in series.items()
        for tp, value in points.items()
    ]
    return pd.DataFrame(records, columns=["url", "time_point", "date", "visits"])
