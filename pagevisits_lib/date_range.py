"""Day-granular date ranges and millisecond time points.

Ranges always end yesterday so a partially collected "today" never shows
up in a series.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Iterator
from zoneinfo import ZoneInfo

COMPACT_DATE_FORMAT = "%Y%m%d"


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"start must be <= end. got={self.start} > {self.end}")

    def to_strings(self) -> tuple[str, str]:
        """Return ``(start, end)`` as ``YYYY-MM-DD`` strings."""
        return self.start.isoformat(), self.end.isoformat()


def current_date(tz: ZoneInfo | None = None) -> date:
    """Return today's date in *tz* (system local time when ``None``)."""
    return datetime.now(tz).date()


def calculate_range(
    number_of_days: int,
    *,
    today: date | None = None,
    tz: ZoneInfo | None = None,
) -> DateRange:
    """Return the range covering *number_of_days* full days before today.

    >>> calculate_range(3, today=date(2026, 2, 10))
    DateRange(start=datetime.date(2026, 2, 6), end=datetime.date(2026, 2, 9))
    """
    if number_of_days < 0:
        raise ValueError(f"number_of_days must be >= 0. got={number_of_days}")
    ref = today or current_date(tz)
    return DateRange(
        start=ref - timedelta(days=number_of_days + 1),
        end=ref - timedelta(days=1),
    )


def days_between(start: date, end: date) -> int:
    """Whole days from *start* to *end* (never negative)."""
    return abs((end - start).days)


def iter_scaffold_days(date_range: DateRange) -> Iterator[date]:
    """Yield the day after ``start`` through ``end``, inclusive."""
    for offset in range(1, days_between(date_range.start, date_range.end) + 1):
        yield date_range.start + timedelta(days=offset)


def to_time_point(day: date, tz: ZoneInfo | None = None) -> int:
    """Midnight of *day* as a Unix timestamp in milliseconds."""
    midnight = datetime.combine(day, time.min, tzinfo=tz)
    return int(midnight.timestamp()) * 1000


def parse_compact_date(value: str) -> date:
    """Parse a ``YYYYMMDD`` string; anything else raises ``ValueError``."""
    text = str(value).strip()
    if len(text) != 8 or not text.isdigit():
        raise ValueError(f"Invalid compact date: {value!r}")
    try:
        return datetime.strptime(text, COMPACT_DATE_FORMAT).date()
    except ValueError as e:
        raise ValueError(f"Invalid compact date: {value!r}") from e
