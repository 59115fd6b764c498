"""Tests for pagevisits_lib.date_range."""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from pagevisits_lib.date_range import (
    DateRange,
    calculate_range,
    days_between,
    iter_scaffold_days,
    parse_compact_date,
    to_time_point,
)

UTC = ZoneInfo("UTC")


class TestCalculateRange:
    def test_ends_yesterday(self):
        rng = calculate_range(7, today=date(2026, 2, 10))
        assert rng.end == date(2026, 2, 9)
        assert rng.start == date(2026, 2, 2)

    def test_never_includes_today(self):
        today = date(2026, 3, 1)
        for n in (0, 1, 30, 365):
            assert calculate_range(n, today=today).end < today

    def test_zero_days(self):
        rng = calculate_range(0, today=date(2026, 2, 10))
        assert rng.start == date(2026, 2, 9)
        assert rng.end == date(2026, 2, 9)
        assert list(iter_scaffold_days(rng)) == []

    def test_crosses_year_boundary(self):
        rng = calculate_range(3, today=date(2026, 1, 2))
        assert rng == DateRange(date(2025, 12, 29), date(2026, 1, 1))

    def test_negative_raises(self):
        with pytest.raises(ValueError):
            calculate_range(-1, today=date(2026, 2, 10))

    def test_uses_current_date_without_reference(self):
        rng = calculate_range(1, tz=UTC)
        assert rng.end < datetime.now(UTC).date()


class TestDateRange:
    def test_start_after_end_raises(self):
        with pytest.raises(ValueError):
            DateRange(date(2026, 2, 2), date(2026, 2, 1))

    def test_to_strings(self):
        assert DateRange(date(2026, 1, 5), date(2026, 2, 1)).to_strings() == (
            "2026-01-05",
            "2026-02-01",
        )


class TestScaffoldDays:
    def test_day_after_start_through_end(self):
        rng = DateRange(date(2026, 2, 1), date(2026, 2, 4))
        assert list(iter_scaffold_days(rng)) == [
            date(2026, 2, 2),
            date(2026, 2, 3),
            date(2026, 2, 4),
        ]

    def test_count_matches_days_between(self):
        rng = calculate_range(365, today=date(2026, 2, 10))
        assert len(list(iter_scaffold_days(rng))) == days_between(rng.start, rng.end) == 365


class TestToTimePoint:
    def test_midnight_milliseconds(self):
        expected = int(datetime(2026, 2, 3, tzinfo=timezone.utc).timestamp()) * 1000
        assert to_time_point(date(2026, 2, 3), UTC) == expected

    def test_consecutive_days_one_day_apart(self):
        tz = ZoneInfo("Asia/Tokyo")
        a = to_time_point(date(2026, 2, 3), tz)
        b = to_time_point(date(2026, 2, 4), tz)
        assert b - a == 86_400_000

    def test_local_time_is_integer(self):
        assert isinstance(to_time_point(date(2026, 2, 3)), int)


class TestParseCompactDate:
    def test_parses(self):
        assert parse_compact_date("20260203") == date(2026, 2, 3)

    @pytest.mark.parametrize("value", ["2026-02-03", "2026023", "20261301", "abcdefgh", ""])
    def test_malformed_raises(self, value):
        with pytest.raises(ValueError):
            parse_compact_date(value)
