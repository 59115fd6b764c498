"""Tests for pagevisits_lib.rows."""

from datetime import date

import pytest

from pagevisits_lib.rows import RankedRow, SeriesRow, parse_ranked_rows, parse_series_rows


class TestParseSeriesRows:
    def test_parses_tuples(self):
        rows = parse_series_rows([("/a", "20260203", 4), ["/b", "20260204", "7"]])
        assert rows == [
            SeriesRow("/a", date(2026, 2, 3), 4),
            SeriesRow("/b", date(2026, 2, 4), "7"),
        ]

    def test_none_passes_through(self):
        assert parse_series_rows(None) is None

    def test_empty_stays_empty(self):
        assert parse_series_rows([]) == []

    def test_malformed_date_raises(self):
        with pytest.raises(ValueError):
            parse_series_rows([("/a", "2026-02-03", 1)])

    def test_wrong_arity_raises(self):
        with pytest.raises(ValueError):
            parse_series_rows([("/a", 1)])


class TestParseRankedRows:
    def test_keeps_order(self):
        rows = parse_ranked_rows([("ref1", 10), ("ref2", 3)])
        assert rows == [RankedRow("ref1", 10), RankedRow("ref2", 3)]

    def test_none_passes_through(self):
        assert parse_ranked_rows(None) is None

    def test_wrong_arity_raises(self):
        with pytest.raises(ValueError):
            parse_ranked_rows([("ref1", 10, 2)])
