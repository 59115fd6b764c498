"""Public reporting operations.

Usage::

    analytics = Analytics.from_env()
    visits = analytics.get_multiple_page_visits(["/", "/pricing/"], number_of_days=30)
    referrers = analytics.get_top_referrers(number_of_days=7, max_results=10)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any

from .config import AnalyticsConfig
from .date_range import DateRange, calculate_range
from .queries import (
    ReportQuery,
    build_most_visited_pages_query,
    build_page_visits_query,
    build_top_referrers_query,
)
from .ranking import RankedRecord, project
from .reconcile import Series, reconcile
from .report_client import MegatonReportClient, ReportClient, ReportResponse
from .rows import parse_ranked_rows, parse_series_rows

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Analytics:
    client: ReportClient
    config: AnalyticsConfig = field(default_factory=AnalyticsConfig)

    @classmethod
    def from_env(cls) -> "Analytics":
        """Megaton-backed instance configured from ``ANALYTICS_*`` variables."""
        return cls(client=MegatonReportClient(), config=AnalyticsConfig.from_env())

    @property
    def site_id(self) -> str:
        return self.config.site_id

    def with_site_id(self, site_id: str) -> "Analytics":
        """Return a copy reporting on *site_id*; this instance is unchanged."""
        return replace(self, config=self.config.with_site_id(site_id))

    def is_enabled(self) -> bool:
        """True when a site id is configured."""
        return self.config.site_id != ""

    def calculate_range(self, number_of_days: int) -> DateRange:
        return calculate_range(number_of_days, tz=self.config.timezone)

    def get_multiple_page_visits(
        self,
        urls: Iterable[str],
        number_of_days: int | None = None,
    ) -> Series:
        """Daily page views per URL, with missing days filled with 0.

        Returns ``{url: {midnight_ms: visits, ...}}``.
        """
        if isinstance(urls, (str, bytes)):
            raise TypeError("urls must be a collection of paths, not a single string.")
        urls = list(dict.fromkeys(urls))
        if number_of_days is None:
            number_of_days = self.config.default_days
        date_range = self.calculate_range(number_of_days)
        if not urls:
            return reconcile(urls, date_range, None, tz=self.config.timezone)
        query = build_page_visits_query(urls)
        answer = self._run(date_range, query)
        return reconcile(
            urls,
            date_range,
            parse_series_rows(answer.rows),
            tz=self.config.timezone,
        )

    def get_top_referrers(
        self,
        number_of_days: int | None = None,
        max_results: int | None = None,
    ) -> list[RankedRecord]:
        if number_of_days is None:
            number_of_days = self.config.default_days
        date_range = self.calculate_range(number_of_days)
        return self.get_top_referrers_for_period(
            date_range.start, date_range.end, max_results
        )

    def get_top_referrers_for_period(
        self,
        start: date,
        end: date,
        max_results: int | None = None,
    ) -> list[RankedRecord]:
        """Referrers ordered by page views, as ranked by GA4."""
        query = build_top_referrers_query(self._max_results(max_results))
        answer = self._run(DateRange(start, end), query)
        return project(parse_ranked_rows(answer.rows))

    def get_most_visited_pages_for_period(
        self,
        start: date,
        end: date,
        max_results: int | None = None,
    ) -> list[RankedRecord]:
        """Page paths ordered by page views, as ranked by GA4."""
        query = build_most_visited_pages_query(self._max_results(max_results))
        answer = self._run(DateRange(start, end), query)
        return project(parse_ranked_rows(answer.rows))

    def get_site_id_by_url(self, url: str) -> str:
        """GA4 property id for *url*; raises SiteNotFoundError when unknown."""
        return self.client.resolve_site_id(url)

    def perform_query(
        self,
        start: date,
        end: date,
        metrics: str,
        params: Mapping[str, Any] | None = None,
    ) -> ReportResponse:
        """Run a raw report for the configured site over ``[start, end]``."""
        start_s, end_s = DateRange(start, end).to_strings()
        return self.client.execute(self.config.site_id, start_s, end_s, metrics, dict(params or {}))

    def _run(self, date_range: DateRange, query: ReportQuery) -> ReportResponse:
        logger.debug(
            "Running %s report for %s (%s..%s)",
            query.shape, self.config.site_id, date_range.start, date_range.end,
        )
        return self.perform_query(
            date_range.start, date_range.end, query.metric, query.to_params()
        )

    def _max_results(self, max_results: int | None) -> int:
        return self.config.max_results if max_results is None else max_results
