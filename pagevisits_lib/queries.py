"""GA4 query descriptors for the three supported report shapes."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Union

PAGE_PATH = "pagePath"
DATE = "date"
REFERRER = "pageReferrer"
PAGE_VIEWS = "screenPageViews"

# megaton filter_d: condition string (";" = AND) or an and/or/not dict tree
FilterSpec = Union[str, dict]


@dataclass(frozen=True)
class ReportQuery:
    """Everything the report client needs besides the site and dates."""

    metrics: tuple[str, ...]
    dimensions: tuple[str, ...]
    filter_d: FilterSpec | None = None
    sort: str | None = None
    limit: int | None = None
    shape: str = field(default="", compare=False)

    @property
    def metric(self) -> str:
        """Comma-joined metric names, as passed to the client."""
        return ",".join(self.metrics)

    def to_params(self) -> dict:
        params: dict = {"dimensions": list(self.dimensions)}
        if self.filter_d is not None:
            params["filters"] = self.filter_d
        if self.sort is not None:
            params["sort"] = self.sort
        if self.limit is not None:
            params["max_results"] = self.limit
        return params


def build_any_equals_filter(field_name: str, values: Iterable[str]) -> FilterSpec:
    """OR together ``field==value`` predicates for megaton's ``filter_d``.

    One value stays a plain condition string; several become megaton's
    ``{"or": [...]}`` tree. No values gives ``{"not": "field=~.*"}``, a
    valid filter that matches nothing.
    """
    parts = [f"{field_name}=={v}" for v in values]
    if not parts:
        return {"not": f"{field_name}=~.*"}
    if len(parts) == 1:
        return parts[0]
    return {"or": parts}


def _check_max_results(max_results: int) -> int:
    if isinstance(max_results, bool) or not isinstance(max_results, int):
        raise TypeError(f"max_results must be int. got={max_results!r}")
    if max_results <= 0:
        raise ValueError(f"max_results must be > 0. got={max_results}")
    return max_results


def build_page_visits_query(urls: Iterable[str]) -> ReportQuery:
    """Daily page views per path, restricted to *urls*. No sort, no cap."""
    if isinstance(urls, (str, bytes)):
        raise TypeError("urls must be a collection of paths, not a single string.")
    return ReportQuery(
        metrics=(PAGE_VIEWS,),
        dimensions=(PAGE_PATH, DATE),
        filter_d=build_any_equals_filter(PAGE_PATH, sorted(set(urls))),
        shape="page_visits",
    )


def build_top_referrers_query(max_results: int) -> ReportQuery:
    return ReportQuery(
        metrics=(PAGE_VIEWS,),
        dimensions=(REFERRER,),
        sort=f"-{PAGE_VIEWS}",
        limit=_check_max_results(max_results),
        shape="top_referrers",
    )


def build_most_visited_pages_query(max_results: int) -> ReportQuery:
    return ReportQuery(
        metrics=(PAGE_VIEWS,),
        dimensions=(PAGE_PATH,),
        sort=f"-{PAGE_VIEWS}",
        limit=_check_max_results(max_results),
        shape="most_visited_pages",
    )
