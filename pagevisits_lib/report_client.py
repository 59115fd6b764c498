"""GA4 report client boundary.

:class:`ReportClient` is the capability the reporting layer depends on.
:class:`MegatonReportClient` implements it on top of megaton, discovering
every service-account JSON and routing each property to the credential
that can see it.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Optional, Protocol
from urllib.parse import urlparse

import pandas as pd
from megaton import start

from .date_range import COMPACT_DATE_FORMAT
from .queries import DATE

logger = logging.getLogger(__name__)

CREDS_ENV_VAR = "ANALYTICS_CREDS_PATH"
DEFAULT_CREDS_DIR = Path("credentials")


class SiteNotFoundError(LookupError):
    """No GA4 property matches the requested site URL."""


@dataclass(frozen=True)
class ReportResponse:
    rows: Optional[list[tuple]] = None


class ReportClient(Protocol):
    def execute(
        self,
        site_id: str,
        start_date: str,
        end_date: str,
        metric: str,
        params: Mapping[str, Any],
    ) -> ReportResponse: ...

    def resolve_site_id(self, url: str) -> str: ...


def discover_credentials(default_dir: Path | str = DEFAULT_CREDS_DIR) -> list[str]:
    """Service-account JSON paths for megaton, sorted.

    ``ANALYTICS_CREDS_PATH`` may name one JSON file or a directory of them;
    otherwise ``default_dir`` is scanned (missing directory = no paths).
    """
    configured = os.getenv(CREDS_ENV_VAR, "").strip()
    if configured:
        location = Path(configured).expanduser()
        if not location.exists():
            raise FileNotFoundError(f"{CREDS_ENV_VAR} points to missing path: {location}")
        if location.is_file():
            return [str(location)]
    else:
        location = Path(default_dir)
        if not location.is_dir():
            return []
    return sorted(str(p) for p in location.glob("*.json") if p.is_file())


def _normalize_key(value: object) -> str:
    return str(value).strip()


def _host_key(value: str) -> str:
    """Lower-cased host without ``www.`` for URL/property-name matching."""
    text = str(value).strip()
    if "://" not in text:
        text = "//" + text
    host = (urlparse(text).hostname or "").lower()
    return host[4:] if host.startswith("www.") else host


def _compact_date(value):
    # megaton turns the date dimension into datetime.date objects
    if isinstance(value, date):
        return value.strftime(COMPACT_DATE_FORMAT)
    return value


def frame_to_rows(df: pd.DataFrame | None) -> list[tuple] | None:
    """Convert a report DataFrame into plain tuples (``None`` when empty).

    Date values in the ``date`` column are rendered back to ``YYYYMMDD``.
    """
    if df is None or df.empty:
        return None
    if DATE in df.columns:
        df = df.copy()
        df[DATE] = df[DATE].map(_compact_date).astype(object)
    return [tuple(row) for row in df.to_dict(orient="split")["data"]]


class MegatonReportClient:
    """Run GA4 reports through megaton with per-credential routing."""

    def __init__(
        self,
        creds_paths: Sequence[str] | None = None,
        *,
        factory: Callable[[str], Any] | None = None,
    ):
        self._creds_paths = list(creds_paths) if creds_paths is not None else None
        self._factory = factory or (lambda path: start.Megaton(path, headless=True))
        self._instances: dict[str, Any] = {}   # creds_path -> Megaton
        self._property_map: dict[str, str] = {}  # property_id -> creds_path
        self._registry_built = False

    def _paths(self) -> list[str]:
        if self._creds_paths is not None:
            return self._creds_paths
        return discover_credentials()

    def reset_registry(self) -> None:
        self._property_map.clear()
        self._instances.clear()
        self._registry_built = False

    def get_megaton(self, creds_path: str):
        if creds_path not in self._instances:
            self._instances[creds_path] = self._factory(creds_path)
        return self._instances[creds_path]

    def build_registry(self) -> None:
        """Map every visible GA4 property to its credential (first build only)."""
        if self._registry_built:
            return
        paths = self._paths()
        if not paths:
            raise FileNotFoundError(
                "No service account JSON found. "
                f"Place a JSON file in {DEFAULT_CREDS_DIR}/ or set {CREDS_ENV_VAR}."
            )
        for path in paths:
            mg = self.get_megaton(path)
            try:
                for acc in mg.ga["4"].accounts:
                    for prop in acc.get("properties", []):
                        self._property_map.setdefault(_normalize_key(prop["id"]), path)
            except Exception as e:
                logger.debug("Skipping GA4 for %s: %s", path, e)
        self._registry_built = True

    def _iter_properties(self):
        self.build_registry()
        for path in dict.fromkeys(self._property_map.values()):
            mg = self.get_megaton(path)
            for acc in mg.ga["4"].accounts:
                for prop in acc.get("properties", []):
                    yield mg, acc, prop

    def get_ga4(self, site_id: str):
        """Return a megaton instance with the account/property of *site_id* selected."""
        site_id = _normalize_key(site_id)
        self.build_registry()
        if site_id not in self._property_map:
            # the registry may predate a newly granted property; rebuild once
            self._property_map.clear()
            self._registry_built = False
            self.build_registry()
        if site_id not in self._property_map:
            raise SiteNotFoundError(
                f"No credential found for property_id: {site_id}\n"
                f"  {CREDS_ENV_VAR}: {os.environ.get(CREDS_ENV_VAR, '(not set)')}\n"
                f"  Credential files found: {self._paths()}\n"
                f"  Known property IDs: {sorted(self._property_map) or ['(none)']}"
            )
        mg = self.get_megaton(self._property_map[site_id])
        for acc in mg.ga["4"].accounts:
            for prop in acc.get("properties", []):
                if _normalize_key(prop["id"]) == site_id:
                    mg.ga["4"].account.select(acc["id"])
                    mg.ga["4"].property.select(site_id)
                    return mg
        raise SiteNotFoundError(
            f"Property {site_id} found in registry but not in accounts"
        )

    def resolve_site_id(self, url: str) -> str:
        """Return the GA4 property id whose name matches the host of *url*.

        megaton lists properties by id and display name only, so properties
        must be named after their host (``example.com``, ``www.example.com``).
        Matching ignores case and a leading ``www.``; a property named like
        "Example Website" never matches and SiteNotFoundError is raised.
        """
        wanted = _host_key(url)
        if wanted:
            for _mg, _acc, prop in self._iter_properties():
                if _host_key(prop.get("name", "")) == wanted:
                    return _normalize_key(prop["id"])
        raise SiteNotFoundError(f"No GA4 property found for url: {url}")

    def execute(
        self,
        site_id: str,
        start_date: str,
        end_date: str,
        metric: str,
        params: Mapping[str, Any],
    ) -> ReportResponse:
        """Run one report. Params: dimensions, filters, sort, max_results."""
        mg = self.get_ga4(site_id)
        mg.report.set.dates(start_date, end_date)
        kwargs: dict = {
            "d": list(params.get("dimensions", [])),
            "m": [m.strip() for m in metric.split(",") if m.strip()],
            "filter_d": params.get("filters"),
            "sort": params.get("sort"),
            "show": False,
        }
        # megaton pages through results with `limit`; `max_rows` caps the total
        if params.get("max_results") is not None:
            kwargs["max_rows"] = params["max_results"]
        logger.debug("GA4 report %s %s..%s %s", site_id, start_date, end_date, kwargs)
        result = mg.report.run(**kwargs)
        return ReportResponse(rows=frame_to_rows(result.df if result is not None else None))
