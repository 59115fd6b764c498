"""Runtime configuration for the reporting layer."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)

SITE_ID_ENV_VAR = "ANALYTICS_SITE_ID"
TZ_ENV_VAR = "ANALYTICS_TZ"
DEFAULT_DAYS_ENV_VAR = "ANALYTICS_DEFAULT_DAYS"
MAX_RESULTS_ENV_VAR = "ANALYTICS_MAX_RESULTS"


def _resolve_timezone(name: str | None) -> ZoneInfo | None:
    """Resolve a tz name (``None`` = system local time on invalid/empty)."""
    name = (name or "").strip()
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except Exception:
        logger.warning("Unknown timezone %r, falling back to local time", name)
        return None


def _int_from_env(var: str, default: int) -> int:
    raw = os.getenv(var, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ValueError(f"{var} must be an integer. got={raw!r}") from e
    if value < 0:
        raise ValueError(f"{var} must be >= 0. got={value}")
    return value


@dataclass(frozen=True)
class AnalyticsConfig:
    """Immutable settings passed into :class:`~pagevisits_lib.analytics.Analytics`."""

    site_id: str = ""
    timezone: ZoneInfo | None = None
    default_days: int = 365
    max_results: int = 20

    @classmethod
    def from_env(cls) -> "AnalyticsConfig":
        """Build a config from ``ANALYTICS_*`` environment variables."""
        return cls(
            site_id=os.getenv(SITE_ID_ENV_VAR, "").strip(),
            timezone=_resolve_timezone(os.getenv(TZ_ENV_VAR)),
            default_days=_int_from_env(DEFAULT_DAYS_ENV_VAR, 365),
            max_results=_int_from_env(MAX_RESULTS_ENV_VAR, 20),
        )

    def with_site_id(self, site_id: str) -> "AnalyticsConfig":
        return replace(self, site_id=str(site_id).strip())
