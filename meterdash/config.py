from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from . import canon, exceptions


@dataclass
class DashboardConfig:
    api_url: str = ""
    tz: str = canon.DEFAULT_TZ  # zone used for calendar-day bucketing
    refresh_interval_sec: float = canon.REFRESH_INTERVAL_SEC
    gauge_max_va: float = canon.GAUGE_MAX_VA
    request_timeout_sec: Optional[float] = None  # None = wait indefinitely
    output_path: str = "dashboard.html"

    def validated(self) -> "DashboardConfig":
        exceptions.require(bool(self.api_url), "api_url is required.", exceptions.ConfigError)
        exceptions.require(
            self.refresh_interval_sec > 0,
            "refresh_interval_sec must be positive.",
            exceptions.ConfigError,
        )
        exceptions.require(self.gauge_max_va > 0, "gauge_max_va must be positive.", exceptions.ConfigError)
        try:
            ZoneInfo(self.tz)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise exceptions.ConfigError(f"Unknown timezone {self.tz!r}.") from e
        return self


def default_config() -> DashboardConfig:
    return DashboardConfig()


def _env_float(name: str, default: Optional[float]) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise exceptions.ConfigError(f"{name} must be a number, got {raw!r}.") from e


def from_env(base: Optional[DashboardConfig] = None) -> DashboardConfig:
    """Overlay METERDASH_* environment variables on ``base`` (or the defaults)."""
    cfg = base or default_config()
    return replace(
        cfg,
        api_url=os.getenv("METERDASH_API_URL", cfg.api_url),
        tz=os.getenv("METERDASH_TZ", cfg.tz),
        refresh_interval_sec=_env_float("METERDASH_REFRESH_SEC", cfg.refresh_interval_sec),
        gauge_max_va=_env_float("METERDASH_GAUGE_MAX_VA", cfg.gauge_max_va),
        request_timeout_sec=_env_float("METERDASH_TIMEOUT_SEC", cfg.request_timeout_sec),
        output_path=os.getenv("METERDASH_OUTPUT", cfg.output_path),
    )
