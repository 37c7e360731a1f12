from __future__ import annotations

from dataclasses import dataclass

DEFAULT_FORECAST_YEARS = 5
MAX_FORECAST_YEARS = 30
SORT_KEYS = ("id", "value", "monthly_rent", "roi_pct", "forecast")


@dataclass(frozen=True)
class DashboardSettings:
    forecast_years: int = DEFAULT_FORECAST_YEARS
    address_query: str = ""
    sort_by: str = "id"
    descending: bool = False


def normalize_settings(raw: dict | None) -> DashboardSettings:
    raw = raw or {}

    forecast_years = raw.get("forecast_years", DEFAULT_FORECAST_YEARS)
    try:
        forecast_years = int(forecast_years)
    except (TypeError, ValueError):
        forecast_years = DEFAULT_FORECAST_YEARS
    forecast_years = max(1, min(MAX_FORECAST_YEARS, forecast_years))

    address_query = str(raw.get("address_query") or "").strip()

    sort_by = str(raw.get("sort_by") or "id")
    if sort_by not in SORT_KEYS:
        sort_by = "id"

    descending = bool(raw.get("descending", False))
    return DashboardSettings(
        forecast_years=forecast_years,
        address_query=address_query,
        sort_by=sort_by,
        descending=descending,
    )
