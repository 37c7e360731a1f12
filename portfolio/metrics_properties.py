from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

import pandas as pd

from portfolio.charts import forecast_bar_chart, to_vega_spec
from portfolio.settings import DashboardSettings

LISTING_COLUMNS = [
    "id",
    "address",
    "value",
    "monthly_rent",
    "annual_appreciation_pct",
    "operating_expense_pct",
    "roi_pct",
    "forecast",
    "projected_value",
]


def filter_properties(props: pd.DataFrame, settings: DashboardSettings) -> pd.DataFrame:
    out = props.copy()
    q = settings.address_query.lower()
    if q and "address" in out.columns:
        out = out[out["address"].astype(str).str.lower().str.contains(q, regex=False, na=False)]
    if settings.sort_by in out.columns:
        out = out.sort_values(settings.sort_by, ascending=not settings.descending, na_position="last", kind="stable")
    return out.reset_index(drop=True)


def compute_properties(settings: DashboardSettings, ctx: Dict[str, Any]) -> Dict[str, Any]:
    props: pd.DataFrame = ctx.get("properties", pd.DataFrame())
    if props.empty:
        return {"settings": asdict(settings), "count": 0, "properties": [], "charts": {}}

    listing = filter_properties(props, settings)
    listing = listing[[c for c in LISTING_COLUMNS if c in listing.columns]]

    charts: Dict[str, Any] = {}
    if not listing.empty and listing["forecast"].notna().any():
        charts["forecast_by_property"] = to_vega_spec(forecast_bar_chart(listing, settings.forecast_years))

    return {
        "settings": asdict(settings),
        "count": int(len(listing)),
        "properties": listing.to_dict(orient="records"),
        "charts": charts,
    }
