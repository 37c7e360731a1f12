from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

import pandas as pd

from portfolio.forecast import round_half_up, safe_ratio_pct
from portfolio.settings import DashboardSettings


def _total(df: pd.DataFrame, col: str) -> float:
    # NaN in any row makes the total NaN.
    if df.empty or col not in df.columns:
        return 0.0
    return float(df[col].sum(skipna=False))


def compute_overview(settings: DashboardSettings, ctx: Dict[str, Any]) -> Dict[str, Any]:
    props: pd.DataFrame = ctx.get("properties", pd.DataFrame())

    total_value = _total(props, "value")
    total_rent = _total(props, "monthly_rent")

    return {
        "settings": asdict(settings),
        "source": {"kind": ctx.get("source", "default"), "name": ctx.get("source_name")},
        "kpis": {
            "total_properties": int(len(props)),
            "total_value": total_value,
            "total_monthly_rent": total_rent,
            "roi_pct": safe_ratio_pct(total_rent * 12, total_value),
            "total_forecast": round_half_up(_total(props, "forecast")),
            "forecast_years": settings.forecast_years,
        },
    }
