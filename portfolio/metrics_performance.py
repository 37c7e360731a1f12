from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

import pandas as pd

from portfolio.charts import performance_line_chart, to_vega_spec
from portfolio.data import performance_frame
from portfolio.settings import DashboardSettings


def compute_performance(settings: DashboardSettings, ctx: Dict[str, Any]) -> Dict[str, Any]:
    """Fixed monthly revenue/expenses series; independent of the working set."""
    perf: pd.DataFrame = ctx.get("performance")
    if perf is None or perf.empty:
        perf = performance_frame()
    perf = perf.assign(net_income=lambda d: d["revenue"] - d["expenses"])

    totals = perf[["revenue", "expenses", "net_income"]].sum()
    return {
        "settings": asdict(settings),
        "series": perf.to_dict(orient="records"),
        "totals": {k: float(v) for k, v in totals.items()},
        "charts": {"revenue_vs_expenses": to_vega_spec(performance_line_chart(perf))},
    }
