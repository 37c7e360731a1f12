from __future__ import annotations

from typing import Any, Dict

import altair as alt
import pandas as pd

alt.data_transformers.disable_max_rows()

PERFORMANCE_COLORS = {"revenue": "#8884d8", "expenses": "#82ca9d"}


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def performance_line_chart(perf: pd.DataFrame, height: int = 300) -> alt.Chart:
    months = perf["month"].tolist()
    long_df = perf.melt(id_vars="month", value_vars=["revenue", "expenses"], var_name="metric", value_name="amount")
    hover = alt.selection_point(fields=["metric"], on="mouseover", empty="all")
    return (
        alt.Chart(long_df)
        .mark_line(point={"filled": True, "size": 60})
        .encode(
            x=alt.X("month:O", title="Month", sort=months, axis=alt.Axis(grid=False)),
            y=alt.Y("amount:Q", title=None, axis=alt.Axis(format="$~s", gridDash=[3, 3], domain=False, ticks=False)),
            color=alt.Color(
                "metric:N",
                title="Metric",
                scale=alt.Scale(domain=list(PERFORMANCE_COLORS), range=list(PERFORMANCE_COLORS.values())),
            ),
            opacity=alt.condition(hover, alt.value(1), alt.value(0.2)),
            tooltip=[
                alt.Tooltip("month:N", title="Month"),
                alt.Tooltip("metric:N", title="Metric"),
                alt.Tooltip("amount:Q", title="Amount", format="$,.0f"),
            ],
        )
        .add_params(hover)
        .properties(height=height)
    )


def forecast_bar_chart(props: pd.DataFrame, years: int, height: int = 260) -> alt.Chart:
    data = props[["address", "forecast"]].dropna(subset=["forecast"])
    return (
        alt.Chart(data)
        .mark_bar(color="#16a34a")
        .encode(
            x=alt.X("forecast:Q", title=f"{years}-Year Forecast", axis=alt.Axis(format="$~s", gridDash=[3, 3])),
            y=alt.Y("address:N", title=None, sort="-x"),
            tooltip=["address", alt.Tooltip("forecast:Q", format="$,.0f")],
        )
        .properties(height=height)
    )
