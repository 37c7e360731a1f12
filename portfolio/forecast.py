from __future__ import annotations

import math
from typing import Union

import numpy as np
import pandas as pd

from portfolio.data import PropertyRecord, frame_to_records
from portfolio.settings import DEFAULT_FORECAST_YEARS

Number = Union[int, float]


def round_half_up(value: float) -> Number:
    """Round to the nearest integer, halves towards +inf; NaN/inf pass through."""
    if not math.isfinite(value):
        return value
    return int(math.floor(value + 0.5))


def safe_ratio_pct(numerator: float, denominator: float) -> float:
    """numerator / denominator * 100 without raising on a zero denominator."""
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.float64(numerator) / np.float64(denominator) * 100.0)


def annual_net_cash_flow(record: PropertyRecord) -> float:
    annual_rent = record.monthly_rent * 12
    annual_expenses = annual_rent * record.operating_expense_pct / 100
    return annual_rent - annual_expenses


def calculate_forecast(record: PropertyRecord, years: int = DEFAULT_FORECAST_YEARS) -> Number:
    """Cumulative net cash flow over `years`, rounded to whole currency units.

    Value appreciation does not enter the total; see project_value.
    """
    total_cash = 0.0
    for _ in range(years):
        total_cash += annual_net_cash_flow(record)
    return round_half_up(total_cash)


def project_value(record: PropertyRecord, years: int = DEFAULT_FORECAST_YEARS) -> float:
    current_value = record.value
    for _ in range(years):
        current_value *= 1 + record.annual_appreciation_pct / 100
    return current_value


def roi_pct(record: PropertyRecord) -> float:
    return safe_ratio_pct(record.monthly_rent * 12, record.value)


def attach_forecasts(df: pd.DataFrame, years: int = DEFAULT_FORECAST_YEARS) -> pd.DataFrame:
    """Copy of a property frame with forecast, projected_value and roi_pct columns."""
    records = frame_to_records(df)
    out = df.copy().reset_index(drop=True)
    out["forecast"] = pd.Series([float(calculate_forecast(r, years)) for r in records], index=out.index, dtype="float64")
    out["projected_value"] = pd.Series([project_value(r, years) for r in records], index=out.index, dtype="float64")
    out["roi_pct"] = pd.Series([roi_pct(r) for r in records], index=out.index, dtype="float64")
    return out
