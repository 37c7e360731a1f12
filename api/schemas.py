from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

from portfolio.settings import DEFAULT_FORECAST_YEARS, MAX_FORECAST_YEARS


class DashboardSettingsModel(BaseModel):
    forecast_years: int = Field(default=DEFAULT_FORECAST_YEARS, ge=1, le=MAX_FORECAST_YEARS)
    address_query: str = ""
    sort_by: Literal["id", "value", "monthly_rent", "roi_pct", "forecast"] = "id"
    descending: bool = False


class SourceResponse(BaseModel):
    kind: Literal["default", "upload"]
    name: Optional[str] = None
    count: int


class UploadResponse(BaseModel):
    message: str
    count: int
    invalid_rows: int
    source: SourceResponse
