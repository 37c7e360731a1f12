from __future__ import annotations

import logging
import math

import numpy as np
import pandas as pd
from fastapi import FastAPI, File, UploadFile
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from api.schemas import DashboardSettingsModel, SourceResponse, UploadResponse
from portfolio.context import prepare_context
from portfolio.data import PortfolioStore
from portfolio.metrics_overview import compute_overview
from portfolio.metrics_performance import compute_performance
from portfolio.metrics_properties import compute_properties, filter_properties
from portfolio.settings import DashboardSettings, normalize_settings


app = FastAPI(title="Real Estate Dashboard API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# One working set per API process; uploads and resets swap it wholesale.
store = PortfolioStore()


def _settings_from_model(model: DashboardSettingsModel) -> DashboardSettings:
    return normalize_settings(model.model_dump())


def _source() -> SourceResponse:
    return SourceResponse(kind=store.source, name=store.source_name, count=len(store))


def _error(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})


def _json(data: object) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
            },
        )
    )


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/source")
def source():
    return _json(_source().model_dump())


@app.post("/overview")
def overview(settings: DashboardSettingsModel):
    try:
        s = _settings_from_model(settings)
        return _json(compute_overview(s, prepare_context(s, store)))
    except Exception as exc:
        logger.exception("overview failed")
        return _error(exc)


@app.post("/properties")
def properties(settings: DashboardSettingsModel):
    try:
        s = _settings_from_model(settings)
        return _json(compute_properties(s, prepare_context(s, store)))
    except Exception as exc:
        logger.exception("properties failed")
        return _error(exc)


@app.post("/performance")
def performance(settings: DashboardSettingsModel):
    try:
        s = _settings_from_model(settings)
        return _json(compute_performance(s, prepare_context(s, store)))
    except Exception as exc:
        logger.exception("performance failed")
        return _error(exc)


@app.post("/upload")
def upload(file: UploadFile = File(...)):
    try:
        result = store.load_csv(file.file, source_name=file.filename)
        payload = UploadResponse(
            message=result.message,
            count=result.count,
            invalid_rows=result.invalid_rows,
            source=_source(),
        )
        return _json(payload.model_dump())
    except Exception as exc:
        logger.exception("upload failed")
        return _error(exc)


@app.post("/reset")
def reset():
    store.reset()
    return _json(_source().model_dump())


@app.post("/export/{page}")
def export_page(page: str, settings: DashboardSettingsModel):
    s = _settings_from_model(settings)
    ctx = prepare_context(s, store)

    filename = f"{page}.csv"
    if page == "properties":
        export_df = filter_properties(ctx["properties"], s)
    elif page == "performance":
        export_df = ctx["performance"]
    else:
        export_df = pd.DataFrame()

    csv_bytes = export_df.to_csv(index=False).encode("utf-8")
    return Response(content=csv_bytes, media_type="text/csv", headers={"Content-Disposition": f"attachment; filename={filename}"})
