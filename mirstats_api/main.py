from __future__ import annotations

from dataclasses import asdict
import logging
import math
from typing import Literal, Optional

import numpy as np
import pandas as pd
from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.responses import Response
from fastapi.encoders import jsonable_encoder

from mirstats.data import load_dashboard_data, prepare_context, records_to_frame
from mirstats.filters import ViewFilters, normalize_filters
from mirstats.metrics_comparison import compute_comparison
from mirstats.metrics_evolution import compute_evolution
from mirstats.metrics_summary import compute_summary
from mirstats.models import METRIC_CATALOG
from mirstats_api.schemas import MetaMetricsResponse, MetricModel, ViewFiltersModel


app = FastAPI(title="MIR Statistics API", version="0.1.0")
logger = logging.getLogger(__name__)

CORS_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _filters_from_model(model: ViewFiltersModel, data_ctx: dict) -> ViewFilters:
    raw = model.model_dump()
    return normalize_filters(
        raw,
        available_years=data_ctx.get("years", []),
        available_universities=data_ctx.get("universities", []),
    )


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


@app.get("/meta/years")
def meta_years():
    try:
        data_ctx = load_dashboard_data()
        return _json({"years": [int(y) for y in data_ctx.get("years", [])]})
    except Exception as exc:
        logger.exception("meta_years failed")
        return _error(exc)


@app.get("/meta/universities")
def meta_universities(year: Optional[int] = Query(default=None)):
    try:
        data_ctx = load_dashboard_data()
        records = data_ctx.get("records", ())
        if year is not None:
            records = [r for r in records if r.year == year]
        seen = {}
        for r in records:
            seen.setdefault(r.name, r.abbreviation)
        universities = [{"name": name, "abbreviation": abbr} for name, abbr in sorted(seen.items())]
        return _json({"universities": universities})
    except Exception as exc:
        logger.exception("meta_universities failed")
        return _error(exc)


@app.get("/meta/metrics", response_model=MetaMetricsResponse)
def meta_metrics():
    return MetaMetricsResponse(metrics=[MetricModel(**asdict(m)) for m in METRIC_CATALOG])


@app.post("/comparison")
def comparison(filters: ViewFiltersModel):
    try:
        data_ctx = load_dashboard_data()
        f = _filters_from_model(filters, data_ctx)
        ctx = prepare_context(f, data_ctx)
        return _json(compute_comparison(f, ctx))
    except Exception as exc:
        logger.exception("comparison failed")
        return _error(exc)


@app.post("/evolution")
def evolution(filters: ViewFiltersModel):
    try:
        data_ctx = load_dashboard_data()
        f = _filters_from_model(filters, data_ctx)
        ctx = prepare_context(f, data_ctx)
        return _json(compute_evolution(f, ctx))
    except Exception as exc:
        logger.exception("evolution failed")
        return _error(exc)


@app.post("/summary")
def summary(
    filters: ViewFiltersModel,
    view_mode: Literal["comparison", "evolution"] = Query(default="comparison"),
):
    try:
        data_ctx = load_dashboard_data()
        f = _filters_from_model(filters, data_ctx)
        ctx = prepare_context(f, data_ctx)
        return _json(compute_summary(f, ctx, view_mode=view_mode))
    except Exception as exc:
        logger.exception("summary failed")
        return _error(exc)


@app.post("/export/{view}")
def export_view(view: str, filters: ViewFiltersModel):
    data_ctx = load_dashboard_data()
    f = _filters_from_model(filters, data_ctx)
    ctx = prepare_context(f, data_ctx)

    filename = f"{view}.csv"
    if view == "comparison":
        export_df = records_to_frame(ctx["comparison_records"])
        filename = f"comparison_{f.year}.csv"
    elif view == "evolution":
        export_df = records_to_frame(ctx["evolution_records"])
    else:
        export_df = pd.DataFrame()

    csv_bytes = export_df.to_csv(index=False).encode("utf-8")
    return Response(content=csv_bytes, media_type="text/csv", headers={"Content-Disposition": f"attachment; filename={filename}"})
