from __future__ import annotations

from dataclasses import asdict
from datetime import date, datetime
import logging
import math
from typing import Any, Callable, Dict, Optional

import numpy as np
import pandas as pd
from fastapi import FastAPI, File, Form, UploadFile
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from api.schemas import DatasetInfoResponse, IngestRowsRequest, ViewFiltersModel
from casehub.columns import column_mapping_from_dict
from casehub.data import (
    CASE_FIELDS,
    CaseDataset,
    IngestionError,
    case_to_dict,
    export_frame,
    load_case_data,
    load_rows,
)
from casehub.filters import ViewFilters, normalize_settings, normalize_view_filters
from casehub.metrics_briefing import compute_briefing
from casehub.metrics_issues import compute_issues
from casehub.metrics_overview import compute_overview
from casehub.metrics_pendency import compute_pendency
from casehub.views import query_cases, select_cases


app = FastAPI(title="Logistics Case Hub API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# The active dataset. Ingestion builds a complete new CaseDataset before the
# reference is swapped, so readers never see a half-built set.
_STATE: Dict[str, Optional[CaseDataset]] = {"dataset": None}


def current_dataset() -> Optional[CaseDataset]:
    return _STATE["dataset"]


def replace_dataset(dataset: Optional[CaseDataset]) -> None:
    _STATE["dataset"] = dataset


def _filters_from_model(model: ViewFiltersModel) -> ViewFilters:
    return normalize_view_filters(model.model_dump(), sort_fields=CASE_FIELDS)


def _json(data: object, status_code: int = 200) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
                pd.Timestamp: lambda ts: ts.isoformat(),
                datetime: lambda dt: dt.isoformat(),
                date: lambda d: d.isoformat(),
            },
        ),
    )


def _error(exc: Exception, status_code: int = 500) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": str(exc), "type": type(exc).__name__})


def _no_dataset() -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": "no dataset loaded", "type": "NoDataset"})


def _dataset_info(dataset: CaseDataset) -> DatasetInfoResponse:
    return DatasetInfoResponse(
        source=dataset.source,
        loaded_at=dataset.loaded_at,
        cases=len(dataset.cases),
        skipped_rows=dataset.skipped_rows,
        mapping_version=dataset.mapping_version,
    )


def _with_dataset(name: str, compute: Callable[[CaseDataset], Any]) -> JSONResponse:
    dataset = current_dataset()
    if dataset is None:
        return _no_dataset()
    try:
        return _json(compute(dataset))
    except Exception as exc:
        logger.exception("%s failed", name)
        return _error(exc)


@app.post("/ingest/rows")
def ingest_rows(body: IngestRowsRequest):
    try:
        dataset = load_case_data(
            body.rows,
            source=body.source or "rows",
            now=body.now,
            mapping=column_mapping_from_dict(body.column_mapping),
            settings=normalize_settings(body.settings.model_dump()),
        )
    except IngestionError as exc:
        logger.warning("ingest_rows rejected: %s", exc)
        return _error(exc, status_code=400)
    except Exception as exc:
        logger.exception("ingest_rows failed")
        return _error(exc)
    replace_dataset(dataset)
    return _json(_dataset_info(dataset).model_dump())


@app.post("/ingest/file")
async def ingest_file(file: UploadFile = File(...), open_status: str = Form(default="Under Follow Up")):
    try:
        content = await file.read()
        rows = load_rows(content, filename=file.filename or "")
        dataset = load_case_data(
            rows,
            source=file.filename or "upload",
            settings=normalize_settings({"open_status": open_status}),
        )
    except IngestionError as exc:
        logger.warning("ingest_file rejected: %s", exc)
        return _error(exc, status_code=400)
    except Exception as exc:
        logger.exception("ingest_file failed")
        return _error(exc)
    replace_dataset(dataset)
    return _json(_dataset_info(dataset).model_dump())


@app.get("/dataset")
def dataset_info():
    dataset = current_dataset()
    if dataset is None:
        return _no_dataset()
    return _json(_dataset_info(dataset).model_dump())


@app.delete("/dataset")
def reset_dataset():
    replace_dataset(None)
    return _json({"reset": True})


@app.get("/overview")
def overview():
    return _with_dataset("overview", compute_overview)


@app.get("/pendency")
def pendency():
    return _with_dataset("pendency", compute_pendency)


@app.get("/issues")
def issues():
    return _with_dataset("issues", compute_issues)


@app.get("/briefing")
def briefing():
    return _with_dataset("briefing", compute_briefing)


@app.post("/cases")
def cases(filters: ViewFiltersModel):
    def _page(dataset: CaseDataset) -> Dict[str, Any]:
        f = _filters_from_model(filters)
        page = query_cases(dataset.cases, f)
        return {
            "filters": asdict(f),
            "items": [case_to_dict(c) for c in page.items],
            "total_matching": page.total_matching,
            "page": page.page,
            "page_size": page.page_size,
            "page_count": page.page_count,
        }

    return _with_dataset("cases", _page)


@app.post("/export")
def export_cases(filters: ViewFiltersModel):
    dataset = current_dataset()
    if dataset is None:
        return _no_dataset()
    f = _filters_from_model(filters)
    export_df = export_frame(select_cases(dataset.cases, f))
    filename = "Logistics_Open_Cases.csv" if f.status == "open" else "Logistics_Cases.csv"
    csv_bytes = export_df.to_csv(index=False).encode("utf-8")
    return Response(content=csv_bytes, media_type="text/csv", headers={"Content-Disposition": f"attachment; filename={filename}"})
