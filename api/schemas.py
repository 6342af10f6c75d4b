from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class AnalysisSettingsModel(BaseModel):
    open_status: str = "Under Follow Up"
    emergency_token: str = "yes"
    top_issue_count: int = 5
    long_pending_days: int = 5
    feed_size: int = 6


class IngestRowsRequest(BaseModel):
    rows: List[Optional[List[Any]]]
    source: str = ""
    now: Optional[datetime] = None
    settings: AnalysisSettingsModel = Field(default_factory=AnalysisSettingsModel)
    column_mapping: Optional[Dict[str, Union[int, str]]] = None


class ViewFiltersModel(BaseModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Literal["all", "open", "closed"] = "all"
    sort_key: str = "calculated_pendency"
    sort_direction: Literal["asc", "desc"] = "desc"
    page: int = 1
    page_size: int = 20
    q: str = ""


class DatasetInfoResponse(BaseModel):
    source: str
    loaded_at: Optional[datetime]
    cases: int
    skipped_rows: int
    mapping_version: str
