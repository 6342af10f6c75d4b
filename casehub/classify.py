from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

import pandas as pd

from casehub.cells import Cell, CellKind
from casehub.dates import format_display_date, parse_sheet_date
from casehub.extract import ExtractedFields
from casehub.filters import AnalysisSettings

ReferenceTime = Union[date, datetime]


@dataclass(frozen=True)
class Classification:
    registration_date: Optional[date]
    case_close_date: Optional[date]
    is_open: bool
    is_emergency: bool
    pending_days: Union[int, float]
    calculated_pendency: int
    handling_ddl: str
    updated_eta: str


def reference_day(now: ReferenceTime) -> date:
    if isinstance(now, datetime):
        return now.date()
    return now


def parse_pending_days(cell: Cell) -> Optional[Union[int, float]]:
    """Numeric value of the raw pending-days cell, or None when it is not a number."""
    if cell.kind is CellKind.NUMBER:
        num = float(cell.value)  # type: ignore[arg-type]
    elif cell.kind is CellKind.TEXT:
        num = float(pd.to_numeric(str(cell.value).strip(), errors="coerce"))
    else:
        return None
    if math.isnan(num) or math.isinf(num):
        return None
    return int(num) if num.is_integer() else num


def display_date_or_text(cell: Cell) -> str:
    parsed = parse_sheet_date(cell)
    if parsed is not None:
        return format_display_date(parsed)
    return cell.as_text()


def classify_case(
    fields: ExtractedFields,
    *,
    now: ReferenceTime,
    settings: AnalysisSettings = AnalysisSettings(),
) -> Classification:
    registration_date = parse_sheet_date(fields.registration_date)
    is_open = fields.order_status.strip() == settings.open_status
    is_emergency = fields.emergency.strip().lower() == settings.emergency_token

    override = parse_pending_days(fields.pending_days)
    if is_open and registration_date is not None:
        calculated_pendency = (reference_day(now) - registration_date).days
    elif override is not None:
        calculated_pendency = int(override)
    else:
        calculated_pendency = 0

    return Classification(
        registration_date=registration_date,
        case_close_date=parse_sheet_date(fields.case_close_date),
        is_open=is_open,
        is_emergency=is_emergency,
        pending_days=override if override is not None else 0,
        calculated_pendency=calculated_pendency,
        handling_ddl=display_date_or_text(fields.handling_ddl),
        updated_eta=display_date_or_text(fields.updated_eta),
    )
