from __future__ import annotations

import math
from datetime import date, datetime, timedelta
from typing import Any, Optional

from casehub.cells import Cell, CellKind, to_cell

# Spreadsheet day serials count from this day (serial 1 == 1899-12-31).
SHEET_EPOCH = date(1899, 12, 30)

# Tried in order; the first that yields a valid calendar date wins.
TEXT_DATE_FORMATS = ("%Y-%m-%d", "%d/%m/%Y", "%m/%d/%Y", "%d-%m-%Y")

DISPLAY_DATE_FORMAT = "%b %d, %Y"


def serial_to_date(serial: float) -> Optional[date]:
    """Convert a spreadsheet day serial to a calendar date (time of day dropped)."""
    if math.isnan(serial) or math.isinf(serial):
        return None
    try:
        return SHEET_EPOCH + timedelta(days=math.floor(serial))
    except (OverflowError, ValueError):
        return None


def to_sheet_serial(value: date) -> int:
    if isinstance(value, datetime):
        value = value.date()
    return (value - SHEET_EPOCH).days


def parse_date_text(text: str) -> Optional[date]:
    s = text.strip()
    if not s:
        return None
    for fmt in TEXT_DATE_FORMATS:
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(s).date()
    except ValueError:
        return None


def parse_sheet_date(value: Any) -> Optional[date]:
    """Normalize one raw cell into a calendar date, or None.

    Accepts native dates/timestamps, spreadsheet serial numbers and text in
    one of ``TEXT_DATE_FORMATS`` (falling back to ISO-8601). Never raises and
    never substitutes a default date for bad input.
    """
    try:
        cell: Cell = to_cell(value)
    except Exception:
        return None
    if cell.kind is CellKind.DATE:
        return cell.value  # type: ignore[return-value]
    if cell.kind is CellKind.NUMBER:
        return serial_to_date(float(cell.value))  # type: ignore[arg-type]
    if cell.kind is CellKind.TEXT:
        return parse_date_text(str(cell.value))
    return None


def format_display_date(value: Optional[date]) -> str:
    if value is None:
        return ""
    return value.strftime(DISPLAY_DATE_FORMAT)
