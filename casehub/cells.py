"""Raw spreadsheet cells as a closed set of kinds.

Every value coming out of a decoded sheet is classified exactly once into a
``Cell``. Downstream code switches on ``Cell.kind`` instead of inspecting
Python types.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional, Union

import numpy as np
import pandas as pd


class CellKind(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    EMPTY = "empty"


CellValue = Union[str, float, date, None]


@dataclass(frozen=True)
class Cell:
    kind: CellKind
    value: CellValue = None

    @property
    def is_empty(self) -> bool:
        return self.kind is CellKind.EMPTY

    def as_text(self) -> str:
        """Text rendering used for descriptive fields ("" for empty cells)."""
        if self.kind is CellKind.EMPTY:
            return ""
        if self.kind is CellKind.NUMBER:
            return format_number(float(self.value))  # type: ignore[arg-type]
        if self.kind is CellKind.DATE:
            return self.value.isoformat()  # type: ignore[union-attr]
        return str(self.value)


EMPTY = Cell(CellKind.EMPTY)


def format_number(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return repr(value)


def to_cell(value: Any) -> Cell:
    """Classify one raw value into a ``Cell``.

    NaN/NaT/None and whitespace-only strings are EMPTY. Booleans are TEXT
    ("true"/"false") so they never pass as spreadsheet serials.
    """
    if isinstance(value, Cell):
        return value
    if value is None:
        return EMPTY
    if isinstance(value, bool):
        return Cell(CellKind.TEXT, "true" if value else "false")
    if isinstance(value, (pd.Timestamp, datetime, date)):
        if pd.isna(value):
            return EMPTY
        if isinstance(value, datetime):
            return Cell(CellKind.DATE, value.date())
        return Cell(CellKind.DATE, value)
    if isinstance(value, (int, float, np.integer, np.floating)):
        try:
            num = float(value)
        except OverflowError:
            return Cell(CellKind.TEXT, str(value))
        if math.isnan(num) or math.isinf(num):
            return EMPTY
        return Cell(CellKind.NUMBER, num)
    if isinstance(value, str):
        if not value.strip():
            return EMPTY
        return Cell(CellKind.TEXT, value)
    if pd.api.types.is_scalar(value) and pd.isna(value):
        return EMPTY
    text = str(value)
    return Cell(CellKind.TEXT, text) if text.strip() else EMPTY


def cell_at(row: Optional[list], index: int) -> Cell:
    if row is None or index < 0 or index >= len(row):
        return EMPTY
    return to_cell(row[index])
