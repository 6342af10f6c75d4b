from __future__ import annotations

import io
import logging
import math
import uuid
from dataclasses import dataclass, field, fields
from datetime import date, datetime
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence, Tuple, Union

import pandas as pd

from casehub.classify import Classification, ReferenceTime, classify_case
from casehub.columns import DEFAULT_COLUMN_MAPPING, ColumnMapping
from casehub.extract import ExtractedFields, extract_fields
from casehub.filters import AnalysisSettings

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".xlsx", ".csv")

EXPORT_COLUMNS = [
    "Registration Date",
    "Customer Name",
    "Order Number",
    "Pendency Days",
    "Abnormal Type",
    "Description",
    "Order Status",
    "Handling DDL",
    "Updated ETA",
    "Case Close Date",
    "Emergency",
]


class IngestionError(ValueError):
    """Input could not be decomposed into rows at all."""


@dataclass(frozen=True)
class CaseRecord:
    id: str
    registration_date: Optional[date]
    customer_name: str
    contact_number: str
    warehouse: str
    delivery_partner: str
    order_number: str
    on_number: str
    awb_number: str
    abnormal_type: str
    description: str
    product: str
    wo_status: str
    is_emergency: bool
    o_eta: str
    handling_ddl: str
    requirement_mails: str
    order_status: str
    updated_eta: str
    others: str
    case_status: str
    case_close_date: Optional[date]
    pending_days: Union[int, float]
    calculated_pendency: int
    is_open: bool


CASE_FIELDS: Tuple[str, ...] = tuple(f.name for f in fields(CaseRecord))


@dataclass(frozen=True)
class CaseDataset:
    cases: Tuple[CaseRecord, ...] = ()
    loaded_at: Optional[datetime] = None
    source: str = ""
    skipped_rows: int = 0
    mapping_version: str = DEFAULT_COLUMN_MAPPING.version
    settings: AnalysisSettings = field(default_factory=AnalysisSettings)


def round_average(value: float) -> int:
    """Nearest integer, halves toward +infinity (-2.5 -> -2, 2.5 -> 3)."""
    return math.floor(value + 0.5)


def make_case_id(row_index: int, order_number: str) -> str:
    suffix = order_number if order_number else uuid.uuid4().hex[:12]
    return f"case-{row_index}-{suffix}"


def make_case_record(row_index: int, fx: ExtractedFields, cls: Classification) -> CaseRecord:
    return CaseRecord(
        id=make_case_id(row_index, fx.order_number),
        registration_date=cls.registration_date,
        customer_name=fx.customer_name,
        contact_number=fx.contact_number,
        warehouse=fx.warehouse,
        delivery_partner=fx.delivery_partner,
        order_number=fx.order_number,
        on_number=fx.on_number,
        awb_number=fx.awb_number,
        abnormal_type=fx.abnormal_type,
        description=fx.description,
        product=fx.product,
        wo_status=fx.wo_status,
        is_emergency=cls.is_emergency,
        o_eta=fx.o_eta,
        handling_ddl=cls.handling_ddl,
        requirement_mails=fx.requirement_mails,
        order_status=fx.order_status,
        updated_eta=cls.updated_eta,
        others=fx.others,
        case_status=fx.case_status,
        case_close_date=cls.case_close_date,
        pending_days=cls.pending_days,
        calculated_pendency=cls.calculated_pendency,
        is_open=cls.is_open,
    )


def _as_row_list(rows: Any) -> List[Any]:
    if isinstance(rows, pd.DataFrame):
        return frame_to_rows(rows)
    if rows is None or isinstance(rows, (str, bytes, bytearray, dict)):
        raise IngestionError(f"expected a sequence of rows, got {type(rows).__name__}")
    try:
        return list(rows)
    except TypeError as exc:
        raise IngestionError(f"expected a sequence of rows, got {type(rows).__name__}") from exc


def _as_row(row: Any) -> Optional[Sequence[Any]]:
    """The row as a list of cells, or None when it has no usable shape."""
    if row is None:
        return None
    if isinstance(row, (list, tuple)):
        return row
    if isinstance(row, (str, bytes, bytearray, dict)):
        return None
    try:
        return list(row)
    except TypeError:
        return None


def _build(
    rows: Any,
    *,
    now: Optional[ReferenceTime],
    mapping: ColumnMapping,
    settings: AnalysisSettings,
) -> Tuple[Tuple[CaseRecord, ...], int]:
    row_list = _as_row_list(rows)
    now = now if now is not None else datetime.now()
    out: List[CaseRecord] = []
    skipped = 0
    # row 0 is the header and is discarded whatever it holds
    for i in range(1, len(row_list)):
        row = _as_row(row_list[i])
        fx = extract_fields(row, mapping)
        if fx is None:
            skipped += 1
            logger.debug("row %d skipped: missing, malformed, short or blank", i)
            continue
        out.append(make_case_record(i, fx, classify_case(fx, now=now, settings=settings)))
    return tuple(out), skipped


def build_case_records(
    rows: Any,
    *,
    now: Optional[ReferenceTime] = None,
    mapping: ColumnMapping = DEFAULT_COLUMN_MAPPING,
    settings: AnalysisSettings = AnalysisSettings(),
) -> Tuple[CaseRecord, ...]:
    """Turn decoded sheet rows into case records, in input order.

    ``now`` is the reference time for pendency; it defaults to the current
    time, captured once for the whole call. A DataFrame is taken as raw rows
    (read it with ``header=None``): its column labels are ignored and its
    first row is the discarded header.
    """
    records, _ = _build(rows, now=now, mapping=mapping, settings=settings)
    return records


def load_case_data(
    rows: Any,
    *,
    source: str = "",
    now: Optional[ReferenceTime] = None,
    mapping: ColumnMapping = DEFAULT_COLUMN_MAPPING,
    settings: AnalysisSettings = AnalysisSettings(),
) -> CaseDataset:
    loaded_at = datetime.now()
    records, skipped = _build(rows, now=now or loaded_at, mapping=mapping, settings=settings)
    logger.info(
        "ingested %d cases from %s (%d rows skipped, mapping %s)",
        len(records),
        source or "<rows>",
        skipped,
        mapping.version,
    )
    return CaseDataset(
        cases=records,
        loaded_at=loaded_at,
        source=source,
        skipped_rows=skipped,
        mapping_version=mapping.version,
        settings=settings,
    )


# ---------------- Decoding ----------------
def frame_to_rows(df: pd.DataFrame) -> List[List[Any]]:
    if df.empty:
        return []
    clean = df.astype(object).where(df.notna(), None)
    return [list(r) for r in clean.itertuples(index=False, name=None)]


def load_rows(source: Union[str, Path, bytes], *, filename: Optional[str] = None) -> List[List[Any]]:
    """Decode the first worksheet of an XLSX file (or a CSV file) into rows of cells.

    ``source`` is a path or raw bytes; with bytes, ``filename`` picks the format.
    """
    if isinstance(source, (bytes, bytearray)):
        name = filename or ""
        handle: Any = io.BytesIO(source)
    else:
        name = str(source)
        handle = Path(source)
    suffix = Path(name).suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise IngestionError(f"unsupported file type {suffix or '<none>'!r}; expected one of {', '.join(SUPPORTED_SUFFIXES)}")
    try:
        if suffix == ".csv":
            df = pd.read_csv(handle, header=None, dtype=object, skip_blank_lines=False)
        else:
            df = pd.read_excel(handle, sheet_name=0, header=None)
    except pd.errors.EmptyDataError:
        return []
    except Exception as exc:
        raise IngestionError(f"could not read {name or 'upload'}: {exc}") from exc
    return frame_to_rows(df)


# ---------------- Frames ----------------
def cases_to_frame(cases: Iterable[CaseRecord]) -> pd.DataFrame:
    rows = [{name: getattr(c, name) for name in CASE_FIELDS} for c in cases]
    return pd.DataFrame(rows, columns=list(CASE_FIELDS))


def export_frame(cases: Iterable[CaseRecord]) -> pd.DataFrame:
    """Flat, display-named table for the tabular export collaborator."""
    rows = [
        {
            "Registration Date": c.registration_date.isoformat() if c.registration_date else "",
            "Customer Name": c.customer_name,
            "Order Number": c.order_number,
            "Pendency Days": c.calculated_pendency,
            "Abnormal Type": c.abnormal_type,
            "Description": c.description,
            "Order Status": c.order_status,
            "Handling DDL": c.handling_ddl,
            "Updated ETA": c.updated_eta,
            "Case Close Date": c.case_close_date.isoformat() if c.case_close_date else "",
            "Emergency": "Yes" if c.is_emergency else "No",
        }
        for c in cases
    ]
    return pd.DataFrame(rows, columns=EXPORT_COLUMNS)


def case_to_dict(case: CaseRecord) -> dict:
    out = {name: getattr(case, name) for name in CASE_FIELDS}
    for key in ("registration_date", "case_close_date"):
        out[key] = out[key].isoformat() if out[key] is not None else None
    return out
