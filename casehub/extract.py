from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence

from casehub.cells import Cell, cell_at, to_cell
from casehub.columns import DEFAULT_COLUMN_MAPPING, ColumnMapping


@dataclass(frozen=True)
class ExtractedFields:
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
    emergency: str
    o_eta: str
    requirement_mails: str
    order_status: str
    others: str
    case_status: str
    # cells that need date-aware (or numeric) handling downstream
    registration_date: Cell
    handling_ddl: Cell
    updated_eta: Cell
    case_close_date: Cell
    pending_days: Cell


def is_blank_row(row: Sequence[Any]) -> bool:
    return all(to_cell(v).is_empty for v in row)


def extract_fields(row: Optional[Sequence[Any]], mapping: ColumnMapping = DEFAULT_COLUMN_MAPPING) -> Optional[ExtractedFields]:
    """Map one raw row onto named fields.

    Returns None when the row has to be skipped: missing, shorter than
    ``mapping.min_width`` or with every cell blank.
    """
    if row is None or len(row) == 0 or len(row) < mapping.min_width:
        return None
    if is_blank_row(row):
        return None

    cells = list(row)

    def text(pos: int) -> str:
        return cell_at(cells, pos).as_text()

    abnormal_type = text(mapping.abnormal_type)
    return ExtractedFields(
        customer_name=text(mapping.customer_name),
        contact_number=text(mapping.contact_number),
        warehouse=text(mapping.warehouse),
        delivery_partner=text(mapping.delivery_partner),
        order_number=text(mapping.order_number),
        on_number=text(mapping.on_number),
        awb_number=text(mapping.awb_number),
        abnormal_type=abnormal_type if abnormal_type.strip() else "Unknown",
        description=text(mapping.description),
        product=text(mapping.product),
        wo_status=text(mapping.wo_status),
        emergency=text(mapping.emergency),
        o_eta=text(mapping.o_eta),
        requirement_mails=text(mapping.requirement_mails),
        order_status=text(mapping.order_status).strip(),
        others=text(mapping.others),
        case_status=text(mapping.case_status),
        registration_date=cell_at(cells, mapping.registration_date),
        handling_ddl=cell_at(cells, mapping.handling_ddl),
        updated_eta=cell_at(cells, mapping.updated_eta),
        case_close_date=cell_at(cells, mapping.case_close_date),
        pending_days=cell_at(cells, mapping.pending_days),
    )
