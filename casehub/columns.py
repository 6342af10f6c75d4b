"""Named, versioned column positions for the case sheet export.

When the upstream sheet gains or loses a column, ship a new mapping (or pass a
dict through ``column_mapping_from_dict``) instead of touching the extractor.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Dict, Optional


@dataclass(frozen=True)
class ColumnMapping:
    version: str = "2024.1"
    registration_date: int = 0
    customer_name: int = 1
    contact_number: int = 2
    warehouse: int = 3
    delivery_partner: int = 4
    order_number: int = 5
    on_number: int = 6
    awb_number: int = 7
    abnormal_type: int = 8
    description: int = 9
    product: int = 10
    wo_status: int = 11
    emergency: int = 12
    o_eta: int = 13
    handling_ddl: int = 14
    requirement_mails: int = 15
    order_status: int = 16
    updated_eta: int = 17
    others: int = 18
    # position 19 is present in the sheet but carries nothing we read
    case_status: int = 20
    case_close_date: int = 21
    pending_days: int = 22
    min_width: int = 1

    def positions(self) -> Dict[str, int]:
        out = asdict(self)
        out.pop("version")
        out.pop("min_width")
        return out

    @property
    def width(self) -> int:
        return max(self.positions().values()) + 1


DEFAULT_COLUMN_MAPPING = ColumnMapping()


def column_mapping_from_dict(raw: Optional[dict]) -> ColumnMapping:
    """Build a mapping from a partial dict; unknown keys and bad values are ignored."""
    if not raw:
        return DEFAULT_COLUMN_MAPPING
    known = {f.name for f in fields(ColumnMapping)}
    kwargs: Dict[str, object] = {}
    for key, value in raw.items():
        if key not in known:
            continue
        if key == "version":
            kwargs[key] = str(value)
            continue
        try:
            pos = int(value)
        except Exception:
            continue
        if pos < 0:
            continue
        kwargs[key] = pos
    return ColumnMapping(**kwargs)  # type: ignore[arg-type]
