from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Literal, Optional

from casehub.dates import parse_sheet_date

Status = Literal["all", "open", "closed"]
SortDirection = Literal["asc", "desc"]

DEFAULT_SORT_KEY = "calculated_pendency"
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 500


@dataclass(frozen=True)
class AnalysisSettings:
    open_status: str = "Under Follow Up"
    emergency_token: str = "yes"
    top_issue_count: int = 5
    long_pending_days: int = 5
    feed_size: int = 6


@dataclass(frozen=True)
class ViewFilters:
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Status = "all"
    sort_key: str = DEFAULT_SORT_KEY
    sort_direction: SortDirection = "desc"
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    q: str = ""

    def same_query(self, other: "ViewFilters") -> bool:
        """True when both filters select and order records identically."""
        return (
            self.start_date == other.start_date
            and self.end_date == other.end_date
            and self.status == other.status
            and self.sort_key == other.sort_key
            and self.sort_direction == other.sort_direction
            and self.page_size == other.page_size
            and self.q == other.q
        )


def _as_int(value: object, default: int) -> int:
    try:
        return int(value)  # type: ignore[arg-type]
    except Exception:
        return default


def normalize_view_filters(raw: dict, *, sort_fields: Optional[Iterable[str]] = None) -> ViewFilters:
    start_date = parse_sheet_date(raw.get("start_date"))
    end_date = parse_sheet_date(raw.get("end_date"))

    status = str(raw.get("status") or "all").strip().lower()
    if status not in ("all", "open", "closed"):
        status = "all"

    sort_key = str(raw.get("sort_key") or DEFAULT_SORT_KEY).strip()
    if sort_fields is not None and sort_key not in set(sort_fields):
        sort_key = DEFAULT_SORT_KEY

    sort_direction = str(raw.get("sort_direction") or "desc").strip().lower()
    if sort_direction not in ("asc", "desc"):
        sort_direction = "desc"

    page = max(1, _as_int(raw.get("page", 1), 1))
    page_size = _as_int(raw.get("page_size", DEFAULT_PAGE_SIZE), DEFAULT_PAGE_SIZE)
    page_size = max(1, min(MAX_PAGE_SIZE, page_size))

    q = str(raw.get("q") or "").strip()
    return ViewFilters(
        start_date=start_date,
        end_date=end_date,
        status=status,  # type: ignore[arg-type]
        sort_key=sort_key,
        sort_direction=sort_direction,  # type: ignore[arg-type]
        page=page,
        page_size=page_size,
        q=q,
    )


def normalize_settings(raw: Optional[dict]) -> AnalysisSettings:
    raw = raw or {}
    defaults = AnalysisSettings()
    open_status = str(raw.get("open_status") or defaults.open_status).strip()
    emergency_token = str(raw.get("emergency_token") or defaults.emergency_token).strip().lower()
    return AnalysisSettings(
        open_status=open_status,
        emergency_token=emergency_token,
        top_issue_count=max(1, min(50, _as_int(raw.get("top_issue_count", defaults.top_issue_count), defaults.top_issue_count))),
        long_pending_days=_as_int(raw.get("long_pending_days", defaults.long_pending_days), defaults.long_pending_days),
        feed_size=max(1, min(100, _as_int(raw.get("feed_size", defaults.feed_size), defaults.feed_size))),
    )
