"""Filter / sort / paginate over a case record set.

Every analytics view goes through ``query_cases``. Records are never mutated;
each step returns a new tuple.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from datetime import date
from typing import Any, Iterable, Optional, Tuple, Union

from casehub.data import CASE_FIELDS, CaseRecord
from casehub.filters import DEFAULT_SORT_KEY, ViewFilters, normalize_view_filters

SEARCH_FIELDS = ("order_number", "customer_name", "awb_number", "abnormal_type")


@dataclass(frozen=True)
class CasePage:
    items: Tuple[CaseRecord, ...]
    total_matching: int
    page: int
    page_size: int
    page_count: int


def filter_by_date_range(
    cases: Iterable[CaseRecord],
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> Tuple[CaseRecord, ...]:
    """Inclusive range on registration date. Undated cases never match a range."""
    cases = tuple(cases)
    if start is None and end is None:
        return cases
    out = []
    for c in cases:
        d = c.registration_date
        if d is None:
            continue
        if start is not None and d < start:
            continue
        if end is not None and d > end:
            continue
        out.append(c)
    return tuple(out)


def filter_by_status(cases: Iterable[CaseRecord], status: str = "all") -> Tuple[CaseRecord, ...]:
    if status == "open":
        return tuple(c for c in cases if c.is_open)
    if status == "closed":
        return tuple(c for c in cases if not c.is_open)
    return tuple(cases)


def search_cases(cases: Iterable[CaseRecord], q: str = "") -> Tuple[CaseRecord, ...]:
    query = (q or "").strip().lower()
    if not query:
        return tuple(cases)
    return tuple(c for c in cases if any(query in str(getattr(c, f)).lower() for f in SEARCH_FIELDS))


def sort_cases(
    cases: Iterable[CaseRecord],
    key: str = DEFAULT_SORT_KEY,
    direction: str = "desc",
) -> Tuple[CaseRecord, ...]:
    """Stable sort on one record field; None values go last in either direction."""
    if key not in CASE_FIELDS:
        raise KeyError(f"unknown sort field {key!r}")
    cases = tuple(cases)
    present = [c for c in cases if getattr(c, key) is not None]
    missing = [c for c in cases if getattr(c, key) is None]
    ordered = sorted(present, key=lambda c: getattr(c, key), reverse=(direction == "desc"))
    return tuple(ordered) + tuple(missing)


def paginate(cases: Iterable[CaseRecord], page: int = 1, page_size: int = 20) -> Tuple[CaseRecord, ...]:
    """1-indexed page; pages past the end are empty."""
    cases = tuple(cases)
    page = max(1, int(page))
    page_size = max(1, int(page_size))
    start = (page - 1) * page_size
    return cases[start : start + page_size]


def _as_filters(filters: Union[ViewFilters, dict, None]) -> ViewFilters:
    if filters is None:
        return ViewFilters()
    if isinstance(filters, ViewFilters):
        return filters
    return normalize_view_filters(filters, sort_fields=CASE_FIELDS)


def select_cases(cases: Iterable[CaseRecord], filters: Union[ViewFilters, dict, None] = None) -> Tuple[CaseRecord, ...]:
    """Filtered and sorted, not paginated (used for exports)."""
    f = _as_filters(filters)
    subset = filter_by_status(cases, f.status)
    subset = filter_by_date_range(subset, f.start_date, f.end_date)
    subset = search_cases(subset, f.q)
    return sort_cases(subset, f.sort_key, f.sort_direction)


def query_cases(cases: Iterable[CaseRecord], filters: Union[ViewFilters, dict, None] = None) -> CasePage:
    f = _as_filters(filters)
    page = max(1, int(f.page))
    page_size = max(1, int(f.page_size))
    selected = select_cases(cases, f)
    total = len(selected)
    return CasePage(
        items=paginate(selected, page, page_size),
        total_matching=total,
        page=page,
        page_size=page_size,
        page_count=math.ceil(total / page_size) if total else 0,
    )


class ViewState:
    """Current view configuration for one analytics view.

    Any change to filtering, sorting or page size sends the view back to
    page 1; only ``go_to`` moves between pages of the same result.
    """

    def __init__(self, filters: Optional[ViewFilters] = None) -> None:
        self._filters = filters or ViewFilters()

    @property
    def filters(self) -> ViewFilters:
        return self._filters

    def update(self, **changes: Any) -> ViewFilters:
        page = changes.pop("page", None)
        candidate = replace(self._filters, **changes)
        if not candidate.same_query(self._filters):
            candidate = replace(candidate, page=1)
        elif page is not None:
            candidate = replace(candidate, page=max(1, int(page)))
        self._filters = candidate
        return candidate

    def go_to(self, page: int) -> ViewFilters:
        self._filters = replace(self._filters, page=max(1, int(page)))
        return self._filters

    def apply(self, cases: Iterable[CaseRecord]) -> CasePage:
        return query_cases(cases, self._filters)
