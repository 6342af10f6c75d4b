from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable

from casehub.data import CaseDataset, CaseRecord, case_to_dict, round_average
from casehub.metrics_pendency import compute_pendency
from casehub.views import sort_cases

EMERGENCY_SPOTLIGHT = 4


@dataclass(frozen=True)
class SummaryStats:
    total: int = 0
    open: int = 0
    closed: int = 0
    emergency_count: int = 0
    avg_pendency: int = 0


def compute_summary_stats(cases: Iterable[CaseRecord]) -> SummaryStats:
    cases = list(cases)
    open_cases = [c for c in cases if c.is_open]
    total = len(cases)
    open_count = len(open_cases)
    avg = 0
    if open_count:
        avg = round_average(sum(c.calculated_pendency for c in open_cases) / open_count)
    return SummaryStats(
        total=total,
        open=open_count,
        closed=total - open_count,
        emergency_count=sum(1 for c in open_cases if c.is_emergency),
        avg_pendency=avg,
    )


def compute_overview(dataset: CaseDataset) -> Dict[str, Any]:
    cases = dataset.cases
    summary = compute_summary_stats(cases)
    open_cases = [c for c in cases if c.is_open]
    emergencies = [c for c in open_cases if c.is_emergency]
    feed = sort_cases(open_cases, "calculated_pendency", "desc")[: dataset.settings.feed_size]

    return {
        "dataset": {
            "source": dataset.source,
            "loaded_at": dataset.loaded_at.isoformat() if dataset.loaded_at else None,
            "skipped_rows": dataset.skipped_rows,
            "mapping_version": dataset.mapping_version,
        },
        "summary": asdict(summary),
        "longest_pending": max((c.calculated_pendency for c in open_cases), default=0),
        "pendency": compute_pendency(dataset),
        "emergency": {
            "count": len(emergencies),
            "spotlight": [case_to_dict(c) for c in emergencies[:EMERGENCY_SPOTLIGHT]],
            "overflow": max(0, len(emergencies) - EMERGENCY_SPOTLIGHT),
        },
        "feed": [case_to_dict(c) for c in feed],
    }
