from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List

import pandas as pd

from casehub.charts import bar_spec
from casehub.data import CaseDataset, CaseRecord, round_average

UNKNOWN_ISSUE = "Unknown"


@dataclass(frozen=True)
class TopIssues:
    volume: List[Dict[str, Any]] = field(default_factory=list)
    latency: List[Dict[str, Any]] = field(default_factory=list)


def issue_label(case: CaseRecord) -> str:
    label = case.abnormal_type or ""
    return label if label.strip() else UNKNOWN_ISSUE


def compute_top_issues(cases: Iterable[CaseRecord], top_n: int = 5) -> TopIssues:
    """Top issue types among open cases by count, with their average pendency.

    Ties on count keep the issue type seen first. ``latency`` covers exactly
    the issue types of ``volume``, in the same order.
    """
    open_cases = [c for c in cases if c.is_open]
    if not open_cases or top_n <= 0:
        return TopIssues()

    df = pd.DataFrame(
        {
            "issue_type": [issue_label(c) for c in open_cases],
            "pendency": [c.calculated_pendency for c in open_cases],
        }
    )
    grouped = (
        df.groupby("issue_type", sort=False)
        .agg(cases=("pendency", "size"), total_pendency=("pendency", "sum"))
        .reset_index()
    )
    grouped["first_seen"] = range(len(grouped))
    top = grouped.sort_values(["cases", "first_seen"], ascending=[False, True]).head(top_n)

    volume = [{"issue_type": str(r.issue_type), "count": int(r.cases)} for r in top.itertuples(index=False)]
    latency = [
        {
            "issue_type": str(r.issue_type),
            "avg_latency_days": round_average(r.total_pendency / r.cases),
        }
        for r in top.itertuples(index=False)
    ]
    return TopIssues(volume=volume, latency=latency)


def compute_issues(dataset: CaseDataset) -> Dict[str, Any]:
    top = compute_top_issues(dataset.cases, dataset.settings.top_issue_count)
    charts: Dict[str, Any] = {}
    if top.volume:
        order = [row["issue_type"] for row in top.volume]
        charts["volume"] = bar_spec(
            pd.DataFrame(top.volume), x="issue_type", y="count", x_title="Issue Type", y_title="Open Cases", sort=order
        )
        charts["latency"] = bar_spec(
            pd.DataFrame(top.latency),
            x="issue_type",
            y="avg_latency_days",
            x_title="Issue Type",
            y_title="Avg Days Pending",
            sort=order,
        )
    return {**asdict(top), "charts": charts}
