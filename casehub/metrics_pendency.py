from __future__ import annotations

import math
from typing import Any, Dict, Iterable

import pandas as pd

from casehub.charts import bar_spec
from casehub.data import CaseDataset, CaseRecord

BUCKET_LABELS = ["0-3", "4-7", "8-15", "15+"]
# right-closed: (-inf, 3], (3, 7], (7, 15], (15, inf); negatives land in 0-3
BUCKET_EDGES = [-math.inf, 3, 7, 15, math.inf]


def compute_pendency_buckets(cases: Iterable[CaseRecord]) -> Dict[str, int]:
    pendency = pd.Series([c.calculated_pendency for c in cases if c.is_open], dtype="float64")
    if pendency.empty:
        return {label: 0 for label in BUCKET_LABELS}
    binned = pd.cut(pendency, bins=BUCKET_EDGES, labels=BUCKET_LABELS, right=True)
    counts = binned.value_counts(sort=False).reindex(BUCKET_LABELS, fill_value=0)
    return {label: int(counts[label]) for label in BUCKET_LABELS}


def compute_pendency(dataset: CaseDataset) -> Dict[str, Any]:
    buckets = compute_pendency_buckets(dataset.cases)
    chart_df = pd.DataFrame({"bucket": list(buckets.keys()), "count": list(buckets.values())})
    return {
        "buckets": buckets,
        "open_cases": sum(buckets.values()),
        "charts": {
            "pendency": bar_spec(chart_df, x="bucket", y="count", x_title="Days Pending", y_title="Open Cases", sort=BUCKET_LABELS)
        },
    }
