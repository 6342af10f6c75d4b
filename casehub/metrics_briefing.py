"""Structured input for the narrative-report collaborator.

Only the summary that gets handed over is built here; producing the prose is
somebody else's job.
"""

from __future__ import annotations

from typing import Any, Dict

from casehub.data import CaseDataset

TOP_PENDING_LIMIT = 10
EMERGENCY_SAMPLE_LIMIT = 5


def compute_briefing(dataset: CaseDataset) -> Dict[str, Any]:
    threshold = dataset.settings.long_pending_days
    open_cases = [c for c in dataset.cases if c.is_open]
    emergencies = [c for c in open_cases if c.is_emergency]
    long_pending = [c for c in open_cases if c.calculated_pendency > threshold]
    return {
        "total_open": len(open_cases),
        "emergency_count": len(emergencies),
        "long_pending_threshold": threshold,
        "long_pending_count": len(long_pending),
        "top_pending_cases": [
            {
                "order": c.order_number,
                "days_open": c.calculated_pendency,
                "issue": c.abnormal_type,
                "desc": c.description,
                "customer": c.customer_name,
            }
            for c in long_pending[:TOP_PENDING_LIMIT]
        ],
        "emergency_samples": [
            {"order": c.order_number, "issue": c.abnormal_type, "warehouse": c.warehouse}
            for c in emergencies[:EMERGENCY_SAMPLE_LIMIT]
        ],
    }
