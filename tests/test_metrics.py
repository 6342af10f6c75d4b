"""
Tests for summary stats, pendency buckets, top issues, overview and briefing payloads.
"""
from dataclasses import asdict

from casehub.data import CaseDataset, build_case_records
from casehub.filters import AnalysisSettings
from casehub.metrics_briefing import compute_briefing
from casehub.metrics_issues import compute_issues, compute_top_issues
from casehub.metrics_overview import compute_overview, compute_summary_stats
from casehub.metrics_pendency import BUCKET_LABELS, compute_pendency, compute_pendency_buckets

from conftest import HEADER, make_row


def _open_cases(now, pendencies, issue="Damaged"):
    rows = [HEADER]
    for i, days in enumerate(pendencies):
        rows.append(make_row(order_number=f"P{i}", registration_date="", pending_days=days, abnormal_type=issue))
    # open with no registration date keeps the raw pending days
    return build_case_records(rows, now=now)


class TestSummaryStats:
    def test_mixed(self, mixed_cases):
        stats = compute_summary_stats(mixed_cases)
        assert asdict(stats) == {"total": 7, "open": 5, "closed": 2, "emergency_count": 2, "avg_pendency": 7}

    def test_closed_is_total_minus_open(self, mixed_cases):
        for subset in (mixed_cases, mixed_cases[:3], mixed_cases[4:], ()):
            stats = compute_summary_stats(subset)
            assert stats.closed == stats.total - stats.open

    def test_empty(self, now):
        stats = compute_summary_stats(build_case_records([HEADER], now=now))
        assert asdict(stats) == {"total": 0, "open": 0, "closed": 0, "emergency_count": 0, "avg_pendency": 0}

    def test_no_open_cases(self, mixed_cases):
        closed = [c for c in mixed_cases if not c.is_open]
        assert compute_summary_stats(closed).avg_pendency == 0

    def test_average_rounds_to_nearest(self, now):
        assert compute_summary_stats(_open_cases(now, [1, 2])).avg_pendency == 2
        assert compute_summary_stats(_open_cases(now, [1, 1, 2])).avg_pendency == 1

    def test_negative_half_rounds_toward_positive(self, now):
        cases = _open_cases(now, [-2, -3])
        assert compute_summary_stats(cases).avg_pendency == -2
        assert compute_top_issues(cases).latency == [{"issue_type": "Damaged", "avg_latency_days": -2}]


class TestPendencyBuckets:
    def test_mixed(self, mixed_cases):
        assert compute_pendency_buckets(mixed_cases) == {"0-3": 2, "4-7": 1, "8-15": 1, "15+": 1}

    def test_boundaries(self, now):
        cases = _open_cases(now, [0, 3, 4, 7, 8, 15, 16, -2])
        assert compute_pendency_buckets(cases) == {"0-3": 3, "4-7": 2, "8-15": 2, "15+": 1}

    def test_counts_sum_to_open(self, mixed_cases):
        buckets = compute_pendency_buckets(mixed_cases)
        assert list(buckets) == BUCKET_LABELS
        assert sum(buckets.values()) == compute_summary_stats(mixed_cases).open

    def test_empty(self):
        assert compute_pendency_buckets([]) == {"0-3": 0, "4-7": 0, "8-15": 0, "15+": 0}

    def test_payload_has_chart(self, mixed_cases):
        payload = compute_pendency(CaseDataset(cases=mixed_cases))
        assert payload["open_cases"] == 5
        assert "pendency" in payload["charts"]


class TestTopIssues:
    def test_mixed(self, mixed_cases):
        top = compute_top_issues(mixed_cases)
        assert top.volume == [
            {"issue_type": "Delayed", "count": 2},
            {"issue_type": "Damaged", "count": 1},
            {"issue_type": "Lost", "count": 1},
            {"issue_type": "Unknown", "count": 1},
        ]
        assert top.latency == [
            {"issue_type": "Delayed", "avg_latency_days": 8},
            {"issue_type": "Damaged", "avg_latency_days": 1},
            {"issue_type": "Lost", "avg_latency_days": 26},
            {"issue_type": "Unknown", "avg_latency_days": -5},
        ]

    def test_at_most_five_and_ties_keep_first_seen(self, now):
        rows = [HEADER]
        for issue in ["F", "E", "D", "C", "B", "A", "A", "B"]:
            rows.append(make_row(abnormal_type=issue))
        top = compute_top_issues(build_case_records(rows, now=now))
        assert [r["issue_type"] for r in top.volume] == ["B", "A", "F", "E", "D"]
        assert [r["count"] for r in top.volume] == [2, 2, 1, 1, 1]

    def test_latency_covers_same_issues(self, mixed_cases):
        top = compute_top_issues(mixed_cases)
        assert [r["issue_type"] for r in top.latency] == [r["issue_type"] for r in top.volume]
        counts = [r["count"] for r in top.volume]
        assert counts == sorted(counts, reverse=True)

    def test_closed_cases_are_ignored(self, mixed_cases):
        closed = [c for c in mixed_cases if not c.is_open]
        top = compute_top_issues(closed)
        assert top.volume == [] and top.latency == []

    def test_issues_payload(self, mixed_cases):
        payload = compute_issues(CaseDataset(cases=mixed_cases, settings=AnalysisSettings(top_issue_count=2)))
        assert [r["issue_type"] for r in payload["volume"]] == ["Delayed", "Damaged"]
        assert set(payload["charts"]) == {"volume", "latency"}

    def test_issues_payload_empty(self):
        payload = compute_issues(CaseDataset())
        assert payload == {"volume": [], "latency": [], "charts": {}}


class TestOverview:
    def test_payload(self, mixed_cases):
        payload = compute_overview(CaseDataset(cases=mixed_cases, source="x.xlsx"))
        assert payload["summary"]["open"] == 5
        assert payload["longest_pending"] == 26
        assert payload["pendency"]["buckets"]["15+"] == 1
        assert payload["emergency"]["count"] == 2
        assert payload["emergency"]["overflow"] == 0
        assert [c["order_number"] for c in payload["feed"]] == ["A4", "A3", "A2", "A1", "A5"]
        assert payload["feed"][0]["registration_date"] == "2023-12-20"
        assert payload["dataset"]["source"] == "x.xlsx"

    def test_empty(self):
        payload = compute_overview(CaseDataset())
        assert payload["summary"]["avg_pendency"] == 0
        assert payload["longest_pending"] == 0
        assert payload["feed"] == []


class TestBriefing:
    def test_payload(self, mixed_cases):
        payload = compute_briefing(CaseDataset(cases=mixed_cases))
        assert payload["total_open"] == 5
        assert payload["emergency_count"] == 2
        assert payload["long_pending_count"] == 2
        assert [c["order"] for c in payload["top_pending_cases"]] == ["A3", "A4"]
        assert [c["order"] for c in payload["emergency_samples"]] == ["A1", "A3"]
