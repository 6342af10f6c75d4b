"""
Shared fixtures for the case hub tests.

Rows follow the default column mapping (23 cells, position 19 unused).
"""
from datetime import date

import pytest

from casehub.columns import DEFAULT_COLUMN_MAPPING
from casehub.data import build_case_records

REFERENCE_DAY = date(2024, 1, 15)

HEADER = [
    "Registration Date", "Customer Name", "Contact", "Warehouse", "Delivery Partner",
    "Order Number", "ON Number", "AWB", "Abnormal Type", "Description", "Product",
    "WO Status", "Emergency", "O ETA", "Handling DDL", "Requirement Mails",
    "Order Status", "Updated ETA", "Others", "", "Case Status", "Case Close Date",
    "Pending Days",
]

SAMPLE_ROW = [
    "2024-01-01", "Acme", "555-0100", "WH1", "DHL", "ORD1", "", "AWB1", "Damaged",
    "box crushed", "Widget", "", "Yes", "", "2024-01-10", "", "Under Follow Up",
    "2024-01-12", "", "", "", "", "",
]


def make_row(**fields):
    """SAMPLE_ROW with named cells replaced (names from the default mapping)."""
    row = list(SAMPLE_ROW)
    positions = DEFAULT_COLUMN_MAPPING.positions()
    for name, value in fields.items():
        row[positions[name]] = value
    return row


@pytest.fixture
def now():
    return REFERENCE_DAY


@pytest.fixture
def sample_row():
    return list(SAMPLE_ROW)


@pytest.fixture
def mixed_cases(now):
    """Five open and two closed cases across three issue types."""
    rows = [
        HEADER,
        make_row(order_number="A1", registration_date="2024-01-14", abnormal_type="Damaged"),
        make_row(order_number="A2", registration_date="2024-01-10", abnormal_type="Delayed", emergency="No"),
        make_row(order_number="A3", registration_date="2024-01-05", abnormal_type="Delayed"),
        make_row(order_number="A4", registration_date="2023-12-20", abnormal_type="Lost", emergency=""),
        make_row(order_number="A5", registration_date="2024-01-20", abnormal_type="", emergency="no"),
        make_row(order_number="C1", order_status="Closed", pending_days=9),
        make_row(order_number="C2", order_status="Resolved", registration_date="", pending_days=""),
    ]
    return build_case_records(rows, now=now)
