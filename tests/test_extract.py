"""
Unit tests for positional field extraction and column mappings.
"""
from datetime import date

from casehub.cells import CellKind
from casehub.columns import DEFAULT_COLUMN_MAPPING, ColumnMapping, column_mapping_from_dict
from casehub.extract import extract_fields

from conftest import SAMPLE_ROW, make_row


class TestExtractFields:
    def test_named_fields_from_default_positions(self, sample_row):
        fx = extract_fields(sample_row)
        assert fx is not None
        assert fx.customer_name == "Acme"
        assert fx.contact_number == "555-0100"
        assert fx.warehouse == "WH1"
        assert fx.delivery_partner == "DHL"
        assert fx.order_number == "ORD1"
        assert fx.awb_number == "AWB1"
        assert fx.abnormal_type == "Damaged"
        assert fx.description == "box crushed"
        assert fx.product == "Widget"
        assert fx.emergency == "Yes"
        assert fx.order_status == "Under Follow Up"
        assert fx.registration_date.kind is CellKind.TEXT
        assert fx.handling_ddl.value == "2024-01-10"

    def test_missing_cells_become_empty_strings(self):
        fx = extract_fields(["2024-01-01", "Acme"])
        assert fx is not None
        assert fx.order_number == ""
        assert fx.order_status == ""
        assert fx.case_status == ""
        assert fx.pending_days.kind is CellKind.EMPTY
        assert fx.case_close_date.kind is CellKind.EMPTY

    def test_none_and_nan_cells_become_empty_strings(self):
        fx = extract_fields(make_row(customer_name=None, warehouse=float("nan")))
        assert fx.customer_name == ""
        assert fx.warehouse == ""

    def test_numeric_cells_render_without_trailing_zero(self):
        fx = extract_fields(make_row(order_number=123456.0, contact_number=5550100))
        assert fx.order_number == "123456"
        assert fx.contact_number == "5550100"

    def test_blank_issue_type_is_unknown(self):
        assert extract_fields(make_row(abnormal_type="")).abnormal_type == "Unknown"
        assert extract_fields(make_row(abnormal_type="   ")).abnormal_type == "Unknown"

    def test_order_status_is_trimmed(self):
        assert extract_fields(make_row(order_status="  Under Follow Up ")).order_status == "Under Follow Up"

    def test_reserved_position_is_ignored(self):
        row = list(SAMPLE_ROW)
        row[19] = "should not appear"
        fx = extract_fields(row)
        assert "should not appear" not in [getattr(fx, name) for name in ("others", "case_status")]

    def test_rejected_rows(self):
        assert extract_fields(None) is None
        assert extract_fields([]) is None
        assert extract_fields(["", None, "  ", float("nan")]) is None

    def test_min_width_rejects_short_rows(self):
        mapping = ColumnMapping(min_width=17)
        assert extract_fields(["2024-01-01", "Acme"], mapping) is None
        assert extract_fields(SAMPLE_ROW, mapping) is not None


class TestColumnMapping:
    def test_default_width(self):
        assert DEFAULT_COLUMN_MAPPING.width == 23
        assert 19 not in DEFAULT_COLUMN_MAPPING.positions().values()

    def test_from_dict_overrides_positions(self):
        mapping = column_mapping_from_dict({"version": "2025.2", "order_status": 3, "warehouse": 16, "bogus": 1})
        assert mapping.version == "2025.2"
        assert mapping.order_status == 3
        assert mapping.warehouse == 16
        assert mapping.customer_name == DEFAULT_COLUMN_MAPPING.customer_name

    def test_from_dict_ignores_bad_values(self):
        mapping = column_mapping_from_dict({"order_status": "x", "warehouse": -1})
        assert mapping == DEFAULT_COLUMN_MAPPING

    def test_from_empty_dict_is_default(self):
        assert column_mapping_from_dict(None) is DEFAULT_COLUMN_MAPPING

    def test_shifted_sheet_only_needs_a_new_mapping(self):
        # an extra column inserted at position 1
        row = ["2024-01-01", "extra"] + SAMPLE_ROW[1:]
        shifted = {name: pos + 1 for name, pos in DEFAULT_COLUMN_MAPPING.positions().items() if pos >= 1}
        fx = extract_fields(row, column_mapping_from_dict(shifted))
        assert fx.customer_name == "Acme"
        assert fx.order_status == "Under Follow Up"
        assert fx.registration_date.value == "2024-01-01"


def test_date_cells_keep_native_values():
    fx = extract_fields(make_row(registration_date=date(2024, 1, 1)))
    assert fx.registration_date.kind is CellKind.DATE
