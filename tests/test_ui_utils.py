"""
Tests for the dashboard presentation helpers.
"""

import pytest

from po_reconciler.core.reconciliation import reconcile, summarize
from po_reconciler.schemas.output import EXPORT_COLUMNS
from po_reconciler.schemas.po import MatchingOptions
from po_reconciler.ui.ui_utils import (
    HIGHLIGHT_MATCH,
    HIGHLIGHT_MISMATCH,
    HIGHLIGHT_NO_MATCH,
    build_highlight_grid,
    format_mismatch_explanation,
    format_status_display,
    get_cell_highlight,
    get_source_label,
    get_status_emoji,
    summary_metrics,
)


@pytest.fixture
def results():
    invoice = {
        "poNumber": "PO1",
        "lineItems": [
            {"productName": "Widget A", "quantity": 8, "unitPrice": 5},
            {"productName": "Garden Hose", "quantity": 1, "unitPrice": 30},
        ],
    }
    po_records = [{
        "PurchaseOrderID": "PO1",
        "PurchaseQty": 10,
        "PurchasePrice": 5,
        "DateRequired": "2025-01-01",
        "PurchaseSupplierItem": "WIDGET-A",
        "PurchaseSupplierDescription": "Widget A",
    }]
    return reconcile(invoice, po_records, MatchingOptions())


def test_status_emoji():
    assert get_status_emoji("MATCH") == "🟢"
    assert get_status_emoji("DISCREPANCY") == "🔴"
    assert get_status_emoji("NO MATCH") == "🟡"
    assert get_status_emoji("UNKNOWN") == "⚪"
    assert format_status_display("MATCH") == "🟢 MATCH"


def test_source_label():
    assert get_source_label("INVOICE") == "📄 Invoice"
    assert get_source_label("PO") == "📋 Purchase Order"
    assert get_source_label("OTHER") == "OTHER"


def test_cell_highlight(results):
    invoice_row, po_row, no_match_row = results

    assert get_cell_highlight(invoice_row, "Qty") == HIGHLIGHT_MISMATCH
    assert get_cell_highlight(invoice_row, "Unit Price") == HIGHLIGHT_MATCH
    assert get_cell_highlight(po_row, "Qty") == HIGHLIGHT_MISMATCH
    assert get_cell_highlight(invoice_row, "Item/Description") == ""
    assert get_cell_highlight(no_match_row, "Qty") == HIGHLIGHT_NO_MATCH


def test_highlight_grid_shape(results):
    grid = build_highlight_grid(results, EXPORT_COLUMNS)
    assert len(grid) == len(results)
    assert all(len(row) == len(EXPORT_COLUMNS) for row in grid)


def test_summary_metrics(results):
    metrics = summary_metrics(summarize(results))
    assert [metric["value"] for metric in metrics] == [2, 0, 1, 1]
    assert metrics[0]["label"] == "Line Items"


def test_summary_metrics_without_summary():
    assert [metric["value"] for metric in summary_metrics(None)] == [0, 0, 0, 0]


def test_mismatch_explanation(results):
    invoice_row, _, no_match_row = results
    assert format_mismatch_explanation(invoice_row) == "Mismatch on quantity"
    assert format_mismatch_explanation(no_match_row) == ""


if __name__ == "__main__":
    pytest.main([__file__])
