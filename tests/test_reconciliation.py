"""
Tests for the reconciliation engine and summary.
"""

import pytest

from po_reconciler.core.reconciliation import reconcile, summarize
from po_reconciler.schemas.output import MatchStatus, Source
from po_reconciler.schemas.po import MatchingOptions


def make_po_row(**overrides):
    row = {
        "PurchaseOrderID": "PO1",
        "PurchaseQty": 10,
        "PurchasePrice": 5,
        "DateRequired": "2025-01-01",
        "PurchaseSupplierItem": "WIDGET-A",
        "PurchaseSupplierDescription": "Widget A",
    }
    row.update(overrides)
    return row


@pytest.fixture
def invoice():
    return {
        "poNumber": "PO1",
        "lineItems": [{"productName": "Widget A", "quantity": 10, "unitPrice": 5}],
    }


@pytest.fixture
def options():
    return MatchingOptions(require_date_match=False)


def test_exact_match(invoice, options):
    results = reconcile(invoice, [make_po_row()], options)

    assert len(results) == 2
    invoice_row, po_row = results
    assert invoice_row.source == Source.INVOICE
    assert po_row.source == Source.PO
    assert invoice_row.status == MatchStatus.MATCH
    assert po_row.status == MatchStatus.MATCH

    summary = summarize(results)
    assert summary.total_items == 1
    assert summary.matches == 1


def test_quantity_discrepancy(invoice, options):
    results = reconcile(invoice, [make_po_row(PurchaseQty=8)], options)

    assert [row.status for row in results] == [MatchStatus.DISCREPANCY, MatchStatus.DISCREPANCY]
    for row in results:
        assert row.qty_match is False
        assert row.price_match is True
        assert row.date_match is True

    assert summarize(results).discrepancies == 1


def test_no_match_row_has_no_flags(options):
    invoice = {
        "poNumber": "PO1",
        "lineItems": [{"productName": "Garden Hose", "quantity": 2, "unitPrice": 12.5}],
    }
    results = reconcile(invoice, [make_po_row()], options)

    assert len(results) == 1
    row = results[0]
    assert row.source == Source.INVOICE
    assert row.status == MatchStatus.NO_MATCH
    assert row.qty_match is None
    assert "_qty_match" not in row.to_dict()
    assert row.total_price == 25.0

    summary = summarize(results)
    assert summary.no_matches == 1
    assert summary.total_items == 1


def test_empty_po_set_returns_empty(invoice, options):
    assert reconcile(invoice, [], options) == []
    assert reconcile(invoice, None, options) == []


def test_other_po_numbers_ignored(invoice, options):
    results = reconcile(invoice, [make_po_row(PurchaseOrderID="PO2")], options)
    assert len(results) == 1
    assert results[0].status == MatchStatus.NO_MATCH


def test_incomplete_rows_for_other_orders_ignored(invoice, options):
    ledger = [make_po_row(), {"PurchaseOrderID": "PO9", "PurchaseQty": 1}]
    results = reconcile(invoice, ledger, options)

    assert [row.status for row in results] == [MatchStatus.MATCH, MatchStatus.MATCH]


def test_incomplete_row_for_same_order_degrades(invoice, options):
    ledger = [{"PurchaseOrderID": "PO1", "PurchaseSupplierItem": "WIDGET-A"}]
    invoice["lineItems"][0]["productName"] = "widget-a"
    invoice_row, po_row = reconcile(invoice, ledger, options)

    assert po_row.quantity == 0.0
    assert po_row.unit_price == 0.0
    assert po_row.date == ""
    assert po_row.description == "WIDGET-A - "
    assert invoice_row.status == MatchStatus.DISCREPANCY


def test_rows_follow_line_item_order(options):
    invoice = {
        "poNumber": "PO1",
        "lineItems": [
            {"productName": "Garden Hose", "quantity": 1, "unitPrice": 3},
            {"productName": "Widget A", "quantity": 10, "unitPrice": 5},
            {"productName": "Hose Reel", "quantity": 1, "unitPrice": 30},
        ],
    }
    results = reconcile(invoice, [make_po_row()], options)

    assert [(row.source, row.description) for row in results] == [
        (Source.INVOICE, "Garden Hose"),
        (Source.INVOICE, "Widget A"),
        (Source.PO, "WIDGET-A - Widget A"),
        (Source.INVOICE, "Hose Reel"),
    ]


def test_po_row_fields(invoice, options):
    po = make_po_row(PurchaseSupplierDescription="Widget A\nBlue", PurchaseQty="10", PurchasePrice="5.00")
    _, po_row = reconcile(invoice, [po], options)

    assert po_row.po_number == "PO1"
    assert po_row.description == "WIDGET-A - Widget A Blue"
    assert po_row.quantity == 10.0
    assert po_row.unit_price == 5.0
    assert po_row.total_price == 50.0
    assert po_row.date == "01/01/2025"


def test_unit_price_derived_from_total(options):
    invoice = {
        "poNumber": "PO1",
        "lineItems": [{"productName": "Widget A", "quantity": 4, "totalPrice": 20, "unitPrice": None}],
    }
    invoice_row, _ = reconcile(invoice, [make_po_row(PurchaseQty=4)], options)

    assert invoice_row.unit_price == 5.0
    assert invoice_row.total_price == 20.0
    assert invoice_row.status == MatchStatus.MATCH


def test_legacy_price_field(options):
    invoice = {
        "poNumber": "PO1",
        "lineItems": [{"productName": "Widget A", "quantity": 10, "price": "5"}],
    }
    invoice_row, _ = reconcile(invoice, [make_po_row()], options)
    assert invoice_row.unit_price == 5.0


def test_numeric_strings_and_unparseable_values(options):
    invoice = {
        "poNumber": "PO1",
        "lineItems": [{"productName": "Widget A", "quantity": "10 pcs", "unitPrice": "n/a"}],
    }
    invoice_row, _ = reconcile(invoice, [make_po_row()], options)

    assert invoice_row.quantity == 10.0
    assert invoice_row.unit_price == 0.0
    assert invoice_row.price_match is False
    assert invoice_row.status == MatchStatus.DISCREPANCY


def test_date_ignored_unless_required(invoice, options):
    invoice["invoiceDate"] = "2025-06-30"
    invoice_row, _ = reconcile(invoice, [make_po_row()], options)

    assert invoice_row.date == "06/30/2025"
    assert invoice_row.date_match is True
    assert invoice_row.status == MatchStatus.MATCH


def test_date_required(invoice):
    options = MatchingOptions(require_date_match=True)

    invoice["invoiceDate"] = "2025-06-30"
    invoice_row, _ = reconcile(invoice, [make_po_row()], options)
    assert invoice_row.date_match is False
    assert invoice_row.status == MatchStatus.DISCREPANCY

    invoice["invoiceDate"] = "Jan 1, 2025"
    invoice_row, _ = reconcile(invoice, [make_po_row()], options)
    assert invoice_row.date_match is True
    assert invoice_row.status == MatchStatus.MATCH


def test_line_delivery_date_preferred_over_invoice_date():
    invoice = {
        "poNumber": "PO1",
        "invoiceDate": "2025-06-30",
        "lineItems": [
            {"productName": "Widget A", "quantity": 10, "unitPrice": 5, "deliveryDate": "01/01/2025"},
        ],
    }
    options = MatchingOptions(require_date_match=True)
    invoice_row, _ = reconcile(invoice, [make_po_row()], options)

    assert invoice_row.date == "01/01/2025"
    assert invoice_row.status == MatchStatus.MATCH


def test_empty_dates_match_when_required(invoice):
    options = MatchingOptions(require_date_match=True)
    invoice_row, po_row = reconcile(invoice, [make_po_row(DateRequired="NULL")], options)

    assert invoice_row.date == ""
    assert po_row.date == ""
    assert invoice_row.date_match is True


def test_tolerance_boundary_is_exclusive(invoice):
    options = MatchingOptions(quantity_tolerance=2, require_date_match=False)

    invoice_row, _ = reconcile(invoice, [make_po_row(PurchaseQty=8)], options)
    assert invoice_row.qty_match is False

    invoice_row, _ = reconcile(invoice, [make_po_row(PurchaseQty=8.5)], options)
    assert invoice_row.qty_match is True


def test_best_candidate_chosen(options):
    """The second row agrees on quantity and price and wins over the first."""
    invoice = {
        "poNumber": "PO1",
        "lineItems": [{"productName": "Widget", "quantity": 4, "unitPrice": 2.5}],
    }
    ledger = [
        make_po_row(PurchaseSupplierItem="WIDGET-A", PurchaseQty=10, PurchasePrice=5),
        make_po_row(PurchaseSupplierItem="WIDGET-B", PurchaseQty=4, PurchasePrice=2.5),
    ]
    _, po_row = reconcile(invoice, ledger, options)

    assert po_row.description.startswith("WIDGET-B")
    assert po_row.status == MatchStatus.MATCH


def test_flags_rederived_for_fallback_candidate(options):
    invoice = {
        "poNumber": "PO1",
        "lineItems": [{"productName": "Widget A", "quantity": 3, "unitPrice": 9}],
    }
    invoice_row, po_row = reconcile(invoice, [make_po_row()], options)

    assert invoice_row.qty_match is False
    assert invoice_row.price_match is False
    assert po_row.status == MatchStatus.DISCREPANCY


def test_reconcile_is_deterministic(invoice, options):
    ledger = [make_po_row(), make_po_row(PurchaseQty=8)]
    assert reconcile(invoice, ledger, options) == reconcile(invoice, ledger, options)


def test_summary_counts_invoice_rows_only(options):
    invoice = {
        "poNumber": "PO1",
        "lineItems": [
            {"productName": "Widget A", "quantity": 10, "unitPrice": 5},
            {"productName": "Widget A", "quantity": 7, "unitPrice": 5},
            {"productName": "Garden Hose", "quantity": 1, "unitPrice": 3},
        ],
    }
    results = reconcile(invoice, [make_po_row()], options)
    summary = summarize(results)

    assert len(results) == 5
    assert summary.total_items == 3
    assert summary.matches == 1
    assert summary.discrepancies == 1
    assert summary.no_matches == 1
    assert summary.matches + summary.discrepancies + summary.no_matches == summary.total_items


def test_summarize_empty():
    summary = summarize([])
    assert summary.model_dump(by_alias=True) == {
        "totalItems": 0,
        "matches": 0,
        "discrepancies": 0,
        "noMatches": 0,
    }


if __name__ == "__main__":
    pytest.main([__file__])
