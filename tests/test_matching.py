"""
Tests for candidate selection.
"""

import pytest

from po_reconciler.core.matching import (
    filter_by_po_number,
    find_candidates,
    keyword_threshold,
    match_by_keywords,
    select_best_candidate,
    within_tolerance,
)
from po_reconciler.schemas.po import MatchingOptions, PurchaseOrderRecord


def make_po(item, description, qty=10, price=5.0, po_number="PO-001", date_required="2025-04-07"):
    return PurchaseOrderRecord(
        po_number=po_number,
        quantity=qty,
        unit_price=price,
        date_required=date_required,
        supplier_item=item,
        supplier_description=description,
    )


@pytest.fixture
def options():
    return MatchingOptions()


@pytest.fixture
def ledger():
    """PO rows for one purchase order plus one row from another."""
    return [
        make_po("WIDGET-A", "Widget A blue steel"),
        make_po("BOLT-M8", "Hex Bolt M8 zinc plated", qty=100, price=0.25),
        make_po("CBL-CAT6", "Cat6 Patch Cable 3ft Blue", qty=25, price=1.75),
        make_po("WIDGET-A", "Widget A from another order", po_number="PO-002"),
    ]


def test_filter_by_po_number_is_exact(ledger):
    assert len(filter_by_po_number(ledger, "PO-001")) == 3
    assert filter_by_po_number(ledger, "po-001") == []
    assert filter_by_po_number(ledger, "PO-00") == []


def test_filter_by_po_number_on_raw_rows():
    rows = [
        {"PurchaseOrderID": "PO-001", "PurchaseQty": 1},
        {"PurchaseOrderID": "PO-002"},
        {"PurchaseQty": 3},
        {"PurchaseOrderID": 1001},
    ]
    assert filter_by_po_number(rows, "PO-001") == [rows[0]]
    assert filter_by_po_number(rows, "1001") == [rows[3]]


def test_item_code_stage_wins(ledger, options):
    """Description and keyword stages are not consulted after an item-code hit."""
    rows = filter_by_po_number(ledger, "PO-001")
    candidates = find_candidates("bolt-m8", rows, options)
    assert [po.supplier_item for po in candidates] == ["BOLT-M8"]


def test_description_stage(ledger, options):
    rows = filter_by_po_number(ledger, "PO-001")
    candidates = find_candidates("Patch Cable", rows, options)
    assert [po.supplier_item for po in candidates] == ["CBL-CAT6"]


def test_keyword_stage(ledger, options):
    rows = filter_by_po_number(ledger, "PO-001")
    # Four words, threshold min(3, 2) = 2; "hex" and "zinc" hit the bolt row
    candidates = find_candidates("Hex Nut Zinc Coated", rows, options)
    assert [po.supplier_item for po in candidates] == ["BOLT-M8"]


def test_no_candidates(ledger, options):
    rows = filter_by_po_number(ledger, "PO-001")
    assert find_candidates("Garden Hose", rows, options) == []


def test_keyword_threshold():
    assert keyword_threshold(8, 3) == 3
    assert keyword_threshold(4, 3) == 2
    assert keyword_threshold(2, 3) == 1
    assert keyword_threshold(1, 3) == 0


def test_single_word_name_matches_every_row(ledger):
    """A one-word name needs zero keyword hits."""
    rows = filter_by_po_number(ledger, "PO-001")
    assert match_by_keywords("Gizmo", rows, 3) == rows


def test_within_tolerance_is_strict():
    assert within_tolerance(10.0, 10.005, 0.01)
    assert not within_tolerance(10.0, 10.5, 0.5)
    assert not within_tolerance(10.0, 10.0, 0.0)


def test_select_prefers_qty_and_price(options):
    candidates = [
        make_po("A", "first", qty=10, price=9.0),
        make_po("B", "second", qty=5, price=5.0),
        make_po("C", "third", qty=10, price=5.0),
    ]
    assert select_best_candidate(candidates, 10, 5.0, options).supplier_item == "C"


def test_select_prefers_qty_over_price(options):
    candidates = [
        make_po("A", "price only", qty=3, price=5.0),
        make_po("B", "qty only", qty=10, price=9.0),
    ]
    assert select_best_candidate(candidates, 10, 5.0, options).supplier_item == "B"


def test_select_price_only(options):
    candidates = [
        make_po("A", "neither", qty=3, price=9.0),
        make_po("B", "price only", qty=4, price=5.0),
    ]
    assert select_best_candidate(candidates, 10, 5.0, options).supplier_item == "B"


def test_select_falls_back_to_first(options):
    candidates = [
        make_po("A", "neither", qty=3, price=9.0),
        make_po("B", "neither", qty=4, price=8.0),
    ]
    assert select_best_candidate(candidates, 10, 5.0, options).supplier_item == "A"


def test_select_first_of_equal_candidates(options):
    candidates = [
        make_po("A", "same", qty=10, price=5.0),
        make_po("B", "same", qty=10, price=5.0),
    ]
    assert select_best_candidate(candidates, 10, 5.0, options).supplier_item == "A"


def test_select_empty(options):
    assert select_best_candidate([], 10, 5.0, options) is None


if __name__ == "__main__":
    pytest.main([__file__])
