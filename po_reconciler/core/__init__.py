# po_reconciler/core/__init__.py

from po_reconciler.core.reconciliation import reconcile, summarize
from po_reconciler.core.validation import validate_invoice_data, validate_po_records
from po_reconciler.core.matching import find_candidates, select_best_candidate

__all__ = [
    "reconcile",
    "summarize",
    "validate_invoice_data",
    "validate_po_records",
    "find_candidates",
    "select_best_candidate",
]
