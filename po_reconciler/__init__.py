"""
Invoice to purchase-order reconciliation
"""

__version__ = "1.0.0"
__description__ = "Reconciles supplier invoice line items against a purchase-order ledger"

from po_reconciler.main import process_invoice, process_invoices_batch
from po_reconciler.core.reconciliation import reconcile, summarize
from po_reconciler.state import ReconciliationState
from po_reconciler.schemas.output import ReconciliationReport, ReconciliationResultRow

__all__ = [
    "process_invoice",
    "process_invoices_batch",
    "reconcile",
    "summarize",
    "ReconciliationState",
    "ReconciliationReport",
    "ReconciliationResultRow",
]
