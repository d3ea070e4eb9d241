"""
Reconciliation Agent
Validates the extracted invoice and PO ledger, then runs the matching engine.
"""

from po_reconciler.state import ReconciliationState
from po_reconciler.core.reconciliation import reconcile, summarize
from po_reconciler.core.validation import validate_invoice_data, validate_po_records
from po_reconciler.schemas.po import MatchingOptions
from po_reconciler.utils.logging import setup_logging, log_pipeline_event
from po_reconciler.config import get_config


logger = setup_logging(__name__)
config = get_config()


def reconciliation_agent(state: ReconciliationState) -> ReconciliationState:
    """
    Reconciliation node.

    Updates state:
    - results
    - summary
    - error (if applicable)
    """
    logger.info(f"[ReconciliationAgent] Reconciling invoice: {state.invoice_id}")

    if not validate_invoice_data(state.invoice_data):
        state.error = "Invalid invoice data structure extracted"
        logger.error(f"[ReconciliationAgent] {state.error}")
        state.add_event("ReconciliationAgent", state.error)
        return state

    if not validate_po_records(state.po_records):
        state.error = "Invalid purchase order data structure"
        logger.error(f"[ReconciliationAgent] {state.error}")
        state.add_event("ReconciliationAgent", state.error)
        return state

    options = state.options or MatchingOptions.from_config(config)

    state.results = reconcile(state.invoice_data, state.po_records, options)
    state.summary = summarize(state.results)

    log_pipeline_event(
        logger,
        "ReconciliationAgent",
        "Reconciliation complete",
        state.summary.model_dump(by_alias=True),
    )
    state.add_event(
        "ReconciliationAgent",
        f"{state.summary.total_items} line items: {state.summary.matches} matched, "
        f"{state.summary.discrepancies} discrepant, {state.summary.no_matches} unmatched",
    )
    return state
