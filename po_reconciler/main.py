"""
Main entry point for the invoice reconciler.
"""

import asyncio
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from po_reconciler.state import ReconciliationState
from po_reconciler.graph import get_reconciliation_graph
from po_reconciler.schemas.output import ReconciliationReport, ReconciliationSummary
from po_reconciler.schemas.po import MatchingOptions
from po_reconciler.sources import load_purchase_orders
from po_reconciler.utils.logging import setup_logging
from po_reconciler.utils import dict_to_json_string
from po_reconciler.config import get_config


logger = setup_logging(__name__)
config = get_config()


def build_report(state: ReconciliationState, file_name: Optional[str] = None) -> ReconciliationReport:
    """Build final output from state."""
    return ReconciliationReport(
        invoice_id=state.invoice_id,
        file_name=file_name or Path(state.document_path).name,
        processing_timestamp=state.processing_timestamp,
        success=state.error is None,
        error=state.error,
        invoice_data=state.invoice_data,
        purchase_order_count=len(state.po_records),
        results=state.results,
        summary=state.summary or ReconciliationSummary(),
    )


async def run_pipeline(state: ReconciliationState) -> ReconciliationState:
    """Run the compiled graph and return the final state."""
    graph = get_reconciliation_graph()
    result = await graph.ainvoke(state, config={"recursion_limit": config.GRAPH_RECURSION_LIMIT})

    # LangGraph hands back channel values as a dict
    if isinstance(result, dict):
        return ReconciliationState(**result)
    return result


async def process_invoice(
    document_path: str,
    invoice_id: str = None,
    po_records: Optional[List[Dict[str, Any]]] = None,
    po_source: str = None,
    options: Optional[MatchingOptions] = None,
    file_name: str = None,
) -> ReconciliationReport:
    """
    Process a single invoice PDF against the PO ledger.

    Args:
        document_path: Path to the invoice PDF
        invoice_id: Optional invoice ID (auto-generated if not provided)
        po_records: PO ledger rows; loaded from po_source when omitted
        po_source: URL or JSON file path for the PO ledger
        options: Matching options; configuration defaults when omitted
        file_name: Original upload name, if different from the path

    Returns:
        ReconciliationReport with result rows and summary
    """
    now = datetime.now(timezone.utc)
    if not invoice_id:
        invoice_id = f"INV-{now.strftime('%Y%m%d%H%M%S')}"

    if po_records is None:
        po_records = await load_purchase_orders(po_source)

    state = ReconciliationState(
        invoice_id=invoice_id,
        processing_timestamp=now,
        document_path=document_path,
        po_records=po_records,
        options=options,
    )

    logger.info(f"Starting invoice reconciliation for {invoice_id}")
    logger.info(f"Document: {document_path}")
    logger.info(f"Available PO rows: {len(po_records)}")

    final_state = await run_pipeline(state)
    report = build_report(final_state, file_name)

    if report.success:
        logger.info(f"Invoice {invoice_id} reconciled: {report.summary.model_dump(by_alias=True)}")
    else:
        logger.warning(f"Invoice {invoice_id} not reconciled: {report.error}")

    return report


async def process_invoices_batch(
    document_paths: List[str],
    po_source: str = None,
    options: Optional[MatchingOptions] = None,
) -> List[ReconciliationReport]:
    """
    Process multiple invoices against one snapshot of the PO ledger.

    Documents are independent; a failing document is logged and skipped.
    """
    po_records = await load_purchase_orders(po_source)
    results = []

    for idx, document_path in enumerate(document_paths, 1):
        try:
            logger.info(f"Processing invoice {idx}/{len(document_paths)}")

            report = await process_invoice(
                document_path=document_path,
                po_records=po_records,
                options=options,
            )
            results.append(report)

        except Exception as e:
            logger.error(f"Error processing {document_path}: {e}")
            continue

    logger.info(f"Batch processing complete. Processed {len(results)}/{len(document_paths)} invoices.")

    return results


def format_output_json(report: ReconciliationReport) -> str:
    """Format output as JSON string."""
    return dict_to_json_string(report.to_dict())


if __name__ == "__main__":
    import sys

    if len(sys.argv) > 1:
        document_path = sys.argv[1]
        invoice_id = sys.argv[2] if len(sys.argv) > 2 else None

        report = asyncio.run(process_invoice(document_path, invoice_id))
        print(format_output_json(report))
    else:
        print("Usage: python -m po_reconciler.main <invoice.pdf> [invoice_id]")
