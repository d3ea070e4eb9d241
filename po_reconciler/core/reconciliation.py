# po_reconciler/core/reconciliation.py

"""
Invoice to purchase-order reconciliation engine.

Pairs every invoice line item with at most one PO ledger row, compares
quantity, unit price and (optionally) date under tolerance, and emits
table rows for the dashboard and the CSV report.
"""

from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union

from po_reconciler.core.matching import (
    filter_by_po_number,
    find_candidates,
    select_best_candidate,
    within_tolerance,
)
from po_reconciler.schemas.invoice import InvoiceDocument, InvoiceLineItem
from po_reconciler.schemas.output import (
    MatchStatus,
    ReconciliationResultRow,
    ReconciliationSummary,
    Source,
)
from po_reconciler.schemas.po import MatchingOptions, PurchaseOrderRecord
from po_reconciler.utils.dates import dates_equal, standardize_date
from po_reconciler.utils.logging import setup_logging, log_discrepancy


logger = setup_logging(__name__)

InvoiceInput = Union[InvoiceDocument, Mapping[str, Any]]
PurchaseOrderInput = Union[PurchaseOrderRecord, Mapping[str, Any]]


def _as_invoice(invoice: InvoiceInput) -> InvoiceDocument:
    if isinstance(invoice, InvoiceDocument):
        return invoice
    return InvoiceDocument.model_validate(invoice)


def _as_po_records(po_records: Iterable[PurchaseOrderInput]) -> List[PurchaseOrderRecord]:
    return [
        po if isinstance(po, PurchaseOrderRecord) else PurchaseOrderRecord.model_validate(po)
        for po in po_records
    ]


def reconcile(
    invoice: InvoiceInput,
    po_records: Optional[Sequence[PurchaseOrderInput]],
    options: Optional[MatchingOptions] = None,
) -> List[ReconciliationResultRow]:
    """
    Reconcile an invoice against the PO ledger.

    Rows come out in line-item order. A matched item yields an INVOICE row
    followed by its PO row; an unmatched item yields a single NO MATCH
    INVOICE row. With no PO records at all the result is empty.
    """
    options = options or MatchingOptions()
    results: List[ReconciliationResultRow] = []

    if not po_records:
        return results

    invoice = _as_invoice(invoice)
    # Rows for other purchase orders are never parsed
    ledger = _as_po_records(filter_by_po_number(po_records, invoice.po_number))

    logger.debug(
        f"Reconciling PO {invoice.po_number!r}: "
        f"{len(invoice.line_items)} line items, {len(ledger)} ledger rows"
    )

    for item in invoice.line_items:
        results.extend(_reconcile_line_item(item, invoice, ledger, options))

    return results


def _reconcile_line_item(
    item: InvoiceLineItem,
    invoice: InvoiceDocument,
    ledger: Sequence[PurchaseOrderRecord],
    options: MatchingOptions,
) -> List[ReconciliationResultRow]:
    quantity = item.quantity
    unit_price = item.effective_unit_price()
    invoice_date = standardize_date(item.delivery_date or invoice.invoice_date or "")

    candidates = find_candidates(item.product_name, ledger, options)
    po_match = select_best_candidate(candidates, quantity, unit_price, options)

    if po_match is None:
        logger.debug(f"No PO row found for item {item.product_name!r}")
        return [
            ReconciliationResultRow(
                source=Source.INVOICE,
                po_number=invoice.po_number,
                description=item.product_name,
                quantity=quantity,
                unit_price=unit_price,
                total_price=quantity * unit_price,
                date=invoice_date,
                status=MatchStatus.NO_MATCH,
            )
        ]

    # Flags are re-derived against the chosen row, whichever rule picked it
    qty_match = within_tolerance(quantity, po_match.quantity, options.quantity_tolerance)
    price_match = within_tolerance(unit_price, po_match.unit_price, options.price_tolerance)

    po_date = standardize_date(po_match.date_required)
    date_match = dates_equal(invoice_date, po_date) if options.require_date_match else True

    if qty_match and price_match and date_match:
        status = MatchStatus.MATCH
    else:
        status = MatchStatus.DISCREPANCY
        log_discrepancy(logger, invoice.po_number, item.product_name, qty_match, price_match, date_match)

    flags = {
        "qty_match": qty_match,
        "price_match": price_match,
        "date_match": date_match,
    }

    return [
        ReconciliationResultRow(
            source=Source.INVOICE,
            po_number=invoice.po_number,
            description=item.product_name,
            quantity=quantity,
            unit_price=unit_price,
            total_price=quantity * unit_price,
            date=invoice_date,
            status=status,
            **flags,
        ),
        ReconciliationResultRow(
            source=Source.PO,
            po_number=po_match.po_number,
            description=po_match.display_description,
            quantity=po_match.quantity,
            unit_price=po_match.unit_price,
            total_price=po_match.quantity * po_match.unit_price,
            date=po_date,
            status=status,
            **flags,
        ),
    ]


def summarize(results: Iterable[ReconciliationResultRow]) -> ReconciliationSummary:
    """Count invoice rows by status; PO rows are skipped so pairs count once."""
    invoice_rows = [row for row in results if row.is_invoice]

    return ReconciliationSummary(
        total_items=len(invoice_rows),
        matches=sum(1 for row in invoice_rows if row.status == MatchStatus.MATCH),
        discrepancies=sum(1 for row in invoice_rows if row.status == MatchStatus.DISCREPANCY),
        no_matches=sum(1 for row in invoice_rows if row.status == MatchStatus.NO_MATCH),
    )
