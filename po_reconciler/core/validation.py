# po_reconciler/core/validation.py

"""
Structural checks for reconciliation inputs.

Both checks are predicates over the raw JSON-shaped data; they never raise.
Callers validate before reconciling and report failures to the user.
"""

from typing import Any, Mapping

from po_reconciler.utils import parse_number


REQUIRED_PO_FIELDS = (
    "PurchaseOrderID",
    "PurchaseQty",
    "PurchasePrice",
    "DateRequired",
    "PurchaseSupplierItem",
    "PurchaseSupplierDescription",
)


def validate_invoice_data(invoice_data: Any) -> bool:
    """
    Check extracted invoice data.

    Requires a non-empty string poNumber and a list of lineItems, each with
    a non-empty string productName and a numeric quantity.
    """
    if not isinstance(invoice_data, Mapping):
        return False

    po_number = invoice_data.get("poNumber")
    if not po_number or not isinstance(po_number, str):
        return False

    line_items = invoice_data.get("lineItems")
    if not isinstance(line_items, list):
        return False

    for item in line_items:
        if not isinstance(item, Mapping):
            return False

        product_name = item.get("productName")
        if not product_name or not isinstance(product_name, str):
            return False

        if parse_number(item.get("quantity")) is None:
            return False

    return True


def validate_po_records(po_records: Any) -> bool:
    """
    Check purchase-order ledger rows, all or nothing.

    Every record needs all six ledger fields present and a numeric
    PurchaseQty and PurchasePrice.
    """
    if not isinstance(po_records, list):
        return False

    for record in po_records:
        if not isinstance(record, Mapping):
            return False

        if any(record.get(field) is None for field in REQUIRED_PO_FIELDS):
            return False

        if parse_number(record["PurchaseQty"]) is None or parse_number(record["PurchasePrice"]) is None:
            return False

    return True
