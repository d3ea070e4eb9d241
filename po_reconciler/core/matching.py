# po_reconciler/core/matching.py

"""
Candidate selection for invoice line items.

Each line item is matched against the PO rows that share its PO number in
stages; the first stage that finds anything wins and later stages are not
consulted. Ledger order is preserved throughout because every tie is broken
by first occurrence.
"""

from typing import Any, List, Mapping, Optional, Sequence, Union

from po_reconciler.schemas.po import MatchingOptions, PurchaseOrderRecord


def po_number_of(po: Union[PurchaseOrderRecord, Mapping[str, Any]]) -> str:
    """PO number of a ledger row, parsed or raw."""
    if isinstance(po, PurchaseOrderRecord):
        return po.po_number
    value = po.get("PurchaseOrderID")
    return "" if value is None else str(value)


def filter_by_po_number(po_records: Sequence[Any], po_number: str) -> List[Any]:
    """
    Rows whose PO number equals the invoice's exactly (case-sensitive).

    Works on raw ledger mappings as well as parsed records, so rows for other
    purchase orders are dropped before anything else looks at them.
    """
    return [po for po in po_records if po_number_of(po) == po_number]


def match_by_item_code(
    item_name: str,
    po_records: Sequence[PurchaseOrderRecord],
) -> List[PurchaseOrderRecord]:
    """Rows whose supplier item code contains the product name."""
    needle = item_name.casefold()
    return [
        po for po in po_records
        if po.supplier_item and needle in po.supplier_item.casefold()
    ]


def match_by_description(
    item_name: str,
    po_records: Sequence[PurchaseOrderRecord],
) -> List[PurchaseOrderRecord]:
    """Rows whose supplier description contains the product name."""
    needle = item_name.casefold()
    return [
        po for po in po_records
        if po.supplier_description and needle in po.supplier_description.casefold()
    ]


def keyword_threshold(keyword_count: int, min_keyword_matches: int) -> int:
    """
    Keyword hits a PO row needs to qualify.

    Capped at half the product name's word count so a short name is never
    asked for more hits than it has words.
    """
    return min(min_keyword_matches, keyword_count // 2)


def match_by_keywords(
    item_name: str,
    po_records: Sequence[PurchaseOrderRecord],
    min_keyword_matches: int,
) -> List[PurchaseOrderRecord]:
    """Rows sharing enough product-name words with their description or item code."""
    keywords = [keyword.casefold() for keyword in item_name.split()]
    threshold = keyword_threshold(len(keywords), min_keyword_matches)

    candidates = []
    for po in po_records:
        description = po.supplier_description.casefold()
        item_code = po.supplier_item.casefold()
        hits = sum(
            1 for keyword in keywords
            if keyword in description or keyword in item_code
        )
        if hits >= threshold:
            candidates.append(po)

    return candidates


def find_candidates(
    item_name: str,
    po_records: Sequence[PurchaseOrderRecord],
    options: MatchingOptions,
) -> List[PurchaseOrderRecord]:
    """
    Build the candidate pool for one line item.

    1. Item code contains the product name
    2. Description contains the product name
    3. Keyword overlap with description or item code
    """
    candidates = match_by_item_code(item_name, po_records)
    if candidates:
        return candidates

    candidates = match_by_description(item_name, po_records)
    if candidates:
        return candidates

    return match_by_keywords(item_name, po_records, options.min_keyword_matches)


def within_tolerance(first: float, second: float, tolerance: float) -> bool:
    """Absolute difference strictly below the tolerance."""
    return abs(first - second) < tolerance


def select_best_candidate(
    candidates: Sequence[PurchaseOrderRecord],
    quantity: float,
    unit_price: float,
    options: MatchingOptions,
) -> Optional[PurchaseOrderRecord]:
    """
    Pick one PO row from the pool.

    Preference: quantity and price both within tolerance, then quantity
    only, then price only, then simply the first candidate.
    """
    if not candidates:
        return None

    def qty_ok(po: PurchaseOrderRecord) -> bool:
        return within_tolerance(po.quantity, quantity, options.quantity_tolerance)

    def price_ok(po: PurchaseOrderRecord) -> bool:
        return within_tolerance(po.unit_price, unit_price, options.price_tolerance)

    for accept in (
        lambda po: qty_ok(po) and price_ok(po),
        qty_ok,
        price_ok,
    ):
        for po in candidates:
            if accept(po):
                return po

    return candidates[0]
