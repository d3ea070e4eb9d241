"""
UI Utility Functions

Helper functions for Streamlit visualization.
These are purely for presentation - no business logic.
"""

from typing import Any, Dict, List, Optional

from po_reconciler.schemas.output import (
    MatchStatus,
    ReconciliationResultRow,
    ReconciliationSummary,
    Source,
)


HIGHLIGHT_MISMATCH = "background-color: #f8d7da; color: #721c24"
HIGHLIGHT_MATCH = "background-color: #d4edda; color: #155724"
HIGHLIGHT_NO_MATCH = "background-color: #fff3cd; color: #856404"

# Display column -> the match flag that drives its colour
FLAG_COLUMNS = {
    "Qty": "qty_match",
    "Unit Price": "price_match",
    "Date": "date_match",
}


def get_status_emoji(status: str) -> str:
    """Get emoji for a line item status."""
    emoji_map = {
        MatchStatus.MATCH.value: "🟢",
        MatchStatus.DISCREPANCY.value: "🔴",
        MatchStatus.NO_MATCH.value: "🟡",
    }
    return emoji_map.get(status, "⚪")


def get_source_label(source: str) -> str:
    """Human label for the row source tag."""
    label_map = {
        Source.INVOICE.value: "📄 Invoice",
        Source.PO.value: "📋 Purchase Order",
    }
    return label_map.get(source, source)


def format_status_display(status: str) -> str:
    """Format status for display."""
    return f"{get_status_emoji(status)} {status}"


def get_cell_highlight(row: ReconciliationResultRow, column: str) -> str:
    """
    CSS for one table cell.

    Compared columns of a matched pair are green or red according to their
    flag. NO MATCH rows are highlighted as a whole.
    """
    if row.status == MatchStatus.NO_MATCH:
        return HIGHLIGHT_NO_MATCH

    flag_name = FLAG_COLUMNS.get(column)
    if flag_name is None or not row.has_match_flags:
        return ""

    return HIGHLIGHT_MATCH if getattr(row, flag_name) else HIGHLIGHT_MISMATCH


def build_highlight_grid(
    results: List[ReconciliationResultRow],
    columns: List[str],
) -> List[List[str]]:
    """CSS grid matching the display table, one list per row."""
    return [[get_cell_highlight(row, column) for column in columns] for row in results]


def summary_metrics(summary: Optional[ReconciliationSummary]) -> List[Dict[str, Any]]:
    """
    Metric cards for the summary header.

    Returns:
        List of {"label", "value"} dicts in display order
    """
    summary = summary or ReconciliationSummary()
    return [
        {"label": "Line Items", "value": summary.total_items},
        {"label": f"{get_status_emoji(MatchStatus.MATCH.value)} Matches", "value": summary.matches},
        {
            "label": f"{get_status_emoji(MatchStatus.DISCREPANCY.value)} Discrepancies",
            "value": summary.discrepancies,
        },
        {
            "label": f"{get_status_emoji(MatchStatus.NO_MATCH.value)} No Match",
            "value": summary.no_matches,
        },
    ]


def format_mismatch_explanation(row: ReconciliationResultRow) -> str:
    """One-line explanation of why an invoice row is a discrepancy."""
    if row.status != MatchStatus.DISCREPANCY:
        return ""

    fields = []
    if row.qty_match is False:
        fields.append("quantity")
    if row.price_match is False:
        fields.append("unit price")
    if row.date_match is False:
        fields.append("date")

    if not fields:
        return ""
    return "Mismatch on " + ", ".join(fields)
