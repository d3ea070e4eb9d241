"""
LangGraph orchestration for the reconciliation pipeline.
Defines the graph structure and node routing logic.
"""

from typing import Literal
from langgraph.graph import StateGraph, END
from po_reconciler.state import ReconciliationState
from po_reconciler.agents.extraction import extraction_agent
from po_reconciler.agents.reconciliation import reconciliation_agent


def route_after_extraction(state: ReconciliationState) -> Literal["reconciliation_agent", "end"]:
    """Stop when extraction produced nothing to reconcile."""
    if state.error or state.invoice_data is None:
        return "end"
    return "reconciliation_agent"


def build_reconciliation_graph():
    """
    Build the LangGraph workflow for invoice reconciliation.

    Flow:
    1. Extraction Agent - PDF text to invoice JSON
    2. Reconciliation Agent - validate, match against the PO ledger, summarize
    """
    graph = StateGraph(ReconciliationState)

    graph.add_node("extraction_agent", extraction_agent)
    graph.add_node("reconciliation_agent", reconciliation_agent)

    graph.set_entry_point("extraction_agent")

    graph.add_conditional_edges(
        "extraction_agent",
        route_after_extraction,
        {
            "reconciliation_agent": "reconciliation_agent",
            "end": END,
        }
    )
    graph.add_edge("reconciliation_agent", END)

    return graph.compile()


# Global compiled graph (singleton)
_reconciliation_graph = None


def get_reconciliation_graph():
    """Get or create the compiled reconciliation graph."""
    global _reconciliation_graph
    if _reconciliation_graph is None:
        _reconciliation_graph = build_reconciliation_graph()
    return _reconciliation_graph
