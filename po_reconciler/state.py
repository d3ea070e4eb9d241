"""
Shared state object for the reconciliation pipeline.
Each node reads what it needs and writes its results back.
"""

from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field
from datetime import datetime, timezone

from po_reconciler.schemas.output import ReconciliationResultRow, ReconciliationSummary
from po_reconciler.schemas.po import MatchingOptions


class PipelineEvent(BaseModel):
    """A single entry in the pipeline audit log."""
    timestamp: datetime
    stage: str
    message: str


class ReconciliationState(BaseModel):
    """
    State passed between pipeline nodes.

    Extraction fills in the text and raw invoice data; reconciliation
    validates the raw inputs and fills in the result rows and summary.
    """

    # Workflow identification
    invoice_id: str
    processing_timestamp: datetime
    document_path: str

    # Extraction phase
    extracted_text: Optional[str] = None
    invoice_data: Optional[Dict[str, Any]] = None

    # Reconciliation phase
    po_records: List[Dict[str, Any]] = Field(default_factory=list)
    options: Optional[MatchingOptions] = None
    results: List[ReconciliationResultRow] = Field(default_factory=list)
    summary: Optional[ReconciliationSummary] = None

    # First failure, if any
    error: Optional[str] = None

    events: List[PipelineEvent] = Field(default_factory=list)

    def add_event(self, stage: str, message: str) -> None:
        """Add an entry to the audit log."""
        self.events.append(
            PipelineEvent(
                timestamp=datetime.now(timezone.utc),
                stage=stage,
                message=message,
            )
        )
