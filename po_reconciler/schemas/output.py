"""
Output schemas for the reconciliation results.
Field aliases are the column names shown on the dashboard and in exports.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class Source(str, Enum):
    """Which side of the comparison a result row describes."""
    INVOICE = "INVOICE"
    PO = "PO"


class MatchStatus(str, Enum):
    """Classification of a line item."""
    MATCH = "MATCH"
    DISCREPANCY = "DISCREPANCY"
    NO_MATCH = "NO MATCH"


MATCH_FLAG_FIELDS = {"qty_match", "price_match", "date_match"}

EXPORT_COLUMNS = [
    "Source", "PO #", "Item/Description", "Qty",
    "Unit Price", "Total Price", "Date", "Status",
]


class ReconciliationResultRow(BaseModel):
    """One row of the reconciliation table."""
    model_config = ConfigDict(populate_by_name=True)

    source: Source = Field(alias="Source")
    po_number: str = Field(alias="PO #")
    description: str = Field(alias="Item/Description")
    quantity: float = Field(alias="Qty")
    unit_price: float = Field(alias="Unit Price")
    total_price: float = Field(alias="Total Price")
    date: str = Field(alias="Date")
    status: MatchStatus = Field(alias="Status")

    # Per-field outcome of a matched pair; None on NO MATCH rows
    qty_match: Optional[bool] = Field(default=None, alias="_qty_match")
    price_match: Optional[bool] = Field(default=None, alias="_price_match")
    date_match: Optional[bool] = Field(default=None, alias="_date_match")

    @property
    def is_invoice(self) -> bool:
        return self.source == Source.INVOICE

    @property
    def has_match_flags(self) -> bool:
        return self.qty_match is not None

    def to_dict(self, include_flags: bool = True) -> Dict[str, Any]:
        """Serialize with column-name keys; flags are omitted when absent."""
        exclude = set(MATCH_FLAG_FIELDS)
        if include_flags and self.has_match_flags:
            exclude = set()
        return self.model_dump(by_alias=True, mode="json", exclude=exclude)


class ReconciliationSummary(BaseModel):
    """Counts over the invoice-side rows of a reconciliation."""
    model_config = ConfigDict(populate_by_name=True)

    total_items: int = Field(default=0, alias="totalItems")
    matches: int = 0
    discrepancies: int = 0
    no_matches: int = Field(default=0, alias="noMatches")


class ReconciliationReport(BaseModel):
    """Final output of processing one invoice document."""
    model_config = ConfigDict(populate_by_name=True)

    invoice_id: str = Field(alias="invoiceId")
    file_name: Optional[str] = Field(default=None, alias="fileName")
    processing_timestamp: datetime = Field(alias="processingTimestamp")
    success: bool = True
    error: Optional[str] = None
    invoice_data: Optional[Dict[str, Any]] = Field(default=None, alias="invoiceData")
    purchase_order_count: int = Field(default=0, alias="purchaseOrderCount")
    results: List[ReconciliationResultRow] = Field(
        default_factory=list, alias="reconciliationResults"
    )
    summary: ReconciliationSummary = Field(default_factory=ReconciliationSummary)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for JSON responses."""
        data = self.model_dump(by_alias=True, mode="json", exclude={"results"})
        data["reconciliationResults"] = [row.to_dict() for row in self.results]
        return data

