"""
Purchase Order schema and data models.
Represents rows of the purchase-order ledger and the matching options.
"""

from typing import Any
from pydantic import BaseModel, ConfigDict, Field, field_validator

from po_reconciler.utils import to_float


class PurchaseOrderRecord(BaseModel):
    """One purchase-order ledger row."""
    model_config = ConfigDict(populate_by_name=True)

    # Missing fields degrade the same way unparsable values do
    po_number: str = Field(default="", alias="PurchaseOrderID")
    quantity: float = Field(default=0.0, alias="PurchaseQty")
    unit_price: float = Field(default=0.0, alias="PurchasePrice")
    date_required: str = Field(default="", alias="DateRequired")
    supplier_item: str = Field(default="", alias="PurchaseSupplierItem")
    supplier_description: str = Field(default="", alias="PurchaseSupplierDescription")

    @field_validator("quantity", "unit_price", mode="before")
    @classmethod
    def _coerce_number(cls, value: Any) -> float:
        return to_float(value)

    @field_validator(
        "po_number", "date_required", "supplier_item", "supplier_description",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @property
    def display_description(self) -> str:
        """Item code and description on one line, e.g. "WIDGET-A - Widget A"."""
        description = self.supplier_description.replace("\r\n", " ").replace("\n", " ")
        return f"{self.supplier_item} - {description}"


class MatchingOptions(BaseModel):
    """Tolerances and switches for the reconciliation engine."""
    model_config = ConfigDict(populate_by_name=True)

    quantity_tolerance: float = Field(default=0.01, ge=0.0, alias="quantityTolerance")
    price_tolerance: float = Field(default=0.01, ge=0.0, alias="priceTolerance")
    min_keyword_matches: int = Field(default=3, ge=0, alias="minKeywordMatches")
    require_date_match: bool = Field(default=False, alias="requireDateMatch")

    @classmethod
    def from_config(cls, config) -> "MatchingOptions":
        """Build options from the application configuration."""
        return cls(
            quantity_tolerance=config.QUANTITY_TOLERANCE,
            price_tolerance=config.PRICE_TOLERANCE,
            min_keyword_matches=config.MIN_KEYWORD_MATCHES,
            require_date_match=config.REQUIRE_DATE_MATCH,
        )
