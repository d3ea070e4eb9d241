"""
Invoice schema and data models.
Represents the line items extracted from a supplier invoice.
"""

from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from po_reconciler.utils import parse_number, to_float


class InvoiceLineItem(BaseModel):
    """A single line item from an invoice."""
    model_config = ConfigDict(populate_by_name=True)

    product_name: str = Field(default="", alias="productName")
    quantity: float = 0.0
    unit_price: Optional[float] = Field(default=None, alias="unitPrice")
    total_price: Optional[float] = Field(default=None, alias="totalPrice")
    price: Optional[float] = None  # legacy single price field
    delivery_date: Optional[str] = Field(default=None, alias="deliveryDate")

    @field_validator("product_name", mode="before")
    @classmethod
    def _coerce_name(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("quantity", mode="before")
    @classmethod
    def _coerce_quantity(cls, value: Any) -> float:
        return to_float(value)

    @field_validator("unit_price", "total_price", "price", mode="before")
    @classmethod
    def _coerce_optional_price(cls, value: Any) -> Optional[float]:
        if value is None or value == "":
            return None
        number = parse_number(value)
        return 0.0 if number is None else number

    @field_validator("delivery_date", mode="before")
    @classmethod
    def _coerce_date(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        return str(value)

    def effective_unit_price(self) -> float:
        """
        Unit price used for matching.

        An explicit non-zero unit price wins; otherwise the line total is
        divided by the quantity; otherwise the legacy price field is used.
        """
        if self.unit_price:
            return self.unit_price
        if self.total_price and self.quantity:
            return self.total_price / self.quantity
        return self.price or 0.0


class InvoiceDocument(BaseModel):
    """Invoice header plus its ordered line items."""
    model_config = ConfigDict(populate_by_name=True)

    po_number: str = Field(default="", alias="poNumber")
    invoice_date: Optional[str] = Field(default=None, alias="invoiceDate")
    line_items: List[InvoiceLineItem] = Field(default_factory=list, alias="lineItems")

    @field_validator("po_number", mode="before")
    @classmethod
    def _coerce_po_number(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("invoice_date", mode="before")
    @classmethod
    def _coerce_invoice_date(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        return str(value)

    @field_validator("line_items", mode="before")
    @classmethod
    def _coerce_line_items(cls, value: Any) -> Any:
        return [] if value is None else value
