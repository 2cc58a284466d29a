"""Payment schemas module."""
from datetime import date
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from api.schemas.types import Money, Weight

GRAND_TOTAL_WIRE = "Grand Total"
ALL_PAYAL_TYPES = "All"


class PaymentCreate(BaseModel):
    """Schema for recording a payment to a vendor."""

    vendor: str = Field(..., min_length=1, max_length=128)
    amount: Decimal = Field(
        ...,
        gt=0,
        max_digits=12,
        decimal_places=2,
        description="Amount paid; must be within balance",
    )
    payment_date: date = Field(default_factory=date.today, alias="date")
    notes: Optional[str] = Field(None, max_length=2000)
    wire: str = Field(GRAND_TOTAL_WIRE, max_length=64)
    payal_type: str = Field(ALL_PAYAL_TYPES, max_length=64, alias="payalType")

    class Config:
        populate_by_name = True


class PaymentResponse(BaseModel):
    """Schema for payment response."""

    id: UUID
    vendor: str
    amount: Money
    payment_date: date = Field(..., alias="date")
    notes: Optional[str] = None
    wire: str
    payal_type: str = Field(..., alias="payalType")

    class Config:
        from_attributes = True
        populate_by_name = True


class PaymentListResponse(BaseModel):
    """Schema for payment list response."""

    total: int
    total_amount: Money
    items: list[PaymentResponse] = Field(default_factory=list)


# --- Payable summary ---


class PayalBreakdown(BaseModel):
    """Payable and paid figures for one payal type of a wire."""

    payal_type: str
    total_in: Weight
    rate: Money = Field(..., description="Vendor rate per kg; 0 if unassigned")
    total_payable: Money
    total_paid: Money
    remaining_balance: Money
    payment_count: int = 0


class WireBreakdown(BaseModel):
    """Payable and paid figures for one wire."""

    wire_name: str
    total_payable: Money
    total_paid: Money
    remaining_balance: Money
    payal_types: list[PayalBreakdown] = Field(default_factory=list)


class PaymentSummary(BaseModel):
    """Vendor's labour account: payable, paid and outstanding."""

    vendor: str
    total_payable: Money
    total_paid: Money
    remaining_balance: Money
    wires: list[WireBreakdown] = Field(default_factory=list)
