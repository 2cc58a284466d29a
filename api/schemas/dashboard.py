"""Dashboard schemas module.

Defines the response schema for the stock overview shown on the
dashboard: overall weights and amounts plus per-vendor balances.
"""
from pydantic import BaseModel, Field

from api.schemas.types import Money, Weight


class VendorBalance(BaseModel):
    """Issued, returned and outstanding weight for one vendor."""

    vendor: str = Field(..., description="Vendor name")
    total_out: Weight = Field(..., alias="totalOut", description="Wire issued (kg)")
    total_in: Weight = Field(..., alias="totalIn", description="Goods returned (kg)")
    balance: Weight = Field(..., description="Issued minus returned (kg)")

    class Config:
        populate_by_name = True


class DashboardSummary(BaseModel):
    """Response schema for the dashboard summary endpoint."""

    total_in_weight: Weight = Field(..., alias="totalInWeight")
    total_out_weight: Weight = Field(..., alias="totalOutWeight")
    net_weight: Weight = Field(
        ...,
        alias="netWeight",
        description="Total OUT minus total IN; negative means a deficit",
    )
    total_in_amount: Money = Field(..., alias="totalInAmount", description="Labour charges on IN")
    total_out_amount: Money = Field(..., alias="totalOutAmount")
    vendors: list[VendorBalance] = Field(
        default_factory=list, description="Per-vendor balances sorted by name"
    )

    class Config:
        populate_by_name = True
