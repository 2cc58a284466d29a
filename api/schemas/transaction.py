"""Transaction schemas module for CRUD operations."""
from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field, model_validator

from api.models.transaction import TransactionType
from api.schemas.types import Money, Weight


class TransactionCreate(BaseModel):
    """Schema for creating a transaction.

    ``qty`` and ``weight`` are the same figure; either may be sent, and if
    both are sent they must match.
    """

    type: TransactionType = Field(..., description="OUT (issue) or IN (return)")
    vendor: str = Field(..., min_length=1, max_length=128, description="Vendor name")
    item: str = Field(
        ...,
        min_length=1,
        max_length=64,
        validation_alias=AliasChoices("item", "wireThickness"),
        description="Wire gauge label",
    )
    payal_type: Optional[str] = Field(
        None,
        max_length=64,
        validation_alias=AliasChoices("payal_type", "payalType"),
        description="Finish category; required for IN",
    )
    qty: Optional[Decimal] = Field(
        None, gt=0, max_digits=12, decimal_places=3, description="Weight in kg"
    )
    weight: Optional[Decimal] = Field(
        None, gt=0, max_digits=12, decimal_places=3, description="Weight in kg (same as qty)"
    )
    price: Optional[Decimal] = Field(
        None,
        ge=0,
        max_digits=12,
        decimal_places=2,
        description="IN labour amount; computed from the vendor rate if omitted",
    )
    transaction_date: Optional[date] = Field(
        None,
        validation_alias=AliasChoices("transaction_date", "inDate", "outDate", "date"),
        description="Calendar date of the movement",
    )
    create_missing: bool = Field(
        False,
        validation_alias=AliasChoices("create_missing", "createMissing"),
        description="Create unknown vendor/wire instead of rejecting",
    )

    @model_validator(mode="after")
    def _normalize(self) -> "TransactionCreate":
        if self.qty is None and self.weight is None:
            raise ValueError("qty or weight is required")
        if self.qty is not None and self.weight is not None and self.qty != self.weight:
            raise ValueError("qty and weight must be equal")
        self.qty = self.weight = self.qty if self.qty is not None else self.weight

        self.vendor = self.vendor.strip()
        self.item = self.item.strip()
        if not self.vendor or not self.item:
            raise ValueError("vendor and item must not be blank")

        if self.type is TransactionType.IN:
            payal_type = (self.payal_type or "").strip()
            if not payal_type:
                raise ValueError("payal_type is required for IN transactions")
            self.payal_type = payal_type
        else:
            self.payal_type = None
        return self


class TransactionResponse(BaseModel):
    """Schema for transaction response."""

    id: UUID = Field(..., description="Transaction ID")
    entry_no: int = Field(..., description="Store serial number")
    type: TransactionType
    vendor: str
    item: str
    payal_type: Optional[str] = None
    qty: Weight
    weight: Weight
    price: Money
    transaction_date: Optional[date] = None
    created_at: datetime

    class Config:
        from_attributes = True


class TransactionBatchCreate(BaseModel):
    """Schema for batch creating transactions."""

    transactions: list[TransactionCreate] = Field(
        ..., min_length=1, description="List of transactions to create"
    )


class TransactionBatchResponse(BaseModel):
    """Schema for batch operation response."""

    created: int = Field(..., description="Number of transactions created")
    message: str = Field(..., description="Operation result message")


class TransactionListResponse(BaseModel):
    """Schema for paginated transaction list response."""

    items: list[TransactionResponse] = Field(
        default_factory=list, description="List of transactions"
    )
    total: int = Field(..., description="Total number of transactions")
    page: int = Field(..., description="Current page number")
    page_size: int = Field(..., description="Number of items per page")
    pages: int = Field(..., description="Total number of pages")
