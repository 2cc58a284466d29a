"""Ledger schemas module.

Defines the canonical in-memory transaction record consumed by the
reconciler, and the reconciled rows, lots and pages it produces.
"""
import enum
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from api.models.transaction import TransactionType
from api.schemas.types import Money, Weight


class SortRule(str, enum.Enum):
    """Chronological ordering applied before FIFO matching."""

    TRANSACTION_DATE = "transaction_date"  # calendar date, then creation time
    CREATED_AT = "created_at"  # creation time only


class LotStatus(str, enum.Enum):
    """Return progress of a lot, or of the lots an IN row drew from."""

    PENDING = "pending"
    PARTIAL = "partial"
    COMPLETED = "completed"


class LedgerTransaction(BaseModel):
    """Normalized OUT/IN transaction, built once at ingestion."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Store identifier")
    sequence: int = Field(..., ge=1, description="Store serial number, source of lot ids")
    type: TransactionType
    vendor: str
    item: str = Field(..., description="Wire gauge label")
    payal_type: Optional[str] = Field(None, description="Finish category (IN only)")
    qty: Decimal = Field(..., gt=0, description="Weight in kg")
    price: Decimal = Field(Decimal("0"), ge=0, description="Labour amount (IN only)")
    effective_date: date = Field(..., description="Transaction date, or creation date")
    created_at: datetime


# --- Reconciliation output ---


class LotDeduction(BaseModel):
    """Weight an IN transaction took from one lot."""

    lot_id: str
    qty: Weight


class ReconciledRow(BaseModel):
    """Transaction augmented with lot reference, balance and status."""

    serial_no: int = Field(..., description="1-based position in this ledger view")
    transaction_id: str
    sequence: int
    type: TransactionType
    vendor: str
    wire: str
    design: str = Field("", description="Payal type, empty for OUT rows")
    transaction_date: date
    created_at: datetime
    qty_out: Weight
    qty_in: Weight
    labour_charges: Money
    lot_id: str = Field(..., description="Own lot id (OUT) or comma-joined lots drawn from (IN)")
    deductions: list[LotDeduction] = Field(default_factory=list)
    running_balance: Weight = Field(..., description="Outstanding kg for the vendor after this row")
    lot_status: LotStatus


class LotState(BaseModel):
    """Final state of one OUT batch after reconciliation."""

    lot_id: str
    vendor: str
    wire: str
    out_date: date
    qty: Weight
    remaining_qty: Weight
    status: LotStatus


class ReconciliationResult(BaseModel):
    """Rows in ledger order plus the lots they created."""

    rows: list[ReconciledRow] = Field(default_factory=list)
    lots: list[LotState] = Field(default_factory=list)


class OpenLot(BaseModel):
    """Lot with weight still held by the vendor."""

    lot_id: str
    vendor: str
    wire: str
    out_date: date
    remaining_qty: Weight
    days_outstanding: int


# --- Endpoint responses ---


class VendorLedgerResponse(BaseModel):
    """Reconciled ledger for one vendor."""

    vendor: str
    wire: Optional[str] = Field(None, description="Wire filter applied, if any")
    sort_rule: SortRule
    total_out: Weight
    total_in: Weight
    final_balance: Weight
    rows: list[ReconciledRow] = Field(default_factory=list)
    lots: list[LotState] = Field(default_factory=list)


class PageVendorTotal(BaseModel):
    """Per-vendor totals for the rows shown on one page."""

    vendor: str
    total_labour_charges: Money
    final_running_balance: Weight


class LedgerPageResponse(BaseModel):
    """One printed/screen page of a vendor ledger."""

    vendor: str
    page: int
    page_size: int
    total_rows: int
    total_pages: int
    printed: bool = Field(False, description="Page was marked printed")
    previous_page_balance: Optional[Weight] = Field(
        None, description="Running balance carried over from the previous page"
    )
    rows: list[ReconciledRow] = Field(default_factory=list)
    vendor_totals: list[PageVendorTotal] = Field(default_factory=list)


class OpenLotsResponse(BaseModel):
    """Wire summary: lots not yet fully returned."""

    vendor: str
    total_remaining: Weight
    lots: list[OpenLot] = Field(default_factory=list)


class AvailabilityTuple(BaseModel):
    """Outstanding wire a vendor can still return."""

    vendor: str
    item: str
    total_out: Weight
    total_in: Weight
    available: Weight


class AvailabilityResponse(BaseModel):
    """All (vendor, item) pairs with positive availability."""

    total: int
    items: list[AvailabilityTuple] = Field(default_factory=list)


class ItemAvailabilityResponse(BaseModel):
    """Availability of a single (vendor, item) pair."""

    vendor: str
    item: str
    available: Weight
