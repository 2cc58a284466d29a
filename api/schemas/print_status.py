"""Print status schemas module."""
from datetime import datetime

from pydantic import BaseModel, Field


class PrintStatusCreate(BaseModel):
    """Schema for marking a ledger page as printed."""

    vendor_name: str = Field(..., min_length=1, max_length=128, alias="vendorName")
    page_number: int = Field(..., ge=1, alias="pageNumber")

    class Config:
        populate_by_name = True


class PrintStatusResponse(PrintStatusCreate):
    """Schema for print status response."""

    printed_at: datetime = Field(..., alias="printedAt")

    class Config:
        from_attributes = True
        populate_by_name = True


class PrintStatusListResponse(BaseModel):
    total: int
    items: list[PrintStatusResponse] = Field(default_factory=list)
