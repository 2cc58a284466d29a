"""Vendor schemas module."""
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from api.schemas.types import Money


class WireAssignmentBase(BaseModel):
    """Vendor-specific labour rate for a wire + payal type."""

    wire_name: str = Field(..., min_length=1, max_length=64, alias="wireName")
    payal_type: str = Field(..., min_length=1, max_length=64, alias="payalType")
    price_per_kg: Money = Field(
        ...,
        gt=0,
        max_digits=12,
        decimal_places=2,
        alias="pricePerKg",
        description="Labour rate per kg",
    )

    class Config:
        populate_by_name = True

    @field_validator("wire_name", "payal_type")
    @classmethod
    def _strip(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class WireAssignmentCreate(WireAssignmentBase):
    """Schema for assigning a wire to a vendor."""

    pass


class WireAssignmentUpdate(BaseModel):
    """Schema for changing an assignment's rate."""

    price_per_kg: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2, alias="pricePerKg")

    class Config:
        populate_by_name = True


class WireAssignmentResponse(WireAssignmentBase):
    """Schema for wire assignment response."""

    id: UUID

    class Config:
        from_attributes = True
        populate_by_name = True


class VendorBase(BaseModel):
    """Base vendor schema with common fields."""

    name: str = Field(..., min_length=1, max_length=128, description="Unique vendor name")
    phone: Optional[str] = Field(None, max_length=32)
    address: Optional[str] = Field(None, max_length=512)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Vendor name is required")
        return value


class VendorCreate(VendorBase):
    """Schema for creating a vendor."""

    pass


class VendorUpdate(BaseModel):
    """Schema for updating a vendor (all fields optional)."""

    name: Optional[str] = Field(None, min_length=1, max_length=128)
    phone: Optional[str] = Field(None, max_length=32)
    address: Optional[str] = Field(None, max_length=512)


class VendorResponse(VendorBase):
    """Schema for vendor response."""

    id: UUID
    assigned_wires: list[WireAssignmentResponse] = Field(
        default_factory=list, alias="assignedWires"
    )

    class Config:
        from_attributes = True
        populate_by_name = True


class VendorListResponse(BaseModel):
    """Schema for vendor list response."""

    total: int
    items: list[VendorResponse] = Field(default_factory=list)
