"""Wire catalogue schemas module."""
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from api.schemas.types import Money


class WireCreate(BaseModel):
    """Schema for adding a wire gauge to the catalogue."""

    name: str = Field(..., min_length=1, max_length=64, description="Wire gauge, e.g. 22mm")

    @field_validator("name")
    @classmethod
    def _strip(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Wire name is required")
        return value


class PayalTypeCreate(BaseModel):
    """Schema for recognising a payal type on a wire."""

    name: str = Field(..., min_length=1, max_length=64)
    legacy_price: Optional[Decimal] = Field(
        None,
        ge=0,
        max_digits=12,
        decimal_places=2,
        alias="legacyPrice",
        description="Informational global price",
    )

    class Config:
        populate_by_name = True


class PayalTypeUpdate(BaseModel):
    """Schema for updating a payal type's legacy price."""

    legacy_price: Optional[Decimal] = Field(
        None, ge=0, max_digits=12, decimal_places=2, alias="legacyPrice"
    )

    class Config:
        populate_by_name = True


class PayalTypeResponse(BaseModel):
    """Schema for payal type response."""

    name: str
    legacy_price: Optional[Money] = Field(None, alias="legacyPrice")

    class Config:
        from_attributes = True
        populate_by_name = True


class WireResponse(BaseModel):
    """Schema for a catalogue wire with its payal types."""

    id: UUID
    name: str
    payal_types: list[PayalTypeResponse] = Field(default_factory=list, alias="payalTypes")

    class Config:
        from_attributes = True
        populate_by_name = True


class WireListResponse(BaseModel):
    """Schema for wire catalogue list."""

    total: int
    items: list[WireResponse] = Field(default_factory=list)
