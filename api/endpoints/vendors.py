"""Vendor endpoints module.

Vendors and their per-wire labour rates.
"""
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.database.database import get_db
from api.schemas.vendor import (
    VendorCreate,
    VendorListResponse,
    VendorResponse,
    VendorUpdate,
    WireAssignmentCreate,
    WireAssignmentUpdate,
)
from api.services import vendor_service

router = APIRouter(prefix="/vendors", tags=["vendors"])


@router.get("", response_model=VendorListResponse)
async def list_vendors(db: AsyncSession = Depends(get_db)) -> VendorListResponse:
    """List vendors by name with their wire assignments."""
    vendors = await vendor_service.list_vendors(db)
    return VendorListResponse(
        total=len(vendors),
        items=[VendorResponse.model_validate(v) for v in vendors],
    )


@router.post("", response_model=VendorResponse, status_code=status.HTTP_201_CREATED)
async def create_vendor(
    vendor: VendorCreate,
    db: AsyncSession = Depends(get_db),
) -> VendorResponse:
    db_vendor = await vendor_service.create_vendor(db, vendor)
    return VendorResponse.model_validate(db_vendor)


@router.get("/{vendor_id}", response_model=VendorResponse)
async def get_vendor(vendor_id: UUID, db: AsyncSession = Depends(get_db)) -> VendorResponse:
    return VendorResponse.model_validate(await vendor_service.get_vendor(db, vendor_id))


@router.put("/{vendor_id}", response_model=VendorResponse)
async def update_vendor(
    vendor_id: UUID,
    vendor_update: VendorUpdate,
    db: AsyncSession = Depends(get_db),
) -> VendorResponse:
    """Update a vendor. A new name is applied to its existing transactions and payments."""
    db_vendor = await vendor_service.update_vendor(db, vendor_id, vendor_update)
    return VendorResponse.model_validate(db_vendor)


@router.delete("/{vendor_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_vendor(vendor_id: UUID, db: AsyncSession = Depends(get_db)) -> None:
    """Delete a vendor. Refused with 400 while the vendor has transactions."""
    await vendor_service.delete_vendor(db, vendor_id)


@router.post(
    "/{vendor_id}/wires",
    response_model=VendorResponse,
    status_code=status.HTTP_201_CREATED,
)
async def assign_wire(
    vendor_id: UUID,
    assignment: WireAssignmentCreate,
    db: AsyncSession = Depends(get_db),
) -> VendorResponse:
    """
    Assign a labour rate for a wire + payal type to the vendor.

    - **wireName**: wire from the catalogue
    - **payalType**: finish category
    - **pricePerKg**: rate per kg, must be positive
    """
    db_vendor = await vendor_service.assign_wire(db, vendor_id, assignment)
    return VendorResponse.model_validate(db_vendor)


@router.put("/{vendor_id}/wires/{assignment_id}", response_model=VendorResponse)
async def update_assignment(
    vendor_id: UUID,
    assignment_id: UUID,
    assignment: WireAssignmentUpdate,
    db: AsyncSession = Depends(get_db),
) -> VendorResponse:
    db_vendor = await vendor_service.update_assignment(db, vendor_id, assignment_id, assignment)
    return VendorResponse.model_validate(db_vendor)


@router.delete("/{vendor_id}/wires/{assignment_id}", response_model=VendorResponse)
async def remove_assignment(
    vendor_id: UUID,
    assignment_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> VendorResponse:
    db_vendor = await vendor_service.remove_assignment(db, vendor_id, assignment_id)
    return VendorResponse.model_validate(db_vendor)
