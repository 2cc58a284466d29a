"""Inventory endpoint module.

Provides the wire each vendor can still return.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.database.database import get_db
from api.schemas.ledger import AvailabilityResponse, ItemAvailabilityResponse
from api.services.availability_service import fetch_availability, fetch_item_availability

router = APIRouter(prefix="/inventory", tags=["inventory"])


@router.get("/available", response_model=AvailabilityResponse)
async def list_available(db: AsyncSession = Depends(get_db)) -> AvailabilityResponse:
    """
    List (vendor, wire) pairs with weight still outstanding.

    Pairs whose returns cover everything issued are omitted.
    """
    items = await fetch_availability(db)
    return AvailabilityResponse(total=len(items), items=items)


@router.get("/available/{vendor}/{item}", response_model=ItemAvailabilityResponse)
async def get_item_available(
    vendor: str,
    item: str,
    db: AsyncSession = Depends(get_db),
) -> ItemAvailabilityResponse:
    """Weight of one wire the vendor can still return (0 if none)."""
    available = await fetch_item_availability(db, vendor, item)
    return ItemAvailabilityResponse(vendor=vendor, item=item, available=available)
