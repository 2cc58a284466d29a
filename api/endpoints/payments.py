"""Payment endpoints module."""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.database.database import get_db
from api.exceptions.api_exception import NotFoundError
from api.schemas.payment import (
    PaymentCreate,
    PaymentListResponse,
    PaymentResponse,
    PaymentSummary,
)
from api.services import payment_service

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
async def create_payment(
    payment: PaymentCreate,
    db: AsyncSession = Depends(get_db),
) -> PaymentResponse:
    """
    Record a payment to a vendor.

    Rejected with 422 when the amount is not positive or exceeds the
    vendor's remaining balance.
    """
    return await payment_service.create_payment(db, payment)


@router.get("", response_model=PaymentListResponse)
async def list_payments(
    vendor: Optional[str] = Query(None, description="Filter by vendor name"),
    db: AsyncSession = Depends(get_db),
) -> PaymentListResponse:
    return await payment_service.list_payments(db, vendor)


@router.get("/summary/{vendor}", response_model=PaymentSummary)
async def get_payment_summary(
    vendor: str,
    db: AsyncSession = Depends(get_db),
) -> PaymentSummary:
    """
    Payable, paid and remaining amounts for a vendor.

    Broken down per wire and payal type; payable uses the vendor's own rates.
    """
    return await payment_service.get_payment_summary(db, vendor)


@router.delete("/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_payment(
    payment_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> None:
    deleted = await payment_service.delete_payment(db, payment_id)
    if not deleted:
        raise NotFoundError(f"Payment with id {payment_id} not found")
