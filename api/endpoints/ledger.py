"""Ledger endpoint module.

Provides the reconciled vendor ledger, its printable pages, and the
open-lot (wire summary) view.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from api.database.database import get_db
from api.schemas.ledger import (
    LedgerPageResponse,
    OpenLotsResponse,
    SortRule,
    VendorLedgerResponse,
)
from api.services.ledger_service import get_ledger_page, get_open_lots, get_vendor_ledger

router = APIRouter(prefix="/ledger", tags=["ledger"])


@router.get("/{vendor}", response_model=VendorLedgerResponse)
async def get_ledger(
    vendor: str,
    wire: Optional[str] = Query(
        default=None,
        description="Only show wires whose name contains this text",
    ),
    sort_rule: Optional[SortRule] = Query(
        default=None,
        description="transaction_date (default) or created_at ordering",
    ),
    db: AsyncSession = Depends(get_db),
) -> VendorLedgerResponse:
    """
    Get the FIFO-reconciled ledger of a vendor.

    Each row carries:
    - **lot_id**: own lot (OUT) or the lots drawn from (IN)
    - **running_balance**: kg still held by the vendor after the row
    - **lot_status**: pending, partial or completed
    """
    return await get_vendor_ledger(db=db, vendor=vendor, wire=wire, sort_rule=sort_rule)


@router.get("/{vendor}/pages/{page}", response_model=LedgerPageResponse)
async def get_page(
    vendor: str,
    page: int = Path(..., ge=1, description="1-based page number"),
    page_size: Optional[int] = Query(
        default=None,
        ge=1,
        le=500,
        description="Rows per page (defaults to LEDGER_PAGE_SIZE)",
    ),
    wire: Optional[str] = Query(default=None),
    sort_rule: Optional[SortRule] = Query(default=None),
    db: AsyncSession = Depends(get_db),
) -> LedgerPageResponse:
    """
    Get one page of the reconciled ledger.

    Includes the balance carried from the previous page, per-vendor page
    totals and whether the page was marked printed.
    """
    return await get_ledger_page(
        db=db,
        vendor=vendor,
        page=page,
        page_size=page_size,
        wire=wire,
        sort_rule=sort_rule,
    )


@router.get("/{vendor}/open-lots", response_model=OpenLotsResponse)
async def get_vendor_open_lots(
    vendor: str,
    db: AsyncSession = Depends(get_db),
) -> OpenLotsResponse:
    """Lots not yet fully returned, newest first, with days outstanding."""
    return await get_open_lots(db=db, vendor=vendor)
