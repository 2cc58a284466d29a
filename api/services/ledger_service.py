"""Ledger service module.

Fetches a vendor's transactions and runs them through the reconciler.
Nothing is cached: every request reconciles a fresh snapshot, so a
deleted or backdated entry is reflected immediately.
"""
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from api.exceptions.api_exception import NotFoundError, UnknownReferenceError
from api.schemas.ledger import (
    LedgerPageResponse,
    OpenLotsResponse,
    SortRule,
    VendorLedgerResponse,
)
from api.services import vendor_service
from api.services.print_status_service import printed_pages
from api.services.reconciler import (
    filter_rows_by_wire,
    open_lots,
    paginate_rows,
    reconcile,
    total_pages,
)
from api.services.snapshot_service import fetch_ledger_snapshot
from api.settings import settings


def default_sort_rule() -> SortRule:
    return SortRule(settings.LEDGER_SORT_RULE)


async def _reconcile_vendor(db: AsyncSession, vendor: str, sort_rule: Optional[SortRule]):
    if await vendor_service.get_vendor_by_name(db, vendor) is None:
        raise UnknownReferenceError("vendor", vendor)

    snapshot = await fetch_ledger_snapshot(db, vendor=vendor)
    return reconcile(
        snapshot,
        sort_rule=sort_rule or default_sort_rule(),
        lot_prefix=settings.LOT_ID_PREFIX,
        lot_width=settings.LOT_ID_WIDTH,
    )


async def get_vendor_ledger(
    db: AsyncSession,
    vendor: str,
    wire: Optional[str] = None,
    sort_rule: Optional[SortRule] = None,
) -> VendorLedgerResponse:
    """
    Reconciled ledger of one vendor.

    Args:
        db: Database session
        vendor: Vendor name
        wire: Optional case-insensitive wire name filter
        sort_rule: Ordering rule; defaults to LEDGER_SORT_RULE

    Returns:
        VendorLedgerResponse with rows, lots and totals
    """
    sort_rule = sort_rule or default_sort_rule()
    result = await _reconcile_vendor(db, vendor, sort_rule)

    rows = result.rows
    lots = result.lots
    if wire:
        rows = filter_rows_by_wire(rows, wire)
        lots = [lot for lot in lots if wire.lower() in lot.wire.lower()]

    total_out = sum((r.qty_out for r in rows), Decimal("0"))
    total_in = sum((r.qty_in for r in rows), Decimal("0"))
    return VendorLedgerResponse(
        vendor=vendor,
        wire=wire,
        sort_rule=sort_rule,
        total_out=total_out,
        total_in=total_in,
        final_balance=total_out - total_in,
        rows=rows,
        lots=lots,
    )


async def get_ledger_page(
    db: AsyncSession,
    vendor: str,
    page: int,
    page_size: Optional[int] = None,
    wire: Optional[str] = None,
    sort_rule: Optional[SortRule] = None,
) -> LedgerPageResponse:
    """One page of a vendor ledger, flagged if it was marked printed."""
    page_size = page_size or settings.LEDGER_PAGE_SIZE
    ledger = await get_vendor_ledger(db, vendor, wire=wire, sort_rule=sort_rule)

    pages = total_pages(len(ledger.rows), page_size)
    if page > max(pages, 1):
        raise NotFoundError(f"Page {page} of '{vendor}' does not exist ({pages} page(s))")

    rows, previous_balance, vendor_totals = paginate_rows(ledger.rows, page, page_size)
    printed = page in await printed_pages(db, vendor)
    return LedgerPageResponse(
        vendor=vendor,
        page=page,
        page_size=page_size,
        total_rows=len(ledger.rows),
        total_pages=pages,
        printed=printed,
        previous_page_balance=previous_balance,
        rows=rows,
        vendor_totals=vendor_totals,
    )


async def get_open_lots(
    db: AsyncSession,
    vendor: str,
    today: Optional[date] = None,
    sort_rule: Optional[SortRule] = None,
) -> OpenLotsResponse:
    """Lots the vendor has not fully returned, newest first."""
    result = await _reconcile_vendor(db, vendor, sort_rule)
    lots = open_lots(result, today or date.today())
    return OpenLotsResponse(
        vendor=vendor,
        total_remaining=sum((lot.remaining_qty for lot in lots), Decimal("0")),
        lots=lots,
    )
