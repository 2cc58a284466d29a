"""Inventory availability service module.

Answers "how much of wire X issued to vendor Y has not come back yet",
across all transactions. Used to gate new IN entries.
"""
import logging
from decimal import Decimal
from typing import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from api.exceptions.api_exception import InsufficientInventoryError
from api.models.transaction import TransactionType
from api.schemas.ledger import AvailabilityTuple, LedgerTransaction
from api.services.snapshot_service import fetch_ledger_snapshot

logger = logging.getLogger(__name__)


def compute_availability(
    transactions: Iterable[LedgerTransaction],
) -> list[AvailabilityTuple]:
    """
    Sum OUT and IN weight per (vendor, item) and keep positive balances.

    Single pass; a pair with IN rows but no OUT rows ends up negative and
    is dropped with the other non-positive balances.

    Returns:
        AvailabilityTuple list sorted by vendor, then item
    """
    inventory: dict[tuple[str, str], dict] = {}
    for txn in transactions:
        key = (txn.vendor, txn.item)
        if key not in inventory:
            inventory[key] = {
                "vendor": txn.vendor,
                "item": txn.item,
                "total_out": Decimal("0"),
                "total_in": Decimal("0"),
            }
        if txn.type is TransactionType.OUT:
            inventory[key]["total_out"] += txn.qty
        else:
            inventory[key]["total_in"] += txn.qty

    results = []
    for entry in inventory.values():
        available = entry["total_out"] - entry["total_in"]
        if available > 0:
            results.append(AvailabilityTuple(**entry, available=available))
    return sorted(results, key=lambda a: (a.vendor, a.item))


def available_for(
    transactions: Iterable[LedgerTransaction], vendor: str, item: str
) -> Decimal:
    """Available kg for one (vendor, item); zero when nothing is outstanding."""
    for entry in compute_availability(transactions):
        if entry.vendor == vendor and entry.item == item:
            return entry.available
    return Decimal("0")


def check_in_allowed(
    transactions: Iterable[LedgerTransaction],
    vendor: str,
    item: str,
    requested: Decimal,
) -> Decimal:
    """Raise InsufficientInventoryError if ``requested`` kg exceeds availability."""
    available = available_for(transactions, vendor, item)
    if requested > available:
        logger.warning(
            "Rejected IN of %s kg %s from %s: only %s kg available",
            requested, item, vendor, available,
        )
        raise InsufficientInventoryError(vendor, item, requested, available)
    return available


async def fetch_availability(db: AsyncSession) -> list[AvailabilityTuple]:
    """Availability over a fresh snapshot of every transaction."""
    snapshot = await fetch_ledger_snapshot(db)
    return compute_availability(snapshot)


async def fetch_item_availability(db: AsyncSession, vendor: str, item: str) -> Decimal:
    """Available kg for one (vendor, item) from a fresh snapshot."""
    snapshot = await fetch_ledger_snapshot(db, vendor=vendor)
    return available_for(snapshot, vendor, item)
