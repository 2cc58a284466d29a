"""Transaction service module.

Ingestion boundary of the ledger: validates new OUT/IN entries against the
vendor and wire catalogues before they reach the store. Entries are never
edited afterwards; a wrong entry is deleted by id and re-entered.
"""
import logging
from decimal import Decimal

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from api.exceptions.api_exception import UnknownReferenceError, ValidationError
from api.models.transaction import Transaction, TransactionType
from api.models.vendor import Vendor
from api.models.wire import WireItem
from api.schemas.transaction import TransactionCreate
from api.schemas.types import round_money
from api.schemas.vendor import VendorCreate
from api.schemas.wire import WireCreate
from api.services.availability_service import check_in_allowed
from api.services.payment_service import rate_for
from api.services import vendor_service, wire_service
from api.services.snapshot_service import fetch_ledger_snapshot
from api.settings import settings

logger = logging.getLogger(__name__)


async def _next_entry_no(db: AsyncSession) -> int:
    result = await db.execute(select(func.coalesce(func.max(Transaction.entry_no), 0)))
    return (result.scalar() or 0) + 1


async def _resolve_vendor(db: AsyncSession, data: TransactionCreate) -> Vendor:
    vendor = await vendor_service.get_vendor_by_name(db, data.vendor)
    if vendor is not None:
        return vendor
    if not data.create_missing:
        raise UnknownReferenceError("vendor", data.vendor)
    logger.info("Creating missing vendor %r for new transaction", data.vendor)
    return await vendor_service.create_vendor(db, VendorCreate(name=data.vendor), commit=False)


async def _resolve_wire(db: AsyncSession, data: TransactionCreate) -> WireItem:
    wire = await wire_service.get_wire_by_name(db, data.item)
    if wire is not None:
        return wire
    if not data.create_missing:
        raise UnknownReferenceError("wire", data.item)
    logger.info("Creating missing wire %r for new transaction", data.item)
    return await wire_service.create_wire(db, WireCreate(name=data.item), commit=False)


async def create_transaction(
    db: AsyncSession,
    data: TransactionCreate,
    commit: bool = True,
) -> Transaction:
    """
    Validate and store one OUT/IN transaction.

    Checks, in order:
    - vendor and wire exist (or are created when create_missing is set)
    - IN payal type belongs to the vendor's assignments or the wire's
      catalogue entry
    - IN weight does not exceed the vendor's outstanding wire
      (ENFORCE_IN_AVAILABILITY)
    - IN price is given or derivable from the vendor's own rate

    Raises:
        UnknownReferenceError: vendor or wire missing
        ValidationError: unknown payal type, or no price and no vendor rate
        InsufficientInventoryError: IN weight above availability
    """
    vendor = await _resolve_vendor(db, data)
    wire = await _resolve_wire(db, data)

    price = Decimal("0")
    if data.type is TransactionType.IN:
        assignments = [a for a in vendor.assigned_wires if a.wire_name == data.item]
        known = {a.payal_type for a in assignments} | {p.name for p in wire.payal_types}
        if data.payal_type not in known:
            raise ValidationError(
                f"Payal type '{data.payal_type}' is not known for wire '{data.item}' "
                f"and vendor '{data.vendor}'"
            )

        if settings.ENFORCE_IN_AVAILABILITY:
            snapshot = await fetch_ledger_snapshot(db, vendor=data.vendor)
            check_in_allowed(snapshot, data.vendor, data.item, data.qty)

        if data.price is not None:
            price = data.price
        else:
            rate = rate_for(assignments, data.item, data.payal_type)
            if rate is None:
                raise ValidationError(
                    f"No rate assigned to '{data.vendor}' for {data.item} / {data.payal_type}; "
                    "assign one or enter the price"
                )
            price = round_money(rate * data.qty)

    transaction = Transaction(
        entry_no=await _next_entry_no(db),
        type=data.type,
        vendor=data.vendor,
        item=data.item,
        payal_type=data.payal_type,
        qty=data.qty,
        weight=data.qty,
        price=price,
        transaction_date=data.transaction_date,
    )
    db.add(transaction)
    if commit:
        await db.commit()
        await db.refresh(transaction)
    else:
        await db.flush()

    logger.info(
        "Recorded %s #%s: %s kg %s for %s",
        transaction.type.value, transaction.entry_no, transaction.qty,
        transaction.item, transaction.vendor,
    )
    return transaction


async def create_transactions_batch(
    db: AsyncSession,
    items: list[TransactionCreate],
) -> list[Transaction]:
    """
    Store several transactions as one unit of work.

    Entries are validated in order, so an IN may draw on an OUT earlier in
    the same batch. Any failure rolls back the whole batch.
    """
    created = []
    try:
        for data in items:
            created.append(await create_transaction(db, data, commit=False))
        await db.commit()
    except Exception:
        await db.rollback()
        logger.warning("Batch of %d transactions rolled back after %d", len(items), len(created))
        raise
    return created


async def delete_transaction(db: AsyncSession, transaction: Transaction) -> None:
    """Delete a stored transaction."""
    await db.delete(transaction)
    await db.commit()
    logger.info("Deleted transaction #%s (%s)", transaction.entry_no, transaction.id)
