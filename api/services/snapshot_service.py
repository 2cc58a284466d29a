"""Ledger snapshot module.

Loads stored transactions and normalizes them once into LedgerTransaction
records; every computation works on such a snapshot.
"""
from decimal import Decimal
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from api.models.transaction import Transaction, TransactionType
from api.schemas.ledger import LedgerTransaction


def to_ledger_transaction(row: Transaction) -> LedgerTransaction:
    """Normalize a stored row; the only place date fallbacks are applied."""
    effective_date = row.transaction_date or row.created_at.date()
    return LedgerTransaction(
        id=str(row.id),
        sequence=row.entry_no,
        type=row.type,
        vendor=row.vendor,
        item=row.item,
        payal_type=row.payal_type if row.type is TransactionType.IN else None,
        qty=row.qty,
        price=row.price or Decimal("0"),
        effective_date=effective_date,
        created_at=row.created_at,
    )


async def fetch_ledger_snapshot(
    db: AsyncSession,
    vendor: Optional[str] = None,
    txn_type: Optional[TransactionType] = None,
) -> list[LedgerTransaction]:
    """Fetch transactions in store order and normalize them."""
    query = select(Transaction)
    if vendor:
        query = query.where(Transaction.vendor == vendor)
    if txn_type:
        query = query.where(Transaction.type == txn_type)
    query = query.order_by(Transaction.entry_no)

    result = await db.execute(query)
    return [to_ledger_transaction(row) for row in result.scalars().all()]
