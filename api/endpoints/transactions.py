"""Transaction CRUD endpoints module.

Transactions are append-only: there is no update endpoint. A wrong entry
is deleted by id and entered again.
"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from api.database.database import get_db
from api.exceptions.api_exception import NotFoundError
from api.models.transaction import Transaction, TransactionType
from api.schemas.transaction import (
    TransactionCreate,
    TransactionResponse,
    TransactionBatchCreate,
    TransactionBatchResponse,
    TransactionListResponse,
)
from api.services import transaction_service

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.post("", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    transaction: TransactionCreate,
    db: AsyncSession = Depends(get_db),
) -> TransactionResponse:
    """
    Record a single OUT or IN transaction.

    IN entries need a payal type known for the wire, may not exceed the
    weight the vendor still holds, and get their price from the vendor's
    rate when none is given.
    """
    db_transaction = await transaction_service.create_transaction(db, transaction)
    return TransactionResponse.model_validate(db_transaction)


@router.post("/batch", response_model=TransactionBatchResponse, status_code=status.HTTP_201_CREATED)
async def create_transactions_batch(
    batch: TransactionBatchCreate,
    db: AsyncSession = Depends(get_db),
) -> TransactionBatchResponse:
    """
    Batch create multiple transactions.

    Entries are validated in order; if any is rejected nothing is stored.
    """
    created = await transaction_service.create_transactions_batch(db, batch.transactions)
    return TransactionBatchResponse(
        created=len(created),
        message=f"Successfully created {len(created)} transaction(s)",
    )


@router.get("", response_model=TransactionListResponse)
async def list_transactions(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(50, ge=1, le=1000, description="Items per page"),
    txn_type: Optional[TransactionType] = Query(None, alias="type", description="Filter by OUT or IN"),
    vendor: Optional[str] = Query(None, description="Filter by vendor name"),
    item: Optional[str] = Query(None, description="Filter by wire"),
    db: AsyncSession = Depends(get_db),
) -> TransactionListResponse:
    """
    List transactions with pagination and optional filters, newest entry first.
    """
    query = select(Transaction)

    if txn_type:
        query = query.where(Transaction.type == txn_type)
    if vendor:
        query = query.where(Transaction.vendor == vendor)
    if item:
        query = query.where(Transaction.item == item)

    count_query = select(func.count()).select_from(query.subquery())
    total_result = await db.execute(count_query)
    total = total_result.scalar() or 0

    pages = (total + page_size - 1) // page_size if total > 0 else 1
    offset = (page - 1) * page_size

    query = query.order_by(Transaction.entry_no.desc()).offset(offset).limit(page_size)
    result = await db.execute(query)
    items = result.scalars().all()

    return TransactionListResponse(
        items=[TransactionResponse.model_validate(item) for item in items],
        total=total,
        page=page,
        page_size=page_size,
        pages=pages,
    )


async def _get_transaction(db: AsyncSession, transaction_id: UUID) -> Transaction:
    transaction = await db.get(Transaction, transaction_id)
    if not transaction:
        raise NotFoundError(f"Transaction with id {transaction_id} not found")
    return transaction


@router.get("/{transaction_id}", response_model=TransactionResponse)
async def get_transaction(
    transaction_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> TransactionResponse:
    """Get a single transaction by ID."""
    transaction = await _get_transaction(db, transaction_id)
    return TransactionResponse.model_validate(transaction)


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction(
    transaction_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> None:
    """Delete a transaction by ID. Lot ids of other entries are unaffected."""
    transaction = await _get_transaction(db, transaction_id)
    await transaction_service.delete_transaction(db, transaction)
