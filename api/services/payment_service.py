"""Payment service module.

Aggregates what a vendor is owed for returned goods against what has
been paid, and records new payments capped by the live balance.

Payable amount per IN transaction = weight × vendor rate, where the rate
comes only from the vendor's own wire assignments (no global price chart
fallback). IN rows without a payal type ("" or "Unknown") contribute
nothing and are left out of the breakdown.

All sums are Decimal; rounding happens when responses are rendered.
"""
import logging
from collections import defaultdict
from decimal import Decimal
from typing import Iterable, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from api.exceptions.api_exception import (
    PaymentExceedsBalanceError,
    UnknownReferenceError,
    ValidationError,
)
from api.models.payment import Payment
from api.models.transaction import TransactionType
from api.schemas.ledger import LedgerTransaction
from api.schemas.payment import (
    PayalBreakdown,
    PaymentCreate,
    PaymentListResponse,
    PaymentResponse,
    PaymentSummary,
    WireBreakdown,
)
from api.services import vendor_service
from api.services.snapshot_service import fetch_ledger_snapshot

logger = logging.getLogger(__name__)

UNKNOWN_PAYAL_TYPES = {"", "Unknown"}


def rate_for(assignments: Iterable, wire_name: str, payal_type: str) -> Optional[Decimal]:
    """Vendor rate per kg for a wire + payal type, or None if unassigned."""
    for assignment in assignments:
        if assignment.wire_name == wire_name and assignment.payal_type == payal_type:
            return Decimal(assignment.price_per_kg)
    return None


def _sum_amounts(payments: Iterable) -> Decimal:
    return sum((Decimal(p.amount) for p in payments), Decimal("0"))


def aggregate_payments(
    vendor: str,
    transactions: Iterable[LedgerTransaction],
    assignments: Iterable,
    payments: Iterable,
) -> PaymentSummary:
    """
    Compute payable, paid and remaining amounts for one vendor.

    Args:
        vendor: Vendor name
        transactions: Vendor transactions (OUT rows and other vendors are ignored)
        assignments: Vendor wire assignments (wire_name, payal_type, price_per_kg)
        payments: Vendor payments (amount, wire, payal_type)

    Returns:
        PaymentSummary with per-wire and per-payal-type breakdown
    """
    assignments = list(assignments)
    payments = [p for p in payments if p.vendor == vendor]

    weights: dict[str, dict[str, Decimal]] = defaultdict(lambda: defaultdict(Decimal))
    for txn in transactions:
        if txn.vendor != vendor or txn.type is not TransactionType.IN:
            continue
        payal_type = (txn.payal_type or "").strip()
        if payal_type in UNKNOWN_PAYAL_TYPES:
            continue
        weights[txn.item][payal_type] += txn.qty

    wires = []
    total_payable = Decimal("0")
    for wire_name in sorted(weights):
        wire_payments = [p for p in payments if p.wire == wire_name]
        payal_rows = []
        wire_payable = Decimal("0")
        for payal_type in sorted(weights[wire_name]):
            total_in = weights[wire_name][payal_type]
            rate = rate_for(assignments, wire_name, payal_type) or Decimal("0")
            payable = total_in * rate
            payal_payments = [p for p in wire_payments if p.payal_type == payal_type]
            paid = _sum_amounts(payal_payments)
            payal_rows.append(PayalBreakdown(
                payal_type=payal_type,
                total_in=total_in,
                rate=rate,
                total_payable=payable,
                total_paid=paid,
                remaining_balance=payable - paid,
                payment_count=len(payal_payments),
            ))
            wire_payable += payable

        wire_paid = _sum_amounts(wire_payments)
        wires.append(WireBreakdown(
            wire_name=wire_name,
            total_payable=wire_payable,
            total_paid=wire_paid,
            remaining_balance=wire_payable - wire_paid,
            payal_types=payal_rows,
        ))
        total_payable += wire_payable

    total_paid = _sum_amounts(payments)
    return PaymentSummary(
        vendor=vendor,
        total_payable=total_payable,
        total_paid=total_paid,
        remaining_balance=total_payable - total_paid,
        wires=wires,
    )


def validate_payment(summary: PaymentSummary, amount: Decimal) -> None:
    """Reject non-positive amounts and amounts above the remaining balance."""
    if amount <= 0:
        raise ValidationError("Payment amount must be greater than 0")
    if amount > summary.remaining_balance:
        raise PaymentExceedsBalanceError(
            summary.vendor, amount, summary.total_payable, summary.total_paid
        )


async def _fetch_vendor_payments(db: AsyncSession, vendor: str) -> list[Payment]:
    query = (
        select(Payment)
        .where(Payment.vendor == vendor)
        .order_by(Payment.payment_date, Payment.created_at)
    )
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_payment_summary(db: AsyncSession, vendor: str) -> PaymentSummary:
    """Recompute a vendor's summary from a fresh snapshot."""
    vendor_row = await vendor_service.get_vendor_by_name(db, vendor)
    if vendor_row is None:
        raise UnknownReferenceError("vendor", vendor)

    transactions = await fetch_ledger_snapshot(db, vendor=vendor, txn_type=TransactionType.IN)
    payments = await _fetch_vendor_payments(db, vendor)
    return aggregate_payments(vendor, transactions, vendor_row.assigned_wires, payments)


async def create_payment(db: AsyncSession, data: PaymentCreate) -> PaymentResponse:
    """Record a payment after checking it against the live balance."""
    summary = await get_payment_summary(db, data.vendor)
    try:
        validate_payment(summary, data.amount)
    except ValidationError as exc:
        logger.warning("Rejected payment for %s: %s", data.vendor, exc.detail)
        raise

    payment = Payment(
        vendor=data.vendor,
        amount=data.amount,
        payment_date=data.payment_date,
        notes=data.notes,
        wire=data.wire,
        payal_type=data.payal_type,
    )
    db.add(payment)
    await db.commit()
    await db.refresh(payment)
    logger.info("Recorded payment of %s to %s", payment.amount, payment.vendor)
    return PaymentResponse.model_validate(payment)


async def list_payments(db: AsyncSession, vendor: Optional[str] = None) -> PaymentListResponse:
    """List payments, optionally for one vendor, oldest first."""
    query = select(Payment)
    if vendor:
        query = query.where(Payment.vendor == vendor)
    query = query.order_by(Payment.payment_date, Payment.created_at)
    result = await db.execute(query)
    payments = result.scalars().all()

    return PaymentListResponse(
        total=len(payments),
        total_amount=_sum_amounts(payments),
        items=[PaymentResponse.model_validate(p) for p in payments],
    )


async def delete_payment(db: AsyncSession, payment_id: UUID) -> bool:
    """Delete a payment. Returns True if deleted."""
    payment = await db.get(Payment, payment_id)
    if not payment:
        return False

    await db.delete(payment)
    await db.commit()
    logger.info("Deleted payment %s for %s", payment_id, payment.vendor)
    return True
