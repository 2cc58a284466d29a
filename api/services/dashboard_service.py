"""Dashboard service module.

Provides the stock overview: how much wire is out with vendors in total
and per vendor, and the labour charged on returns.
"""
from decimal import Decimal
from typing import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from api.models.transaction import TransactionType
from api.schemas.dashboard import DashboardSummary, VendorBalance
from api.schemas.ledger import LedgerTransaction
from api.services.snapshot_service import fetch_ledger_snapshot


def compute_dashboard_summary(transactions: Iterable[LedgerTransaction]) -> DashboardSummary:
    """
    Aggregate weights and amounts over all transactions.

    Returns:
        DashboardSummary with overall totals and per-vendor balances
        sorted by vendor name
    """
    totals = {
        TransactionType.OUT: {"weight": Decimal("0"), "amount": Decimal("0")},
        TransactionType.IN: {"weight": Decimal("0"), "amount": Decimal("0")},
    }
    per_vendor: dict[str, dict[TransactionType, Decimal]] = {}

    for txn in transactions:
        totals[txn.type]["weight"] += txn.qty
        totals[txn.type]["amount"] += txn.price
        vendor = per_vendor.setdefault(
            txn.vendor,
            {TransactionType.OUT: Decimal("0"), TransactionType.IN: Decimal("0")},
        )
        vendor[txn.type] += txn.qty

    vendors = [
        VendorBalance(
            vendor=name,
            total_out=weights[TransactionType.OUT],
            total_in=weights[TransactionType.IN],
            balance=weights[TransactionType.OUT] - weights[TransactionType.IN],
        )
        for name, weights in sorted(per_vendor.items())
    ]

    total_out = totals[TransactionType.OUT]["weight"]
    total_in = totals[TransactionType.IN]["weight"]
    return DashboardSummary(
        total_in_weight=total_in,
        total_out_weight=total_out,
        net_weight=total_out - total_in,
        total_in_amount=totals[TransactionType.IN]["amount"],
        total_out_amount=totals[TransactionType.OUT]["amount"],
        vendors=vendors,
    )


async def get_dashboard_summary(db: AsyncSession) -> DashboardSummary:
    """Dashboard summary over a fresh snapshot of every transaction."""
    return compute_dashboard_summary(await fetch_ledger_snapshot(db))
