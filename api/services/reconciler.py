"""Ledger reconciliation module.

Matches OUT (wire issued) transactions against later IN (goods returned)
transactions first-in-first-out, per vendor and wire.

Algorithm:
1. Sort chronologically (calendar date with creation-time tie-break, or
   creation time alone; see SortRule)
2. Every OUT opens a lot "S-<sequence>" at the tail of its (vendor, wire)
   queue
3. Every IN drains lots from the head of the queue until its weight is
   covered; weight beyond the open lots only lowers the running balance
4. A single running balance per vendor (all wires) is attached to each row
5. Lot statuses are backfilled once the whole pass is done

Guarantees:
- Pure and deterministic for a given input and sort rule
- For each (vendor, wire), OUT - IN equals the sum of remaining lot weight
  as long as no IN exceeds the open lots
- remaining_qty never goes below zero

All functions here work on in-memory snapshots and never touch the store.
"""
import logging
import math
from collections import defaultdict, deque
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from api.models.transaction import TransactionType
from api.schemas.ledger import (
    LedgerTransaction,
    LotDeduction,
    LotState,
    LotStatus,
    OpenLot,
    PageVendorTotal,
    ReconciledRow,
    ReconciliationResult,
    SortRule,
)

logger = logging.getLogger(__name__)

DEFAULT_LOT_PREFIX = "S-"
DEFAULT_LOT_WIDTH = 6


class _Lot:
    """Mutable lot state used during a single reconciliation pass."""

    __slots__ = ("lot_id", "vendor", "wire", "out_date", "qty", "remaining_qty")

    def __init__(self, lot_id: str, txn: LedgerTransaction):
        self.lot_id = lot_id
        self.vendor = txn.vendor
        self.wire = txn.item
        self.out_date = txn.effective_date
        self.qty = txn.qty
        self.remaining_qty = txn.qty

    @property
    def status(self) -> LotStatus:
        if self.remaining_qty == 0:
            return LotStatus.COMPLETED
        if self.remaining_qty < self.qty:
            return LotStatus.PARTIAL
        return LotStatus.PENDING


def format_lot_id(
    sequence: int,
    prefix: str = DEFAULT_LOT_PREFIX,
    width: int = DEFAULT_LOT_WIDTH,
) -> str:
    """Build the traceable wire id of an OUT batch, e.g. S-000042."""
    return f"{prefix}{sequence:0{width}d}"


def sort_transactions(
    transactions: Iterable[LedgerTransaction],
    sort_rule: SortRule = SortRule.TRANSACTION_DATE,
) -> list[LedgerTransaction]:
    """Order transactions for FIFO matching.

    The two rules are not interchangeable: backdated entries get different
    lot allocations under each. Sequence is the final tie-break so the
    order is total.
    """
    if sort_rule is SortRule.CREATED_AT:
        return sorted(transactions, key=lambda t: (t.created_at, t.sequence))
    return sorted(
        transactions,
        key=lambda t: (t.effective_date, t.created_at, t.sequence),
    )


def _deplete(queue: deque, need: Decimal) -> list[LotDeduction]:
    """Take ``need`` kg from the oldest open lots of one queue."""
    deductions = []
    while need > 0 and queue:
        lot = queue[0]
        taken = min(lot.remaining_qty, need)
        lot.remaining_qty -= taken
        need -= taken
        deductions.append(LotDeduction(lot_id=lot.lot_id, qty=taken))
        if lot.remaining_qty == 0:
            queue.popleft()
    if need > 0:
        logger.debug("IN exceeds open lots by %s kg; absorbed into running balance", need)
    return deductions


def reconcile(
    transactions: Iterable[LedgerTransaction],
    sort_rule: SortRule = SortRule.TRANSACTION_DATE,
    lot_prefix: str = DEFAULT_LOT_PREFIX,
    lot_width: int = DEFAULT_LOT_WIDTH,
) -> ReconciliationResult:
    """
    Reconcile OUT and IN transactions into ledger rows and lots.

    Usually called with one vendor's transactions; several vendors are
    handled independently (separate queues and balances).

    Args:
        transactions: Normalized transactions in any order
        sort_rule: Chronological ordering rule
        lot_prefix: Prefix of generated lot ids
        lot_width: Zero-padded width of the lot sequence number

    Returns:
        ReconciliationResult with rows in ledger order and lots in
        creation order
    """
    ordered = sort_transactions(transactions, sort_rule)

    queues: dict[tuple[str, str], deque] = defaultdict(deque)
    lots: dict[str, _Lot] = {}
    balances: dict[str, Decimal] = defaultdict(Decimal)
    passes: list[tuple[LedgerTransaction, Optional[str], list[LotDeduction], Decimal]] = []

    for txn in ordered:
        queue = queues[(txn.vendor, txn.item)]
        if txn.type is TransactionType.OUT:
            lot_id = format_lot_id(txn.sequence, lot_prefix, lot_width)
            lot = _Lot(lot_id, txn)
            lots[lot_id] = lot
            queue.append(lot)
            balances[txn.vendor] += txn.qty
            passes.append((txn, lot_id, [], balances[txn.vendor]))
        else:
            deductions = _deplete(queue, txn.qty)
            balances[txn.vendor] -= txn.qty
            passes.append((txn, None, deductions, balances[txn.vendor]))

    rows = []
    for serial_no, (txn, own_lot_id, deductions, balance) in enumerate(passes, start=1):
        is_out = txn.type is TransactionType.OUT
        if is_out:
            lot_id = own_lot_id
            done = lots[own_lot_id].remaining_qty == 0
            status = LotStatus.COMPLETED if done else LotStatus.PENDING
        else:
            lot_id = ", ".join(d.lot_id for d in deductions)
            # An IN that touched no lot is vacuously completed
            done = all(lots[d.lot_id].remaining_qty == 0 for d in deductions)
            status = LotStatus.COMPLETED if done else LotStatus.PARTIAL

        rows.append(ReconciledRow(
            serial_no=serial_no,
            transaction_id=txn.id,
            sequence=txn.sequence,
            type=txn.type,
            vendor=txn.vendor,
            wire=txn.item,
            design="" if is_out else (txn.payal_type or ""),
            transaction_date=txn.effective_date,
            created_at=txn.created_at,
            qty_out=txn.qty if is_out else Decimal("0"),
            qty_in=Decimal("0") if is_out else txn.qty,
            labour_charges=Decimal("0") if is_out else txn.price,
            lot_id=lot_id,
            deductions=deductions,
            running_balance=balance,
            lot_status=status,
        ))

    lot_states = [
        LotState(
            lot_id=lot.lot_id,
            vendor=lot.vendor,
            wire=lot.wire,
            out_date=lot.out_date,
            qty=lot.qty,
            remaining_qty=lot.remaining_qty,
            status=lot.status,
        )
        for lot in lots.values()
    ]
    return ReconciliationResult(rows=rows, lots=lot_states)


def filter_rows_by_wire(rows: list[ReconciledRow], wire: str) -> list[ReconciledRow]:
    """
    Keep rows whose wire name contains ``wire`` (case-insensitive).

    Lot ids and statuses keep their whole-ledger values; the running balance
    is recomputed per (vendor, wire) and serial numbers restart at 1.
    """
    needle = wire.lower()
    balances: dict[tuple[str, str], Decimal] = defaultdict(Decimal)
    filtered = []
    for row in rows:
        if needle not in row.wire.lower():
            continue
        key = (row.vendor, row.wire)
        balances[key] += row.qty_out - row.qty_in
        filtered.append(row.model_copy(update={
            "serial_no": len(filtered) + 1,
            "running_balance": balances[key],
        }))
    return filtered


def open_lots(result: ReconciliationResult, today: date) -> list[OpenLot]:
    """
    List lots still holding weight, newest OUT date first.

    Args:
        result: Output of reconcile()
        today: Reference date for days outstanding

    Returns:
        OpenLot entries with remaining weight and age in days
    """
    pending = [
        OpenLot(
            lot_id=lot.lot_id,
            vendor=lot.vendor,
            wire=lot.wire,
            out_date=lot.out_date,
            remaining_qty=lot.remaining_qty,
            days_outstanding=abs((today - lot.out_date).days),
        )
        for lot in result.lots
        if lot.remaining_qty > 0
    ]
    return sorted(pending, key=lambda lot: lot.out_date, reverse=True)


def total_pages(row_count: int, page_size: int) -> int:
    """Number of pages needed for ``row_count`` rows."""
    return math.ceil(row_count / page_size) if row_count else 0


def paginate_rows(
    rows: list[ReconciledRow],
    page: int,
    page_size: int,
) -> tuple[list[ReconciledRow], Optional[Decimal], list[PageVendorTotal]]:
    """
    Slice one page out of reconciled rows.

    Args:
        rows: Rows in ledger order
        page: 1-based page number
        page_size: Rows per page

    Returns:
        Tuple of (page rows, running balance carried from the previous
        page or None on page 1, per-vendor totals of the page)
    """
    start = (page - 1) * page_size
    page_rows = rows[start:start + page_size]

    previous_balance = None
    if page > 1 and 0 < start <= len(rows):
        previous_balance = rows[start - 1].running_balance

    totals: dict[str, dict] = {}
    for row in page_rows:
        entry = totals.setdefault(row.vendor, {"labour": Decimal("0"), "balance": Decimal("0")})
        entry["labour"] += row.labour_charges
        entry["balance"] = row.running_balance

    vendor_totals = [
        PageVendorTotal(
            vendor=vendor,
            total_labour_charges=entry["labour"],
            final_running_balance=entry["balance"],
        )
        for vendor, entry in sorted(totals.items())
    ]
    return page_rows, previous_balance, vendor_totals
