"""Tests for the FIFO ledger reconciler."""
from datetime import date
from decimal import Decimal

import pytest

from api.models.transaction import TransactionType
from api.schemas.ledger import LotStatus, SortRule
from api.services.reconciler import (
    filter_rows_by_wire,
    format_lot_id,
    open_lots,
    paginate_rows,
    reconcile,
    sort_transactions,
    total_pages,
)

OUT = TransactionType.OUT
IN = TransactionType.IN


def lots_by_id(result):
    return {lot.lot_id: lot for lot in result.lots}


class TestHelperFunctions:
    """Tests for reconciler helper functions."""

    def test_format_lot_id_pads_to_six_digits(self):
        assert format_lot_id(1) == "S-000001"
        assert format_lot_id(42) == "S-000042"

    def test_format_lot_id_custom_prefix_and_width(self):
        assert format_lot_id(7, prefix="LOT", width=3) == "LOT007"

    def test_total_pages(self):
        assert total_pages(0, 20) == 0
        assert total_pages(20, 20) == 1
        assert total_pages(21, 20) == 2

    def test_sort_by_transaction_date_breaks_ties_by_created_at(self, txn):
        """Backdated entry is placed by its calendar date, not its entry time."""
        late_entry = txn(1, OUT, 5, day=3, created_offset=1)
        backdated = txn(2, OUT, 5, day=2, created_offset=50)
        same_day = txn(3, OUT, 5, day=3, created_offset=0)

        ordered = sort_transactions([late_entry, backdated, same_day])
        assert [t.sequence for t in ordered] == [2, 3, 1]

    def test_sort_by_created_at_ignores_calendar_date(self, txn):
        late_entry = txn(1, OUT, 5, day=3, created_offset=1)
        backdated = txn(2, OUT, 5, day=2, created_offset=50)

        ordered = sort_transactions([backdated, late_entry], SortRule.CREATED_AT)
        assert [t.sequence for t in ordered] == [1, 2]


class TestReconcile:
    """Tests for FIFO lot matching."""

    def test_acme_scenario(self, txn):
        """OUT 10, OUT 5, IN 12 leaves the second lot partial with 3 kg."""
        transactions = [
            txn(1, OUT, 10, day=1),
            txn(2, OUT, 5, day=2),
            txn(3, IN, 12, day=5, payal_type="Silver"),
        ]
        result = reconcile(transactions)
        lots = lots_by_id(result)

        assert lots["S-000001"].remaining_qty == 0
        assert lots["S-000001"].status is LotStatus.COMPLETED
        assert lots["S-000002"].remaining_qty == Decimal("3")
        assert lots["S-000002"].status is LotStatus.PARTIAL
        assert result.rows[-1].running_balance == Decimal("3")

    def test_in_row_records_deductions_from_both_lots(self, txn):
        transactions = [
            txn(1, OUT, 10, day=1),
            txn(2, OUT, 5, day=2),
            txn(3, IN, 12, day=5, payal_type="Silver"),
        ]
        in_row = reconcile(transactions).rows[-1]

        assert in_row.lot_id == "S-000001, S-000002"
        assert [(d.lot_id, d.qty) for d in in_row.deductions] == [
            ("S-000001", Decimal("10")),
            ("S-000002", Decimal("2")),
        ]
        assert in_row.lot_status is LotStatus.PARTIAL

    def test_out_row_statuses_backfilled(self, txn):
        transactions = [
            txn(1, OUT, 10, day=1),
            txn(2, OUT, 5, day=2),
            txn(3, IN, 12, day=5, payal_type="Moorni"),
        ]
        rows = reconcile(transactions).rows
        assert rows[0].lot_status is LotStatus.COMPLETED
        assert rows[1].lot_status is LotStatus.PENDING

    def test_in_completed_when_all_touched_lots_completed(self, txn):
        transactions = [
            txn(1, OUT, 10, day=1),
            txn(2, IN, 4, day=2, payal_type="Moorni"),
            txn(3, IN, 6, day=3, payal_type="Moorni"),
        ]
        rows = reconcile(transactions).rows
        assert rows[1].lot_status is LotStatus.COMPLETED
        assert rows[2].lot_status is LotStatus.COMPLETED

    def test_in_without_open_lots_is_absorbed(self, txn):
        """Over-return lowers the balance and touches no lot."""
        transactions = [
            txn(1, OUT, 5, day=1),
            txn(2, IN, 8, day=2, payal_type="Moorni"),
        ]
        result = reconcile(transactions)
        in_row = result.rows[-1]

        assert in_row.running_balance == Decimal("-3")
        assert [d.qty for d in in_row.deductions] == [Decimal("5")]
        assert lots_by_id(result)["S-000001"].remaining_qty == 0

    def test_in_touching_no_lot_is_completed(self, txn):
        result = reconcile([txn(1, IN, 2, payal_type="Moorni")])
        row = result.rows[0]
        assert row.lot_id == ""
        assert row.deductions == []
        assert row.lot_status is LotStatus.COMPLETED

    def test_queues_are_per_wire_balance_is_per_vendor(self, txn):
        transactions = [
            txn(1, OUT, 10, item="22mm", day=1),
            txn(2, OUT, 4, item="18mm", day=2),
            txn(3, IN, 3, item="18mm", day=3, payal_type="Moorni"),
        ]
        result = reconcile(transactions)
        lots = lots_by_id(result)

        assert lots["S-000001"].remaining_qty == Decimal("10")
        assert lots["S-000002"].remaining_qty == Decimal("1")
        assert [r.running_balance for r in result.rows] == [
            Decimal("10"), Decimal("14"), Decimal("11"),
        ]

    def test_vendors_are_independent(self, txn):
        transactions = [
            txn(1, OUT, 10, vendor="Acme", day=1),
            txn(2, OUT, 7, vendor="Bolt", day=1),
            txn(3, IN, 7, vendor="Bolt", day=2, payal_type="Moorni"),
        ]
        result = reconcile(transactions)
        lots = lots_by_id(result)
        assert lots["S-000001"].remaining_qty == Decimal("10")
        assert lots["S-000002"].status is LotStatus.COMPLETED

    def test_lot_ids_follow_sequence_not_position(self, txn):
        """Gaps left by deleted entries do not renumber other lots."""
        result = reconcile([txn(4, OUT, 1), txn(9, OUT, 2)])
        assert [row.lot_id for row in result.rows] == ["S-000004", "S-000009"]

    def test_sort_rule_changes_allocation_of_backdated_out(self, txn):
        """A backdated OUT is drained first only under the transaction-date rule."""
        transactions = [
            txn(1, OUT, 5, day=5, created_offset=1),
            txn(2, OUT, 5, day=1, created_offset=2),
            txn(3, IN, 5, day=6, created_offset=3, payal_type="Moorni"),
        ]
        by_date = lots_by_id(reconcile(transactions, SortRule.TRANSACTION_DATE))
        by_created = lots_by_id(reconcile(transactions, SortRule.CREATED_AT))

        assert by_date["S-000002"].status is LotStatus.COMPLETED
        assert by_created["S-000001"].status is LotStatus.COMPLETED

    def test_serial_numbers_follow_ledger_order(self, txn):
        transactions = [txn(2, OUT, 1, day=2), txn(1, OUT, 1, day=1)]
        rows = reconcile(transactions).rows
        assert [(r.serial_no, r.sequence) for r in rows] == [(1, 1), (2, 2)]

    def test_in_row_carries_design_and_labour(self, txn):
        rows = reconcile([
            txn(1, OUT, 2),
            txn(2, IN, 2, payal_type="Moorni", price="200"),
        ]).rows
        assert rows[0].design == ""
        assert rows[0].labour_charges == 0
        assert rows[1].design == "Moorni"
        assert rows[1].labour_charges == Decimal("200")
        assert rows[1].qty_in == Decimal("2")
        assert rows[1].qty_out == 0


class TestProperties:
    """Invariants that hold for any input."""

    @pytest.fixture
    def mixed(self, txn):
        return [
            txn(1, OUT, "10.5", day=1),
            txn(2, OUT, 4, item="18mm", day=1),
            txn(3, IN, "3.25", day=2, payal_type="Moorni"),
            txn(4, OUT, 6, day=2),
            txn(5, IN, 9, day=3, payal_type="Moorni"),
            txn(6, IN, 4, item="18mm", day=3, payal_type="Silver"),
            txn(7, IN, "2.5", day=3, payal_type="Moorni"),
        ]

    def test_balance_conservation(self, mixed):
        rows = reconcile(mixed).rows
        total_out = sum(t.qty for t in mixed if t.type is OUT)
        total_in = sum(t.qty for t in mixed if t.type is IN)
        assert rows[-1].running_balance == total_out - total_in

    def test_balance_conservation_independent_of_same_date_order(self, mixed):
        forward = reconcile(mixed).rows[-1].running_balance
        backward = reconcile(list(reversed(mixed))).rows[-1].running_balance
        assert forward == backward

    def test_no_negative_lots(self, mixed):
        assert all(lot.remaining_qty >= 0 for lot in reconcile(mixed).lots)

    def test_out_minus_in_equals_remaining_per_wire(self, mixed):
        result = reconcile(mixed)
        for wire in ("22mm", "18mm"):
            out_qty = sum(t.qty for t in mixed if t.item == wire and t.type is OUT)
            in_qty = sum(t.qty for t in mixed if t.item == wire and t.type is IN)
            remaining = sum(lot.remaining_qty for lot in result.lots if lot.wire == wire)
            assert out_qty - in_qty == remaining

    def test_reconciliation_is_idempotent(self, mixed):
        first = reconcile(mixed)
        second = reconcile(mixed)
        assert first.model_dump_json() == second.model_dump_json()


class TestViews:
    """Tests for wire filter, open lots and paging."""

    @pytest.fixture
    def result(self, txn):
        return reconcile([
            txn(1, OUT, 10, item="22mm", day=1),
            txn(2, OUT, 4, item="18mm", day=2),
            txn(3, IN, 6, item="22mm", day=3, payal_type="Moorni", price="600"),
            txn(4, OUT, 3, item="22mm", day=4),
        ])

    def test_filter_rows_by_wire_recomputes_balance(self, result):
        rows = filter_rows_by_wire(result.rows, "22")
        assert [r.serial_no for r in rows] == [1, 2, 3]
        assert [r.running_balance for r in rows] == [
            Decimal("10"), Decimal("4"), Decimal("7"),
        ]
        # lot ids keep their whole-ledger values
        assert rows[-1].lot_id == "S-000004"

    def test_filter_rows_by_wire_is_case_insensitive(self, txn):
        rows = reconcile([txn(1, OUT, 1, item="Gold-22MM")]).rows
        assert len(filter_rows_by_wire(rows, "22mm")) == 1

    def test_open_lots_newest_first(self, result):
        lots = open_lots(result, today=date(2024, 1, 11))
        assert [lot.lot_id for lot in lots] == ["S-000004", "S-000002", "S-000001"]
        assert lots[-1].remaining_qty == Decimal("4")
        assert lots[-1].days_outstanding == 10

    def test_open_lots_excludes_completed(self, txn):
        result = reconcile([txn(1, OUT, 2), txn(2, IN, 2, payal_type="Moorni")])
        assert open_lots(result, today=date(2024, 2, 1)) == []

    def test_paginate_rows_carries_previous_balance(self, result):
        rows, previous, totals = paginate_rows(result.rows, page=2, page_size=2)
        assert [r.serial_no for r in rows] == [3, 4]
        assert previous == Decimal("14")
        assert totals[0].vendor == "Acme"
        assert totals[0].total_labour_charges == Decimal("600")
        assert totals[0].final_running_balance == Decimal("11")

    def test_paginate_rows_first_page_has_no_previous_balance(self, result):
        rows, previous, _ = paginate_rows(result.rows, page=1, page_size=2)
        assert len(rows) == 2
        assert previous is None
