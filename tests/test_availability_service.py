"""Tests for the inventory availability calculator."""
from decimal import Decimal

import pytest

from api.exceptions.api_exception import InsufficientInventoryError
from api.models.transaction import TransactionType
from api.services.availability_service import (
    available_for,
    check_in_allowed,
    compute_availability,
)

OUT = TransactionType.OUT
IN = TransactionType.IN


class TestComputeAvailability:
    """Tests for per (vendor, item) availability."""

    def test_empty(self):
        assert compute_availability([]) == []

    def test_fully_returned_pair_is_omitted(self, txn):
        """OUT 8 kg then IN 8 kg leaves nothing available."""
        transactions = [txn(1, OUT, 8), txn(2, IN, 8, payal_type="Moorni")]
        assert compute_availability(transactions) == []

    def test_in_without_out_is_omitted(self, txn):
        transactions = [txn(1, IN, 3, payal_type="Moorni")]
        assert compute_availability(transactions) == []

    def test_partial_return(self, txn):
        transactions = [
            txn(1, OUT, 10),
            txn(2, OUT, "2.5"),
            txn(3, IN, 4, payal_type="Moorni"),
        ]
        [entry] = compute_availability(transactions)
        assert (entry.vendor, entry.item) == ("Acme", "22mm")
        assert entry.total_out == Decimal("12.5")
        assert entry.total_in == Decimal("4")
        assert entry.available == Decimal("8.5")

    def test_sorted_by_vendor_then_item(self, txn):
        transactions = [
            txn(1, OUT, 1, vendor="Bolt", item="18mm"),
            txn(2, OUT, 1, vendor="Acme", item="22mm"),
            txn(3, OUT, 1, vendor="Acme", item="18mm"),
        ]
        keys = [(a.vendor, a.item) for a in compute_availability(transactions)]
        assert keys == [("Acme", "18mm"), ("Acme", "22mm"), ("Bolt", "18mm")]

    def test_hyphenated_names_stay_separate(self, txn):
        """"A-B" / "C" and "A" / "B-C" are different pairs."""
        transactions = [
            txn(1, OUT, 4, vendor="A-B", item="C"),
            txn(2, OUT, 6, vendor="A", item="B-C"),
        ]
        result = compute_availability(transactions)
        assert [(a.vendor, a.item, a.available) for a in result] == [
            ("A", "B-C", Decimal("6")),
            ("A-B", "C", Decimal("4")),
        ]
        assert available_for(transactions, "A-B", "C") == Decimal("4")

    def test_never_reports_non_positive(self, txn):
        transactions = [
            txn(1, OUT, 5),
            txn(2, IN, 7, payal_type="Moorni"),
            txn(3, OUT, 2, item="18mm"),
        ]
        result = compute_availability(transactions)
        assert all(a.available > 0 for a in result)
        assert [a.item for a in result] == ["18mm"]


class TestCheckInAllowed:
    """Tests for the IN entry gate."""

    def test_available_for_missing_pair_is_zero(self, txn):
        assert available_for([txn(1, OUT, 5)], "Acme", "18mm") == 0

    def test_within_availability(self, txn):
        transactions = [txn(1, OUT, 10)]
        assert check_in_allowed(transactions, "Acme", "22mm", Decimal("10")) == Decimal("10")

    def test_above_availability_raises(self, txn):
        transactions = [txn(1, OUT, 10), txn(2, IN, 7, payal_type="Moorni")]
        with pytest.raises(InsufficientInventoryError) as exc_info:
            check_in_allowed(transactions, "Acme", "22mm", Decimal("4"))
        assert exc_info.value.status_code == 409
        assert exc_info.value.available == Decimal("3")
        assert "Only 3 kg" in exc_info.value.detail

    def test_nothing_issued_raises(self):
        with pytest.raises(InsufficientInventoryError) as exc_info:
            check_in_allowed([], "Acme", "22mm", Decimal("1"))
        assert "not available" in exc_info.value.detail
