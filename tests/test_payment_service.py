"""Tests for the payment aggregator."""
from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

from api.exceptions.api_exception import (
    PaymentExceedsBalanceError,
    UnknownReferenceError,
    ValidationError,
)
from api.models.transaction import Transaction, TransactionType
from api.schemas.payment import PaymentCreate
from api.services.payment_service import (
    aggregate_payments,
    create_payment,
    get_payment_summary,
    list_payments,
    rate_for,
    validate_payment,
)

OUT = TransactionType.OUT
IN = TransactionType.IN


def assignment(wire_name, payal_type, price):
    return SimpleNamespace(wire_name=wire_name, payal_type=payal_type, price_per_kg=Decimal(price))


def paid(amount, vendor="Acme", wire="Grand Total", payal_type="All"):
    return SimpleNamespace(vendor=vendor, amount=Decimal(amount), wire=wire, payal_type=payal_type)


RATES = [
    assignment("22mm", "Moorni", "100"),
    assignment("22mm", "Silver", "150"),
    assignment("18mm", "Moorni", "80"),
]


class TestHelperFunctions:
    """Tests for rate lookup."""

    def test_rate_for_assigned(self):
        assert rate_for(RATES, "22mm", "Silver") == Decimal("150")

    def test_rate_for_unassigned_is_none(self):
        assert rate_for(RATES, "18mm", "Silver") is None


class TestAggregatePayments:
    """Tests for payable / paid / remaining computation."""

    def test_payable_uses_vendor_rates(self, txn):
        transactions = [
            txn(1, OUT, 20),
            txn(2, IN, 6, payal_type="Moorni"),
            txn(3, IN, 2, payal_type="Silver"),
            txn(4, OUT, 5, item="18mm"),
            txn(5, IN, "2.5", item="18mm", payal_type="Moorni"),
        ]
        summary = aggregate_payments("Acme", transactions, RATES, [])

        # 6*100 + 2*150 + 2.5*80
        assert summary.total_payable == Decimal("1100")
        assert summary.total_paid == 0
        assert summary.remaining_balance == Decimal("1100")
        assert [w.wire_name for w in summary.wires] == ["18mm", "22mm"]
        wire_22 = summary.wires[1]
        assert wire_22.total_payable == Decimal("900")
        assert [p.payal_type for p in wire_22.payal_types] == ["Moorni", "Silver"]
        assert wire_22.payal_types[0].total_in == Decimal("6")

    def test_unknown_payal_type_is_excluded(self, txn):
        transactions = [
            txn(1, IN, 10, payal_type="Moorni"),
            txn(2, IN, 5, payal_type="Unknown"),
            txn(3, IN, 5, payal_type=""),
            txn(4, IN, 5),
        ]
        summary = aggregate_payments("Acme", transactions, RATES, [])

        assert summary.total_payable == Decimal("1000")
        [wire] = summary.wires
        assert [p.payal_type for p in wire.payal_types] == ["Moorni"]

    def test_missing_vendor_rate_contributes_zero(self, txn):
        """No fallback to any catalogue price."""
        transactions = [txn(1, IN, 4, item="18mm", payal_type="Silver")]
        summary = aggregate_payments("Acme", transactions, RATES, [])

        assert summary.total_payable == 0
        breakdown = summary.wires[0].payal_types[0]
        assert breakdown.rate == 0
        assert breakdown.total_in == Decimal("4")

    def test_other_vendors_are_ignored(self, txn):
        transactions = [
            txn(1, IN, 10, payal_type="Moorni"),
            txn(2, IN, 10, vendor="Bolt", payal_type="Moorni"),
        ]
        payments = [paid("100"), paid("999", vendor="Bolt")]
        summary = aggregate_payments("Acme", transactions, RATES, payments)

        assert summary.total_payable == Decimal("1000")
        assert summary.total_paid == Decimal("100")

    def test_tagged_payments_counted_per_wire_and_payal(self, txn):
        transactions = [
            txn(1, IN, 10, payal_type="Moorni"),
            txn(2, IN, 2, payal_type="Silver"),
        ]
        payments = [
            paid("200", wire="22mm", payal_type="Moorni"),
            paid("50", wire="22mm", payal_type="Silver"),
            paid("100"),
        ]
        summary = aggregate_payments("Acme", transactions, RATES, payments)

        assert summary.total_paid == Decimal("350")
        assert summary.remaining_balance == Decimal("950")
        [wire] = summary.wires
        assert wire.total_paid == Decimal("250")
        moorni, silver = wire.payal_types
        assert moorni.total_paid == Decimal("200")
        assert moorni.remaining_balance == Decimal("800")
        assert moorni.payment_count == 1
        assert silver.remaining_balance == Decimal("250")


class TestValidatePayment:
    """Tests for the payment cap."""

    @pytest.fixture
    def summary(self, txn):
        transactions = [txn(1, IN, 10, payal_type="Moorni")]
        return aggregate_payments("Acme", transactions, RATES, [paid("400")])

    def test_amount_above_remaining_rejected(self, summary):
        with pytest.raises(PaymentExceedsBalanceError) as exc_info:
            validate_payment(summary, Decimal("700"))
        assert exc_info.value.status_code == 422
        assert exc_info.value.remaining_balance == Decimal("600")
        assert "600.00" in exc_info.value.detail

    def test_amount_equal_to_remaining_accepted(self, summary):
        validate_payment(summary, Decimal("600"))

    @pytest.mark.parametrize("amount", ["0", "-5"])
    def test_non_positive_rejected(self, summary, amount):
        with pytest.raises(ValidationError):
            validate_payment(summary, Decimal(amount))


@pytest.mark.asyncio
class TestPaymentStore:
    """Tests for payments recorded against the live balance."""

    async def _seed(self, db_session):
        db_session.add_all([
            Transaction(
                entry_no=1, type=OUT, vendor="Acme", item="22mm",
                qty=Decimal("10"), weight=Decimal("10"), price=Decimal("0"),
                transaction_date=date(2024, 1, 1),
            ),
            Transaction(
                entry_no=2, type=IN, vendor="Acme", item="22mm", payal_type="Moorni",
                qty=Decimal("10"), weight=Decimal("10"), price=Decimal("1000"),
                transaction_date=date(2024, 1, 2),
            ),
        ])
        await db_session.commit()

    async def test_payment_cap_against_live_balance(self, db_session, catalogue):
        await self._seed(db_session)
        await create_payment(db_session, PaymentCreate(vendor="Acme", amount=Decimal("400")))

        with pytest.raises(PaymentExceedsBalanceError):
            await create_payment(db_session, PaymentCreate(vendor="Acme", amount=Decimal("700")))

        await create_payment(db_session, PaymentCreate(vendor="Acme", amount=Decimal("600")))
        summary = await get_payment_summary(db_session, "Acme")
        assert summary.total_payable == Decimal("1000")
        assert summary.remaining_balance == 0

    async def test_rejected_payment_is_not_stored(self, db_session, catalogue):
        await self._seed(db_session)
        with pytest.raises(PaymentExceedsBalanceError):
            await create_payment(db_session, PaymentCreate(vendor="Acme", amount=Decimal("1500")))

        listing = await list_payments(db_session, "Acme")
        assert listing.total == 0

    async def test_summary_for_unknown_vendor(self, db_session):
        with pytest.raises(UnknownReferenceError):
            await get_payment_summary(db_session, "Nobody")
