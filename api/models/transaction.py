"""Transaction model module."""
import enum
import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import String, Integer, Date, DateTime, Numeric, Enum, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from api.database.database import Base


class TransactionType(str, enum.Enum):
    """Direction of a wire movement."""

    OUT = "OUT"  # raw wire issued to a vendor
    IN = "IN"  # finished goods returned by a vendor


class Transaction(Base):
    """Wire OUT/IN ledger entry. Immutable once stored."""

    __tablename__ = "transactions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # Store-assigned serial number; lot ids are derived from it
    entry_no: Mapped[int] = mapped_column(Integer, nullable=False, unique=True, index=True)
    type: Mapped[TransactionType] = mapped_column(
        Enum(TransactionType, name="transaction_type"), nullable=False, index=True
    )
    vendor: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    item: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    payal_type: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    # qty and weight always hold the same value
    qty: Mapped[Decimal] = mapped_column(Numeric(12, 3), nullable=False)
    weight: Mapped[Decimal] = mapped_column(Numeric(12, 3), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    transaction_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
