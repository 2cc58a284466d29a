"""Payment and print status models module."""
import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import String, Integer, Text, Date, DateTime, Numeric, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from api.database.database import Base


class Payment(Base):
    """Labour payment made to a vendor."""

    __tablename__ = "payments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    vendor: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    payment_date: Mapped[date] = mapped_column("date", Date, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    wire: Mapped[str] = mapped_column(String(64), nullable=False, default="Grand Total")
    payal_type: Mapped[str] = mapped_column(String(64), nullable=False, default="All")
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )


class PrintStatus(Base):
    """Record that a page of a vendor's ledger was printed."""

    __tablename__ = "print_statuses"
    __table_args__ = (
        UniqueConstraint("vendor_name", "page_number", name="uq_print_vendor_page"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    vendor_name: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    page_number: Mapped[int] = mapped_column(Integer, nullable=False)
    printed_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
