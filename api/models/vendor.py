"""Vendor and wire assignment models module."""
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import String, DateTime, Numeric, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from api.database.database import Base


class Vendor(Base):
    """Job-work vendor that receives wire and returns payal."""

    __tablename__ = "vendors"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(128), nullable=False, unique=True, index=True)
    phone: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    assigned_wires: Mapped[list["WireAssignment"]] = relationship(
        back_populates="vendor",
        cascade="all, delete-orphan",
        order_by="WireAssignment.created_at",
        lazy="selectin",
    )


class WireAssignment(Base):
    """Vendor-negotiated labour rate for one wire + payal type."""

    __tablename__ = "wire_assignments"
    __table_args__ = (
        UniqueConstraint("vendor_id", "wire_name", "payal_type", name="uq_vendor_wire_payal"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    vendor_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("vendors.id", ondelete="CASCADE"), nullable=False, index=True
    )
    wire_name: Mapped[str] = mapped_column(String(64), nullable=False)
    payal_type: Mapped[str] = mapped_column(String(64), nullable=False)
    price_per_kg: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    vendor: Mapped[Vendor] = relationship(back_populates="assigned_wires")
