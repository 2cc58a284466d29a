"""Wire catalogue models module."""
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import String, DateTime, Numeric, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from api.database.database import Base


class WireItem(Base):
    """Wire gauge known to the catalogue (e.g. "22mm")."""

    __tablename__ = "wire_items"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    payal_types: Mapped[list["PayalType"]] = relationship(
        back_populates="wire",
        cascade="all, delete-orphan",
        order_by="PayalType.name",
        lazy="selectin",
    )


class PayalType(Base):
    """Finish category recognised for a wire."""

    __tablename__ = "payal_types"
    __table_args__ = (
        UniqueConstraint("wire_item_id", "name", name="uq_wire_payal_type"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    wire_item_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("wire_items.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(64), nullable=False)
    # Informational only; payable amounts use vendor assignments
    legacy_price: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)

    wire: Mapped[WireItem] = relationship(back_populates="payal_types")
