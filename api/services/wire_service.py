"""Wire catalogue service module.

Maintains the wire gauges and the payal types recognised for each. The
legacy price on a payal type is shown in the price chart only; payable
amounts always use vendor assignments.
"""
import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select, func, delete
from sqlalchemy.ext.asyncio import AsyncSession

from api.exceptions.api_exception import BadRequestError, NotFoundError, ValidationError
from api.models.transaction import Transaction
from api.models.vendor import WireAssignment
from api.models.wire import PayalType, WireItem
from api.schemas.wire import PayalTypeCreate, PayalTypeUpdate, WireCreate

logger = logging.getLogger(__name__)


async def get_wire_by_name(db: AsyncSession, name: str) -> Optional[WireItem]:
    result = await db.execute(select(WireItem).where(WireItem.name == name))
    return result.scalar_one_or_none()


async def get_wire(db: AsyncSession, wire_id: UUID) -> WireItem:
    """Fetch a catalogue wire with fresh payal types or raise NotFoundError."""
    query = (
        select(WireItem)
        .where(WireItem.id == wire_id)
        .execution_options(populate_existing=True)
    )
    result = await db.execute(query)
    wire = result.scalar_one_or_none()
    if wire is None:
        raise NotFoundError(f"Wire with id {wire_id} not found")
    return wire


async def list_wires(db: AsyncSession) -> list[WireItem]:
    result = await db.execute(select(WireItem).order_by(WireItem.name))
    return list(result.scalars().all())


async def create_wire(db: AsyncSession, data: WireCreate, commit: bool = True) -> WireItem:
    """Add a wire gauge to the catalogue; names are unique."""
    if await get_wire_by_name(db, data.name) is not None:
        raise ValidationError(f"Wire '{data.name}' already exists")

    wire = WireItem(name=data.name, payal_types=[])
    db.add(wire)
    if commit:
        await db.commit()
        wire = await get_wire(db, wire.id)
    else:
        await db.flush()

    logger.info("Created wire %r", wire.name)
    return wire


async def delete_wire(db: AsyncSession, wire_id: UUID) -> None:
    """
    Remove a wire from the catalogue.

    Refused while any transaction references the wire. Vendor rates for the
    wire are removed along with it.
    """
    wire = await get_wire(db, wire_id)

    count_query = select(func.count()).where(Transaction.item == wire.name)
    count = (await db.execute(count_query)).scalar() or 0
    if count:
        raise BadRequestError(
            f"Wire '{wire.name}' is used by {count} transaction(s); delete them first"
        )

    await db.execute(delete(WireAssignment).where(WireAssignment.wire_name == wire.name))
    await db.delete(wire)
    await db.commit()
    logger.info("Deleted wire %r", wire.name)


async def get_price_chart(db: AsyncSession) -> dict[str, dict[str, Optional[float]]]:
    """Wire name -> {payal type -> legacy price}, as shown in the catalogue."""
    chart = {}
    for wire in await list_wires(db):
        chart[wire.name] = {
            p.name: float(p.legacy_price) if p.legacy_price is not None else None
            for p in wire.payal_types
        }
    return chart


# --- Payal types ---


def _find_payal_type(wire: WireItem, name: str) -> PayalType:
    for payal_type in wire.payal_types:
        if payal_type.name == name:
            return payal_type
    raise NotFoundError(f"Payal type '{name}' not found on wire '{wire.name}'")


async def add_payal_type(db: AsyncSession, wire_id: UUID, data: PayalTypeCreate) -> WireItem:
    wire = await get_wire(db, wire_id)
    name = data.name.strip()
    if not name:
        raise ValidationError("Payal type name is required")
    if name in {p.name for p in wire.payal_types}:
        raise ValidationError(f"Payal type '{name}' already exists on wire '{wire.name}'")

    wire.payal_types.append(PayalType(name=name, legacy_price=data.legacy_price))
    await db.commit()
    logger.info("Added payal type %r to wire %r", name, wire.name)
    return await get_wire(db, wire_id)


async def update_payal_type(
    db: AsyncSession, wire_id: UUID, name: str, data: PayalTypeUpdate
) -> WireItem:
    wire = await get_wire(db, wire_id)
    _find_payal_type(wire, name).legacy_price = data.legacy_price
    await db.commit()
    return wire


async def delete_payal_type(db: AsyncSession, wire_id: UUID, name: str) -> WireItem:
    wire = await get_wire(db, wire_id)
    wire.payal_types.remove(_find_payal_type(wire, name))
    await db.commit()
    logger.info("Deleted payal type %r from wire %r", name, wire.name)
    return wire
