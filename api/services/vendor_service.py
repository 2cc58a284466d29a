"""Vendor service module.

CRUD for vendors and their wire assignments (vendor-specific labour
rates). Vendors are referenced by name from transactions and payments, so
a rename is carried over to those rows.
"""
import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import delete, select, func, update
from sqlalchemy.ext.asyncio import AsyncSession

from api.exceptions.api_exception import (
    BadRequestError,
    NotFoundError,
    UnknownReferenceError,
    ValidationError,
)
from api.models.payment import Payment, PrintStatus
from api.models.transaction import Transaction
from api.models.vendor import Vendor, WireAssignment
from api.schemas.vendor import (
    VendorCreate,
    VendorUpdate,
    WireAssignmentCreate,
    WireAssignmentUpdate,
)
from api.services import wire_service

logger = logging.getLogger(__name__)


async def get_vendor_by_name(db: AsyncSession, name: str) -> Optional[Vendor]:
    result = await db.execute(select(Vendor).where(Vendor.name == name))
    return result.scalar_one_or_none()


async def get_vendor(db: AsyncSession, vendor_id: UUID) -> Vendor:
    """Fetch a vendor with fresh assignments or raise NotFoundError."""
    query = (
        select(Vendor)
        .where(Vendor.id == vendor_id)
        .execution_options(populate_existing=True)
    )
    result = await db.execute(query)
    vendor = result.scalar_one_or_none()
    if vendor is None:
        raise NotFoundError(f"Vendor with id {vendor_id} not found")
    return vendor


async def list_vendors(db: AsyncSession) -> list[Vendor]:
    result = await db.execute(select(Vendor).order_by(Vendor.name))
    return list(result.scalars().all())


async def create_vendor(db: AsyncSession, data: VendorCreate, commit: bool = True) -> Vendor:
    """Create a vendor; names are unique."""
    if await get_vendor_by_name(db, data.name) is not None:
        raise ValidationError(f"Vendor '{data.name}' already exists")

    vendor = Vendor(
        name=data.name,
        phone=data.phone,
        address=data.address,
        assigned_wires=[],
    )
    db.add(vendor)
    if commit:
        await db.commit()
        vendor = await get_vendor(db, vendor.id)
    else:
        await db.flush()

    logger.info("Created vendor %r", vendor.name)
    return vendor


async def update_vendor(db: AsyncSession, vendor_id: UUID, data: VendorUpdate) -> Vendor:
    """
    Update vendor details.

    A rename is applied to every transaction, payment and print status that
    refers to the old name, in the same commit.
    """
    vendor = await get_vendor(db, vendor_id)
    update_data = data.model_dump(exclude_unset=True)

    new_name = update_data.pop("name", None)
    if new_name is not None:
        new_name = new_name.strip()
        if not new_name:
            raise ValidationError("Vendor name is required")

    if new_name and new_name != vendor.name:
        if await get_vendor_by_name(db, new_name) is not None:
            raise ValidationError(f"Vendor '{new_name}' already exists")
        old_name = vendor.name
        await db.execute(
            update(Transaction).where(Transaction.vendor == old_name).values(vendor=new_name)
        )
        await db.execute(
            update(Payment).where(Payment.vendor == old_name).values(vendor=new_name)
        )
        await db.execute(
            update(PrintStatus)
            .where(PrintStatus.vendor_name == old_name)
            .values(vendor_name=new_name)
        )
        vendor.name = new_name
        logger.info("Renamed vendor %r to %r", old_name, new_name)

    for field, value in update_data.items():
        setattr(vendor, field, value)

    await db.commit()
    return await get_vendor(db, vendor_id)


async def delete_vendor(db: AsyncSession, vendor_id: UUID) -> None:
    """
    Delete a vendor that has no transactions on record.

    Payments and print statuses are keyed by vendor name, so they go in the
    same commit; a vendor later created under that name starts clean.
    """
    vendor = await get_vendor(db, vendor_id)

    count_query = select(func.count()).where(Transaction.vendor == vendor.name)
    count = (await db.execute(count_query)).scalar() or 0
    if count:
        raise BadRequestError(
            f"Vendor '{vendor.name}' has {count} transaction(s); delete them first"
        )

    await db.execute(delete(Payment).where(Payment.vendor == vendor.name))
    await db.execute(delete(PrintStatus).where(PrintStatus.vendor_name == vendor.name))
    await db.delete(vendor)
    await db.commit()
    logger.info("Deleted vendor %r", vendor.name)


# --- Wire assignments ---


def _find_assignment(vendor: Vendor, assignment_id: UUID) -> WireAssignment:
    for assignment in vendor.assigned_wires:
        if assignment.id == assignment_id:
            return assignment
    raise NotFoundError(f"Wire assignment with id {assignment_id} not found")


async def assign_wire(
    db: AsyncSession, vendor_id: UUID, data: WireAssignmentCreate
) -> Vendor:
    """Give a vendor a labour rate for a catalogue wire + payal type."""
    vendor = await get_vendor(db, vendor_id)

    if await wire_service.get_wire_by_name(db, data.wire_name) is None:
        raise UnknownReferenceError("wire", data.wire_name)

    for assignment in vendor.assigned_wires:
        if assignment.wire_name == data.wire_name and assignment.payal_type == data.payal_type:
            raise ValidationError(
                f"'{vendor.name}' already has a rate for {data.wire_name} / {data.payal_type}"
            )

    vendor.assigned_wires.append(
        WireAssignment(
            wire_name=data.wire_name,
            payal_type=data.payal_type,
            price_per_kg=data.price_per_kg,
        )
    )
    await db.commit()
    logger.info(
        "Assigned %s / %s to %r at %s per kg",
        data.wire_name, data.payal_type, vendor.name, data.price_per_kg,
    )
    return vendor


async def update_assignment(
    db: AsyncSession,
    vendor_id: UUID,
    assignment_id: UUID,
    data: WireAssignmentUpdate,
) -> Vendor:
    """Change an assignment's rate; payable amounts follow on next read."""
    vendor = await get_vendor(db, vendor_id)
    assignment = _find_assignment(vendor, assignment_id)
    assignment.price_per_kg = data.price_per_kg
    await db.commit()
    logger.info("Updated rate of assignment %s to %s", assignment_id, data.price_per_kg)
    return vendor


async def remove_assignment(db: AsyncSession, vendor_id: UUID, assignment_id: UUID) -> Vendor:
    vendor = await get_vendor(db, vendor_id)
    vendor.assigned_wires.remove(_find_assignment(vendor, assignment_id))
    await db.commit()
    logger.info("Removed assignment %s from %r", assignment_id, vendor.name)
    return vendor
