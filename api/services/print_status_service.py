"""Print status service module.

Records which pages of a vendor's ledger have been printed. Pages are
numbered over the reconciled rows, so page N always covers the same
serial numbers for a given page size.
"""
import logging

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from api.exceptions.api_exception import NotFoundError
from api.models.payment import PrintStatus

logger = logging.getLogger(__name__)


async def list_print_statuses(db: AsyncSession) -> list[PrintStatus]:
    query = select(PrintStatus).order_by(PrintStatus.vendor_name, PrintStatus.page_number)
    result = await db.execute(query)
    return list(result.scalars().all())


async def printed_pages(db: AsyncSession, vendor: str) -> set[int]:
    query = select(PrintStatus.page_number).where(PrintStatus.vendor_name == vendor)
    result = await db.execute(query)
    return set(result.scalars().all())


async def _get_status(db: AsyncSession, vendor: str, page_number: int):
    query = select(PrintStatus).where(
        PrintStatus.vendor_name == vendor,
        PrintStatus.page_number == page_number,
    )
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def mark_printed(db: AsyncSession, vendor: str, page_number: int) -> PrintStatus:
    """Mark a page printed. Marking an already printed page is a no-op."""
    status = await _get_status(db, vendor, page_number)
    if status is not None:
        return status

    status = PrintStatus(vendor_name=vendor, page_number=page_number)
    db.add(status)
    await db.commit()
    await db.refresh(status)
    logger.info("Marked page %d of %r as printed", page_number, vendor)
    return status


async def clear_printed(db: AsyncSession, vendor: str, page_number: int) -> None:
    status = await _get_status(db, vendor, page_number)
    if status is None:
        raise NotFoundError(f"Page {page_number} of '{vendor}' is not marked as printed")

    await db.delete(status)
    await db.commit()
    logger.info("Cleared print status of page %d of %r", page_number, vendor)


async def clear_all(db: AsyncSession) -> int:
    """Clear every print status. Returns the number of rows removed."""
    result = await db.execute(delete(PrintStatus))
    await db.commit()
    logger.info("Cleared %d print status record(s)", result.rowcount)
    return result.rowcount
