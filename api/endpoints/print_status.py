"""Print status endpoints module."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.database.database import get_db
from api.schemas.print_status import (
    PrintStatusCreate,
    PrintStatusListResponse,
    PrintStatusResponse,
)
from api.services import print_status_service

router = APIRouter(prefix="/print-status", tags=["print-status"])


@router.get("", response_model=PrintStatusListResponse)
async def list_print_statuses(db: AsyncSession = Depends(get_db)) -> PrintStatusListResponse:
    statuses = await print_status_service.list_print_statuses(db)
    return PrintStatusListResponse(
        total=len(statuses),
        items=[PrintStatusResponse.model_validate(s) for s in statuses],
    )


@router.post("", response_model=PrintStatusResponse, status_code=status.HTTP_201_CREATED)
async def mark_printed(
    print_status: PrintStatusCreate,
    db: AsyncSession = Depends(get_db),
) -> PrintStatusResponse:
    """Mark a ledger page printed; repeating the call is harmless."""
    db_status = await print_status_service.mark_printed(
        db, print_status.vendor_name, print_status.page_number
    )
    return PrintStatusResponse.model_validate(db_status)


@router.delete("/{vendor}/{page_number}", status_code=status.HTTP_204_NO_CONTENT)
async def clear_printed(
    vendor: str,
    page_number: int,
    db: AsyncSession = Depends(get_db),
) -> None:
    await print_status_service.clear_printed(db, vendor, page_number)


@router.delete("", status_code=status.HTTP_200_OK)
async def clear_all_printed(db: AsyncSession = Depends(get_db)) -> dict:
    """Clear every print status record."""
    deleted = await print_status_service.clear_all(db)
    return {"deleted": deleted, "message": f"Cleared {deleted} print status record(s)"}
