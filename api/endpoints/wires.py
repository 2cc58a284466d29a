"""Wire catalogue endpoints module."""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.database.database import get_db
from api.schemas.wire import (
    PayalTypeCreate,
    PayalTypeUpdate,
    WireCreate,
    WireListResponse,
    WireResponse,
)
from api.services import wire_service

router = APIRouter(prefix="/wires", tags=["wires"])


@router.get("", response_model=WireListResponse)
async def list_wires(db: AsyncSession = Depends(get_db)) -> WireListResponse:
    wires = await wire_service.list_wires(db)
    return WireListResponse(
        total=len(wires),
        items=[WireResponse.model_validate(w) for w in wires],
    )


@router.post("", response_model=WireResponse, status_code=status.HTTP_201_CREATED)
async def create_wire(wire: WireCreate, db: AsyncSession = Depends(get_db)) -> WireResponse:
    return WireResponse.model_validate(await wire_service.create_wire(db, wire))


@router.get("/price-chart", response_model=dict[str, dict[str, Optional[float]]])
async def get_price_chart(db: AsyncSession = Depends(get_db)) -> dict:
    """
    Catalogue view: wire -> {payal type -> legacy price}.

    Legacy prices are informational; payable amounts use vendor rates.
    """
    return await wire_service.get_price_chart(db)


@router.delete("/{wire_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_wire(wire_id: UUID, db: AsyncSession = Depends(get_db)) -> None:
    """Delete a wire. Refused with 400 while transactions reference it."""
    await wire_service.delete_wire(db, wire_id)


@router.post(
    "/{wire_id}/payal-types",
    response_model=WireResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_payal_type(
    wire_id: UUID,
    payal_type: PayalTypeCreate,
    db: AsyncSession = Depends(get_db),
) -> WireResponse:
    return WireResponse.model_validate(await wire_service.add_payal_type(db, wire_id, payal_type))


@router.put("/{wire_id}/payal-types/{name}", response_model=WireResponse)
async def update_payal_type(
    wire_id: UUID,
    name: str,
    payal_type: PayalTypeUpdate,
    db: AsyncSession = Depends(get_db),
) -> WireResponse:
    wire = await wire_service.update_payal_type(db, wire_id, name, payal_type)
    return WireResponse.model_validate(wire)


@router.delete("/{wire_id}/payal-types/{name}", response_model=WireResponse)
async def delete_payal_type(
    wire_id: UUID,
    name: str,
    db: AsyncSession = Depends(get_db),
) -> WireResponse:
    return WireResponse.model_validate(await wire_service.delete_payal_type(db, wire_id, name))
