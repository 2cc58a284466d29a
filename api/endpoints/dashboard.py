"""Dashboard endpoint module.

Provides the stock overview shown on the dashboard.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.database.database import get_db
from api.schemas.dashboard import DashboardSummary
from api.services.dashboard_service import get_dashboard_summary

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardSummary)
async def get_summary(db: AsyncSession = Depends(get_db)) -> DashboardSummary:
    """
    Get overall and per-vendor stock figures.

    Returns:
    - **totalInWeight** / **totalOutWeight**: kg returned / issued
    - **netWeight**: issued minus returned; negative means a deficit
    - **totalInAmount**: labour charged on returns
    - **vendors**: per-vendor totalOut, totalIn and balance, sorted by name
    """
    return await get_dashboard_summary(db)
