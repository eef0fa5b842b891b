"""
Analytical report endpoints
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from api.dependencies import get_db
from analytics import queries
from schemas.reports import (
    TripsVsCovidRow,
    HighCCVITripFlowRow,
    UnemploymentByPermitRow,
    LowIncomeConstructionRow,
)
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/trips-vs-covid", response_model=List[TripsVsCovidRow])
async def trips_vs_covid(request: Request, db: AsyncSession = Depends(get_db)):
    """Trips from the airports per destination zip against COVID positive-case estimates"""
    logger.info(f"[{request.state.request_id}] GET /reports/trips-vs-covid")
    return await queries.trips_vs_covid(db)


@router.get("/high-ccvi-trips", response_model=List[HighCCVITripFlowRow])
async def high_ccvi_trips(request: Request, db: AsyncSession = Depends(get_db)):
    """Inbound and outbound trips for HIGH vulnerability community areas"""
    logger.info(f"[{request.state.request_id}] GET /reports/high-ccvi-trips")
    return await queries.high_ccvi_trip_flow(db)


@router.get("/unemployment-by-permit", response_model=List[UnemploymentByPermitRow])
async def unemployment_by_permit(request: Request, db: AsyncSession = Depends(get_db)):
    """Top 5 community areas by unemployment with their building permit counts"""
    logger.info(f"[{request.state.request_id}] GET /reports/unemployment-by-permit")
    return await queries.unemployment_by_permit(db)


@router.get("/low-income-construction", response_model=List[LowIncomeConstructionRow])
async def low_income_construction(request: Request, db: AsyncSession = Depends(get_db)):
    """Bottom 5 low-income community areas by new-construction permits"""
    logger.info(f"[{request.state.request_id}] GET /reports/low-income-construction")
    return await queries.low_income_new_construction(db)
