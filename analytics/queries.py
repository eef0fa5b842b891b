"""
Analytical queries across the persisted dataset tables.

Each query is a constant statement recomputed on every call. Community areas
are integers everywhere except boundaries.community_area (text); joins that
cross that boundary go through Boundary.community_area_id.
"""

from typing import Any, Dict, List
from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from core.exceptions import QueryError
from models.boundary import Boundary
from models.ccvi import CCVI
from models.covid import Covid
from models.permit import Permit
from models.transportation import Transportation
from models.unemployment import Unemployment
import logging

logger = logging.getLogger(__name__)

# O'Hare and Midway
AIRPORT_PICKUP_ZIP_CODES = ("60666", "60638")
COMMUNITY_AREA_GEOGRAPHY = "CA"
HIGHEST_CCVI_CATEGORY = "HIGH"
NEW_CONSTRUCTION_PERMIT_TYPE = "PERMIT - NEW CONSTRUCTION"
LOW_INCOME_THRESHOLD = 30000
REPORT_LIMIT = 5


async def _fetch_rows(db: AsyncSession, query_name: str, stmt) -> List[Dict[str, Any]]:
    try:
        result = await db.execute(stmt)
        rows = [dict(row._mapping) for row in result]
    except SQLAlchemyError as e:
        await db.rollback()
        raise QueryError(
            f"Query {query_name} failed",
            context={"query": query_name},
            original_exception=e
        )

    logger.info(f"Query {query_name} returned {len(rows)} rows")
    return rows


async def trips_vs_covid(db: AsyncSession) -> List[Dict[str, Any]]:
    """
    Trips leaving the airports per destination zip, next to that zip's
    positive-case estimate (sum over all weeks of tests x positivity).
    """
    trips = (
        select(
            Transportation.dropoff_zip_code,
            func.count(Transportation.id).label("number_of_trips"),
        )
        .where(Transportation.pickup_zip_code.in_(AIRPORT_PICKUP_ZIP_CODES))
        .group_by(Transportation.dropoff_zip_code)
        .subquery()
    )
    positive_cases = (
        select(
            Covid.zip_code,
            func.sum(
                Covid.tests_weekly * Covid.percent_tested_positive_weekly
            ).label("total_pos_cases"),
        )
        .group_by(Covid.zip_code)
        .subquery()
    )
    stmt = (
        select(
            trips.c.dropoff_zip_code,
            trips.c.number_of_trips,
            positive_cases.c.total_pos_cases,
        )
        .select_from(trips)
        .join(positive_cases, positive_cases.c.zip_code == trips.c.dropoff_zip_code)
        .order_by(trips.c.number_of_trips.desc(), trips.c.dropoff_zip_code)
    )
    return await _fetch_rows(db, "trips_vs_covid", stmt)


async def high_ccvi_trip_flow(db: AsyncSession) -> List[Dict[str, Any]]:
    """Outbound and inbound trip counts for HIGH vulnerability community areas"""
    high_areas = (
        select(CCVI.community_area_or_zip.label("community_area"))
        .where(
            CCVI.geography_type == COMMUNITY_AREA_GEOGRAPHY,
            CCVI.ccvi_category == HIGHEST_CCVI_CATEGORY,
        )
        .distinct()
        .subquery()
    )
    area_zips = (
        select(high_areas.c.community_area, Boundary.zip_code)
        .select_from(high_areas)
        .join(Boundary, Boundary.community_area_id == high_areas.c.community_area)
        .distinct()
        .subquery()
    )
    outbound = (
        select(
            area_zips.c.community_area,
            func.count(Transportation.id).label("outbound_trips"),
        )
        .select_from(area_zips)
        .join(Transportation, Transportation.pickup_zip_code == area_zips.c.zip_code)
        .group_by(area_zips.c.community_area)
        .subquery()
    )
    inbound = (
        select(
            area_zips.c.community_area,
            func.count(Transportation.id).label("inbound_trips"),
        )
        .select_from(area_zips)
        .join(Transportation, Transportation.dropoff_zip_code == area_zips.c.zip_code)
        .group_by(area_zips.c.community_area)
        .subquery()
    )
    stmt = (
        select(
            outbound.c.community_area,
            outbound.c.outbound_trips,
            inbound.c.inbound_trips,
        )
        .select_from(outbound)
        .join(inbound, inbound.c.community_area == outbound.c.community_area)
        .order_by(outbound.c.community_area)
    )
    return await _fetch_rows(db, "high_ccvi_trip_flow", stmt)


async def unemployment_by_permit(db: AsyncSession) -> List[Dict[str, Any]]:
    """Top community areas by unemployment, with their permit counts"""
    stmt = (
        select(
            Unemployment.community_area,
            Unemployment.unemployment,
            Unemployment.below_poverty_level,
            func.count(Permit.id).label("number_of_permits"),
        )
        .select_from(Unemployment)
        .join(Permit, Permit.community_area == Unemployment.community_area)
        .group_by(
            Unemployment.id,
            Unemployment.community_area,
            Unemployment.unemployment,
            Unemployment.below_poverty_level,
        )
        .order_by(
            Unemployment.unemployment.desc(),
            Unemployment.below_poverty_level.desc(),
            Unemployment.community_area,
        )
        .limit(REPORT_LIMIT)
    )
    return await _fetch_rows(db, "unemployment_by_permit", stmt)


async def low_income_new_construction(db: AsyncSession) -> List[Dict[str, Any]]:
    """Low-income community areas with the fewest new-construction permits"""
    number_of_permits = func.count(Permit.id).label("number_of_permits")
    stmt = (
        select(
            Unemployment.community_area,
            Unemployment.per_capita_income,
            number_of_permits,
        )
        .select_from(Permit)
        .join(Unemployment, Unemployment.community_area == Permit.community_area)
        .where(
            Permit.permit_type == NEW_CONSTRUCTION_PERMIT_TYPE,
            Unemployment.per_capita_income < LOW_INCOME_THRESHOLD,
        )
        .group_by(Unemployment.community_area, Unemployment.per_capita_income)
        .order_by(number_of_permits, Unemployment.community_area)
        .limit(REPORT_LIMIT)
    )
    return await _fetch_rows(db, "low_income_new_construction", stmt)
