"""
Pydantic schemas for cleaned and enriched records.

Field names match the target table columns so a record can be inserted with
model_dump() directly.
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class CleanedTrip(BaseModel):
    trip_id: str = Field(..., min_length=1)
    trip_start_timestamp: datetime
    trip_end_timestamp: datetime
    pickup_centroid_latitude: float
    pickup_centroid_longitude: float
    dropoff_centroid_latitude: float
    dropoff_centroid_longitude: float


class EnrichedTrip(CleanedTrip):
    pickup_zip_code: str = Field(..., min_length=1)
    dropoff_zip_code: str = Field(..., min_length=1)


class CleanedUnemployment(BaseModel):
    community_area: int
    below_poverty_level: float
    per_capita_income: int
    unemployment: float


class CleanedPermit(BaseModel):
    id: str = Field(..., min_length=1)
    permit_type: str = Field(..., min_length=1)
    community_area: int
    latitude: float
    longitude: float


class EnrichedPermit(CleanedPermit):
    zip_code: str = Field(..., min_length=1)


class CleanedCovid(BaseModel):
    row_id: str = Field(..., min_length=1)
    zip_code: str = Field(..., min_length=1)
    week_number: int
    week_start: datetime
    week_end: datetime
    cases_weekly: int
    tests_weekly: int
    percent_tested_positive_weekly: float


class CleanedCCVI(BaseModel):
    geography_type: str = Field(..., min_length=1)
    community_area_or_zip: int
    community_area_name: Optional[str] = None
    ccvi_score: float
    ccvi_category: str = Field(..., min_length=1)


class CleanedBoundary(BaseModel):
    # Canonical text form of an integer community area, e.g. "8"
    community_area: str = Field(..., min_length=1)
    zip_code: str = Field(..., min_length=1)
