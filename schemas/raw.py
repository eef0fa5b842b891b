"""
Pydantic schemas for raw feed records.

The feeds are loosely typed: every field arrives as a string even when it is
semantically numeric. Missing and null fields decode to "" so that the
cleaner sees a single "empty" representation.
"""

from pydantic import BaseModel, ConfigDict, field_validator


class RawRecord(BaseModel):
    """Base for all raw feed records"""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    @field_validator("*", mode="before")
    @classmethod
    def null_to_empty(cls, v):
        return "" if v is None else v


class RawTrip(RawRecord):
    trip_id: str = ""
    trip_start_timestamp: str = ""
    trip_end_timestamp: str = ""
    pickup_centroid_latitude: str = ""
    pickup_centroid_longitude: str = ""
    dropoff_centroid_latitude: str = ""
    dropoff_centroid_longitude: str = ""


class RawUnemployment(RawRecord):
    community_area: str = ""
    below_poverty_level: str = ""
    per_capita_income: str = ""
    unemployment: str = ""


class RawPermit(RawRecord):
    id: str = ""
    permit_type: str = ""
    community_area: str = ""
    latitude: str = ""
    longitude: str = ""


class RawCovid(RawRecord):
    row_id: str = ""
    zip_code: str = ""
    week_number: str = ""
    week_start: str = ""
    week_end: str = ""
    cases_weekly: str = ""
    tests_weekly: str = ""
    percent_tested_positive_weekly: str = ""


class RawCCVI(RawRecord):
    geography_type: str = ""
    community_area_or_zip: str = ""
    community_area_name: str = ""
    ccvi_score: str = ""
    ccvi_category: str = ""


class RawBoundary(RawRecord):
    community_area: str = ""
    zip_code: str = ""
