"""
Pydantic schemas for analytical report rows
"""

from pydantic import BaseModel, ConfigDict
from typing import Optional


class TripsVsCovidRow(BaseModel):
    """Airport-originated trips per destination zip against positive-case estimate"""
    dropoff_zip_code: str
    number_of_trips: int
    total_pos_cases: Optional[float]

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "dropoff_zip_code": "60602",
                "number_of_trips": 14,
                "total_pos_cases": 212.4
            }
        }
    )


class HighCCVITripFlowRow(BaseModel):
    """Trip flow in and out of a HIGH vulnerability community area"""
    community_area: int
    outbound_trips: int
    inbound_trips: int


class UnemploymentByPermitRow(BaseModel):
    """Community area unemployment ranked against its building permit count"""
    community_area: int
    unemployment: float
    below_poverty_level: float
    number_of_permits: int


class LowIncomeConstructionRow(BaseModel):
    """New-construction permit count in a low per-capita-income community area"""
    community_area: int
    per_capita_income: int
    number_of_permits: int
