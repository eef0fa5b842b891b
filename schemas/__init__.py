"""
Pydantic schemas for data validation and serialization.

Schemas:
    raw: Raw feed records (all fields strings, as delivered by the portal)
    cleaned: Cleaned and enriched records, shaped like their target tables
    reports: Analytical report row models
    api: Health and error response models

Usage:
    from schemas.raw import RawTrip
    from schemas.cleaned import EnrichedTrip
    from schemas.reports import TripsVsCovidRow
"""

__all__ = [
    "RawTrip",
    "RawUnemployment",
    "RawPermit",
    "RawCovid",
    "RawCCVI",
    "RawBoundary",
    "CleanedTrip",
    "EnrichedTrip",
    "CleanedUnemployment",
    "CleanedPermit",
    "EnrichedPermit",
    "CleanedCovid",
    "CleanedCCVI",
    "CleanedBoundary",
    "TripsVsCovidRow",
    "HighCCVITripFlowRow",
    "UnemploymentByPermitRow",
    "LowIncomeConstructionRow",
    "HealthCheckResponse",
    "ErrorResponse",
]
