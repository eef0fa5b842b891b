"""
Cross-dataset analytical queries.

Queries:
    trips_vs_covid: Airport trips per destination zip vs. positive cases
    high_ccvi_trip_flow: Trip flow for HIGH vulnerability community areas
    unemployment_by_permit: Top 5 areas by unemployment with permit counts
    low_income_new_construction: Bottom 5 low-income areas by new construction

Usage:
    from analytics.queries import trips_vs_covid
    rows = await trips_vs_covid(session)
"""

__all__ = [
    "trips_vs_covid",
    "high_ccvi_trip_flow",
    "unemployment_by_permit",
    "low_income_new_construction",
]
