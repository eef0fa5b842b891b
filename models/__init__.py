"""
SQLAlchemy ORM models for database tables.

Models:
    base: Base declarative class and shared enums (Dataset, RunStatus, RejectionReason)
    transportation: Taxi and rideshare trips with pickup/dropoff zip codes
    unemployment: Poverty, income and unemployment per community area
    permit: Building permits with community area and zip code
    covid: Weekly COVID-19 tests and positivity per zip code
    ccvi: COVID community vulnerability index per community area / zip
    boundary: Community area to zip code crosswalk
    ingestion_run: Per-run audit trail

Database Schema:
    Dataset tables are dropped and recreated by every ingestion run; the
    ingestion_runs table is created once and never reset. There are no
    foreign keys between dataset tables: zip codes and community areas are
    joined at query time.

Usage:
    from models.transportation import Transportation
    from models.base import Dataset, RunStatus
"""

__all__ = [
    "Base",
    "Dataset",
    "RunStatus",
    "RejectionReason",
    "Transportation",
    "Unemployment",
    "Permit",
    "Covid",
    "CCVI",
    "Boundary",
    "IngestionRun",
]
