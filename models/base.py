from sqlalchemy.orm import declarative_base
import enum

Base = declarative_base()


# ============================================================================
# ENUMS
# ============================================================================

class Dataset(str, enum.Enum):
    """Fixed set of ingested feeds"""
    TRIPS = "trips"
    UNEMPLOYMENT = "unemployment"
    PERMITS = "permits"
    COVID = "covid"
    CCVI = "ccvi"
    BOUNDARIES = "boundaries"


class RunStatus(str, enum.Enum):
    """Ingestion run status"""
    RUNNING = "running"
    SUCCESS = "success"
    DECODE_FAILED = "decode_failed"
    FAILED = "failed"


class RejectionReason(str, enum.Enum):
    """Why a record was excluded from the persisted table"""
    MISSING_FIELD = "missing_field"
    UNPARSEABLE_NUMBER = "unparseable_number"
    MALFORMED_TIMESTAMP = "malformed_timestamp"
    GEOCODE_FAILED = "geocode_failed"
