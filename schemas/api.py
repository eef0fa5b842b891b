"""
Pydantic schemas for API request/response models
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional, List, Dict
from datetime import datetime
from models.base import Dataset, RunStatus


# ============================================================================
# Health Check Schemas
# ============================================================================

class IngestionRunInfo(BaseModel):
    """Latest ingestion run of one dataset"""
    dataset: Dataset
    status: RunStatus
    started_at: datetime
    completed_at: Optional[datetime] = None
    records_fetched: int = 0
    records_rejected: int = 0
    records_loaded: int = 0
    rejection_counts: Dict[str, int] = Field(default_factory=dict)
    decode_error: Optional[str] = None
    error_message: Optional[str] = None

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)


class HealthCheckResponse(BaseModel):
    """Health check response model"""
    status: str = Field("healthy", description="Overall system status: healthy, degraded, unhealthy")
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    database_connected: bool
    ingestion_runs: List[IngestionRunInfo] = Field(default_factory=list)
    total_datasets: int = 0
    failed_datasets: int = 0

    @model_validator(mode="after")
    def determine_status(self):
        """Determine overall health status"""
        if not self.database_connected:
            self.status = "unhealthy"
        elif self.total_datasets == 0 or self.failed_datasets == 0:
            self.status = "healthy"
        elif self.failed_datasets < self.total_datasets:
            self.status = "degraded"
        else:
            self.status = "unhealthy"
        return self

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "degraded",
                "timestamp": "2024-01-15T10:30:00Z",
                "database_connected": True,
                "total_datasets": 2,
                "failed_datasets": 1,
                "ingestion_runs": [
                    {
                        "dataset": "trips",
                        "status": "success",
                        "started_at": "2024-01-15T10:00:00Z",
                        "records_fetched": 1000,
                        "records_rejected": 212,
                        "records_loaded": 788,
                        "rejection_counts": {"malformed_timestamp": 12, "geocode_failed": 200}
                    },
                    {
                        "dataset": "permits",
                        "status": "failed",
                        "started_at": "2024-01-15T10:00:00Z",
                        "error_message": "TransportError: Feed returned HTTP 503"
                    }
                ]
            }
        }
    )


# ============================================================================
# Error Response Schema
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response"""
    error: str
    detail: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "Query failed",
                "detail": "trips_vs_covid: relation \"covid\" does not exist",
                "timestamp": "2024-01-15T10:30:00Z"
            }
        }
    )
