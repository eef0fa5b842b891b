from sqlalchemy import Column, Integer, String, Enum, DateTime, Float, Text, Index, JSON, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from datetime import datetime
import uuid
from models.base import Base, Dataset, RunStatus


class IngestionRun(Base):
    """
    One row per dataset ingestion run.

    Purpose:
    - Audit trail of every run, including runs that died on a fatal error
    - Distinguishes a decode failure from a feed that legitimately produced
      zero surviving records (status DECODE_FAILED vs SUCCESS)
    - Per-reason rejection counts for discarded records
    """
    __tablename__ = "ingestion_runs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    run_id = Column(Uuid, default=uuid.uuid4, unique=True, nullable=False, index=True)

    dataset = Column(Enum(Dataset), nullable=False, index=True)
    status = Column(Enum(RunStatus), default=RunStatus.RUNNING, nullable=False, index=True)

    # Timestamps
    started_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    completed_at = Column(DateTime, nullable=True)
    duration_seconds = Column(Float, nullable=True)

    # Statistics
    records_fetched = Column(Integer, default=0)
    records_rejected = Column(Integer, default=0)
    records_loaded = Column(Integer, default=0)
    rejection_counts = Column(JSON().with_variant(JSONB, "postgresql"), nullable=True)

    # Error tracking
    decode_error = Column(Text, nullable=True)
    error_message = Column(Text, nullable=True)

    __table_args__ = (
        Index("idx_ingestion_run_dataset_started", "dataset", "started_at"),
    )
