"""
Health check endpoint with database and ingestion run status
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import and_, func, select, text
from api.dependencies import get_db
from schemas.api import HealthCheckResponse, IngestionRunInfo
from models.base import RunStatus
from models.ingestion_run import IngestionRun
from datetime import datetime
import logging

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Health"])


async def latest_runs(db: AsyncSession) -> list:
    """Latest ingestion run per dataset, ordered by dataset name"""
    newest = (
        select(IngestionRun.dataset, func.max(IngestionRun.started_at).label("started_at"))
        .group_by(IngestionRun.dataset)
        .subquery()
    )
    result = await db.execute(
        select(IngestionRun)
        .join(newest, and_(
            IngestionRun.dataset == newest.c.dataset,
            IngestionRun.started_at == newest.c.started_at
        ))
        .order_by(IngestionRun.id.desc())
    )

    # Runs sharing a start time: keep the last inserted
    latest = {}
    for run in result.scalars():
        latest.setdefault(run.dataset, run)
    return [latest[dataset] for dataset in sorted(latest, key=lambda d: d.value)]


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(request: Request, db: AsyncSession = Depends(get_db)):
    """
    Health check endpoint.

    Returns:
    - Database connectivity status
    - Latest ingestion run for every dataset that has run at least once
    """
    request_id = getattr(request.state, "request_id", "-")

    db_connected = False

    try:
        await db.execute(text("SELECT 1"))
        db_connected = True
    except SQLAlchemyError as e:
        logger.error(f"[{request_id}] Database connection failed: {str(e)}")

    ingestion_runs = []
    failed_datasets = 0

    if db_connected:
        try:
            for run in await latest_runs(db):
                if run.status == RunStatus.FAILED:
                    failed_datasets += 1

                ingestion_runs.append(IngestionRunInfo(
                    dataset=run.dataset,
                    status=run.status,
                    started_at=run.started_at,
                    completed_at=run.completed_at,
                    records_fetched=run.records_fetched or 0,
                    records_rejected=run.records_rejected or 0,
                    records_loaded=run.records_loaded or 0,
                    rejection_counts=run.rejection_counts or {},
                    decode_error=run.decode_error,
                    error_message=run.error_message
                ))
        except SQLAlchemyError as e:
            # ingestion_runs does not exist before the first cycle
            logger.warning(f"[{request_id}] Failed to read ingestion runs: {str(e)}")
            await db.rollback()

    return HealthCheckResponse(
        timestamp=datetime.utcnow(),
        database_connected=db_connected,
        ingestion_runs=ingestion_runs,
        total_datasets=len(ingestion_runs),
        failed_datasets=failed_datasets
    )
