"""
Script to run one ingestion cycle for all enabled datasets and wait for it
"""

import asyncio
import sys
import logging

from core.database import build_engine, build_session_maker, init_audit_table
from core.logging import setup_logging
from ingestion.scheduler import IngestionScheduler

setup_logging()
logger = logging.getLogger(__name__)


async def run_etl() -> int:
    """Run every enabled dataset once; returns the number of failed datasets"""
    engine = build_engine()
    failed = 0

    try:
        await init_audit_table(engine)
        scheduler = IngestionScheduler(session_maker=build_session_maker(engine))
        tasks = scheduler.launch_cycle()

        for dataset, task in tasks.items():
            try:
                result = await task
                logger.info(
                    f"Ingestion completed for {dataset.value}: "
                    f"Fetched={result['records_fetched']}, "
                    f"Rejected={result['records_rejected']}, "
                    f"Loaded={result['records_loaded']}"
                )
            except Exception as e:
                failed += 1
                logger.error(f"Ingestion failed for {dataset.value}: {str(e)}")

        logger.info("All ingestion jobs completed")
    finally:
        await engine.dispose()

    return failed


if __name__ == "__main__":
    sys.exit(1 if asyncio.run(run_etl()) else 0)
