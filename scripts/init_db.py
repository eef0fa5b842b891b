import asyncio
import logging

from core.database import build_engine, init_audit_table
from core.logging import setup_logging

setup_logging()
logger = logging.getLogger(__name__)


async def init_database():
    logger.info("Connecting to database...")
    engine = build_engine()

    try:
        logger.info("Creating ingestion_runs table...")
        # Dataset tables are dropped and recreated by every ingestion run
        await init_audit_table(engine)
        logger.info("Tables created successfully.")
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(init_database())
