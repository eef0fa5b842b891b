import logging
import asyncio
from datetime import datetime
from typing import Dict, Iterable, Optional, Set
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy.ext.asyncio import async_sessionmaker
from core.config import settings
from core.database import async_session_maker, engine, init_audit_table
from ingestion.datasets import DatasetDefinition, build_dataset_definitions
from ingestion.enrichment.geocoder import PostalCodeResolver
from ingestion.extractors.feed_client import FeedClient
from ingestion.runner import IngestionRunner
from models.base import Dataset

logger = logging.getLogger(__name__)


class IngestionScheduler:
    """
    Launches one independent ingestion task per dataset on an interval.

    Tasks are not awaited by the cycle that starts them; they share the
    engine's connection pool, each through its own session.
    """

    def __init__(
        self,
        session_maker: async_sessionmaker = async_session_maker,
        feed_client: Optional[FeedClient] = None,
        resolver: Optional[PostalCodeResolver] = None,
        datasets: Optional[Iterable[str]] = None,
        definitions: Optional[Dict[Dataset, DatasetDefinition]] = None,
        interval_hours: Optional[int] = None
    ):
        self.scheduler = AsyncIOScheduler()
        self.session_maker = session_maker
        self.feed_client = feed_client or FeedClient()
        self.resolver = resolver
        self.datasets = [Dataset(name) for name in (datasets or settings.INGESTION_DATASETS)]
        self.definitions = definitions or build_dataset_definitions()
        self.interval_hours = interval_hours or settings.INGESTION_INTERVAL_HOURS
        self._tasks: Set[asyncio.Task] = set()

    async def run_dataset(self, definition: DatasetDefinition) -> dict:
        """Run one dataset with its own session"""
        async with self.session_maker() as session:
            runner = IngestionRunner(session, feed_client=self.feed_client, resolver=self.resolver)
            return await runner.run(definition)

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.warning(f"Scheduler: task {task.get_name()} was cancelled")
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Scheduler: task {task.get_name()} failed - {error}")
        else:
            logger.info(f"Scheduler: task {task.get_name()} finished - {task.result()['status']}")

    def launch_cycle(self) -> Dict[Dataset, asyncio.Task]:
        """
        Start one task per enabled dataset and return without awaiting them.

        Returns:
            Dataset -> task handle
        """
        logger.info(f"Scheduler: launching ingestion cycle for {[d.value for d in self.datasets]}")
        tasks = {}
        for dataset in self.datasets:
            task = asyncio.create_task(
                self.run_dataset(self.definitions[dataset]),
                name=f"ingest-{dataset.value}"
            )
            self._tasks.add(task)
            task.add_done_callback(self._on_task_done)
            tasks[dataset] = task
        return tasks

    async def run_cycle_job(self):
        """Job entry point: ensure the audit table, then launch the cycle"""
        await init_audit_table(self.session_maker.kw.get("bind") or engine)
        self.launch_cycle()

    def start(self):
        """Start the scheduler; the first cycle runs immediately"""
        self.scheduler.add_job(
            self.run_cycle_job,
            trigger=IntervalTrigger(hours=self.interval_hours),
            id="ingestion_cycle",
            next_run_time=datetime.now(),
            replace_existing=True
        )
        self.scheduler.start()
        logger.info(f"Ingestion scheduler started (every {self.interval_hours}h)")

    def stop(self):
        self.scheduler.shutdown(wait=False)
        logger.info("Ingestion scheduler stopped")
