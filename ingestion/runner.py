"""
Ingestion runner - one dataset, one run.

Pipeline phases:
1. Fetch every feed of the dataset (a transport failure aborts the run)
2. Decode payloads (a decode failure is absorbed; the run continues empty)
3. Clean records (failed checks are discarded with a reason)
4. Enrich records with postal codes (trips and permits)
5. Reset the dataset table
6. Load records row by row

The table is only reset after all feeds were fetched, so a run that dies on
transport keeps the previous table contents.
"""

from collections import Counter
from datetime import datetime
from typing import Dict, Any, List, Optional
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from core.exceptions import ETLException, DecodeError
from ingestion.datasets import DatasetDefinition
from ingestion.extractors.feed_client import FeedClient
from ingestion.extractors.decoder import decode_records
from ingestion.transformers.cleaner import RecordCleaner
from ingestion.enrichment.enricher import RecordEnricher
from ingestion.enrichment.geocoder import PostalCodeResolver, GoogleGeocoder
from ingestion.loaders.table_loader import TableLoader
from models.base import RunStatus
from models.ingestion_run import IngestionRun

logger = logging.getLogger(__name__)


class IngestionRunner:
    """
    Orchestrates fetch, decode, clean, enrich and load for a dataset.

    Responsibilities:
    - Record every run in ingestion_runs, including runs that fail
    - Keep record-level problems inside the run (counted, never raised)
    - Let run-level problems propagate after marking the run failed
    """

    def __init__(
        self,
        db_session: AsyncSession,
        feed_client: Optional[FeedClient] = None,
        resolver: Optional[PostalCodeResolver] = None
    ):
        self.db = db_session
        self.feed_client = feed_client or FeedClient()
        self.resolver = resolver

    def _enricher(self) -> RecordEnricher:
        if self.resolver is None:
            self.resolver = GoogleGeocoder()
        return RecordEnricher(self.resolver)

    async def _start_run(self, definition: DatasetDefinition) -> IngestionRun:
        run = IngestionRun(
            dataset=definition.dataset,
            status=RunStatus.RUNNING,
            started_at=datetime.utcnow()
        )
        self.db.add(run)
        await self.db.commit()
        return run

    async def _finish_run(
        self,
        run: IngestionRun,
        status: RunStatus,
        records_fetched: int,
        rejections: Dict[str, int],
        records_loaded: int,
        decode_error: Optional[str] = None,
        error_message: Optional[str] = None
    ) -> None:
        completed_at = datetime.utcnow()
        run.status = status
        run.completed_at = completed_at
        run.duration_seconds = (completed_at - run.started_at).total_seconds()
        run.records_fetched = records_fetched
        run.records_rejected = sum(rejections.values())
        run.records_loaded = records_loaded
        run.rejection_counts = dict(rejections)
        run.decode_error = decode_error
        run.error_message = error_message
        await self.db.commit()

    async def _fetch(self, definition: DatasetDefinition) -> List[bytes]:
        payloads = []
        for url in definition.feed_urls:
            logger.info(f"Fetching {definition.dataset.value} feed {url} (limit {definition.limit})")
            payloads.append(await self.feed_client.fetch(url, definition.limit))
        return payloads

    def _decode(self, definition: DatasetDefinition, payloads: List[bytes]):
        records = []
        decode_error: Optional[DecodeError] = None

        for url, payload in zip(definition.feed_urls, payloads):
            decoded, error = decode_records(payload, definition.raw_model, source=url)
            if error is not None:
                logger.warning(
                    f"Could not decode {definition.dataset.value} feed {url}; continuing with no records from it",
                    extra={"error_context": error.to_dict()}
                )
                decode_error = decode_error or error
            records.extend(decoded)

        return records, decode_error

    async def _clean_and_enrich(self, definition: DatasetDefinition, raw_records: List[BaseModel]):
        cleaner = RecordCleaner(definition.dataset)
        enricher = self._enricher() if definition.requires_enrichment else None
        accepted = []
        rejections: Counter = Counter()

        for raw in raw_records:
            outcome = cleaner.clean(raw)
            if outcome.accepted and enricher is not None:
                outcome = await enricher.enrich(definition.dataset, outcome.record)

            if outcome.accepted:
                accepted.append(outcome.record)
            else:
                rejections[outcome.reason.value] += 1

        return accepted, rejections

    async def run(self, definition: DatasetDefinition) -> Dict[str, Any]:
        """
        Run the full pipeline for one dataset.

        Returns:
            Dictionary with run statistics:
            - dataset: Dataset value
            - status: "success" or "decode_failed"
            - records_fetched: Records decoded from the feeds
            - records_rejected: Records discarded by checks or geocoding
            - records_loaded: Rows committed to the dataset table
            - rejections: Rejection reason -> count
            - decode_error: Decode error message, if a payload was malformed

        Raises:
            TransportError: A feed could not be fetched
            SchemaError: The dataset table could not be reset
            PersistenceError: A row insert failed (earlier rows stay committed)
        """
        run = await self._start_run(definition)
        records_fetched = 0
        records_loaded = 0
        rejections: Counter = Counter()

        logger.info(f"Starting ingestion run {run.run_id} for {definition.dataset.value}")

        try:
            payloads = await self._fetch(definition)
            raw_records, decode_error = self._decode(definition, payloads)
            records_fetched = len(raw_records)

            accepted, rejections = await self._clean_and_enrich(definition, raw_records)
            logger.info(
                f"{definition.dataset.value}: fetched={records_fetched}, "
                f"accepted={len(accepted)}, rejected={sum(rejections.values())}"
            )

            loader = TableLoader(self.db)
            await loader.reset_table(definition.table_model)
            records_loaded = await loader.load(definition.table_model, accepted)

        except ETLException as e:
            logger.error(
                f"Ingestion run for {definition.dataset.value} failed: {e.message}",
                extra={"error_context": e.to_dict()}
            )
            await self._fail_run(run, records_fetched, rejections, e)
            raise

        except Exception as e:
            logger.exception(f"Unexpected error in ingestion run for {definition.dataset.value}")
            await self._fail_run(run, records_fetched, rejections, e)
            raise ETLException(
                "Unexpected error in ingestion run",
                context={
                    "dataset": definition.dataset.value,
                    "records_fetched": records_fetched,
                },
                original_exception=e
            )

        status = RunStatus.DECODE_FAILED if decode_error else RunStatus.SUCCESS
        await self._finish_run(
            run,
            status=status,
            records_fetched=records_fetched,
            rejections=rejections,
            records_loaded=records_loaded,
            decode_error=decode_error.message if decode_error else None
        )

        result = {
            "dataset": definition.dataset.value,
            "status": status.value,
            "records_fetched": records_fetched,
            "records_rejected": sum(rejections.values()),
            "records_loaded": records_loaded,
            "rejections": dict(rejections),
            "decode_error": decode_error.message if decode_error else None,
        }

        logger.info(
            f"Ingestion run completed for {definition.dataset.value}: {result['status']} - "
            f"Fetched: {records_fetched}, Rejected: {result['records_rejected']}, "
            f"Loaded: {records_loaded}"
        )
        return result

    async def _fail_run(
        self,
        run: IngestionRun,
        records_fetched: int,
        rejections: Counter,
        error: Exception
    ) -> None:
        await self.db.rollback()
        # Rollback expires loaded state; reload before updating
        await self.db.refresh(run)
        await self._finish_run(
            run,
            status=RunStatus.FAILED,
            records_fetched=records_fetched,
            rejections=rejections,
            records_loaded=(
                error.context.get("rows_committed", 0)
                if isinstance(error, ETLException) else 0
            ),
            error_message=str(error)
        )
