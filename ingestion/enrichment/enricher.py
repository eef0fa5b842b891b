"""
Attach postal codes to cleaned records that carry coordinates
"""

from pydantic import BaseModel
from core.exceptions import EnrichmentError
from ingestion.enrichment.geocoder import PostalCodeResolver
from ingestion.transformers.cleaner import RecordOutcome
from models.base import Dataset, RejectionReason
from schemas.cleaned import CleanedTrip, CleanedPermit, EnrichedTrip, EnrichedPermit
import logging

logger = logging.getLogger(__name__)


class RecordEnricher:
    """
    Resolve postal codes for trips (pickup, then dropoff) and permits.

    Records are resolved one coordinate pair at a time; a failed lookup
    rejects the record with GEOCODE_FAILED and the batch continues.
    """

    def __init__(self, resolver: PostalCodeResolver):
        self.resolver = resolver

    async def enrich(self, dataset: Dataset, record: BaseModel) -> RecordOutcome:
        try:
            if dataset == Dataset.TRIPS:
                enriched = await self._enrich_trip(record)
            elif dataset == Dataset.PERMITS:
                enriched = await self._enrich_permit(record)
            else:
                return RecordOutcome.accept(record)
        except EnrichmentError as e:
            logger.debug(f"Geocoding failed for {dataset.value} record: {e}")
            return RecordOutcome.reject(
                RejectionReason.GEOCODE_FAILED, e.context.get("field_name", "")
            )

        return RecordOutcome.accept(enriched)

    async def _lookup(self, latitude: float, longitude: float, field_name: str) -> str:
        try:
            return await self.resolver.resolve(latitude, longitude)
        except EnrichmentError as e:
            e.context["field_name"] = field_name
            raise

    async def _enrich_trip(self, trip: CleanedTrip) -> EnrichedTrip:
        pickup_zip = await self._lookup(
            trip.pickup_centroid_latitude,
            trip.pickup_centroid_longitude,
            "pickup_zip_code"
        )
        dropoff_zip = await self._lookup(
            trip.dropoff_centroid_latitude,
            trip.dropoff_centroid_longitude,
            "dropoff_zip_code"
        )
        return EnrichedTrip(
            **trip.model_dump(),
            pickup_zip_code=pickup_zip,
            dropoff_zip_code=dropoff_zip
        )

    async def _enrich_permit(self, permit: CleanedPermit) -> EnrichedPermit:
        zip_code = await self._lookup(permit.latitude, permit.longitude, "zip_code")
        return EnrichedPermit(**permit.model_dump(), zip_code=zip_code)
