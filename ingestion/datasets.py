"""
Registry of the six fixed dataset shapes.
"""

from dataclasses import dataclass
from typing import Dict, Tuple, Type
from pydantic import BaseModel
from core.config import Settings, settings
from models.base import Base, Dataset
from models.transportation import Transportation
from models.unemployment import Unemployment
from models.permit import Permit
from models.covid import Covid
from models.ccvi import CCVI
from models.boundary import Boundary
from schemas.raw import RawTrip, RawUnemployment, RawPermit, RawCovid, RawCCVI, RawBoundary


@dataclass(frozen=True)
class DatasetDefinition:
    """Everything a run needs to know about one dataset"""
    dataset: Dataset
    feed_urls: Tuple[str, ...]
    limit: int
    raw_model: Type[BaseModel]
    table_model: Type[Base]
    requires_enrichment: bool = False

    @property
    def table_name(self) -> str:
        return self.table_model.__tablename__


def build_dataset_definitions(config: Settings = settings) -> Dict[Dataset, DatasetDefinition]:
    return {
        Dataset.TRIPS: DatasetDefinition(
            dataset=Dataset.TRIPS,
            # Taxi trips followed by transportation-network-provider trips
            feed_urls=(config.TAXI_TRIPS_FEED_URL, config.TNP_TRIPS_FEED_URL),
            limit=config.TRIPS_FEED_LIMIT,
            raw_model=RawTrip,
            table_model=Transportation,
            requires_enrichment=True,
        ),
        Dataset.UNEMPLOYMENT: DatasetDefinition(
            dataset=Dataset.UNEMPLOYMENT,
            feed_urls=(config.UNEMPLOYMENT_FEED_URL,),
            limit=config.UNEMPLOYMENT_FEED_LIMIT,
            raw_model=RawUnemployment,
            table_model=Unemployment,
        ),
        Dataset.PERMITS: DatasetDefinition(
            dataset=Dataset.PERMITS,
            feed_urls=(config.PERMITS_FEED_URL,),
            limit=config.PERMITS_FEED_LIMIT,
            raw_model=RawPermit,
            table_model=Permit,
            requires_enrichment=True,
        ),
        Dataset.COVID: DatasetDefinition(
            dataset=Dataset.COVID,
            feed_urls=(config.COVID_FEED_URL,),
            limit=config.COVID_FEED_LIMIT,
            raw_model=RawCovid,
            table_model=Covid,
        ),
        Dataset.CCVI: DatasetDefinition(
            dataset=Dataset.CCVI,
            feed_urls=(config.CCVI_FEED_URL,),
            limit=config.CCVI_FEED_LIMIT,
            raw_model=RawCCVI,
            table_model=CCVI,
        ),
        Dataset.BOUNDARIES: DatasetDefinition(
            dataset=Dataset.BOUNDARIES,
            feed_urls=(config.BOUNDARIES_FEED_URL,),
            limit=config.BOUNDARIES_FEED_LIMIT,
            raw_model=RawBoundary,
            table_model=Boundary,
        ),
    }
