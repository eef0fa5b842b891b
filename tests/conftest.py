"""
Pytest configuration and fixtures
"""

import json
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool
from typing import AsyncGenerator, Dict, Optional, Tuple, Union
from core.exceptions import EnrichmentError
from ingestion.datasets import build_dataset_definitions
from ingestion.enrichment.geocoder import PostalCodeResolver
from models.base import Base
# Register every table on Base.metadata
from models.transportation import Transportation  # noqa: F401
from models.unemployment import Unemployment  # noqa: F401
from models.permit import Permit  # noqa: F401
from models.covid import Covid  # noqa: F401
from models.ccvi import CCVI  # noqa: F401
from models.boundary import Boundary  # noqa: F401
from models.ingestion_run import IngestionRun  # noqa: F401


@pytest_asyncio.fixture(scope="function")
async def test_engine(tmp_path):
    """File-backed SQLite engine, one database per test"""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path}/test.db",
        echo=False,
        poolclass=NullPool,  # Disable connection pooling for tests
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_maker(test_engine):
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture(scope="function")
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Create database session for tests"""
    async with session_maker() as session:
        yield session
        await session.rollback()


class FakeFeedClient:
    """Serves canned payloads per feed URL; unknown URLs return an empty array"""

    def __init__(self, payloads: Optional[Dict[str, Union[bytes, Exception]]] = None):
        self.payloads = payloads or {}
        self.calls = []

    async def fetch(self, url: str, limit: int) -> bytes:
        self.calls.append((url, limit))
        payload = self.payloads.get(url, b"[]")
        if isinstance(payload, Exception):
            raise payload
        return payload


class StubResolver(PostalCodeResolver):
    """Resolves known coordinates; anything else fails like an empty candidate list"""

    def __init__(self, postal_codes: Optional[Dict[Tuple[float, float], str]] = None, default: Optional[str] = None):
        self.postal_codes = postal_codes or {}
        self.default = default
        self.calls = []

    async def resolve(self, latitude: float, longitude: float) -> str:
        self.calls.append((latitude, longitude))
        postal_code = self.postal_codes.get((latitude, longitude), self.default)
        if postal_code is None:
            raise EnrichmentError(
                "No address candidates for coordinates",
                context={"latitude": latitude, "longitude": longitude}
            )
        return postal_code


def as_payload(records) -> bytes:
    return json.dumps(records).encode("utf-8")


@pytest.fixture
def dataset_definitions():
    return build_dataset_definitions()


@pytest.fixture
def trip_record():
    """One valid trip as delivered by the taxi feed (all strings)"""
    return {
        "trip_id": "a1b2c3",
        "trip_start_timestamp": "2023-05-01T08:15:00.000",
        "trip_end_timestamp": "2023-05-01T08:45:00.000",
        "pickup_centroid_latitude": "41.980264315",
        "pickup_centroid_longitude": "-87.913624596",
        "dropoff_centroid_latitude": "41.884987192",
        "dropoff_centroid_longitude": "-87.620992913",
        "fare": "45.25",
    }


@pytest.fixture
def permit_record():
    return {
        "id": "3051234",
        "permit_type": "PERMIT - NEW CONSTRUCTION",
        "community_area": "25",
        "latitude": "41.8807",
        "longitude": "-87.7553",
        "reported_cost": "250000",
    }


@pytest.fixture
def covid_record():
    return {
        "row_id": "60602-2021-10",
        "zip_code": "60602",
        "week_number": "10",
        "week_start": "2021-03-07T00:00:00.000",
        "week_end": "2021-03-13T00:00:00.000",
        "cases_weekly": "3",
        "tests_weekly": "120",
        "percent_tested_positive_weekly": "0.025",
    }


@pytest.fixture
def unemployment_record():
    return {
        "community_area": "25",
        "community_area_name": "Austin",
        "below_poverty_level": "28.6",
        "per_capita_income": "15957",
        "unemployment": "22.6",
    }


@pytest.fixture
def ccvi_record():
    return {
        "geography_type": "CA",
        "community_area_or_zip": "25",
        "community_area_name": "Austin",
        "ccvi_score": "51.6",
        "ccvi_category": "HIGH",
    }


@pytest.fixture
def make_feed_client():
    """Factory: url -> payload (bytes, list of records, or exception to raise)"""

    def _make(payloads=None):
        prepared = {}
        for url, payload in (payloads or {}).items():
            prepared[url] = as_payload(payload) if isinstance(payload, list) else payload
        return FakeFeedClient(prepared)

    return _make


@pytest.fixture
def make_resolver():
    def _make(postal_codes=None, default="60602"):
        return StubResolver(postal_codes, default)

    return _make
