"""
Unit tests for table reset and row loading
"""

import pytest
from datetime import datetime
from unittest.mock import AsyncMock
from sqlalchemy import select, func
from sqlalchemy.exc import OperationalError
from core.exceptions import SchemaError, PersistenceError
from ingestion.loaders.table_loader import TableLoader
from models.covid import Covid
from models.boundary import Boundary
from schemas.cleaned import CleanedCovid, CleanedBoundary


def _covid(row_id, zip_code="60602"):
    return CleanedCovid(
        row_id=row_id,
        zip_code=zip_code,
        week_number=10,
        week_start=datetime(2021, 3, 7),
        week_end=datetime(2021, 3, 13),
        cases_weekly=3,
        tests_weekly=120,
        percent_tested_positive_weekly=0.025,
    )


async def _count(db_session, model):
    result = await db_session.execute(select(func.count()).select_from(model))
    return result.scalar_one()


@pytest.mark.asyncio
async def test_load_inserts_each_record(db_session):
    loader = TableLoader(db_session)

    await loader.reset_table(Covid)
    loaded = await loader.load(Covid, [_covid("60602-2021-10"), _covid("60602-2021-11")])

    assert loaded == 2
    assert await _count(db_session, Covid) == 2


@pytest.mark.asyncio
async def test_reset_table_discards_previous_rows(db_session):
    loader = TableLoader(db_session)
    await loader.load(Covid, [_covid("60602-2021-10")])

    await loader.reset_table(Covid)

    assert await _count(db_session, Covid) == 0


@pytest.mark.asyncio
async def test_failed_insert_keeps_committed_rows(db_session):
    """Rows before the failing insert stay committed"""
    loader = TableLoader(db_session)
    await loader.reset_table(Covid)

    records = [_covid("60602-2021-10"), _covid("60602-2021-11"), _covid("60602-2021-10"), _covid("60602-2021-12")]

    with pytest.raises(PersistenceError) as exc_info:
        await loader.load(Covid, records)

    assert exc_info.value.context["row_index"] == 2
    assert exc_info.value.context["rows_committed"] == 2
    assert exc_info.value.context["table_name"] == "covid"
    assert await _count(db_session, Covid) == 2


@pytest.mark.asyncio
async def test_boundary_cast_column(db_session):
    loader = TableLoader(db_session)
    await loader.load(Boundary, [CleanedBoundary(community_area="8", zip_code="60609")])

    result = await db_session.execute(select(Boundary.community_area_id))

    assert result.scalar_one() == 8


@pytest.mark.asyncio
async def test_reset_failure_raises_schema_error():
    db = AsyncMock()
    db.connection = AsyncMock(side_effect=OperationalError("DROP TABLE covid", {}, Exception("disk I/O error")))

    with pytest.raises(SchemaError) as exc_info:
        await TableLoader(db).reset_table(Covid)

    assert exc_info.value.context["table_name"] == "covid"
    assert exc_info.value.context["operation"] == "DROP"
    db.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_load_empty_batch(db_session):
    assert await TableLoader(db_session).load(Covid, []) == 0
