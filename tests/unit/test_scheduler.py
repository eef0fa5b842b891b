import asyncio
import pytest
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock, patch
from core.exceptions import TransportError
from ingestion.scheduler import IngestionScheduler
from models.base import Dataset


def _result(definition):
    return {
        "dataset": definition.dataset.value,
        "status": "success",
        "records_fetched": 0,
        "records_rejected": 0,
        "records_loaded": 0,
        "rejections": {},
        "decode_error": None,
    }


def test_scheduler_initialization():
    scheduler = IngestionScheduler(session_maker=MagicMock())

    assert scheduler.scheduler is not None
    assert scheduler.datasets == list(Dataset)
    assert scheduler.interval_hours == 24


def test_enabled_datasets_come_from_names():
    scheduler = IngestionScheduler(session_maker=MagicMock(), datasets=["covid", "ccvi"])

    assert scheduler.datasets == [Dataset.COVID, Dataset.CCVI]


@pytest.mark.asyncio
async def test_launch_cycle_returns_one_task_per_dataset():
    with patch("ingestion.scheduler.IngestionRunner") as mock_runner_cls:
        mock_runner_cls.return_value.run = AsyncMock(side_effect=_result)

        scheduler = IngestionScheduler(session_maker=MagicMock())
        tasks = scheduler.launch_cycle()

        assert set(tasks) == set(Dataset)
        assert all(isinstance(task, asyncio.Task) for task in tasks.values())

        for dataset, task in tasks.items():
            result = await task
            assert result["dataset"] == dataset.value


@pytest.mark.asyncio
async def test_failed_dataset_does_not_affect_others():
    async def run(definition):
        if definition.dataset == Dataset.PERMITS:
            raise TransportError("Feed returned HTTP 503", context={"status_code": 503})
        return _result(definition)

    with patch("ingestion.scheduler.IngestionRunner") as mock_runner_cls:
        mock_runner_cls.return_value.run = AsyncMock(side_effect=run)

        scheduler = IngestionScheduler(session_maker=MagicMock(), datasets=["permits", "covid"])
        tasks = scheduler.launch_cycle()

        with pytest.raises(TransportError):
            await tasks[Dataset.PERMITS]
        assert (await tasks[Dataset.COVID])["status"] == "success"


@pytest.mark.asyncio
async def test_each_task_gets_its_own_session():
    session_maker = MagicMock()

    with patch("ingestion.scheduler.IngestionRunner") as mock_runner_cls:
        mock_runner_cls.return_value.run = AsyncMock(side_effect=_result)

        scheduler = IngestionScheduler(session_maker=session_maker, datasets=["covid", "ccvi"])
        for task in scheduler.launch_cycle().values():
            await task

    assert session_maker.call_count == 2


@pytest.mark.asyncio
async def test_run_dataset_against_database(session_maker, dataset_definitions, make_feed_client, covid_record):
    definition = dataset_definitions[Dataset.COVID]
    scheduler = IngestionScheduler(
        session_maker=session_maker,
        feed_client=make_feed_client({definition.feed_urls[0]: [covid_record]}),
        datasets=["covid"],
    )

    tasks = scheduler.launch_cycle()
    result = await tasks[Dataset.COVID]

    assert result["records_loaded"] == 1


def test_start_schedules_interval_job_with_immediate_first_run():
    scheduler = IngestionScheduler(session_maker=MagicMock(), interval_hours=6)
    scheduler.scheduler = MagicMock()

    scheduler.start()

    kwargs = scheduler.scheduler.add_job.call_args.kwargs
    assert kwargs["trigger"].interval == timedelta(hours=6)
    assert kwargs["next_run_time"] is not None
    assert kwargs["id"] == "ingestion_cycle"
    scheduler.scheduler.start.assert_called_once()


@pytest.mark.asyncio
async def test_cycle_job_creates_audit_table_then_launches():
    scheduler = IngestionScheduler(session_maker=MagicMock())
    scheduler.launch_cycle = MagicMock()

    with patch("ingestion.scheduler.init_audit_table", new_callable=AsyncMock) as mock_init:
        await scheduler.run_cycle_job()

    mock_init.assert_awaited_once()
    scheduler.launch_cycle.assert_called_once()
