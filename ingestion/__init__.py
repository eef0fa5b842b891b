"""
Ingestion pipeline for the six civic open-data feeds.

Modules:
    datasets: Registry of dataset shapes (feeds, limits, raw model, table)
    runner: Orchestrates one run of one dataset and records it in ingestion_runs
    scheduler: APScheduler job launching one asyncio task per dataset

Subpackages:
    extractors: Feed client and payload decoder
    transformers: Ordered field checks producing tagged record outcomes
    enrichment: Reverse geocoding of coordinates to postal codes
    loaders: Table reset and row-by-row loading

Architecture:
    Each dataset runs fetch -> decode -> clean -> enrich -> reset -> load,
    independently of the others:

    1. Fetch - One GET per feed; a TransportError ends the run
    2. Decode - A malformed payload yields zero records, reported as decode_failed
    3. Clean/Enrich - Failing records are discarded with a rejection reason
    4. Load - The table is recreated, then rows are committed one at a time

Usage:
    from ingestion.datasets import build_dataset_definitions
    from ingestion.runner import IngestionRunner
    from models.base import Dataset

    definition = build_dataset_definitions()[Dataset.COVID]
    async with async_session_maker() as session:
        result = await IngestionRunner(session).run(definition)

    print(f"Loaded {result['records_loaded']} records")
"""

__all__ = [
    "DatasetDefinition",
    "IngestionRunner",
    "IngestionScheduler",
    "FeedClient",
    "RecordCleaner",
    "RecordEnricher",
    "GoogleGeocoder",
    "TableLoader",
]
