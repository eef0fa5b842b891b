"""
Core utilities and configuration for the CBI backend.

This package provides foundational components used by the ingestion
pipeline, the analytics layer and the HTTP service:

Modules:
    config: Application configuration and environment variable management
    database: Engine, session factory and session dependency
    exceptions: Custom exception hierarchy for error handling
    logging: Logging configuration and utilities

Usage:
    from core.config import settings
    from core.database import async_session_maker
    from core.exceptions import TransportError, PersistenceError
    from core.logging import setup_logging

Example:
    # Initialize logging
    setup_logging()

    # Get database session
    async with async_session_maker() as session:
        # Perform database operations
        pass
"""

__all__ = [
    "settings",
    "async_session_maker",
    "setup_logging",
    # Exceptions
    "ETLException",
    "ExtractionError",
    "TransportError",
    "TransformationError",
    "DecodeError",
    "ValidationDiscard",
    "EnrichmentError",
    "LoadError",
    "SchemaError",
    "PersistenceError",
    "QueryError",
]
