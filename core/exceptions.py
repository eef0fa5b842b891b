"""
Custom exceptions for the ingestion pipeline and analytics layer with
structured error context.

Exception Hierarchy:
    ETLException (base)
    ├── ExtractionError
    │   └── TransportError        feed unreachable / non-success status (fatal to a run)
    ├── TransformationError
    │   ├── DecodeError           payload is not a JSON array of records (absorbed)
    │   ├── ValidationDiscard     record failed a field check (per-record skip)
    │   └── EnrichmentError       geocoding failed / no candidates (per-record skip)
    ├── LoadError
    │   ├── SchemaError           drop/create of a dataset table failed (fatal)
    │   └── PersistenceError      a row insert failed (fatal, table partially loaded)
    └── QueryError                analytical statement failed (HTTP 500)
"""

from typing import Optional, Dict, Any
from datetime import datetime


class ETLException(Exception):
    """
    Base exception for all pipeline errors.

    Attributes:
        message: Human-readable error message
        context: Additional context information (dataset, url, table, ...)
        original_exception: The original exception that was caught (if any)
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception
        self.timestamp = datetime.utcnow()

        self.context["error_timestamp"] = self.timestamp.isoformat()

        super().__init__(message)
        if original_exception:
            self.__cause__ = original_exception

    def __str__(self) -> str:
        """Format error message with context."""
        base_msg = f"{self.__class__.__name__}: {self.message}"

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" | Context: {context_str}"

        if self.original_exception:
            base_msg += f" | Caused by: {type(self.original_exception).__name__}: {str(self.original_exception)}"

        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/storage."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "original_error": str(self.original_exception) if self.original_exception else None
        }


# ============================================================================
# Extraction Errors
# ============================================================================

class ExtractionError(ETLException):
    """Base exception for data extraction failures."""
    pass


class TransportError(ExtractionError):
    """
    Raised when a feed cannot be fetched.

    Context should include:
        - feed_url: The feed endpoint that failed
        - status_code: HTTP status code (if a response was received)
        - response_body: Response body (truncated)
    """
    pass


# ============================================================================
# Transformation Errors
# ============================================================================

class TransformationError(ETLException):
    """Base exception for data transformation failures."""
    pass


class DecodeError(TransformationError):
    """
    Raised when a payload is not a JSON array of flat records.

    Never propagated out of a run: the runner logs it and continues with
    zero records.
    """
    pass


class ValidationDiscard(TransformationError):
    """
    Raised by a field check when a record must be discarded.

    Attributes:
        reason: RejectionReason value
        field_name: Field that failed the check
    """

    def __init__(self, reason, field_name: str, value: Any = None):
        super().__init__(
            f"{field_name} failed check: {reason.value}",
            context={"field_name": field_name, "field_value": value}
        )
        self.reason = reason
        self.field_name = field_name


class EnrichmentError(TransformationError):
    """
    Raised when a coordinate pair cannot be resolved to a postal code.

    Context should include:
        - latitude / longitude
        - provider_status: status reported by the geocoding provider (if any)
    """
    pass


# ============================================================================
# Load Errors
# ============================================================================

class LoadError(ETLException):
    """Base exception for data loading failures."""
    pass


class SchemaError(LoadError):
    """
    Raised when a dataset table cannot be dropped or recreated.

    Context should include:
        - table_name: Name of the table
        - operation: DROP or CREATE
    """
    pass


class PersistenceError(LoadError):
    """
    Raised when a single row insert fails.

    Rows committed before the failure remain in the table.

    Context should include:
        - table_name: Name of the table
        - row_index: Position of the failing record in the load batch
        - rows_committed: Rows committed before the failure
    """
    pass


# ============================================================================
# Query Errors
# ============================================================================

class QueryError(ETLException):
    """
    Raised when an analytical query fails.

    Context should include:
        - query: Name of the analytical query
    """
    pass
