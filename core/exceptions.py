"""
Custom exceptions for the harvest pipeline with structured error context.

Each exception carries context information for debugging and for the
harvest run audit trail.

Exception Hierarchy:
    HarvestException (base)
    ├── ExtractionError
    │   ├── APIExtractionError
    │   │   ├── NetworkError (retryable)
    │   │   ├── RateLimitError (retryable)
    │   │   └── MalformedResponseError (non-retryable)
    │   ├── ResourceNotFoundError (non-retryable)
    │   └── EnumerationError
    ├── AggregationError
    ├── LoadError
    │   └── DatabaseError
    ├── CheckpointError
    ├── ConfigurationError
    └── RetryableError / NonRetryableError (mixins)
"""

from typing import Optional, Dict, Any
from datetime import datetime


class HarvestException(Exception):
    """
    Base exception for all harvest-related errors.

    Attributes:
        message: Human-readable error message
        context: Additional context information (url, block, inscription id, ...)
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
# Retry Strategy Mixins
# ============================================================================

class RetryableError(HarvestException):
    """
    Mixin for errors raised after transient failures exhausted the retry budget.

    Covers network timeouts, connection errors, HTTP 429 and HTTP 5xx.
    """


class NonRetryableError(HarvestException):
    """
    Mixin for errors that must NOT trigger retry logic.

    Covers HTTP 404 and payloads that cannot be parsed; retrying will not
    change the outcome.
    """


# ============================================================================
# Extraction Errors
# ============================================================================

class ExtractionError(HarvestException):
    """Base exception for failures reading from the ord source."""


class APIExtractionError(ExtractionError):
    """
    Exception raised when a request to the ord source fails.

    Context should include:
        - api_url: The endpoint that failed
        - status_code: HTTP status code (if applicable)
        - retry_count: Number of attempts made
    """


class NetworkError(RetryableError, APIExtractionError):
    """Network or server errors that persisted through every retry."""


class RateLimitError(RetryableError, APIExtractionError):
    """Rate limiting (HTTP 429) that persisted through every retry."""

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None,
        retry_after: Optional[float] = None
    ):
        super().__init__(message, context, original_exception)
        self.retry_after = retry_after
        if retry_after:
            self.context["retry_after"] = retry_after


class MalformedResponseError(NonRetryableError, APIExtractionError):
    """Response body could not be parsed into the expected payload."""


class ResourceNotFoundError(NonRetryableError, ExtractionError):
    """Resource not found (HTTP 404)."""


class EnumerationError(ExtractionError):
    """
    Listing a block's inscription ids failed.

    Context should include:
        - block: Block height being enumerated
        - page: Page index that failed
    """


# ============================================================================
# Aggregation Errors
# ============================================================================

class AggregationError(HarvestException):
    """
    A detail fetch failed while aggregating a block under the strict policy.

    Context should include:
        - block: Block height
        - inscription_id: The inscription whose fetch failed
    """


# ============================================================================
# Load Errors
# ============================================================================

class LoadError(HarvestException):
    """Base exception for failures writing to the store."""


class DatabaseError(LoadError):
    """
    Exception raised when a store operation fails.

    Context should include:
        - operation: INSERT, DELETE, SELECT
        - table_name: Name of the table
    """


# ============================================================================
# Checkpoint / Configuration Errors
# ============================================================================

class CheckpointError(HarvestException):
    """Resolving or rolling back the resume checkpoint failed."""


class ConfigurationError(HarvestException):
    """Required configuration is missing or invalid. Fatal at startup."""
