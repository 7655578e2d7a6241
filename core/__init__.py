"""
Core utilities and configuration for the inscription harvester.

Modules:
    config: Settings loaded from the environment / .env (pydantic-settings)
    database: Async engine and session factory
    exceptions: Exception hierarchy with structured context
    logging: Logging configuration

Usage:
    from core.config import get_settings
    from core.database import create_engine, create_session_maker
    from core.exceptions import NetworkError, AggregationError
    from core.logging import setup_logging
"""

__all__ = [
    "get_settings",
    "create_engine",
    "create_session_maker",
    "setup_logging",
    # Exceptions
    "HarvestException",
    "ExtractionError",
    "APIExtractionError",
    "NetworkError",
    "RateLimitError",
    "MalformedResponseError",
    "ResourceNotFoundError",
    "EnumerationError",
    "AggregationError",
    "LoadError",
    "DatabaseError",
    "CheckpointError",
    "ConfigurationError",
    "RetryableError",
    "NonRetryableError",
]
