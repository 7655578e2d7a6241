"""
Application configuration using Pydantic Settings
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Harvester settings with environment variable support"""

    # Source (ord server) and store, both required
    ORD_HOST: str = Field(..., min_length=1)
    DATABASE_URL: str = Field(..., min_length=1)

    # API
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Harvest configuration
    GENESIS_BLOCK: int = Field(767430, ge=0)
    THROTTLE_WIDTH: int = Field(500, ge=1)
    # Rows x columns per multi-VALUES insert must stay under 32767 bind parameters
    BATCH_SIZE: int = Field(500, ge=1, le=900)
    FETCH_FAILURE_POLICY: Literal["strict", "lenient"] = "strict"
    PAGE_FAILURE_POLICY: Literal["abort", "skip"] = "abort"
    MAX_CONSECUTIVE_PAGE_FAILURES: int = Field(3, ge=1)
    HARVEST_INTERVAL_SECONDS: int = Field(60, ge=1)
    HARVEST_UNTIL_BLOCK: Optional[int] = None

    # HTTP
    MAX_RETRIES: int = Field(10, ge=1)
    RETRY_DELAY: float = Field(0.5, ge=0)
    RETRY_MAX_DELAY: float = Field(30.0, ge=0)
    REQUEST_TIMEOUT: float = Field(30.0, gt=0)
    REQUEST_DEADLINE: float = Field(300.0, gt=0)

    @field_validator("ORD_HOST")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Load settings once per process.

    Raises:
        ConfigurationError: If a required setting is missing or invalid
    """
    try:
        return Settings()
    except ValidationError as e:
        missing = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
        raise ConfigurationError(
            "Invalid or missing configuration",
            context={"fields": missing},
            original_exception=e
        )
