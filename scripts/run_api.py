"""
Serve the read API.

    python scripts/run_api.py
"""

import logging
import sys

import uvicorn

from core.config import get_settings
from core.exceptions import ConfigurationError
from core.logging import setup_logging

logger = logging.getLogger(__name__)


def main() -> int:
    try:
        settings = get_settings()
    except ConfigurationError as e:
        setup_logging()
        logger.error(f"Startup failed: {e}")
        return 1

    setup_logging(settings.LOG_LEVEL)
    logger.info(f"Serving API on {settings.API_HOST}:{settings.API_PORT}")
    uvicorn.run(
        "api.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        log_level=settings.LOG_LEVEL.lower(),
        reload=settings.ENVIRONMENT == "development"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
