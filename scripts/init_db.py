import asyncio
import logging
import sys

from core.config import get_settings
from core.database import create_engine
from core.exceptions import ConfigurationError
from core.logging import setup_logging
from models.base import Base
# Import all models to ensure they are registered
from models.inscription import Inscription
from models.harvest_run import HarvestRun

logger = logging.getLogger(__name__)


async def init_database(database_url: str):
    logger.info("Connecting to database...")
    engine = create_engine(database_url)

    async with engine.begin() as conn:
        logger.info("Creating tables and indexes...")
        # Unique inscription id, block / rarity / content type / metaprotocol indexes, GIN on metadata
        await conn.run_sync(Base.metadata.create_all)
        logger.info(f"Tables ready: {', '.join(sorted(Base.metadata.tables))}")

    await engine.dispose()


def main() -> int:
    try:
        settings = get_settings()
    except ConfigurationError as e:
        setup_logging()
        logger.error(f"Startup failed: {e}")
        return 1
    setup_logging(settings.LOG_LEVEL)
    asyncio.run(init_database(settings.DATABASE_URL))
    return 0


if __name__ == "__main__":
    sys.exit(main())
