"""
Script to harvest inscriptions from the checkpoint up to the current block.

    python scripts/run_harvest.py            # harvest once and exit
    python scripts/run_harvest.py --follow   # keep harvesting new blocks
"""

import asyncio
import logging
import sys

from core.config import get_settings
from core.database import create_engine, create_session_maker
from core.exceptions import ConfigurationError, HarvestException
from core.logging import setup_logging
from harvester.pipeline import build_fetcher, build_runner
from harvester.scheduler import HarvestScheduler

logger = logging.getLogger(__name__)


async def run_harvest(settings) -> int:
    """Harvest once. Returns the process exit status."""
    engine = create_engine(settings.DATABASE_URL)
    SessionLocal = create_session_maker(engine)

    try:
        async with SessionLocal() as session:
            async with build_fetcher(settings) as fetcher:
                runner = build_runner(settings, session, fetcher)
                summary = await runner.run()
        logger.info(
            f"Harvested blocks {summary.start_block}..{summary.last_block} "
            f"(source height {summary.frontier})"
        )
        return 0
    except HarvestException as e:
        logger.error(f"Harvest stopped: {e}")
        return 1
    finally:
        await engine.dispose()


async def follow(settings) -> int:
    scheduler = HarvestScheduler(settings)
    scheduler.start()
    try:
        await asyncio.Event().wait()
    finally:
        await scheduler.stop()
    return 0


def main() -> int:
    try:
        settings = get_settings()
    except ConfigurationError as e:
        setup_logging()
        logger.error(f"Startup failed: {e}")
        return 1

    setup_logging(settings.LOG_LEVEL)
    logger.info("Starting inscription harvester")
    logger.info(f"Using host: {settings.ORD_HOST}")

    if "--follow" in sys.argv[1:]:
        try:
            return asyncio.run(follow(settings))
        except KeyboardInterrupt:
            return 0
    return asyncio.run(run_harvest(settings))


if __name__ == "__main__":
    sys.exit(main())
