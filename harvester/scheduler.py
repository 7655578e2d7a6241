import logging
from datetime import datetime
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from core.config import Settings
from core.database import create_engine, create_session_maker
from core.exceptions import HarvestException
from harvester.pipeline import build_fetcher, build_runner

logger = logging.getLogger(__name__)


class HarvestScheduler:
    """Re-run the harvest loop on an interval to follow new blocks"""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.scheduler = AsyncIOScheduler()
        self.engine = create_engine(settings.DATABASE_URL)
        self.SessionLocal = create_session_maker(self.engine)

    async def run_harvest_job(self):
        """Job to harvest from the checkpoint up to the current block height"""
        logger.info("Scheduler: Starting harvest job")
        async with self.SessionLocal() as session:
            async with build_fetcher(self.settings) as fetcher:
                try:
                    runner = build_runner(self.settings, session, fetcher)
                    summary = await runner.run()
                    logger.info(
                        f"Scheduler: harvested {len(summary.blocks)} blocks "
                        f"(last: {summary.last_block})"
                    )
                except HarvestException as e:
                    # Next tick resumes from the checkpoint
                    logger.error(f"Scheduler: harvest job failed - {e}")

    def start(self):
        """Start the scheduler"""
        self.scheduler.add_job(
            self.run_harvest_job,
            trigger=IntervalTrigger(seconds=self.settings.HARVEST_INTERVAL_SECONDS),
            id="harvest_job",
            replace_existing=True,
            next_run_time=datetime.now(),
            max_instances=1,
            coalesce=True
        )
        self.scheduler.start()
        logger.info(f"Harvest scheduler started (every {self.settings.HARVEST_INTERVAL_SECONDS}s)")

    async def stop(self):
        self.scheduler.shutdown()
        await self.engine.dispose()
        logger.info("Harvest scheduler stopped")
