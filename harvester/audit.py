"""
Per-block harvest run audit trail
"""

from datetime import datetime
from typing import Optional
import logging
import uuid

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import DatabaseError
from harvester.extractors.context import BlockContext
from harvester.loaders.persister import PersistResult
from models.base import HarvestStatus
from models.harvest_run import HarvestRun

logger = logging.getLogger(__name__)


class HarvestRunRecorder:
    """Create and complete HarvestRun rows"""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def start(self, height: int) -> HarvestRun:
        run = HarvestRun(
            run_id=uuid.uuid4(),
            block_height=height,
            status=HarvestStatus.RUNNING,
            started_at=datetime.utcnow()
        )
        self.db.add(run)
        await self._commit("INSERT")
        return run

    async def complete(
        self,
        run: HarvestRun,
        status: HarvestStatus,
        context: BlockContext,
        result: Optional[PersistResult] = None,
        error_message: Optional[str] = None
    ) -> HarvestRun:
        # A store rollback on the shared session expires `run`; reload it
        # before touching attributes so nothing lazy-loads outside the driver
        await self._refresh(run)
        run.status = status
        run.completed_at = datetime.utcnow()
        run.duration_seconds = (run.completed_at - run.started_at).total_seconds()
        run.inscriptions_enumerated = context.enumerated
        run.inscriptions_fetched = len(context.records)
        run.inscriptions_failed = len(context.failures) + (result.failed if result else 0)
        run.inscriptions_loaded = result.written if result else 0
        run.inscriptions_rejected = result.rejected if result else 0
        run.pages_skipped = context.pages_skipped
        run.error_message = error_message
        await self._commit("UPDATE")
        return run

    async def _refresh(self, run: HarvestRun) -> None:
        try:
            await self.db.refresh(run)
        except SQLAlchemyError as e:
            raise DatabaseError(
                "Failed to reload harvest run",
                context={"operation": "SELECT", "table_name": "harvest_runs"},
                original_exception=e
            )

    async def _commit(self, operation: str) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise DatabaseError(
                "Failed to record harvest run",
                context={"operation": operation, "table_name": "harvest_runs"},
                original_exception=e
            )
