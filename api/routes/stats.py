"""
Harvest statistics endpoint
"""
from datetime import datetime
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, and_
from api.dependencies import get_db
from schemas.api import StatsResponse, HarvestRunSummary
from models.base import HarvestStatus
from models.harvest_run import HarvestRun
from models.inscription import Inscription
import logging

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Statistics"])


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    request: Request,
    limit: int = Query(10, ge=1, le=100, description="Number of recent runs to return"),
    db: AsyncSession = Depends(get_db)
):
    """
    Get harvest statistics.

    Returns:
    - Stored inscription count and checkpoint block
    - Harvest run counts by status
    - Recent harvest runs
    """
    request_id = getattr(request.state, "request_id", None)

    logger.info(f"[{request_id}] GET /stats")

    # ========== Inscriptions ==========

    total_result = await db.execute(select(func.count()).select_from(Inscription))
    total_inscriptions = total_result.scalar() or 0

    checkpoint_result = await db.execute(select(func.max(Inscription.genesis_block_height)))
    checkpoint_block = checkpoint_result.scalar()

    # ========== Harvest Runs ==========

    status_result = await db.execute(
        select(HarvestRun.status, func.count()).group_by(HarvestRun.status)
    )
    runs_by_status = {}
    for status, count in status_result.all():
        key = status.value if isinstance(status, HarvestStatus) else str(status)
        runs_by_status[key] = count
    total_runs = sum(runs_by_status.values())

    avg_duration_result = await db.execute(
        select(func.avg(HarvestRun.duration_seconds)).where(
            and_(
                HarvestRun.status == HarvestStatus.SUCCESS,
                HarvestRun.duration_seconds.isnot(None)
            )
        )
    )
    avg_duration = avg_duration_result.scalar()

    recent_runs_result = await db.execute(
        select(HarvestRun)
        .order_by(HarvestRun.started_at.desc())
        .limit(limit)
    )
    recent_runs = [HarvestRunSummary.from_orm(run) for run in recent_runs_result.scalars().all()]

    logger.info(
        f"[{request_id}] Stats: {total_inscriptions} inscriptions, "
        f"checkpoint {checkpoint_block}, {total_runs} runs"
    )

    return StatsResponse(
        timestamp=datetime.utcnow(),
        total_inscriptions=total_inscriptions,
        checkpoint_block=checkpoint_block,
        total_runs=total_runs,
        runs_by_status=runs_by_status,
        avg_block_duration_seconds=round(avg_duration, 2) if avg_duration else None,
        recent_runs=recent_runs,
        request_id=request_id
    )
