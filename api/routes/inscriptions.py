"""
Inscription retrieval endpoints with pagination
"""

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from api.dependencies import get_db
from schemas.api import InscriptionResponse, BlockInscriptionsResponse, PaginationMetadata
from models.inscription import Inscription
import math
import logging

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Inscriptions"])


@router.get("/inscriptions/{inscription_id}", response_model=InscriptionResponse)
async def get_inscription(
    inscription_id: str,
    db: AsyncSession = Depends(get_db)
):
    """Retrieve one stored inscription by id"""
    row = await db.get(Inscription, inscription_id)
    if row is None:
        raise HTTPException(status_code=404, detail=f"Inscription {inscription_id} not found")
    return InscriptionResponse.from_orm(row)


@router.get("/blocks/{height}/inscriptions", response_model=BlockInscriptionsResponse)
async def get_block_inscriptions(
    request: Request,
    height: int = Path(..., ge=0, description="Genesis block height"),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(100, ge=1, le=1000, description="Items per page"),
    db: AsyncSession = Depends(get_db)
):
    """
    Retrieve the inscriptions created in a block, ordered by inscription number.

    Features:
    - Pagination
    - Stable ordering (number, then id)
    """
    request_id = getattr(request.state, "request_id", "-")
    logger.info(f"[{request_id}] GET /blocks/{height}/inscriptions - page={page}, page_size={page_size}")

    count_result = await db.execute(
        select(func.count()).select_from(Inscription).where(
            Inscription.genesis_block_height == height
        )
    )
    total_items = count_result.scalar() or 0
    total_pages = math.ceil(total_items / page_size) if total_items > 0 else 0

    result = await db.execute(
        select(Inscription)
        .where(Inscription.genesis_block_height == height)
        .order_by(Inscription.number, Inscription.id)
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    rows = result.scalars().all()

    return BlockInscriptionsResponse(
        block_height=height,
        items=[InscriptionResponse.from_orm(row) for row in rows],
        pagination=PaginationMetadata(
            total_items=total_items,
            total_pages=total_pages,
            current_page=page,
            page_size=page_size,
            has_next=page < total_pages,
            has_previous=page > 1
        )
    )
