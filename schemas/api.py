"""
Pydantic schemas for read API responses
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional, List, Dict, Any
from datetime import datetime
from models.base import HarvestStatus


# ============================================================================
# Inscription Schemas
# ============================================================================

class InscriptionResponse(BaseModel):
    """One stored inscription"""
    id: str
    number: Optional[int] = None
    address: Optional[str] = None
    genesis_address: Optional[str] = None
    genesis_block_height: int
    genesis_block_hash: Optional[str] = None
    genesis_tx_id: Optional[str] = None
    genesis_timestamp: Optional[int] = None
    genesis_fee: Optional[str] = None
    tx_id: Optional[str] = None
    location: Optional[str] = None
    output: Optional[str] = None
    value: Optional[str] = None
    offset: Optional[str] = None
    sat: Optional[str] = None
    sat_rarity: Optional[str] = None
    charms: Optional[int] = None
    charms_extended: Optional[List[Dict[str, Any]]] = None
    content_type: Optional[str] = None
    content_length: Optional[int] = None
    content_encoding: Optional[str] = None
    content: Optional[str] = None
    metaprotocol: Optional[str] = None
    metadata_hex: Optional[str] = None
    metadata: Optional[Any] = None
    parent: Optional[str] = None
    children: Optional[List[str]] = None
    previous: Optional[str] = None
    next: Optional[str] = None
    recursive: Optional[bool] = None
    recursive_refs: Optional[List[str]] = None
    timestamp: Optional[datetime] = None
    created_at: datetime

    @classmethod
    def from_orm(cls, row):
        """Explicit mapping; the ORM attribute for `metadata` is `inscription_metadata`"""
        return cls(
            id=row.id,
            number=row.number,
            address=row.address,
            genesis_address=row.genesis_address,
            genesis_block_height=row.genesis_block_height,
            genesis_block_hash=row.genesis_block_hash,
            genesis_tx_id=row.genesis_tx_id,
            genesis_timestamp=row.genesis_timestamp,
            genesis_fee=row.genesis_fee,
            tx_id=row.tx_id,
            location=row.location,
            output=row.output,
            value=row.value,
            offset=row.offset,
            sat=row.sat,
            sat_rarity=row.sat_rarity,
            charms=row.charms,
            charms_extended=row.charms_extended,
            content_type=row.content_type,
            content_length=row.content_length,
            content_encoding=row.content_encoding,
            content=row.content,
            metaprotocol=row.metaprotocol,
            metadata_hex=row.metadata_hex,
            metadata=row.inscription_metadata,
            parent=row.parent,
            children=row.children,
            previous=row.previous,
            next=row.next,
            recursive=row.recursive,
            recursive_refs=row.recursive_refs,
            timestamp=row.timestamp,
            created_at=row.created_at,
        )


class PaginationMetadata(BaseModel):
    """Pagination metadata"""
    total_items: int
    total_pages: int
    current_page: int
    page_size: int
    has_next: bool
    has_previous: bool


class BlockInscriptionsResponse(BaseModel):
    """Paginated inscriptions of one block"""
    block_height: int
    items: List[InscriptionResponse]
    pagination: PaginationMetadata


# ============================================================================
# Harvest Run Schemas
# ============================================================================

class HarvestRunSummary(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    run_id: str
    block_height: int
    status: HarvestStatus
    started_at: datetime
    completed_at: Optional[datetime] = None
    duration_seconds: Optional[float] = None
    inscriptions_enumerated: int = 0
    inscriptions_loaded: int = 0
    inscriptions_failed: int = 0
    error_message: Optional[str] = None

    @classmethod
    def from_orm(cls, run):
        return cls(
            run_id=str(run.run_id),
            block_height=run.block_height,
            status=run.status,
            started_at=run.started_at,
            completed_at=run.completed_at,
            duration_seconds=run.duration_seconds,
            inscriptions_enumerated=run.inscriptions_enumerated or 0,
            inscriptions_loaded=run.inscriptions_loaded or 0,
            inscriptions_failed=run.inscriptions_failed or 0,
            error_message=run.error_message,
        )


# ============================================================================
# Health Check Schemas
# ============================================================================

class HealthCheckResponse(BaseModel):
    """Health check response model"""
    status: str = Field("healthy", description="Overall status: healthy, degraded, unhealthy")
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    database_connected: bool
    checkpoint_block: Optional[int] = None
    last_run: Optional[HarvestRunSummary] = None

    @model_validator(mode="after")
    def determine_status(self):
        """Derive overall status from database and last harvest run"""
        if not self.database_connected:
            self.status = "unhealthy"
        elif self.last_run is not None and self.last_run.status == HarvestStatus.FAILED.value:
            self.status = "degraded"
        else:
            self.status = "healthy"
        return self


# ============================================================================
# Statistics Schemas
# ============================================================================

class StatsResponse(BaseModel):
    """Statistics response model"""
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    total_inscriptions: int
    checkpoint_block: Optional[int]
    total_runs: int
    runs_by_status: Dict[str, int]
    avg_block_duration_seconds: Optional[float]
    recent_runs: List[HarvestRunSummary] = Field(default_factory=list)
    request_id: Optional[str] = None


class ErrorResponse(BaseModel):
    """Standard error response"""
    error: str
    detail: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)
