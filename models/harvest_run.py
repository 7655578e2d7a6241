from sqlalchemy import Column, BigInteger, Integer, Enum, DateTime, Float, Text, Index
from sqlalchemy.dialects.postgresql import UUID
from datetime import datetime
import uuid
from models.base import Base, HarvestStatus


class HarvestRun(Base):
    """
    Audit row for one block's harvest.

    Purpose:
    - Progress and performance history per block
    - Error tracking for failed or partial blocks

    The resume checkpoint is derived from the inscriptions table, never
    from this one.
    """
    __tablename__ = "harvest_runs"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    run_id = Column(UUID(as_uuid=True), default=uuid.uuid4, unique=True, nullable=False, index=True)

    block_height = Column(Integer, nullable=False, index=True)
    status = Column(Enum(HarvestStatus), default=HarvestStatus.RUNNING, nullable=False, index=True)

    started_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    completed_at = Column(DateTime, nullable=True)
    duration_seconds = Column(Float, nullable=True)

    # Statistics
    inscriptions_enumerated = Column(Integer, default=0)
    inscriptions_fetched = Column(Integer, default=0)
    inscriptions_failed = Column(Integer, default=0)
    inscriptions_loaded = Column(Integer, default=0)
    inscriptions_rejected = Column(Integer, default=0)
    pages_skipped = Column(Integer, default=0)

    error_message = Column(Text, nullable=True)

    __table_args__ = (
        Index("idx_harvest_run_block_started", "block_height", "started_at"),
    )
