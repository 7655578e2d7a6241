from sqlalchemy import Column, String, Integer, BigInteger, DateTime, Boolean, Text, Index
from sqlalchemy.dialects.postgresql import JSONB
from datetime import datetime
from models.base import Base


class Inscription(Base):
    """
    One harvested inscription.

    Design:
    - `id` is the inscription id and the uniqueness constraint that makes
      re-harvesting a block idempotent
    - `genesis_block_height` tags the row with the block it was harvested for;
      the resume checkpoint is MAX(genesis_block_height)
    - unsigned 64-bit quantities (sat, values, offsets, fees) are decimal strings
    - `metadata_hex` keeps the CBOR payload as served, `metadata` its decoded form
    """
    __tablename__ = "inscriptions"

    id = Column(String(255), primary_key=True)
    number = Column(Integer, nullable=True, index=True)

    # Ownership / location
    address = Column(String(255), nullable=True)
    genesis_address = Column(String(255), nullable=True)
    tx_id = Column(String(64), nullable=True)
    location = Column(String(255), nullable=True)
    output = Column(String(255), nullable=True)
    value = Column(String(32), nullable=True)
    offset = Column(String(32), nullable=True)
    satpoint = Column(String(255), nullable=True)
    output_value = Column(String(32), nullable=True)

    # Genesis
    genesis_block_height = Column(Integer, nullable=False, index=True)
    genesis_block_hash = Column(String(64), nullable=True)
    genesis_tx_id = Column(String(64), nullable=True)
    genesis_timestamp = Column(BigInteger, nullable=True)
    genesis_fee = Column(String(32), nullable=True)
    timestamp = Column(DateTime(timezone=True), nullable=True)

    # Sat
    sat = Column(String(32), nullable=True)
    sat_ordinal = Column(String(32), nullable=True)
    sat_rarity = Column(String(32), nullable=True, index=True)
    charms = Column(Integer, nullable=True)
    charms_extended = Column(JSONB(none_as_null=True), nullable=True)

    # Content
    content_type = Column(String(255), nullable=True, index=True)
    content_length = Column(Integer, nullable=True)
    content_encoding = Column(String(64), nullable=True)
    content = Column(Text, nullable=True)
    metaprotocol = Column(String(255), nullable=True, index=True)
    metadata_hex = Column(Text, nullable=True)
    inscription_metadata = Column("metadata", JSONB(none_as_null=True), nullable=True)

    # Relations
    parent = Column(String(255), nullable=True)
    children = Column(JSONB(none_as_null=True), nullable=True)
    previous = Column(String(255), nullable=True)
    next = Column(String(255), nullable=True)
    recursive = Column(Boolean, nullable=True)
    recursive_refs = Column(JSONB(none_as_null=True), nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index("idx_inscription_block_number", "genesis_block_height", "number"),
        Index("idx_inscription_metadata", "metadata", postgresql_using="gin"),
    )
