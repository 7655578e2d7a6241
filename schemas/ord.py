"""
Pydantic schemas for payloads served by the ord source
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List


class BlockPage(BaseModel):
    """One page of `/inscriptions/block/{height}/{page}`"""
    inscriptions: List[str] = Field(default_factory=list)
    more: bool = False
    page_index: int = 0

    @field_validator("inscriptions", mode="before")
    @classmethod
    def null_as_empty(cls, v):
        return [] if v is None else v


class Charm(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    icon: str = ""


class InscriptionDetail(BaseModel):
    """
    Full detail of one inscription from `/e/inscription/{id}`.

    Unsigned 64-bit quantities are accepted as JSON numbers or decimal
    strings and kept as arbitrary-precision ints.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    inscription_id: str = Field(..., min_length=1)
    genesis_height: int = Field(..., ge=0)
    inscription_number: Optional[int] = None

    address: Optional[str] = None
    children: List[str] = Field(default_factory=list)
    content_length: Optional[int] = None
    content_type: Optional[str] = None
    genesis_fee: Optional[int] = Field(None, ge=0)
    next: Optional[str] = None
    output_value: Optional[int] = Field(None, ge=0)
    parent: Optional[str] = None
    previous: Optional[str] = None
    sat: Optional[int] = Field(None, ge=0)
    satpoint: Optional[str] = None
    timestamp: Optional[int] = None
    charms: Optional[int] = None
    charms_extended: List[Charm] = Field(default_factory=list)
    sat_rarity: Optional[str] = None
    metadata_hex: Optional[str] = None
    meta_protocol: Optional[str] = None
    content_encoding: Optional[str] = None
    content: Optional[str] = None
    recursive: bool = False
    recursive_refs: List[str] = Field(default_factory=list)
    tx_id: Optional[str] = None
    block_hash: Optional[str] = None
    satpoint_outpoint: Optional[str] = None
    satpoint_offset: Optional[int] = Field(None, ge=0)

    @field_validator("children", "recursive_refs", "charms_extended", mode="before")
    @classmethod
    def null_as_empty(cls, v):
        return [] if v is None else v
