"""
Map source inscription payloads onto `inscriptions` table rows
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from harvester.transformers.metadata import decode_metadata
from schemas.ord import InscriptionDetail


class InscriptionMapper:
    """
    Convert an InscriptionDetail into a storage row.

    Handles:
    - unsigned 64-bit quantities as decimal strings (no precision loss)
    - unix timestamps as UTC datetimes
    - CBOR metadata decoded next to its original hex form
    - optional fields that are missing are left out of the row
    """

    def to_row(self, detail: InscriptionDetail, now: Optional[datetime] = None) -> Dict[str, Any]:
        now = now or datetime.utcnow()
        row = {
            "id": detail.inscription_id,
            "number": detail.inscription_number,
            "address": detail.address,
            "genesis_address": detail.address,
            "genesis_block_height": detail.genesis_height,
            "genesis_block_hash": detail.block_hash,
            "genesis_tx_id": detail.tx_id,
            "genesis_timestamp": detail.timestamp,
            "genesis_fee": self._decimal(detail.genesis_fee),
            "tx_id": detail.tx_id,
            "location": detail.satpoint,
            "output": detail.satpoint_outpoint,
            "value": self._decimal(detail.output_value),
            "offset": self._decimal(detail.satpoint_offset),
            "satpoint": detail.satpoint,
            "output_value": self._decimal(detail.output_value),
            "timestamp": self._timestamp(detail.timestamp),
            "sat": self._decimal(detail.sat),
            "sat_ordinal": self._decimal(detail.sat),
            "sat_rarity": detail.sat_rarity,
            "charms": detail.charms,
            "charms_extended": [c.model_dump() for c in detail.charms_extended] or None,
            "content_type": detail.content_type,
            "content_length": detail.content_length,
            "content_encoding": detail.content_encoding,
            "content": self._text(detail.content),
            "metaprotocol": detail.meta_protocol,
            "metadata_hex": detail.metadata_hex,
            "metadata": decode_metadata(detail.metadata_hex),
            "parent": detail.parent,
            "children": list(detail.children),
            "previous": detail.previous,
            "next": detail.next,
            "recursive": detail.recursive or None,
            "recursive_refs": list(detail.recursive_refs) or None,
            "created_at": now,
            "updated_at": now,
        }
        return {k: v for k, v in row.items() if v is not None}

    @staticmethod
    def _decimal(value: Optional[int]) -> Optional[str]:
        return None if value is None else str(value)

    @staticmethod
    def _timestamp(value: Optional[int]) -> Optional[datetime]:
        if value is None:
            return None
        return datetime.fromtimestamp(value, tz=timezone.utc)

    @staticmethod
    def _text(value: Optional[str]) -> Optional[str]:
        # PostgreSQL text cannot hold NUL
        if value is None:
            return None
        return value.replace("\x00", "")
