"""
Decode the CBOR metadata attached to an inscription into a JSON-compatible value.
"""

import math
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional
import logging

import cbor2

logger = logging.getLogger(__name__)


def decode_metadata(metadata_hex: Optional[str]) -> Optional[Any]:
    """
    Decode hex-encoded CBOR into plain dicts, lists, strings and numbers.

    Returns None for a missing payload or on any decode error; a bad
    payload never fails the harvest.
    """
    if not metadata_hex:
        return None
    try:
        return to_jsonable(cbor2.loads(bytes.fromhex(metadata_hex)))
    except (ValueError, TypeError, EOFError, RecursionError, cbor2.CBORDecodeError) as e:
        logger.debug(f"Undecodable metadata ({len(metadata_hex)} hex chars): {e}")
        return None


def to_jsonable(value: Any) -> Any:
    """Map decoded CBOR values onto types a JSON column accepts"""
    if isinstance(value, str):
        # PostgreSQL JSONB rejects \u0000
        return value.replace("\x00", "")
    if value is None or isinstance(value, (bool, int)):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else str(value)
    if isinstance(value, dict):
        return {_key(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex()
    if isinstance(value, cbor2.CBORTag):
        return {"tag": value.tag, "value": to_jsonable(value.value)}
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    return str(value)


def _key(key: Any) -> str:
    if isinstance(key, str):
        return key.replace("\x00", "")
    if isinstance(key, (bytes, bytearray)):
        return bytes(key).hex()
    return str(to_jsonable(key))
