"""
Per-block harvest state.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Dict

from core.exceptions import HarvestException
from schemas.ord import InscriptionDetail


@dataclass
class BlockContext:
    """
    State owned by exactly one block's harvest.

    Created empty when the block starts and dropped once the block is
    persisted (or abandoned). `records` is the block's result set keyed by
    inscription id; writers must hold `lock`.
    """

    height: int
    records: Dict[str, InscriptionDetail] = field(default_factory=dict)
    failures: Dict[str, HarvestException] = field(default_factory=dict)
    enumerated: int = 0
    pages: int = 0
    pages_skipped: int = 0
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)
