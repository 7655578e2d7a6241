"""
Write one block's aggregated inscriptions to the store
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple
import logging

from core.exceptions import LoadError
from harvester.loaders.base import InscriptionStore
from harvester.transformers.inscription_mapper import InscriptionMapper
from schemas.ord import InscriptionDetail

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PersistResult:
    written: int = 0
    rejected: int = 0  # already stored (unique id)
    failed: int = 0  # store errors or rows tagged with another block


class InscriptionPersister:
    """
    Map a block's result set to rows and bulk insert them, chunk by chunk.

    A chunk the store rejects is retried one row at a time, so only the
    offending rows are counted as failed; the remaining chunks are still
    written. The block is re-harvested only if it is the last one written
    when the harvester restarts.
    """

    def __init__(
        self,
        store: InscriptionStore,
        mapper: Optional[InscriptionMapper] = None,
        batch_size: int = 500
    ):
        self.store = store
        self.mapper = mapper or InscriptionMapper()
        self.batch_size = max(1, batch_size)

    async def persist(self, height: int, records: Dict[str, InscriptionDetail]) -> PersistResult:
        if not records:
            logger.info(f"No inscriptions to write for block {height}")
            return PersistResult()

        rows = []
        mismatched = 0
        for detail in records.values():
            # A row tagged with another block would move the resume checkpoint
            if detail.genesis_height != height:
                mismatched += 1
                logger.warning(
                    f"Inscription {detail.inscription_id} reports genesis height "
                    f"{detail.genesis_height} while harvesting block {height}; not written"
                )
                continue
            rows.append(self.mapper.to_row(detail))

        written = 0
        rejected = 0
        failed = mismatched
        for start in range(0, len(rows), self.batch_size):
            chunk = rows[start:start + self.batch_size]
            try:
                inserted = await self.store.insert_unordered(chunk)
                chunk_failed = 0
            except LoadError as e:
                logger.warning(
                    f"Block {height}: batch {start // self.batch_size + 1} "
                    f"({len(chunk)} rows) failed: {e.message}; retrying row by row"
                )
                inserted, chunk_failed = await self._insert_each(height, chunk)
            written += inserted
            failed += chunk_failed
            rejected += len(chunk) - inserted - chunk_failed

        logger.info(
            f"Wrote {written} inscriptions to DB for block {height}"
            + (f" ({rejected} already stored)" if rejected else "")
            + (f" ({failed} failed)" if failed else "")
        )
        return PersistResult(written=written, rejected=rejected, failed=failed)

    async def delete_by_unit(self, height: int) -> int:
        deleted = await self.store.delete_by_block(height)
        logger.info(f"Deleted {deleted} inscriptions from last written block {height}")
        return deleted

    async def _insert_each(self, height: int, rows: List[Dict[str, Any]]) -> Tuple[int, int]:
        """Insert rows one at a time. Returns (inserted, failed)."""
        inserted = 0
        failed = 0
        for row in rows:
            try:
                inserted += await self.store.insert_unordered([row])
            except LoadError as e:
                failed += 1
                logger.error(
                    f"Block {height}: inscription {row['id']} not written: {e.message}",
                    extra={"error_context": e.to_dict()}
                )
        return inserted, failed
