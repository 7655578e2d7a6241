# ============================================================================
# File: harvester/runner.py
# Description: Block-by-block harvest loop with crash-safe resumption
# ============================================================================
"""
Harvest Runner - drives Enumerate, Aggregate, Persist for each block.

This module provides:
- Resumption from the highest block in the store, after deleting that
  block's possibly partial rows
- Strictly sequential, gap-free block advancement up to the source height
- Per-block audit records and a run summary
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional
import logging

from core.exceptions import HarvestException
from harvester.audit import HarvestRunRecorder
from harvester.checkpoint import CheckpointResolver
from harvester.extractors.aggregator import InscriptionAggregator
from harvester.extractors.context import BlockContext
from harvester.extractors.enumerator import BlockEnumerator
from harvester.extractors.source import OrdSource
from harvester.loaders.persister import InscriptionPersister, PersistResult
from models.base import HarvestStatus

logger = logging.getLogger(__name__)


class HarvestState(str, Enum):
    RESOLVING = "resolving"
    ENUMERATING = "enumerating"
    AGGREGATING = "aggregating"
    PERSISTING = "persisting"
    ADVANCING = "advancing"
    DONE = "done"


@dataclass
class HarvestSummary:
    start_block: Optional[int] = None
    frontier: Optional[int] = None
    blocks: List[int] = field(default_factory=list)
    inscriptions_written: int = 0
    inscriptions_failed: int = 0

    @property
    def last_block(self) -> Optional[int]:
        return self.blocks[-1] if self.blocks else None


class HarvestRunner:
    """
    Harvest Orchestrator

    Responsibilities:
    - Resolve the resume block and roll back its rows
    - Harvest blocks one at a time, in order, up to the source height
    - Never start block N+1 before block N is persisted
    - Record per-block run metrics
    """

    def __init__(
        self,
        source: OrdSource,
        enumerator: BlockEnumerator,
        aggregator: InscriptionAggregator,
        persister: InscriptionPersister,
        resolver: CheckpointResolver,
        recorder: Optional[HarvestRunRecorder] = None,
        until_block: Optional[int] = None
    ):
        self.source = source
        self.enumerator = enumerator
        self.aggregator = aggregator
        self.persister = persister
        self.resolver = resolver
        self.recorder = recorder
        self.until_block = until_block
        self.state = HarvestState.DONE

    async def run(self) -> HarvestSummary:
        """
        Harvest from the checkpoint to the current source height.

        Raises:
            HarvestException: A block could not be harvested; blocks before it
                are fully persisted and the run can simply be restarted
        """
        summary = HarvestSummary()

        self._transition(HarvestState.RESOLVING)
        frontier = await self.source.get_block_height()
        logger.info(f"Current highest block: {frontier}")
        if self.until_block is not None and self.until_block < frontier:
            logger.info(f"Stopping at configured block {self.until_block}")
            frontier = self.until_block
        summary.frontier = frontier

        current = await self.resolver.resolve()
        summary.start_block = current
        if not self.resolver.reconcile(current, frontier):
            self._transition(HarvestState.DONE)
            return summary

        await self.persister.delete_by_unit(current)
        logger.info(f"Starting at block: {current}")

        while current <= frontier:
            context = BlockContext(height=current)
            result = await self.harvest_block(context)

            summary.blocks.append(current)
            summary.inscriptions_written += result.written
            summary.inscriptions_failed += result.failed + len(context.failures)

            self._transition(HarvestState.ADVANCING)
            current += 1

        self._transition(HarvestState.DONE)
        logger.info(
            f"Harvest complete: {len(summary.blocks)} blocks, "
            f"{summary.inscriptions_written} inscriptions written, "
            f"{summary.inscriptions_failed} failed"
        )
        return summary

    async def harvest_block(self, context: BlockContext) -> PersistResult:
        """Enumerate, aggregate and persist one block"""
        height = context.height
        run = await self.recorder.start(height) if self.recorder else None

        try:
            self._transition(HarvestState.ENUMERATING)
            inscription_ids = await self.enumerator.enumerate(height, context)

            self._transition(HarvestState.AGGREGATING)
            records = await self.aggregator.aggregate(inscription_ids, context)

            self._transition(HarvestState.PERSISTING)
            result = await self.persister.persist(height, records)

        except HarvestException as e:
            logger.error(
                f"Block {height} failed: {e.message}",
                extra={"error_context": e.to_dict()}
            )
            if run is not None:
                await self.recorder.complete(run, HarvestStatus.FAILED, context, error_message=str(e))
            raise

        incomplete = context.failures or context.pages_skipped or result.failed
        if run is not None:
            await self.recorder.complete(
                run,
                HarvestStatus.PARTIAL if incomplete else HarvestStatus.SUCCESS,
                context,
                result,
                error_message=f"{len(context.failures) + result.failed} inscriptions failed" if incomplete else None
            )
        return result

    def _transition(self, state: HarvestState) -> None:
        logger.debug(f"{self.state.value} -> {state.value}")
        self.state = state
