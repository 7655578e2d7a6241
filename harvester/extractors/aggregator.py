"""
Bounded-concurrency fan-out of inscription detail fetches for one block.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from core.exceptions import AggregationError, HarvestException
from harvester.extractors.context import BlockContext
from harvester.extractors.source import OrdSource
from schemas.ord import InscriptionDetail

logger = logging.getLogger(__name__)

FAILURE_STRICT = "strict"
FAILURE_LENIENT = "lenient"


@dataclass(frozen=True)
class FetchOutcome:
    inscription_id: str
    detail: Optional[InscriptionDetail] = None
    error: Optional[HarvestException] = None


class InscriptionAggregator:
    """
    Fetch the detail of every inscription id of a block into its BlockContext.

    At most `throttle_width` fetches are in flight. Results are keyed by the
    inscription id the source returns, so repeated ids collapse into one
    entry. `aggregate` returns only after every dispatched task has finished
    or been cancelled.

    Failure policies:
        strict: the first failed fetch cancels the rest and raises AggregationError
        lenient: failed ids are logged, recorded in `context.failures` and skipped
    """

    def __init__(
        self,
        source: OrdSource,
        throttle_width: int = 500,
        failure_policy: str = FAILURE_STRICT
    ):
        if failure_policy not in (FAILURE_STRICT, FAILURE_LENIENT):
            raise ValueError(f"Unknown failure policy: {failure_policy}")
        self.source = source
        self.throttle_width = max(1, throttle_width)
        self.failure_policy = failure_policy

    async def aggregate(
        self,
        inscription_ids: Iterable[str],
        context: BlockContext
    ) -> Dict[str, InscriptionDetail]:
        unique_ids = list(dict.fromkeys(inscription_ids))
        if not unique_ids:
            return context.records

        semaphore = asyncio.Semaphore(self.throttle_width)

        async def fetch_one(inscription_id: str) -> FetchOutcome:
            async with semaphore:
                try:
                    detail = await self.source.get_inscription(inscription_id)
                except HarvestException as e:
                    return FetchOutcome(inscription_id, error=e)
            async with context.lock:
                context.records[detail.inscription_id] = detail
            return FetchOutcome(inscription_id, detail=detail)

        tasks = [asyncio.create_task(fetch_one(i)) for i in unique_ids]
        try:
            for next_done in asyncio.as_completed(tasks):
                outcome = await next_done
                if outcome.error is None:
                    continue

                context.failures[outcome.inscription_id] = outcome.error
                if self.failure_policy == FAILURE_STRICT:
                    raise AggregationError(
                        f"Failed to fetch inscription {outcome.inscription_id}",
                        context={"block": context.height, "inscription_id": outcome.inscription_id},
                        original_exception=outcome.error
                    )
                logger.warning(
                    f"Skipping inscription {outcome.inscription_id} in block {context.height}: "
                    f"{outcome.error.message}"
                )
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        logger.info(
            f"Block {context.height}: fetched {len(context.records)} of {len(unique_ids)} inscriptions"
            + (f", {len(context.failures)} failed" if context.failures else "")
        )
        return context.records
