"""
Walks the paginated block listing to collect a block's inscription ids.
"""

import logging
from typing import List, Optional

from core.exceptions import EnumerationError, HarvestException
from harvester.extractors.context import BlockContext
from harvester.extractors.source import OrdSource

logger = logging.getLogger(__name__)

PAGE_FAILURE_ABORT = "abort"
PAGE_FAILURE_SKIP = "skip"


class BlockEnumerator:
    """
    List every inscription id of a block, page by page.

    Pages are requested from index 0 while the source reports `more`.
    Identifiers are returned in source order with duplicates kept; the
    aggregator de-duplicates.

    Page failure policies:
        abort: a page that fails after the fetcher's retries raises EnumerationError
        skip: the page counts as empty and enumeration moves to the next index;
              more than `max_consecutive_failures` failed pages in a row raises
    """

    def __init__(
        self,
        source: OrdSource,
        page_failure_policy: str = PAGE_FAILURE_ABORT,
        max_consecutive_failures: int = 3
    ):
        if page_failure_policy not in (PAGE_FAILURE_ABORT, PAGE_FAILURE_SKIP):
            raise ValueError(f"Unknown page failure policy: {page_failure_policy}")
        self.source = source
        self.page_failure_policy = page_failure_policy
        self.max_consecutive_failures = max_consecutive_failures

    async def enumerate(self, height: int, context: Optional[BlockContext] = None) -> List[str]:
        inscription_ids: List[str] = []
        page = 0
        skipped = 0
        consecutive_failures = 0
        more = True

        while more:
            try:
                listing = await self.source.get_block_page(height, page)
            except HarvestException as e:
                if self.page_failure_policy == PAGE_FAILURE_ABORT:
                    raise EnumerationError(
                        f"Failed to list page {page} of block {height}",
                        context={"block": height, "page": page},
                        original_exception=e
                    )

                skipped += 1
                consecutive_failures += 1
                logger.error(f"Skipping page {page} of block {height}: {e}")
                if consecutive_failures > self.max_consecutive_failures:
                    raise EnumerationError(
                        f"{consecutive_failures} consecutive listing pages failed for block {height}",
                        context={"block": height, "page": page, "pages_skipped": skipped},
                        original_exception=e
                    )
                page += 1
                continue

            consecutive_failures = 0
            inscription_ids.extend(listing.inscriptions)
            more = listing.more
            page += 1

        if context is not None:
            context.enumerated = len(inscription_ids)
            context.pages = page
            context.pages_skipped = skipped

        logger.info(
            f"Block {height}: {len(inscription_ids)} inscription ids over {page} pages"
            + (f" ({skipped} skipped)" if skipped else "")
        )
        return inscription_ids
