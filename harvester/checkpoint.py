"""
Resume point for the harvest loop, derived from the store itself
"""

import logging

from core.exceptions import CheckpointError, LoadError
from harvester.loaders.base import InscriptionStore

logger = logging.getLogger(__name__)


class CheckpointResolver:
    """
    The checkpoint is the highest genesis block among stored inscriptions.

    That block may have been only partly written when the previous run
    stopped, so the loop deletes its rows and harvests it again. Older blocks
    are never revisited.
    """

    def __init__(self, store: InscriptionStore, genesis_block: int):
        self.store = store
        self.genesis_block = genesis_block

    async def resolve(self) -> int:
        try:
            highest = await self.store.max_block()
        except LoadError as e:
            raise CheckpointError(
                "Failed to read checkpoint from store",
                context={"operation": "read"},
                original_exception=e
            )

        if highest is None:
            logger.info(f"Store is empty, starting at genesis block {self.genesis_block}")
            return self.genesis_block

        logger.info(f"Last block written to store: {highest}")
        return highest

    def reconcile(self, checkpoint: int, frontier: int) -> bool:
        """Whether there is anything to harvest between checkpoint and frontier"""
        if checkpoint > frontier:
            logger.warning(
                f"Checkpoint {checkpoint} is ahead of source height {frontier}; "
                f"the source may still be indexing"
            )
            return False
        return True
