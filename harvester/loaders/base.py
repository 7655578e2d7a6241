"""
Store collaborator used by the persister and the checkpoint resolver
"""

from typing import Any, Dict, List, Optional, Protocol


class InscriptionStore(Protocol):
    """Protocol for inscription store backends."""

    async def insert_unordered(self, rows: List[Dict[str, Any]]) -> int:
        """Insert rows, skipping ids already stored. Returns rows inserted."""
        ...

    async def delete_by_block(self, height: int) -> int:
        """Delete every row whose genesis block is `height`. Returns rows deleted."""
        ...

    async def max_block(self) -> Optional[int]:
        """Highest genesis block among stored rows, None when empty."""
        ...
