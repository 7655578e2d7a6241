"""
Unit tests for block enumeration
"""

import pytest

from core.exceptions import EnumerationError, NetworkError
from harvester.extractors.context import BlockContext
from harvester.extractors.enumerator import BlockEnumerator
from schemas.ord import BlockPage


class ListingSource:
    """Serves pre-built listing pages; pages in `broken` raise NetworkError"""

    def __init__(self, pages, broken=()):
        self.pages = pages
        self.broken = set(broken)
        self.calls = []

    async def get_block_page(self, height, page):
        self.calls.append(page)
        if page in self.broken:
            raise NetworkError("Server error after 10 attempts", context={"page": page})
        ids = self.pages[page] if page < len(self.pages) else []
        return BlockPage(inscriptions=ids, more=page < len(self.pages) - 1, page_index=page)


class TestBlockEnumerator:

    @pytest.mark.asyncio
    async def test_requests_every_page_in_order(self):
        source = ListingSource([["a", "b"], ["c"], ["d", "e"]])
        context = BlockContext(height=800000)

        ids = await BlockEnumerator(source).enumerate(800000, context)

        assert ids == ["a", "b", "c", "d", "e"]
        assert source.calls == [0, 1, 2]
        assert context.pages == 3
        assert context.enumerated == 5

    @pytest.mark.asyncio
    async def test_duplicates_are_kept_in_source_order(self):
        source = ListingSource([["a", "b"], ["b", "c"]])

        ids = await BlockEnumerator(source).enumerate(1)

        assert ids == ["a", "b", "b", "c"]

    @pytest.mark.asyncio
    async def test_empty_block(self):
        source = ListingSource([[]])

        ids = await BlockEnumerator(source).enumerate(1)

        assert ids == []
        assert source.calls == [0]

    @pytest.mark.asyncio
    async def test_abort_policy_raises_on_failed_page(self):
        source = ListingSource([["a"], ["b"], ["c"]], broken={1})

        with pytest.raises(EnumerationError) as exc_info:
            await BlockEnumerator(source, page_failure_policy="abort").enumerate(7)

        assert exc_info.value.context["page"] == 1
        assert isinstance(exc_info.value.original_exception, NetworkError)

    @pytest.mark.asyncio
    async def test_skip_policy_moves_past_failed_page(self):
        source = ListingSource([["a"], ["b"], ["c"]], broken={1})
        context = BlockContext(height=7)

        ids = await BlockEnumerator(source, page_failure_policy="skip").enumerate(7, context)

        assert ids == ["a", "c"]
        assert context.pages_skipped == 1

    @pytest.mark.asyncio
    async def test_skip_policy_bounded_by_consecutive_failures(self):
        source = ListingSource([["a"], ["b"], ["c"], ["d"], ["e"]], broken={1, 2, 3})
        enumerator = BlockEnumerator(source, page_failure_policy="skip", max_consecutive_failures=2)

        with pytest.raises(EnumerationError):
            await enumerator.enumerate(7)

        assert source.calls == [0, 1, 2, 3]

    def test_unknown_policy_rejected(self):
        with pytest.raises(ValueError):
            BlockEnumerator(ListingSource([]), page_failure_policy="retry")
