"""
Typed access to the three ord endpoints the harvester reads.
"""

import json
import logging
from typing import Any

from pydantic import ValidationError

from core.exceptions import MalformedResponseError
from harvester.extractors.fetcher import ThrottledFetcher
from schemas.ord import BlockPage, InscriptionDetail

logger = logging.getLogger(__name__)


class OrdSource:
    """
    Read-only view of an ord server.

    Endpoints:
        GET /r/blockheight                     -> current block height (plain text)
        GET /inscriptions/block/{height}/{page} -> BlockPage
        GET /e/inscription/{id}                -> InscriptionDetail
    """

    def __init__(self, host: str, fetcher: ThrottledFetcher):
        self.host = host.rstrip("/")
        self.fetcher = fetcher

    async def get_block_height(self) -> int:
        url = f"{self.host}/r/blockheight"
        body = await self.fetcher.fetch(url)
        try:
            return int(body.decode("utf-8").strip())
        except (UnicodeDecodeError, ValueError) as e:
            raise MalformedResponseError(
                "Block height is not an integer",
                context={"api_url": url, "response_body": body[:100]},
                original_exception=e
            )

    async def get_block_page(self, height: int, page: int) -> BlockPage:
        url = f"{self.host}/inscriptions/block/{height}/{page}"
        payload = self._parse_json(url, await self.fetcher.fetch(url))
        return self._validate(BlockPage, url, payload)

    async def get_inscription(self, inscription_id: str) -> InscriptionDetail:
        url = f"{self.host}/e/inscription/{inscription_id}"
        payload = self._parse_json(url, await self.fetcher.fetch(url))
        return self._validate(InscriptionDetail, url, payload)

    @staticmethod
    def _validate(model, url: str, payload: Any):
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise MalformedResponseError(
                f"{model.__name__} payload failed validation",
                context={"api_url": url, "errors": e.error_count()},
                original_exception=e
            )

    @staticmethod
    def _parse_json(url: str, body: bytes) -> Any:
        try:
            payload = json.loads(body)
        except ValueError as e:
            raise MalformedResponseError(
                "Failed to parse JSON response",
                context={"api_url": url, "response_body": body[:500]},
                original_exception=e
            )
        if not isinstance(payload, dict):
            raise MalformedResponseError(
                "Expected a JSON object",
                context={"api_url": url, "payload_type": type(payload).__name__}
            )
        return payload
