"""
Throttled HTTP fetcher for the ord source.

Provides:
- Exponential backoff retry for transient failures (timeouts, connection
  errors, HTTP 429 and 5xx)
- Immediate failure for non-retryable responses (404, other 4xx)
- A socket timeout per attempt and an overall deadline per fetch
- Explicit content negotiation on every request

The fetcher holds no block-scoped state and is safe to share between many
concurrent tasks.
"""

import asyncio
import logging
from typing import Optional

import httpx

from core.exceptions import (
    APIExtractionError,
    NetworkError,
    RateLimitError,
    ResourceNotFoundError,
)

logger = logging.getLogger(__name__)


class ThrottledFetcher:
    """
    Retrying GET client over a shared httpx.AsyncClient.

    Attributes:
        max_retries: Total attempts per fetch (default: 10)
        retry_delay: Initial backoff delay in seconds (default: 0.5)
        retry_max_delay: Upper bound for a single backoff sleep (default: 30)
        timeout: Socket timeout per attempt in seconds (default: 30)
        deadline: Overall budget for one fetch including retries (default: 300)
    """

    ACCEPT = "application/json"

    def __init__(
        self,
        max_retries: int = 10,
        retry_delay: float = 0.5,
        retry_max_delay: float = 30.0,
        timeout: float = 30.0,
        deadline: float = 300.0,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.max_retries = max(1, max_retries)
        self.retry_delay = retry_delay
        self.retry_max_delay = retry_max_delay
        self.timeout = timeout
        self.deadline = deadline
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            timeout=timeout,
            headers={"Accept": self.ACCEPT},
            transport=transport,
        )

    async def __aenter__(self) -> "ThrottledFetcher":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def fetch(self, url: str) -> bytes:
        """
        GET `url` and return the raw body.

        Raises:
            NetworkError: Transient failures outlasted the retry budget or deadline
            RateLimitError: HTTP 429 outlasted the retry budget
            ResourceNotFoundError: HTTP 404
            APIExtractionError: Any other non-retryable HTTP status
        """
        try:
            return await asyncio.wait_for(self._fetch_with_retry(url), timeout=self.deadline)
        except asyncio.TimeoutError as e:
            raise NetworkError(
                f"Request deadline of {self.deadline}s exceeded",
                context={"api_url": url, "deadline": self.deadline},
                original_exception=e
            )

    def _backoff(self, attempt: int) -> float:
        return min(self.retry_delay * (2 ** attempt), self.retry_max_delay)

    async def _fetch_with_retry(self, url: str) -> bytes:
        last_exception: Optional[Exception] = None

        for attempt in range(self.max_retries):
            is_last = attempt == self.max_retries - 1
            try:
                logger.debug(f"Request attempt {attempt + 1}/{self.max_retries} to {url}")
                response = await self.client.get(
                    url,
                    headers={"Accept": self.ACCEPT},
                    timeout=self.timeout
                )
            except (httpx.TimeoutException, httpx.TransportError) as e:
                last_exception = e
                if is_last:
                    raise NetworkError(
                        f"Network error after {self.max_retries} attempts",
                        context={"api_url": url, "retry_count": attempt + 1},
                        original_exception=e
                    )
                delay = self._backoff(attempt)
                logger.warning(f"{type(e).__name__} on {url}. Retrying in {delay} seconds")
                await asyncio.sleep(delay)
                continue

            if response.status_code == 404:
                raise ResourceNotFoundError(
                    f"Resource not found: {url}",
                    context={"status_code": 404, "api_url": url}
                )

            if response.status_code == 429:
                retry_after = self._retry_after(response, attempt)
                if is_last:
                    raise RateLimitError(
                        f"Rate limit exceeded for {url}",
                        context={"status_code": 429, "api_url": url, "retry_count": attempt + 1},
                        retry_after=retry_after
                    )
                logger.warning(f"Rate limited on {url}. Retrying after {retry_after} seconds")
                await asyncio.sleep(retry_after)
                continue

            if response.status_code >= 500:
                if is_last:
                    raise NetworkError(
                        f"Server error after {self.max_retries} attempts",
                        context={
                            "status_code": response.status_code,
                            "api_url": url,
                            "retry_count": attempt + 1,
                            "response_body": response.text[:500]
                        }
                    )
                delay = self._backoff(attempt)
                logger.warning(
                    f"Server error {response.status_code} on {url}. "
                    f"Retrying in {delay} seconds (attempt {attempt + 1}/{self.max_retries})"
                )
                await asyncio.sleep(delay)
                continue

            if response.status_code >= 400:
                raise APIExtractionError(
                    f"Request rejected with status {response.status_code}",
                    context={
                        "status_code": response.status_code,
                        "api_url": url,
                        "response_body": response.text[:500]
                    }
                )

            return response.content

        # Only reachable when max_retries is exhausted without raising above
        raise NetworkError(
            "Max retries exceeded",
            context={"api_url": url},
            original_exception=last_exception
        )

    def _retry_after(self, response: httpx.Response, attempt: int) -> float:
        header = response.headers.get("Retry-After")
        if header:
            try:
                return min(float(header), self.retry_max_delay)
            except ValueError:
                pass
        return self._backoff(attempt)
