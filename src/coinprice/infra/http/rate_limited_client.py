import asyncio
import logging
import time

import httpx
from tenacity import before_sleep_log, retry, retry_if_exception_type, stop_after_attempt, wait_exponential

logger = logging.getLogger(__name__)


class RateLimitedClient:
    """Shared async HTTP client: interval-based rate limiting plus a per-call deadline.

    ``timeout`` bounds the whole ``get``, including the wait for a rate-limit
    slot and any retries; exceeding it raises ``TimeoutError``. Only
    connection failures are retried. HTTP error statuses are returned to
    the caller untouched.
    """

    def __init__(
        self,
        rate_per_second: float = 10.0,
        timeout: float = 5.0,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._min_interval = 1.0 / rate_per_second
        self._last_request_time = 0.0
        self._timeout = timeout
        self._lock = asyncio.Lock()
        self._client = httpx.AsyncClient(timeout=timeout, headers=headers, transport=transport)

    async def _wait_for_slot(self) -> None:
        async with self._lock:
            now = time.monotonic()
            elapsed = now - self._last_request_time
            if elapsed < self._min_interval:
                await asyncio.sleep(self._min_interval - elapsed)
            self._last_request_time = time.monotonic()

    async def get(self, url: str, params: dict | None = None) -> httpx.Response:
        async with asyncio.timeout(self._timeout):
            return await self._get_with_retry(url, params)

    @retry(
        retry=retry_if_exception_type(httpx.ConnectError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _get_with_retry(self, url: str, params: dict | None) -> httpx.Response:
        await self._wait_for_slot()
        return await self._client.get(url, params=params)

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "RateLimitedClient":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
