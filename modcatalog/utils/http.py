"""
HTTP client utilities for modcatalog.

Catalogs are static JSON documents, so the client only needs to fetch one
URL reliably: transient failures (timeouts, dropped connections, 5xx) are
retried with jittered exponential backoff, ``429 Too Many Requests`` honours
``Retry-After``, and every other 4xx fails on the first reply.
"""

from __future__ import annotations

import httpx
import random
import asyncio
from typing import Any, Optional

from modcatalog.utils.logger import get_logger
from modcatalog.__version__ import __version__
from modcatalog.exceptions import NetworkError
from modcatalog.constants import (
    DEFAULT_TIMEOUT,
    DEFAULT_MAX_RETRIES,
    MAX_RATE_LIMIT_RETRIES,
    USER_AGENT_TEMPLATE,
)

logger = get_logger("http")


class HTTPClient:
    """Asynchronous catalog fetcher built on :class:`httpx.AsyncClient`.

    Args:
        timeout: Request timeout in seconds.
        max_retries: Retries after the first attempt for transient failures.
        verify_ssl: Whether to verify SSL certificates.
        user_agent: Custom User-Agent header value.

    Example:
        >>> async with HTTPClient() as client:
        ...     catalog = await client.get_json("https://example.org/index.json")
    """

    def __init__(
        self,
        *,
        timeout: int = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        verify_ssl: bool = True,
        user_agent: Optional[str] = None,
    ) -> None:
        self.timeout = timeout
        self.max_retries = max_retries
        self.verify_ssl = verify_ssl
        self.user_agent = user_agent or USER_AGENT_TEMPLATE.format(version=__version__)

        self._client: Optional[httpx.AsyncClient] = None
        self._max_429_retries: int = MAX_RATE_LIMIT_RETRIES

    async def __aenter__(self) -> "HTTPClient":
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        await self.close()

    async def _ensure_client(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                http2=True,
                verify=self.verify_ssl,
                follow_redirects=True,
                headers={"User-Agent": self.user_agent},
            )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request_with_retry(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send a request and return the first successful response.

        A ``429`` reply sleeps for ``Retry-After`` seconds and uses up an
        attempt; more than ``_max_429_retries`` of them abort the request.

        Raises:
            NetworkError: 4xx reply, too many 429 replies, or all attempts
                failed.
        """
        await self._ensure_client()
        assert self._client is not None

        # Catalog URLs are often pasted with surrounding quotes.
        target = url.strip().strip("\"'")
        attempts = self.max_retries + 1
        throttled = 0
        last_exc: Optional[Exception] = None

        for attempt in range(1, attempts + 1):
            try:
                response = await self._client.request(method, target, **kwargs)
            except (httpx.TimeoutException, httpx.NetworkError) as exc:
                last_exc = exc
                logger.warning(
                    "%s fetching %s (%d/%d)",
                    type(exc).__name__,
                    target,
                    attempt,
                    attempts,
                )
            else:
                if response.status_code == 429:
                    throttled += 1
                    if throttled > self._max_429_retries:
                        raise NetworkError(
                            f"Rate limit exceeded after {self._max_429_retries} retries",
                            url=target,
                            status_code=429,
                        )
                    wait = _retry_after_seconds(response)
                    logger.warning("Rate limited by %s, waiting %ds", target, wait)
                    await asyncio.sleep(wait)
                    continue

                if response.status_code < 400:
                    return response

                try:
                    response.raise_for_status()
                except httpx.HTTPStatusError as exc:
                    if response.status_code < 500:
                        raise NetworkError(
                            f"HTTP {response.status_code} error for {target}",
                            url=target,
                            status_code=response.status_code,
                            response_body=response.text,
                        ) from exc
                    last_exc = exc
                    logger.warning(
                        "HTTP %d from %s (%d/%d)",
                        response.status_code,
                        target,
                        attempt,
                        attempts,
                    )

            if attempt < attempts:
                delay = _backoff_delay(attempt)
                logger.debug("Retrying %s in %.2fs", target, delay)
                await asyncio.sleep(delay)

        raise NetworkError(
            f"Request failed after {attempts} attempts: {target}",
            url=target,
        ) from last_exc

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """Perform a GET request with retry logic."""
        return await self._request_with_retry("GET", url, **kwargs)

    async def get_json(self, url: str, **kwargs: Any) -> Any:
        """Fetch a URL and decode the JSON body.

        Any JSON document is returned; callers validate its shape.

        Raises:
            NetworkError: Request failure or a body that is not JSON.
        """
        headers = {"Accept": "application/json", **kwargs.pop("headers", {})}
        response = await self.get(url, headers=headers, **kwargs)

        try:
            return response.json()
        except ValueError as exc:
            raise NetworkError(
                f"Invalid JSON response from {url}",
                url=url,
                response_body=response.text,
            ) from exc


def _backoff_delay(attempt: int) -> float:
    """Seconds to wait after failed *attempt* (1-based)."""
    return 2 ** (attempt - 1) + random.uniform(0.0, 0.3)


def _retry_after_seconds(response: httpx.Response) -> int:
    """Read ``Retry-After`` as whole seconds, defaulting to 1."""
    try:
        return max(int(response.headers.get("Retry-After", "1")), 0)
    except ValueError:
        return 1
