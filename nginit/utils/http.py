"""
HTTP client utilities for ng-init.

This module provides an asynchronous HTTP client with bounded per-call
timeouts, optional retries with backoff, rate limiting, concurrency
control, and a classification of failures that the registry layer relies
on:

- **404** → :class:`~nginit.exceptions.PackageNotFoundError`
- **timeouts, refused or reset connections, dropped peers, error statuses,
  bad JSON** → :class:`~nginit.exceptions.NetworkError` (caller treats data
  as absent)
- **a body that cannot be decoded, or an unusable proxy or URL scheme** →
  :class:`~nginit.exceptions.TransportError` (propagates)
"""

from __future__ import annotations

import time
import httpx
import random
import asyncio
from email.utils import parsedate_to_datetime
from datetime import datetime, timezone
from typing import Any, Dict, Optional, cast

from nginit.utils.logger import get_logger
from nginit.__version__ import __version__
from nginit.exceptions import NetworkError, PackageNotFoundError, TransportError
from nginit.constants import (
    DEFAULT_TIMEOUT,
    DEFAULT_MAX_RETRIES,
    USER_AGENT_TEMPLATE,
)

logger = get_logger("http")


def retry_after_seconds(value: Optional[str], *, cap: float) -> float:
    """Seconds to wait for a ``Retry-After`` header, at most ``cap``.

    Accepts both forms allowed by RFC 9110: a delay in seconds or an
    HTTP-date. A missing or unparsable header waits one second.

    Examples:
        >>> retry_after_seconds("2", cap=10)
        2.0
        >>> retry_after_seconds("3600", cap=10)
        10.0
        >>> retry_after_seconds("soon", cap=10)
        1.0
    """
    delay = 1.0
    if value:
        value = value.strip()
        try:
            delay = float(int(value))
        except ValueError:
            try:
                when = parsedate_to_datetime(value)
            except (TypeError, ValueError):
                logger.debug("Ignoring unparsable Retry-After %r", value)
            else:
                if when.tzinfo is None:
                    when = when.replace(tzinfo=timezone.utc)
                delay = (when - datetime.now(timezone.utc)).total_seconds()
    return max(0.0, min(delay, cap))


class HTTPClient:
    """Asynchronous HTTP client with retries, rate limiting, and concurrency control.

    Args:
        timeout: Default request timeout in seconds.
        max_retries: Retry attempts for timeouts, connect failures and 5xx.
        rate_limit_delay: Minimum delay (seconds) between requests.
        verify_ssl: Whether to verify SSL certificates.
        user_agent: Custom User-Agent header value.
        max_concurrency: Maximum number of concurrent requests.

    Example:
        >>> async with HTTPClient(timeout=10) as client:
        ...     data = await client.get_json("https://registry.npmjs.org/rxjs")
    """

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        rate_limit_delay: float = 0.0,
        verify_ssl: bool = True,
        user_agent: Optional[str] = None,
        max_concurrency: int = 10,
    ) -> None:
        self.timeout = timeout
        self.max_retries = max_retries
        self.rate_limit_delay = rate_limit_delay
        self.verify_ssl = verify_ssl
        self.user_agent = user_agent or USER_AGENT_TEMPLATE.format(version=__version__)
        self.max_concurrency = max_concurrency

        self._client: Optional[httpx.AsyncClient] = None
        self._last_request_time: float = 0.0
        self._rate_limit_lock = asyncio.Lock()
        self._semaphore = asyncio.Semaphore(max_concurrency)
        self._max_429_retries: int = 5

    async def __aenter__(self) -> "HTTPClient":
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        await self.close()

    async def _ensure_client(self) -> None:
        """Initialize the underlying httpx client if needed."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                http2=True,
                verify=self.verify_ssl,
                follow_redirects=True,
                headers={
                    "User-Agent": self.user_agent,
                    "Accept": "application/json",
                },
            )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _rate_limit(self) -> None:
        """Enforce a minimum delay between outgoing requests."""
        if self.rate_limit_delay <= 0:
            return

        async with self._rate_limit_lock:
            now = time.time()
            elapsed = now - self._last_request_time

            if elapsed < self.rate_limit_delay:
                delay = self.rate_limit_delay - elapsed
                self._last_request_time = now + delay
                await asyncio.sleep(delay)
            else:
                self._last_request_time = now

    async def _request_with_retry(
        self,
        method: str,
        url: str,
        *,
        timeout: Optional[float] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Execute an HTTP request with retry and backoff logic."""
        await self._ensure_client()
        assert self._client is not None

        clean_url = url.strip().strip("\"'")
        if timeout is not None:
            kwargs["timeout"] = httpx.Timeout(timeout)

        last_exc: Optional[Exception] = None
        last_status: Optional[int] = None
        retry_429_count = 0

        for attempt in range(self.max_retries + 1):
            try:
                await self._rate_limit()

                async with self._semaphore:
                    response = await self._client.request(method, clean_url, **kwargs)

                if response.status_code == 429:
                    retry_429_count += 1
                    if retry_429_count > self._max_429_retries:
                        raise NetworkError(
                            f"Rate limit exceeded after {self._max_429_retries} retries",
                            url=clean_url,
                            status_code=429,
                        )
                    retry_after = retry_after_seconds(
                        response.headers.get("Retry-After"), cap=self.timeout
                    )
                    logger.warning(
                        "Rate limited (429), retrying after %.1fs (%d/%d)",
                        retry_after,
                        retry_429_count,
                        self._max_429_retries,
                    )
                    await asyncio.sleep(retry_after)
                    continue

                if response.status_code == 404:
                    raise PackageNotFoundError(
                        f"Resource not found: {clean_url}",
                        url=clean_url,
                        status_code=404,
                    )

                if 400 <= response.status_code < 500:
                    raise NetworkError(
                        f"HTTP {response.status_code} error for {clean_url}",
                        url=clean_url,
                        status_code=response.status_code,
                        response_body=response.text,
                    )

                if response.status_code >= 500:
                    last_status = response.status_code
                    logger.warning(
                        "HTTP %d error (%d/%d): %s",
                        response.status_code,
                        attempt + 1,
                        self.max_retries + 1,
                        clean_url,
                    )
                else:
                    return response

            except httpx.TimeoutException as exc:
                last_exc = exc
                logger.warning(
                    "Request timeout (%d/%d): %s",
                    attempt + 1,
                    self.max_retries + 1,
                    clean_url,
                )

            except httpx.ConnectError as exc:
                last_exc = exc
                logger.warning(
                    "Connection failed (%d/%d): %s",
                    attempt + 1,
                    self.max_retries + 1,
                    exc,
                )

            except (httpx.NetworkError, httpx.RemoteProtocolError) as exc:
                # Reset or dropped connection, retried like a timeout
                last_exc = exc
                logger.warning(
                    "Connection interrupted (%d/%d): %s",
                    attempt + 1,
                    self.max_retries + 1,
                    exc,
                )

            except (httpx.DecodingError, httpx.TransportError) as exc:
                # Undecodable body, or a proxy or scheme that cannot work at all
                raise TransportError(
                    f"Transport failure while reading {clean_url}",
                    url=clean_url,
                    original_error=exc,
                ) from exc

            if attempt < self.max_retries:
                delay = (2**attempt) + random.uniform(0.0, 0.3)
                logger.debug("Retrying in %.2fs", delay)
                await asyncio.sleep(delay)

        raise NetworkError(
            f"Request failed after {self.max_retries + 1} attempt(s): {clean_url}",
            url=clean_url,
            status_code=last_status,
        ) from last_exc

    async def get(
        self,
        url: str,
        *,
        timeout: Optional[float] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Perform a GET request with retry logic."""
        return await self._request_with_retry("GET", url, timeout=timeout, **kwargs)

    async def get_json(
        self,
        url: str,
        *,
        timeout: Optional[float] = None,
        **kwargs: Any,
    ) -> Dict[str, Any]:
        """Fetch a URL and parse the response body as a JSON object.

        Raises:
            PackageNotFoundError: The server answered 404.
            NetworkError: The request failed or the body is not a JSON object.
            TransportError: The body could not be decoded, or the proxy or URL
                scheme is unusable.
        """
        response = await self.get(url, timeout=timeout, **kwargs)

        try:
            data = response.json()
        except ValueError as exc:
            raise NetworkError(
                f"Invalid JSON response from {url}",
                url=url,
                response_body=response.text,
            ) from exc

        if not isinstance(data, dict):
            raise NetworkError(
                f"Expected JSON object from {url}",
                url=url,
                response_body=response.text,
            )

        return cast(Dict[str, Any], data)
