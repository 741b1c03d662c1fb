from __future__ import annotations

import httpx
import pytest
from email.utils import format_datetime
from typing import Any, Optional
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

from nginit.utils.http import HTTPClient, retry_after_seconds
from nginit.exceptions import NetworkError, PackageNotFoundError, TransportError

URL = "https://registry.npmjs.org/demo-lib"


def _response(status: int, json: Any = None, text: Optional[str] = None) -> httpx.Response:
    request = httpx.Request("GET", URL)
    if text is not None:
        return httpx.Response(status, text=text, request=request)
    return httpx.Response(status, json=json if json is not None else {}, request=request)


async def _client_with(*side_effect: Any, **kwargs: Any) -> HTTPClient:
    """Build a client whose transport returns/raises ``side_effect`` in order."""
    client = HTTPClient(**kwargs)
    await client._ensure_client()
    assert client._client is not None
    client._client.request = AsyncMock(side_effect=list(side_effect))  # type: ignore[method-assign]
    return client


@pytest.mark.unit
class TestHTTPClientInit:
    """Tests for HTTPClient initialization and configuration."""

    def test_default_values(self) -> None:
        """Test HTTPClient initializes with the registry defaults.

        Retries default to zero so a failing registry costs one timeout
        per request.
        """
        client = HTTPClient()

        assert client.timeout == 10.0
        assert client.max_retries == 0
        assert client.rate_limit_delay == 0.0
        assert client.verify_ssl is True
        assert client.max_concurrency == 10
        assert "ng-init" in client.user_agent

    def test_custom_values(self) -> None:
        """Test HTTPClient stores custom configuration values."""
        client = HTTPClient(
            timeout=3,
            max_retries=2,
            rate_limit_delay=0.5,
            verify_ssl=False,
            user_agent="CustomAgent/1.0",
            max_concurrency=4,
        )

        assert client.timeout == 3
        assert client.max_retries == 2
        assert client.rate_limit_delay == 0.5
        assert client.verify_ssl is False
        assert client.user_agent == "CustomAgent/1.0"
        assert client._semaphore._value == 4

    def test_initial_state(self) -> None:
        """Test no httpx client exists before first use."""
        client = HTTPClient()

        assert client._client is None
        assert client._last_request_time == 0.0


@pytest.mark.unit
class TestHTTPClientLifecycle:
    """Tests for the async context manager and close()."""

    @pytest.mark.asyncio
    async def test_context_manager_creates_and_closes_client(self) -> None:
        """Test entering creates the httpx client and exiting closes it."""
        client = HTTPClient()
        async with client:
            assert isinstance(client._client, httpx.AsyncClient)

        assert client._client is None

    @pytest.mark.asyncio
    async def test_context_manager_closes_on_exception(self) -> None:
        """Test the client is closed even when the body raises."""
        client = HTTPClient()

        with pytest.raises(ValueError):
            async with client:
                raise ValueError("boom")

        assert client._client is None

    @pytest.mark.asyncio
    async def test_ensure_client_is_idempotent(self) -> None:
        """Test repeated _ensure_client calls reuse one httpx client."""
        client = HTTPClient(timeout=4, user_agent="TestAgent")
        await client._ensure_client()
        first = client._client
        await client._ensure_client()

        assert client._client is first
        assert first is not None
        assert first.timeout.read == 4
        assert first.headers["User-Agent"] == "TestAgent"
        await client.close()

    @pytest.mark.asyncio
    async def test_close_without_client_is_noop(self) -> None:
        """Test close() is safe before the client was created."""
        client = HTTPClient()
        await client.close()
        await client.close()
        assert client._client is None


@pytest.mark.unit
class TestHTTPClientGetJson:
    """Tests for get_json success and failure classification."""

    @pytest.mark.asyncio
    async def test_returns_parsed_object(self) -> None:
        """Test a 200 JSON object body is returned as a dict."""
        client = await _client_with(_response(200, {"name": "demo-lib"}))

        data = await client.get_json(URL)

        assert data == {"name": "demo-lib"}
        await client.close()

    @pytest.mark.asyncio
    async def test_per_call_timeout_is_forwarded(self) -> None:
        """Test a per-call timeout reaches httpx as an httpx.Timeout."""
        client = await _client_with(_response(200, {}))

        await client.get_json(URL, timeout=2.5, params={"size": 3})

        _, kwargs = client._client.request.call_args  # type: ignore[union-attr]
        assert kwargs["timeout"].read == 2.5
        assert kwargs["params"] == {"size": 3}
        await client.close()

    @pytest.mark.asyncio
    async def test_404_raises_package_not_found(self) -> None:
        """Test a 404 is reported as PackageNotFoundError, without retry."""
        client = await _client_with(_response(404), max_retries=2)

        with pytest.raises(PackageNotFoundError) as exc_info:
            await client.get_json(URL)

        assert exc_info.value.status_code == 404
        assert client._client.request.call_count == 1  # type: ignore[union-attr]
        await client.close()

    @pytest.mark.asyncio
    async def test_404_is_a_network_error(self) -> None:
        """Test absence handlers that catch NetworkError also see 404s."""
        client = await _client_with(_response(404))

        with pytest.raises(NetworkError):
            await client.get_json(URL)
        await client.close()

    @pytest.mark.asyncio
    async def test_other_4xx_raises_network_error(self) -> None:
        """Test client errors other than 404 and 429 fail immediately."""
        client = await _client_with(_response(403, text="forbidden"), max_retries=3)

        with pytest.raises(NetworkError) as exc_info:
            await client.get_json(URL)

        assert not isinstance(exc_info.value, PackageNotFoundError)
        assert exc_info.value.status_code == 403
        assert client._client.request.call_count == 1  # type: ignore[union-attr]
        await client.close()

    @pytest.mark.asyncio
    async def test_5xx_is_retried_then_raises(self) -> None:
        """Test server errors are retried up to max_retries."""
        client = await _client_with(
            _response(503), _response(502), _response(500), max_retries=2
        )

        with patch("nginit.utils.http.asyncio.sleep", new=AsyncMock()):
            with pytest.raises(NetworkError) as exc_info:
                await client.get_json(URL)

        assert exc_info.value.status_code == 500
        assert client._client.request.call_count == 3  # type: ignore[union-attr]
        await client.close()

    @pytest.mark.asyncio
    async def test_5xx_then_success(self) -> None:
        """Test a retry that succeeds returns the data."""
        client = await _client_with(_response(503), _response(200, {"ok": True}), max_retries=1)

        with patch("nginit.utils.http.asyncio.sleep", new=AsyncMock()):
            data = await client.get_json(URL)

        assert data == {"ok": True}
        await client.close()

    @pytest.mark.asyncio
    async def test_timeout_raises_network_error(self) -> None:
        """Test a timeout becomes NetworkError once retries are exhausted."""
        client = await _client_with(httpx.ReadTimeout("slow"))

        with pytest.raises(NetworkError) as exc_info:
            await client.get_json(URL)

        assert isinstance(exc_info.value.__cause__, httpx.TimeoutException)
        await client.close()

    @pytest.mark.asyncio
    async def test_connect_error_raises_network_error(self) -> None:
        """Test a refused connection becomes NetworkError."""
        client = await _client_with(httpx.ConnectError("refused"))

        with pytest.raises(NetworkError):
            await client.get_json(URL)
        await client.close()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            httpx.ReadError("[Errno 104] Connection reset by peer"),
            httpx.WriteError("broken pipe"),
            httpx.RemoteProtocolError("Server disconnected without sending a response."),
        ],
        ids=["reset", "write", "disconnected"],
    )
    async def test_interrupted_connection_raises_network_error(self, error: Exception) -> None:
        """Test resets and dropped peers are retried and then read as absence."""
        client = await _client_with(error, error, max_retries=1)

        with patch("nginit.utils.http.asyncio.sleep", new=AsyncMock()):
            with pytest.raises(NetworkError) as exc_info:
                await client.get_json(URL)

        assert exc_info.value.__cause__ is error
        assert client._client.request.call_count == 2  # type: ignore[union-attr]
        await client.close()

    @pytest.mark.asyncio
    async def test_reset_then_success(self) -> None:
        """Test a reset followed by a good response returns the data."""
        client = await _client_with(
            httpx.ReadError("reset"), _response(200, {"ok": True}), max_retries=1
        )

        with patch("nginit.utils.http.asyncio.sleep", new=AsyncMock()):
            assert await client.get_json(URL) == {"ok": True}
        await client.close()

    @pytest.mark.asyncio
    async def test_undecodable_body_raises_transport_error(self) -> None:
        """Test a body that cannot be decoded propagates as TransportError.

        TransportError is not a NetworkError, so absence handlers do not
        swallow it.
        """
        client = await _client_with(httpx.DecodingError("bad gzip stream"), max_retries=2)

        with pytest.raises(TransportError) as exc_info:
            await client.get_json(URL)

        assert not isinstance(exc_info.value, NetworkError)
        assert exc_info.value.url == URL
        assert client._client.request.call_count == 1  # type: ignore[union-attr]
        await client.close()

    @pytest.mark.asyncio
    async def test_invalid_json_raises_network_error(self) -> None:
        """Test an unparsable body is reported as NetworkError."""
        client = await _client_with(_response(200, text="<html>oops</html>"))

        with pytest.raises(NetworkError, match="Invalid JSON"):
            await client.get_json(URL)
        await client.close()

    @pytest.mark.asyncio
    async def test_non_object_json_raises_network_error(self) -> None:
        """Test a JSON array body is rejected."""
        client = await _client_with(_response(200, ["a", "b"]))

        with pytest.raises(NetworkError, match="Expected JSON object"):
            await client.get_json(URL)
        await client.close()

    @pytest.mark.asyncio
    async def test_429_waits_for_retry_after(self) -> None:
        """Test a 429 sleeps for Retry-After and then retries."""
        limited = httpx.Response(
            429, headers={"Retry-After": "2"}, request=httpx.Request("GET", URL)
        )
        client = await _client_with(limited, _response(200, {"ok": True}), max_retries=1)

        sleep = AsyncMock()
        with patch("nginit.utils.http.asyncio.sleep", new=sleep):
            data = await client.get_json(URL)

        assert data == {"ok": True}
        sleep.assert_awaited_once_with(2)
        await client.close()

    @pytest.mark.asyncio
    async def test_429_with_http_date(self) -> None:
        """Test an HTTP-date Retry-After is honored instead of failing."""
        limited = httpx.Response(
            429,
            headers={"Retry-After": "Wed, 21 Oct 2015 07:28:00 GMT"},
            request=httpx.Request("GET", URL),
        )
        client = await _client_with(limited, _response(200, {"ok": True}), max_retries=1)

        sleep = AsyncMock()
        with patch("nginit.utils.http.asyncio.sleep", new=sleep):
            data = await client.get_json(URL)

        assert data == {"ok": True}
        sleep.assert_awaited_once_with(0.0)
        await client.close()

    @pytest.mark.asyncio
    async def test_429_wait_is_capped_by_timeout(self) -> None:
        """Test a huge Retry-After never sleeps longer than the timeout."""
        limited = httpx.Response(
            429, headers={"Retry-After": "86400"}, request=httpx.Request("GET", URL)
        )
        client = await _client_with(
            limited, _response(200, {"ok": True}), max_retries=1, timeout=5.0
        )

        sleep = AsyncMock()
        with patch("nginit.utils.http.asyncio.sleep", new=sleep):
            await client.get_json(URL)

        sleep.assert_awaited_once_with(5.0)
        await client.close()


@pytest.mark.unit
class TestRetryAfterSeconds:
    """Tests for retry_after_seconds header parsing."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("2", 2.0),
            (" 3 ", 3.0),
            ("0", 0.0),
            ("-5", 0.0),
            (None, 1.0),
            ("", 1.0),
            ("soon", 1.0),
            ("Wed, 21 Oct 2015 07:28:00 GMT", 0.0),
            ("3600", 10.0),
        ],
    )
    def test_values(self, value: Optional[str], expected: float) -> None:
        assert retry_after_seconds(value, cap=10.0) == expected

    def test_future_date(self) -> None:
        """Test a date in the future waits until then, within the cap."""
        when = datetime.now(timezone.utc) + timedelta(seconds=30)

        delay = retry_after_seconds(format_datetime(when, usegmt=True), cap=60.0)

        assert 25.0 <= delay <= 30.0
