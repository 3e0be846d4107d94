"""
Unit tests for HttpxTransport.

Tests request init mapping, exception conversion and signal racing.
"""

import asyncio
import pytest
from unittest.mock import patch

import httpx

from fetch_action.abort import AbortController
from fetch_action.config import ClientConfig, set_config
from fetch_action.transport import HttpxTransport, build_request_kwargs
from fetch_action.utils.exceptions import (
    FetchAbortedError,
    FetchTimeoutError,
    TransportError,
)


# =============================================================================
# Request Kwargs Tests
# =============================================================================

class TestBuildRequestKwargs:
    """Tests for mapping fetch-style init onto httpx arguments."""

    def test_defaults_to_get(self):
        assert build_request_kwargs({}) == {"method": "GET"}

    def test_method_is_uppercased(self):
        assert build_request_kwargs({"method": "delete"})["method"] == "DELETE"

    def test_body_maps_to_content(self):
        kwargs = build_request_kwargs({"method": "PUT", "body": "payload"})
        assert kwargs["content"] == "payload"

    def test_content_wins_over_body(self):
        kwargs = build_request_kwargs({"body": "ignored", "content": b"kept"})
        assert kwargs["content"] == b"kept"

    def test_passthrough_and_unknown_keys(self):
        kwargs = build_request_kwargs({
            "headers": {"X-Trace": "1"},
            "params": {"page": 2},
            "json": {"a": 1},
            "timeout": 3.0,
            "mode": "cors",
            "credentials": "include",
            "signal": object(),
        })

        assert kwargs == {
            "method": "GET",
            "headers": {"X-Trace": "1"},
            "params": {"page": 2},
            "json": {"a": 1},
            "timeout": 3.0,
        }

    def test_none_values_are_skipped(self):
        assert build_request_kwargs({"headers": None, "body": None}) == {"method": "GET"}


# =============================================================================
# Client Construction Tests
# =============================================================================

class TestHttpxTransportInit:
    """Tests for HttpxTransport initialization."""

    @pytest.mark.asyncio
    async def test_builds_client_from_config(self, test_config):
        transport = HttpxTransport(test_config.client)

        assert transport._client.headers["User-Agent"] == "fetch-action-tests/1.0"
        assert transport._client.headers["Accept"] == "application/json"
        assert transport._client.base_url.host == "testserver"
        assert transport._client.timeout.connect == 2.0

        await transport.aclose()
        assert transport._client.is_closed

    @pytest.mark.asyncio
    async def test_uses_global_config_when_none(self, test_config):
        set_config(test_config)

        async with HttpxTransport() as transport:
            assert transport.config is test_config.client

    @pytest.mark.asyncio
    async def test_injected_client_is_not_closed(self):
        client = httpx.AsyncClient()
        transport = HttpxTransport(ClientConfig(), client=client)

        await transport.aclose()

        assert client.is_closed is False
        await client.aclose()


# =============================================================================
# Send Tests
# =============================================================================

class TestSend:
    """Tests for HttpxTransport.send."""

    @pytest.mark.asyncio
    async def test_returns_response(self, make_transport):
        transport = make_transport(lambda request: httpx.Response(200, json={"ok": True}))

        response = await transport.send("/ping", {}, None)

        assert response.status_code == 200
        assert response.json() == {"ok": True}

    @pytest.mark.asyncio
    async def test_error_statuses_are_returned_not_raised(self, make_transport):
        transport = make_transport(lambda request: httpx.Response(500, text="down"))

        response = await transport.send("/ping", {}, AbortController().signal)

        assert response.status_code == 500

    @pytest.mark.asyncio
    async def test_connect_error_converted(self, make_transport):
        def refuse(request):
            raise httpx.ConnectError("Connection refused", request=request)

        with pytest.raises(TransportError) as exc_info:
            await make_transport(refuse).send("/ping", {}, None)

        assert exc_info.value.status_code is None
        assert exc_info.value.message == "Connection refused"
        assert isinstance(exc_info.value.original_error, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_timeout_converted(self, make_transport):
        def slow(request):
            raise httpx.ConnectTimeout("connect timed out", request=request)

        with pytest.raises(FetchTimeoutError) as exc_info:
            await make_transport(slow).send("/ping", {}, None)

        assert exc_info.value.timeout_seconds == 5.0
        assert "timed out" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_already_aborted_signal_skips_request(self, make_transport):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200)

        controller = AbortController()
        controller.abort()

        with pytest.raises(FetchAbortedError):
            await make_transport(handler).send("/ping", {}, controller.signal)

        assert calls == []

    @pytest.mark.asyncio
    async def test_abort_cancels_in_flight_request(self, make_transport):
        started = asyncio.Event()
        cancelled = asyncio.Event()

        async def hang(request):
            started.set()
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.set()
                raise
            return httpx.Response(200)

        controller = AbortController()
        send = asyncio.ensure_future(
            make_transport(hang).send("/ping", {}, controller.signal)
        )
        await asyncio.wait_for(started.wait(), timeout=5)
        controller.abort()

        with pytest.raises(FetchAbortedError):
            await asyncio.wait_for(send, timeout=5)
        assert cancelled.is_set()

    @pytest.mark.asyncio
    async def test_caller_cancellation_propagates(self, make_transport):
        started = asyncio.Event()

        async def hang(request):
            started.set()
            await asyncio.sleep(10)
            return httpx.Response(200)

        send = asyncio.ensure_future(
            make_transport(hang).send("/ping", {}, AbortController().signal)
        )
        await asyncio.wait_for(started.wait(), timeout=5)
        send.cancel()

        with pytest.raises(asyncio.CancelledError):
            await send

    @pytest.mark.asyncio
    async def test_invalid_url_converted(self):
        transport = HttpxTransport(ClientConfig())

        with patch.object(transport._client, "request", side_effect=httpx.InvalidURL("bad url")):
            with pytest.raises(TransportError) as exc_info:
                await transport.send("http://", {}, None)

        assert exc_info.value.message == "bad url"
        await transport.aclose()
