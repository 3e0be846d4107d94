"""
HTTP transport for fetch thunks.

Wraps httpx.AsyncClient with:
- Connection pooling and timeouts from ClientConfig
- A fetch-style request init mapped onto httpx arguments
- Cancellation by racing the request against an AbortSignal
- httpx exceptions converted to the fetch_action hierarchy

Any object with an ``async send(url, init, signal)`` method returning an
httpx.Response can stand in for HttpxTransport.
"""

import asyncio
from typing import Any, Dict, Optional

import httpx

from fetch_action.abort import AbortSignal
from fetch_action.config import ClientConfig, get_config
from fetch_action.utils.logging_config import get_logger
from fetch_action.utils.exceptions import (
    FetchAbortedError,
    FetchTimeoutError,
    TransportError,
)

logger = get_logger("transport")

# Request init keys passed straight through to httpx.AsyncClient.request
PASSTHROUGH_KEYS = (
    "headers",
    "params",
    "content",
    "json",
    "data",
    "files",
    "cookies",
    "timeout",
    "follow_redirects",
)


def build_request_kwargs(init: Dict[str, Any]) -> Dict[str, Any]:
    """
    Map a fetch-style request init onto httpx.AsyncClient.request kwargs.

    ``body`` is accepted as an alias of ``content``. Unknown keys (``mode``,
    ``credentials``, ``signal`` and the like) are ignored.
    """
    kwargs: Dict[str, Any] = {
        "method": str(init.get("method") or "GET").upper(),
    }
    for key in PASSTHROUGH_KEYS:
        if init.get(key) is not None:
            kwargs[key] = init[key]

    body = init.get("body")
    if body is not None and "content" not in kwargs:
        kwargs["content"] = body

    return kwargs


class HttpxTransport:
    """
    Default transport backed by httpx.AsyncClient.

    Example:
        >>> async with HttpxTransport() as transport:
        ...     response = await transport.send("https://example.com", {}, None)
        ...     print(response.status_code)
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            config: Client configuration. If None, uses the global config.
            client: Pre-built client to use instead of creating one.
        """
        self.config = config or get_config().client
        self._owns_client = client is None

        if client is None:
            headers = {"User-Agent": self.config.user_agent}
            headers.update(self.config.default_headers)
            client = httpx.AsyncClient(
                base_url=self.config.base_url,
                timeout=httpx.Timeout(
                    self.config.timeout,
                    connect=self.config.connect_timeout,
                ),
                follow_redirects=self.config.follow_redirects,
                headers=headers,
            )
        self._client = client

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()
            logger.debug("HttpxTransport closed")

    async def send(
        self,
        url: str,
        init: Dict[str, Any],
        signal: Optional[AbortSignal] = None,
    ) -> httpx.Response:
        """
        Issue one request and return the fully read response.

        Raises:
            FetchAbortedError: If the signal aborts before a response arrives.
            FetchTimeoutError: If httpx times out.
            TransportError: For any other network-level failure.
        """
        kwargs = build_request_kwargs(init)
        method = kwargs.pop("method")
        logger.debug(f"{method} {url}")

        if signal is not None and signal.aborted:
            raise FetchAbortedError(url=url)

        try:
            if signal is None:
                return await self._client.request(method, url, **kwargs)
            return await self._race(self._client.request(method, url, **kwargs), signal, url)

        except httpx.TimeoutException as e:
            raise FetchTimeoutError(
                f"Request timed out: {e}" if str(e) else "Request timed out",
                url=url,
                timeout_seconds=self.config.timeout,
            ) from e
        except httpx.TransportError as e:
            raise TransportError(
                str(e) or e.__class__.__name__,
                url=url,
                original_error=e,
            ) from e
        except httpx.InvalidURL as e:
            raise TransportError(str(e), url=url, original_error=e) from e

    async def _race(self, request, signal: AbortSignal, url: str) -> httpx.Response:
        """Await ``request`` unless ``signal`` aborts first."""
        request_task = asyncio.ensure_future(request)
        abort_task = asyncio.ensure_future(signal.wait())
        try:
            done, _ = await asyncio.wait(
                {request_task, abort_task},
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            for task in (request_task, abort_task):
                if not task.done():
                    task.cancel()

        if request_task in done:
            return request_task.result()

        # Abort won; let the cancelled request unwind before reporting it.
        await asyncio.wait({request_task})
        if not request_task.cancelled() and request_task.exception() is not None:
            logger.debug(f"Request for {url} failed while aborting: {request_task.exception()}")
        raise FetchAbortedError(url=url)
