"""
Fetch action creator.

Builds a thunk that performs one HTTP request and reports its lifecycle to
a store through caller-supplied action creators:

    request  -> dispatched before the request is sent
    receive  -> dispatched with (content, status_code, headers) on success
    error    -> dispatched with (message, status_code) on failure
    abort    -> dispatched when the request's AbortSignal fires

Usage:
    from fetch_action import Store, fetch_action, create_lifecycle_actions

    items = create_lifecycle_actions("ITEMS")
    thunk = fetch_action(
        "https://api.example.com/items",
        lambda: {"headers": {"Authorization": f"Bearer {token()}"}},
        items.request,
        items.receive,
        items.error,
        items.abort,
        lambda state: not state["loading"],
    )
    await store.dispatch(thunk)

The awaitable returned by the thunk never raises for fetch failures; they
become error actions, or are logged and dropped when no error creator is set.
"""

import json
from typing import Any, Callable, Optional, Union

import httpx

from fetch_action.abort import AbortController
from fetch_action.lifecycle import (
    AbortActionCreator,
    Conditional,
    Content,
    Dispatch,
    ErrorActionCreator,
    FetchThunk,
    InitSource,
    LifecycleActions,
    ReceiveActionCreator,
    RequestActionCreator,
    StateGetter,
    resolve_request_init,
)
from fetch_action.transport import HttpxTransport
from fetch_action.utils.logging_config import get_logger
from fetch_action.utils.exceptions import (
    ContentParseError,
    FetchAbortedError,
    FetchActionError,
    FetchError,
    HTTPStatusFetchError,
)

logger = get_logger("fetch_action_creator")

MIN_ERROR_STATUS = 400
MAX_ERROR_STATUS = 600

DEFAULT_ERROR_MESSAGE = "Script error"


async def parse_json_or_text(response: httpx.Response, url: Optional[str] = None) -> Content:
    """
    Parse a response body as JSON, falling back to text.

    The body is read once and kept on the response, so a failed JSON
    decode still leaves the raw bytes available for the text fallback.

    Raises:
        ContentParseError: If the body cannot be read or decoded as text.
    """
    try:
        await response.aread()
    except httpx.HTTPError as e:
        raise ContentParseError(url=url, original_error=e) from e

    try:
        return response.json()
    except ValueError:
        # Empty bodies and plain-text pages land here.
        pass

    try:
        return response.text
    except (LookupError, ValueError) as e:
        raise ContentParseError(url=url, original_error=e) from e


def is_error_status(status_code: int) -> bool:
    """Statuses in [400, 600) take the error path."""
    return MIN_ERROR_STATUS <= status_code < MAX_ERROR_STATUS


def error_message(error: Union[BaseException, str]) -> str:
    """Pick the message handed to the error action creator."""
    if isinstance(error, str):
        return error or DEFAULT_ERROR_MESSAGE
    if isinstance(error, FetchError):
        message = error.action_message
    elif isinstance(error, FetchActionError):
        message = error.message
    else:
        message = getattr(error, "message", None) or str(error)
    if isinstance(message, str) and message:
        return message
    return DEFAULT_ERROR_MESSAGE


def error_status_code(error: Union[BaseException, str]) -> Optional[int]:
    return getattr(error, "status_code", None) or None


def _content_to_message(content: Content) -> str:
    if isinstance(content, str):
        return content
    return json.dumps(content, separators=(",", ":"))


def fetch_action_from(
    url: str,
    request_init: Optional[InitSource] = None,
    actions: Optional[LifecycleActions] = None,
    conditional: Optional[Conditional] = None,
    *,
    transport: Any = None,
    abort_controller_factory: Optional[Callable[[], AbortController]] = AbortController,
) -> FetchThunk:
    """
    Build a fetch thunk from a LifecycleActions bundle.

    Args:
        url: Request URL (relative URLs resolve against the client base_url)
        request_init: Request options dict, or a zero-arg callable returning one
        actions: Lifecycle action creators; any slot may be None
        conditional: Predicate on store state; a falsy result skips the fetch
        transport: Object with ``async send(url, init, signal)``; defaults to
            a short-lived HttpxTransport built from the global config
        abort_controller_factory: Creates the AbortController for each call;
            None disables cancellation and abort actions

    Returns:
        ``async thunk(dispatch, get_state) -> None``
    """
    actions = actions or LifecycleActions()

    async def thunk(dispatch: Dispatch, get_state: StateGetter) -> None:
        def handle_error(error: Union[BaseException, str]) -> None:
            if isinstance(error, FetchAbortedError):
                # The abort listener already reported this outcome.
                logger.debug(f"Fetch of {url} aborted")
                return

            if actions.error is None:
                logger.warning(f"Dropping fetch error for {url}: {error}")
                return

            try:
                dispatch(actions.error(error_message(error), error_status_code(error)))
            except Exception:
                logger.exception(f"Error action dispatch failed for {url}")

        try:
            if conditional is not None and not conditional(get_state()):
                logger.debug(f"Conditional rejected fetch of {url}")
                return None
        except Exception as e:
            handle_error(e)
            return None

        abort_controller = None
        signal = None
        if abort_controller_factory is not None:
            abort_controller = abort_controller_factory()
            signal = abort_controller.signal

            if actions.abort is not None:
                create_abort_action = actions.abort
                signal.add_listener(lambda: dispatch(create_abort_action()))

        try:
            if actions.request is not None:
                dispatch(actions.request(abort_controller))

            init = resolve_request_init(request_init)
            init["signal"] = signal

            active_transport = transport if transport is not None else HttpxTransport()
            try:
                response = await active_transport.send(url, init, signal)
                content = await parse_json_or_text(response, url)
            finally:
                if transport is None:
                    await active_transport.aclose()

            if is_error_status(response.status_code):
                raise HTTPStatusFetchError(
                    _content_to_message(content),
                    status_code=response.status_code,
                    url=url,
                )

            logger.debug(f"Fetched {url} with status {response.status_code}")

        except Exception as e:
            handle_error(e)
            return None

        if actions.receive is not None:
            try:
                dispatch(actions.receive(content, response.status_code, response.headers))
            except Exception:
                # Receive already won; reporting an error now would report both outcomes.
                logger.exception(f"Receive action dispatch failed for {url}")

        return None

    return thunk


def fetch_action(
    url: str,
    request_init: Optional[InitSource] = None,
    create_request_action: Optional[RequestActionCreator] = None,
    create_receive_action: Optional[ReceiveActionCreator] = None,
    create_error_action: Optional[ErrorActionCreator] = None,
    create_abort_action: Optional[AbortActionCreator] = None,
    conditional: Optional[Conditional] = None,
    *,
    transport: Any = None,
    abort_controller_factory: Optional[Callable[[], AbortController]] = AbortController,
) -> FetchThunk:
    """
    Build a thunk that fetches ``url`` and dispatches lifecycle actions.

    Each action creator is optional. See ``fetch_action_from`` for the
    meaning of the remaining arguments.

    Example:
        >>> thunk = fetch_action("/api/items", {}, None, receive_items)
        >>> await store.dispatch(thunk)
    """
    return fetch_action_from(
        url,
        request_init,
        LifecycleActions(
            request=create_request_action,
            receive=create_receive_action,
            error=create_error_action,
            abort=create_abort_action,
        ),
        conditional,
        transport=transport,
        abort_controller_factory=abort_controller_factory,
    )


fetch_action.default = fetch_action
