"""
Types shared by fetch thunks and their callers.

A fetch thunk reports its lifecycle through up to four action creators,
grouped in LifecycleActions. Each slot is optional on its own.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Union

import httpx

from fetch_action.abort import AbortController

Action = Any
Content = Union[Dict[str, Any], list, str, int, float, bool, None]

RequestInit = Dict[str, Any]
InitSource = Union[RequestInit, Callable[[], RequestInit]]

Conditional = Callable[[Any], bool]
Dispatch = Callable[[Action], Any]
StateGetter = Callable[[], Any]
FetchThunk = Callable[[Dispatch, StateGetter], Awaitable[None]]

RequestActionCreator = Callable[[Optional[AbortController]], Action]
ReceiveActionCreator = Callable[[Content, int, httpx.Headers], Action]
ErrorActionCreator = Callable[[str, Optional[int]], Action]
AbortActionCreator = Callable[[], Action]


@dataclass(frozen=True)
class LifecycleActions:
    """Optional action creators for each stage of a fetch."""
    request: Optional[RequestActionCreator] = None
    receive: Optional[ReceiveActionCreator] = None
    error: Optional[ErrorActionCreator] = None
    abort: Optional[AbortActionCreator] = None


def resolve_request_init(init: Optional[InitSource]) -> RequestInit:
    """
    Return the request init for this call.

    A callable is invoked every time, so it can read values that change
    between calls (auth tokens, for instance). The result is copied so the
    caller's dict is never mutated.
    """
    if init is None:
        return {}
    if callable(init):
        init = init()
    return dict(init or {})
