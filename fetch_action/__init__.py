"""
fetch_action

Builds async thunks that fetch a URL once and report the request lifecycle
(request, receive, error, abort) to a state store as actions.

Package Structure:
    fetch_action/
    ├── __init__.py              # This file - package entry point
    ├── fetch_action_creator.py  # fetch_action() and the fetch thunk
    ├── lifecycle.py             # LifecycleActions and shared type aliases
    ├── abort.py                 # AbortController / AbortSignal
    ├── transport.py             # httpx-backed transport
    ├── actions.py               # Standard lifecycle Action creators
    ├── store.py                 # Minimal thunk-aware Store and reducer
    ├── config.py                # Configuration management
    ├── main.py                  # CLI entry point
    └── utils/                   # Logging and exceptions
"""

from fetch_action.abort import AbortController, AbortSignal
from fetch_action.actions import Action, create_lifecycle_actions
from fetch_action.fetch_action_creator import (
    MAX_ERROR_STATUS,
    MIN_ERROR_STATUS,
    fetch_action,
    fetch_action_from,
    parse_json_or_text,
)
from fetch_action.lifecycle import LifecycleActions, resolve_request_init
from fetch_action.store import Store, request_reducer
from fetch_action.transport import HttpxTransport

__version__ = "0.1.0"

__all__ = [
    "fetch_action",
    "fetch_action_from",
    "parse_json_or_text",
    "MIN_ERROR_STATUS",
    "MAX_ERROR_STATUS",
    "LifecycleActions",
    "resolve_request_init",
    "AbortController",
    "AbortSignal",
    "HttpxTransport",
    "Action",
    "create_lifecycle_actions",
    "Store",
    "request_reducer",
]
