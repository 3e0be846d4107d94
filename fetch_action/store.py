"""
Minimal state store with thunk support.

Dispatching a callable runs it as a thunk with (dispatch, get_state) and
returns its result, so ``await store.dispatch(fetch_action(...))`` works.
Any other value is passed through the reducer.
"""

import threading
from typing import Any, Callable, Dict, List, Optional

from fetch_action.actions import Action, action_types
from fetch_action.utils.logging_config import get_logger

logger = get_logger("store")

Reducer = Callable[[Any, Any], Any]
Listener = Callable[[], None]


class Store:
    """Holds state, applies a reducer to dispatched actions, notifies subscribers."""

    def __init__(self, reducer: Reducer, initial_state: Any = None):
        self._reducer = reducer
        self._state = initial_state
        self._listeners: List[Listener] = []
        self._lock = threading.Lock()

    def get_state(self) -> Any:
        return self._state

    def dispatch(self, action: Any) -> Any:
        if callable(action):
            return action(self.dispatch, self.get_state)

        with self._lock:
            self._state = self._reducer(self._state, action)
            listeners = list(self._listeners)

        logger.debug(f"Dispatched {_action_type(action)}")
        for listener in listeners:
            listener()
        return action

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe


def _action_type(action: Any) -> Optional[str]:
    if isinstance(action, Action):
        return action.type
    if isinstance(action, dict):
        return action.get("type")
    return type(action).__name__


def initial_request_state() -> Dict[str, Any]:
    return {
        "loading": False,
        "data": None,
        "error": None,
        "status_code": None,
        "headers": None,
        "aborted": False,
        "abort_controller": None,
    }


def request_reducer(prefix: str) -> Reducer:
    """
    Reducer for the actions built by ``create_lifecycle_actions(prefix)``.

    Unknown actions leave the state unchanged.
    """
    types = action_types(prefix)

    def reducer(state: Optional[Dict[str, Any]], action: Any) -> Dict[str, Any]:
        if state is None:
            state = initial_request_state()
        if not isinstance(action, Action):
            return state

        if action.type == types["request"]:
            return {
                **state,
                "loading": True,
                "error": None,
                "aborted": False,
                "abort_controller": (action.meta or {}).get("abort_controller"),
            }
        if action.type == types["receive"]:
            meta = action.meta or {}
            return {
                **state,
                "loading": False,
                "data": action.payload,
                "error": None,
                "status_code": meta.get("status_code"),
                "headers": dict(meta["headers"]) if meta.get("headers") is not None else None,
                "abort_controller": None,
            }
        if action.type == types["error"]:
            return {
                **state,
                "loading": False,
                "error": action.payload,
                "status_code": (action.meta or {}).get("status_code"),
                "abort_controller": None,
            }
        if action.type == types["abort"]:
            return {**state, "loading": False, "aborted": True, "abort_controller": None}
        return state

    return reducer
