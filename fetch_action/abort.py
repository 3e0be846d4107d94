"""
Cooperative cancellation primitives.

An AbortController owns an AbortSignal. Calling ``abort()`` marks the
signal as aborted, runs its listeners once, and wakes any coroutine waiting
on ``signal.wait()``. Transports race their in-flight request against that
wait to cancel it.

Usage:
    controller = AbortController()
    controller.signal.add_listener(lambda: print("aborted"))
    controller.abort()
"""

import asyncio
from typing import Any, Callable, List, Optional

from fetch_action.utils.logging_config import get_logger

logger = get_logger("abort")

AbortListener = Callable[[], Any]


class AbortSignal:
    """Observable cancellation flag shared with the transport."""

    def __init__(self):
        self._aborted = False
        self._reason: Any = None
        self._listeners: List[AbortListener] = []
        self._event: Optional[asyncio.Event] = None

    @property
    def aborted(self) -> bool:
        return self._aborted

    @property
    def reason(self) -> Any:
        return self._reason

    def add_listener(self, listener: AbortListener) -> None:
        """Register a callback run once when the signal aborts."""
        self._listeners.append(listener)

    def remove_listener(self, listener: AbortListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def wait(self) -> None:
        """Block until the signal is aborted."""
        if self._aborted:
            return
        if self._event is None:
            self._event = asyncio.Event()
        await self._event.wait()

    def _abort(self, reason: Any) -> None:
        if self._aborted:
            return
        self._aborted = True
        self._reason = reason
        if self._event is not None:
            self._event.set()

        listeners, self._listeners = self._listeners, []
        for listener in listeners:
            try:
                listener()
            except Exception:
                # One failing listener must not stop the others from running.
                logger.exception("Abort listener raised")


class AbortController:
    """
    Handle that allows an in-flight request to be cancelled.

    Passed to request action creators so the store can keep it and abort
    the request later.
    """

    def __init__(self):
        self._signal = AbortSignal()

    @property
    def signal(self) -> AbortSignal:
        return self._signal

    def abort(self, reason: Any = None) -> None:
        """Abort the signal. Calling more than once has no further effect."""
        self._signal._abort(reason)

    def __repr__(self) -> str:
        return f"AbortController(aborted={self._signal.aborted})"
