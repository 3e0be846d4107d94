"""
Standard lifecycle actions.

create_lifecycle_actions("ITEMS") returns creators for ITEMS_REQUEST,
ITEMS_RECEIVE, ITEMS_ERROR and ITEMS_ABORT, shaped as flux-standard actions.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from fetch_action.lifecycle import LifecycleActions

REQUEST_SUFFIX = "_REQUEST"
RECEIVE_SUFFIX = "_RECEIVE"
ERROR_SUFFIX = "_ERROR"
ABORT_SUFFIX = "_ABORT"


@dataclass(frozen=True)
class Action:
    """Immutable record of one lifecycle occurrence."""
    type: str
    payload: Any = None
    meta: Optional[Dict[str, Any]] = None
    error: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dict, omitting unset fields."""
        data: Dict[str, Any] = {"type": self.type}
        if self.payload is not None:
            data["payload"] = self.payload
        if self.meta:
            data["meta"] = self.meta
        if self.error:
            data["error"] = True
        return data


def action_types(prefix: str) -> Dict[str, str]:
    """Map each lifecycle stage to its action type for ``prefix``."""
    return {
        "request": prefix + REQUEST_SUFFIX,
        "receive": prefix + RECEIVE_SUFFIX,
        "error": prefix + ERROR_SUFFIX,
        "abort": prefix + ABORT_SUFFIX,
    }


def create_lifecycle_actions(prefix: str) -> LifecycleActions:
    """Build a LifecycleActions whose creators produce ``Action`` records."""
    types = action_types(prefix)

    def request(abort_controller=None) -> Action:
        return Action(types["request"], meta={"abort_controller": abort_controller})

    def receive(content=None, status_code=None, headers=None) -> Action:
        return Action(
            types["receive"],
            payload=content,
            meta={"status_code": status_code, "headers": headers},
        )

    def error(message=None, status_code=None) -> Action:
        return Action(
            types["error"],
            payload=message,
            meta={"status_code": status_code},
            error=True,
        )

    def abort() -> Action:
        return Action(types["abort"])

    return LifecycleActions(request=request, receive=receive, error=error, abort=abort)
