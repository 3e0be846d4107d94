"""
Shared pytest fixtures for fetch_action tests.

Provides mock transports, recording dispatchers, and action creator
mocks reused across unit tests.
"""

import logging
import pytest
from typing import Any, Callable, Dict, List
from unittest.mock import MagicMock

import httpx

from fetch_action.config import Config, ClientConfig, LoggingConfig, set_config
from fetch_action.lifecycle import LifecycleActions
from fetch_action.transport import HttpxTransport
from fetch_action.utils.logging_config import ROOT_LOGGER_NAME


BASE_URL = "http://testserver"


# =============================================================================
# Configuration Fixtures
# =============================================================================

@pytest.fixture
def test_config() -> Config:
    """Create a test configuration with fast timeouts."""
    return Config(
        client=ClientConfig(
            base_url=BASE_URL,
            timeout=5.0,
            connect_timeout=2.0,
            user_agent="fetch-action-tests/1.0",
            default_headers={"Accept": "application/json"},
        ),
        logging=LoggingConfig(level="DEBUG"),
    )


@pytest.fixture(autouse=True)
def reset_global_config():
    """Make sure no test leaks a loaded config into another."""
    set_config(None)
    yield
    set_config(None)


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo handlers and levels installed by setup_logging()."""
    yield
    root = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root.handlers):
        handler.close()
    root.handlers.clear()
    root.setLevel(logging.NOTSET)


# =============================================================================
# Transport Fixtures
# =============================================================================

@pytest.fixture
def make_transport(test_config) -> Callable[[Callable], HttpxTransport]:
    """
    Build an HttpxTransport whose client answers through ``handler``.

    ``handler`` receives an httpx.Request and returns an httpx.Response;
    it may be async.
    """
    def factory(handler: Callable) -> HttpxTransport:
        client = httpx.AsyncClient(
            base_url=BASE_URL,
            transport=httpx.MockTransport(handler),
        )
        return HttpxTransport(config=test_config.client, client=client)

    return factory


@pytest.fixture
def json_transport(make_transport) -> HttpxTransport:
    """Transport answering every request with 200 and {"id": 1}."""
    return make_transport(lambda request: httpx.Response(200, json={"id": 1}))


# =============================================================================
# Store Fixtures
# =============================================================================

class Recorder:
    """Stand-in for a store: records dispatched actions, serves fixed state."""

    def __init__(self, state: Any = None):
        self.actions: List[Any] = []
        self.state = state if state is not None else {"loading": False}

    def dispatch(self, action: Any) -> Any:
        self.actions.append(action)
        return action

    def get_state(self) -> Any:
        return self.state


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


# =============================================================================
# Action Creator Fixtures
# =============================================================================

@pytest.fixture
def creators() -> Dict[str, MagicMock]:
    """MagicMock action creators returning simple dict actions."""
    return {
        "request": MagicMock(side_effect=lambda controller=None: {"type": "REQUEST"}),
        "receive": MagicMock(
            side_effect=lambda content=None, status_code=None, headers=None: {
                "type": "RECEIVE", "payload": content,
            }
        ),
        "error": MagicMock(
            side_effect=lambda message=None, status_code=None: {
                "type": "ERROR", "payload": message,
            }
        ),
        "abort": MagicMock(side_effect=lambda: {"type": "ABORT"}),
    }


@pytest.fixture
def lifecycle(creators) -> LifecycleActions:
    return LifecycleActions(**creators)
