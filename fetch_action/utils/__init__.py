"""
Utils package for fetch_action.

Contains shared utilities:
- logging_config: Centralized logging configuration
- exceptions: Custom exception classes
"""

from fetch_action.utils.logging_config import get_logger, setup_logging
from fetch_action.utils.exceptions import (
    FetchActionError,
    FetchError,
    HTTPStatusFetchError,
    TransportError,
    FetchTimeoutError,
    FetchAbortedError,
    ContentParseError,
)

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    # Exceptions
    "FetchActionError",
    "FetchError",
    "HTTPStatusFetchError",
    "TransportError",
    "FetchTimeoutError",
    "FetchAbortedError",
    "ContentParseError",
]
