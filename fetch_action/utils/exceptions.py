"""
Custom exceptions for fetch_action.

Every failure that happens while a fetch thunk runs is converted into one
of these types before it reaches the shared error handler, so the handler
only needs to read ``message`` and ``status_code``.

Exception Hierarchy:
    FetchActionError (base)
    └── FetchError
        ├── HTTPStatusFetchError
        ├── TransportError
        │   └── FetchTimeoutError
        ├── FetchAbortedError
        └── ContentParseError
"""

from typing import Optional, Dict, Any


class FetchActionError(Exception):
    """Base exception for all fetch_action errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, details={self.details!r})"


# =============================================================================
# Fetch Errors
# =============================================================================

class FetchError(FetchActionError):
    """
    Base exception for errors raised while fetching a URL.

    ``status_code`` is only populated when the failure comes from an HTTP
    response in the error range; transport-level failures leave it None.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
        **kwargs
    ):
        details = {
            "status_code": status_code,
            "url": url,
            **kwargs
        }
        # Remove None values for cleaner output
        details = {k: v for k, v in details.items() if v is not None}
        super().__init__(message, details)
        self.status_code = status_code
        self.url = url

    @property
    def action_message(self) -> str:
        """Message without details, as handed to error action creators."""
        return self.message


class HTTPStatusFetchError(FetchError):
    """Raised when a response status falls in [400, 600)."""

    def __init__(self, message: str, status_code: int, url: Optional[str] = None, **kwargs):
        super().__init__(message, status_code=status_code, url=url, **kwargs)


class TransportError(FetchError):
    """
    Raised when the request never produced a response.

    Common causes:
    - DNS resolution failure
    - Connection refused / reset
    - Protocol errors
    """

    def __init__(
        self,
        message: str = "Network request failed",
        url: Optional[str] = None,
        original_error: Optional[Exception] = None,
        **kwargs
    ):
        super().__init__(message, url=url, **kwargs)
        self.original_error = original_error
        if original_error:
            self.details["original_error"] = str(original_error)


class FetchTimeoutError(TransportError):
    """Raised when the transport gives up waiting for the server."""

    def __init__(
        self,
        message: str = "Request timed out",
        url: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        **kwargs
    ):
        super().__init__(message, url=url, **kwargs)
        self.timeout_seconds = timeout_seconds
        if timeout_seconds:
            self.details["timeout_seconds"] = timeout_seconds


class FetchAbortedError(FetchError):
    """Raised when the request was cancelled through its AbortSignal."""

    def __init__(self, message: str = "The operation was aborted", url: Optional[str] = None, **kwargs):
        super().__init__(message, url=url, **kwargs)


class ContentParseError(FetchError):
    """
    Raised when the response body could not be read at all.

    A body that is not valid JSON is not an error; it falls back to text.
    This is only raised when the text fallback also fails.
    """

    def __init__(
        self,
        message: str = "Failed to read response body",
        url: Optional[str] = None,
        original_error: Optional[Exception] = None,
        **kwargs
    ):
        super().__init__(message, url=url, **kwargs)
        self.original_error = original_error
        if original_error:
            self.details["original_error"] = str(original_error)
