from __future__ import annotations


class ZavaHTTPError(RuntimeError):
    """Base error for shared HTTP client operations."""


class ZavaHTTPStatusError(ZavaHTTPError):
    def __init__(self, message: str, status_code: int, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ZavaHTTPNetworkError(ZavaHTTPError):
    """Raised when the transport could not complete the request."""


class ZavaHTTPTimeoutError(ZavaHTTPError):
    """Raised when the transport gave up waiting on the remote side."""
