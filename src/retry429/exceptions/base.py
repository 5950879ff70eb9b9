"""
Base exception classes for retry429.

Transport failures are delivered to consumers as values on the error
channel. Only configuration and dispatch misuse is raised to the caller.
"""


class Retry429Error(Exception):
    """Base exception for all retry429 errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code

    def __str__(self) -> str:
        parts = [self.message]
        if self.code:
            parts.insert(0, f"[{self.code}]")
        if self.status_code:
            parts.append(f"(status: {self.status_code})")
        return " ".join(parts)


class TransportError(Retry429Error):
    """Raised when a physical attempt never produced an HTTP response."""


class ConnectionError(TransportError):
    """Raised when the connection could not be made or was reset."""

    def __init__(self, message: str = "Connection failed", *, code: str = "ECONNRESET", **kwargs):
        super().__init__(message, code=code, **kwargs)


class TimeoutError(TransportError):
    """Raised when the attempt timed out before a response was read."""

    def __init__(self, message: str = "Request timed out", *, code: str = "ETIMEDOUT", **kwargs):
        super().__init__(message, code=code, **kwargs)


class ProtocolError(TransportError):
    """Raised when the HTTP exchange was terminated abnormally."""

    def __init__(self, message: str = "Protocol error", *, code: str = "EPROTO", **kwargs):
        super().__init__(message, code=code, **kwargs)


class RequestCanceledError(Retry429Error):
    """Delivered when a logical request is canceled before it finalizes."""

    def __init__(self, message: str = "Request canceled", **kwargs):
        kwargs.setdefault("code", "ECANCELED")
        super().__init__(message, **kwargs)


class ConfigurationError(Retry429Error):
    """Raised when client options are invalid."""

    def __init__(self, message: str = "Invalid configuration", *, option: str | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.option = option


class DispatchError(Retry429Error):
    """Raised when an outcome is published more than once."""
