"""
retry429 - Exception Hierarchy.

Errors surfaced through the callback and stream error channels, plus the
few that are raised directly.
"""

from .base import (
    Retry429Error,
    TransportError,
    ConnectionError,
    TimeoutError,
    ProtocolError,
    RequestCanceledError,
    ConfigurationError,
    DispatchError,
)

__all__ = [
    "Retry429Error",
    "TransportError",
    "ConnectionError",
    "TimeoutError",
    "ProtocolError",
    "RequestCanceledError",
    "ConfigurationError",
    "DispatchError",
]
