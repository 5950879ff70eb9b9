"""
retry429 - Rate-limit aware retries for outbound HTTP requests.

One logical request, any number of physical attempts, exactly one
observable outcome via callback, event stream, or both.
"""

from .client import RetryClient
from .config import ClientConfig
from .coordinator import AttemptCoordinator, State
from .dispatch import OutcomeDispatcher, callback_subscriber
from .exceptions import (
    Retry429Error,
    TransportError,
    ConnectionError,
    TimeoutError,
    ProtocolError,
    RequestCanceledError,
    ConfigurationError,
    DispatchError,
)
from .models import AttemptRecord, Outcome, OutcomeKind, Request, Response, RetryState
from .retry import Decision, RetryConfig, calculate_backoff, decide
from .stream import ResponseStream
from .transport import BaseTransport, HttpxTransport

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Client
    "RetryClient",
    "ClientConfig",
    "ResponseStream",
    # Core
    "AttemptCoordinator",
    "State",
    "OutcomeDispatcher",
    "callback_subscriber",
    # Models
    "Request",
    "Response",
    "Outcome",
    "OutcomeKind",
    "AttemptRecord",
    "RetryState",
    # Transports
    "BaseTransport",
    "HttpxTransport",
    # Exceptions
    "Retry429Error",
    "TransportError",
    "ConnectionError",
    "TimeoutError",
    "ProtocolError",
    "RequestCanceledError",
    "ConfigurationError",
    "DispatchError",
    # Retry
    "RetryConfig",
    "Decision",
    "calculate_backoff",
    "decide",
]
