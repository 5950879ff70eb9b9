"""
Single-attempt HTTP transports.

A transport performs exactly one physical attempt and either returns a
fully buffered `Response` or raises a `TransportError`. It knows nothing
about retries.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Mapping

import httpx

from .exceptions import ConnectionError, ProtocolError, TimeoutError, TransportError
from .models import Request, Response

logger = logging.getLogger(__name__)

# Transport options understood by httpx.AsyncClient
HTTPX_CLIENT_OPTIONS = frozenset(
    {"verify", "cert", "trust_env", "follow_redirects", "proxy", "http1", "http2", "limits", "max_redirects"}
)


class BaseTransport(ABC):
    """
    Abstract base class for transports.

    Implementations must fully read the body before returning so the
    retry layer can inspect the status and discard the attempt if needed.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the transport name for logging."""
        ...

    @abstractmethod
    async def send(self, request: Request) -> Response:
        """
        Perform one physical attempt.

        Args:
            request: The logical request to send

        Returns:
            The buffered response, whatever its status

        Raises:
            TransportError: If no HTTP response was received
        """
        ...


class HttpxTransport(BaseTransport):
    """Transport backed by `httpx.AsyncClient`, one client per attempt."""

    def __init__(self, timeout: float = 120.0, options: Mapping[str, Any] | None = None):
        """
        Initialize the transport.

        Args:
            timeout: Per-attempt timeout in seconds
            options: Client options; keys httpx does not know are ignored
        """
        self.timeout = timeout
        options = dict(options or {})
        ignored = sorted(set(options) - HTTPX_CLIENT_OPTIONS)
        if ignored:
            logger.debug(f"[{self.name}] Ignoring transport options: {', '.join(ignored)}")
        self.client_options = {k: v for k, v in options.items() if k in HTTPX_CLIENT_OPTIONS}

    @property
    def name(self) -> str:
        return "httpx"

    async def send(self, request: Request) -> Response:
        logger.debug(f"[{self.name}] {request.method} {request.url}")
        try:
            async with httpx.AsyncClient(timeout=self.timeout, **self.client_options) as client:
                response = await client.request(
                    request.method,
                    request.url,
                    headers=dict(request.headers),
                    params=dict(request.params) or None,
                    auth=request.auth,
                    content=request.body,
                )
                body = await response.aread()
                return Response(
                    status_code=response.status_code,
                    headers=dict(response.headers),
                    body=body,
                )

        except httpx.TimeoutException as e:
            raise TimeoutError(f"Request timed out after {self.timeout}s: {e}") from e

        except httpx.ConnectError as e:
            raise ConnectionError(str(e) or "Connection refused", code="ECONNREFUSED") from e

        except httpx.NetworkError as e:
            raise ConnectionError(str(e) or "socket hang up", code="ECONNRESET") from e

        except httpx.ProtocolError as e:
            raise ProtocolError(str(e) or "Protocol error") from e

        except httpx.RequestError as e:
            raise TransportError(str(e) or type(e).__name__, code="EREQUEST") from e
