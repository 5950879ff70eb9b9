"""
Request, response and outcome types.

A logical request is described by a `Request`. Each physical try is an
`AttemptRecord`, and the single finalized result is an `Outcome`.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from .exceptions import ConfigurationError, Retry429Error

RATE_LIMITED = 429


@dataclass(frozen=True)
class Request:
    """Immutable description of one logical HTTP call."""

    url: str
    method: str = "GET"
    headers: Mapping[str, str] = field(default_factory=dict)
    auth: tuple[str, str] | None = None
    body: bytes | str | None = None
    params: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, options: Mapping[str, Any]) -> "Request":
        """
        Build a request from a plain mapping.

        Accepts `auth` either as a `(username, password)` pair or as a
        mapping with `username`/`password` keys.
        """
        if not options.get("url"):
            raise ConfigurationError("Request needs a url", option="url")

        auth = options.get("auth")
        if isinstance(auth, Mapping):
            if "username" not in auth or "password" not in auth:
                raise ConfigurationError("auth needs both username and password", option="auth")
            auth = (auth["username"], auth["password"])
        elif auth is not None:
            auth = tuple(auth) if isinstance(auth, (list, tuple)) else ()
            if len(auth) != 2:
                raise ConfigurationError("auth must be a (username, password) pair", option="auth")

        return cls(
            url=options["url"],
            method=(options.get("method") or "GET").upper(),
            headers=dict(options.get("headers") or {}),
            auth=auth,
            body=options.get("body"),
            params=dict(options.get("params") or {}),
        )


@dataclass(frozen=True)
class Response:
    """A fully buffered HTTP response."""

    status_code: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    @property
    def is_rate_limited(self) -> bool:
        return self.status_code == RATE_LIMITED

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        name = name.lower()
        for key, value in self.headers.items():
            if key.lower() == name:
                return value
        return None

    def json(self) -> Any:
        return json.loads(self.body)


@dataclass
class AttemptRecord:
    """One physical attempt. Pending while neither response nor error is set."""

    index: int
    started_at: float
    response: Response | None = None
    error: Retry429Error | None = None

    @property
    def pending(self) -> bool:
        return self.response is None and self.error is None


@dataclass
class RetryState:
    """Per-request retry bookkeeping, owned by a single coordinator run."""

    max_attempts: int
    attempt: int = 1
    total_delay: float = 0.0
    finalized: bool = False


class OutcomeKind(str, Enum):
    """How a logical request ended."""

    RESPONSE = "response"
    ERROR = "error"
    CANCELED = "canceled"


@dataclass(frozen=True)
class Outcome:
    """The single finalized result of a logical request."""

    kind: OutcomeKind
    response: Response | None = None
    error: Retry429Error | None = None
    attempts: int = 1
    total_delay: float = 0.0

    @classmethod
    def from_record(cls, record: AttemptRecord, state: RetryState) -> "Outcome":
        if record.error is not None:
            return cls(
                kind=OutcomeKind.ERROR,
                error=record.error,
                attempts=record.index,
                total_delay=state.total_delay,
            )
        return cls(
            kind=OutcomeKind.RESPONSE,
            response=record.response,
            attempts=record.index,
            total_delay=state.total_delay,
        )

    @property
    def body(self) -> bytes | None:
        return self.response.body if self.response is not None else None

    @property
    def ok(self) -> bool:
        """True when an HTTP response was received, whatever its status."""
        return self.kind is OutcomeKind.RESPONSE
