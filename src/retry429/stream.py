"""
Event handle returned for every logical request.

Events, in order:

    response -> data -> end     for an HTTP outcome (429 included)
    error -> end                for a connection/protocol failure or cancel

Nothing is emitted until the request has finalized, so a retried attempt
never leaks a response or body to listeners.
"""

import asyncio
import logging
from typing import Any, Callable, Generator, Protocol

from .dispatch import OutcomeDispatcher
from .models import Outcome, OutcomeKind

logger = logging.getLogger(__name__)

EVENTS = ("response", "data", "error", "end")


class Sink(Protocol):
    """Anything that accepts bytes, such as a binary file."""

    def write(self, data: bytes) -> Any: ...


class ResponseStream:
    """
    Streaming view of a single logical request.

    Register listeners with `on()`, pipe the body into a sink with `pipe()`,
    or simply `await` the stream to get the `Outcome`.
    """

    def __init__(self, dispatcher: OutcomeDispatcher):
        self._dispatcher = dispatcher
        self._listeners: dict[str, list[Callable[..., Any]]] = {event: [] for event in EVENTS}
        self._sinks: list[tuple[Sink, bool]] = []
        self._task: asyncio.Task | None = None
        self._ended: asyncio.Future[Outcome] = asyncio.get_running_loop().create_future()
        dispatcher.subscribe(self._on_outcome)

    def on(self, event: str, listener: Callable[..., Any]) -> "ResponseStream":
        """Register a listener for `event`. Returns the stream for chaining."""
        if event not in self._listeners:
            raise ValueError(f"Unknown event {event!r}, expected one of {', '.join(EVENTS)}")
        self._listeners[event].append(listener)
        return self

    def pipe(self, sink: Sink, end: bool = True) -> "ResponseStream":
        """
        Write the response body into `sink`.

        Args:
            sink: Object with a `write(bytes)` method
            end: Close the sink (if it can be closed) once the body is written
        """
        self._sinks.append((sink, end))
        return self

    @property
    def outcome(self) -> Outcome | None:
        return self._dispatcher.outcome

    @property
    def ended(self) -> bool:
        return self._ended.done()

    def done(self) -> bool:
        return self._dispatcher.published

    def cancel(self) -> bool:
        """Abort the request while it is in flight or waiting to retry."""
        if self._task is None or self._task.done():
            return False
        return self._task.cancel()

    def __await__(self) -> Generator[Any, None, Outcome]:
        """Wait until `end` has been emitted and return the outcome."""
        return asyncio.shield(self._ended).__await__()

    def _bind(self, task: asyncio.Task) -> None:
        self._task = task

    def _emit(self, event: str, *args: Any) -> None:
        for listener in list(self._listeners[event]):
            try:
                listener(*args)
            except Exception:
                logger.exception(f"Stream {event!r} listener failed")

    def _on_outcome(self, outcome: Outcome) -> None:
        if outcome.kind is OutcomeKind.RESPONSE:
            self._emit("response", outcome.response)
            body = outcome.response.body
            if body:
                for sink, _ in self._sinks:
                    _sink_call(sink, "write", body)
                self._emit("data", body)
            for sink, end in self._sinks:
                if end:
                    _sink_call(sink, "flush")
                    _sink_call(sink, "close")
        else:
            if not self._listeners["error"]:
                logger.debug(f"Unhandled stream error: {outcome.error}")
            self._emit("error", outcome.error)
        self._emit("end")
        self._ended.set_result(outcome)


def _sink_call(sink: Sink, method: str, *args: Any) -> None:
    func = getattr(sink, method, None)
    if not callable(func):
        return
    try:
        func(*args)
    except Exception:
        logger.exception(f"Piped sink {method}() failed")
