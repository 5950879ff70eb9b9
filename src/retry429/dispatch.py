"""
Outcome dispatcher.

A one-shot broadcast: the coordinator publishes a single `Outcome` and
every subscriber receives it exactly once, whether it subscribed before
or after publication.
"""

import asyncio
import inspect
import logging
from typing import Any, Callable

from .exceptions import DispatchError
from .models import Outcome, OutcomeKind, Response

logger = logging.getLogger(__name__)

Subscriber = Callable[[Outcome], Any]
Callback = Callable[[BaseException | None, Response | None, bytes | None], Any]


class OutcomeDispatcher:
    """
    Publishes one outcome to a list of subscribers.

    Each delivery is scheduled separately on the loop, so one slow or
    failing subscriber does not hold up the others.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop or asyncio.get_running_loop()
        self._subscribers: list[Subscriber] = []
        self._future: asyncio.Future[Outcome] = self._loop.create_future()
        self._pending: set[asyncio.Future] = set()

    @property
    def published(self) -> bool:
        return self._future.done()

    @property
    def outcome(self) -> Outcome | None:
        return self._future.result() if self._future.done() else None

    def subscribe(self, subscriber: Subscriber) -> None:
        """Register a subscriber. Late subscribers get the stored outcome."""
        if self._future.done():
            self._loop.call_soon(self._deliver, subscriber, self._future.result())
        else:
            self._subscribers.append(subscriber)

    def publish(self, outcome: Outcome) -> None:
        """Deliver `outcome` to every subscriber. May only be called once."""
        if self._future.done():
            raise DispatchError("Outcome already published")
        self._future.set_result(outcome)
        subscribers, self._subscribers = self._subscribers, []
        logger.debug(f"Publishing {outcome.kind.value} outcome to {len(subscribers)} subscriber(s)")
        for subscriber in subscribers:
            self._loop.call_soon(self._deliver, subscriber, outcome)

    async def wait(self) -> Outcome:
        """Wait for the outcome without affecting the request if cancelled."""
        return await asyncio.shield(self._future)

    def _deliver(self, subscriber: Subscriber, outcome: Outcome) -> None:
        result = subscriber(outcome)
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._pending.add(task)
            task.add_done_callback(self._on_subscriber_done)

    def _on_subscriber_done(self, task: asyncio.Future) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Async subscriber failed", exc_info=exc)


def callback_subscriber(callback: Callback) -> Subscriber:
    """Adapt a `callback(error, response, body)` function to a subscriber."""

    def deliver(outcome: Outcome) -> Any:
        if outcome.kind is OutcomeKind.RESPONSE:
            return callback(None, outcome.response, outcome.response.body)
        return callback(outcome.error, None, None)

    return deliver
