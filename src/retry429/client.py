"""
Retrying HTTP client.

Wraps a single-attempt transport so that rate-limited (429) responses are
retried with exponential backoff, while callers still see exactly one
result per request.
"""

import asyncio
import logging
from typing import Any, Mapping

from .config import ClientConfig
from .coordinator import AttemptCoordinator
from .dispatch import Callback, OutcomeDispatcher, callback_subscriber
from .exceptions import ConfigurationError, RequestCanceledError, TransportError
from .models import Outcome, OutcomeKind, Request
from .retry.backoff import Sleep
from .stream import ResponseStream
from .transport import BaseTransport, HttpxTransport

logger = logging.getLogger(__name__)


class RetryClient:
    """
    Client that issues logical requests over a retrying attempt loop.

    Features:
    - 429 responses retried up to a configurable attempt ceiling
    - Deterministic exponential backoff (0.5s, 1s, 2s, ...)
    - Connection errors surfaced immediately, never retried
    - Callback and event-stream delivery, usable together
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        transport: BaseTransport | None = None,
        *,
        sleep: Sleep = asyncio.sleep,
        **options: Any,
    ):
        """
        Initialize the client.

        Args:
            config: Client configuration; built from `options` when omitted
            transport: Single-attempt transport (default: httpx)
            sleep: Coroutine used for backoff waits
            **options: Client options such as `plugin="retry"`, `retryAttempts=5`
        """
        if config is None:
            config = ClientConfig.from_options(options)
        elif options:
            raise ConfigurationError("Pass either a ClientConfig or keyword options, not both")
        self.config = config
        self.retry_config = config.retry_config()
        self.transport = transport or HttpxTransport(
            timeout=config.timeout, options=config.transport_options
        )
        self._sleep = sleep
        self._tasks: set[asyncio.Task] = set()

    def request(
        self,
        request: Request | Mapping[str, Any],
        callback: Callback | None = None,
    ) -> ResponseStream:
        """
        Start a logical request.

        Must be called from a running event loop. The returned stream is live
        straight away; listeners registered before control returns to the
        loop see every event.

        Args:
            request: The request, or a mapping accepted by `Request.from_dict`
            callback: Optional `callback(error, response, body)`, called once

        Returns:
            The stream handle for this request
        """
        if not isinstance(request, Request):
            request = Request.from_dict(request)

        loop = asyncio.get_running_loop()
        dispatcher = OutcomeDispatcher(loop)
        stream = ResponseStream(dispatcher)
        if callback is not None:
            dispatcher.subscribe(callback_subscriber(callback))

        coordinator = AttemptCoordinator(self.transport, self.retry_config, sleep=self._sleep)
        task = loop.create_task(self._run(coordinator, request, dispatcher))
        self._tasks.add(task)
        task.add_done_callback(
            lambda t: self._on_task_done(t, coordinator, request, dispatcher)
        )
        stream._bind(task)
        return stream

    __call__ = request

    async def fetch(self, request: Request | Mapping[str, Any]) -> Outcome:
        """Issue a request and wait for its outcome."""
        return await self.request(request)

    async def _run(
        self,
        coordinator: AttemptCoordinator,
        request: Request,
        dispatcher: OutcomeDispatcher,
    ) -> None:
        outcome = await coordinator.run(request)
        dispatcher.publish(outcome)

    def _on_task_done(
        self,
        task: asyncio.Task,
        coordinator: AttemptCoordinator,
        request: Request,
        dispatcher: OutcomeDispatcher,
    ) -> None:
        self._tasks.discard(task)
        if dispatcher.published:
            return

        retry_state = coordinator.retry_state
        if task.cancelled():
            logger.info(f"[retry429] {request.method} {request.url} canceled on attempt {retry_state.attempt}")
            dispatcher.publish(
                Outcome(
                    kind=OutcomeKind.CANCELED,
                    error=RequestCanceledError(),
                    attempts=retry_state.attempt,
                    total_delay=retry_state.total_delay,
                )
            )
            return

        exc = task.exception()
        logger.error(f"[retry429] {request.method} {request.url} crashed", exc_info=exc)
        error = TransportError(f"Request failed unexpectedly: {exc}", code="EUNKNOWN")
        error.__cause__ = exc
        dispatcher.publish(
            Outcome(
                kind=OutcomeKind.ERROR,
                error=error,
                attempts=retry_state.attempt,
                total_delay=retry_state.total_delay,
            )
        )
