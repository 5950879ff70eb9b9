"""
Attempt coordinator.

Drives the attempt loop for one logical request:

    INIT -> ATTEMPTING -> DECIDING -> WAITING -> ATTEMPTING ... -> FINALIZED

Attempts are strictly sequential. A retried attempt is discarded entirely;
only the last attempt becomes the outcome.
"""

import asyncio
import logging
import time
from enum import Enum
from typing import Callable

from .exceptions import Retry429Error, TransportError
from .models import AttemptRecord, Outcome, Request, RetryState
from .retry import Decision, RetryConfig, decide
from .retry.backoff import Sleep, wait_before_attempt
from .transport import BaseTransport

logger = logging.getLogger(__name__)


class State(str, Enum):
    """Coordinator states."""

    INIT = "init"
    ATTEMPTING = "attempting"
    DECIDING = "deciding"
    WAITING = "waiting"
    FINALIZED = "finalized"


class AttemptCoordinator:
    """
    Runs the retry state machine for a single logical request.

    A coordinator is used once. Create a new one for every request so no
    retry state is shared between requests.
    """

    def __init__(
        self,
        transport: BaseTransport,
        retry_config: RetryConfig | None = None,
        sleep: Sleep = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.transport = transport
        self.retry_config = retry_config or RetryConfig.no_retry()
        self._sleep = sleep
        self._clock = clock
        self.state = State.INIT
        self.retry_state = RetryState(max_attempts=self.retry_config.max_attempts)
        self.outcome: Outcome | None = None

    async def run(self, request: Request) -> Outcome:
        """Perform attempts until the retry policy stops, and return the outcome."""
        if self.state is not State.INIT:
            raise RuntimeError(f"Coordinator already used (state: {self.state.value})")

        retry_state = self.retry_state
        while True:
            self.state = State.ATTEMPTING
            record = await self._attempt(request, retry_state.attempt)

            self.state = State.DECIDING
            decision = decide(
                retry_state.attempt,
                retry_state.max_attempts,
                record,
                self.retry_config.retryable_status_codes,
            )
            if decision is not Decision.RETRY:
                return self._finalize(request, record, decision)

            self.state = State.WAITING
            next_attempt = retry_state.attempt + 1
            logger.warning(
                f"[retry429] {request.method} {request.url} rate limited "
                f"(status {record.response.status_code}), attempt "
                f"{retry_state.attempt}/{retry_state.max_attempts}"
            )
            delay = await wait_before_attempt(
                next_attempt, self.retry_config, record.response, sleep=self._sleep
            )
            retry_state.total_delay += delay
            retry_state.attempt = next_attempt

    async def _attempt(self, request: Request, index: int) -> AttemptRecord:
        record = AttemptRecord(index=index, started_at=self._clock())
        logger.debug(f"[retry429] Attempt {index} {request.method} {request.url}")
        try:
            record.response = await self.transport.send(request)
        except Retry429Error as e:
            record.error = e
        except Exception as e:
            logger.exception(f"[{self.transport.name}] Unexpected transport failure")
            error = TransportError(f"Unexpected transport failure: {e}", code="EUNKNOWN")
            error.__cause__ = e
            record.error = error
        return record

    def _finalize(self, request: Request, record: AttemptRecord, decision: Decision) -> Outcome:
        retry_state = self.retry_state
        retry_state.finalized = True
        self.state = State.FINALIZED
        self.outcome = Outcome.from_record(record, retry_state)

        if decision is Decision.STOP_FAILURE:
            logger.error(
                f"[retry429] {request.method} {request.url} failed on attempt "
                f"{record.index}: {record.error}"
            )
        elif record.response.is_rate_limited and retry_state.max_attempts > 1:
            logger.info(
                f"[retry429] All {retry_state.max_attempts} attempts rate limited, "
                f"returning 429 for {request.method} {request.url}"
            )
        else:
            logger.debug(
                f"[retry429] {request.method} {request.url} -> {record.response.status_code} "
                f"after {record.index} attempt(s), {retry_state.total_delay:.1f}s waiting"
            )
        return self.outcome
