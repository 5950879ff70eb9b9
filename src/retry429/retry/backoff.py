"""
Backoff calculation and the suspension between attempts.
"""

import asyncio
import logging
import random
from typing import Awaitable, Callable

from .config import RetryConfig
from ..models import Response

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


def calculate_backoff(attempt: int, config: RetryConfig) -> float:
    """
    Calculate the delay that precedes a given attempt.

    Args:
        attempt: One-based index of the attempt about to start (>= 2)
        config: Retry configuration

    Returns:
        Delay in seconds, never below `base_delay * multiplier ** (attempt - 2)`.
        Jitter is added on top, bounded by `max_delay`.
    """
    if attempt < 2:
        raise ValueError(f"No delay precedes attempt {attempt}")

    delay = config.base_delay * (config.multiplier ** (attempt - 2))

    if config.jitter > 0:
        delay += min(delay * config.jitter * random.random(), config.max_delay)

    return max(0.0, delay)


def parse_retry_after(response: Response | None) -> float | None:
    """Return the Retry-After header in seconds, or None if absent or not numeric."""
    if response is None:
        return None
    value = response.header("Retry-After")
    if value is None:
        return None
    try:
        seconds = float(value)
    except ValueError:
        logger.debug(f"Ignoring non-numeric Retry-After header: {value!r}")
        return None
    return seconds if seconds >= 0 else None


def delay_before_attempt(
    attempt: int,
    config: RetryConfig,
    last_response: Response | None = None,
) -> float:
    """Scheduled delay, lengthened (never shortened) by Retry-After."""
    delay = calculate_backoff(attempt, config)
    if config.respect_retry_after:
        retry_after = parse_retry_after(last_response)
        if retry_after is not None:
            delay = max(delay, min(retry_after, config.max_delay))
    return delay


async def wait_before_attempt(
    attempt: int,
    config: RetryConfig,
    last_response: Response | None = None,
    sleep: Sleep = asyncio.sleep,
) -> float:
    """
    Suspend until `attempt` may start.

    Only the current task is suspended, so other requests on the loop
    keep running.

    Returns:
        The delay that was waited, in seconds
    """
    delay = delay_before_attempt(attempt, config, last_response)
    await sleep(delay)
    return delay
