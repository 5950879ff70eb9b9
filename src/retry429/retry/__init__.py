"""
retry429 - Retry Logic.

Retry policy, backoff schedule and their configuration.
"""

from .config import RetryConfig, DEFAULT_RETRY_ATTEMPTS
from .backoff import calculate_backoff, delay_before_attempt, parse_retry_after, wait_before_attempt
from .policy import Decision, decide

__all__ = [
    "RetryConfig",
    "DEFAULT_RETRY_ATTEMPTS",
    "calculate_backoff",
    "delay_before_attempt",
    "parse_retry_after",
    "wait_before_attempt",
    "Decision",
    "decide",
]
