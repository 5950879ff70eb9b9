"""
Retry configuration.
"""

from dataclasses import dataclass, field
from typing import FrozenSet

from ..models import RATE_LIMITED

DEFAULT_RETRY_ATTEMPTS = 3


@dataclass(frozen=True)
class RetryConfig:
    """
    Configuration for retry behavior.

    The backoff schedule is `base_delay * multiplier ** (attempt - 2)` and is
    never shortened. `max_delay` only bounds what jitter and Retry-After add
    on top of it.

    Attributes:
        max_attempts: Total attempt ceiling including the first (default: 1)
        base_delay: Delay before the second attempt in seconds (default: 0.5)
        multiplier: Growth factor between attempts (default: 2.0)
        max_delay: Upper bound for Retry-After and jittered waits (default: 60.0)
        jitter: Extra random delay as a fraction of the scheduled one (default: 0)
        respect_retry_after: Wait at least as long as a Retry-After header asks
        retryable_status_codes: HTTP status codes that trigger retry
    """

    max_attempts: int = 1
    base_delay: float = 0.5
    multiplier: float = 2.0
    max_delay: float = 60.0
    jitter: float = 0.0
    respect_retry_after: bool = True
    retryable_status_codes: FrozenSet[int] = field(
        default_factory=lambda: frozenset({RATE_LIMITED})
    )

    @property
    def enabled(self) -> bool:
        return self.max_attempts > 1

    def should_retry(self, status_code: int) -> bool:
        """Check if the given status code should trigger a retry."""
        return status_code in self.retryable_status_codes

    @classmethod
    def no_retry(cls) -> "RetryConfig":
        """Preset for no retry (single attempt only)."""
        return cls(max_attempts=1)

    @classmethod
    def retry_429(cls, attempts: int = DEFAULT_RETRY_ATTEMPTS) -> "RetryConfig":
        """Preset that retries rate-limited responses up to `attempts` tries."""
        return cls(max_attempts=attempts)
