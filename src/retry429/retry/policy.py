"""
Retry decision for a single finished attempt.
"""

from enum import Enum
from typing import Collection

from ..models import RATE_LIMITED, AttemptRecord


class Decision(str, Enum):
    """What to do after an attempt completes."""

    STOP_SUCCESS = "stop_success"
    STOP_FAILURE = "stop_failure"
    RETRY = "retry"


def decide(
    attempt: int,
    max_attempts: int,
    record: AttemptRecord,
    retry_status_codes: Collection[int] = (RATE_LIMITED,),
) -> Decision:
    """
    Decide whether a finished attempt ends the request.

    Connection and protocol errors stop immediately whatever attempts remain.
    A retryable status is retried while attempts remain and is otherwise
    returned to the caller as a normal response. Every other status is final.
    """
    if record.pending:
        raise ValueError(f"Attempt {record.index} has not completed")
    if record.error is not None:
        return Decision.STOP_FAILURE
    if record.response.status_code in retry_status_codes and attempt < max_attempts:
        return Decision.RETRY
    return Decision.STOP_SUCCESS
