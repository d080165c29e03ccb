"""Bounded retry of operations that hit a transient write conflict."""

import logging
import time
from collections.abc import Callable
from typing import TypeVar

from eventdesk.domain.errors import ConflictRetryError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_ATTEMPTS = 3
DEFAULT_BACKOFF_SECONDS = 0.05


def retry_on_conflict(
    operation: Callable[[], T],
    *,
    attempts: int = DEFAULT_ATTEMPTS,
    backoff_seconds: float = DEFAULT_BACKOFF_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Run ``operation``, retrying it when it raises ConflictRetryError.

    Waits ``backoff_seconds * attempt`` between tries. Any other error
    propagates immediately; the last ConflictRetryError propagates once the
    attempts are used up.
    """
    if attempts < 1:
        raise ValueError("attempts must be at least 1")
    for attempt in range(1, attempts + 1):
        try:
            return operation()
        except ConflictRetryError:
            if attempt == attempts:
                logger.warning("Write conflict persisted after %d attempts", attempts)
                raise
            logger.info("Write conflict on attempt %d/%d, retrying", attempt, attempts)
            sleep(backoff_seconds * attempt)
    raise AssertionError("unreachable")
