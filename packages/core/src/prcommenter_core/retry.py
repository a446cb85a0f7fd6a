"""Retry GitHub writes that trip the abuse rate limit.

GitHub answers a burst of comment writes with HTTP 422 rather than 429, so
422 is the only status retried here. Every other failure is raised at once.
The backoff is quadratic (0, 1, 4, 9, 16, 25 seconds) because abuse limits
take far longer to clear than ordinary transient errors.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, TypeVar

from prcommenter_core.errors import RateLimitExhaustedError

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_ATTEMPTS = 6
RATE_LIMIT_STATUS = 422


def is_rate_limited(error: Exception) -> bool:
    """Return True if the error carries GitHub's abuse rate-limit status.

    PyGithub's GithubException exposes the HTTP status as ``status``.
    """
    return getattr(error, "status", None) == RATE_LIMIT_STATUS


def write_with_retries(
    write_fn: Callable[[], T],
    max_attempts: int = MAX_ATTEMPTS,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Call write_fn until it succeeds, sleeping attempt**2 seconds before each try.

    Returns whatever write_fn returns. A non rate-limit exception is re-raised
    unmodified on the attempt it occurs. If every attempt is rate limited,
    RateLimitExhaustedError is raised with the total time spent waiting.
    """
    waited = 0
    for attempt in range(max_attempts):
        delay = attempt * attempt
        sleep(delay)
        waited += delay
        try:
            return write_fn()
        except Exception as e:
            if not is_rate_limited(e):
                raise
            logger.warning(
                "GitHub abuse rate limit hit (attempt %d/%d, %ds waited so far): %s",
                attempt + 1,
                max_attempts,
                waited,
                e,
            )

    logger.error("Giving up after %d rate-limited attempts (%ds waited)", max_attempts, waited)
    raise RateLimitExhaustedError(attempts=max_attempts, elapsed_seconds=waited)
