from __future__ import annotations

import logging
import time
from typing import Callable, TypeVar

from ..core.constants import DEFAULT_RETRY_ATTEMPTS, DEFAULT_RETRY_BACKOFF_SECONDS
from ..core.exceptions import ConcurrencyConflict

logger = logging.getLogger(__name__)

T = TypeVar("T")


def run_with_retry(
    operation: Callable[[], T],
    *,
    attempts: int = DEFAULT_RETRY_ATTEMPTS,
    backoff_seconds: float = DEFAULT_RETRY_BACKOFF_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Run `operation`, retrying on ConcurrencyConflict.

    `attempts` counts retries after the first try; the delay doubles each time.
    The last conflict is re-raised once retries are exhausted.
    """

    attempt = 0
    while True:
        try:
            return operation()
        except ConcurrencyConflict as exc:
            if attempt >= attempts:
                logger.error("Giving up after %s retries: %s", attempts, exc)
                raise
            delay = backoff_seconds * (2 ** attempt)
            attempt += 1
            logger.warning("Concurrency conflict (retry %s/%s in %.3fs): %s", attempt, attempts, delay, exc)
            sleep(delay)
