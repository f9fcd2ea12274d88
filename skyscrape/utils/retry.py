"""Standardized retry logic for Skyscrape.

Provides a centralized way to create retry configurations using tenacity.
"""

from collections.abc import Callable
from typing import Any

from tenacity import (
    BaseRetrying,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_incrementing,
)


def get_retryer(
    max_attempts: int = 3,
    backoff: float = 0.3,
    exceptions: tuple[type[Exception], ...] = (Exception,),
    log_callback: Callable[[Any], None] | None = None,
    reraise: bool = True,
) -> BaseRetrying:
    """Create a tenacity Retrying object with linear backoff.

    The wait before retry ``n`` is ``backoff * n`` seconds.

    Args:
        max_attempts: Maximum number of attempts, the first one included.
        backoff: Base wait in seconds; 0 retries immediately.
        exceptions: Tuple of exception types to retry on.
        log_callback: Optional callback function for before_sleep logging.
                      Receives the retry state.
        reraise: Whether to reraise the last exception after all retries fail.

    Returns:
        A configured tenacity.Retrying object.

    """
    return Retrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_incrementing(start=backoff, increment=backoff),
        retry=retry_if_exception_type(exceptions),
        before_sleep=log_callback,
        reraise=reraise,
    )
