"""Backoff policy for reading the export list and camera config."""

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

# Connection and timeout failures; an HTTP error status is an answer, not a retry
RETRYABLE_ERRORS = (httpx.RequestError, httpx.TimeoutException)


def with_retry(max_attempts: int = 3, min_wait: float = 1, max_wait: float = 10):
    """Build the backoff decorator used around backend reads.

    Create, rename and delete are sent once and never wrapped.

    Args:
        max_attempts: Attempts before the last transport error is raised
        min_wait: Lower bound of the backoff delay (seconds)
        max_wait: Upper bound of the backoff delay (seconds)
    """
    return retry(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=1, min=min_wait, max=max_wait),
        retry=retry_if_exception_type(RETRYABLE_ERRORS),
        reraise=True,
    )
