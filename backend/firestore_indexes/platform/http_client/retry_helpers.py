"""Retry helpers for Firestore Admin API calls.

Provides retry predicates and a wait strategy for transient API failures:
rate limits (429), server errors (5xx) and timeouts.
"""

import httpx
from tenacity import retry_if_exception, wait_exponential

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


def should_retry_on_status(exception: BaseException) -> bool:
    """Check if exception is an HTTP error worth retrying.

    Args:
        exception: Exception to check

    Returns:
        True for 429 and 5xx responses that are usually transient
    """
    if isinstance(exception, httpx.HTTPStatusError):
        return exception.response.status_code in RETRYABLE_STATUS_CODES
    return False


def should_retry_on_timeout(exception: BaseException) -> bool:
    """Check if exception is a timeout or dropped connection that should be retried."""
    return isinstance(
        exception,
        (httpx.ConnectTimeout, httpx.ReadTimeout, httpx.ConnectError, httpx.RemoteProtocolError),
    )


def should_retry_request(exception: BaseException) -> bool:
    """Combined retry condition for Firestore Admin API calls."""
    return should_retry_on_status(exception) or should_retry_on_timeout(exception)


def wait_retry_after_with_backoff(retry_state) -> float:
    """Wait strategy that respects Retry-After for 429s, exponential backoff otherwise.

    Args:
        retry_state: tenacity retry state

    Returns:
        Number of seconds to wait before retry
    """
    exception = retry_state.outcome.exception()

    if isinstance(exception, httpx.HTTPStatusError) and exception.response.status_code == 429:
        retry_after = exception.response.headers.get("Retry-After")
        if retry_after:
            try:
                # Floor of 1s so short windows don't burn every attempt
                wait_seconds = max(float(retry_after), 1.0)
                return min(wait_seconds, 120.0)
            except (ValueError, TypeError):
                pass
        return wait_exponential(multiplier=1, min=2, max=30)(retry_state)

    return wait_exponential(multiplier=1, min=2, max=10)(retry_state)


retry_if_transient = retry_if_exception(should_retry_request)
