"""Retry logic with exponential backoff for wiki API rate limits.

MediaWiki signals throttling either with HTTP 429 or with an error reply whose
code is ``ratelimited`` or ``maxlag``. Those are retried with exponential
backoff (1s, 2s, 4s, ...); every other error fails fast.
"""

import time
import logging
from typing import Callable, TypeVar

from .errors import APIAccessError

logger = logging.getLogger(__name__)

T = TypeVar('T')

DEFAULT_MAX_RETRIES = 3

RATE_LIMIT_CODES = {'ratelimited', 'maxlag'}


def retry_on_rate_limit(
    func: Callable[..., T],
    *args,
    max_retries: int = DEFAULT_MAX_RETRIES,
    **kwargs
) -> T:
    """Retry function on rate limit with exponential backoff.

    Args:
        func: The function to execute with retry logic
        *args: Positional arguments to pass to the function
        max_retries: Number of retries after the first attempt
        **kwargs: Keyword arguments to pass to the function

    Returns:
        The return value of the function

    Raises:
        APIAccessError: If rate limit persists after max_retries retries
        Other exceptions: Passed through immediately without retry

    Example:
        >>> result = retry_on_rate_limit(session.post, url, data=payload)
    """
    for retry_num in range(max_retries + 1):
        try:
            return func(*args, **kwargs)
        except Exception as e:
            if not _is_rate_limit_error(e):
                raise

            if retry_num >= max_retries:
                logger.error(
                    f"Rate limit persisted after {max_retries} retries, giving up"
                )
                raise APIAccessError(
                    f"Wiki API failure (after {max_retries} retries)"
                ) from e

            wait_time = 2 ** retry_num
            logger.info(
                f"Rate limit hit, retrying in {wait_time}s "
                f"(retry {retry_num + 1}/{max_retries})"
            )
            time.sleep(wait_time)

    raise APIAccessError(f"Wiki API failure (after {max_retries} retries)")


def _is_rate_limit_error(exception: Exception) -> bool:
    """Check if an exception represents a rate limit error.

    Args:
        exception: The exception to check

    Returns:
        True if this appears to be a rate limit error, False otherwise
    """
    if getattr(exception, 'code', None) in RATE_LIMIT_CODES:
        return True

    error_msg = str(exception).lower()
    rate_limit_patterns = [
        '429',
        'too many requests',
        'rate limit exceeded',
        'rate limited',
    ]
    if any(pattern in error_msg for pattern in rate_limit_patterns):
        return True

    if getattr(exception, 'status_code', None) == 429:
        return True

    response = getattr(exception, 'response', None)
    if response is not None and getattr(response, 'status_code', None) == 429:
        return True

    return False
