"""Retry logic with exponential backoff for Spotify Web API calls."""

import random
import time
from functools import wraps
from typing import Callable, Optional, TypeVar, ParamSpec

import requests
from spotipy.exceptions import SpotifyException

from likedalbums.constants import (
    RETRY_MAX_ATTEMPTS,
    RETRY_BASE_DELAY_SEC,
    RETRY_MAX_DELAY_SEC,
    get_logger,
)

logger = get_logger("retry")

P = ParamSpec("P")
T = TypeVar("T")

TRANSIENT_EXCEPTIONS = (
    SpotifyException,
    requests.exceptions.Timeout,
    requests.exceptions.ConnectionError,
    requests.exceptions.ChunkedEncodingError,
)
RETRYABLE_STATUS_CODES = (429, 500, 502, 503, 504)


def is_retryable(exc: Exception) -> bool:
    """Network errors always retry; API errors only for rate limits and server faults."""
    if isinstance(exc, SpotifyException):
        return exc.http_status in RETRYABLE_STATUS_CODES
    return True


def retry_after_seconds(exc: Exception) -> Optional[float]:
    """Delay requested by a 429 response, if any."""
    headers = getattr(exc, "headers", None) or {}
    value = headers.get("Retry-After")
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def backoff_delay(attempt: int, base_delay: float, max_delay: float) -> float:
    delay = min(base_delay * (2 ** (attempt - 1)), max_delay)
    return delay * (0.5 + random.random())  # jitter


def retry_with_backoff(
    max_attempts: int = RETRY_MAX_ATTEMPTS,
    base_delay: float = RETRY_BASE_DELAY_SEC,
    max_delay: float = RETRY_MAX_DELAY_SEC,
    exceptions: tuple = TRANSIENT_EXCEPTIONS,
) -> Callable[[Callable[P, T]], Callable[P, T | None]]:
    """
    Decorator for retrying a Spotify call with exponential backoff.

    Returns None once every attempt has failed. Errors that retrying can't fix
    (bad token, 404) are raised immediately.

    Args:
        max_attempts: Maximum number of attempts
        base_delay: Initial delay between retries in seconds
        max_delay: Maximum delay between retries in seconds
        exceptions: Tuple of exception types to catch and retry
    """

    def decorator(func: Callable[P, T]) -> Callable[P, T | None]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T | None:
            for attempt in range(1, max_attempts + 1):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    if not is_retryable(e):
                        raise
                    if attempt == max_attempts:
                        logger.warning(
                            f"{func.__name__} failed after {max_attempts} attempts: {e}"
                        )
                        return None

                    requested = retry_after_seconds(e)
                    delay = requested if requested is not None else backoff_delay(attempt, base_delay, max_delay)

                    logger.debug(
                        f"{func.__name__} attempt {attempt} failed: {e}. "
                        f"Retrying in {delay:.1f}s..."
                    )
                    time.sleep(delay)

            return None

        return wrapper

    return decorator
