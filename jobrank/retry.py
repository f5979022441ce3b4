"""Retry HTTP calls that fail for transient reasons (timeouts, resets, 5xx, 429)."""
from __future__ import annotations

import functools
import random
import time
from typing import Any, Callable

import requests

from jobrank.log import get_logger

log = get_logger(__name__)

RETRY_STATUSES = frozenset({429, 500, 502, 503, 504})


def is_transient(exc: BaseException) -> bool:
    """True for failures worth another attempt; 4xx answers are final."""
    if isinstance(exc, requests.HTTPError):
        status = exc.response.status_code if exc.response is not None else None
        return status is None or status in RETRY_STATUSES
    return isinstance(exc, (requests.Timeout, requests.ConnectionError))


def retry(
    *,
    attempts: int = 2,
    base_delay: float = 1.5,
    max_delay: float = 10.0,
    should_retry: Callable[[BaseException], bool] = is_transient,
) -> Callable:
    """Decorator: re-run the wrapped call while *should_retry* accepts the error.

    Delay doubles per attempt, capped at *max_delay*, with +-50% jitter.
    """
    attempts = max(1, attempts)

    def decorator(fn: Callable) -> Callable:
        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            attempt = 1
            while True:
                try:
                    return fn(*args, **kwargs)
                except Exception as exc:
                    if attempt >= attempts or not should_retry(exc):
                        raise
                    delay = min(base_delay * 2 ** (attempt - 1), max_delay) * (0.5 + random.random())
                    log.warning(
                        "%s failed (%s); attempt %d/%d in %.1fs",
                        getattr(fn, "__name__", "call"), exc, attempt + 1, attempts, delay,
                    )
                    time.sleep(delay)
                    attempt += 1

        return wrapper

    return decorator
