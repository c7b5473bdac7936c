"""Retry decisions and backoff for the Notion transport.

Notion answers 429 when an integration exceeds its request budget, with a
``Retry-After`` header in seconds, and occasionally 5xx during incidents.
Both are retried with bounded exponential backoff; every other 4xx is
final.  The helpers here are pure so they can be tested in isolation:

* :func:`parse_retry_after` -- read ``Retry-After`` from a response.
* :func:`should_retry` -- decide whether a failed attempt may be retried.
* :func:`compute_backoff` -- delay before the next attempt.
"""

from __future__ import annotations

import random

import httpx

RETRYABLE_STATUSES: frozenset[int] = frozenset({429, 500, 502, 503, 504})

RETRYABLE_EXCEPTIONS: tuple[type[Exception], ...] = (
    httpx.TimeoutException,
    httpx.NetworkError,
)


def parse_retry_after(response: httpx.Response) -> float | None:
    """Return ``Retry-After`` as seconds, or ``None`` when absent or not numeric."""
    raw = response.headers.get("retry-after")
    if raw is None:
        return None
    try:
        value = float(raw)
    except (ValueError, TypeError):
        return None
    return value if value >= 0 else None


def should_retry(
    status_code: int | None,
    exception: Exception | None,
    attempt: int,
    max_attempts: int,
) -> bool:
    """Decide whether attempt number *attempt* (0-indexed) may be retried.

    Parameters
    ----------
    status_code:
        HTTP status of the response, or ``None`` if none was received.
    exception:
        The transport exception raised, or ``None`` if a response arrived.
    attempt:
        The attempt that just failed (0-indexed).
    max_attempts:
        Total attempts allowed, including the first.
    """
    if attempt + 1 >= max_attempts:
        return False
    if exception is not None:
        return isinstance(exception, RETRYABLE_EXCEPTIONS)
    if status_code is not None:
        return status_code in RETRYABLE_STATUSES
    return False


def compute_backoff(
    attempt: int,
    base: float = 1.0,
    maximum: float = 60.0,
    jitter: bool = True,
    retry_after: float | None = None,
) -> float:
    """Compute the delay in seconds before the next attempt.

    The delay follows ``base * 2**attempt`` capped at *maximum*, scaled
    randomly to 50-100 % of its value when *jitter* is set.  A
    server-provided *retry_after* acts as a floor and is never undercut.
    """
    exponential = min(base * (2 ** attempt), maximum)
    if jitter:
        exponential *= 0.5 + random.random() * 0.5
    if retry_after is None:
        return exponential
    return max(retry_after, exponential)
