"""Retry decision logic and backoff computation.

This module provides two pure functions used by the transport layer and
the content replacement protocol:

* :func:`should_retry` -- decide whether a failed attempt is retryable.
* :func:`compute_backoff` -- compute the delay before the next attempt.
"""

from __future__ import annotations

import random

from notionbridge.errors import NotionError


def should_retry(
    error: BaseException,
    attempt: int,
    max_attempts: int,
) -> bool:
    """Decide whether a request should be retried.

    Only :class:`~notionbridge.errors.RequestTimeoutError` and
    :class:`~notionbridge.errors.InternalServerError` are retryable; every
    other kind describes a problem another attempt cannot fix.

    Parameters
    ----------
    error:
        The error raised by the failed attempt.
    attempt:
        The current attempt number (0-indexed).
    max_attempts:
        Maximum total attempts allowed (including the initial request).
    """
    if attempt + 1 >= max_attempts:
        return False
    return isinstance(error, NotionError) and error.retryable


def compute_backoff(
    attempt: int,
    base: float = 1.0,
    spacing: float | None = 0.5,
    jitter: bool = True,
) -> float:
    """Compute the delay before the next retry attempt.

    The delay grows exponentially (``base * 2^attempt``).  When *spacing*
    is given it races the exponential step and the shorter of the two is
    used, so with the defaults every retry waits at most half a second.

    When *jitter* is enabled the delay is randomly scaled to between 50 %
    and 100 % of its value, so concurrent callers do not retry in step.

    Parameters
    ----------
    attempt:
        The attempt that just failed (0-indexed).
    base:
        First exponential step, in seconds.
    spacing:
        Flat delay raced against the exponential step, or ``None``.
    jitter:
        Whether to apply random jitter.
    """
    delay = base * (2 ** attempt)
    if spacing is not None:
        delay = min(delay, spacing)

    if jitter:
        delay *= 0.5 + random.random() * 0.5

    return delay
