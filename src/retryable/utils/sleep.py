r"""Cancellable waiting between two retry attempts.

The wait is the only point where a retry session can be cancelled. When
a ``threading.Event`` is supplied, the wait returns early as soon as the
event is set; otherwise the calling thread sleeps for the full delay.
"""

from __future__ import annotations

__all__ = ["MAX_SLEEP_CHUNK_SECONDS", "wait_before_retry"]

import logging
import threading
import time

logger: logging.Logger = logging.getLogger(__name__)

# time.sleep rejects durations close to threading.TIMEOUT_MAX, so long
# sleeps are split into chunks of at most one day
MAX_SLEEP_CHUNK_SECONDS = 86_400.0


def wait_before_retry(delay_ms: int, cancel_event: threading.Event | None = None) -> bool:
    """Block the calling thread before the next retry attempt.

    The delay is clamped to ``threading.TIMEOUT_MAX`` seconds so that very
    large delays produced by saturating backoff strategies do not overflow
    the platform wait primitives. Without a cancel event, the sleep is
    split into chunks of at most ``MAX_SLEEP_CHUNK_SECONDS``. The cancel event is never cleared so
    enclosing code can also observe the cancellation.

    Args:
        delay_ms: The delay in milliseconds. Non-positive delays return
            immediately without checking the cancel event.
        cancel_event: Optional event that cancels the wait when set.

    Returns:
        ``True`` if the wait was cancelled, otherwise ``False``.

    Example:
        ```pycon
        >>> import threading
        >>> from retryable.utils.sleep import wait_before_retry
        >>> wait_before_retry(0)
        False
        >>> event = threading.Event()
        >>> event.set()
        >>> wait_before_retry(10, event)
        True

        ```
    """
    if delay_ms <= 0:
        return False
    seconds = min(delay_ms / 1000, threading.TIMEOUT_MAX)
    if cancel_event is None:
        _sleep(seconds)
        return False
    if cancel_event.wait(seconds):
        logger.debug(f"Wait of {delay_ms}ms cancelled")
        return True
    return False


def _sleep(seconds: float) -> None:
    remaining = seconds
    while remaining > 0:
        chunk = min(remaining, MAX_SLEEP_CHUNK_SECONDS)
        time.sleep(chunk)
        remaining -= chunk
