r"""Exponential backoff strategy."""

from __future__ import annotations

__all__ = ["ExponentialBackoff"]

from retryable.backoff.base import BaseBackoffStrategy
from retryable.config import MAX_DELAY_MS

# Exponents at or above this value make 2**exponent exceed MAX_DELAY_MS
_MAX_SHIFT = MAX_DELAY_MS.bit_length()


class ExponentialBackoff(BaseBackoffStrategy):
    """Exponential backoff strategy.

    Calculates delay as: base * (2 ** (attempt - 1)), doubling the delay
    with each attempt: base, base*2, base*4, base*8, and so on.

    The arithmetic saturates instead of growing without bound. A
    non-positive base or attempt yields no delay, and any delay that would
    exceed ``MAX_DELAY_MS`` is reported as ``MAX_DELAY_MS``.

    Example:
        ```pycon
        >>> from retryable.backoff import ExponentialBackoff
        >>> backoff = ExponentialBackoff()
        >>> backoff.next_delay(100, 1)
        100
        >>> backoff.next_delay(100, 2)
        200
        >>> backoff.next_delay(100, 4)
        800
        >>> backoff.next_delay(0, 4)
        0
        >>> backoff.next_delay(1, 65)
        9223372036854775807

        ```
    """

    def next_delay(self, base: int, attempt: int) -> int:
        """Calculate exponential backoff delay.

        Args:
            base: The base delay in milliseconds.
            attempt: The number of the attempt that just failed (1-indexed).

        Returns:
            The calculated delay: base * (2 ** (attempt - 1)), or 0 for a
            non-positive base or attempt, or ``MAX_DELAY_MS`` on overflow.
        """
        if attempt <= 0 or base <= 0:
            return 0

        shift = attempt - 1
        if shift >= _MAX_SHIFT:
            return MAX_DELAY_MS

        multiplier = 1 << shift
        if base > MAX_DELAY_MS // multiplier:
            return MAX_DELAY_MS
        return base * multiplier
