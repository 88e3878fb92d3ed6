r"""Linear backoff strategy."""

from __future__ import annotations

__all__ = ["LinearBackoff"]

from retryable.backoff.base import BaseBackoffStrategy
from retryable.config import MAX_DELAY_MS


class LinearBackoff(BaseBackoffStrategy):
    """Linear backoff strategy.

    Calculates delay as: base * attempt, saturated at ``MAX_DELAY_MS``.

    This strategy provides evenly spaced retry delays: base, base*2,
    base*3, and so on.

    Example:
        ```pycon
        >>> from retryable.backoff import LinearBackoff
        >>> backoff = LinearBackoff()
        >>> backoff.next_delay(100, 1)
        100
        >>> backoff.next_delay(100, 2)
        200
        >>> backoff.next_delay(100, 3)
        300

        ```
    """

    def next_delay(self, base: int, attempt: int) -> int:
        """Calculate linear backoff delay.

        Args:
            base: The base delay in milliseconds.
            attempt: The number of the attempt that just failed (1-indexed).

        Returns:
            The calculated delay: base * attempt, capped at ``MAX_DELAY_MS``.
        """
        return min(base * attempt, MAX_DELAY_MS)
