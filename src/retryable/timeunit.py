r"""Time units used to express the base delay of a retry policy."""

from __future__ import annotations

__all__ = ["TimeUnit"]

from enum import Enum


class TimeUnit(Enum):
    """Time unit whose value is the number of nanoseconds in one unit.

    Example:
        ```pycon
        >>> from retryable.timeunit import TimeUnit
        >>> TimeUnit.SECONDS.to_millis(2)
        2000
        >>> TimeUnit.MICROSECONDS.to_millis(2500)
        2
        >>> TimeUnit.MINUTES.to_millis(0.5)
        30000

        ```
    """

    NANOSECONDS = 1
    MICROSECONDS = 1_000
    MILLISECONDS = 1_000_000
    SECONDS = 1_000_000_000
    MINUTES = 60 * 1_000_000_000
    HOURS = 3_600 * 1_000_000_000
    DAYS = 86_400 * 1_000_000_000

    def to_millis(self, duration: float) -> int:
        """Convert a duration expressed in this unit to milliseconds.

        Float durations are first rounded to whole nanoseconds, then
        sub-millisecond remainders are truncated.

        Args:
            duration: The duration to convert.

        Returns:
            The duration in whole milliseconds.
        """
        if isinstance(duration, int):
            return duration * self.value // TimeUnit.MILLISECONDS.value
        return round(duration * self.value) // TimeUnit.MILLISECONDS.value
