r"""Fixed backoff strategy."""

from __future__ import annotations

__all__ = ["FixedBackoff"]

from retryable.backoff.base import BaseBackoffStrategy


class FixedBackoff(BaseBackoffStrategy):
    """Fixed backoff strategy.

    Returns the base delay for every attempt, regardless of the attempt
    number. This is the default strategy of a retry policy.

    Example:
        ```pycon
        >>> from retryable.backoff import FixedBackoff
        >>> backoff = FixedBackoff()
        >>> backoff.next_delay(250, 1)
        250
        >>> backoff.next_delay(250, 10)
        250

        ```
    """

    def next_delay(self, base: int, attempt: int) -> int:  # noqa: ARG002
        return base
