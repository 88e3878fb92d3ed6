r"""Abstract base class for backoff strategies."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy"]

from abc import ABC, abstractmethod


class BaseBackoffStrategy(ABC):
    """Abstract base class for backoff strategies.

    A backoff strategy determines how long to wait before the next attempt
    from the configured base delay and the number of the attempt that just
    failed. Strategies are pure functions of their two arguments.

    Instances are callable, so a strategy object and a plain function with
    the signature ``(base, attempt) -> int`` are interchangeable wherever a
    strategy is accepted.
    """

    @abstractmethod
    def next_delay(self, base: int, attempt: int) -> int:
        """Calculate the delay before the next attempt.

        Args:
            base: The base delay in milliseconds.
            attempt: The number of the attempt that just failed (1-indexed).

        Returns:
            The delay in milliseconds before the next attempt.
        """

    def __call__(self, base: int, attempt: int) -> int:
        return self.next_delay(base, attempt)

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}()"
