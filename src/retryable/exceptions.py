r"""Exceptions produced by the retry engine.

These exceptions are never raised to the caller of ``Retryable.run``.
They are attached to the ``Outcome`` as its ``error`` when a retry session
ends without a task-provided exception to report.
"""

from __future__ import annotations

__all__ = ["MaxRetriesExceededError", "RetryInterruptedError", "RetryableError"]


class RetryableError(Exception):
    """Base class for errors synthesized by the retry engine.

    Args:
        message: Human-readable description of the error.
        attempts: Number of attempts performed when the error was created.
    """

    def __init__(self, message: str, attempts: int) -> None:
        super().__init__(message)
        self.message = message
        self.attempts = attempts


class MaxRetriesExceededError(RetryableError):
    """Signals that every attempt produced a result rejected by the
    result predicate.

    Example:
        ```pycon
        >>> from retryable.exceptions import MaxRetriesExceededError
        >>> error = MaxRetriesExceededError(attempts=3)
        >>> str(error)
        'Result validation failed after 3 attempts'
        >>> error.attempts
        3

        ```
    """

    def __init__(self, attempts: int, message: str | None = None) -> None:
        if message is None:
            message = f"Result validation failed after {attempts} attempts"
        super().__init__(message, attempts)


class RetryInterruptedError(RetryableError):
    """Signals that the wait between two attempts was cancelled."""

    def __init__(self, attempts: int, message: str | None = None) -> None:
        if message is None:
            message = f"Retry interrupted while waiting after attempt {attempts}"
        super().__init__(message, attempts)
