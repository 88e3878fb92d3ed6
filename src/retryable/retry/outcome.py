r"""Immutable record of a completed retry session.

This module provides the ``Outcome`` returned by ``Retryable.run`` and
the ``TerminationReason`` enumeration that tells callers precisely why
the retry loop stopped.
"""

from __future__ import annotations

__all__ = ["Outcome", "TerminationReason"]

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from retryable.exceptions import MaxRetriesExceededError
from retryable.result import BaseOutcome, Result

T = TypeVar("T")


class TerminationReason(Enum):
    """Reason why a retry session stopped."""

    # The task produced a result accepted by the result predicate
    SUCCEEDED = "succeeded"
    # Every attempt produced a result rejected by the result predicate
    RETRIES_EXHAUSTED_INVALID_RESULT = "retries_exhausted_invalid_result"
    # Every attempt raised an exception accepted as retryable
    RETRIES_EXHAUSTED_RETRYABLE_EXCEPTION = "retries_exhausted_retryable_exception"
    # The task raised an exception not accepted as retryable
    ABORTED_NON_RETRYABLE_EXCEPTION = "aborted_non_retryable_exception"
    # The task raised an exception matching the no-retry predicate
    ABORTED_SKIP_RETRY_EXCEPTION = "aborted_skip_retry_exception"
    # The wait between two attempts was cancelled
    INTERRUPTED = "interrupted"


@dataclass(frozen=True)
class Outcome(BaseOutcome[T], Generic[T]):
    """Immutable description of how a retry session ended.

    Attributes:
        data: The accepted result; only meaningful when the session
            succeeded. May be ``None`` if the task returned ``None``.
        error: The exception describing the failure, ``None`` on success.
            For ``RETRIES_EXHAUSTED_INVALID_RESULT`` it is a synthesized
            ``MaxRetriesExceededError``; for ``INTERRUPTED`` it is a
            ``RetryInterruptedError``.
        attempts: Total number of attempts performed, including the last.
        reason: Why the session stopped.
        invalid_data: The last rejected result; only set for
            ``RETRIES_EXHAUSTED_INVALID_RESULT``.

    Raises:
        ValueError: If the fields are inconsistent with ``reason``.

    Example:
        ```pycon
        >>> from retryable.retry import Outcome, TerminationReason
        >>> outcome = Outcome.success(42, attempts=2)
        >>> outcome.succeeded, outcome.attempts, outcome.reason.name
        (True, 2, 'SUCCEEDED')
        >>> outcome.to_result()
        Result(data=42)
        >>> outcome = Outcome.exhausted_invalid_result(1, attempts=3)
        >>> outcome.succeeded, outcome.invalid_data, str(outcome.error)
        (False, 1, 'Result validation failed after 3 attempts')

        ```
    """

    data: T | None
    error: Exception | None
    attempts: int
    reason: TerminationReason
    invalid_data: T | None = None

    def __post_init__(self) -> None:
        if self.attempts < 1:
            msg = f"attempts must be >= 1, got {self.attempts}"
            raise ValueError(msg)
        if (self.reason is TerminationReason.SUCCEEDED) != (self.error is None):
            msg = f"error must be None if and only if reason is SUCCEEDED, got {self.reason.name}"
            raise ValueError(msg)
        if (
            self.invalid_data is not None
            and self.reason is not TerminationReason.RETRIES_EXHAUSTED_INVALID_RESULT
        ):
            msg = (
                "invalid_data is only allowed for RETRIES_EXHAUSTED_INVALID_RESULT, "
                f"got {self.reason.name}"
            )
            raise ValueError(msg)

    @classmethod
    def success(cls, data: T | None, attempts: int) -> Outcome[T]:
        """Create a successful outcome.

        Args:
            data: The accepted result.
            attempts: Total number of attempts, including the successful one.

        Returns:
            An outcome with reason ``SUCCEEDED``.
        """
        return cls(data=data, error=None, attempts=attempts, reason=TerminationReason.SUCCEEDED)

    @classmethod
    def failure(cls, error: Exception, attempts: int, reason: TerminationReason) -> Outcome[T]:
        """Create a failed outcome carrying an exception.

        Args:
            error: The exception describing the failure.
            attempts: Total number of attempts performed.
            reason: Why the session stopped.

        Returns:
            A failed outcome.
        """
        return cls(data=None, error=error, attempts=attempts, reason=reason)

    @classmethod
    def exhausted_invalid_result(cls, invalid_data: T | None, attempts: int) -> Outcome[T]:
        """Create the outcome of a session whose results were all
        rejected.

        Args:
            invalid_data: The last rejected result.
            attempts: Total number of attempts performed.

        Returns:
            An outcome with reason ``RETRIES_EXHAUSTED_INVALID_RESULT`` and
            a synthesized ``MaxRetriesExceededError``.
        """
        return cls(
            data=None,
            error=MaxRetriesExceededError(attempts),
            attempts=attempts,
            reason=TerminationReason.RETRIES_EXHAUSTED_INVALID_RESULT,
            invalid_data=invalid_data,
        )

    @property
    def succeeded(self) -> bool:
        return self.reason is TerminationReason.SUCCEEDED

    def is_failure(self) -> bool:
        return not self.succeeded

    def to_result(self) -> Result[T]:
        """Project this outcome onto a ``Result`` with the same
        success/failure semantics.

        Returns:
            ``Result.success(data)`` or ``Result.failure(error)``.
        """
        if self.is_failure():
            return Result.failure(self.error)
        return Result.success(self.data)
