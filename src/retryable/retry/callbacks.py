r"""Lifecycle callbacks for observing a retry session.

Three hooks are available:
- on_retry: Called after a failed attempt, before waiting for the next one
- on_success: Called with the outcome when the session succeeds
- on_failure: Called with the outcome when the session fails

Callbacks run synchronously on the calling thread. An exception raised by
a callback is not caught and escapes ``Retryable.run``.

Example:
    ```pycon
    >>> from retryable import Retryable, RetryPolicy
    >>> from retryable.retry import RetryInfo
    >>> def log_retry(info: RetryInfo) -> None:
    ...     print(f"Retry after attempt {info.attempt}/{info.max_retries + 1}")
    ...
    >>> values = iter([0, 0, 5])
    >>> policy = (
    ...     RetryPolicy()
    ...     .retry_until_result(lambda attempt, value: value > 0)
    ...     .max_retries(3)
    ...     .on_retry(log_retry)
    ... )
    >>> Retryable.of(lambda: next(values), policy).run().data
    Retry after attempt 1/4
    Retry after attempt 2/4
    5

    ```
"""

from __future__ import annotations

__all__ = ["CallbackManager", "RetryInfo"]

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from retryable.retry.outcome import Outcome
    from retryable.retry.policy import RetryConfig


@dataclass(frozen=True)
class RetryInfo:
    """Information passed to the on_retry callback.

    Attributes:
        attempt: The number of the attempt that just failed (1-indexed).
        max_retries: Maximum number of retries configured.
        delay_ms: The delay in milliseconds before the next attempt.
        error: The retryable exception raised by the attempt, if any.
        invalid_data: The rejected result of the attempt, if it produced
            a value.
    """

    attempt: int
    max_retries: int
    delay_ms: int
    error: Exception | None = None
    invalid_data: Any = None


class CallbackManager:
    """Invokes the callbacks configured on a retry policy.

    Attributes:
        config: The frozen configuration holding the callbacks.
    """

    def __init__(self, config: RetryConfig) -> None:
        self.config = config

    def on_retry(
        self,
        attempt: int,
        delay_ms: int,
        error: Exception | None,
        invalid_data: Any,
    ) -> None:
        """Invoke the on_retry callback if configured.

        Args:
            attempt: The number of the attempt that just failed.
            delay_ms: The delay before the next attempt.
            error: The retryable exception, if any.
            invalid_data: The rejected result, if any.
        """
        if self.config.on_retry is not None:
            self.config.on_retry(
                RetryInfo(
                    attempt=attempt,
                    max_retries=self.config.max_retries,
                    delay_ms=delay_ms,
                    error=error,
                    invalid_data=invalid_data,
                )
            )

    def on_outcome(self, outcome: Outcome) -> Outcome:
        """Invoke on_success or on_failure depending on the outcome.

        Args:
            outcome: The final outcome of the session.

        Returns:
            The outcome unchanged.
        """
        callback = self.config.on_success if outcome.succeeded else self.config.on_failure
        if callback is not None:
            callback(outcome)
        return outcome
