r"""Retry engine executing a task under a retry policy.

This module provides ``Retryable``, which runs a zero-argument callable
until its result is accepted, it raises a non-retryable exception, or the
retry budget is exhausted, and the ``retry`` decorator built on top of it.
"""

from __future__ import annotations

__all__ = ["Retryable", "retry"]

import functools
import logging
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from retryable.exceptions import RetryInterruptedError
from retryable.result import Result
from retryable.retry.callbacks import CallbackManager
from retryable.retry.outcome import Outcome, TerminationReason
from retryable.retry.policy import RetryPolicy
from retryable.utils.sleep import wait_before_retry
from retryable.utils.validation import require_callable

if TYPE_CHECKING:
    from collections.abc import Callable

    from retryable.retry.policy import RetryConfig

T = TypeVar("T")

logger: logging.Logger = logging.getLogger(__name__)


class Retryable(Generic[T]):
    """Executes a task with retry semantics.

    Each attempt calls the task once and classifies what happened:

    - A produced value accepted by the result predicate ends the session
      with ``SUCCEEDED``; a rejected value is retried.
    - A raised exception matching the no-retry predicate ends the session
      with ``ABORTED_SKIP_RETRY_EXCEPTION``; otherwise an exception
      rejected by the exception predicate ends it with
      ``ABORTED_NON_RETRYABLE_EXCEPTION``; otherwise it is retried.
    - Once ``max_retries + 1`` attempts have failed, the session ends with
      ``RETRIES_EXHAUSTED_INVALID_RESULT`` or
      ``RETRIES_EXHAUSTED_RETRYABLE_EXCEPTION`` depending on the last
      attempt.
    - Between two attempts the engine waits for the delay computed by the
      backoff strategy. Setting the policy's cancel event during that wait
      ends the session with ``INTERRUPTED``.

    Exceptions raised by the task are always absorbed into the returned
    ``Outcome``. Exceptions raised by predicates, the backoff strategy or
    callbacks propagate to the caller.

    The engine takes a snapshot of its policy at the start of every run
    and keeps the loop state local to that run. A ``Retryable`` is a plain
    zero-argument callable, so it can be submitted to an executor such as
    ``concurrent.futures.ThreadPoolExecutor``. The task itself is
    re-invoked on retry and must tolerate repeated side effects.

    Args:
        task: The zero-argument callable to run.
        policy: The retry policy. Defaults to ``RetryPolicy()``.

    Raises:
        TypeError: If ``task`` is ``None`` or not callable.

    Example:
        ```pycon
        >>> from retryable import Retryable, RetryPolicy
        >>> attempts = iter([OSError("busy"), 100])
        >>> def task() -> int:
        ...     value = next(attempts)
        ...     if isinstance(value, Exception):
        ...         raise value
        ...     return value
        ...
        >>> policy = RetryPolicy().retry_on_exceptions(OSError).max_retries(2)
        >>> outcome = Retryable.of(task, policy).run()
        >>> outcome.succeeded, outcome.data, outcome.attempts
        (True, 100, 2)

        ```
    """

    def __init__(self, task: Callable[[], T], policy: RetryPolicy | None = None) -> None:
        self.task = require_callable(task, "task")
        self.policy = policy if policy is not None else RetryPolicy()

    @classmethod
    def of(cls, task: Callable[[], T], policy: RetryPolicy | None = None) -> Retryable[T]:
        """Create a ``Retryable`` for ``task``.

        Args:
            task: The zero-argument callable to run.
            policy: The retry policy. Defaults to ``RetryPolicy()``.

        Returns:
            A new ``Retryable``.
        """
        return cls(task, policy)

    def __call__(self) -> Outcome[T]:
        return self.run()

    def call(self) -> Outcome[T]:
        """Alias of ``run``."""
        return self.run()

    def run(self) -> Outcome[T]:
        """Run the task applying all retry rules and validation.

        Returns:
            The outcome describing success or failure, the number of
            attempts and why the session stopped.
        """
        config = self.policy.freeze()
        callbacks = CallbackManager(config)
        total = config.max_retries + 1
        attempt = 0

        while True:
            attempt += 1
            current = Result.capture(self.task)

            outcome = self._classify(current, attempt, config)
            if outcome is not None:
                return callbacks.on_outcome(outcome)

            if attempt > config.max_retries:
                outcome = self._exhausted(current, attempt)
                logger.debug(
                    f"Retries exhausted after {attempt} attempts ({outcome.reason.name})"
                )
                return callbacks.on_outcome(outcome)

            delay = config.backoff_strategy(config.base_delay_ms, attempt)
            callbacks.on_retry(
                attempt,
                delay,
                current.error,
                None if current.is_failure() else current.data,
            )
            logger.debug(f"Waiting {delay}ms before attempt {attempt + 1}/{total}")
            if wait_before_retry(delay, config.cancel_event):
                logger.debug(f"Interrupted while waiting after attempt {attempt}/{total}")
                outcome = Outcome.failure(
                    RetryInterruptedError(attempt), attempt, TerminationReason.INTERRUPTED
                )
                return callbacks.on_outcome(outcome)

    @staticmethod
    def _classify(current: Result[T], attempt: int, config: RetryConfig) -> Outcome[T] | None:
        """Return the terminal outcome of an attempt, or ``None`` if the
        attempt should be retried."""
        total = config.max_retries + 1
        if current.is_success():
            if config.result_predicate(attempt, current.data):
                logger.debug(f"Attempt {attempt}/{total} succeeded")
                return Outcome.success(current.data, attempt)
            logger.debug(f"Attempt {attempt}/{total} produced a rejected result")
            return None

        error = current.error
        error_type = type(error).__name__
        if config.skip_predicate(attempt, error):
            logger.debug(f"Attempt {attempt}/{total} raised {error_type}, retry skipped")
            return Outcome.failure(error, attempt, TerminationReason.ABORTED_SKIP_RETRY_EXCEPTION)
        if not config.exception_predicate(attempt, error):
            logger.debug(f"Attempt {attempt}/{total} raised non-retryable {error_type}: {error}")
            return Outcome.failure(
                error, attempt, TerminationReason.ABORTED_NON_RETRYABLE_EXCEPTION
            )
        logger.debug(f"Attempt {attempt}/{total} raised retryable {error_type}: {error}")
        return None

    @staticmethod
    def _exhausted(current: Result[T], attempt: int) -> Outcome[T]:
        if current.is_success():
            return Outcome.exhausted_invalid_result(current.data, attempt)
        return Outcome.failure(
            current.error, attempt, TerminationReason.RETRIES_EXHAUSTED_RETRYABLE_EXCEPTION
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(task={self.task!r}, policy={self.policy!r})"


def retry(
    policy: RetryPolicy | None = None,
) -> Callable[[Callable[..., T]], Callable[..., Outcome[T]]]:
    """Decorate a function so that each call runs under a retry policy.

    The decorated function returns the ``Outcome`` of the retry session
    instead of the function's value. The call arguments are bound once
    and reused for every attempt.

    Args:
        policy: The retry policy. Defaults to ``RetryPolicy()``.

    Returns:
        The decorator.

    Example:
        ```pycon
        >>> from retryable import RetryPolicy, retry
        >>> @retry(RetryPolicy().retry_on_exceptions(ZeroDivisionError).max_retries(2))
        ... def divide(a: int, b: int) -> float:
        ...     return a / b
        ...
        >>> divide(6, 3).data
        2.0
        >>> outcome = divide(1, 0)
        >>> outcome.attempts, outcome.reason.name
        (3, 'RETRIES_EXHAUSTED_RETRYABLE_EXCEPTION')

        ```
    """

    def decorator(func: Callable[..., T]) -> Callable[..., Outcome[T]]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Outcome[T]:
            return Retryable.of(functools.partial(func, *args, **kwargs), policy).run()

        return wrapper

    return decorator
