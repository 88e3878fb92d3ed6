r"""Retry policy configuration.

This module provides ``RetryPolicy``, a fluent builder that collects the
predicates, retry budget and backoff settings of a retry session, and
``RetryConfig``, the frozen snapshot of a policy consumed by the engine.

Predicates receive the attempt number (1-indexed) first and the result or
exception second. A predicate that raises is never caught by the engine.
"""

from __future__ import annotations

__all__ = ["RetryConfig", "RetryPolicy"]

import threading
from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING, Any

from retryable.backoff import FIXED
from retryable.config import DEFAULT_BASE_DELAY_MS, DEFAULT_MAX_RETRIES
from retryable.timeunit import TimeUnit
from retryable.utils.validation import require_callable, validate_non_negative

if TYPE_CHECKING:
    from collections.abc import Callable

    from retryable.backoff import BackoffStrategy
    from retryable.retry.callbacks import RetryInfo
    from retryable.retry.outcome import Outcome


def accept_any_result(attempt: int, result: Any) -> bool:  # noqa: ARG001
    return True


def never_match(attempt: int, exc: Exception) -> bool:  # noqa: ARG001
    return False


@dataclass(frozen=True)
class RetryConfig:
    """Frozen snapshot of a retry policy.

    Attributes:
        result_predicate: Accepts or rejects a produced result.
        exception_predicate: Decides whether a raised exception is
            retryable.
        skip_predicate: Marks exceptions that must never be retried; wins
            over ``exception_predicate``.
        max_retries: Number of retries after the initial attempt.
        base_delay_ms: Base delay in milliseconds passed to the backoff
            strategy.
        backoff_strategy: Computes the delay before the next attempt.
        cancel_event: Optional event that cancels the wait between two
            attempts.
        on_retry: Optional callback invoked before each retry.
        on_success: Optional callback invoked with a successful outcome.
        on_failure: Optional callback invoked with a failed outcome.
    """

    result_predicate: Callable[[int, Any], bool] = accept_any_result
    exception_predicate: Callable[[int, Exception], bool] = never_match
    skip_predicate: Callable[[int, Exception], bool] = never_match
    max_retries: int = DEFAULT_MAX_RETRIES
    base_delay_ms: int = DEFAULT_BASE_DELAY_MS
    backoff_strategy: BackoffStrategy = FIXED
    cancel_event: threading.Event | None = None
    on_retry: Callable[[RetryInfo], None] | None = None
    on_success: Callable[[Outcome], None] | None = None
    on_failure: Callable[[Outcome], None] | None = None


class RetryPolicy:
    """Fluent builder for retry behavior.

    Every setter validates its argument, updates the policy and returns
    it, so calls can be chained. The defaults accept any result, never
    retry an exception, perform a single attempt and do not wait.

    A policy is meant to be configured from a single thread. Each run of
    the engine takes its own snapshot through ``freeze``, so changing a
    policy never affects a run in progress.

    Example:
        ```pycon
        >>> from retryable import RetryPolicy, TimeUnit
        >>> from retryable.backoff import EXPONENTIAL
        >>> policy = (
        ...     RetryPolicy()
        ...     .retry_until_result(lambda attempt, value: value is not None)
        ...     .retry_on_exceptions(OSError)
        ...     .no_retry_on_exceptions(FileNotFoundError)
        ...     .max_retries(3)
        ...     .base_delay(1, TimeUnit.SECONDS)
        ...     .backoff(EXPONENTIAL)
        ... )
        >>> config = policy.freeze()
        >>> config.max_retries, config.base_delay_ms
        (3, 1000)

        ```
    """

    def __init__(self) -> None:
        self._config: dict[str, Any] = {}

    def retry_until_result(self, predicate: Callable[[int, Any], bool]) -> RetryPolicy:
        """Set the predicate a produced result must satisfy to be
        accepted.

        A rejected result is retried, subject to the retry budget.

        Args:
            predicate: Function of ``(attempt, result)``.

        Returns:
            This policy.

        Raises:
            TypeError: If ``predicate`` is ``None`` or not callable.
        """
        self._config["result_predicate"] = require_callable(predicate, "predicate")
        return self

    def retry_on_failure(self, predicate: Callable[[int, Exception], bool]) -> RetryPolicy:
        """Set the predicate deciding whether a raised exception is
        retryable.

        Args:
            predicate: Function of ``(attempt, exception)``.

        Returns:
            This policy.

        Raises:
            TypeError: If ``predicate`` is ``None`` or not callable.
        """
        self._config["exception_predicate"] = require_callable(predicate, "predicate")
        return self

    def no_retry_on_failure(self, predicate: Callable[[int, Exception], bool]) -> RetryPolicy:
        """Set the predicate marking exceptions that must never be
        retried.

        When an exception matches both this predicate and the one set by
        ``retry_on_failure``, this predicate takes precedence.

        Args:
            predicate: Function of ``(attempt, exception)``.

        Returns:
            This policy.

        Raises:
            TypeError: If ``predicate`` is ``None`` or not callable.
        """
        self._config["skip_predicate"] = require_callable(predicate, "predicate")
        return self

    def retry_on_exceptions(self, *exc_types: type[Exception]) -> RetryPolicy:
        """Retry exceptions that are instances of the given types."""
        types = _exception_types(exc_types)
        return self.retry_on_failure(lambda attempt, exc: isinstance(exc, types))

    def no_retry_on_exceptions(self, *exc_types: type[Exception]) -> RetryPolicy:
        """Never retry exceptions that are instances of the given types."""
        types = _exception_types(exc_types)
        return self.no_retry_on_failure(lambda attempt, exc: isinstance(exc, types))

    def max_retries(self, max_retries: int) -> RetryPolicy:
        """Set how many times the task is retried after the initial
        attempt.

        A negative value is normalized to 0. No upper bound is enforced.

        Args:
            max_retries: Number of retries to permit.

        Returns:
            This policy.

        Raises:
            TypeError: If ``max_retries`` is not an ``int`` or is a ``bool``.
        """
        if isinstance(max_retries, bool) or not isinstance(max_retries, int):
            msg = f"max_retries must be an int, got {type(max_retries).__name__}"
            raise TypeError(msg)
        self._config["max_retries"] = max(0, max_retries)
        return self

    def base_delay(
        self, duration: float | timedelta, unit: TimeUnit = TimeUnit.MILLISECONDS
    ) -> RetryPolicy:
        """Set the base delay passed to the backoff strategy.

        The value is converted to whole milliseconds. No upper bound is
        enforced.

        Args:
            duration: Amount of time, either a number expressed in ``unit``
                or a ``timedelta`` (``unit`` is then ignored).
            unit: Unit of a numeric ``duration``.

        Returns:
            This policy.

        Raises:
            TypeError: If ``duration`` or ``unit`` is ``None``.
            ValueError: If ``duration`` is negative.
        """
        if unit is None:
            msg = "unit must not be None"
            raise TypeError(msg)
        if isinstance(duration, timedelta):
            delay_ms = duration // timedelta(milliseconds=1)
        else:
            validate_non_negative(duration, "duration")
            delay_ms = unit.to_millis(duration)
        validate_non_negative(delay_ms, "duration")
        self._config["base_delay_ms"] = delay_ms
        return self

    def backoff(self, strategy: BackoffStrategy) -> RetryPolicy:
        """Set the strategy computing the delay before the next attempt.

        Args:
            strategy: A ``BaseBackoffStrategy`` or any function of
                ``(base_ms, attempt)`` returning milliseconds.

        Returns:
            This policy.

        Raises:
            TypeError: If ``strategy`` is ``None`` or not callable.
        """
        self._config["backoff_strategy"] = require_callable(strategy, "strategy")
        return self

    def cancel_on(self, event: threading.Event) -> RetryPolicy:
        """Set the event that cancels the wait between two attempts.

        When the event is set while the engine waits, the session ends
        with reason ``INTERRUPTED``. The engine never clears the event.

        Args:
            event: The cancellation event.

        Returns:
            This policy.

        Raises:
            TypeError: If ``event`` is not a ``threading.Event``.
        """
        if not isinstance(event, threading.Event):
            msg = f"event must be a threading.Event, got {type(event).__name__}"
            raise TypeError(msg)
        self._config["cancel_event"] = event
        return self

    def on_retry(self, callback: Callable[[RetryInfo], None]) -> RetryPolicy:
        """Set the callback invoked before each retry."""
        self._config["on_retry"] = require_callable(callback, "callback")
        return self

    def on_success(self, callback: Callable[[Outcome], None]) -> RetryPolicy:
        """Set the callback invoked with a successful outcome."""
        self._config["on_success"] = require_callable(callback, "callback")
        return self

    def on_failure(self, callback: Callable[[Outcome], None]) -> RetryPolicy:
        """Set the callback invoked with a failed outcome."""
        self._config["on_failure"] = require_callable(callback, "callback")
        return self

    def freeze(self) -> RetryConfig:
        """Return an immutable snapshot of the current settings."""
        return RetryConfig(**self._config)

    def execute(self, task: Callable[[], Any]) -> Outcome:
        """Run ``task`` under this policy.

        Args:
            task: The zero-argument callable to run.

        Returns:
            The outcome of the retry session.
        """
        from retryable.retry.executor import Retryable  # noqa: PLC0415

        return Retryable.of(task, self).run()

    def __repr__(self) -> str:
        args = ", ".join(f"{key}={value!r}" for key, value in self._config.items())
        return f"{self.__class__.__qualname__}({args})"


def _exception_types(exc_types: tuple[type[Exception], ...]) -> tuple[type[Exception], ...]:
    if not exc_types:
        msg = "at least one exception type is required"
        raise ValueError(msg)
    for exc_type in exc_types:
        if not (isinstance(exc_type, type) and issubclass(exc_type, BaseException)):
            msg = f"expected an exception type, got {exc_type!r}"
            raise TypeError(msg)
    return exc_types
