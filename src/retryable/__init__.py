r"""retryable - Policy-driven retry execution for Python callables.

This package runs a fallible zero-argument callable repeatedly until its
result is accepted, it raises an exception the policy does not retry, or
the retry budget is exhausted. Every session ends in an immutable
``Outcome`` that records the number of attempts and the precise reason
the loop stopped.

Key Features:
    - Result validation and exception classification through predicates
    - "Never retry" predicate taking precedence over retryable exceptions
    - Fixed, linear and exponential backoff, plus custom strategies
    - Overflow-safe delay arithmetic
    - Cancellation of the wait between attempts with a threading.Event
    - Lifecycle callbacks for observability
    - Conversion of outcomes to a generic success/failure ``Result``

Example:
    ```pycon
    >>> from retryable import Retryable, RetryPolicy, TimeUnit
    >>> from retryable.backoff import EXPONENTIAL
    >>> policy = (
    ...     RetryPolicy()
    ...     .retry_until_result(lambda attempt, value: value == 2)
    ...     .max_retries(1)
    ...     .base_delay(0, TimeUnit.MILLISECONDS)
    ...     .backoff(EXPONENTIAL)
    ... )
    >>> outcome = Retryable.of(lambda: 1, policy).run()
    >>> outcome.succeeded, outcome.attempts, outcome.reason.name, outcome.invalid_data
    (False, 2, 'RETRIES_EXHAUSTED_INVALID_RESULT', 1)
    >>> outcome.to_result().is_success()
    False

    ```
"""

from __future__ import annotations

__all__ = [
    "MaxRetriesExceededError",
    "Outcome",
    "Result",
    "RetryConfig",
    "RetryInfo",
    "RetryInterruptedError",
    "RetryPolicy",
    "Retryable",
    "RetryableError",
    "TerminationReason",
    "TimeUnit",
    "__version__",
    "retry",
]

from importlib.metadata import PackageNotFoundError, version

from retryable.exceptions import (
    MaxRetriesExceededError,
    RetryableError,
    RetryInterruptedError,
)
from retryable.result import Result
from retryable.retry import (
    Outcome,
    RetryConfig,
    Retryable,
    RetryInfo,
    RetryPolicy,
    TerminationReason,
    retry,
)
from retryable.timeunit import TimeUnit

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
