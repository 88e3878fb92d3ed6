r"""Retry package implementing the policy-driven retry engine.

Public API:
    - RetryPolicy: Fluent builder for retry behavior
    - RetryConfig: Frozen snapshot of a policy used by the engine
    - Retryable: Engine running a task under a policy
    - Outcome: Immutable record of a finished retry session
    - TerminationReason: Why a retry session stopped
    - RetryInfo: Information passed to the on_retry callback
    - CallbackManager: Invokes the configured callbacks
    - retry: Decorator running a function under a policy
"""

from __future__ import annotations

__all__ = [
    "CallbackManager",
    "Outcome",
    "RetryConfig",
    "RetryInfo",
    "RetryPolicy",
    "Retryable",
    "TerminationReason",
    "retry",
]

from retryable.retry.callbacks import CallbackManager, RetryInfo
from retryable.retry.executor import Retryable, retry
from retryable.retry.outcome import Outcome, TerminationReason
from retryable.retry.policy import RetryConfig, RetryPolicy
