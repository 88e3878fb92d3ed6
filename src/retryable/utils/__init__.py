r"""Utility functions for retry configuration and execution.

This package provides argument validation helpers and the cancellable
wait used between two retry attempts.
"""

from __future__ import annotations

__all__ = ["require_callable", "validate_non_negative", "wait_before_retry"]

from retryable.utils.sleep import wait_before_retry
from retryable.utils.validation import require_callable, validate_non_negative
