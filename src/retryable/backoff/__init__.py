r"""Backoff strategies for retry delays.

This package provides the fixed, linear and exponential backoff
strategies, plus ready-to-use instances of each. Custom strategies either
subclass ``BaseBackoffStrategy`` or are plain functions with the signature
``(base, attempt) -> int``.
"""

from __future__ import annotations

__all__ = [
    "EXPONENTIAL",
    "FIXED",
    "LINEAR",
    "BackoffStrategy",
    "BaseBackoffStrategy",
    "ExponentialBackoff",
    "FixedBackoff",
    "LinearBackoff",
]

from collections.abc import Callable

from retryable.backoff.base import BaseBackoffStrategy
from retryable.backoff.exponential import ExponentialBackoff
from retryable.backoff.fixed import FixedBackoff
from retryable.backoff.linear import LinearBackoff

# Anything that maps (base_ms, attempt) to a delay in milliseconds
BackoffStrategy = Callable[[int, int], int]

FIXED = FixedBackoff()
LINEAR = LinearBackoff()
EXPONENTIAL = ExponentialBackoff()
