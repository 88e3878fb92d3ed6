r"""Argument validation helpers for retry configuration.

All configuration errors are reported when the setter is called, never
deferred to execution time.
"""

from __future__ import annotations

__all__ = ["require_callable", "validate_non_negative"]

from typing import Any


def require_callable(value: Any, name: str) -> Any:
    """Check that a configuration value is a callable.

    Args:
        value: The value to check.
        name: The argument name, used in the error message.

    Returns:
        The value unchanged.

    Raises:
        TypeError: If the value is ``None`` or not callable.

    Example:
        ```pycon
        >>> from retryable.utils.validation import require_callable
        >>> require_callable(len, "predicate")
        <built-in function len>

        ```
    """
    if value is None:
        msg = f"{name} must not be None"
        raise TypeError(msg)
    if not callable(value):
        msg = f"{name} must be callable, got {type(value).__name__}"
        raise TypeError(msg)
    return value


def validate_non_negative(value: float, name: str) -> None:
    """Check that a numeric configuration value is not negative.

    Args:
        value: The value to check.
        name: The argument name, used in the error message.

    Raises:
        TypeError: If the value is ``None``.
        ValueError: If the value is negative.
    """
    if value is None:
        msg = f"{name} must not be None"
        raise TypeError(msg)
    if value < 0:
        msg = f"{name} must be non-negative, got {value}"
        raise ValueError(msg)
