r"""Shared accessors for values that are either a success or a failure."""

from __future__ import annotations

__all__ = ["BaseOutcome"]

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable

T = TypeVar("T")


class BaseOutcome(ABC, Generic[T]):
    """Abstract base class for success-or-failure values.

    Subclasses expose a ``data`` attribute holding the value produced on
    success and an ``error`` attribute holding the exception on failure,
    and decide which variant they represent by implementing
    ``is_failure``.
    """

    data: T | None
    error: Exception | None

    @abstractmethod
    def is_failure(self) -> bool:
        """Indicate whether this value represents a failure."""

    def is_success(self) -> bool:
        """Indicate whether this value represents a success."""
        return not self.is_failure()

    def or_else(self, other: T) -> T:
        """Return the data on success, otherwise ``other``.

        Args:
            other: The fallback value.

        Returns:
            The data or the fallback value.
        """
        return other if self.is_failure() else self.data

    def or_else_get(self, supplier: Callable[[], T]) -> T:
        """Return the data on success, otherwise the value computed by
        ``supplier``.

        The supplier is only called on failure.

        Args:
            supplier: Zero-argument function computing the fallback value.

        Returns:
            The data or the computed fallback value.
        """
        return supplier() if self.is_failure() else self.data

    def or_else_map(self, mapper: Callable[[Exception | None], T]) -> T:
        """Return the data on success, otherwise the value computed from
        the stored error.

        Args:
            mapper: Function mapping the stored error to a fallback value.

        Returns:
            The data or the mapped fallback value.
        """
        return mapper(self.error) if self.is_failure() else self.data

    def or_else_throw(
        self, exception_factory: Callable[[Exception | None], BaseException] | None = None
    ) -> T:
        """Return the data on success, otherwise raise.

        Args:
            exception_factory: Optional function mapping the stored error
                to the exception to raise. If omitted, the stored error is
                raised as is.

        Returns:
            The data.

        Raises:
            Exception: The stored error, or the exception built by
                ``exception_factory``, if this value is a failure.
        """
        if self.is_success():
            return self.data
        if exception_factory is not None:
            raise exception_factory(self.error)
        raise self.error

    def to_optional(self) -> T | None:
        """Return the data on success, otherwise ``None``."""
        return None if self.is_failure() else self.data

    def _describe(self) -> dict[str, Any]:
        if self.is_failure():
            return {"error": self.error}
        return {"data": self.data}
