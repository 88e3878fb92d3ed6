r"""Two-variant value holding either a produced value or a raised error."""

from __future__ import annotations

__all__ = ["Result"]

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from retryable.result.base import BaseOutcome

if TYPE_CHECKING:
    from collections.abc import Callable

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True, repr=False)
class Result(BaseOutcome[T], Generic[T]):
    """Immutable success-or-failure value.

    A success carries the produced ``data`` (which may be ``None``); a
    failure carries the raised ``error``. A result is never both.

    Functions passed to ``map``, ``flat_map``, ``recover`` and
    ``otherwise`` run inside the same capture as ``Result.capture``: an
    exception they raise becomes a failure instead of propagating.

    Example:
        ```pycon
        >>> from retryable.result import Result
        >>> Result.success(2).map(lambda x: x * 10)
        Result(data=20)
        >>> Result.capture(int, "oops").is_failure()
        True
        >>> Result.capture(int, "oops").recover(lambda e: Result.success(0), ValueError)
        Result(data=0)
        >>> Result.failure(KeyError("k")).or_else(-1)
        -1

        ```
    """

    data: T | None = None
    error: Exception | None = None

    @classmethod
    def success(cls, data: T | None) -> Result[T]:
        """Create a successful result.

        Args:
            data: The produced value.

        Returns:
            A successful result.
        """
        return cls(data=data)

    @classmethod
    def failure(cls, error: Exception) -> Result[T]:
        """Create a failed result.

        Args:
            error: The raised exception.

        Returns:
            A failed result.

        Raises:
            TypeError: If ``error`` is ``None``.
        """
        if error is None:
            msg = "error must not be None"
            raise TypeError(msg)
        return cls(error=error)

    @classmethod
    def capture(cls, func: Callable[..., T], *args: Any, **kwargs: Any) -> Result[T]:
        """Call a function and capture its value or the exception it
        raises.

        Only ``Exception`` subclasses are captured; ``KeyboardInterrupt``
        and ``SystemExit`` propagate.

        Args:
            func: The function to call.
            *args: Positional arguments passed to ``func``.
            **kwargs: Keyword arguments passed to ``func``.

        Returns:
            A successful result with the returned value, or a failed
            result with the raised exception.
        """
        try:
            return cls.success(func(*args, **kwargs))
        except Exception as exc:  # noqa: BLE001
            return cls.failure(exc)

    def is_failure(self) -> bool:
        return self.error is not None

    def map(self, mapper: Callable[[T], U]) -> Result[U]:
        """Transform the data of a successful result.

        Args:
            mapper: Function applied to the data.

        Returns:
            The mapped result, this failure unchanged, or a failure holding
            the exception raised by ``mapper``.
        """
        if self.is_failure():
            return self
        return Result.capture(mapper, self.data)

    def flat_map(self, mapper: Callable[[T], Result[U]]) -> Result[U]:
        """Chain a result-producing function on a successful result.

        Args:
            mapper: Function applied to the data, returning a result.

        Returns:
            The result returned by ``mapper``, this failure unchanged, or a
            failure holding the exception raised by ``mapper``.
        """
        if self.is_failure():
            return self
        try:
            return mapper(self.data)
        except Exception as exc:  # noqa: BLE001
            return Result.failure(exc)

    def recover(
        self,
        mapper: Callable[[Exception], Result[T]],
        *exc_types: type[Exception],
        when: Callable[[Exception], bool] | None = None,
    ) -> Result[T]:
        """Replace a failure with the result computed from its error.

        The error can be filtered by exception type, by predicate, or
        both. A failure that does not match is returned unchanged.

        Args:
            mapper: Function mapping the error to a replacement result.
            *exc_types: Optional exception types the error must be an
                instance of.
            when: Optional predicate the error must satisfy.

        Returns:
            The replacement result, or this result unchanged.
        """
        if self.is_success():
            return self
        if exc_types and not isinstance(self.error, exc_types):
            return self
        if when is not None and not when(self.error):
            return self
        try:
            return mapper(self.error)
        except Exception as exc:  # noqa: BLE001
            return Result.failure(exc)

    def otherwise(self, mapper: Callable[[Exception], T]) -> Result[T]:
        """Replace a failure with a success holding a value computed from
        its error.

        Args:
            mapper: Function mapping the error to a value.

        Returns:
            A successful result, or this result if it already succeeded.
        """
        if self.is_success():
            return self
        return Result.capture(mapper, self.error)

    def on_success(self, consumer: Callable[[T], Any]) -> Result[T]:
        """Call ``consumer`` with the data if this result is a success."""
        if self.is_success():
            consumer(self.data)
        return self

    def on_failure(
        self, consumer: Callable[[Exception], Any], *exc_types: type[Exception]
    ) -> Result[T]:
        """Call ``consumer`` with the error if this result is a failure
        whose error matches ``exc_types`` (any error when omitted)."""
        if self.is_failure() and (not exc_types or isinstance(self.error, exc_types)):
            consumer(self.error)
        return self

    def __repr__(self) -> str:
        fields = ", ".join(f"{key}={value!r}" for key, value in self._describe().items())
        return f"{self.__class__.__qualname__}({fields})"
