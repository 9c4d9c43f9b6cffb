"""
Result type - explicit success/failure instead of exceptions.

Every fallible core operation returns a Result. A failed Result always
carries an Error; a successful one may carry a value.
"""

from typing import Generic, Optional, TypeVar

from openversion.domain.errors import Error

T = TypeVar('T')


class Result(Generic[T]):
    """Outcome of an operation: success (with optional value) or failure (with error)"""

    __slots__ = ("_value", "_error")

    def __init__(self, value: Optional[T] = None, error: Optional[Error] = None):
        # Use Result.success() / Result.failure()
        self._value = value
        self._error = error

    @classmethod
    def success(cls, value: Optional[T] = None) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: Error) -> "Result[T]":
        """
        Create a failed result.

        Raises:
            ValueError: If error is None - every failure must say why
        """
        if error is None:
            raise ValueError(
                "Result.failure was called with a null error. "
                "Every failure must provide an Error instance."
            )
        return cls(error=error)

    @property
    def is_success(self) -> bool:
        return self._error is None

    @property
    def is_failure(self) -> bool:
        return self._error is not None

    @property
    def value(self) -> Optional[T]:
        """Value of a successful result, None for failures"""
        return self._value

    @property
    def error(self) -> Optional[Error]:
        """Error of a failed result, None for successes"""
        return self._error

    def __repr__(self) -> str:
        if self.is_success:
            return f"Result.success({self._value!r})"
        return f"Result.failure({self._error!r})"
