"""
Error taxonomy for failed results.

Errors here are values, not exceptions: they travel inside a failed Result
so callers can branch on the kind with isinstance() instead of comparing
message strings.

Kinds and how they propagate:
- ValidationError: malformed input (terminal, HTTP 400)
- UnsupportedBranchError: no bump rule matches the branch (terminal, HTTP 400)
- VersionConcurrencyError: optimistic-lock failure on save (retried, HTTP 409)
- InvalidReleaseNumberError: stored release number cannot be parsed (terminal, HTTP 500)
- ApplicationError: generic storage/infrastructure failure (terminal, HTTP 500)
- UnexpectedError: uncaught exception at a use case boundary (terminal, HTTP 500)
"""

import logging
from typing import Any, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from openversion.domain.value_objects import DomainVersion


class Error:
    """
    Structured, chainable error.

    Attributes:
        message: Human-readable error message
        code: Identifier for programmatic handling
        exception: Exception that caused this error, if any
        inner_error: Error that caused this error, if any
    """

    def __init__(
        self,
        message: str = "",
        code: Optional[str] = None,
        exception: Optional[BaseException] = None,
        inner_error: Optional["Error"] = None
    ):
        self.message = message
        self.code = code
        self.exception = exception
        self.inner_error = inner_error

    @property
    def root(self) -> "Error":
        """Deepest error in the inner_error chain"""
        current = self
        while current.inner_error is not None:
            current = current.inner_error
        return current

    def is_exceptional(self) -> bool:
        """True if this error wraps an exception"""
        return self.exception is not None

    def __eq__(self, other: Any) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return (
            self.message == other.message
            and self.code == other.code
            and self.exception is other.exception
            and self.inner_error == other.inner_error
        )

    def __hash__(self) -> int:
        return hash((type(self), self.code, self.message))

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class ApplicationError(Error):
    """
    Application-level error with a type tag and a logging severity.

    Used directly for storage/infrastructure failures, e.g.
    ApplicationError("RepositoryError", str(exc), exc).
    """

    def __init__(
        self,
        error_type: str,
        message: str,
        exception: Optional[BaseException] = None,
        severity: int = logging.ERROR
    ):
        super().__init__(message=message, code=error_type, exception=exception)
        self.severity = severity

    @property
    def type(self) -> str:
        return self.code


class ValidationError(ApplicationError):
    """Raised when input is malformed (e.g. empty branch name)"""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        super().__init__("ValidationError", message, severity=logging.WARNING)
        self.field = field
        self.value = value

    @classmethod
    def for_field(cls, field: str, value: Any, reason: str) -> "ValidationError":
        return cls(f"Invalid {field} '{value}': {reason}", field=field, value=value)


class UnsupportedBranchError(ApplicationError):
    """No bump rule applies to the branch"""

    def __init__(self, branch_name: str):
        super().__init__(
            "UnsupportedBranchError",
            f"No rule was found for branch '{branch_name}'.",
            severity=logging.WARNING
        )
        self.branch_name = branch_name


class VersionConcurrencyError(ApplicationError):
    """The stored row changed between snapshot read and save"""

    def __init__(self, version: "DomainVersion", exception: Optional[BaseException] = None):
        super().__init__(
            "VersionConcurrencyError",
            (
                f"A concurrency conflict occurred while trying to save version "
                f"{version.release_number} for branch {version.identifier_name}. "
                f"Another process may have modified the data."
            ),
            exception=exception,
            severity=logging.WARNING
        )
        self.version = version


class InvalidReleaseNumberError(ApplicationError):
    """A stored release number is not four dot-separated non-negative integers"""

    def __init__(self, version: "DomainVersion", exception: Optional[BaseException] = None):
        super().__init__(
            "InvalidReleaseNumberError",
            (
                f"Stored release number '{version.release_number}' for branch "
                f"{version.identifier_name} is malformed."
            ),
            exception=exception
        )
        self.version = version


class UnexpectedError(ApplicationError):
    """Uncaught exception converted at a use case boundary"""

    def __init__(self, message: str, exception: Optional[BaseException] = None):
        super().__init__("UnexpectedError", message, exception=exception, severity=logging.CRITICAL)
