"""
Result<T> pattern for dispatch outcomes.

Every call across the store boundary returns a ``Result`` instead of raising
or silently doing nothing. Besides plain success and failure, the status
distinguishes the two no-op outcomes of a dispatch: the target record does
not exist, or it is already in the requested state.
"""

from dataclasses import dataclass
from typing import Optional, Generic, TypeVar, Callable
from enum import Enum


T = TypeVar('T')
U = TypeVar('U')


class ResultStatus(Enum):
    """Status of a Result."""
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    UNCHANGED = "unchanged"
    INVALID = "invalid"
    FAILURE = "failure"


@dataclass
class Result(Generic[T]):
    """
    Outcome wrapper for store and command operations.

    A NOT_FOUND or UNCHANGED result still carries a value (the current,
    unchanged state) so callers that do not care about the distinction can
    keep reading from it.

    Attributes:
        status: Outcome status
        value: The resulting value, if any
        error: The exception that caused failure, if any
        message: Optional message describing the outcome

    Examples:
        >>> result = store.dispatch(ApproveStudent("STU001"))
        >>> if result.is_success:
        ...     print(result.value.dashboard_stats.pending_approvals)
        >>> elif result.status == ResultStatus.NOT_FOUND:
        ...     print(result.message)
    """

    status: ResultStatus
    value: Optional[T] = None
    error: Optional[Exception] = None
    message: Optional[str] = None

    @property
    def is_success(self) -> bool:
        """Check if the operation was applied."""
        return self.status == ResultStatus.SUCCESS

    @property
    def is_failure(self) -> bool:
        """Check if the operation was not applied, for any reason."""
        return self.status != ResultStatus.SUCCESS

    @property
    def is_noop(self) -> bool:
        """Check if the operation was accepted but changed nothing."""
        return self.status in (ResultStatus.NOT_FOUND, ResultStatus.UNCHANGED)

    @classmethod
    def success(cls, value: T, message: Optional[str] = None) -> 'Result[T]':
        """
        Create a successful result.

        Args:
            value: The result value
            message: Optional success message

        Returns:
            Result instance with SUCCESS status
        """
        return cls(status=ResultStatus.SUCCESS, value=value, message=message)

    @classmethod
    def not_found(cls, message: str, value: Optional[T] = None) -> 'Result[T]':
        """Create a result for an operation whose target does not exist."""
        return cls(status=ResultStatus.NOT_FOUND, value=value, message=message)

    @classmethod
    def unchanged(cls, message: str, value: Optional[T] = None) -> 'Result[T]':
        """Create a result for an operation whose target is already in place."""
        return cls(status=ResultStatus.UNCHANGED, value=value, message=message)

    @classmethod
    def invalid(cls, message: str, value: Optional[T] = None) -> 'Result[T]':
        """
        Create a result for an operation rejected by validation.

        Args:
            message: Validation summary
            value: Optional current value (left untouched)

        Returns:
            Result instance with INVALID status
        """
        return cls(status=ResultStatus.INVALID, value=value, message=message)

    @classmethod
    def failure(
        cls,
        message: str,
        error: Optional[Exception] = None
    ) -> 'Result[T]':
        """
        Create a failure result.

        Args:
            message: Error message describing the failure
            error: Optional exception that caused the failure

        Returns:
            Result instance with FAILURE status
        """
        return cls(status=ResultStatus.FAILURE, message=message, error=error)

    def unwrap(self) -> T:
        """
        Unwrap the result value.

        Returns:
            The result value if successful

        Raises:
            ValueError: If the result is not a success
        """
        if self.is_failure:
            raise ValueError(
                f"Cannot unwrap {self.status.value} result: {self.message}"
            )
        return self.value

    def unwrap_or(self, default: T) -> T:
        """Unwrap the result value or return a default."""
        return self.value if self.is_success else default

    def map(self, func: Callable[[T], U]) -> 'Result[U]':
        """
        Map a function over the success value.

        Non-success results are returned with the same status and message
        and no value.

        Examples:
            >>> result = store.dispatch(ApprovePackage("PKG001"))
            >>> result.map(lambda s: s.find_package("PKG001").status)
        """
        if self.is_failure:
            return Result(status=self.status, message=self.message, error=self.error)

        try:
            return Result.success(func(self.value), self.message)
        except Exception as e:
            return Result.failure(str(e), e)
