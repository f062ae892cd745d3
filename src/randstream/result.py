"""
Result type for explicit error handling.

Every fallible factory in randstream (option validation, state-manager
construction, state replacement, stream creation) returns a
``Result[T, E]`` instead of raising, so callers decide at the boundary
whether a failure becomes an exception.

Usage:
    >>> match validate_options({"sep": ","}):
    ...     case Success(options):
    ...         print(options.sep)
    ...     case Failure(error):
    ...         print(f"bad option: {error.field}")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar


T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Success(Generic[T]):
    """Represents a successful result containing a value of type T."""

    value: T

    def unwrap(self) -> T:
        """Unwrap the success value. Safe to call on Success."""
        return self.value


@dataclass(frozen=True)
class Failure(Generic[E]):
    """Represents a failed result containing an error of type E."""

    error: E

    def unwrap(self) -> NoReturn:
        """
        Unwrap the success value.

        Raises:
            RuntimeError: Always, since Failure has no value.
        """
        raise RuntimeError(f"Called unwrap() on Failure: {self.error}")


Result = Success[T] | Failure[E]
