"""
Result type for domain operations.

Expected failures (bad input, illegal transitions) are returned to the
caller as values; only corrupt snapshots raise.
"""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorKind(Enum):
    """Category of an expected domain failure."""

    INVALID_INPUT = auto()
    ILLEGAL_STATE = auto()


class SnapshotError(ValueError):
    """Raised when a persisted snapshot cannot be turned back into a game."""


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Outcome of a domain operation.

    Attributes:
        ok: Whether the operation succeeded.
        error: Human-readable reason for a failure (empty on success).
        kind: Failure category, None on success.
    """

    ok: bool
    error: str = ""
    kind: Optional[ErrorKind] = None
    _value: Optional[T] = None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "Result[T]":
        return cls(True, _value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, error: str) -> "Result[T]":
        return cls(False, error=error, kind=kind)

    @classmethod
    def invalid(cls, error: str) -> "Result[T]":
        return cls.failure(ErrorKind.INVALID_INPUT, error)

    @classmethod
    def illegal(cls, error: str) -> "Result[T]":
        return cls.failure(ErrorKind.ILLEGAL_STATE, error)

    @property
    def failed(self) -> bool:
        return not self.ok

    @property
    def value(self) -> T:
        """Payload of a successful result."""
        if not self.ok:
            raise ValueError(f"Cannot access value of a failed result: {self.error}")
        return self._value  # type: ignore[return-value]

    def __bool__(self) -> bool:
        return self.ok
