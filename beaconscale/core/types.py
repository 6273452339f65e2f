"""
Core Type Definitions for the Capacity-and-Risk Engine

Implements Result/Either monads for explicit error propagation, plus the
small enumerations shared by every model (severity, rating, dimension).

Design Principles:
- Validation returns Result; public entry points raise the carried error
- Every value object is immutable once constructed
- Enumerations carry their own ordering for deterministic sorting
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import (
    Any,
    Callable,
    Generic,
    Literal,
    TypeVar,
    Union,
)

# =============================================================================
# TYPE VARIABLES FOR GENERIC CONTAINERS
# =============================================================================
T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type
U = TypeVar("U")  # Transform result type


# =============================================================================
# RESULT MONAD
# =============================================================================
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """
    Success variant of Result monad.

    Immutable container for successful computation results.
    """

    value: T

    def is_ok(self) -> Literal[True]:
        return True

    def is_err(self) -> Literal[False]:
        return False

    def unwrap(self) -> T:
        """Extract value. Safe to call after is_ok() check."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        """Return value, ignoring default."""
        return self.value

    def map(self, fn: Callable[[T], U]) -> Ok[U]:
        """Apply transformation to success value."""
        return Ok(fn(self.value))

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """
    Failure variant of Result monad.

    Carries the error object unchanged through monadic chains.
    """

    error: E

    def is_ok(self) -> Literal[False]:
        return False

    def is_err(self) -> Literal[True]:
        return True

    def unwrap(self) -> Any:
        """
        Unwrapping an error re-raises it when it is an exception.

        Raises:
            The carried exception, or RuntimeError for plain values
        """
        if isinstance(self.error, BaseException):
            raise self.error
        raise RuntimeError(f"Called unwrap() on Err: {self.error}")

    def unwrap_or(self, default: T) -> T:
        """Return default value on error."""
        return default

    def map(self, fn: Callable[[Any], U]) -> Err[E]:
        """No-op on error variant - propagates error unchanged."""
        return self

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


# Union type for pattern matching
Result = Union[Ok[T], Err[E]]


# =============================================================================
# SHARED ENUMERATIONS
# =============================================================================
class Severity(Enum):
    """
    Issue severity, most severe first.

    `rank` gives the sort key used when ordering remediations.
    """
    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    @property
    def rank(self) -> int:
        return _SEVERITY_ORDER[self]

    @property
    def is_issue(self) -> bool:
        """LOW means the item has headroom and needs no action."""
        return self is not Severity.LOW


_SEVERITY_ORDER = {
    Severity.CRITICAL: 0,
    Severity.HIGH: 1,
    Severity.MEDIUM: 2,
    Severity.LOW: 3,
}


class ScalabilityRating(Enum):
    """Overall capacity rating relative to the target load."""
    EXCELLENT = "EXCELLENT"
    GOOD = "GOOD"
    LIMITED = "LIMITED"
    POOR = "POOR"


class ResourceDimension(Enum):
    """
    Resource dimensions evaluated by the capacity model.

    Declaration order is the evaluation order; ties in capacity resolve
    to the dimension declared first.
    """
    DATABASE = "DATABASE"
    NETWORK = "NETWORK"
    MEMORY = "MEMORY"
    CPU = "CPU"
    WIRELESS = "WIRELESS"
