"""
Error Hierarchy for the Capacity-and-Risk Engine

Design Principles:
- Invalid input fails fast, before any model runs
- Modeled failures (injected trial failures, saturated resources) are data,
  never exceptions
- Only infrastructure faults (random source, batch timeout) raise at runtime
- Every error carries a code and context for programmatic handling

Each error type includes:
- Unique error code for programmatic handling
- Human-readable message for logging
- Optional cause for root cause analysis
- Context dictionary with the offending values

Usage:
    result = config.validate()
    match result:
        case Ok(_):
            run(config)
        case Err(ConfigurationError() as error):
            report(error.to_dict())
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional
from uuid import uuid4


# =============================================================================
# ERROR CODE ENUMERATION
# =============================================================================
class ErrorCode(Enum):
    """
    Unique error codes for programmatic error handling.

    Codes are grouped by subsystem:
    - 1xxx: Configuration errors
    - 2xxx: Simulation errors
    - 9xxx: Internal errors
    """

    # Configuration errors (1xxx)
    CONFIG_INVALID_VALUE = 1001
    CONFIG_NOT_POWER_OF_TWO = 1002
    CONFIG_PROBABILITY_OUT_OF_RANGE = 1003
    CONFIG_INVALID_RANGE = 1004
    CONFIG_EMPTY_FACTORS = 1005
    CONFIG_ENVIRONMENT = 1006

    # Simulation errors (2xxx)
    SIMULATION_BATCH_TIMEOUT = 2001
    SIMULATION_RANDOM_SOURCE_FAILED = 2002

    # Internal errors (9xxx)
    INTERNAL_ERROR = 9001


# =============================================================================
# BASE ERROR CLASS
# =============================================================================
@dataclass
class ScaleModelError(Exception):
    """
    Base class for all engine errors.

    Provides common infrastructure for error handling:
    - Unique error ID for correlating log lines
    - Error code for programmatic handling
    - Cause for root cause analysis
    """

    code: ErrorCode
    message: str
    error_id: str = field(default_factory=lambda: str(uuid4()))
    timestamp_ns: int = field(default_factory=time.time_ns)
    cause: Optional[BaseException] = None
    context: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize error to dictionary for logging and reports."""
        return {
            "error_id": self.error_id,
            "code": self.code.name,
            "code_value": self.code.value,
            "message": self.message,
            "timestamp_nanos": self.timestamp_ns,
            "context": self.context,
        }

    def __str__(self) -> str:
        return f"[{self.code.name}] {self.message} (id={self.error_id[:8]})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"code={self.code.name}, "
            f"message={self.message!r}, "
            f"error_id={self.error_id!r})"
        )


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================
@dataclass
class ConfigurationError(ScaleModelError):
    """
    Invalid model input.

    Raised before any computation starts so that no partial
    result is ever produced from an invalid configuration.
    """

    @classmethod
    def invalid_value(
        cls,
        field_name: str,
        value: Any,
        reason: str,
    ) -> ConfigurationError:
        """A field holds a value outside its domain."""
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field_name}': {reason}",
            context={"field": field_name, "value": str(value)[:100], "reason": reason},
        )

    @classmethod
    def not_power_of_two(cls, field_name: str, value: Any) -> ConfigurationError:
        """Identifier space sizes must be positive powers of two."""
        return cls(
            code=ErrorCode.CONFIG_NOT_POWER_OF_TWO,
            message=f"'{field_name}' must be a positive power of two, got {value!r}",
            context={"field": field_name, "value": str(value)[:100]},
        )

    @classmethod
    def probability_out_of_range(cls, field_name: str, value: Any) -> ConfigurationError:
        """Probabilities and rates must lie in [0, 1]."""
        return cls(
            code=ErrorCode.CONFIG_PROBABILITY_OUT_OF_RANGE,
            message=f"'{field_name}' must be within [0, 1], got {value!r}",
            context={"field": field_name, "value": str(value)[:100]},
        )

    @classmethod
    def invalid_range(
        cls,
        field_name: str,
        low: Any,
        high: Any,
    ) -> ConfigurationError:
        """A (min, max) pair is negative or inverted."""
        return cls(
            code=ErrorCode.CONFIG_INVALID_RANGE,
            message=f"'{field_name}' must satisfy 0 <= min <= max, got ({low!r}, {high!r})",
            context={"field": field_name, "min": str(low), "max": str(high)},
        )

    @classmethod
    def empty_factors(cls) -> ConfigurationError:
        """No capacity factor was supplied to the combinator."""
        return cls(
            code=ErrorCode.CONFIG_EMPTY_FACTORS,
            message="At least one capacity factor is required to find the binding constraint",
        )

    @classmethod
    def environment(cls, variable: str, cause: Exception) -> ConfigurationError:
        """An environment override could not be parsed."""
        return cls(
            code=ErrorCode.CONFIG_ENVIRONMENT,
            message=f"Could not parse environment variable {variable}: {cause}",
            cause=cause,
            context={"variable": variable},
        )


# =============================================================================
# SIMULATION ERRORS
# =============================================================================
@dataclass
class SimulationError(ScaleModelError):
    """
    Infrastructure-level faults in the load simulator.

    Injected per-trial failures are counted in the metrics and
    never surface as this error.
    """

    @classmethod
    def batch_timeout(cls, operations: int, timeout_s: float) -> SimulationError:
        """The batch did not resolve within the configured timeout."""
        return cls(
            code=ErrorCode.SIMULATION_BATCH_TIMEOUT,
            message=f"Batch of {operations} operations did not complete within {timeout_s}s",
            context={"operations": operations, "timeout_s": timeout_s},
        )

    @classmethod
    def random_source_failed(cls, cause: Exception) -> SimulationError:
        """The injected random source raised while drawing samples."""
        return cls(
            code=ErrorCode.SIMULATION_RANDOM_SOURCE_FAILED,
            message=f"Random source failed: {cause}",
            cause=cause,
        )
