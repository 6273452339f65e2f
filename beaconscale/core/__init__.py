"""
Core module: Type definitions, error hierarchy, and configuration.

This module provides the foundational abstractions for the engine:
- Result monad for explicit validation results
- Error hierarchy with codes and context
- Configuration management with validation
"""

from beaconscale.core.types import (
    Result,
    Ok,
    Err,
    Severity,
    ScalabilityRating,
    ResourceDimension,
)
from beaconscale.core.errors import (
    ErrorCode,
    ScaleModelError,
    ConfigurationError,
    SimulationError,
)
from beaconscale.core.config import (
    ResourceProfile,
    PoolModelConfig,
    SubscriptionModelConfig,
    SimulationPolicy,
    SimulationConfig,
)

__all__ = [
    "Result",
    "Ok",
    "Err",
    "Severity",
    "ScalabilityRating",
    "ResourceDimension",
    "ErrorCode",
    "ScaleModelError",
    "ConfigurationError",
    "SimulationError",
    "ResourceProfile",
    "PoolModelConfig",
    "SubscriptionModelConfig",
    "SimulationPolicy",
    "SimulationConfig",
]
