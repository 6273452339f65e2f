"""
Capacity Factor Model: Binding Constraint Across Resource Dimensions

Each resource dimension is a pure function of the configuration that
returns the maximum number of concurrent users it can serve:

    DATABASE  connection_pool_size * users_per_connection
    NETWORK   available_bandwidth_kbps // per_user_bandwidth_kbps
    MEMORY    available_memory_mb // per_user_memory_mb
    CPU       max_cpu_utilization_pct // per_user_cpu_pct
    WIRELESS  max_hardware_channel_ops

System capacity is bounded by its weakest dimension, so factors are
combined with min(), never averaged.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence

from beaconscale.core import constants as C
from beaconscale.core.config import SimulationConfig
from beaconscale.core.errors import ConfigurationError
from beaconscale.core.types import ResourceDimension, Severity

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CapacityFactor:
    """Capacity of one resource dimension against the required load."""
    component_name: str
    current_capacity: int
    required_capacity: int
    severity: Severity
    dimension: ResourceDimension
    mitigation: str = ""
    defaulted: bool = False

    @property
    def headroom_ratio(self) -> float:
        """current / required; values below 1.0 cannot carry the load."""
        if self.required_capacity <= 0:
            return math.inf
        return self.current_capacity / self.required_capacity

    @property
    def is_failing(self) -> bool:
        return self.severity.is_issue


def assign_severity(current_capacity: int, required_capacity: int) -> Severity:
    """
    CRITICAL below half the requirement, HIGH below the requirement,
    LOW otherwise.
    """
    if current_capacity < required_capacity * C.SEVERITY_CRITICAL_RATIO:
        return Severity.CRITICAL
    if current_capacity < required_capacity:
        return Severity.HIGH
    return Severity.LOW


def combine(factors: Iterable[CapacityFactor]) -> CapacityFactor:
    """
    Binding constraint: the factor with the smallest current capacity.

    Ties resolve to the earliest factor in iteration order.

    Raises:
        ConfigurationError: no factors were supplied
    """
    factors = list(factors)
    if not factors:
        raise ConfigurationError.empty_factors()
    return min(factors, key=lambda f: f.current_capacity)


# =============================================================================
# DIMENSION CAPACITY FUNCTIONS
# =============================================================================
def database_capacity(config: SimulationConfig) -> int:
    users_per_connection, _ = config.resources.resolve("users_per_connection")
    return math.floor(config.connection_pool_size * users_per_connection)


def network_capacity(config: SimulationConfig) -> int:
    available, _ = config.resources.resolve("available_bandwidth_kbps")
    per_user, _ = config.resources.resolve("per_user_bandwidth_kbps")
    return math.floor(available / per_user)


def memory_capacity(config: SimulationConfig) -> int:
    available, _ = config.resources.resolve("available_memory_mb")
    per_user, _ = config.resources.resolve("per_user_memory_mb")
    return math.floor(available / per_user)


def cpu_capacity(config: SimulationConfig) -> int:
    ceiling, _ = config.resources.resolve("max_cpu_utilization_pct")
    per_user, _ = config.resources.resolve("per_user_cpu_pct")
    return math.floor(ceiling / per_user)


def wireless_capacity(config: SimulationConfig) -> int:
    ops, _ = config.resources.resolve("max_hardware_channel_ops")
    return math.floor(ops)


@dataclass(frozen=True)
class DimensionSpec:
    """Static description of one resource dimension."""
    dimension: ResourceDimension
    component_name: str
    inputs: tuple[str, ...]
    capacity: Callable[[SimulationConfig], int]
    mitigation: str


DIMENSIONS: tuple[DimensionSpec, ...] = (
    DimensionSpec(
        dimension=ResourceDimension.DATABASE,
        component_name="Database Connection Pool",
        inputs=("users_per_connection",),
        capacity=database_capacity,
        mitigation="Increase the database connection pool size or share connections between users",
    ),
    DimensionSpec(
        dimension=ResourceDimension.NETWORK,
        component_name="Network Bandwidth",
        inputs=("available_bandwidth_kbps", "per_user_bandwidth_kbps"),
        capacity=network_capacity,
        mitigation="Compress payloads and reduce per-user network usage",
    ),
    DimensionSpec(
        dimension=ResourceDimension.MEMORY,
        component_name="Memory Usage",
        inputs=("available_memory_mb", "per_user_memory_mb"),
        capacity=memory_capacity,
        mitigation="Reduce per-user memory footprint or pool memory allocations",
    ),
    DimensionSpec(
        dimension=ResourceDimension.CPU,
        component_name="CPU Utilization",
        inputs=("max_cpu_utilization_pct", "per_user_cpu_pct"),
        capacity=cpu_capacity,
        mitigation="Optimize CPU-intensive operations and balance load across hosts",
    ),
    DimensionSpec(
        dimension=ResourceDimension.WIRELESS,
        component_name="BLE Hardware Channel",
        inputs=("max_hardware_channel_ops",),
        capacity=wireless_capacity,
        mitigation="Queue BLE operations and widen scanning/advertising intervals",
    ),
)


@dataclass(frozen=True, slots=True)
class CapacityAnalysis:
    """All factors of one analysis call plus the binding one."""
    factors: tuple[CapacityFactor, ...]
    binding_factor: CapacityFactor
    defaulted_inputs: tuple[str, ...]

    @property
    def max_supported_users(self) -> int:
        return self.binding_factor.current_capacity

    @property
    def failing_factors(self) -> tuple[CapacityFactor, ...]:
        return tuple(f for f in self.factors if f.is_failing)


class CapacityFactorModel:
    """
    Evaluates every resource dimension against the target concurrency.

    Missing resource inputs use the documented defaults in
    ResourceProfile.DEFAULTS; such factors are marked defaulted.
    """

    __slots__ = ("_dimensions",)

    def __init__(self, dimensions: Sequence[DimensionSpec] = DIMENSIONS) -> None:
        if not dimensions:
            raise ConfigurationError.empty_factors()
        self._dimensions = tuple(dimensions)

    def evaluate(self, spec: DimensionSpec, config: SimulationConfig) -> CapacityFactor:
        current = spec.capacity(config)
        required = config.target_concurrency
        defaulted = any(config.resources.resolve(name)[1] for name in spec.inputs)
        return CapacityFactor(
            component_name=spec.component_name,
            current_capacity=current,
            required_capacity=required,
            severity=assign_severity(current, required),
            dimension=spec.dimension,
            mitigation=spec.mitigation,
            defaulted=defaulted,
        )

    def analyze(self, config: SimulationConfig) -> CapacityAnalysis:
        factors = tuple(self.evaluate(spec, config) for spec in self._dimensions)
        binding = combine(factors)

        defaulted_inputs: list[str] = []
        for spec in self._dimensions:
            for name in spec.inputs:
                if config.resources.resolve(name)[1] and name not in defaulted_inputs:
                    defaulted_inputs.append(name)

        logger.debug(
            "Binding constraint: %s (%d users, required %d)",
            binding.component_name, binding.current_capacity, binding.required_capacity,
        )
        return CapacityAnalysis(
            factors=factors,
            binding_factor=binding,
            defaulted_inputs=tuple(defaulted_inputs),
        )
