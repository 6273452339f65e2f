"""
Configuration Management for the Capacity-and-Risk Engine

Provides validated configuration with documented defaults.
Supports environment variable overrides.

Design:
- Immutable after construction
- Fail-fast on invalid configuration (validate() before any model runs)
- Optional resource inputs fall back to defaults and are reported as such
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, Any, Callable, ClassVar, Optional

from beaconscale.core.types import Result, Ok, Err
from beaconscale.core.errors import ConfigurationError
from beaconscale.core import constants as C

if TYPE_CHECKING:
    from beaconscale.simulation.load import SimulationMetrics
    from beaconscale.simulation.scenarios import LoadScenario


ENV_PREFIX = "BEACONSCALE_"


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _is_probability(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and not math.isnan(value)
        and 0.0 <= value <= 1.0
    )


def _is_positive_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
        and value > 0
    )


@dataclass(frozen=True)
class ResourceProfile:
    """
    Declared resource inputs for the capacity dimensions.

    Every field is optional. A missing value is replaced by the documented
    default in DEFAULTS and the field name is reported as defaulted, so a
    partial configuration still yields a best-effort verdict.
    """

    users_per_connection: Optional[int] = None
    available_bandwidth_kbps: Optional[float] = None
    per_user_bandwidth_kbps: Optional[float] = None
    available_memory_mb: Optional[float] = None
    per_user_memory_mb: Optional[float] = None
    max_cpu_utilization_pct: Optional[float] = None
    per_user_cpu_pct: Optional[float] = None
    max_hardware_channel_ops: Optional[int] = None

    DEFAULTS: ClassVar[dict[str, float]] = {
        "users_per_connection": C.USERS_PER_CONNECTION,
        "available_bandwidth_kbps": C.AVAILABLE_BANDWIDTH_KBPS,
        "per_user_bandwidth_kbps": C.PER_USER_BANDWIDTH_KBPS,
        "available_memory_mb": C.AVAILABLE_MEMORY_MB,
        "per_user_memory_mb": C.PER_USER_MEMORY_MB,
        "max_cpu_utilization_pct": C.MAX_CPU_UTILIZATION_PCT,
        "per_user_cpu_pct": C.PER_USER_CPU_PCT,
        "max_hardware_channel_ops": C.MAX_HARDWARE_CHANNEL_OPS,
    }

    @classmethod
    def documented_defaults(cls) -> ResourceProfile:
        """Profile with every input set explicitly to its default."""
        return cls(**cls.DEFAULTS)

    def resolve(self, name: str) -> tuple[float, bool]:
        """
        Look up an input.

        Returns:
            (value, defaulted) where defaulted is True when the
            documented default was substituted.
        """
        value = getattr(self, name)
        if value is None:
            return self.DEFAULTS[name], True
        return value, False

    @property
    def missing(self) -> tuple[str, ...]:
        """Names of inputs that will fall back to defaults."""
        return tuple(f.name for f in fields(self) if getattr(self, f.name) is None)

    def validate(self) -> Result[None, ConfigurationError]:
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None and not _is_positive_number(value):
                return Err(ConfigurationError.invalid_value(
                    f"resources.{f.name}", value, "must be a positive number",
                ))
        return Ok(None)


@dataclass(frozen=True)
class PoolModelConfig:
    """Connection pool backlog model parameters."""

    per_waiting_request_cost_ms: float = C.PER_WAITING_REQUEST_COST_MS
    utilization_threshold: float = C.POOL_UTILIZATION_THRESHOLD
    max_wait_ms: float = C.POOL_MAX_WAIT_MS
    critical_wait_ms: float = C.POOL_CRITICAL_WAIT_MS
    ops_per_connection_per_second: float = C.OPS_PER_CONNECTION_PER_SECOND

    def validate(self) -> Result[None, ConfigurationError]:
        if self.per_waiting_request_cost_ms < 0:
            return Err(ConfigurationError.invalid_value(
                "pool.per_waiting_request_cost_ms",
                self.per_waiting_request_cost_ms,
                "must be non-negative",
            ))
        if not _is_probability(self.utilization_threshold):
            return Err(ConfigurationError.probability_out_of_range(
                "pool.utilization_threshold", self.utilization_threshold,
            ))
        if self.max_wait_ms > self.critical_wait_ms:
            return Err(ConfigurationError.invalid_range(
                "pool.max_wait_ms/critical_wait_ms", self.max_wait_ms, self.critical_wait_ms,
            ))
        return Ok(None)


@dataclass(frozen=True)
class SubscriptionModelConfig:
    """Real-time subscription load model parameters."""

    base_latency_ms: float = C.SUBSCRIPTION_BASE_LATENCY_MS
    latency_per_user_ms: float = C.SUBSCRIPTION_LATENCY_PER_USER_MS
    max_latency_ms: float = C.SUBSCRIPTION_MAX_LATENCY_MS
    base_delivery_rate: float = C.SUBSCRIPTION_BASE_DELIVERY_RATE
    delivery_decay_per_user: float = C.SUBSCRIPTION_DELIVERY_DECAY_PER_USER
    min_delivery_rate: float = C.SUBSCRIPTION_MIN_DELIVERY_RATE
    bandwidth_per_user_kbs: float = C.SUBSCRIPTION_BANDWIDTH_PER_USER_KBS
    max_drop_rate_pct: float = C.SUBSCRIPTION_MAX_DROP_RATE_PCT
    max_healthy_latency_ms: float = C.SUBSCRIPTION_MAX_HEALTHY_LATENCY_MS

    def validate(self) -> Result[None, ConfigurationError]:
        for f in fields(self):
            value = getattr(self, f.name)
            if (
                not isinstance(value, (int, float))
                or isinstance(value, bool)
                or not math.isfinite(value)
                or value < 0
            ):
                return Err(ConfigurationError.invalid_value(
                    f"subscriptions.{f.name}", value, "must be a finite non-negative number",
                ))
        if self.min_delivery_rate > self.base_delivery_rate:
            return Err(ConfigurationError.invalid_range(
                "subscriptions.min_delivery_rate/base_delivery_rate",
                self.min_delivery_rate,
                self.base_delivery_rate,
            ))
        return Ok(None)


@dataclass(frozen=True)
class SimulationPolicy:
    """
    Caller-supplied pass/fail policy for a simulation run.

    The simulator itself only reports numbers; this object decides.
    Both bounds are strict: a run passes when error_rate < max_error_rate
    and average_latency < max_average_latency_ms.
    """

    max_error_rate: float = C.POLICY_MAX_ERROR_RATE
    max_average_latency_ms: float = C.POLICY_MAX_AVERAGE_LATENCY_MS

    def evaluate(self, metrics: SimulationMetrics) -> bool:
        return (
            metrics.error_rate < self.max_error_rate
            and metrics.average_latency < self.max_average_latency_ms
        )

    def validate(self) -> Result[None, ConfigurationError]:
        if not _is_probability(self.max_error_rate):
            return Err(ConfigurationError.probability_out_of_range(
                "policy.max_error_rate", self.max_error_rate,
            ))
        if not _is_positive_number(self.max_average_latency_ms):
            return Err(ConfigurationError.invalid_value(
                "policy.max_average_latency_ms",
                self.max_average_latency_ms,
                "must be a positive number",
            ))
        return Ok(None)


@dataclass(frozen=True)
class SimulationConfig:
    """
    Root configuration for one analysis run.

    Supplied once per run and never mutated. The identifier space is
    described by its width in bits, so its size is always a power of two.
    """

    target_concurrency: int = C.DEFAULT_TARGET_CONCURRENCY
    identifier_space_bits: int = C.DEFAULT_IDENTIFIER_SPACE_BITS
    connection_pool_size: int = C.DEFAULT_CONNECTION_POOL_SIZE
    failure_injection_rate: float = C.DEFAULT_FAILURE_INJECTION_RATE
    service_latency_range: tuple[float, float] = (
        C.DEFAULT_LATENCY_MIN_MS,
        C.DEFAULT_LATENCY_MAX_MS,
    )
    population_size: int = C.DEFAULT_POPULATION_SIZE
    collision_acceptance_threshold: float = C.DEFAULT_COLLISION_ACCEPTANCE_THRESHOLD
    resources: ResourceProfile = field(default_factory=ResourceProfile)
    pool: PoolModelConfig = field(default_factory=PoolModelConfig)
    subscriptions: SubscriptionModelConfig = field(default_factory=SubscriptionModelConfig)
    policy: SimulationPolicy = field(default_factory=SimulationPolicy)
    batch_timeout_s: Optional[float] = None
    time_scale: float = 0.0
    # Monte-Carlo collision trials through the real token encoding; 0 skips
    collision_sample_trials: int = 0
    # Scenarios simulated besides the configured profile; None means the
    # attendance-submission built-in
    extra_scenarios: Optional[tuple[LoadScenario, ...]] = None

    @property
    def identifier_space_size(self) -> int:
        """Number of distinct identifiers (2 ** bits)."""
        return 1 << self.identifier_space_bits

    @classmethod
    def from_env(cls, environ: Optional[dict[str, str]] = None) -> Result[SimulationConfig, ConfigurationError]:
        """
        Load configuration from environment variables.

        Environment variables are prefixed with BEACONSCALE_.
        Example: BEACONSCALE_TARGET_CONCURRENCY, BEACONSCALE_CONNECTION_POOL_SIZE
        Unset variables keep their defaults.
        """
        env = os.environ if environ is None else environ
        parsers: dict[str, Callable[[str], Any]] = {
            "target_concurrency": int,
            "identifier_space_bits": int,
            "connection_pool_size": int,
            "failure_injection_rate": float,
            "population_size": int,
            "collision_acceptance_threshold": float,
            "batch_timeout_s": float,
            "collision_sample_trials": int,
        }
        overrides: dict[str, Any] = {}
        for name, parse in parsers.items():
            variable = f"{ENV_PREFIX}{name.upper()}"
            raw = env.get(variable)
            if raw is None:
                continue
            try:
                overrides[name] = parse(raw)
            except (ValueError, TypeError) as e:
                return Err(ConfigurationError.environment(variable, e))

        latency_min = env.get(f"{ENV_PREFIX}LATENCY_MIN_MS")
        latency_max = env.get(f"{ENV_PREFIX}LATENCY_MAX_MS")
        if latency_min is not None or latency_max is not None:
            try:
                overrides["service_latency_range"] = (
                    float(latency_min) if latency_min is not None else C.DEFAULT_LATENCY_MIN_MS,
                    float(latency_max) if latency_max is not None else C.DEFAULT_LATENCY_MAX_MS,
                )
            except ValueError as e:
                return Err(ConfigurationError.environment(f"{ENV_PREFIX}LATENCY_*_MS", e))

        return Ok(cls(**overrides))

    def validate(self) -> Result[None, ConfigurationError]:
        """Validate configuration invariants."""
        for name in ("target_concurrency", "identifier_space_bits", "connection_pool_size"):
            value = getattr(self, name)
            if not _is_positive_int(value):
                return Err(ConfigurationError.invalid_value(name, value, "must be a positive integer"))
        if self.identifier_space_bits > C.MAX_IDENTIFIER_SPACE_BITS:
            return Err(ConfigurationError.invalid_value(
                "identifier_space_bits",
                self.identifier_space_bits,
                f"must not exceed {C.MAX_IDENTIFIER_SPACE_BITS}",
            ))
        if not _is_probability(self.failure_injection_rate):
            return Err(ConfigurationError.probability_out_of_range(
                "failure_injection_rate", self.failure_injection_rate,
            ))
        if not _is_probability(self.collision_acceptance_threshold):
            return Err(ConfigurationError.probability_out_of_range(
                "collision_acceptance_threshold", self.collision_acceptance_threshold,
            ))

        low, high = self.service_latency_range
        if not (0 <= low <= high) or not math.isfinite(high):
            return Err(ConfigurationError.invalid_range("service_latency_range", low, high))

        if not isinstance(self.population_size, int) or self.population_size < 0:
            return Err(ConfigurationError.invalid_value(
                "population_size", self.population_size, "must be a non-negative integer",
            ))
        if self.batch_timeout_s is not None and not _is_positive_number(self.batch_timeout_s):
            return Err(ConfigurationError.invalid_value(
                "batch_timeout_s", self.batch_timeout_s, "must be a positive number of seconds",
            ))
        if (
            not isinstance(self.time_scale, (int, float))
            or isinstance(self.time_scale, bool)
            or not math.isfinite(self.time_scale)
            or self.time_scale < 0
        ):
            return Err(ConfigurationError.invalid_value(
                "time_scale", self.time_scale, "must be a finite non-negative number",
            ))
        if not isinstance(self.collision_sample_trials, int) or self.collision_sample_trials < 0:
            return Err(ConfigurationError.invalid_value(
                "collision_sample_trials",
                self.collision_sample_trials,
                "must be a non-negative integer",
            ))

        for nested in (self.resources, self.pool, self.subscriptions, self.policy):
            result = nested.validate()
            if result.is_err():
                return result
        for scenario in self.extra_scenarios or ():
            result = scenario.validate()
            if result.is_err():
                return result
        return Ok(None)
