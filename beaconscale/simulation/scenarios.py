"""
Load Scenarios and Pass/Fail Policies

A scenario pairs a latency/failure profile with the policy that judges it.
The built-in profiles model the two database calls on the attendance hot
path: opening a session and recording an attendance. A deployment meets
its load requirement only when every scenario passes.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from beaconscale.core import constants as C
from beaconscale.core.config import SimulationConfig, SimulationPolicy
from beaconscale.core.errors import ConfigurationError
from beaconscale.core.types import Err, Ok, Result


@dataclass(frozen=True)
class LoadScenario:
    """Named latency/failure profile with its acceptance policy."""
    name: str
    latency_range: tuple[float, float]
    failure_rate: float
    policy: SimulationPolicy = field(default_factory=SimulationPolicy)

    @classmethod
    def from_config(cls, config: SimulationConfig, name: str = "configured") -> LoadScenario:
        return cls(
            name=name,
            latency_range=config.service_latency_range,
            failure_rate=config.failure_injection_rate,
            policy=config.policy,
        )

    def validate(self) -> Result[None, ConfigurationError]:
        low, high = self.latency_range
        if not (0 <= low <= high) or not math.isfinite(high):
            return Err(ConfigurationError.invalid_range(
                f"scenarios.{self.name}.latency_range", low, high,
            ))
        if (
            isinstance(self.failure_rate, bool)
            or math.isnan(self.failure_rate)
            or not 0.0 <= self.failure_rate <= 1.0
        ):
            return Err(ConfigurationError.probability_out_of_range(
                f"scenarios.{self.name}.failure_rate", self.failure_rate,
            ))
        return self.policy.validate()


SESSION_CREATION = LoadScenario(
    name="session_creation",
    latency_range=(C.DEFAULT_LATENCY_MIN_MS, C.DEFAULT_LATENCY_MAX_MS),
    failure_rate=C.DEFAULT_FAILURE_INJECTION_RATE,
    policy=SimulationPolicy(),
)

ATTENDANCE_SUBMISSION = LoadScenario(
    name="attendance_submission",
    latency_range=(30.0, 180.0),
    failure_rate=0.01,
    policy=SimulationPolicy(max_average_latency_ms=800.0),
)


def scenarios_for(config: SimulationConfig) -> tuple[LoadScenario, ...]:
    """
    Scenarios one analysis run simulates, in order.

    The configured latency/failure profile always runs first, under the
    session-creation name. It is followed by config.extra_scenarios, or by
    the attendance-submission built-in when none were given.
    """
    extras = config.extra_scenarios
    if extras is None:
        extras = (ATTENDANCE_SUBMISSION,)
    return (LoadScenario.from_config(config, name=SESSION_CREATION.name), *extras)
