"""
Scalability Aggregator: One Verdict from Every Model

Runs, on the same SimulationConfig:
- CollisionRiskModel      identifier field collision exposure
- CapacityFactorModel     binding resource constraint
- LoadSimulator           every load scenario + its policy
- ConnectionPoolModel     pool backlog under the target burst
- SubscriptionLoadModel   real-time subscriber load

Verdict:
    meets_requirement = binding capacity >= target
                        AND collision probability <= threshold
                        AND every load scenario passes its policy

    rating from binding capacity / target:
        >= 1.2 EXCELLENT, >= 1.0 GOOD, >= 0.8 LIMITED, else POOR

Remediations hold one entry per failing item. Pool backlog details are
folded into the database factor's entry when that factor is failing.

The aggregator holds no state between calls: each call builds its own
random source and returns a fresh report. Callers that track trends
across runs accumulate the returned reports themselves.
"""

from __future__ import annotations

import asyncio
from dataclasses import asdict, dataclass, is_dataclass
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

import numpy as np

from beaconscale.core import constants as C
from beaconscale.core.config import SimulationConfig, SimulationPolicy
from beaconscale.core.types import ResourceDimension, ScalabilityRating, Severity
from beaconscale.models.capacity import CapacityAnalysis, CapacityFactor, CapacityFactorModel
from beaconscale.models.collision import (
    CollisionEstimate,
    CollisionRiskModel,
    sample_collision_rate,
)
from beaconscale.models.pool import ConnectionPoolMetrics, ConnectionPoolModel, PoolStatus
from beaconscale.models.subscriptions import SubscriptionLoadModel, SubscriptionMetrics
from beaconscale.observability.logging import StructuredLogger
from beaconscale.simulation.load import LoadSimulator, SimulationMetrics
from beaconscale.simulation.scenarios import LoadScenario, scenarios_for

logger = StructuredLogger(__name__)


def rate_scalability(actual_capacity: int, required_capacity: int) -> ScalabilityRating:
    """Map actual / required capacity onto the rating scale."""
    if required_capacity <= 0:
        return ScalabilityRating.EXCELLENT
    ratio = actual_capacity / required_capacity
    if ratio >= C.RATING_EXCELLENT_RATIO:
        return ScalabilityRating.EXCELLENT
    if ratio >= C.RATING_GOOD_RATIO:
        return ScalabilityRating.GOOD
    if ratio >= C.RATING_LIMITED_RATIO:
        return ScalabilityRating.LIMITED
    return ScalabilityRating.POOR


@dataclass(frozen=True, slots=True)
class Remediation:
    """One actionable finding."""
    severity: Severity
    text: str


def order_remediations(items: list[Remediation]) -> tuple[str, ...]:
    """Most severe first, stable within a level, duplicates dropped."""
    ordered: list[str] = []
    for item in sorted(items, key=lambda r: r.severity.rank):
        if item.text not in ordered:
            ordered.append(item.text)
    return tuple(ordered)


def _pool_severity(pool: ConnectionPoolMetrics) -> Severity:
    return Severity.HIGH if pool.status is PoolStatus.EXHAUSTED else Severity.MEDIUM


def _pool_details(pool: ConnectionPoolMetrics) -> str:
    return (
        f"{pool.waiting_requests} of {pool.requests} requests wait for a connection "
        f"(utilization {pool.utilization:.0%}, average wait {pool.average_wait_ms:.0f}ms)"
    )


@dataclass(frozen=True, slots=True)
class ScenarioResult:
    """One load scenario simulated at the target concurrency."""
    scenario: str
    metrics: SimulationMetrics
    passed: bool
    policy: SimulationPolicy


@dataclass(frozen=True, slots=True)
class ScalabilityVerdict:
    meets_requirement: bool
    binding_factor: CapacityFactor
    rating: ScalabilityRating
    remediations: tuple[str, ...]
    degraded_confidence: bool = False
    defaulted_inputs: tuple[str, ...] = ()


@dataclass(frozen=True)
class ScalabilityReport:
    """
    The verdict plus every intermediate result it was derived from.

    `simulation` is the configured profile's run (always scenarios[0]);
    `simulation_passed` holds only when every scenario passed.
    """
    config: SimulationConfig
    verdict: ScalabilityVerdict
    collision: CollisionEstimate
    capacity: CapacityAnalysis
    simulation: SimulationMetrics
    simulation_passed: bool
    pool: ConnectionPoolMetrics
    subscriptions: SubscriptionMetrics
    scenarios: tuple[ScenarioResult, ...] = ()
    empirical_collision_rate: Optional[float] = None

    def to_dict(self) -> dict[str, Any]:
        """Plain, JSON-safe representation for external renderers."""
        return _plain(asdict(self))


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if is_dataclass(value) and not isinstance(value, type):
        return _plain(asdict(value))
    if isinstance(value, np.generic):
        return value.item()
    return value


class ScalabilityAggregator:
    """
    Combines every model into one ScalabilityReport.

    Usage:
        aggregator = ScalabilityAggregator()
        report = await aggregator.analyze(SimulationConfig(target_concurrency=150), seed=42)
        report.verdict.meets_requirement
    """

    __slots__ = ("_capacity_model",)

    def __init__(self, capacity_model: Optional[CapacityFactorModel] = None) -> None:
        self._capacity_model = capacity_model or CapacityFactorModel()

    async def analyze(
        self,
        config: SimulationConfig,
        *,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> ScalabilityReport:
        """
        Analyze one configuration.

        Raises:
            ConfigurationError: before any model runs, when config is invalid
            SimulationError: random source failure or batch timeout
        """
        validation = config.validate()
        if validation.is_err():
            logger.error("Rejected configuration", error=validation.error.to_dict())
            raise validation.error

        rng = rng if rng is not None else np.random.default_rng(seed)
        run_id = uuid4().hex[:12]

        with StructuredLogger.context(run_id=run_id):
            logger.info(
                "Scalability analysis started",
                target_concurrency=config.target_concurrency,
                pool_size=config.connection_pool_size,
                identifier_bits=config.identifier_space_bits,
            )

            collision = CollisionRiskModel(config.collision_acceptance_threshold).estimate(
                config.identifier_space_bits, config.population_size,
            )
            capacity = self._capacity_model.analyze(config)

            simulator = LoadSimulator(
                rng,
                time_scale=config.time_scale,
                batch_timeout_s=config.batch_timeout_s,
            )
            # Scenarios draw from the shared generator one after another
            runs: list[ScenarioResult] = []
            for scenario in scenarios_for(config):
                runs.append(await self._run_scenario(simulator, scenario, config))
            results = tuple(runs)

            pool = ConnectionPoolModel(config.pool).analyze(
                config.connection_pool_size, config.target_concurrency,
            )
            subscriptions = SubscriptionLoadModel(config.subscriptions).analyze(
                config.target_concurrency,
            )

            empirical_rate = None
            if config.collision_sample_trials > 0:
                empirical_rate = sample_collision_rate(
                    config.identifier_space_bits,
                    config.population_size,
                    config.collision_sample_trials,
                    rng,
                )

            verdict = self._verdict(config, collision, capacity, results, pool, subscriptions)

            log = logger.warning if not verdict.meets_requirement else logger.info
            log(
                "Scalability analysis finished",
                meets_requirement=verdict.meets_requirement,
                rating=verdict.rating.value,
                binding_factor=verdict.binding_factor.component_name,
                collision_probability=round(collision.collision_probability, 4),
                failed_scenarios=[r.scenario for r in results if not r.passed],
                degraded_confidence=verdict.degraded_confidence,
            )

        return ScalabilityReport(
            config=config,
            verdict=verdict,
            collision=collision,
            capacity=capacity,
            simulation=results[0].metrics,
            simulation_passed=all(r.passed for r in results),
            pool=pool,
            subscriptions=subscriptions,
            scenarios=results,
            empirical_collision_rate=empirical_rate,
        )

    def analyze_sync(
        self,
        config: SimulationConfig,
        *,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> ScalabilityReport:
        """Blocking wrapper for callers without a running event loop."""
        return asyncio.run(self.analyze(config, seed=seed, rng=rng))

    async def _run_scenario(
        self,
        simulator: LoadSimulator,
        scenario: LoadScenario,
        config: SimulationConfig,
    ) -> ScenarioResult:
        metrics = await simulator.simulate_scenario(scenario, config.target_concurrency)
        passed = scenario.policy.evaluate(metrics)
        logger.debug(
            "Scenario simulated",
            scenario=scenario.name,
            passed=passed,
            error_rate=round(metrics.error_rate, 4),
            average_latency_ms=round(metrics.average_latency, 1),
        )
        return ScenarioResult(
            scenario=scenario.name, metrics=metrics, passed=passed, policy=scenario.policy,
        )

    def _verdict(
        self,
        config: SimulationConfig,
        collision: CollisionEstimate,
        capacity: CapacityAnalysis,
        results: tuple[ScenarioResult, ...],
        pool: ConnectionPoolMetrics,
        subscriptions: SubscriptionMetrics,
    ) -> ScalabilityVerdict:
        binding = capacity.binding_factor
        meets = (
            binding.current_capacity >= config.target_concurrency
            and collision.acceptable
            and all(r.passed for r in results)
        )

        items: list[Remediation] = []
        pool_reported = False
        for factor in capacity.failing_factors:
            severity = factor.severity
            text = (
                f"{factor.component_name}: supports {factor.current_capacity} of "
                f"{factor.required_capacity} required users"
            )
            if factor is binding:
                text += " and is the binding constraint"
            if factor.dimension is ResourceDimension.DATABASE and not pool.healthy:
                text += f"; {_pool_details(pool)}"
                severity = min(severity, _pool_severity(pool), key=lambda s: s.rank)
                pool_reported = True
            items.append(Remediation(severity, f"{text}. {factor.mitigation}"))

        if not pool.healthy and not pool_reported:
            items.append(Remediation(
                _pool_severity(pool),
                f"Connection pool: {_pool_details(pool)}. Increase the connection pool size",
            ))

        if not collision.acceptable:
            items.append(Remediation(
                collision.risk,
                f"Identifier collision risk: {collision.collision_probability:.1%} for "
                f"{collision.population_size} concurrent sessions in a "
                f"{collision.identifier_space_size}-value identifier space exceeds "
                f"{collision.acceptance_threshold:.1%}. Keep concurrent sessions at or below "
                f"{collision.max_safe_population} or widen the identifier field",
            ))

        for result in results:
            if result.passed:
                continue
            policy = result.policy
            items.append(Remediation(
                Severity.HIGH,
                f"Load scenario {result.scenario}: error rate {result.metrics.error_rate:.1%} "
                f"and average latency {result.metrics.average_latency:.0f}ms fail the policy "
                f"(error rate < {policy.max_error_rate:.0%}, "
                f"average < {policy.max_average_latency_ms:.0f}ms). "
                f"Optimize the database calls on this path",
            ))

        if not subscriptions.healthy:
            items.append(Remediation(
                Severity.MEDIUM,
                f"Real-time subscriptions: {subscriptions.drop_rate_pct:.1f}% drop rate and "
                f"{subscriptions.latency_ms:.0f}ms latency at {subscriptions.subscribers} "
                f"subscribers. Multiplex websocket subscriptions",
            ))

        return ScalabilityVerdict(
            meets_requirement=meets,
            binding_factor=binding,
            rating=rate_scalability(binding.current_capacity, config.target_concurrency),
            remediations=order_remediations(items),
            degraded_confidence=bool(capacity.defaulted_inputs),
            defaulted_inputs=capacity.defaulted_inputs,
        )


async def analyze_scalability(
    config: SimulationConfig,
    *,
    seed: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
) -> ScalabilityReport:
    """Module-level convenience around a default ScalabilityAggregator."""
    return await ScalabilityAggregator().analyze(config, seed=seed, rng=rng)
