"""
Load Simulator: Synthetic Concurrent Operations

Issues n independent trials concurrently and summarizes their outcomes
without touching real infrastructure:
- Each trial draws a latency uniformly from the configured range
- Each trial fails with the configured probability
- All n trials are gathered; the call returns once every trial resolved

Determinism:
    Every random draw happens up front, in trial order, from the injected
    numpy Generator. Scheduling order therefore never changes the outcome,
    and the same seed reproduces identical metrics.

Concurrency:
    Trials write to disjoint slots of a pre-sized list and aggregation runs
    only after the whole batch resolved, so no locking is needed. An
    optional batch timeout cancels the whole batch; no trial outlives the
    call.
"""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

import numpy as np
import numpy.typing as npt

from beaconscale.core import constants as C
from beaconscale.core.errors import ConfigurationError, SimulationError
from beaconscale.models.statistics import clamp_probability, summarize

if TYPE_CHECKING:
    from beaconscale.simulation.scenarios import LoadScenario

logger = logging.getLogger(__name__)

# (latency_ms, succeeded)
_TrialSlot = Optional[tuple[float, bool]]


@dataclass(frozen=True, slots=True)
class SimulationMetrics:
    """
    Outcome of one simulated batch.

    Latency statistics cover successful trials. Throughput is measured
    against the batch makespan (the longest simulated latency), which is
    model time and independent of the host clock.
    """
    total_operations: int
    successes: int
    failures: int
    average_latency: float
    p95_latency: float
    p99_latency: float
    throughput_per_second: float
    error_rate: float
    makespan_ms: float = 0.0


class LoadSimulator:
    """
    Concurrent synthetic load generator.

    Usage:
        simulator = LoadSimulator(seed=7)
        metrics = await simulator.simulate(150, (50.0, 250.0), 0.02)

    Args:
        rng: Random source; a fresh default_rng(seed) when omitted
        seed: Seed for the default random source
        time_scale: Real seconds slept per simulated second. 0 keeps the
            model instantaneous while trials still yield cooperatively.
        batch_timeout_s: Optional bound on the whole batch
    """

    __slots__ = ("_rng", "_time_scale", "_batch_timeout_s")

    def __init__(
        self,
        rng: Optional[np.random.Generator] = None,
        *,
        seed: Optional[int] = None,
        time_scale: float = 0.0,
        batch_timeout_s: Optional[float] = None,
    ) -> None:
        if not math.isfinite(time_scale) or time_scale < 0:
            raise ConfigurationError.invalid_value(
                "time_scale", time_scale, "must be a finite non-negative number",
            )
        if batch_timeout_s is not None and batch_timeout_s <= 0:
            raise ConfigurationError.invalid_value(
                "batch_timeout_s", batch_timeout_s, "must be a positive number of seconds",
            )
        self._rng = rng if rng is not None else np.random.default_rng(seed)
        self._time_scale = time_scale
        self._batch_timeout_s = batch_timeout_s

    async def simulate(
        self,
        n: int,
        latency_range: tuple[float, float],
        failure_rate: float,
    ) -> SimulationMetrics:
        """
        Run n concurrent trials and summarize them.

        Raises:
            ConfigurationError: invalid n, latency range or failure rate
            SimulationError: random source failure or batch timeout
        """
        self._validate(n, latency_range, failure_rate)
        latencies, failed = self._draw(n, latency_range, failure_rate)

        slots: list[_TrialSlot] = [None] * n
        batch = asyncio.gather(*(
            self._run_trial(i, float(latencies[i]), bool(failed[i]), slots)
            for i in range(n)
        ))

        if self._batch_timeout_s is None:
            await batch
        else:
            try:
                await asyncio.wait_for(batch, timeout=self._batch_timeout_s)
            except asyncio.TimeoutError:
                raise SimulationError.batch_timeout(n, self._batch_timeout_s) from None

        return self._aggregate(slots)

    async def simulate_scenario(self, scenario: LoadScenario, n: int) -> SimulationMetrics:
        return await self.simulate(n, scenario.latency_range, scenario.failure_rate)

    def _validate(
        self,
        n: int,
        latency_range: tuple[float, float],
        failure_rate: float,
    ) -> None:
        if not isinstance(n, int) or isinstance(n, bool) or n <= 0:
            raise ConfigurationError.invalid_value("n", n, "must be a positive integer")
        low, high = latency_range
        if not (0 <= low <= high) or not math.isfinite(high):
            raise ConfigurationError.invalid_range("latency_range", low, high)
        if math.isnan(failure_rate) or not 0.0 <= failure_rate <= 1.0:
            raise ConfigurationError.probability_out_of_range("failure_rate", failure_rate)

    def _draw(
        self,
        n: int,
        latency_range: tuple[float, float],
        failure_rate: float,
    ) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.bool_]]:
        low, high = latency_range
        try:
            latencies = self._rng.uniform(low, high, size=n)
            failed = self._rng.random(size=n) < failure_rate
        except Exception as e:
            raise SimulationError.random_source_failed(e) from e
        return latencies, failed

    async def _run_trial(
        self,
        index: int,
        latency_ms: float,
        failed: bool,
        slots: list[_TrialSlot],
    ) -> None:
        await asyncio.sleep(latency_ms / C.MS_PER_SECOND * self._time_scale)
        slots[index] = (latency_ms, not failed)

    def _aggregate(self, slots: list[_TrialSlot]) -> SimulationMetrics:
        n = len(slots)
        outcomes = [slot for slot in slots if slot is not None]
        succeeded = [latency for latency, ok in outcomes if ok]
        successes = len(succeeded)
        failures = n - successes

        summary = summarize(succeeded)
        makespan_ms = max((latency for latency, _ in outcomes), default=0.0)
        throughput = successes / (makespan_ms / C.MS_PER_SECOND) if makespan_ms > 0 else 0.0

        metrics = SimulationMetrics(
            total_operations=n,
            successes=successes,
            failures=failures,
            average_latency=summary.mean,
            p95_latency=summary.p95,
            p99_latency=summary.p99,
            throughput_per_second=throughput,
            error_rate=clamp_probability(failures / n),
            makespan_ms=makespan_ms,
        )
        logger.debug(
            "Simulated %d operations: %d failed, avg %.1fms, p99 %.1fms",
            n, failures, metrics.average_latency, metrics.p99_latency,
        )
        return metrics
