"""
Connection Pool Model: Linear Backlog Approximation

For n simultaneous requests against a pool of size c:

    active      = min(n, c)
    waiting     = max(0, n - c)
    idle        = max(0, c - n)
    utilization = min(1, n / c)
    avg wait    = waiting * per_waiting_request_cost_ms

This is a simple backlog model, not an M/M/c queueing solution. It is
meant to flag pools that are obviously undersized for the target load.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from beaconscale.core.config import PoolModelConfig
from beaconscale.core.errors import ConfigurationError
from beaconscale.models.statistics import clamp_probability


class PoolStatus(Enum):
    """Pool health classification."""
    HEALTHY = "HEALTHY"        # Below utilization threshold, short waits
    SATURATED = "SATURATED"    # High utilization or waits above bound
    EXHAUSTED = "EXHAUSTED"    # Waits beyond the critical bound


@dataclass(frozen=True, slots=True)
class ConnectionPoolMetrics:
    """Backlog estimate for one pool under one burst of requests."""
    pool_size: int
    requests: int
    active_connections: int
    idle_connections: int
    waiting_requests: int
    utilization: float
    average_wait_ms: float
    estimated_throughput_per_second: float
    status: PoolStatus
    warnings: tuple[str, ...] = ()

    @property
    def healthy(self) -> bool:
        return self.status is PoolStatus.HEALTHY


class ConnectionPoolModel:
    """
    Closed-form pool estimator.

    Usage:
        model = ConnectionPoolModel()
        metrics = model.analyze(pool_size=20, requests=50)
        metrics.waiting_requests   # 30
    """

    __slots__ = ("_config",)

    def __init__(self, config: PoolModelConfig | None = None) -> None:
        self._config = config or PoolModelConfig()

    def analyze(self, pool_size: int, requests: int) -> ConnectionPoolMetrics:
        if pool_size <= 0:
            raise ConfigurationError.invalid_value("pool_size", pool_size, "must be a positive integer")
        if requests < 0:
            raise ConfigurationError.invalid_value("requests", requests, "must be non-negative")

        cfg = self._config
        active = min(requests, pool_size)
        waiting = max(0, requests - pool_size)
        idle = max(0, pool_size - requests)
        utilization = clamp_probability(requests / pool_size)
        average_wait = waiting * cfg.per_waiting_request_cost_ms

        warnings: list[str] = []
        if utilization >= cfg.utilization_threshold:
            warnings.append(
                f"Connection pool utilization at {utilization:.0%} - consider increasing pool size"
            )
        if waiting > 0:
            warnings.append(f"{waiting} requests waiting for database connections")

        if average_wait > cfg.critical_wait_ms:
            status = PoolStatus.EXHAUSTED
            warnings.append(
                f"Average connection wait {average_wait:.0f}ms exceeds {cfg.critical_wait_ms:.0f}ms"
            )
        elif utilization >= cfg.utilization_threshold or average_wait >= cfg.max_wait_ms:
            status = PoolStatus.SATURATED
        else:
            status = PoolStatus.HEALTHY

        return ConnectionPoolMetrics(
            pool_size=pool_size,
            requests=requests,
            active_connections=active,
            idle_connections=idle,
            waiting_requests=waiting,
            utilization=utilization,
            average_wait_ms=average_wait,
            estimated_throughput_per_second=pool_size * cfg.ops_per_connection_per_second,
            status=status,
            warnings=tuple(warnings),
        )
