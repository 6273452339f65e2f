"""
Real-Time Subscription Load Model

Closed-form estimates for n concurrent real-time subscribers (attendance
feed updates pushed over websockets):

    latency        min(base + n * per_user, max)            ms
    delivery rate  max(base_rate - n * decay, min_rate)     msg/s
    bandwidth      n * per_user                             KB/s
    drop rate      stepped: 0.1% (<=50), 0.5% (<=100), 1% (<=150),
                   then min(2 + 0.1 * (n - 150), 10)        %
"""

from __future__ import annotations

from dataclasses import dataclass

from beaconscale.core.config import SubscriptionModelConfig


@dataclass(frozen=True, slots=True)
class SubscriptionMetrics:
    subscribers: int
    latency_ms: float
    delivery_rate_per_second: float
    drop_rate_pct: float
    bandwidth_kbs: float
    healthy: bool


def connection_drop_rate_pct(subscribers: int) -> float:
    if subscribers <= 50:
        return 0.1
    if subscribers <= 100:
        return 0.5
    if subscribers <= 150:
        return 1.0
    return min(2.0 + (subscribers - 150) * 0.1, 10.0)


class SubscriptionLoadModel:
    __slots__ = ("_config",)

    def __init__(self, config: SubscriptionModelConfig | None = None) -> None:
        self._config = config or SubscriptionModelConfig()

    def analyze(self, subscribers: int) -> SubscriptionMetrics:
        cfg = self._config
        latency = min(cfg.base_latency_ms + subscribers * cfg.latency_per_user_ms, cfg.max_latency_ms)
        delivery = max(
            cfg.base_delivery_rate - subscribers * cfg.delivery_decay_per_user,
            cfg.min_delivery_rate,
        )
        drop_rate = connection_drop_rate_pct(subscribers)
        return SubscriptionMetrics(
            subscribers=subscribers,
            latency_ms=latency,
            delivery_rate_per_second=delivery,
            drop_rate_pct=drop_rate,
            bandwidth_kbs=subscribers * cfg.bandwidth_per_user_kbs,
            healthy=drop_rate < cfg.max_drop_rate_pct and latency < cfg.max_healthy_latency_ms,
        )
