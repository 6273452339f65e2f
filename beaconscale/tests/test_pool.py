"""
Unit Tests: Connection Pool and Subscription Load

Tests:
    - Backlog arithmetic and status classification
    - Subscription latency, drop rate and health
"""

import pytest

from beaconscale.core.config import PoolModelConfig
from beaconscale.core.errors import ConfigurationError
from beaconscale.models.pool import ConnectionPoolModel, PoolStatus
from beaconscale.models.subscriptions import SubscriptionLoadModel, connection_drop_rate_pct


class TestConnectionPoolModel:
    """Tests for ConnectionPoolModel.analyze."""

    def test_backlog(self):
        metrics = ConnectionPoolModel().analyze(pool_size=20, requests=50)

        assert metrics.active_connections == 20
        assert metrics.waiting_requests == 30
        assert metrics.idle_connections == 0
        assert metrics.utilization == 1.0
        assert metrics.average_wait_ms == pytest.approx(1500.0)
        assert metrics.status == PoolStatus.EXHAUSTED
        assert not metrics.healthy

    def test_underloaded(self):
        metrics = ConnectionPoolModel().analyze(pool_size=20, requests=10)

        assert metrics.active_connections == 10
        assert metrics.idle_connections == 10
        assert metrics.waiting_requests == 0
        assert metrics.utilization == pytest.approx(0.5)
        assert metrics.status == PoolStatus.HEALTHY
        assert metrics.warnings == ()

    def test_saturated_by_utilization(self):
        metrics = ConnectionPoolModel().analyze(pool_size=20, requests=16)

        assert metrics.waiting_requests == 0
        assert metrics.status == PoolStatus.SATURATED
        assert len(metrics.warnings) == 1

    def test_saturated_by_wait(self):
        metrics = ConnectionPoolModel().analyze(pool_size=20, requests=24)

        assert metrics.average_wait_ms == pytest.approx(200.0)
        assert metrics.status == PoolStatus.SATURATED

    def test_throughput_estimate(self):
        metrics = ConnectionPoolModel().analyze(pool_size=20, requests=0)

        assert metrics.estimated_throughput_per_second == pytest.approx(200.0)
        assert metrics.utilization == 0.0

    def test_custom_cost(self):
        model = ConnectionPoolModel(PoolModelConfig(per_waiting_request_cost_ms=10.0))
        metrics = model.analyze(pool_size=10, requests=15)

        assert metrics.average_wait_ms == pytest.approx(50.0)

    def test_invalid_inputs(self):
        with pytest.raises(ConfigurationError):
            ConnectionPoolModel().analyze(pool_size=0, requests=5)
        with pytest.raises(ConfigurationError):
            ConnectionPoolModel().analyze(pool_size=5, requests=-1)


class TestSubscriptionLoadModel:
    """Tests for SubscriptionLoadModel.analyze."""

    def test_target_load(self):
        metrics = SubscriptionLoadModel().analyze(150)

        assert metrics.latency_ms == pytest.approx(350.0)
        assert metrics.delivery_rate_per_second == pytest.approx(85.0)
        assert metrics.drop_rate_pct == pytest.approx(1.0)
        assert metrics.bandwidth_kbs == pytest.approx(300.0)
        assert metrics.healthy

    def test_overload(self):
        metrics = SubscriptionLoadModel().analyze(300)

        assert metrics.latency_ms == pytest.approx(650.0)
        assert metrics.drop_rate_pct == pytest.approx(10.0)
        assert not metrics.healthy

    def test_latency_capped(self):
        assert SubscriptionLoadModel().analyze(2000).latency_ms == pytest.approx(1000.0)

    def test_drop_rate_steps(self):
        assert connection_drop_rate_pct(50) == pytest.approx(0.1)
        assert connection_drop_rate_pct(51) == pytest.approx(0.5)
        assert connection_drop_rate_pct(150) == pytest.approx(1.0)
        assert connection_drop_rate_pct(160) == pytest.approx(3.0)
