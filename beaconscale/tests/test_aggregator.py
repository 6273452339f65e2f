"""
Integration Tests: Scalability Aggregator

Tests:
    - Default deployment verdict end to end
    - Passing deployment
    - Rating scale and remediation ordering
    - Report serialization and determinism
"""

import asyncio
import json
import logging
from dataclasses import replace

import pytest

from beaconscale.analysis import (
    Remediation,
    ScalabilityAggregator,
    analyze_scalability,
    order_remediations,
    rate_scalability,
)
from beaconscale.core.config import ResourceProfile, SimulationConfig
from beaconscale.core.errors import ConfigurationError
from beaconscale.core.types import ResourceDimension, ScalabilityRating, Severity
from beaconscale.models.pool import PoolStatus
from beaconscale.simulation import ATTENDANCE_SUBMISSION, LoadScenario


def analyze(config, **kwargs):
    return asyncio.run(ScalabilityAggregator().analyze(config, **kwargs))


@pytest.fixture(scope="module")
def default_report():
    """150 users, pool of 20, 16-bit identifiers, 275 sessions."""
    return analyze(SimulationConfig(), seed=42)


@pytest.fixture
def passing_config():
    return SimulationConfig(
        target_concurrency=50,
        identifier_space_bits=32,
        failure_injection_rate=0.0,
        resources=ResourceProfile.documented_defaults(),
        extra_scenarios=(replace(ATTENDANCE_SUBMISSION, failure_rate=0.0),),
    )


class TestDefaultDeployment:
    """The documented default deployment does not meet 150 users."""

    def test_binding_factor(self, default_report):
        binding = default_report.verdict.binding_factor

        assert binding.dimension == ResourceDimension.DATABASE
        assert binding.current_capacity == 100
        assert binding.required_capacity == 150

    def test_verdict(self, default_report):
        verdict = default_report.verdict

        assert not verdict.meets_requirement
        assert verdict.rating == ScalabilityRating.POOR

    def test_collision(self, default_report):
        collision = default_report.collision

        assert collision.risk == Severity.HIGH
        assert collision.collision_probability == pytest.approx(0.577, abs=1e-3)
        assert collision.max_safe_population == 36

    def test_remediations(self, default_report):
        remediations = [r.lower() for r in default_report.verdict.remediations]

        assert remediations
        assert any("connection pool" in r for r in remediations)
        assert any("collision" in r for r in remediations)
        assert len(remediations) == len(set(remediations))

    def test_one_entry_for_the_connection_pool(self, default_report):
        """The binding database factor and the pool backlog share one entry."""
        pool_entries = [
            r for r in default_report.verdict.remediations if "connection pool" in r.lower()
        ]

        assert len(pool_entries) == 1
        assert "binding constraint" in pool_entries[0]
        assert "130 of 150 requests wait" in pool_entries[0]

    def test_one_entry_per_failing_factor(self, default_report):
        remediations = default_report.verdict.remediations

        assert sum("Database Connection Pool" in r for r in remediations) == 1
        assert sum("BLE Hardware Channel" in r for r in remediations) == 1

    def test_every_scenario_simulated(self, default_report):
        names = [r.scenario for r in default_report.scenarios]

        assert names == ["session_creation", "attendance_submission"]
        assert default_report.simulation == default_report.scenarios[0].metrics
        assert all(r.metrics.total_operations == 150 for r in default_report.scenarios)

    def test_pool(self, default_report):
        assert default_report.pool.waiting_requests == 130
        assert default_report.pool.status == PoolStatus.EXHAUSTED

    def test_degraded_confidence(self, default_report):
        """Every resource input fell back to its documented default."""
        verdict = default_report.verdict

        assert verdict.degraded_confidence
        assert set(verdict.defaulted_inputs) == set(ResourceProfile.DEFAULTS)

    def test_simulation_ran(self, default_report):
        assert default_report.simulation.total_operations == 150
        assert default_report.empirical_collision_rate is None


class TestPassingDeployment:
    """A wide identifier field and a modest target pass."""

    def test_meets_requirement(self, passing_config):
        report = analyze(passing_config, seed=1)

        assert report.verdict.meets_requirement
        assert report.verdict.rating == ScalabilityRating.EXCELLENT
        assert report.collision.acceptable
        assert report.simulation_passed
        assert not report.verdict.degraded_confidence

    def test_pool_backlog_does_not_fail_verdict(self, passing_config):
        """Pool pressure is reported but does not flip the verdict."""
        report = analyze(passing_config, seed=1)

        assert report.pool.status == PoolStatus.EXHAUSTED
        assert report.verdict.meets_requirement
        assert any("connection pool" in r.lower() for r in report.verdict.remediations)

    def test_failing_policy(self, passing_config):
        config = SimulationConfig(
            target_concurrency=50,
            identifier_space_bits=32,
            failure_injection_rate=1.0,
        )
        report = analyze(config, seed=1)

        assert not report.simulation_passed
        assert not report.verdict.meets_requirement

    def test_failing_extra_scenario(self, passing_config):
        """Any scenario missing its policy fails the verdict."""
        degraded = LoadScenario("attendance_degraded", (30.0, 180.0), 1.0, ATTENDANCE_SUBMISSION.policy)
        config = replace(passing_config, extra_scenarios=(degraded,))
        report = analyze(config, seed=1)

        first, second = report.scenarios
        assert first.passed
        assert not second.passed
        assert not report.simulation_passed
        assert not report.verdict.meets_requirement
        assert any("attendance_degraded" in r for r in report.verdict.remediations)

    def test_configured_profile_only(self, passing_config):
        report = analyze(replace(passing_config, extra_scenarios=()), seed=1)

        assert [r.scenario for r in report.scenarios] == ["session_creation"]
        assert report.verdict.meets_requirement


class TestRating:
    """Tests for the rating scale."""

    @pytest.mark.parametrize("actual, expected", [
        (120, ScalabilityRating.EXCELLENT),
        (119, ScalabilityRating.GOOD),
        (100, ScalabilityRating.GOOD),
        (80, ScalabilityRating.LIMITED),
        (79, ScalabilityRating.POOR),
    ])
    def test_thresholds(self, actual, expected):
        assert rate_scalability(actual, 100) == expected


class TestRemediationOrder:
    """Tests for remediation ordering."""

    def test_most_severe_first(self):
        items = [
            Remediation(Severity.MEDIUM, "medium"),
            Remediation(Severity.CRITICAL, "critical"),
            Remediation(Severity.HIGH, "high-1"),
            Remediation(Severity.HIGH, "high-2"),
        ]

        assert order_remediations(items) == ("critical", "high-1", "high-2", "medium")

    def test_duplicates_dropped(self):
        items = [Remediation(Severity.HIGH, "same"), Remediation(Severity.LOW, "same")]

        assert order_remediations(items) == ("same",)


class TestAggregatorBehavior:
    """Validation, determinism and serialization."""

    def test_invalid_config_raises(self):
        with pytest.raises(ConfigurationError):
            analyze(SimulationConfig(target_concurrency=0), seed=1)

    def test_deterministic(self):
        a = analyze(SimulationConfig(), seed=7)
        b = analyze(SimulationConfig(), seed=7)

        assert a.simulation == b.simulation
        assert a.verdict == b.verdict

    def test_monte_carlo_check(self):
        report = analyze(SimulationConfig(population_size=40, collision_sample_trials=5), seed=3)

        assert report.empirical_collision_rate is not None
        assert 0.0 <= report.empirical_collision_rate <= 1.0

    def test_to_dict_is_json_safe(self, default_report):
        data = default_report.to_dict()
        decoded = json.loads(json.dumps(data))

        assert decoded["verdict"]["rating"] == "POOR"
        assert decoded["verdict"]["binding_factor"]["dimension"] == "DATABASE"
        assert decoded["collision"]["risk"] == "HIGH"
        assert decoded["config"]["service_latency_range"] == [50.0, 250.0]

    def test_sync_wrapper(self):
        report = ScalabilityAggregator().analyze_sync(SimulationConfig(), seed=42)
        assert report.verdict.binding_factor.current_capacity == 100

    def test_module_function(self):
        report = asyncio.run(analyze_scalability(SimulationConfig(), seed=42))
        assert not report.verdict.meets_requirement

    def test_run_id_logged(self, caplog):
        with caplog.at_level(logging.INFO, logger="beaconscale.analysis.aggregator"):
            analyze(SimulationConfig(), seed=42)

        finished = [r for r in caplog.records if r.getMessage() == "Scalability analysis finished"]
        assert len(finished) == 1
        assert finished[0].run_id
        assert finished[0].rating == "POOR"
