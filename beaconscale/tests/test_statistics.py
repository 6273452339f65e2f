"""
Unit Tests: Statistics Kit

Tests:
    - Nearest-rank percentile
    - Mean and probability clamping
    - Latency summaries
"""

import math

import numpy as np
import pytest

from beaconscale.models.statistics import (
    LatencySummary,
    clamp_probability,
    mean,
    percentile,
    summarize,
)


class TestPercentile:
    """Tests for nearest-rank percentiles."""

    def test_nearest_rank(self):
        """Result is an actual sample at rank ceil(p/100 * n) - 1."""
        samples = [float(i) for i in range(1, 101)]

        assert percentile(samples, 95) == 95.0
        assert percentile(samples, 99) == 99.0
        assert percentile([10.0, 20.0, 30.0], 50) == 20.0

    def test_unsorted_input(self):
        """Input order does not matter."""
        assert percentile([30.0, 10.0, 20.0], 50) == 20.0

    def test_every_integer_rank(self):
        """Integer percentiles of 1..100 return themselves exactly."""
        samples = list(range(1, 101))

        for k in range(1, 101):
            assert percentile(samples, k) == k

    def test_bounds(self):
        """p=0 gives the minimum, p=100 the maximum."""
        samples = [5.0, 1.0, 9.0, 3.0]

        assert percentile(samples, 0) == 1.0
        assert percentile(samples, 100) == 9.0

    def test_empty(self):
        """Empty input yields 0.0 instead of raising."""
        assert percentile([], 95) == 0.0

    def test_monotonic_in_p(self):
        """Higher percentiles never return smaller values."""
        rng = np.random.default_rng(11)
        samples = rng.uniform(0, 500, size=257).tolist()

        values = [percentile(samples, p) for p in range(0, 101, 5)]
        assert values == sorted(values)

    def test_does_not_mutate(self):
        """The caller's sequence is left untouched."""
        samples = [3.0, 1.0, 2.0]
        percentile(samples, 50)

        assert samples == [3.0, 1.0, 2.0]


class TestMeanAndClamp:
    """Tests for mean and clamp_probability."""

    def test_mean(self):
        assert mean([1.0, 2.0, 3.0, 4.0]) == pytest.approx(2.5)

    def test_mean_empty(self):
        assert mean([]) == 0.0

    def test_clamp(self):
        assert clamp_probability(1.7) == 1.0
        assert clamp_probability(-0.2) == 0.0
        assert clamp_probability(0.25) == 0.25

    def test_clamp_nan(self):
        """NaN never leaks into results."""
        assert clamp_probability(math.nan) == 0.0


class TestSummarize:
    """Tests for LatencySummary construction."""

    def test_summary(self):
        samples = [float(i) for i in range(1, 101)]
        summary = summarize(samples)

        assert summary.count == 100
        assert summary.minimum == 1.0
        assert summary.maximum == 100.0
        assert summary.p50 == 50.0
        assert summary.p95 == 95.0
        assert summary.p99 == 99.0
        np.testing.assert_allclose(summary.mean, 50.5)

    def test_empty_summary(self):
        assert summarize([]) == LatencySummary()
