"""
Statistics Kit: Percentiles and Aggregation over Latency Samples

Pure functions, no state. Percentiles use the nearest-rank method: the
result is always an actual sample, never an interpolation.

Complexity: O(n log n) for percentile (sort), O(n) for mean
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np
import numpy.typing as npt


def _as_sorted_array(samples: Iterable[float]) -> npt.NDArray[np.float64]:
    # np.sort returns a copy; the caller's sequence is never reordered
    return np.sort(np.asarray(list(samples), dtype=np.float64))


def _nearest_rank(sorted_samples: npt.NDArray[np.float64], p: float) -> float:
    n = sorted_samples.shape[0]
    if n == 0:
        return 0.0
    # p * n before dividing keeps integer percentiles exact
    index = math.ceil(p * n / 100) - 1
    index = min(max(index, 0), n - 1)
    return float(sorted_samples[index])


def percentile(samples: Iterable[float], p: float) -> float:
    """
    Nearest-rank percentile.

    Args:
        samples: Latency samples in any order
        p: Percentile in [0, 100]

    Returns:
        Sample at rank ceil(p/100 * n) - 1 of the ascending order,
        clamped to [0, n-1]. 0.0 for an empty sequence.
    """
    return _nearest_rank(_as_sorted_array(samples), p)


def mean(samples: Iterable[float]) -> float:
    """Arithmetic mean, 0.0 for empty input."""
    values = np.asarray(list(samples), dtype=np.float64)
    if values.size == 0:
        return 0.0
    return float(values.mean())


def clamp_probability(value: float) -> float:
    """
    Clamp a computed probability or rate into [0, 1].

    NaN maps to 0.0 so downstream consumers never see it.
    """
    if math.isnan(value):
        return 0.0
    return min(1.0, max(0.0, float(value)))


@dataclass(frozen=True, slots=True)
class LatencySummary:
    """Aggregate view of one batch of latency samples."""
    count: int = 0
    mean: float = 0.0
    minimum: float = 0.0
    maximum: float = 0.0
    p50: float = 0.0
    p95: float = 0.0
    p99: float = 0.0


def summarize(samples: Sequence[float]) -> LatencySummary:
    """Sort once and derive every summary statistic from the sorted array."""
    ordered = _as_sorted_array(samples)
    if ordered.size == 0:
        return LatencySummary()
    return LatencySummary(
        count=int(ordered.size),
        mean=float(ordered.mean()),
        minimum=float(ordered[0]),
        maximum=float(ordered[-1]),
        p50=_nearest_rank(ordered, 50),
        p95=_nearest_rank(ordered, 95),
        p99=_nearest_rank(ordered, 99),
    )
