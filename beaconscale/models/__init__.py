"""
Models module: closed-form capacity and risk estimators.

- statistics: nearest-rank percentiles and aggregation
- collision: birthday-paradox estimates for the identifier field
- identifiers: token folding into the fixed-width field
- capacity: per-dimension capacity and the binding constraint
- pool: connection pool backlog approximation
- subscriptions: real-time subscriber load estimates
"""

from beaconscale.models.statistics import (
    percentile,
    mean,
    summarize,
    clamp_probability,
    LatencySummary,
)
from beaconscale.models.collision import (
    CollisionEstimate,
    CollisionGrade,
    CollisionRiskModel,
    classify_risk,
    estimate_collision_probability,
    exact_collision_probability,
    grade_collision_rate,
    max_safe_population,
    sample_collision_rate,
)
from beaconscale.models.identifiers import fold_token, random_token, is_valid_token
from beaconscale.models.capacity import (
    CapacityAnalysis,
    CapacityFactor,
    CapacityFactorModel,
    DimensionSpec,
    DIMENSIONS,
    assign_severity,
    combine,
)
from beaconscale.models.pool import ConnectionPoolMetrics, ConnectionPoolModel, PoolStatus
from beaconscale.models.subscriptions import SubscriptionLoadModel, SubscriptionMetrics

__all__ = [
    "percentile",
    "mean",
    "summarize",
    "clamp_probability",
    "LatencySummary",
    "CollisionEstimate",
    "CollisionGrade",
    "CollisionRiskModel",
    "classify_risk",
    "estimate_collision_probability",
    "exact_collision_probability",
    "grade_collision_rate",
    "max_safe_population",
    "sample_collision_rate",
    "fold_token",
    "random_token",
    "is_valid_token",
    "CapacityAnalysis",
    "CapacityFactor",
    "CapacityFactorModel",
    "DimensionSpec",
    "DIMENSIONS",
    "assign_severity",
    "combine",
    "ConnectionPoolMetrics",
    "ConnectionPoolModel",
    "PoolStatus",
    "SubscriptionLoadModel",
    "SubscriptionMetrics",
]
