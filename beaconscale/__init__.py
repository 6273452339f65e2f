"""
BLE Attendance Capacity-and-Risk Engine

Answers whether a beacon-based attendance deployment can serve a target
number of concurrent users:
- Collision Risk: birthday-paradox exposure of the 16-bit session field
- Capacity Factors: per-resource limits and the binding constraint
- Load Simulation: seeded synthetic concurrent operations
- Connection Pool: backlog estimate under the target burst
- Aggregation: one verdict with ordered remediations

Every model is a pure function of its configuration plus an injected
random source. Nothing here opens a socket, a file or a database.
"""

__version__ = "1.0.0"

# =============================================================================
# PUBLIC API EXPORTS
# =============================================================================
from beaconscale.core.types import (
    Result,
    Ok,
    Err,
    Severity,
    ScalabilityRating,
    ResourceDimension,
)
from beaconscale.core.errors import (
    ErrorCode,
    ScaleModelError,
    ConfigurationError,
    SimulationError,
)
from beaconscale.core.config import (
    ResourceProfile,
    PoolModelConfig,
    SubscriptionModelConfig,
    SimulationPolicy,
    SimulationConfig,
)

# Models
from beaconscale.models import (
    CapacityFactor,
    CapacityFactorModel,
    CollisionEstimate,
    CollisionRiskModel,
    ConnectionPoolMetrics,
    ConnectionPoolModel,
    PoolStatus,
    SubscriptionLoadModel,
    combine,
    percentile,
)

# Simulation
from beaconscale.simulation import (
    LoadScenario,
    LoadSimulator,
    SimulationMetrics,
)

# Analysis
from beaconscale.analysis import (
    ScalabilityAggregator,
    ScalabilityReport,
    ScalabilityVerdict,
    analyze_scalability,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "Result",
    "Ok",
    "Err",
    "Severity",
    "ScalabilityRating",
    "ResourceDimension",
    "ErrorCode",
    "ScaleModelError",
    "ConfigurationError",
    "SimulationError",
    "ResourceProfile",
    "PoolModelConfig",
    "SubscriptionModelConfig",
    "SimulationPolicy",
    "SimulationConfig",
    # Models
    "CapacityFactor",
    "CapacityFactorModel",
    "CollisionEstimate",
    "CollisionRiskModel",
    "ConnectionPoolMetrics",
    "ConnectionPoolModel",
    "PoolStatus",
    "SubscriptionLoadModel",
    "combine",
    "percentile",
    # Simulation
    "LoadScenario",
    "LoadSimulator",
    "SimulationMetrics",
    # Analysis
    "ScalabilityAggregator",
    "ScalabilityReport",
    "ScalabilityVerdict",
    "analyze_scalability",
]
