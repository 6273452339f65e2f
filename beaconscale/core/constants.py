"""
Model Constants for the Capacity-and-Risk Engine

All magic numbers and configuration defaults centralized here. Every value
is a default only; each one is overridable through the config dataclasses.

Units:
- Latency: milliseconds
- Bandwidth: kilobits per second
- Memory: megabytes
- CPU: percent of one host
"""

from typing import Final

# =============================================================================
# TIME UNITS
# =============================================================================
MS_PER_SECOND: Final[float] = 1000.0

# =============================================================================
# TARGET LOAD
# =============================================================================
DEFAULT_TARGET_CONCURRENCY: Final[int] = 150
DEFAULT_CONNECTION_POOL_SIZE: Final[int] = 20

# =============================================================================
# IDENTIFIER SPACE (beacon minor field)
# =============================================================================
DEFAULT_IDENTIFIER_SPACE_BITS: Final[int] = 16
MAX_IDENTIFIER_SPACE_BITS: Final[int] = 128
DEFAULT_POPULATION_SIZE: Final[int] = 275
DEFAULT_COLLISION_ACCEPTANCE_THRESHOLD: Final[float] = 0.01

COLLISION_RISK_HIGH: Final[float] = 0.05
COLLISION_RISK_MEDIUM: Final[float] = 0.01

# Empirical collision-rate grades
COLLISION_GRADE_EXCELLENT: Final[float] = 0.001
COLLISION_GRADE_GOOD: Final[float] = 0.01
COLLISION_GRADE_FAIR: Final[float] = 0.05

# Session tokens folded into the identifier field
TOKEN_LENGTH: Final[int] = 12
TOKEN_ALPHABET: Final[str] = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"

# =============================================================================
# SYNTHETIC LOAD
# =============================================================================
DEFAULT_LATENCY_MIN_MS: Final[float] = 50.0
DEFAULT_LATENCY_MAX_MS: Final[float] = 250.0
DEFAULT_FAILURE_INJECTION_RATE: Final[float] = 0.02

POLICY_MAX_ERROR_RATE: Final[float] = 0.05
POLICY_MAX_AVERAGE_LATENCY_MS: Final[float] = 1000.0

# =============================================================================
# CAPACITY DIMENSIONS
# =============================================================================
USERS_PER_CONNECTION: Final[int] = 5
AVAILABLE_BANDWIDTH_KBPS: Final[float] = 10_000.0
PER_USER_BANDWIDTH_KBPS: Final[float] = 50.0
AVAILABLE_MEMORY_MB: Final[float] = 512.0
PER_USER_MEMORY_MB: Final[float] = 2.0
MAX_CPU_UTILIZATION_PCT: Final[float] = 80.0
PER_USER_CPU_PCT: Final[float] = 0.5
MAX_HARDWARE_CHANNEL_OPS: Final[int] = 100

SEVERITY_CRITICAL_RATIO: Final[float] = 0.5

# =============================================================================
# CONNECTION POOL
# =============================================================================
PER_WAITING_REQUEST_COST_MS: Final[float] = 50.0
POOL_UTILIZATION_THRESHOLD: Final[float] = 0.8
POOL_MAX_WAIT_MS: Final[float] = 200.0
POOL_CRITICAL_WAIT_MS: Final[float] = 500.0
OPS_PER_CONNECTION_PER_SECOND: Final[float] = 10.0

# =============================================================================
# REAL-TIME SUBSCRIPTIONS
# =============================================================================
SUBSCRIPTION_BASE_LATENCY_MS: Final[float] = 50.0
SUBSCRIPTION_LATENCY_PER_USER_MS: Final[float] = 2.0
SUBSCRIPTION_MAX_LATENCY_MS: Final[float] = 1000.0
SUBSCRIPTION_BASE_DELIVERY_RATE: Final[float] = 100.0
SUBSCRIPTION_DELIVERY_DECAY_PER_USER: Final[float] = 0.1
SUBSCRIPTION_MIN_DELIVERY_RATE: Final[float] = 10.0
SUBSCRIPTION_BANDWIDTH_PER_USER_KBS: Final[float] = 2.0
SUBSCRIPTION_MAX_DROP_RATE_PCT: Final[float] = 2.0
SUBSCRIPTION_MAX_HEALTHY_LATENCY_MS: Final[float] = 500.0

# =============================================================================
# RATING THRESHOLDS (actual / required capacity)
# =============================================================================
RATING_EXCELLENT_RATIO: Final[float] = 1.2
RATING_GOOD_RATIO: Final[float] = 1.0
RATING_LIMITED_RATIO: Final[float] = 0.8
