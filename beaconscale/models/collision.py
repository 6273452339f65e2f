"""
Collision Risk Model: Birthday-Paradox Estimates for a Fixed-Width Field

Quantifies the probability that two of n independently and uniformly
chosen identifiers coincide in a space of N = 2**bits values.

Approximation:
    P(collision) ~= n^2 / (2N)          (clamped to 1)

This linear form is the low-probability expansion of the exact
1 - exp(-n^2 / 2N). It overstates the risk once P grows past a few
percent; both values are reported and the verdict uses the linear one.

A Monte-Carlo check (sample_collision_rate) folds random session tokens
through the real encoding instead of assuming uniform identifiers.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum

import numpy as np

from beaconscale.core import constants as C
from beaconscale.core.errors import ConfigurationError
from beaconscale.core.types import Severity
from beaconscale.models.identifiers import fold_token, random_token
from beaconscale.models.statistics import clamp_probability

logger = logging.getLogger(__name__)


def _require_space_size(space_size: int) -> None:
    if (
        not isinstance(space_size, int)
        or isinstance(space_size, bool)
        or space_size <= 0
        or space_size & (space_size - 1) != 0
    ):
        raise ConfigurationError.not_power_of_two("space_size", space_size)


def _require_population(population: int) -> None:
    if not isinstance(population, int) or isinstance(population, bool) or population < 0:
        raise ConfigurationError.invalid_value(
            "population", population, "must be a non-negative integer",
        )


def _require_threshold(threshold: float) -> None:
    if math.isnan(threshold) or not 0.0 <= threshold <= 1.0:
        raise ConfigurationError.probability_out_of_range("acceptance_threshold", threshold)


def estimate_collision_probability(space_size: int, population: int) -> float:
    """
    Linear birthday approximation n^2 / 2N, clamped to [0, 1].

    Raises:
        ConfigurationError: space_size is not a positive power of two,
            or population is negative
    """
    _require_space_size(space_size)
    _require_population(population)
    if population <= 1:
        return 0.0
    return clamp_probability((population * population) / (2 * space_size))


def exact_collision_probability(space_size: int, population: int) -> float:
    """Exponential form 1 - exp(-n^2 / 2N)."""
    _require_space_size(space_size)
    _require_population(population)
    if population <= 1:
        return 0.0
    exponent = (population * population) / (2 * space_size)
    return clamp_probability(-math.expm1(-exponent))


def max_safe_population(space_size: int, acceptance_threshold: float) -> int:
    """
    Largest population whose linear estimate stays at or below the threshold.

    floor(sqrt(2 * N * threshold))
    """
    _require_space_size(space_size)
    _require_threshold(acceptance_threshold)
    return math.floor(math.sqrt(2 * space_size * acceptance_threshold))


def classify_risk(probability: float) -> Severity:
    """> 5% is HIGH, > 1% is MEDIUM, anything else LOW."""
    if probability > C.COLLISION_RISK_HIGH:
        return Severity.HIGH
    if probability > C.COLLISION_RISK_MEDIUM:
        return Severity.MEDIUM
    return Severity.LOW


@dataclass(frozen=True, slots=True)
class CollisionEstimate:
    """Collision exposure of one population in one identifier space."""
    identifier_space_size: int
    population_size: int
    collision_probability: float
    max_safe_population: int
    acceptance_threshold: float
    risk: Severity
    exact_probability: float

    @property
    def acceptable(self) -> bool:
        return self.collision_probability <= self.acceptance_threshold


class CollisionRiskModel:
    """
    Collision estimator bound to one acceptance threshold.

    Usage:
        model = CollisionRiskModel(acceptance_threshold=0.01)
        estimate = model.estimate(bits=16, population=275)
        estimate.risk            # Severity.HIGH
        estimate.max_safe_population   # 36
    """

    __slots__ = ("_threshold",)

    def __init__(
        self,
        acceptance_threshold: float = C.DEFAULT_COLLISION_ACCEPTANCE_THRESHOLD,
    ) -> None:
        _require_threshold(acceptance_threshold)
        self._threshold = acceptance_threshold

    @property
    def acceptance_threshold(self) -> float:
        return self._threshold

    def estimate(self, bits: int, population: int) -> CollisionEstimate:
        if not isinstance(bits, int) or bits <= 0:
            raise ConfigurationError.invalid_value("bits", bits, "must be a positive integer")
        space_size = 1 << bits
        probability = estimate_collision_probability(space_size, population)
        estimate = CollisionEstimate(
            identifier_space_size=space_size,
            population_size=population,
            collision_probability=probability,
            max_safe_population=max_safe_population(space_size, self._threshold),
            acceptance_threshold=self._threshold,
            risk=classify_risk(probability),
            exact_probability=exact_collision_probability(space_size, population),
        )
        logger.debug(
            "Collision estimate: N=%d n=%d p=%.4f (exact %.4f) risk=%s",
            space_size, population, probability,
            estimate.exact_probability, estimate.risk.name,
        )
        return estimate


# =============================================================================
# MONTE-CARLO CHECK
# =============================================================================
class CollisionGrade(Enum):
    """Grade of an empirically measured collision rate."""
    EXCELLENT = "EXCELLENT"
    GOOD = "GOOD"
    FAIR = "FAIR"
    POOR = "POOR"


def grade_collision_rate(rate: float) -> CollisionGrade:
    if rate < C.COLLISION_GRADE_EXCELLENT:
        return CollisionGrade.EXCELLENT
    if rate < C.COLLISION_GRADE_GOOD:
        return CollisionGrade.GOOD
    if rate < C.COLLISION_GRADE_FAIR:
        return CollisionGrade.FAIR
    return CollisionGrade.POOR


def sample_collision_rate(
    space_bits: int,
    population: int,
    trials: int,
    rng: np.random.Generator,
    token_length: int = C.TOKEN_LENGTH,
) -> float:
    """
    Fraction of trials in which at least two of `population` random
    session tokens fold onto the same identifier.

    Deterministic for a given generator state.
    """
    if trials <= 0:
        raise ConfigurationError.invalid_value("trials", trials, "must be a positive integer")
    _require_population(population)

    collided = 0
    for _ in range(trials):
        seen: set[int] = set()
        for _ in range(population):
            identifier = fold_token(random_token(rng, token_length), space_bits)
            if identifier in seen:
                collided += 1
                break
            seen.add(identifier)
    return clamp_probability(collided / trials)
