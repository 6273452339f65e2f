"""
Analysis module: the combined scalability verdict.
"""

from beaconscale.analysis.aggregator import (
    Remediation,
    ScalabilityAggregator,
    ScalabilityReport,
    ScalabilityVerdict,
    ScenarioResult,
    analyze_scalability,
    order_remediations,
    rate_scalability,
)

__all__ = [
    "Remediation",
    "ScalabilityAggregator",
    "ScalabilityReport",
    "ScalabilityVerdict",
    "ScenarioResult",
    "analyze_scalability",
    "order_remediations",
    "rate_scalability",
]
