"""
Simulation module: concurrent synthetic load and scenario policies.
"""

from beaconscale.core.config import SimulationPolicy
from beaconscale.simulation.load import LoadSimulator, SimulationMetrics
from beaconscale.simulation.scenarios import (
    LoadScenario,
    SESSION_CREATION,
    ATTENDANCE_SUBMISSION,
    scenarios_for,
)

__all__ = [
    "LoadSimulator",
    "SimulationMetrics",
    "SimulationPolicy",
    "LoadScenario",
    "SESSION_CREATION",
    "ATTENDANCE_SUBMISSION",
    "scenarios_for",
]
