"""Simulation front-end and observers."""

from .reporters import EnergyRecorder
from .simulation import SimMode, SimState, Simulation, SimulationModeError

__all__ = [
    "Simulation",
    "SimMode",
    "SimState",
    "SimulationModeError",
    "EnergyRecorder",
]
