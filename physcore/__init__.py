"""
physcore - Materials simulation core: classical molecular dynamics and
explicit heat diffusion behind one steppable Simulation object.

Design Principles:
- Periodic geometry in general (triclinic) lattices
- Deterministic stepping with machine-observable failure state
- Hard memory budgets for particle and field storage
- Pluggable potentials, integrators and thermostats

Quick Start:
    >>> from physcore import HeatDiffusionParams, Simulation
    >>> sim = Simulation(HeatDiffusionParams(dt=4e-7, n_cells=50))
    >>> sim.run()
    >>> print(f"t = {sim.time:.3e} s after {sim.step_count} steps")
"""

__version__ = "0.1.0"

# High-level APIs; plotting is imported on demand as physcore.plotting
from .engines import EnergyRecorder, SimMode, SimState, Simulation, SimulationModeError
from .io import ConfigError, ConfigResult, load_config, load_config_or_raise
from .log_config import setup_logging
from .models import (
    HeatDiffusion2DParams,
    HeatDiffusionParams,
    HeatIC2D,
    SimulationParams,
)

# Core components for advanced users
from .forcefields import ForceField, NeighborForceField
from .integrators import (
    AndersenThermostat,
    NullThermostat,
    VelocityRescaleThermostat,
    VelocityVerlet,
)
from .potentials import HarmonicPotential, LennardJones
from .system import Lattice, Particle, ParticleSystem

__all__ = [
    "setup_logging",
    "Simulation",
    "SimMode",
    "SimState",
    "SimulationModeError",
    "EnergyRecorder",
    "SimulationParams",
    "HeatDiffusionParams",
    "HeatDiffusion2DParams",
    "HeatIC2D",
    "ConfigResult",
    "ConfigError",
    "load_config",
    "load_config_or_raise",
    "Lattice",
    "Particle",
    "ParticleSystem",
    "LennardJones",
    "HarmonicPotential",
    "ForceField",
    "NeighborForceField",
    "VelocityVerlet",
    "VelocityRescaleThermostat",
    "AndersenThermostat",
    "NullThermostat",
]
