"""Steppable simulation models."""

from .base import SimModel
from .heat_diffusion import HeatDiffusionModel, HeatDiffusionParams
from .heat_diffusion_2d import HeatDiffusion2DModel, HeatDiffusion2DParams, HeatIC2D
from .molecular_dynamics import MolecularDynamicsModel, SimulationParams

__all__ = [
    "SimModel",
    # Heat diffusion
    "HeatDiffusionParams",
    "HeatDiffusionModel",
    "HeatIC2D",
    "HeatDiffusion2DParams",
    "HeatDiffusion2DModel",
    # Molecular dynamics
    "SimulationParams",
    "MolecularDynamicsModel",
]
