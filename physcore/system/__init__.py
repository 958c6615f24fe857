"""Particle state, periodic geometry and memory budgeting."""

from .arena import ArenaExhaustedError, BoundedArena
from .builders import cubic_crystal, cubic_lattice_positions
from .lattice import Lattice
from .particles import Particle, ParticleSystem

__all__ = [
    "ArenaExhaustedError",
    "BoundedArena",
    "Lattice",
    "Particle",
    "ParticleSystem",
    "cubic_crystal",
    "cubic_lattice_positions",
]
