"""Pairwise potential law objects."""

from .base import Potential
from .harmonic import HarmonicPotential
from .lennard_jones import LennardJones

__all__ = ["Potential", "LennardJones", "HarmonicPotential"]
