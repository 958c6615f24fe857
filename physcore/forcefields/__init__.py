"""Pairwise force field evaluators."""

from .base import PairForceProvider
from .neighbor import NeighborForceField
from .pairwise import ForceField

__all__ = ["PairForceProvider", "ForceField", "NeighborForceField"]
