"""Neighbor list implementations."""

from .verlet import NeighborList, displacement

__all__ = ["NeighborList", "displacement"]
