"""Verlet neighbor list implementation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import ArrayLike, NDArray

if TYPE_CHECKING:
    from ..system import Lattice, ParticleSystem

logger = logging.getLogger(__name__)


def displacement(
    r1: ArrayLike, r2: ArrayLike, lattice: Lattice | None
) -> NDArray[np.floating]:
    """
    Displacement r2 - r1, minimum-image corrected when a lattice is given.

    Building and rebuild checks both go through this function so that they
    always agree on what "distance" means.
    """
    if lattice is not None:
        return lattice.min_image_displacement(r1, r2)
    return np.asarray(r2, dtype=np.float64) - np.asarray(r1, dtype=np.float64)


class NeighborList:
    """
    Verlet neighbor list with skin distance.

    Uses a larger cutoff (cutoff + skin) for list construction, allowing the
    list to stay valid while particles move small distances. Any particle
    must first travel more than skin/2 before a pair outside the list could
    come within the interaction cutoff, so the list is rebuilt once any
    particle's drift since the last build exceeds skin/2.

    The list is either empty and stale (never built, or cleared) or fully
    consistent with the stored position snapshot.

    Attributes:
        _cutoff: Interaction cutoff distance.
        _skin: Additional buffer distance.
        _neighbors: Per-particle partner indices j > i, in ascending order.
        _positions_at_build: Positions when the list was last built.
        _lattice_at_build: Lattice in effect when the list was last built.
    """

    def __init__(self, cutoff: float, skin: float) -> None:
        """
        Initialize Verlet neighbor list.

        Args:
            cutoff: Interaction cutoff distance (m).
            skin: Buffer distance, typically 0.2-0.3 of the cutoff (m).
        """
        self._neighbors: list[NDArray[np.integer]] = []
        self._pairs: NDArray[np.integer] = np.empty((0, 2), dtype=np.int64)
        self._positions_at_build: NDArray[np.floating] | None = None
        self._lattice_at_build: Lattice | None = None
        self.set_cutoff(cutoff, skin)

    def set_cutoff(self, cutoff: float, skin: float) -> None:
        """Change cutoff and skin. Invalidates the current list."""
        if cutoff <= 0.0 or skin < 0.0:
            raise ValueError(
                f"cutoff must be positive and skin non-negative, got {cutoff}, {skin}"
            )
        self._cutoff = float(cutoff)
        self._skin = float(skin)
        self._list_cutoff_sq = (self._cutoff + self._skin) ** 2
        self._half_skin_sq = (0.5 * self._skin) ** 2
        self.clear()

    @property
    def cutoff(self) -> float:
        """Return the interaction cutoff distance."""
        return self._cutoff

    @property
    def skin(self) -> float:
        return self._skin

    @property
    def total_cutoff(self) -> float:
        """Return the list cutoff (cutoff + skin)."""
        return self._cutoff + self._skin

    @property
    def is_built(self) -> bool:
        return self._positions_at_build is not None

    @property
    def size(self) -> int:
        """Return the number of particles covered by the list."""
        return len(self._neighbors)

    @property
    def n_pairs(self) -> int:
        """Return the number of neighbor pairs."""
        return len(self._pairs)

    @property
    def pairs(self) -> NDArray[np.integer]:
        """Return all pairs as an array of shape (N_pairs, 2) with i < j."""
        return self._pairs

    def neighbors(self, i: int) -> NDArray[np.integer]:
        """Return partner indices j > i of particle i."""
        return self._neighbors[i]

    def clear(self) -> None:
        """Drop the list; the next needs_rebuild() call returns True."""
        self._neighbors = []
        self._pairs = np.empty((0, 2), dtype=np.int64)
        self._positions_at_build = None
        self._lattice_at_build = None

    def build(self, system: ParticleSystem, lattice: Lattice | None = None) -> int:
        """
        Build the neighbor list from scratch.

        Uses O(N^2) distance calculations, one row of partners at a time.

        Args:
            system: Particle system.
            lattice: Periodic lattice, or None for open boundaries.

        Returns:
            Number of neighbor pairs.
        """
        positions = np.array(system.positions, dtype=np.float64)
        n_particles = len(positions)

        neighbors = []
        for i in range(n_particles):
            dr = displacement(positions[i], positions[i + 1 :], lattice)
            r2 = np.einsum("ij,ij->i", dr, dr)
            neighbors.append(np.flatnonzero(r2 < self._list_cutoff_sq) + i + 1)

        self._neighbors = neighbors
        if n_particles > 0:
            firsts = np.repeat(np.arange(n_particles), [len(js) for js in neighbors])
            self._pairs = np.stack([firsts, np.concatenate(neighbors)], axis=1)
        else:
            self._pairs = np.empty((0, 2), dtype=np.int64)
        self._positions_at_build = positions
        self._lattice_at_build = lattice

        logger.debug(
            "Built neighbor list: %d particles, %d pairs", n_particles, self.n_pairs
        )
        return self.n_pairs

    def max_displacement_squared(
        self, system: ParticleSystem, lattice: Lattice | None = None
    ) -> float:
        """Return the largest squared drift of any particle since the last build."""
        if self._positions_at_build is None or len(system) == 0:
            return 0.0
        dr = displacement(self._positions_at_build, system.positions, lattice)
        return float(np.max(np.einsum("ij,ij->i", dr, dr)))

    def needs_rebuild(
        self, system: ParticleSystem, lattice: Lattice | None = None
    ) -> bool:
        """
        Check whether the list must be rebuilt before use.

        Args:
            system: Particle system.
            lattice: Periodic lattice, or None for open boundaries.

        Returns:
            True if the list was never built, the particle count or lattice
            changed, or any particle drifted more than skin/2.
        """
        if self._positions_at_build is None:
            return True
        if len(system) != len(self._positions_at_build):
            return True
        if lattice != self._lattice_at_build:
            return True
        return self.max_displacement_squared(system, lattice) > self._half_skin_sq
