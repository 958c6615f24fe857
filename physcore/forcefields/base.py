"""Base interface for pairwise force evaluators."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from ..neighborlists import displacement

if TYPE_CHECKING:
    from ..potentials import Potential
    from ..system import Lattice, ParticleSystem


class PairForceProvider(ABC):
    """
    Abstract base class for evaluators of a pairwise potential.

    Subclasses decide which candidate pairs (i, j) with i < j are visited;
    this class filters them by the potential's cutoff using minimum-image
    distances and accumulates energy and equal-and-opposite forces.
    """

    def __init__(self, potential: Potential) -> None:
        """
        Initialize the evaluator.

        Args:
            potential: Pair potential. May be shared with other evaluators.
        """
        self._potential = potential

    @property
    def potential(self) -> Potential:
        """Return the pair potential."""
        return self._potential

    @potential.setter
    def potential(self, value: Potential) -> None:
        self._potential = value

    @abstractmethod
    def pair_indices(
        self, system: ParticleSystem, lattice: Lattice | None
    ) -> tuple[NDArray[np.integer], NDArray[np.integer]]:
        """
        Return candidate pairs as two index arrays with i < j.

        Args:
            system: Particle system.
            lattice: Periodic lattice, or None for open boundaries.
        """
        ...

    def _interacting_pairs(
        self, system: ParticleSystem, lattice: Lattice | None
    ) -> tuple[
        NDArray[np.integer],
        NDArray[np.integer],
        NDArray[np.floating],
        NDArray[np.floating],
    ]:
        """Return (i, j, displacement j - i, r^2) for pairs inside the cutoff."""
        i_indices, j_indices = self.pair_indices(system, lattice)
        if len(i_indices) == 0:
            empty = np.empty(0, dtype=np.int64)
            return empty, empty, np.empty((0, 3)), np.empty(0)

        positions = system.positions
        dr = displacement(positions[i_indices], positions[j_indices], lattice)
        r2 = np.einsum("ij,ij->i", dr, dr)

        mask = r2 < self._potential.cutoff_squared
        return i_indices[mask], j_indices[mask], dr[mask], r2[mask]

    def compute_forces(
        self, system: ParticleSystem, lattice: Lattice | None = None
    ) -> float:
        """
        Recompute all forces and return the total potential energy.

        Clears existing forces first, so repeated calls never accumulate.

        Args:
            system: Particle system whose forces are overwritten.
            lattice: Periodic lattice, or None for open boundaries.

        Returns:
            Total potential energy (J).
        """
        system.clear_forces()
        i_indices, j_indices, dr, r2 = self._interacting_pairs(system, lattice)
        if len(i_indices) == 0:
            return 0.0

        energy = float(np.sum(self._potential.energy(r2)))
        force_vectors = np.asarray(self._potential.force_div_r(r2))[:, np.newaxis] * dr

        # Newton's third law
        system.add_force(j_indices, force_vectors)
        system.add_force(i_indices, -force_vectors)

        return energy

    def compute_energy(
        self, system: ParticleSystem, lattice: Lattice | None = None
    ) -> float:
        """
        Compute the total potential energy without touching forces.

        Args:
            system: Particle system.
            lattice: Periodic lattice, or None for open boundaries.

        Returns:
            Total potential energy (J).
        """
        _, _, _, r2 = self._interacting_pairs(system, lattice)
        if len(r2) == 0:
            return 0.0
        return float(np.sum(self._potential.energy(r2)))
