"""Neighbor-list accelerated force field."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from ..neighborlists import NeighborList
from .base import PairForceProvider

if TYPE_CHECKING:
    from ..potentials import Potential
    from ..system import Lattice, ParticleSystem


class NeighborForceField(PairForceProvider):
    """
    Pair evaluator that visits only pairs cached in a Verlet neighbor list.

    The list is rebuilt lazily, only when it reports that particles have
    drifted too far; otherwise the cached pairs are reused. Amortised cost
    per step is close to O(N) for short-ranged potentials.
    """

    def __init__(
        self, potential: Potential, skin: float, cutoff: float | None = None
    ) -> None:
        """
        Initialize the evaluator.

        Args:
            potential: Pair potential.
            skin: Neighbor list skin distance (m).
            cutoff: List cutoff (m). Defaults to the potential's cutoff and
                must not be smaller than it.
        """
        super().__init__(potential)
        if cutoff is None:
            cutoff = potential.cutoff
        if cutoff < potential.cutoff:
            raise ValueError(
                f"neighbor cutoff {cutoff} is smaller than potential cutoff "
                f"{potential.cutoff}"
            )
        self._neighbor_list = NeighborList(cutoff, skin)
        self._rebuild_count = 0

    @property
    def neighbor_list(self) -> NeighborList:
        """Return the underlying neighbor list."""
        return self._neighbor_list

    @property
    def rebuild_count(self) -> int:
        """Return how many times the list has been (re)built."""
        return self._rebuild_count

    @PairForceProvider.potential.setter
    def potential(self, value: Potential) -> None:
        if value.cutoff > self._neighbor_list.cutoff:
            self._neighbor_list.set_cutoff(value.cutoff, self._neighbor_list.skin)
        self._potential = value

    def update_if_needed(
        self, system: ParticleSystem, lattice: Lattice | None = None
    ) -> bool:
        """
        Rebuild the neighbor list if it is stale.

        Returns:
            True if the list was rebuilt.
        """
        if self._neighbor_list.needs_rebuild(system, lattice):
            self._neighbor_list.build(system, lattice)
            self._rebuild_count += 1
            return True
        return False

    def pair_indices(
        self, system: ParticleSystem, lattice: Lattice | None
    ) -> tuple[NDArray[np.integer], NDArray[np.integer]]:
        self.update_if_needed(system, lattice)
        pairs = self._neighbor_list.pairs
        return pairs[:, 0], pairs[:, 1]
