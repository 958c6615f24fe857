"""All-pairs force field."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from .base import PairForceProvider

if TYPE_CHECKING:
    from ..system import Lattice, ParticleSystem


class ForceField(PairForceProvider):
    """
    Brute-force pair evaluator visiting all N(N-1)/2 pairs.

    O(N^2) per evaluation. Serves as the correctness reference for the
    neighbor-list evaluator and is adequate for small systems.

    Example:
        ff = ForceField(LennardJones.argon())
        epot = ff.compute_forces(system, lattice)
    """

    def pair_indices(
        self, system: ParticleSystem, lattice: Lattice | None
    ) -> tuple[NDArray[np.integer], NDArray[np.integer]]:
        return np.triu_indices(len(system), k=1)
