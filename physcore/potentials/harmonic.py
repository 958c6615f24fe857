"""Harmonic spring potential."""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .base import Potential, _as_output


class HarmonicPotential(Potential):
    """
    Harmonic spring acting between every pair inside the cutoff.

    U(r) = 0.5 * k * (r - r0)^2

    Unshifted, so the energy jumps to zero at the cutoff. Intended for
    bonded-style use where pairs never reach the cutoff.

    Attributes:
        k: Spring constant (N/m).
        r0: Equilibrium distance (m).
    """

    def __init__(self, k: float, r0: float, cutoff: float) -> None:
        """
        Initialize harmonic potential.

        Args:
            k: Spring constant (N/m).
            r0: Equilibrium distance (m).
            cutoff: Cutoff distance (m).
        """
        self.k = float(k)
        self.r0 = float(r0)
        self._cutoff_sq = float(cutoff) ** 2

    @property
    def cutoff_squared(self) -> float:
        return self._cutoff_sq

    def energy(self, r2: ArrayLike) -> float | NDArray[np.floating]:
        r2_safe, inside = self._inside(r2)
        dr = np.sqrt(r2_safe) - self.r0
        return _as_output(np.where(inside, 0.5 * self.k * dr**2, 0.0))

    def force_div_r(self, r2: ArrayLike) -> float | NDArray[np.floating]:
        # F/r = -k * (r - r0) / r
        r2_safe, inside = self._inside(r2)
        r = np.sqrt(r2_safe)
        return _as_output(np.where(inside, -self.k * (r - self.r0) / r, 0.0))

    def __repr__(self) -> str:
        return (
            f"HarmonicPotential(k={self.k!r}, r0={self.r0!r}, "
            f"cutoff={self.cutoff!r})"
        )
