"""Lennard-Jones 12-6 potential."""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .base import Potential, _as_output


class LennardJones(Potential):
    """
    Truncated and shifted Lennard-Jones 12-6 potential.

    U(r) = 4 * epsilon * [(sigma/r)^12 - (sigma/r)^6] - shift    for r < rc
    U(r) = 0                                                     for r >= rc

    The shift makes U continuous at the cutoff. The force is truncated
    without a tail correction.

    Attributes:
        epsilon: Well depth (J).
        sigma: Distance at which the unshifted potential is zero (m).
    """

    def __init__(self, epsilon: float, sigma: float, cutoff: float) -> None:
        """
        Initialize Lennard-Jones potential.

        Args:
            epsilon: Well depth (J).
            sigma: Size parameter (m).
            cutoff: Cutoff distance (m).
        """
        self.epsilon = float(epsilon)
        self.sigma = float(sigma)
        self._cutoff_sq = float(cutoff) ** 2

        self._sigma_sq = self.sigma**2
        self._sigma_6 = self._sigma_sq**3
        self._sigma_12 = self._sigma_6**2

        inv_r2 = self._sigma_sq / self._cutoff_sq
        inv_r6 = inv_r2**3
        self._shift = 4.0 * self.epsilon * (inv_r6**2 - inv_r6)

    @classmethod
    def argon(cls, cutoff_sigmas: float = 2.5) -> LennardJones:
        """Create the standard argon parameter set."""
        sigma = 3.405e-10
        return cls(epsilon=1.654e-21, sigma=sigma, cutoff=cutoff_sigmas * sigma)

    @property
    def cutoff_squared(self) -> float:
        return self._cutoff_sq

    @property
    def shift(self) -> float:
        """Return the energy shift applied inside the cutoff."""
        return self._shift

    def energy(self, r2: ArrayLike) -> float | NDArray[np.floating]:
        r2_safe, inside = self._inside(r2)
        inv_r6 = (self._sigma_sq / r2_safe) ** 3
        u = 4.0 * self.epsilon * (inv_r6**2 - inv_r6) - self._shift
        return _as_output(np.where(inside, u, 0.0))

    def force_div_r(self, r2: ArrayLike) -> float | NDArray[np.floating]:
        # F/r = 24 * epsilon * [2*(sigma/r)^12 - (sigma/r)^6] / r^2
        r2_safe, inside = self._inside(r2)
        inv_r6 = (self._sigma_sq / r2_safe) ** 3
        f = 24.0 * self.epsilon * (2.0 * inv_r6**2 - inv_r6) / r2_safe
        return _as_output(np.where(inside, f, 0.0))

    def __repr__(self) -> str:
        return (
            f"LennardJones(epsilon={self.epsilon!r}, sigma={self.sigma!r}, "
            f"cutoff={self.cutoff!r})"
        )
