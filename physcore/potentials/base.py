"""Base interface for pairwise potentials."""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np
from numpy.typing import ArrayLike, NDArray


class Potential(ABC):
    """
    Abstract base class for pairwise interaction laws.

    Potentials are stateless functions of the squared pair distance and can
    be shared between several force evaluators. Both ``energy`` and
    ``force_div_r`` accept a scalar or an array of squared distances and
    return exactly zero at and beyond the cutoff.
    """

    @abstractmethod
    def energy(self, r2: ArrayLike) -> float | NDArray[np.floating]:
        """
        Pair energy U(r) in J.

        Args:
            r2: Squared distance(s) in m^2.
        """
        ...

    @abstractmethod
    def force_div_r(self, r2: ArrayLike) -> float | NDArray[np.floating]:
        """
        Pair force magnitude divided by distance, F/r = -dU/dr / r.

        Multiply by the displacement vector from i to j to get the force on j.

        Args:
            r2: Squared distance(s) in m^2.
        """
        ...

    @property
    @abstractmethod
    def cutoff_squared(self) -> float:
        """Return the squared cutoff distance in m^2."""
        ...

    @property
    def cutoff(self) -> float:
        """Return the cutoff distance in m."""
        return float(np.sqrt(self.cutoff_squared))

    def _inside(self, r2: ArrayLike) -> tuple[NDArray[np.floating], NDArray[np.bool_]]:
        """Return r2 as an array with values outside the cutoff replaced by 1."""
        r2 = np.asarray(r2, dtype=np.float64)
        inside = r2 < self.cutoff_squared
        return np.where(inside, r2, 1.0), inside


def _as_output(values: NDArray[np.floating]) -> float | NDArray[np.floating]:
    """Return a Python float for 0-d results."""
    return float(values) if values.ndim == 0 else values
