"""Periodic cell geometry."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from numpy.typing import ArrayLike, NDArray

# Relative to the longest basis vector.
ORTHOGONAL_TOLERANCE = 1e-10


@dataclass(frozen=True, eq=False)
class Lattice:
    """
    Periodic lattice spanned by three basis vectors.

    Supports orthogonal and triclinic cells via a 3x3 matrix whose rows are
    the basis vectors a1, a2, a3. Lengths are in metres. Every lattice point
    is R = n1*a1 + n2*a2 + n3*a3.

    A degenerate basis is accepted at construction so that callers can
    inspect it; ``validate()`` reports it. Geometry methods assume the
    lattice has passed validation.

    Attributes:
        vectors: 3x3 array where rows are basis vectors [a1, a2, a3].
    """

    vectors: NDArray[np.floating] = field(default_factory=lambda: np.eye(3))

    def __post_init__(self) -> None:
        """Validate shape and precompute the Cramer's-rule inverse."""
        vectors = np.array(self.vectors, dtype=np.float64)
        if vectors.shape == (3,):
            vectors = np.diag(vectors)
        if vectors.shape != (3, 3):
            raise ValueError(
                f"Lattice vectors must be (3,) or (3, 3), got {vectors.shape}"
            )
        vectors.flags.writeable = False
        object.__setattr__(self, "vectors", vectors)

        a1, a2, a3 = vectors
        # Rows are a2 x a3, a3 x a1, a1 x a2.
        cross = np.array([np.cross(a2, a3), np.cross(a3, a1), np.cross(a1, a2)])
        volume = float(np.dot(a1, cross[0]))
        # Degeneracy is relative to the product of the basis lengths.
        scale = float(np.prod(np.linalg.norm(vectors, axis=1)))
        degenerate = abs(volume) <= np.finfo(np.float64).eps * scale
        object.__setattr__(self, "_cross", cross)
        object.__setattr__(self, "_volume", volume)
        object.__setattr__(self, "_degenerate", degenerate)

    @classmethod
    def cubic(cls, length: float) -> Lattice:
        """Create a cubic lattice with given side length."""
        return cls.orthorhombic(length, length, length)

    @classmethod
    def orthorhombic(cls, lx: float, ly: float, lz: float) -> Lattice:
        """Create an orthogonal lattice with given side lengths."""
        return cls(np.array([lx, ly, lz]))

    @classmethod
    def triclinic(cls, vectors: ArrayLike) -> Lattice:
        """Create a lattice from a 3x3 matrix of basis vectors (rows)."""
        return cls(np.asarray(vectors))

    @classmethod
    def from_vectors(cls, a1: ArrayLike, a2: ArrayLike, a3: ArrayLike) -> Lattice:
        """Create a lattice from three separate basis vectors."""
        return cls(np.array([a1, a2, a3], dtype=np.float64))

    @property
    def a1(self) -> NDArray[np.floating]:
        return self.vectors[0]

    @property
    def a2(self) -> NDArray[np.floating]:
        return self.vectors[1]

    @property
    def a3(self) -> NDArray[np.floating]:
        return self.vectors[2]

    @property
    def volume(self) -> float:
        """Return the signed cell volume a1 . (a2 x a3) in m^3."""
        return self._volume

    @property
    def lengths(self) -> NDArray[np.floating]:
        """Return basis vector lengths [|a1|, |a2|, |a3|]."""
        return np.linalg.norm(self.vectors, axis=1)

    def validate(self) -> str | None:
        """
        Check that the basis spans a finite, non-degenerate cell.

        Returns:
            None if valid, otherwise a description of the problem.
        """
        for name, vector in zip(("a1", "a2", "a3"), self.vectors):
            if not np.all(np.isfinite(vector)):
                return f"Lattice vector {name} contains non-finite components."
        if not np.isfinite(self._volume):
            return "Lattice volume is non-finite, indicating invalid basis vectors."
        if self._degenerate:
            return (
                "Lattice vectors are linearly dependent (volume is zero), "
                "forming a degenerate lattice."
            )
        return None

    def is_orthogonal(self) -> bool:
        """Check if a1, a2, a3 lie along x, y, z respectively."""
        off_diag = self.vectors.copy()
        np.fill_diagonal(off_diag, 0.0)
        tolerance = ORTHOGONAL_TOLERANCE * float(np.max(self.lengths))
        return bool(np.all(np.abs(off_diag) <= tolerance))

    def cartesian_to_fractional(self, cart: ArrayLike) -> NDArray[np.floating]:
        """
        Convert Cartesian coordinates to fractional coordinates.

        Args:
            cart: Cartesian coordinates, shape (3,) or (N, 3).

        Returns:
            Fractional coordinates with the same shape.
        """
        cart = np.asarray(cart, dtype=np.float64)
        if self._degenerate:
            return np.zeros_like(cart)
        return (cart @ self._cross.T) / self._volume

    def fractional_to_cartesian(self, frac: ArrayLike) -> NDArray[np.floating]:
        """Convert fractional coordinates to Cartesian coordinates."""
        return np.asarray(frac, dtype=np.float64) @ self.vectors

    @staticmethod
    def min_image_frac(frac: ArrayLike) -> NDArray[np.floating]:
        """
        Fold fractional components into [-0.5, 0.5).

        Args:
            frac: Fractional displacement(s), shape (3,) or (N, 3).

        Returns:
            Folded fractional displacement(s).
        """
        frac = np.asarray(frac, dtype=np.float64)
        folded = frac - np.floor(frac + 0.5)
        # Rounding in frac + 0.5 can land one ulp outside the interval.
        folded = np.where(folded >= 0.5, folded - 1.0, folded)
        return np.where(folded < -0.5, folded + 1.0, folded)

    def wrap_cartesian(self, cart: ArrayLike) -> NDArray[np.floating]:
        """
        Wrap positions into the primary cell.

        Args:
            cart: Cartesian positions, shape (3,) or (N, 3).

        Returns:
            Wrapped positions whose fractional coordinates lie in [0, 1).
        """
        frac = self.cartesian_to_fractional(cart)
        frac = frac - np.floor(frac)
        frac = np.where(frac >= 1.0, 0.0, frac)
        return self.fractional_to_cartesian(frac)

    def min_image_displacement(
        self, r1: ArrayLike, r2: ArrayLike
    ) -> NDArray[np.floating]:
        """
        Compute the minimum-image displacement r2 - r1.

        Works for triclinic cells by folding in fractional space.

        Args:
            r1: First position(s), shape (3,) or (N, 3).
            r2: Second position(s), shape (3,) or (N, 3).

        Returns:
            Displacement vector(s) under the minimum image convention.
        """
        dr = np.asarray(r2, dtype=np.float64) - np.asarray(r1, dtype=np.float64)
        frac = self.min_image_frac(self.cartesian_to_fractional(dr))
        return self.fractional_to_cartesian(frac)

    def reciprocal_vectors(self) -> NDArray[np.floating]:
        """
        Return reciprocal lattice vectors as rows [b1, b2, b3].

        Satisfies b_i . a_j = 2*pi*delta_ij.
        """
        if self._degenerate:
            return np.zeros((3, 3))
        return 2.0 * np.pi * self._cross / self._volume

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Lattice):
            return NotImplemented
        return bool(np.array_equal(self.vectors, other.vectors))

    def __hash__(self) -> int:
        return hash(self.vectors.tobytes())

    def __repr__(self) -> str:
        return f"Lattice(vectors={self.vectors.tolist()})"
