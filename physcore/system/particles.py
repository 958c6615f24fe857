"""Particle state container backed by a bounded arena."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ..constants import DEFAULT_PARTICLE_BUDGET, K_BOLTZMANN
from .arena import ArenaExhaustedError, BoundedArena

if TYPE_CHECKING:
    from .lattice import Lattice

# position, velocity, force (3 each) and mass, all float64
BYTES_PER_PARTICLE = 10 * np.dtype(np.float64).itemsize
MIN_GROWTH = 8


def _vector3(value: ArrayLike, name: str) -> NDArray[np.floating]:
    vector = np.array(value, dtype=np.float64)
    if vector.shape != (3,):
        raise ValueError(f"{name} must have shape (3,), got {vector.shape}")
    return vector


@dataclass
class Particle:
    """
    Single point particle in 3D (SI units).

    Attributes:
        position: Position (m), shape (3,).
        velocity: Velocity (m/s), shape (3,).
        force: Force (N), shape (3,). Transient, recomputed every step.
        mass: Mass (kg), must be positive.
    """

    position: NDArray[np.floating] = field(default_factory=lambda: np.zeros(3))
    velocity: NDArray[np.floating] = field(default_factory=lambda: np.zeros(3))
    force: NDArray[np.floating] = field(default_factory=lambda: np.zeros(3))
    mass: float = 1.0

    def __post_init__(self) -> None:
        self.position = _vector3(self.position, "position")
        self.velocity = _vector3(self.velocity, "velocity")
        self.force = _vector3(self.force, "force")
        self.mass = float(self.mass)
        if not np.isfinite(self.mass) or self.mass <= 0.0:
            raise ValueError(f"mass must be positive and finite, got {self.mass}")


class ParticleSystem:
    """
    Ordered collection of particles with aggregate observables.

    Storage is a set of NumPy arrays obtained from a BoundedArena, so total
    memory is capped at construction. Growth that does not fit the budget
    raises ArenaExhaustedError and leaves the system untouched. Insertion order
    is preserved and indices are stable between additions.

    The array properties return views of the live data; in-place updates
    (``system.velocities *= scale``) write through.
    """

    def __init__(self, n: int = 0, max_bytes: int = DEFAULT_PARTICLE_BUDGET) -> None:
        """
        Initialize the particle system.

        Args:
            n: Number of default particles (unit mass, at rest at the origin).
            max_bytes: Upper memory limit for particle storage.
        """
        self._arena = BoundedArena(max_bytes)
        self._size = 0
        self._capacity = 0
        self._positions = np.zeros((0, 3))
        self._velocities = np.zeros((0, 3))
        self._forces = np.zeros((0, 3))
        self._masses = np.zeros(0)

        if n > 0:
            self.reserve(n)
            self._masses[:n] = 1.0
            self._size = n

    @classmethod
    def from_arrays(
        cls,
        positions: ArrayLike,
        masses: ArrayLike,
        velocities: ArrayLike | None = None,
        max_bytes: int = DEFAULT_PARTICLE_BUDGET,
    ) -> ParticleSystem:
        """
        Create a system from per-particle arrays.

        Args:
            positions: Positions, shape (N, 3).
            masses: Masses, shape (N,).
            velocities: Velocities, shape (N, 3). Defaults to zeros.
            max_bytes: Upper memory limit for particle storage.

        Returns:
            New ParticleSystem.
        """
        positions = np.asarray(positions, dtype=np.float64)
        masses = np.asarray(masses, dtype=np.float64)
        n_particles = len(masses)

        if positions.shape != (n_particles, 3):
            raise ValueError(
                f"positions shape {positions.shape} incompatible with "
                f"{n_particles} particles"
            )
        if velocities is None:
            velocities = np.zeros((n_particles, 3))
        velocities = np.asarray(velocities, dtype=np.float64)
        if velocities.shape != (n_particles, 3):
            raise ValueError(
                f"velocities shape {velocities.shape} incompatible with "
                f"{n_particles} particles"
            )
        if np.any(~np.isfinite(masses)) or np.any(masses <= 0.0):
            raise ValueError("masses must be positive and finite")

        system = cls(max_bytes=max_bytes)
        system.reserve(n_particles)
        system._positions[:n_particles] = positions
        system._velocities[:n_particles] = velocities
        system._masses[:n_particles] = masses
        system._size = n_particles
        return system

    def _grow(self, min_capacity: int, exact: bool = False) -> None:
        """Move storage to a larger block charged against the arena."""
        new_capacity = min_capacity
        if not exact:
            doubled = max(2 * self._capacity, MIN_GROWTH, min_capacity)
            if self._arena.can_allocate(doubled * BYTES_PER_PARTICLE):
                new_capacity = doubled

        needed = new_capacity * BYTES_PER_PARTICLE
        if not self._arena.can_allocate(needed):
            raise ArenaExhaustedError(
                needed, self._arena.used_bytes, self._arena.max_bytes
            )

        positions = self._arena.allocate((new_capacity, 3))
        velocities = self._arena.allocate((new_capacity, 3))
        forces = self._arena.allocate((new_capacity, 3))
        masses = self._arena.allocate(new_capacity)

        n = self._size
        positions[:n] = self._positions[:n]
        velocities[:n] = self._velocities[:n]
        forces[:n] = self._forces[:n]
        masses[:n] = self._masses[:n]

        for old in (self._positions, self._velocities, self._forces, self._masses):
            self._arena.release(old)

        self._positions = positions
        self._velocities = velocities
        self._forces = forces
        self._masses = masses
        self._capacity = new_capacity

    def reserve(self, n: int) -> None:
        """Reserve storage for at least n particles."""
        if n > self._capacity:
            self._grow(n, exact=True)

    def add_particle(self, particle: Particle) -> int:
        """
        Append a particle.

        Args:
            particle: Particle to copy into the system.

        Returns:
            Index of the new particle.

        Raises:
            ArenaExhaustedError: If growth would exceed the memory budget.
        """
        if self._size == self._capacity:
            self._grow(self._size + 1)
        i = self._size
        self._positions[i] = particle.position
        self._velocities[i] = particle.velocity
        self._forces[i] = particle.force
        self._masses[i] = particle.mass
        self._size += 1
        return i

    def clear(self) -> None:
        """Remove all particles, keeping reserved storage."""
        self._size = 0

    def copy(self) -> ParticleSystem:
        """Create an independent copy with the same memory budget."""
        return ParticleSystem.from_arrays(
            self.positions.copy(),
            self.masses.copy(),
            self.velocities.copy(),
            max_bytes=self._arena.max_bytes,
        )

    def __len__(self) -> int:
        return self._size

    def __getitem__(self, index: int) -> Particle:
        """Return a copy of particle ``index``."""
        if index < 0:
            index += self._size
        if not 0 <= index < self._size:
            raise IndexError(f"particle index {index} out of range")
        return Particle(
            position=self._positions[index].copy(),
            velocity=self._velocities[index].copy(),
            force=self._forces[index].copy(),
            mass=float(self._masses[index]),
        )

    @property
    def size(self) -> int:
        """Return number of particles."""
        return self._size

    @property
    def empty(self) -> bool:
        return self._size == 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def arena(self) -> BoundedArena:
        """Return the arena backing this system."""
        return self._arena

    @property
    def positions(self) -> NDArray[np.floating]:
        """Positions (m), shape (N, 3)."""
        return self._positions[: self._size]

    @positions.setter
    def positions(self, value: ArrayLike) -> None:
        self._positions[: self._size] = value

    @property
    def velocities(self) -> NDArray[np.floating]:
        """Velocities (m/s), shape (N, 3)."""
        return self._velocities[: self._size]

    @velocities.setter
    def velocities(self, value: ArrayLike) -> None:
        self._velocities[: self._size] = value

    @property
    def forces(self) -> NDArray[np.floating]:
        """Forces (N), shape (N, 3). Read-only view; use add_force to write."""
        view = self._forces[: self._size]
        view.flags.writeable = False
        return view

    @property
    def masses(self) -> NDArray[np.floating]:
        """Masses (kg), shape (N,)."""
        return self._masses[: self._size]

    def clear_forces(self) -> None:
        """Zero all forces. Call before every force evaluation."""
        self._forces[: self._size] = 0.0

    def add_force(self, indices: ArrayLike, forces: ArrayLike) -> None:
        """
        Accumulate forces onto particles.

        Repeated indices accumulate.

        Args:
            indices: Particle index or array of indices.
            forces: Force vector(s), shape (3,) or (len(indices), 3).
        """
        np.add.at(self._forces[: self._size], indices, forces)

    @property
    def total_mass(self) -> float:
        return float(np.sum(self.masses))

    @property
    def kinetic_energy(self) -> float:
        """Compute total kinetic energy sum(0.5 * m * v^2) in J."""
        return float(0.5 * np.sum(self.masses[:, np.newaxis] * self.velocities**2))

    @property
    def temperature(self) -> float:
        """
        Compute instantaneous temperature from kinetic energy (K).

        Uses T = 2 * KE / (N_dof * k_B) where N_dof = 3*N - 3.
        Returns 0 if N <= 1.
        """
        if self._size <= 1:
            return 0.0
        n_dof = 3 * self._size - 3  # Remove center of mass motion
        return 2.0 * self.kinetic_energy / (n_dof * K_BOLTZMANN)

    @property
    def center_of_mass(self) -> NDArray[np.floating]:
        """Compute center of mass position."""
        total_mass = self.total_mass
        if total_mass <= 0.0:
            return np.zeros(3)
        return np.sum(self.masses[:, np.newaxis] * self.positions, axis=0) / total_mass

    @property
    def center_of_mass_velocity(self) -> NDArray[np.floating]:
        """Compute center of mass velocity."""
        total_mass = self.total_mass
        if total_mass <= 0.0:
            return np.zeros(3)
        return (
            np.sum(self.masses[:, np.newaxis] * self.velocities, axis=0) / total_mass
        )

    def zero_com_velocity(self) -> None:
        """Subtract the mass-weighted mean velocity from every particle."""
        if self._size == 0:
            return
        self.velocities -= self.center_of_mass_velocity

    def apply_pbc(self, lattice: Lattice) -> None:
        """Wrap every position into the lattice's primary cell."""
        if self._size == 0:
            return
        self.positions = lattice.wrap_cartesian(self.positions)

    def thermalize(self, temperature: float, seed: int | None = None) -> None:
        """
        Assign Maxwell-Boltzmann velocities at the given temperature.

        Velocities are drawn per axis with sigma = sqrt(k_B*T/m), the net
        drift is removed and the result rescaled to hit ``temperature``
        exactly.

        Args:
            temperature: Target temperature (K).
            seed: Random seed for reproducibility.
        """
        if self._size == 0:
            return
        rng = np.random.default_rng(seed)
        sigma = np.sqrt(K_BOLTZMANN * temperature / self.masses)
        self.velocities = rng.standard_normal((self._size, 3)) * sigma[:, np.newaxis]
        self.zero_com_velocity()

        current = self.temperature
        if current > 0.0 and temperature > 0.0:
            self.velocities *= np.sqrt(temperature / current)

    def __repr__(self) -> str:
        return (
            f"ParticleSystem(n={self._size}, capacity={self._capacity}, "
            f"arena={self._arena!r})"
        )
