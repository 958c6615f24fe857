"""Helpers for constructing initial particle configurations."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from ..constants import DEFAULT_PARTICLE_BUDGET
from .lattice import Lattice
from .particles import ParticleSystem


def _sites_per_side(n_particles: int) -> int:
    """Smallest n_side with n_side**3 >= n_particles."""
    n_side = max(1, int(round(n_particles ** (1 / 3))))
    while n_side**3 < n_particles:
        n_side += 1
    return n_side


def cubic_lattice_positions(
    n_particles: int,
    spacing: float,
    jitter: float = 0.0,
    seed: int | None = None,
) -> NDArray[np.floating]:
    """
    Create positions on a simple-cubic grid with optional random displacements.

    Sites are filled in x-fastest order starting at half a spacing from the
    origin, so the grid sits centred inside a cubic cell of side
    ``ceil(n**(1/3)) * spacing``.

    Args:
        n_particles: Number of positions to generate.
        spacing: Distance between neighbouring sites (m).
        jitter: Half-width of the uniform displacement added per axis (m).
        seed: Random seed for the jitter.

    Returns:
        Positions array of shape (n_particles, 3).
    """
    n_side = _sites_per_side(n_particles)
    ix, iy, iz = np.meshgrid(
        np.arange(n_side), np.arange(n_side), np.arange(n_side), indexing="ij"
    )
    sites = np.stack([iz.ravel(), iy.ravel(), ix.ravel()], axis=1)[:n_particles]
    positions = (sites + 0.5) * spacing

    if jitter > 0.0:
        rng = np.random.default_rng(seed)
        positions = positions + rng.uniform(-jitter, jitter, positions.shape)
    return positions


def cubic_crystal(
    n_particles: int,
    spacing: float,
    mass: float,
    jitter: float = 0.0,
    seed: int | None = None,
    max_bytes: int = DEFAULT_PARTICLE_BUDGET,
) -> tuple[ParticleSystem, Lattice]:
    """
    Build a particle system on a simple-cubic grid and its enclosing cell.

    Args:
        n_particles: Number of particles.
        spacing: Grid spacing (m).
        mass: Mass of every particle (kg).
        jitter: Half-width of uniform positional noise (m).
        seed: Random seed for the jitter.
        max_bytes: Memory budget for the particle system.

    Returns:
        Tuple of (particle system at rest, cubic lattice).
    """
    positions = cubic_lattice_positions(n_particles, spacing, jitter, seed)
    n_side = _sites_per_side(n_particles)
    lattice = Lattice.cubic(n_side * spacing)
    system = ParticleSystem.from_arrays(
        lattice.wrap_cartesian(positions),
        np.full(n_particles, mass),
        max_bytes=max_bytes,
    )
    return system, lattice
