"""Time step stability heuristics for molecular dynamics."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from ..constants import ANGSTROM

if TYPE_CHECKING:
    from ..system import ParticleSystem

logger = logging.getLogger(__name__)

# Fallback when the system is (nearly) at rest: ~10 fs, typical for atomic masses.
DEFAULT_CHARACTERISTIC_TIME = 1e-14
REST_SPEED_THRESHOLD = 1e-10


def estimate_characteristic_time(system: ParticleSystem) -> float:
    """
    Estimate the shortest characteristic timescale of the system.

    Uses the time the fastest particle needs to cross one typical interatomic
    spacing (1 Angstrom). Falls back to a femtosecond-scale default when all
    particles are essentially at rest.

    Args:
        system: Particle system.

    Returns:
        Characteristic time (s); 1.0 for an empty system.
    """
    if system.empty:
        return 1.0

    masses = system.masses
    movable = masses > 0.0
    if not np.any(movable):
        return 1.0

    speeds = np.linalg.norm(system.velocities[movable], axis=1)
    max_speed = float(np.max(speeds))
    if max_speed < REST_SPEED_THRESHOLD:
        return DEFAULT_CHARACTERISTIC_TIME
    return ANGSTROM / max_speed


def is_stable(dt: float, system: ParticleSystem) -> bool:
    """Check whether dt is comfortably below the characteristic time (tau/10)."""
    return dt < estimate_characteristic_time(system) / 10.0


def recommended_max_dt(system: ParticleSystem) -> float:
    """Return the recommended maximum time step (tau/20)."""
    return estimate_characteristic_time(system) / 20.0


def validate_dt(dt: float, system: ParticleSystem, warn: bool = True) -> bool:
    """
    Check a time step and optionally log a warning if it looks too large.

    Args:
        dt: Proposed time step (s).
        system: Particle system.
        warn: Whether to log a warning for an unstable step.

    Returns:
        True if the time step passes the stability heuristic.
    """
    tau = estimate_characteristic_time(system)
    stable = dt < tau / 10.0
    if not stable and warn:
        logger.warning(
            "Time step %.3e s may be too large (characteristic time %.3e s, "
            "recommended max %.3e s)",
            dt,
            tau,
            tau / 20.0,
        )
    return stable
