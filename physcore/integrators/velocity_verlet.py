"""Velocity Verlet and explicit Euler integrators."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from .base import Integrator

if TYPE_CHECKING:
    from ..system import ParticleSystem


class VelocityVerlet(Integrator):
    """
    Velocity Verlet integrator (kick-drift-kick formulation).

    The standard symplectic integrator for molecular dynamics with
    excellent energy conservation and exact time-reversibility.

    Algorithm:
        v(t + dt/2) = v(t) + 0.5 * dt * a(t)          # step1: first kick
        r(t + dt) = r(t) + dt * v(t + dt/2)           # step1: drift
        -- caller recomputes forces at r(t + dt) --
        v(t + dt) = v(t + dt/2) + 0.5 * dt * a(t+dt)  # step2: second kick

    Properties:
    - Symplectic: preserves phase space volume
    - Time-reversible
    - Second-order accurate in positions AND velocities
    """

    def step1(self, system: ParticleSystem) -> None:
        """First kick and drift, using forces at the current positions."""
        if system.empty:
            return
        accel = system.forces / system.masses[:, np.newaxis]
        system.velocities += 0.5 * self._dt * accel
        system.positions += self._dt * system.velocities

    def step2(self, system: ParticleSystem) -> None:
        """Second kick, using forces evaluated at the new positions."""
        if system.empty:
            return
        accel = system.forces / system.masses[:, np.newaxis]
        system.velocities += 0.5 * self._dt * accel


class EulerIntegrator(Integrator):
    """
    Explicit (semi-implicit) Euler integrator.

    Neither symplectic nor time-reversible; energy drifts quickly. Kept as a
    reference for comparison and testing, not for production runs.

    Algorithm:
        v(t + dt) = v(t) + dt * a(t)
        r(t + dt) = r(t) + dt * v(t + dt)
    """

    def step(self, system: ParticleSystem) -> None:
        """Perform one full Euler update with the stored forces."""
        if system.empty:
            return
        accel = system.forces / system.masses[:, np.newaxis]
        system.velocities += self._dt * accel
        system.positions += self._dt * system.velocities

    def step1(self, system: ParticleSystem) -> None:
        self.step(system)

    def step2(self, system: ParticleSystem) -> None:
        pass
