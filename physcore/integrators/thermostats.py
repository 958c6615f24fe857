"""Thermostat implementations."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from ..constants import K_BOLTZMANN
from .base import Thermostat

if TYPE_CHECKING:
    from ..system import ParticleSystem


class VelocityRescaleThermostat(Thermostat):
    """
    Berendsen weak-coupling velocity rescaling.

    Scales all velocities by lambda with

        lambda^2 = 1 + (dt/tau) * (T_target/T - 1)

    so the temperature relaxes toward the target with time constant tau.
    Does not sample the canonical ensemble; use for equilibration only.

    Attributes:
        tau: Coupling time constant (s).
    """

    def __init__(self, target_temperature: float, tau: float) -> None:
        """
        Initialize velocity rescaling thermostat.

        Args:
            target_temperature: Target temperature (K).
            tau: Relaxation time (s); smaller means stronger coupling.
        """
        if tau <= 0.0:
            raise ValueError(f"tau must be positive, got {tau}")
        self._temperature = float(target_temperature)
        self.tau = float(tau)

    @property
    def target_temperature(self) -> float:
        return self._temperature

    @target_temperature.setter
    def target_temperature(self, value: float) -> None:
        self._temperature = float(value)

    def scaling_factor(self, current_temperature: float, dt: float) -> float | None:
        """Return lambda, or None when rescaling must be skipped."""
        if current_temperature <= 0.0 or self._temperature <= 0.0:
            return None
        scale_sq = 1.0 + (dt / self.tau) * (
            self._temperature / current_temperature - 1.0
        )
        if scale_sq <= 0.0:
            return None
        return float(np.sqrt(scale_sq))

    def apply(self, system: ParticleSystem, dt: float) -> None:
        scale = self.scaling_factor(system.temperature, dt)
        if scale is None:
            return
        system.velocities *= scale


class AndersenThermostat(Thermostat):
    """
    Andersen stochastic collision thermostat.

    Each particle independently collides with the heat bath with probability
    1 - exp(-nu * dt) per step and, on collision, receives a fresh velocity
    from the Maxwell-Boltzmann distribution. Samples the canonical ensemble
    but disrupts dynamics (unsuitable for transport properties).

    A seed of 0 draws entropy from the operating system, so trajectories are
    not reproducible; pass a nonzero seed for deterministic runs.

    Attributes:
        collision_frequency: Average collision rate nu (1/s).
    """

    def __init__(
        self,
        target_temperature: float,
        collision_frequency: float,
        seed: int = 0,
    ) -> None:
        """
        Initialize Andersen thermostat.

        Args:
            target_temperature: Target temperature (K).
            collision_frequency: Collision frequency nu (1/s).
            seed: Random seed; 0 means seed from system entropy.
        """
        self._temperature = float(target_temperature)
        self.collision_frequency = float(collision_frequency)
        self.seed = seed
        self._rng = np.random.default_rng(seed if seed != 0 else None)

    @property
    def target_temperature(self) -> float:
        return self._temperature

    @target_temperature.setter
    def target_temperature(self, value: float) -> None:
        self._temperature = float(value)

    def collision_probability(self, dt: float) -> float:
        """Return the per-particle collision probability for one step."""
        return float(1.0 - np.exp(-self.collision_frequency * dt))

    def apply(self, system: ParticleSystem, dt: float) -> None:
        n_particles = len(system)
        if n_particles == 0:
            return

        collide = self._rng.random(n_particles) < self.collision_probability(dt)
        if not np.any(collide):
            return

        # sigma_v = sqrt(kT/m) for each component
        sigma = np.sqrt(K_BOLTZMANN * self._temperature / system.masses[collide])
        new_velocities = (
            self._rng.standard_normal((int(np.sum(collide)), 3))
            * sigma[:, np.newaxis]
        )
        system.velocities[collide] = new_velocities


class NullThermostat(Thermostat):
    """No-op thermostat: constant-energy (NVE) dynamics."""

    @property
    def target_temperature(self) -> float:
        return 0.0

    @target_temperature.setter
    def target_temperature(self, value: float) -> None:
        pass

    def apply(self, system: ParticleSystem, dt: float) -> None:
        pass
