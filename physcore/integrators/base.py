"""Base interfaces for integrators and thermostats."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..system import ParticleSystem


class Integrator(ABC):
    """
    Abstract base class for time integration algorithms.

    Integrators advance particle kinematics in place using the forces stored
    on the system. Stepping is split in two phases around a force
    evaluation: ``step1`` runs before forces are recomputed at the new
    positions, ``step2`` after. Single-phase schemes do all their work in
    ``step1``.
    """

    def __init__(self, dt: float) -> None:
        """
        Initialize the integrator.

        Args:
            dt: Integration timestep (s).
        """
        self.set_dt(dt)

    @property
    def timestep(self) -> float:
        """Return the integration timestep."""
        return self._dt

    def set_dt(self, dt: float) -> None:
        """Change the integration timestep."""
        self._dt = float(dt)

    @abstractmethod
    def step1(self, system: ParticleSystem) -> None:
        """Phase run before forces are recomputed."""
        ...

    @abstractmethod
    def step2(self, system: ParticleSystem) -> None:
        """Phase run after forces are recomputed at the new positions."""
        ...

    def integrate(
        self,
        system: ParticleSystem,
        compute_forces: Callable[[ParticleSystem], object],
    ) -> None:
        """
        Perform one complete step.

        Args:
            system: Particle system, advanced in place.
            compute_forces: Callback that writes forces at the current
                positions into ``system``.
        """
        self.step1(system)
        system.clear_forces()
        compute_forces(system)
        self.step2(system)


class Thermostat(ABC):
    """
    Abstract base class for thermostats.

    Thermostats modify velocities in place after each integration step to
    steer the system toward a target temperature.
    """

    @abstractmethod
    def apply(self, system: ParticleSystem, dt: float) -> None:
        """
        Apply the thermostat.

        Args:
            system: Particle system, velocities modified in place.
            dt: Timestep just taken (s).
        """
        ...

    @property
    @abstractmethod
    def target_temperature(self) -> float:
        """Return target temperature (K)."""
        ...

    @target_temperature.setter
    @abstractmethod
    def target_temperature(self, value: float) -> None:
        ...
