"""Classical molecular dynamics model."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from ..forcefields import ForceField, NeighborForceField
from ..integrators import VelocityVerlet, validate_dt
from ..system import ParticleSystem
from .base import SimModel, is_non_negative, is_positive

if TYPE_CHECKING:
    from ..forcefields import PairForceProvider
    from ..integrators import Integrator, Thermostat
    from ..potentials import Potential
    from ..system import Lattice

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationParams:
    """
    Parameters of a molecular dynamics run (SI units).

    Attributes:
        dt: Time step (s).
        dx: Spatial resolution hint (m); unused by the integrator.
        end_time: Simulated duration (s); 0 means run until max_steps.
        max_steps: Hard cap on the number of steps.
        temperature: Reference temperature for thermalization (K).
        cutoff: Neighbor list cutoff (m).
        use_neighbor_list: Use a Verlet list instead of all pairs.
        neighbor_skin: Verlet list skin (m).
        zero_com_velocity: Remove centre-of-mass drift before the first step.
    """

    dt: float = 1e-15
    dx: float = 1e-9
    end_time: float = 0.0
    max_steps: int = 10_000_000
    temperature: float = 300.0
    cutoff: float = 1e-9
    use_neighbor_list: bool = True
    neighbor_skin: float = 0.2e-9
    zero_com_velocity: bool = True

    def validate(self) -> str | None:
        """Return None if the parameters are usable, otherwise a message."""
        if not is_positive(self.dt):
            return "Time step 'dt' must be positive and finite."
        if not is_non_negative(self.end_time):
            return "End time must be non-negative and finite."
        if self.max_steps <= 0:
            return "Maximum steps must be greater than 0."
        if not is_non_negative(self.temperature):
            return "Temperature must be non-negative and finite."
        if not is_positive(self.cutoff):
            return "Force cutoff must be positive and finite."
        if not is_non_negative(self.neighbor_skin):
            return "Neighbor skin must be non-negative and finite."
        if self.end_time > 0.0 and self.dt > self.end_time:
            return "Time step cannot be greater than end time."
        return None


class MolecularDynamicsModel(SimModel):
    """
    Molecular dynamics stack: particles, optional lattice, integrator,
    pair force evaluator and optional thermostat.

    Each step follows the protocol
    step1 -> periodic wrap -> forces -> step2 -> thermostat -> counters
    -> callback. The first step also removes centre-of-mass drift (if
    enabled) and evaluates initial forces so the first half-kick sees real
    forces.

    Example usage:
        model = MolecularDynamicsModel(
            SimulationParams(dt=2e-15, end_time=1e-12),
            potential=LennardJones.argon(),
            system=system,
        )
        model.set_lattice(lattice)
        model.run()

    Attributes:
        params: Run parameters.
    """

    def __init__(
        self,
        params: SimulationParams,
        potential: Potential | None = None,
        system: ParticleSystem | None = None,
    ) -> None:
        """
        Initialize the model and validate its parameters.

        Args:
            params: Run parameters.
            potential: Optional pair potential; without one, forces are zero.
            system: Particle system to evolve. Defaults to an empty system.
        """
        super().__init__()
        self.params = params
        self._system = system if system is not None else ParticleSystem()
        self._lattice: Lattice | None = None
        self._force_field: PairForceProvider | None = None
        self._thermostat: Thermostat | None = None
        self._step_callback: Callable[[MolecularDynamicsModel], None] | None = None
        self._integrator: Integrator = VelocityVerlet(params.dt)
        self._potential_energy = 0.0
        self._initialized = False

        error = params.validate()
        if error is not None:
            logger.warning("Invalid simulation parameters: %s", error)
            self._fail(error)
            return

        if potential is not None:
            self.set_potential(potential)
        self._valid = True

    # -- configuration --------------------------------------------------

    @property
    def system(self) -> ParticleSystem:
        return self._system

    @property
    def lattice(self) -> Lattice | None:
        return self._lattice

    @property
    def has_lattice(self) -> bool:
        return self._lattice is not None

    def set_lattice(self, lattice: Lattice | None) -> bool:
        """
        Set (or remove) the periodic lattice.

        An invalid lattice marks the model invalid; the failure is terminal.

        Returns:
            True if the lattice was accepted.
        """
        if lattice is not None:
            error = lattice.validate()
            if error is not None:
                logger.warning("Rejected lattice: %s", error)
                self._fail(f"Invalid lattice: {error}")
                return False
        self._lattice = lattice
        return True

    @property
    def potential(self) -> Potential | None:
        if self._force_field is None:
            return None
        return self._force_field.potential

    @property
    def force_field(self) -> PairForceProvider | None:
        """Return the active pair force evaluator."""
        return self._force_field

    def set_potential(self, potential: Potential) -> None:
        """
        Install a pair potential, choosing the evaluator from the parameters.

        Forces are re-evaluated immediately if stepping has already begun.
        """
        if self.params.use_neighbor_list:
            cutoff = max(self.params.cutoff, potential.cutoff)
            self._force_field = NeighborForceField(
                potential, self.params.neighbor_skin, cutoff=cutoff
            )
        else:
            self._force_field = ForceField(potential)

        if self._initialized:
            self.compute_forces()

    @property
    def integrator(self) -> Integrator:
        return self._integrator

    def set_integrator(self, integrator: Integrator) -> None:
        self._integrator = integrator

    @property
    def thermostat(self) -> Thermostat | None:
        return self._thermostat

    def set_thermostat(self, thermostat: Thermostat | None) -> None:
        self._thermostat = thermostat

    def set_step_callback(
        self, callback: Callable[[MolecularDynamicsModel], None] | None
    ) -> None:
        """Set a hook called after every successful step."""
        self._step_callback = callback

    def thermalize(self, seed: int | None = None) -> None:
        """Draw Maxwell-Boltzmann velocities at ``params.temperature``."""
        self._system.thermalize(self.params.temperature, seed=seed)

    # -- observables -----------------------------------------------------

    @property
    def kinetic_energy(self) -> float:
        return self._system.kinetic_energy

    @property
    def potential_energy(self) -> float:
        """Return potential energy from the last force evaluation."""
        return self._potential_energy

    @property
    def total_energy(self) -> float:
        return self.kinetic_energy + self._potential_energy

    @property
    def temperature(self) -> float:
        return self._system.temperature

    def compute_potential_energy(self) -> float:
        """Evaluate the potential energy at the current positions."""
        if self._force_field is None:
            return 0.0
        return self._force_field.compute_energy(self._system, self._lattice)

    # -- stepping --------------------------------------------------------

    def compute_forces(self) -> float:
        """Recompute forces and cache the potential energy."""
        if self._force_field is None:
            self._system.clear_forces()
            self._potential_energy = 0.0
        else:
            self._potential_energy = self._force_field.compute_forces(
                self._system, self._lattice
            )
        return self._potential_energy

    def initialize(self) -> None:
        """Prepare for the first step; called automatically by step()."""
        if not self._system.empty:
            if self.params.zero_com_velocity:
                self._system.zero_com_velocity()
            validate_dt(self._integrator.timestep, self._system)
        self.compute_forces()
        self._initialized = True

    @property
    def finished(self) -> bool:
        if not self._valid:
            return True
        if self._step_count >= self.params.max_steps:
            return True
        end_time = self.params.end_time
        dt = self._integrator.timestep
        return end_time > 0.0 and self._time >= end_time - 0.5 * dt

    def step(self) -> bool:
        """
        Advance the particles by one time step.

        The step that reaches ``end_time`` (within half a time step) snaps
        the clock to exactly ``end_time``, runs the step callback and
        returns True. Every later call returns False without stepping.

        Returns:
            True if a step was taken, False if the run is finished or the
            step failed.
        """
        if self.finished:
            return False
        if not self._initialized:
            self.initialize()

        system = self._system
        dt = self._integrator.timestep

        self._integrator.step1(system)
        if self._lattice is not None:
            system.apply_pbc(self._lattice)
        self.compute_forces()
        self._integrator.step2(system)
        if self._thermostat is not None:
            self._thermostat.apply(system, dt)

        self._time += dt
        self._step_count += 1

        if not math.isfinite(self._time):
            logger.error("Time became non-finite at step %d", self._step_count)
            self._fail("Time value became non-finite")
            return False
        if not (
            np.all(np.isfinite(system.positions))
            and np.all(np.isfinite(system.velocities))
        ):
            logger.error(
                "Particle state became non-finite at step %d", self._step_count
            )
            self._fail("Particle state became non-finite")
            return False

        end_time = self.params.end_time
        if end_time > 0.0 and self._time >= end_time - 0.5 * dt:
            self._time = end_time

        if self._step_callback is not None:
            self._step_callback(self)
        return True

    def __repr__(self) -> str:
        return (
            f"MolecularDynamicsModel(n={len(self._system)}, time={self._time:.3e}, "
            f"steps={self._step_count}, valid={self._valid})"
        )
