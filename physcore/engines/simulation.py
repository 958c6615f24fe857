"""Simulation front-end dispatching to one owned model."""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING, Union

import numpy as np
from numpy.typing import NDArray

from ..models import (
    HeatDiffusion2DModel,
    HeatDiffusion2DParams,
    HeatDiffusionModel,
    HeatDiffusionParams,
    MolecularDynamicsModel,
    SimulationParams,
)

if TYPE_CHECKING:
    from ..integrators import Integrator, Thermostat
    from ..potentials import Potential
    from ..system import Lattice, ParticleSystem

logger = logging.getLogger(__name__)

HeatModel = Union[HeatDiffusionModel, HeatDiffusion2DModel]
Params = Union[SimulationParams, HeatDiffusionParams, HeatDiffusion2DParams]


class SimMode(Enum):
    """Kind of model a Simulation owns; fixed at construction."""

    MD = "md"
    HEAT_DIFFUSION = "heat_diffusion"
    HEAT_DIFFUSION_2D = "heat_diffusion_2d"


class SimState(Enum):
    """
    Lifecycle state.

    INVALID: Construction or validation failed (terminal).
    READY: Valid, no step taken yet.
    STEPPING: At least one step taken, not finished.
    FINISHED: Normal completion or runtime failure (terminal).
    """

    INVALID = "invalid"
    READY = "ready"
    STEPPING = "stepping"
    FINISHED = "finished"


class SimulationModeError(RuntimeError):
    """Raised when a mode-specific operation is used in another mode."""


class Simulation:
    """
    Single entry point for stepping any supported model.

    The mode is chosen from the parameter type and never changes:
    SimulationParams gives molecular dynamics, HeatDiffusionParams the 1D
    heat solver and HeatDiffusion2DParams the 2D heat solver. Time, step
    count, termination and error reporting are delegated to the owned model.

    Expected failures never raise from ``step``; check ``is_valid`` and
    ``error_message``. Using an MD-only operation on a heat simulation (or
    vice versa) raises SimulationModeError.

    Example usage:
        sim = Simulation(SimulationParams(end_time=1e-12), LennardJones.argon())
        sim.system.add_particle(Particle(position=[0, 0, 0], mass=6.6e-26))
        sim.run()

    Not thread-safe; callers must not step one instance from several threads.
    """

    def __init__(
        self,
        params: Params,
        potential: Potential | None = None,
        system: ParticleSystem | None = None,
    ) -> None:
        """
        Initialize the simulation.

        Args:
            params: Parameter struct selecting the mode.
            potential: Pair potential (molecular dynamics only).
            system: Particle system to evolve (molecular dynamics only).
        """
        self._model: MolecularDynamicsModel | HeatModel
        self._step_callback: Callable[[Simulation], None] | None = None
        self._started = False

        if isinstance(params, SimulationParams):
            self._mode = SimMode.MD
            self._model = MolecularDynamicsModel(params, potential, system)
        else:
            if potential is not None or system is not None:
                raise ValueError(
                    "potential and system apply to molecular dynamics only"
                )
            if isinstance(params, HeatDiffusionParams):
                self._mode = SimMode.HEAT_DIFFUSION
                self._model = HeatDiffusionModel(params)
            elif isinstance(params, HeatDiffusion2DParams):
                self._mode = SimMode.HEAT_DIFFUSION_2D
                self._model = HeatDiffusion2DModel(params)
            else:
                raise TypeError(
                    f"unsupported parameter type {type(params).__name__}"
                )

        logger.debug("Created %s simulation: %r", self._mode.value, self._model)

    # -- common surface ----------------------------------------------------

    @property
    def mode(self) -> SimMode:
        return self._mode

    @property
    def params(self) -> Params:
        return self._model.params

    @property
    def model(self) -> MolecularDynamicsModel | HeatModel:
        """Return the owned model."""
        return self._model

    @property
    def state(self) -> SimState:
        """Return the lifecycle state."""
        if not self._model.is_valid:
            return SimState.FINISHED if self._started else SimState.INVALID
        if self._model.finished:
            return SimState.FINISHED
        if self._started:
            return SimState.STEPPING
        return SimState.READY

    @property
    def is_valid(self) -> bool:
        return self._model.is_valid

    @property
    def error_message(self) -> str:
        return self._model.error_message

    @property
    def time(self) -> float:
        """Return simulated time (s)."""
        return self._model.time

    @property
    def step_count(self) -> int:
        return self._model.step_count

    @property
    def finished(self) -> bool:
        return self._model.finished

    def step(self) -> bool:
        """
        Advance by one time step.

        Returns:
            True if a step was taken. False once finished, after a runtime
            failure, or for an invalid simulation; all of these are terminal.
        """
        if self._model.is_valid and not self._model.finished:
            self._started = True
        return self._model.step()

    def run(self) -> int:
        """
        Step until finished.

        Returns:
            Number of steps taken by this call.
        """
        taken = 0
        while self.step():
            taken += 1

        if self.is_valid:
            logger.info(
                "Simulation finished after %d steps (t=%.3e s)",
                self.step_count,
                self.time,
            )
        else:
            logger.warning("Simulation stopped: %s", self.error_message)
        return taken

    # -- molecular dynamics --------------------------------------------------

    def _md(self, operation: str) -> MolecularDynamicsModel:
        if not isinstance(self._model, MolecularDynamicsModel):
            raise SimulationModeError(
                f"{operation} requires molecular dynamics mode, "
                f"simulation is in {self._mode.value} mode"
            )
        return self._model

    def set_lattice(self, lattice: Lattice | None) -> bool:
        """
        Set the periodic lattice.

        An invalid lattice is a terminal validation failure.

        Returns:
            True if the lattice was accepted.
        """
        return self._md("set_lattice").set_lattice(lattice)

    def set_potential(self, potential: Potential) -> None:
        self._md("set_potential").set_potential(potential)

    def set_thermostat(self, thermostat: Thermostat | None) -> None:
        self._md("set_thermostat").set_thermostat(thermostat)

    def set_integrator(self, integrator: Integrator) -> None:
        self._md("set_integrator").set_integrator(integrator)

    def set_step_callback(self, callback: Callable[[Simulation], None] | None) -> None:
        """
        Set an observer called with this simulation after each MD step.

        The callback must treat the simulation as read-only.
        """
        model = self._md("set_step_callback")
        self._step_callback = callback
        if callback is None:
            model.set_step_callback(None)
        else:
            model.set_step_callback(lambda _model: callback(self))

    def thermalize(self, seed: int | None = None) -> None:
        """Assign Maxwell-Boltzmann velocities at the configured temperature."""
        self._md("thermalize").thermalize(seed=seed)

    @property
    def system(self) -> ParticleSystem:
        return self._md("system").system

    @property
    def lattice(self) -> Lattice | None:
        return self._md("lattice").lattice

    @property
    def has_lattice(self) -> bool:
        return self._md("has_lattice").has_lattice

    @property
    def potential(self) -> Potential | None:
        return self._md("potential").potential

    @property
    def thermostat(self) -> Thermostat | None:
        return self._md("thermostat").thermostat

    @property
    def integrator(self) -> Integrator:
        return self._md("integrator").integrator

    @property
    def kinetic_energy(self) -> float:
        return self._md("kinetic_energy").kinetic_energy

    @property
    def potential_energy(self) -> float:
        """Return potential energy from the last force evaluation."""
        return self._md("potential_energy").potential_energy

    @property
    def total_energy(self) -> float:
        return self._md("total_energy").total_energy

    @property
    def temperature(self) -> float:
        """Return instantaneous kinetic temperature (K)."""
        return self._md("temperature").temperature

    def compute_potential_energy(self) -> float:
        """Evaluate the potential energy at the current positions."""
        return self._md("compute_potential_energy").compute_potential_energy()

    # -- heat diffusion ------------------------------------------------------

    def _heat(self, operation: str) -> HeatModel:
        if isinstance(self._model, MolecularDynamicsModel):
            raise SimulationModeError(
                f"{operation} requires a heat diffusion mode, "
                f"simulation is in {self._mode.value} mode"
            )
        return self._model

    @property
    def heat_model(self) -> HeatModel:
        return self._heat("heat_model")

    def temperature_field(self) -> NDArray[np.floating]:
        """Return a copy of the temperature field (K)."""
        return self._heat("temperature_field").snapshot()

    @property
    def grid_shape(self) -> tuple[int, int]:
        """Return (nx, ny); a 1D grid reports ny = 1."""
        model = self._heat("grid_shape")
        if isinstance(model, HeatDiffusion2DModel):
            return model.grid_shape
        return model.n_cells, 1

    @property
    def temperature_bounds(self) -> tuple[float, float]:
        """Return fixed (cold, hot) colour-scale bounds."""
        return self._heat("temperature_bounds").temperature_bounds

    def __repr__(self) -> str:
        return (
            f"Simulation(mode={self._mode.value}, state={self.state.value}, "
            f"time={self.time:.3e}, steps={self.step_count})"
        )
