"""One-dimensional explicit heat diffusion."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from ..constants import DEFAULT_FIELD_BUDGET
from ..system import ArenaExhaustedError, BoundedArena
from .base import SimModel, is_non_negative, is_positive

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HeatDiffusionParams:
    """
    Parameters of a 1D heat diffusion run (SI units).

    Attributes:
        alpha: Thermal diffusivity (m^2/s).
        dx: Cell spacing (m).
        dt: Time step (s).
        end_time: Simulated duration (s).
        max_steps: Hard cap on the number of steps.
        n_cells: Number of cells including the two boundary cells.
        boundary_temperature: Fixed temperature of both end cells (K).
        initial_temperature: Initial temperature of the interior (K).
    """

    alpha: float = 1e-5
    dx: float = 1e-3
    dt: float = 1e-6
    end_time: float = 1e-3
    max_steps: int = 1_000_000
    n_cells: int = 100
    boundary_temperature: float = 0.0
    initial_temperature: float = 300.0

    @property
    def stability_limit(self) -> float:
        """Largest stable time step dx^2 / (2*alpha); 0 for invalid inputs."""
        if self.alpha <= 0.0 or self.dx <= 0.0:
            return 0.0
        return self.dx * self.dx / (2.0 * self.alpha)

    def validate(self) -> str | None:
        """Return None if the parameters are usable, otherwise a message."""
        if not is_positive(self.alpha):
            return "Thermal diffusivity alpha must be positive and finite."
        if not is_positive(self.dx):
            return "Grid spacing dx must be positive and finite."
        if not is_positive(self.dt):
            return "Time step dt must be positive and finite."
        if not is_non_negative(self.end_time):
            return "End time must be non-negative and finite."
        if self.max_steps <= 0:
            return "Maximum steps must be greater than 0."
        if self.n_cells < 2:
            return "Number of cells must be at least 2."
        if not is_non_negative(self.boundary_temperature):
            return "Boundary temperature must be non-negative and finite."
        if not is_non_negative(self.initial_temperature):
            return "Initial temperature must be non-negative and finite."
        limit = self.stability_limit
        if not math.isfinite(limit) or self.dt > limit:
            return "Time step dt exceeds stability limit (dt <= dx^2/(2*alpha))."
        return None


class HeatDiffusionModel(SimModel):
    """
    Explicit finite-difference solver for dT/dt = alpha * d2T/dx2.

    Forward Euler in time, centered differences in space, Dirichlet
    boundaries. Each step writes the new field into a secondary buffer and
    swaps, so a sweep never reads values it has already updated. Both
    buffers come from a BoundedArena.

    The run always honours ``end_time``: a model with ``end_time == 0`` is
    finished before its first step.

    Example:
        model = HeatDiffusionModel(HeatDiffusionParams(dt=4e-7, n_cells=50))
        while model.step():
            pass
    """

    def __init__(
        self, params: HeatDiffusionParams, max_bytes: int = DEFAULT_FIELD_BUDGET
    ) -> None:
        """
        Initialize the model and validate its parameters.

        Args:
            params: Run parameters.
            max_bytes: Memory budget for the field buffers.
        """
        super().__init__()
        self._params = params
        self._arena = BoundedArena(max_bytes)
        self._field: NDArray[np.floating] = np.zeros(0)
        self._next: NDArray[np.floating] = np.zeros(0)

        error = params.validate()
        if error is not None:
            logger.warning("Invalid heat diffusion parameters: %s", error)
            self._fail(error)
            return

        try:
            self._field = self._arena.allocate(params.n_cells)
            self._next = self._arena.allocate(params.n_cells)
        except ArenaExhaustedError as exc:
            logger.warning("Heat diffusion field does not fit budget: %s", exc)
            self._fail(f"Temperature field exceeds memory budget: {exc}")
            return

        self._initialize()
        self._valid = True

    def _initialize(self) -> None:
        self._field[:] = self._params.initial_temperature
        self._field[0] = self._params.boundary_temperature
        self._field[-1] = self._params.boundary_temperature
        self._next[:] = self._field

    @property
    def params(self) -> HeatDiffusionParams:
        return self._params

    @property
    def n_cells(self) -> int:
        return self._params.n_cells

    @property
    def temperature(self) -> NDArray[np.floating]:
        """Current temperature field (K), read-only view of shape (n_cells,)."""
        view = self._field.view()
        view.flags.writeable = False
        return view

    def snapshot(self) -> NDArray[np.floating]:
        """Return a copy of the current temperature field."""
        return self._field.copy()

    @property
    def temperature_bounds(self) -> tuple[float, float]:
        """Fixed (cold, hot) colour-scale bounds for this run."""
        low = min(self._params.boundary_temperature, self._params.initial_temperature)
        high = max(self._params.boundary_temperature, self._params.initial_temperature)
        return low, high

    @property
    def finished(self) -> bool:
        if not self._valid:
            return True
        if self._step_count >= self._params.max_steps:
            return True
        return self._time >= self._params.end_time - 0.5 * self._params.dt

    def step(self) -> bool:
        if self.finished:
            return False

        params = self._params
        r = params.alpha * params.dt / (params.dx * params.dx)
        current, new = self._field, self._next

        new[1:-1] = current[1:-1] + r * (
            current[:-2] - 2.0 * current[1:-1] + current[2:]
        )
        new[0] = params.boundary_temperature
        new[-1] = params.boundary_temperature
        self._field, self._next = new, current

        self._time += params.dt
        self._step_count += 1

        if not math.isfinite(self._time):
            logger.error(
                "Heat diffusion time became non-finite at step %d", self._step_count
            )
            self._fail("Time became non-finite.")
            return False
        if not np.all(np.isfinite(self._field)):
            logger.error(
                "Heat diffusion field became non-finite at step %d", self._step_count
            )
            self._fail("Temperature field became non-finite.")
            return False
        return True

    def __repr__(self) -> str:
        return (
            f"HeatDiffusionModel(n_cells={self._params.n_cells}, "
            f"time={self._time:.3e}, steps={self._step_count}, valid={self._valid})"
        )
