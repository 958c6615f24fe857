"""Two-dimensional explicit heat diffusion on a rectangular grid."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum

import numpy as np
from numpy.typing import NDArray

from ..constants import DEFAULT_FIELD_BUDGET
from ..system import ArenaExhaustedError, BoundedArena
from .base import SimModel, is_non_negative, is_positive

logger = logging.getLogger(__name__)


class HeatIC2D(Enum):
    """
    Initial condition presets.

    HOT_CENTER: Gaussian hot spot at the domain centre decaying to the
        boundary temperature.
    UNIFORM_HOT: Whole interior at the hot temperature.
    """

    HOT_CENTER = "hot_center"
    UNIFORM_HOT = "uniform_hot"


@dataclass(frozen=True)
class HeatDiffusion2DParams:
    """
    Parameters of a 2D heat diffusion run (SI units).

    Defaults describe an 80x80 aluminium-like plate (10 cm side) with a hot
    spot in the middle, running until ``max_steps``.

    Attributes:
        alpha: Thermal diffusivity (m^2/s).
        dx: Grid spacing, equal along x and y (m).
        dt: Time step (s).
        end_time: Simulated duration (s); 0 means run until max_steps.
        max_steps: Hard cap on the number of steps.
        nx: Number of columns including boundary cells.
        ny: Number of rows including boundary cells.
        boundary_temperature: Dirichlet edge temperature (K).
        initial_condition: Initial field preset.
        hot_temperature: Peak initial temperature (K).
        hot_radius_frac: Gaussian sigma as a fraction of the domain width.
    """

    alpha: float = 1.11e-4
    dx: float = 1.25e-3
    dt: float = 3e-3
    end_time: float = 0.0
    max_steps: int = 10_000_000
    nx: int = 80
    ny: int = 80
    boundary_temperature: float = 300.0
    initial_condition: HeatIC2D = HeatIC2D.HOT_CENTER
    hot_temperature: float = 1200.0
    hot_radius_frac: float = 0.12

    @property
    def stability_limit(self) -> float:
        """Largest stable time step dx^2 / (4*alpha); 0 for invalid inputs."""
        if self.alpha <= 0.0 or self.dx <= 0.0:
            return 0.0
        return self.dx * self.dx / (4.0 * self.alpha)

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
        if self.nx < 3:
            return "Grid dimension nx must be at least 3 (need interior cells)."
        if self.ny < 3:
            return "Grid dimension ny must be at least 3 (need interior cells)."
        if not is_non_negative(self.boundary_temperature):
            return "Boundary temperature must be non-negative and finite."
        if (
            not math.isfinite(self.hot_temperature)
            or self.hot_temperature <= self.boundary_temperature
        ):
            return (
                "Hot temperature must be finite and greater than boundary "
                "temperature."
            )
        if self.initial_condition is HeatIC2D.HOT_CENTER and not is_positive(
            self.hot_radius_frac
        ):
            return "Hot radius fraction must be positive and finite."
        limit = self.stability_limit
        if not math.isfinite(limit) or self.dt > limit:
            return (
                "Time step dt exceeds 2D stability limit: dt <= dx^2 / (4*alpha). "
                "Reduce dt or increase dx."
            )
        return None


class HeatDiffusion2DModel(SimModel):
    """
    Explicit 5-point-stencil solver for dT/dt = alpha * laplacian(T).

    The field is stored row-major with shape (ny, nx): row j is the y index,
    column i the x index. All four edges are held at the boundary
    temperature. New values are computed into a secondary buffer, edges are
    re-applied, then the buffers are swapped.

    With ``end_time == 0`` the model runs until ``max_steps`` (continuous
    mode).
    """

    def __init__(
        self, params: HeatDiffusion2DParams, max_bytes: int = DEFAULT_FIELD_BUDGET
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
        self._field: NDArray[np.floating] = np.zeros((0, 0))
        self._next: NDArray[np.floating] = np.zeros((0, 0))

        error = params.validate()
        if error is not None:
            logger.warning("Invalid 2D heat diffusion parameters: %s", error)
            self._fail(error)
            return

        shape = (params.ny, params.nx)
        try:
            self._field = self._arena.allocate(shape)
            self._next = self._arena.allocate(shape)
        except ArenaExhaustedError as exc:
            logger.warning("2D heat diffusion field does not fit budget: %s", exc)
            self._fail(f"Temperature field exceeds memory budget: {exc}")
            return

        self._initialize()
        self._valid = True

    def _initialize(self) -> None:
        params = self._params
        if params.initial_condition is HeatIC2D.HOT_CENTER:
            # Fractional cell-centre coordinates relative to the domain centre
            fx = (np.arange(params.nx) + 0.5) / params.nx - 0.5
            fy = (np.arange(params.ny) + 0.5) / params.ny - 0.5
            r2 = fy[:, np.newaxis] ** 2 + fx[np.newaxis, :] ** 2
            sigma = params.hot_radius_frac
            delta = params.hot_temperature - params.boundary_temperature
            self._field[:] = params.boundary_temperature + delta * np.exp(
                -r2 / (2.0 * sigma * sigma)
            )
        else:
            self._field[:] = params.hot_temperature

        self._apply_boundary(self._field)
        self._next[:] = self._field

    def _apply_boundary(self, field: NDArray[np.floating]) -> None:
        tb = self._params.boundary_temperature
        field[0, :] = tb
        field[-1, :] = tb
        field[:, 0] = tb
        field[:, -1] = tb

    @property
    def params(self) -> HeatDiffusion2DParams:
        return self._params

    @property
    def nx(self) -> int:
        return self._params.nx

    @property
    def ny(self) -> int:
        return self._params.ny

    @property
    def grid_shape(self) -> tuple[int, int]:
        """Return (nx, ny)."""
        return self._params.nx, self._params.ny

    @property
    def temperature(self) -> NDArray[np.floating]:
        """Current temperature field (K), read-only view of shape (ny, nx)."""
        view = self._field.view()
        view.flags.writeable = False
        return view

    def snapshot(self) -> NDArray[np.floating]:
        """Return a copy of the current temperature field."""
        return self._field.copy()

    @property
    def temperature_bounds(self) -> tuple[float, float]:
        """Fixed (cold, hot) colour-scale bounds for consistent rendering."""
        return self._params.boundary_temperature, self._params.hot_temperature

    @property
    def finished(self) -> bool:
        if not self._valid:
            return True
        if self._step_count >= self._params.max_steps:
            return True
        end_time = self._params.end_time
        return end_time > 0.0 and self._time >= end_time - 0.5 * self._params.dt

    def step(self) -> bool:
        if self.finished:
            return False

        params = self._params
        r = params.alpha * params.dt / (params.dx * params.dx)
        t, new = self._field, self._next

        new[1:-1, 1:-1] = t[1:-1, 1:-1] + r * (
            t[1:-1, :-2]
            + t[1:-1, 2:]
            + t[:-2, 1:-1]
            + t[2:, 1:-1]
            - 4.0 * t[1:-1, 1:-1]
        )
        self._apply_boundary(new)
        self._field, self._next = new, t

        self._time += params.dt
        self._step_count += 1

        if not math.isfinite(self._time):
            logger.error(
                "2D heat diffusion time became non-finite at step %d",
                self._step_count,
            )
            self._fail("Time became non-finite.")
            return False
        if not np.all(np.isfinite(self._field)):
            logger.error(
                "2D heat diffusion field became non-finite at step %d",
                self._step_count,
            )
            self._fail("Temperature field became non-finite.")
            return False
        return True

    def __repr__(self) -> str:
        return (
            f"HeatDiffusion2DModel(nx={self._params.nx}, ny={self._params.ny}, "
            f"time={self._time:.3e}, steps={self._step_count}, valid={self._valid})"
        )
