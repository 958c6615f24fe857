"""
Built-in plotting utilities for simulation results.

Provides simple one-line plotting functions for common visualizations.

Example:
    >>> from physcore import plotting
    >>> recorder = EnergyRecorder()
    >>> sim.set_step_callback(recorder)
    >>> sim.run()
    >>> plotting.energy(recorder)
    >>> plotting.save("my_simulation.png")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import matplotlib.pyplot as plt
import numpy as np

if TYPE_CHECKING:
    from matplotlib.figure import Figure

    from .engines import EnergyRecorder
    from .models import HeatDiffusion2DModel, HeatDiffusionModel

logger = logging.getLogger(__name__)


def energy(
    recorder: EnergyRecorder,
    show: bool = True,
    figsize: tuple[float, float] = (10, 6),
) -> Figure:
    """
    Plot energy time series.

    Shows kinetic, potential, and total energy vs time, and the relative
    drift of the total energy.

    Args:
        recorder: EnergyRecorder filled during a molecular dynamics run.
        show: Whether to display the plot immediately.
        figsize: Figure size (width, height) in inches.

    Returns:
        The created figure.
    """
    fig, axes = plt.subplots(1, 2, figsize=figsize)
    times = recorder.times
    total = recorder.total_energy

    # Energy vs time
    ax = axes[0]
    ax.plot(times, recorder.kinetic_energy, "b-", label="Kinetic", alpha=0.7, lw=0.8)
    ax.plot(
        times, recorder.potential_energy, "r-", label="Potential", alpha=0.7, lw=0.8
    )
    ax.plot(times, total, "k-", label="Total", lw=1.5)
    ax.set_xlabel("Time (s)")
    ax.set_ylabel("Energy (J)")
    ax.set_title("Energy vs Time")
    ax.legend()
    ax.grid(True, alpha=0.3)

    # Energy conservation
    ax = axes[1]
    if len(total) > 0:
        e0 = total[0]
        rel_error = (total - e0) / abs(e0) * 100 if e0 != 0 else total * 0
        ax.plot(times, rel_error, "k-", lw=1)
        ax.axhline(y=0, color="r", linestyle="--", alpha=0.5)
    ax.set_xlabel("Time (s)")
    ax.set_ylabel("Relative Energy Error (%)")
    ax.set_title("Energy Conservation")
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    if show:
        plt.show()
    return fig


def temperature(
    recorder: EnergyRecorder,
    show: bool = True,
    figsize: tuple[float, float] = (10, 4),
) -> Figure:
    """
    Plot temperature time series with its mean.

    Args:
        recorder: EnergyRecorder filled during a molecular dynamics run.
        show: Whether to display the plot immediately.
        figsize: Figure size (width, height) in inches.

    Returns:
        The created figure.
    """
    fig, ax = plt.subplots(figsize=figsize)
    temps = recorder.temperature

    ax.plot(recorder.times, temps, "b-", alpha=0.7, lw=0.5)
    if len(temps) > 0:
        mean = float(np.mean(temps))
        ax.axhline(
            y=mean, color="r", linestyle="--", lw=2, label=f"Mean T = {mean:.1f} K"
        )
        ax.legend()

    ax.set_xlabel("Time (s)")
    ax.set_ylabel("Temperature (K)")
    ax.set_title("Temperature vs Time")
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    if show:
        plt.show()
    return fig


def heat_profile(
    model: HeatDiffusionModel,
    show: bool = True,
    figsize: tuple[float, float] = (8, 5),
) -> Figure:
    """
    Plot the current 1D temperature profile.

    Args:
        model: 1D heat diffusion model.
        show: Whether to display the plot immediately.
        figsize: Figure size (width, height) in inches.

    Returns:
        The created figure.
    """
    fig, ax = plt.subplots(figsize=figsize)
    field = model.snapshot()
    x = np.arange(len(field)) * model.params.dx

    ax.plot(x, field, "r-", lw=1.5)
    low, high = model.temperature_bounds
    ax.set_ylim(low, high if high > low else low + 1.0)
    ax.set_xlabel("x (m)")
    ax.set_ylabel("Temperature (K)")
    ax.set_title(f"Temperature profile (t = {model.time:.3e} s)")
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    if show:
        plt.show()
    return fig


def heat_map(
    model: HeatDiffusion2DModel,
    show: bool = True,
    figsize: tuple[float, float] = (7, 6),
    cmap: str = "inferno",
) -> Figure:
    """
    Plot the current 2D temperature field.

    The colour scale is fixed to the model's temperature bounds so frames
    from different times are comparable.

    Args:
        model: 2D heat diffusion model.
        show: Whether to display the plot immediately.
        figsize: Figure size (width, height) in inches.
        cmap: Matplotlib colormap name.

    Returns:
        The created figure.
    """
    fig, ax = plt.subplots(figsize=figsize)
    low, high = model.temperature_bounds
    width = model.nx * model.params.dx
    height = model.ny * model.params.dx

    image = ax.imshow(
        model.snapshot(),
        origin="lower",
        extent=(0.0, width, 0.0, height),
        vmin=low,
        vmax=high,
        cmap=cmap,
    )
    fig.colorbar(image, ax=ax, label="Temperature (K)")
    ax.set_xlabel("x (m)")
    ax.set_ylabel("y (m)")
    ax.set_title(f"Temperature field (t = {model.time:.3e} s)")

    plt.tight_layout()
    if show:
        plt.show()
    return fig


def save(filename: str | Path, dpi: int = 150) -> None:
    """
    Save the current figure to a file.

    Args:
        filename: Output filename (e.g., "plot.png", "plot.pdf").
        dpi: Resolution in dots per inch.

    Example:
        >>> plotting.heat_map(model, show=False)
        >>> plotting.save("field.png")
    """
    plt.savefig(filename, dpi=dpi, bbox_inches="tight")
    logger.info("Saved plot to %s", filename)


def show() -> None:
    """
    Display all pending plots.

    Use this after creating plots with show=False.
    """
    plt.show()
