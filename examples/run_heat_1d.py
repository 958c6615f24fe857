#!/usr/bin/env python
"""
One-dimensional heat diffusion in a rod with cold ends.

This example demonstrates:
- Explicit finite-difference heat diffusion through the Simulation front-end
- Stability limit dt <= dx^2 / (2*alpha)
- Plotting snapshots of the temperature profile

Usage:
    python examples/run_heat_1d.py
"""

import matplotlib

matplotlib.use("Agg")  # Non-interactive backend

import matplotlib.pyplot as plt
import numpy as np

from physcore import HeatDiffusionParams, Simulation, setup_logging


def main():
    setup_logging()
    print("=" * 60)
    print("1D Heat Diffusion")
    print("=" * 60)

    params = HeatDiffusionParams(
        alpha=1e-5,
        dx=1e-3,
        dt=4e-7,
        n_cells=50,
        end_time=1e-3,
        boundary_temperature=0.0,
        initial_temperature=300.0,
    )
    print(f"  Stability limit: {params.stability_limit:.3e} s (dt = {params.dt:.1e} s)")

    sim = Simulation(params)
    if not sim.is_valid:
        print(f"Invalid parameters: {sim.error_message}")
        return

    # Take snapshots at evenly spaced step counts
    n_total = round(params.end_time / params.dt)
    snapshot_every = n_total // 5
    snapshots = [(sim.time, sim.temperature_field())]
    while sim.step():
        if sim.step_count % snapshot_every == 0:
            snapshots.append((sim.time, sim.temperature_field()))

    fig, ax = plt.subplots(figsize=(8, 5))
    x = np.arange(params.n_cells) * params.dx * 1e3
    for t, field in snapshots:
        ax.plot(x, field, lw=1.2, label=f"t = {t * 1e3:.2f} ms")
    ax.set_xlabel("x (mm)")
    ax.set_ylabel("Temperature (K)")
    ax.set_title("Temperature profile")
    ax.legend()
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig("heat_1d.png", dpi=150)
    print("\nPlot saved to heat_1d.png")

    field = sim.temperature_field()
    print("\nSummary:")
    print(f"  Steps: {sim.step_count}")
    print(f"  Final time: {sim.time:.3e} s")
    print(f"  Peak temperature: {field.max():.2f} K")
    print(f"  Mean temperature: {field.mean():.2f} K")


if __name__ == "__main__":
    main()
