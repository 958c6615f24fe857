#!/usr/bin/env python
"""
Lennard-Jones argon crystal in a periodic cell.

This example demonstrates:
- Building a cubic crystal and its lattice
- Maxwell-Boltzmann thermalization
- NVE run with a Verlet neighbor list, then NVT with velocity rescaling
- Energy and temperature plots from an EnergyRecorder

Usage:
    python examples/run_lj_argon.py
"""

import matplotlib

matplotlib.use("Agg")  # Non-interactive backend

import numpy as np

from physcore import (
    EnergyRecorder,
    LennardJones,
    Simulation,
    SimulationParams,
    VelocityRescaleThermostat,
    plotting,
    setup_logging,
)
from physcore.system import cubic_crystal

ARGON_MASS = 6.63e-26  # kg


def main():
    setup_logging()
    print("=" * 60)
    print("Lennard-Jones Argon")
    print("=" * 60)

    system, lattice = cubic_crystal(125, 3.8e-10, ARGON_MASS)
    params = SimulationParams(
        dt=2e-15,
        end_time=2e-12,
        temperature=60.0,
        cutoff=8.5e-10,
        neighbor_skin=0.5e-10,
    )
    sim = Simulation(params, LennardJones.argon(), system)
    if not sim.set_lattice(lattice):
        print(f"Invalid lattice: {sim.error_message}")
        return
    sim.thermalize(seed=42)

    recorder = EnergyRecorder(frequency=5)
    sim.set_step_callback(recorder)

    # NVE
    sim.run()
    total = recorder.total_energy
    drift = np.max(np.abs(total - total[0])) / abs(total[0])
    print(f"\nNVE: {sim.step_count} steps, max relative energy drift {drift:.2e}")

    plotting.energy(recorder, show=False)
    plotting.save("lj_argon_energy.png")

    # NVT: a fresh run coupled to a thermostat
    nvt = Simulation(params, LennardJones.argon(), sim.system.copy())
    nvt.set_lattice(lattice)
    nvt.set_thermostat(VelocityRescaleThermostat(90.0, tau=1e-13))
    nvt_recorder = EnergyRecorder(frequency=5)
    nvt.set_step_callback(nvt_recorder)
    nvt.run()

    plotting.temperature(nvt_recorder, show=False)
    plotting.save("lj_argon_temperature.png")
    print("\nPlots saved to lj_argon_energy.png and lj_argon_temperature.png")

    print("\nSummary:")
    print(f"  Atoms: {len(sim.system)}")
    print(f"  NVE final temperature: {sim.temperature:.1f} K")
    print("  NVT target temperature: 90.0 K")
    print(f"  NVT final temperature: {nvt.temperature:.1f} K")


if __name__ == "__main__":
    main()
