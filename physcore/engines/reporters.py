"""Observers for simulation output."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from .simulation import Simulation


class EnergyRecorder:
    """
    Step callback that tracks energy components and temperature over time.

    Example usage:
        recorder = EnergyRecorder(frequency=10)
        sim.set_step_callback(recorder)
        sim.run()
        data = recorder.as_arrays()
    """

    def __init__(self, frequency: int = 1) -> None:
        """
        Initialize energy recorder.

        Args:
            frequency: Record every N steps.
        """
        if frequency < 1:
            raise ValueError(f"frequency must be at least 1, got {frequency}")
        self._frequency = frequency
        self._steps: list[int] = []
        self._times: list[float] = []
        self._kinetic: list[float] = []
        self._potential: list[float] = []
        self._total: list[float] = []
        self._temperature: list[float] = []

    @property
    def frequency(self) -> int:
        return self._frequency

    def __call__(self, sim: Simulation) -> None:
        """Record energies if the step count is a multiple of the frequency."""
        if sim.step_count % self._frequency != 0:
            return
        ke = sim.kinetic_energy
        pe = sim.potential_energy

        self._steps.append(sim.step_count)
        self._times.append(sim.time)
        self._kinetic.append(ke)
        self._potential.append(pe)
        self._total.append(ke + pe)
        self._temperature.append(sim.temperature)

    def __len__(self) -> int:
        return len(self._steps)

    @property
    def steps(self) -> np.ndarray:
        return np.array(self._steps, dtype=np.int64)

    @property
    def times(self) -> np.ndarray:
        """Return times array."""
        return np.array(self._times)

    @property
    def kinetic_energy(self) -> np.ndarray:
        """Return kinetic energy time series."""
        return np.array(self._kinetic)

    @property
    def potential_energy(self) -> np.ndarray:
        """Return potential energy time series."""
        return np.array(self._potential)

    @property
    def total_energy(self) -> np.ndarray:
        """Return total energy time series."""
        return np.array(self._total)

    @property
    def temperature(self) -> np.ndarray:
        return np.array(self._temperature)

    def as_arrays(self) -> dict[str, np.ndarray]:
        """Return all recorded series keyed by name."""
        return {
            "step": self.steps,
            "time": self.times,
            "kinetic_energy": self.kinetic_energy,
            "potential_energy": self.potential_energy,
            "total_energy": self.total_energy,
            "temperature": self.temperature,
        }

    def clear(self) -> None:
        """Clear stored data."""
        self._steps.clear()
        self._times.clear()
        self._kinetic.clear()
        self._potential.clear()
        self._total.clear()
        self._temperature.clear()
