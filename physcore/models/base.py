"""Base interface for steppable simulation models."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod


def is_positive(value: float) -> bool:
    """Return True for a finite value greater than zero."""
    return math.isfinite(value) and value > 0.0


def is_non_negative(value: float) -> bool:
    """Return True for a finite value of at least zero."""
    return math.isfinite(value) and value >= 0.0


class SimModel(ABC):
    """
    Abstract base class for simulation models.

    A model is constructed from a parameter struct and validates it
    immediately. Expected failures (bad parameters, numerical blow-up) never
    raise from ``step``; they are reported through ``is_valid`` and
    ``error_message`` and make the model permanently finished.
    """

    def __init__(self) -> None:
        self._time = 0.0
        self._step_count = 0
        self._valid = False
        self._error = ""

    @abstractmethod
    def step(self) -> bool:
        """
        Advance the model by one time step.

        Returns:
            True if a step was taken, False if the model is finished or the
            step failed.
        """
        ...

    @property
    @abstractmethod
    def finished(self) -> bool:
        """Return True once no further steps will be taken."""
        ...

    @property
    def time(self) -> float:
        """Return simulated time (s)."""
        return self._time

    @property
    def step_count(self) -> int:
        """Return number of completed steps."""
        return self._step_count

    @property
    def is_valid(self) -> bool:
        return self._valid

    @property
    def error_message(self) -> str:
        """Return the failure description, or an empty string."""
        return self._error

    def _fail(self, message: str) -> None:
        """Mark the model invalid (terminal)."""
        self._valid = False
        self._error = message

    def run(self) -> int:
        """
        Step until finished.

        Returns:
            Number of steps taken by this call.
        """
        taken = 0
        while self.step():
            taken += 1
        return taken
