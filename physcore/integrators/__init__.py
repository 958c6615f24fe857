"""Integrator, thermostat and time step heuristics."""

from .base import Integrator, Thermostat
from .thermostats import AndersenThermostat, NullThermostat, VelocityRescaleThermostat
from .timestep import (
    estimate_characteristic_time,
    is_stable,
    recommended_max_dt,
    validate_dt,
)
from .velocity_verlet import EulerIntegrator, VelocityVerlet

__all__ = [
    # Base classes
    "Integrator",
    "Thermostat",
    # Integrators
    "VelocityVerlet",
    "EulerIntegrator",
    # Thermostats
    "VelocityRescaleThermostat",
    "AndersenThermostat",
    "NullThermostat",
    # Time step heuristics
    "estimate_characteristic_time",
    "is_stable",
    "recommended_max_dt",
    "validate_dt",
]
