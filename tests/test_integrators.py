"""Tests for integrators, thermostats and time step heuristics."""

import logging

import numpy as np
import pytest

from physcore.forcefields.pairwise import ForceField
from physcore.integrators.base import Integrator, Thermostat
from physcore.integrators.thermostats import (
    AndersenThermostat,
    NullThermostat,
    VelocityRescaleThermostat,
)
from physcore.integrators.timestep import (
    DEFAULT_CHARACTERISTIC_TIME,
    estimate_characteristic_time,
    is_stable,
    recommended_max_dt,
    validate_dt,
)
from physcore.integrators.velocity_verlet import EulerIntegrator, VelocityVerlet
from physcore.potentials.harmonic import HarmonicPotential
from physcore.system.builders import cubic_crystal
from physcore.system.particles import ParticleSystem

ARGON_MASS = 6.63e-26


@pytest.fixture
def free_particle():
    """One particle moving with constant velocity and no forces."""
    return ParticleSystem.from_arrays(
        positions=np.array([[1.0, -2.0, 0.5]]),
        masses=np.array([3.0]),
        velocities=np.array([[0.3, 0.1, -0.7]]),
    )


@pytest.fixture
def spring_pair():
    """Two unit masses on a stretched harmonic spring."""
    system = ParticleSystem.from_arrays(
        positions=np.array([[0.0, 0.0, 0.0], [1.2, 0.0, 0.0]]),
        masses=np.array([1.0, 1.0]),
    )
    return system, ForceField(HarmonicPotential(k=1.0, r0=1.0, cutoff=10.0))


@pytest.fixture
def warm_argon():
    """Argon crystal thermalized to 100 K."""
    system, _ = cubic_crystal(27, 3.8e-10, ARGON_MASS)
    system.thermalize(100.0, seed=5)
    return system


def no_forces(system):
    """Force callback for free motion."""
    return 0.0


class TestIntegratorInterface:
    """Test abstract interfaces."""

    def test_integrator_abstract(self):
        """Test that Integrator cannot be instantiated."""
        with pytest.raises(TypeError):
            Integrator(0.1)

    def test_thermostat_abstract(self):
        """Test that Thermostat cannot be instantiated."""
        with pytest.raises(TypeError):
            Thermostat()


class TestVelocityVerlet:
    """Test velocity Verlet integrator."""

    def test_timestep_property(self):
        """Test timestep property and set_dt."""
        integrator = VelocityVerlet(0.002)
        assert integrator.timestep == 0.002
        integrator.set_dt(0.001)
        assert integrator.timestep == 0.001

    def test_free_particle_linear_motion(self, free_particle):
        """Test r(t) = r0 + v0 t with zero force."""
        dt = 0.01
        integrator = VelocityVerlet(dt)
        r0 = free_particle.positions.copy()
        v0 = free_particle.velocities.copy()

        for _ in range(100):
            integrator.integrate(free_particle, no_forces)

        np.testing.assert_allclose(free_particle.positions, r0 + v0 * 1.0, rtol=1e-12)
        np.testing.assert_array_equal(free_particle.velocities, v0)

    def test_step1_step2_split(self, spring_pair):
        """Test that integrate equals step1, force update, step2."""
        system, field = spring_pair
        other = system.copy()
        field.compute_forces(system)
        field.compute_forces(other)

        a = VelocityVerlet(0.05)
        a.integrate(system, field.compute_forces)

        b = VelocityVerlet(0.05)
        b.step1(other)
        field.compute_forces(other)
        b.step2(other)

        np.testing.assert_array_equal(system.positions, other.positions)
        np.testing.assert_array_equal(system.velocities, other.velocities)

    def test_energy_conservation(self, spring_pair):
        """Test bounded energy error for an oscillating spring."""
        system, field = spring_pair
        integrator = VelocityVerlet(0.01)
        e0 = field.compute_forces(system) + system.kinetic_energy

        energies = []
        for _ in range(2000):
            integrator.integrate(system, field.compute_forces)
            energies.append(field.compute_energy(system) + system.kinetic_energy)

        assert np.max(np.abs(np.array(energies) - e0)) < 1e-3 * e0

    def test_momentum_conserved(self, spring_pair):
        """Test that pair forces conserve momentum."""
        system, field = spring_pair
        field.compute_forces(system)
        integrator = VelocityVerlet(0.01)
        for _ in range(100):
            integrator.integrate(system, field.compute_forces)

        np.testing.assert_allclose(system.center_of_mass_velocity, 0.0, atol=1e-14)

    def test_empty_system(self):
        """Test that stepping an empty system is a no-op."""
        system = ParticleSystem()
        VelocityVerlet(0.1).integrate(system, no_forces)
        assert len(system) == 0


class TestEulerIntegrator:
    """Test the explicit Euler reference integrator."""

    def test_single_update(self, spring_pair):
        """Test v += dt F/m then r += dt v."""
        system, field = spring_pair
        field.compute_forces(system)
        force = system.forces.copy()
        r0 = system.positions.copy()

        integrator = EulerIntegrator(0.1)
        integrator.step1(system)

        v_expected = 0.1 * force
        np.testing.assert_allclose(system.velocities, v_expected)
        np.testing.assert_allclose(system.positions, r0 + 0.1 * v_expected)

    def test_step2_noop(self, free_particle):
        """Test that the second phase does nothing."""
        before = free_particle.positions.copy()
        EulerIntegrator(0.1).step2(free_particle)
        np.testing.assert_array_equal(free_particle.positions, before)


class TestTimeStepValidation:
    """Test characteristic time heuristics."""

    def test_empty_system(self):
        """Test the empty-system characteristic time."""
        assert estimate_characteristic_time(ParticleSystem()) == 1.0

    def test_at_rest_fallback(self):
        """Test the femtosecond-scale fallback for resting particles."""
        system = ParticleSystem(3)
        assert estimate_characteristic_time(system) == DEFAULT_CHARACTERISTIC_TIME

    def test_fastest_particle(self):
        """Test tau = 1 Angstrom / max speed."""
        system = ParticleSystem.from_arrays(
            np.zeros((2, 3)),
            np.ones(2),
            np.array([[100.0, 0.0, 0.0], [0.0, 0.0, 1000.0]]),
        )
        tau = estimate_characteristic_time(system)

        assert tau == pytest.approx(1e-13)
        assert is_stable(5e-15, system)
        assert not is_stable(2e-14, system)
        assert recommended_max_dt(system) == pytest.approx(5e-15)

    def test_validate_dt_logs_warning(self, caplog):
        """Test that an unstable time step is logged."""
        system = ParticleSystem.from_arrays(
            np.zeros((1, 3)), np.ones(1), np.array([[1000.0, 0.0, 0.0]])
        )
        with caplog.at_level(logging.WARNING, logger="physcore.integrators.timestep"):
            assert not validate_dt(1e-13, system)
        assert "may be too large" in caplog.text

    def test_validate_dt_silent_when_stable(self, caplog):
        """Test no warning for a small time step."""
        system = ParticleSystem(2)
        with caplog.at_level(logging.WARNING):
            assert validate_dt(1e-16, system)
        assert caplog.text == ""


class TestVelocityRescaleThermostat:
    """Test Berendsen velocity rescaling."""

    def test_invalid_tau(self):
        """Test that tau must be positive."""
        with pytest.raises(ValueError):
            VelocityRescaleThermostat(300.0, tau=0.0)

    def test_moves_toward_target(self, warm_argon):
        """Test temperature relaxes toward the target without overshoot."""
        thermostat = VelocityRescaleThermostat(300.0, tau=1e-14)
        thermostat.apply(warm_argon, 1e-15)

        # lambda^2 = 1 + 0.1 * (3 - 1)
        assert warm_argon.temperature == pytest.approx(120.0)

    def test_strong_coupling_reaches_target(self, warm_argon):
        """Test dt == tau rescales exactly to the target."""
        VelocityRescaleThermostat(250.0, tau=1e-15).apply(warm_argon, 1e-15)
        assert warm_argon.temperature == pytest.approx(250.0)

    def test_noop_at_zero_temperature(self):
        """Test that a system at rest is left alone."""
        system = ParticleSystem(4)
        VelocityRescaleThermostat(300.0, tau=1e-13).apply(system, 1e-15)
        assert np.all(system.velocities == 0.0)

    def test_noop_for_zero_target(self, warm_argon):
        """Test that a non-positive target disables rescaling."""
        before = warm_argon.velocities.copy()
        VelocityRescaleThermostat(0.0, tau=1e-13).apply(warm_argon, 1e-15)
        np.testing.assert_array_equal(warm_argon.velocities, before)

    def test_noop_for_negative_lambda_squared(self, warm_argon):
        """Test that a pathological scaling factor is skipped."""
        before = warm_argon.velocities.copy()
        # lambda^2 = 1 + 2 * (0.1 - 1) < 0
        VelocityRescaleThermostat(10.0, tau=1e-15).apply(warm_argon, 2e-15)
        np.testing.assert_array_equal(warm_argon.velocities, before)

    def test_target_setter(self):
        """Test changing the target temperature."""
        thermostat = VelocityRescaleThermostat(300.0, tau=1.0)
        thermostat.target_temperature = 150.0
        assert thermostat.target_temperature == 150.0


class TestAndersenThermostat:
    """Test Andersen collision thermostat."""

    def test_collision_probability(self):
        """Test p = 1 - exp(-nu dt)."""
        thermostat = AndersenThermostat(300.0, collision_frequency=1e13, seed=1)
        assert thermostat.collision_probability(1e-13) == pytest.approx(1 - np.exp(-1))

    def test_reproducible_with_seed(self, warm_argon):
        """Test that a nonzero seed gives identical trajectories."""
        other = warm_argon.copy()
        a = AndersenThermostat(300.0, collision_frequency=1e14, seed=42)
        b = AndersenThermostat(300.0, collision_frequency=1e14, seed=42)
        for _ in range(5):
            a.apply(warm_argon, 2e-15)
            b.apply(other, 2e-15)

        np.testing.assert_array_equal(warm_argon.velocities, other.velocities)

    def test_zero_frequency_noop(self, warm_argon):
        """Test that no collisions happen with nu = 0."""
        before = warm_argon.velocities.copy()
        AndersenThermostat(300.0, collision_frequency=0.0, seed=3).apply(
            warm_argon, 1e-15
        )
        np.testing.assert_array_equal(warm_argon.velocities, before)

    def test_certain_collision_resamples_all(self, warm_argon):
        """Test that every velocity is redrawn when p is effectively 1."""
        before = warm_argon.velocities.copy()
        AndersenThermostat(300.0, collision_frequency=1e20, seed=3).apply(
            warm_argon, 1e-15
        )
        assert np.all(np.any(warm_argon.velocities != before, axis=1))

    def test_samples_target_temperature(self):
        """Test that resampled velocities follow the target distribution."""
        system, _ = cubic_crystal(1000, 3.8e-10, ARGON_MASS)
        AndersenThermostat(200.0, collision_frequency=1e20, seed=8).apply(system, 1e-15)

        assert system.temperature == pytest.approx(200.0, rel=0.1)


class TestNullThermostat:
    """Test the no-op thermostat."""

    def test_no_change(self, warm_argon):
        """Test that velocities are untouched."""
        before = warm_argon.velocities.copy()
        NullThermostat().apply(warm_argon, 1e-15)
        np.testing.assert_array_equal(warm_argon.velocities, before)
        assert NullThermostat().target_temperature == 0.0
