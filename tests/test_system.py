"""Tests for the bounded arena, particle system and builders."""

import numpy as np
import pytest

from physcore.constants import K_BOLTZMANN
from physcore.system.arena import ArenaExhaustedError, BoundedArena
from physcore.system.builders import cubic_crystal, cubic_lattice_positions
from physcore.system.lattice import Lattice
from physcore.system.particles import BYTES_PER_PARTICLE, Particle, ParticleSystem

ARGON_MASS = 6.63e-26


@pytest.fixture
def two_particles():
    """Two particles with known velocities."""
    return ParticleSystem.from_arrays(
        positions=np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0]]),
        masses=np.array([2.0, 2.0]),
        velocities=np.array([[1.0, 0.0, 0.0], [0.0, 2.0, 0.0]]),
    )


class TestBoundedArena:
    """Test the byte-bounded arena."""

    def test_allocate_counts_bytes(self):
        """Test that allocation charges its size against the budget."""
        arena = BoundedArena(1024)
        array = arena.allocate((4, 3))

        assert array.shape == (4, 3)
        assert np.all(array == 0.0)
        assert arena.used_bytes == 96
        assert arena.available_bytes == 1024 - 96

    def test_exhaustion_raises_before_allocating(self):
        """Test that an oversize request fails and leaves counters unchanged."""
        arena = BoundedArena(100)
        arena.allocate(8)

        with pytest.raises(ArenaExhaustedError) as excinfo:
            arena.allocate(8)

        assert arena.used_bytes == 64
        assert excinfo.value.requested == 64
        assert excinfo.value.limit == 100

    def test_exhaustion_is_memory_error(self):
        """Test that exhaustion is reported as an out-of-memory condition."""
        arena = BoundedArena(0)
        with pytest.raises(MemoryError):
            arena.allocate(1)

    def test_release_returns_bytes(self):
        """Test that releasing an array frees its bytes."""
        arena = BoundedArena(80)
        array = arena.allocate(10)
        arena.release(array)

        assert arena.used_bytes == 0
        assert arena.can_allocate(80)

    def test_negative_budget_rejected(self):
        """Test that a negative budget is a programming error."""
        with pytest.raises(ValueError):
            BoundedArena(-1)


class TestParticle:
    """Test the single-particle record."""

    def test_defaults(self):
        """Test default particle is at rest at the origin."""
        particle = Particle()
        assert np.all(particle.position == 0.0)
        assert particle.mass == 1.0

    def test_nonpositive_mass_rejected(self):
        """Test that zero mass is rejected."""
        with pytest.raises(ValueError):
            Particle(mass=0.0)

    def test_wrong_shape_rejected(self):
        """Test that vectors must have three components."""
        with pytest.raises(ValueError):
            Particle(position=[0.0, 1.0])


class TestParticleSystem:
    """Test the particle container."""

    def test_add_particle_returns_index(self):
        """Test that particles are appended in order."""
        system = ParticleSystem()
        i = system.add_particle(Particle(position=[1.0, 2.0, 3.0]))
        j = system.add_particle(Particle(position=[4.0, 5.0, 6.0], mass=2.0))

        assert (i, j) == (0, 1)
        assert len(system) == 2
        np.testing.assert_array_equal(system.positions[1], [4.0, 5.0, 6.0])
        assert system[1].mass == 2.0

    def test_default_particles(self):
        """Test constructing n default particles."""
        system = ParticleSystem(5)
        assert system.size == 5
        np.testing.assert_array_equal(system.masses, np.ones(5))

    def test_getitem_returns_copy(self, two_particles):
        """Test that indexing returns an independent copy."""
        particle = two_particles[0]
        particle.position[0] = 99.0
        assert two_particles.positions[0, 0] == 0.0

    def test_getitem_out_of_range(self, two_particles):
        """Test out-of-range index raises IndexError."""
        with pytest.raises(IndexError):
            two_particles[2]

    def test_budget_exhaustion_leaves_system_unchanged(self):
        """Test that growth beyond the budget fails cleanly."""
        system = ParticleSystem(max_bytes=10 * BYTES_PER_PARTICLE)
        system.reserve(10)
        for k in range(10):
            system.add_particle(Particle(position=[float(k), 0.0, 0.0]))
        used = system.arena.used_bytes

        with pytest.raises(ArenaExhaustedError):
            system.add_particle(Particle())

        assert len(system) == 10
        assert system.arena.used_bytes == used
        assert system.positions[9, 0] == 9.0

    def test_from_arrays_shape_mismatch(self):
        """Test that mismatched arrays are rejected."""
        with pytest.raises(ValueError):
            ParticleSystem.from_arrays(np.zeros((3, 3)), np.ones(2))

    def test_from_arrays_rejects_bad_mass(self):
        """Test that non-positive masses are rejected."""
        with pytest.raises(ValueError):
            ParticleSystem.from_arrays(np.zeros((2, 3)), np.array([1.0, -1.0]))

    def test_kinetic_energy(self, two_particles):
        """Test KE = sum(0.5 m v^2)."""
        # 0.5*2*1 + 0.5*2*4
        assert two_particles.kinetic_energy == pytest.approx(5.0)

    def test_temperature_uses_3n_minus_3(self, two_particles):
        """Test temperature with centre-of-mass degrees of freedom removed."""
        expected = 2.0 * 5.0 / (3 * K_BOLTZMANN)
        assert two_particles.temperature == pytest.approx(expected)

    def test_single_particle_temperature_zero(self):
        """Test that a single particle has zero temperature."""
        system = ParticleSystem.from_arrays(
            np.zeros((1, 3)), np.ones(1), np.ones((1, 3))
        )
        assert system.temperature == 0.0

    def test_zero_com_velocity(self, two_particles):
        """Test that centre-of-mass drift is removed."""
        two_particles.zero_com_velocity()
        np.testing.assert_allclose(
            two_particles.center_of_mass_velocity, 0.0, atol=1e-15
        )

    def test_forces_view_read_only(self, two_particles):
        """Test that forces can only be written through add_force."""
        with pytest.raises(ValueError):
            two_particles.forces[0, 0] = 1.0

    def test_add_force_accumulates(self, two_particles):
        """Test repeated indices accumulate."""
        two_particles.add_force(
            np.array([0, 0, 1]),
            np.array([[1.0, 0.0, 0.0], [2.0, 0.0, 0.0], [0.0, 1.0, 0.0]]),
        )
        np.testing.assert_array_equal(two_particles.forces[0], [3.0, 0.0, 0.0])
        np.testing.assert_array_equal(two_particles.forces[1], [0.0, 1.0, 0.0])

        two_particles.clear_forces()
        assert np.all(two_particles.forces == 0.0)

    def test_velocity_views_write_through(self, two_particles):
        """Test that in-place updates of the velocity view modify the system."""
        two_particles.velocities *= 2.0
        np.testing.assert_array_equal(two_particles[1].velocity, [0.0, 4.0, 0.0])

    def test_apply_pbc(self):
        """Test wrapping positions into the primary cell."""
        system = ParticleSystem.from_arrays(
            np.array([[-0.5, 10.5, 3.0]]), np.ones(1)
        )
        system.apply_pbc(Lattice.cubic(10.0))
        np.testing.assert_allclose(system.positions[0], [9.5, 0.5, 3.0])

    def test_thermalize_hits_target(self):
        """Test that thermalization produces the exact target temperature."""
        system, _ = cubic_crystal(64, 3.8e-10, ARGON_MASS)
        system.thermalize(120.0, seed=3)

        assert system.temperature == pytest.approx(120.0, rel=1e-10)
        np.testing.assert_allclose(system.center_of_mass_velocity, 0.0, atol=1e-10)

    def test_thermalize_reproducible(self):
        """Test that a fixed seed reproduces the same velocities."""
        a, _ = cubic_crystal(8, 3.8e-10, ARGON_MASS)
        b, _ = cubic_crystal(8, 3.8e-10, ARGON_MASS)
        a.thermalize(300.0, seed=11)
        b.thermalize(300.0, seed=11)
        np.testing.assert_array_equal(a.velocities, b.velocities)

    def test_copy_is_independent(self, two_particles):
        """Test that copies share no storage."""
        clone = two_particles.copy()
        clone.positions[0, 0] = 7.0
        assert two_particles.positions[0, 0] == 0.0
        assert len(clone) == 2


class TestBuilders:
    """Test initial configuration helpers."""

    def test_cubic_positions_count(self):
        """Test that the requested number of sites is generated."""
        positions = cubic_lattice_positions(10, 1.0)
        assert positions.shape == (10, 3)
        np.testing.assert_array_equal(positions[0], [0.5, 0.5, 0.5])

    def test_cubic_crystal_inside_cell(self):
        """Test that all particles lie in the enclosing cell."""
        system, lattice = cubic_crystal(27, 2.0, 1.0, jitter=0.1, seed=0)

        assert len(system) == 27
        assert lattice.volume == pytest.approx(6.0**3)
        assert np.all(system.positions >= 0.0)
        assert np.all(system.positions < 6.0)

    def test_cubic_crystal_si_scale_distinct(self):
        """Test that an argon-scale crystal keeps every site distinct."""
        system, lattice = cubic_crystal(8, 3.8e-10, 6.63e-26)

        assert lattice.validate() is None
        assert len(np.unique(system.positions, axis=0)) == 8
        assert np.all(system.positions >= 0.0)
        assert np.all(system.positions < 7.6e-10)
