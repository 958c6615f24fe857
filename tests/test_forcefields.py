"""Tests for pairwise force evaluators."""

import numpy as np
import pytest

from physcore.forcefields.base import PairForceProvider
from physcore.forcefields.neighbor import NeighborForceField
from physcore.forcefields.pairwise import ForceField
from physcore.potentials.harmonic import HarmonicPotential
from physcore.potentials.lennard_jones import LennardJones
from physcore.system.builders import cubic_crystal
from physcore.system.lattice import Lattice
from physcore.system.particles import ParticleSystem

ARGON_MASS = 6.63e-26


@pytest.fixture
def lj():
    """Reduced-unit LJ potential."""
    return LennardJones(epsilon=1.0, sigma=1.0, cutoff=2.5)


@pytest.fixture
def argon_crystal():
    """64 jittered argon atoms in a periodic cubic cell."""
    return cubic_crystal(64, 3.8e-10, ARGON_MASS, jitter=0.2e-10, seed=7)


class TestPairForceProviderInterface:
    """Test PairForceProvider interface."""

    def test_abstract_class(self, lj):
        """Test that PairForceProvider cannot be instantiated."""
        with pytest.raises(TypeError):
            PairForceProvider(lj)


class TestForceField:
    """Test the all-pairs evaluator."""

    def test_repulsive_pair_direction(self, lj):
        """Test that a close pair pushes apart along the separation."""
        system = ParticleSystem.from_arrays(
            np.array([[0.0, 0.0, 0.0], [0.9, 0.0, 0.0]]), np.ones(2)
        )
        ForceField(lj).compute_forces(system)

        assert system.forces[1, 0] > 0.0
        assert system.forces[0, 0] < 0.0
        np.testing.assert_allclose(system.forces[:, 1:], 0.0)

    def test_attractive_pair_direction(self):
        """Test that a stretched spring pulls the pair together."""
        spring = HarmonicPotential(k=1.0, r0=1.0, cutoff=5.0)
        system = ParticleSystem.from_arrays(
            np.array([[0.0, 0.0, 0.0], [0.0, 2.0, 0.0]]), np.ones(2)
        )
        energy = ForceField(spring).compute_forces(system)

        assert energy == pytest.approx(0.5)
        np.testing.assert_allclose(system.forces[1], [0.0, -1.0, 0.0])
        np.testing.assert_allclose(system.forces[0], [0.0, 1.0, 0.0])

    def test_newtons_third_law(self, argon_crystal):
        """Test that total force vanishes."""
        system, lattice = argon_crystal
        ForceField(LennardJones.argon(cutoff_sigmas=2.0)).compute_forces(
            system, lattice
        )

        scale = np.max(np.abs(system.forces))
        assert scale > 0.0
        np.testing.assert_allclose(system.forces.sum(axis=0), 0.0, atol=1e-10 * scale)

    def test_energy_matches_pair_sum(self, lj):
        """Test total energy against an explicit double loop."""
        rng = np.random.default_rng(4)
        positions = rng.uniform(0.0, 4.0, (12, 3))
        system = ParticleSystem.from_arrays(positions, np.ones(12))

        expected = 0.0
        for i in range(12):
            for j in range(i + 1, 12):
                r2 = np.sum((positions[j] - positions[i]) ** 2)
                expected += lj.energy(r2)

        assert ForceField(lj).compute_forces(system) == pytest.approx(expected)
        assert ForceField(lj).compute_energy(system) == pytest.approx(expected)

    def test_repeated_calls_do_not_accumulate(self, lj):
        """Test that forces are cleared before each evaluation."""
        system = ParticleSystem.from_arrays(
            np.array([[0.0, 0.0, 0.0], [1.05, 0.0, 0.0]]), np.ones(2)
        )
        field = ForceField(lj)
        field.compute_forces(system)
        first = system.forces.copy()
        field.compute_forces(system)

        np.testing.assert_array_equal(system.forces, first)

    def test_compute_energy_leaves_forces(self, lj):
        """Test that energy-only evaluation does not touch forces."""
        system = ParticleSystem.from_arrays(
            np.array([[0.0, 0.0, 0.0], [1.05, 0.0, 0.0]]), np.ones(2)
        )
        ForceField(lj).compute_energy(system)
        assert np.all(system.forces == 0.0)

    def test_periodic_pair_across_boundary(self, lj):
        """Test that particles interact through the periodic boundary."""
        lattice = Lattice.cubic(10.0)
        system = ParticleSystem.from_arrays(
            np.array([[0.2, 5.0, 5.0], [9.3, 5.0, 5.0]]), np.ones(2)
        )
        field = ForceField(lj)

        # Minimum-image separation is 0.9: repulsive, pushing 0 toward +x
        field.compute_forces(system, lattice)
        assert system.forces[0, 0] > 0.0
        assert system.forces[1, 0] < 0.0

        # Without the lattice the pair is far outside the cutoff
        assert field.compute_forces(system) == 0.0

    def test_empty_system(self, lj):
        """Test evaluation on an empty system."""
        assert ForceField(lj).compute_forces(ParticleSystem()) == 0.0


class TestNeighborForceField:
    """Test the neighbor-list evaluator."""

    def test_matches_all_pairs(self, argon_crystal):
        """Test that neighbor and all-pairs evaluators agree."""
        system, lattice = argon_crystal
        potential = LennardJones.argon(cutoff_sigmas=2.0)
        reference = system.copy()

        e_all = ForceField(potential).compute_forces(reference, lattice)
        e_nbr = NeighborForceField(potential, skin=0.5e-10).compute_forces(
            system, lattice
        )

        assert e_nbr == pytest.approx(e_all, rel=1e-12)
        scale = np.max(np.abs(reference.forces))
        np.testing.assert_allclose(
            system.forces, reference.forces, rtol=1e-10, atol=1e-12 * scale
        )

    def test_cutoff_smaller_than_potential_rejected(self, lj):
        """Test that the list must cover the potential's range."""
        with pytest.raises(ValueError):
            NeighborForceField(lj, skin=0.3, cutoff=2.0)

    def test_lazy_rebuild(self, lj):
        """Test that the list is rebuilt only after sufficient drift."""
        lattice = Lattice.cubic(10.0)
        system = ParticleSystem.from_arrays(
            np.array([[1.0, 1.0, 1.0], [2.1, 1.0, 1.0], [5.0, 5.0, 5.0]]), np.ones(3)
        )
        field = NeighborForceField(lj, skin=0.4)

        field.compute_forces(system, lattice)
        assert field.rebuild_count == 1

        system.positions[2] += [0.1, 0.0, 0.0]
        field.compute_forces(system, lattice)
        assert field.rebuild_count == 1

        system.positions[2] += [0.2, 0.0, 0.0]
        field.compute_forces(system, lattice)
        assert field.rebuild_count == 2

    def test_lattice_change_forces_rebuild(self, lj):
        """Test that swapping the lattice invalidates the list."""
        system = ParticleSystem.from_arrays(
            np.array([[0.5, 0.5, 0.5], [1.5, 0.5, 0.5]]), np.ones(2)
        )
        field = NeighborForceField(lj, skin=0.3)
        field.compute_forces(system, Lattice.cubic(10.0))
        field.compute_forces(system, Lattice.cubic(12.0))

        assert field.rebuild_count == 2

    def test_potential_swap_extends_cutoff(self, lj):
        """Test that a longer-ranged potential enlarges the list cutoff."""
        field = NeighborForceField(lj, skin=0.3)
        field.potential = LennardJones(epsilon=1.0, sigma=1.0, cutoff=4.0)

        assert field.neighbor_list.cutoff == pytest.approx(4.0)
        assert not field.neighbor_list.is_built
