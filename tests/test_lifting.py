"""Tests for second-quantized lifting of single- and two-particle operators."""
from __future__ import annotations

import itertools
import math
import unittest

import numpy as np

from manybody import config  # noqa: F401 - JAX config must be imported first

import jax.numpy as jnp

from manybody.errors import (
    DimensionMismatchError,
    IndexOutOfRangeError,
    StateNotInBasisError,
)
from manybody.operators import (
    create,
    destroy,
    identity_operator,
    manybody_operator,
    number_operator,
    transition_operator,
    two_body_operator,
)
from manybody.spaces import FERMIONS, ManyBodyBasis, SingleParticleSpace


def _random_hermitian(n: int, seed: int) -> np.ndarray:
    rng = np.random.default_rng(seed)
    mat = rng.normal(size=(n, n)) + 1j * rng.normal(size=(n, n))
    return 0.5 * (mat + mat.conj().T)


def _dense(op) -> np.ndarray:
    return np.asarray(op.to_dense())


class OneBodyLiftingTest(unittest.TestCase):
    def test_identity_lifts_to_identity_on_single_particle_sector(self) -> None:
        space = SingleParticleSpace(4)
        for basis in (ManyBodyBasis.fermions(space, 1), ManyBodyBasis.bosons(space, 1)):
            lifted = _dense(manybody_operator(basis, identity_operator(space)))
            np.testing.assert_allclose(lifted, np.eye(basis.dimension), atol=1e-12)

    def test_identity_lifts_to_particle_number(self) -> None:
        space = SingleParticleSpace(4)
        for basis in (
            ManyBodyBasis.fermions(space, 2),
            ManyBodyBasis.bosons(space, 3),
            ManyBodyBasis.bosons(space, max_occupation=2),
        ):
            lifted = _dense(manybody_operator(basis, identity_operator(space)))
            np.testing.assert_allclose(lifted, _dense(number_operator(basis)), atol=1e-12)

    def test_hermitian_stays_hermitian(self) -> None:
        for seed, basis in enumerate(
            (
                ManyBodyBasis.fermions(4, 2),
                ManyBodyBasis.bosons(4, 2),
                ManyBodyBasis.bosons(3, max_occupation=2),
            )
        ):
            lifted = _dense(manybody_operator(basis, _random_hermitian(basis.n_modes, seed)))
            np.testing.assert_allclose(lifted, lifted.conj().T, atol=1e-12)

    def test_scenario_fermionic_transition_sign(self) -> None:
        space = SingleParticleSpace(4)
        basis = ManyBodyBasis.fermions(space, 2)
        lifted = _dense(manybody_operator(basis, transition_operator(space, 2, 3)))
        i = basis.index((0, 1, 0, 1))
        j = basis.index((0, 1, 1, 0))
        self.assertAlmostEqual(complex(lifted[j, i]), 1.0)
        column = lifted[:, i].copy()
        column[j] = 0.0
        np.testing.assert_allclose(column, 0.0)

    def test_fermionic_sign_across_occupied_mode(self) -> None:
        # c_0^+ c_3 |0101>: c_3 passes one fermion (-1), c_0^+ passes none (+1).
        space = SingleParticleSpace(4)
        basis = ManyBodyBasis.fermions(space, 2)
        lifted = _dense(manybody_operator(basis, transition_operator(space, 0, 3)))
        i = basis.index((0, 1, 0, 1))
        j = basis.index((1, 1, 0, 0))
        self.assertAlmostEqual(complex(lifted[j, i]), -1.0)

    def test_bosonic_hopping_amplitude(self) -> None:
        space = SingleParticleSpace(2)
        basis = ManyBodyBasis.bosons(space, 3)
        lifted = _dense(manybody_operator(basis, transition_operator(space, 0, 1)))
        # a_0^+ a_1 |1, 2> = sqrt(2) sqrt(2) |2, 1>
        i = basis.index((1, 2))
        j = basis.index((2, 1))
        self.assertAlmostEqual(complex(lifted[j, i]), 2.0)

    def test_spectrum_matches_single_particle_energies(self) -> None:
        h = _random_hermitian(4, 11)
        energies = np.linalg.eigvalsh(h)
        fermions = ManyBodyBasis.fermions(4, 2)
        expected = sorted(a + b for a, b in itertools.combinations(energies, 2))
        got = np.linalg.eigvalsh(_dense(manybody_operator(fermions, h)))
        np.testing.assert_allclose(got, expected, atol=1e-10)

        bosons = ManyBodyBasis.bosons(4, 2)
        expected = sorted(
            a + b for a, b in itertools.combinations_with_replacement(energies, 2)
        )
        got = np.linalg.eigvalsh(_dense(manybody_operator(bosons, h)))
        np.testing.assert_allclose(got, expected, atol=1e-10)

    def test_lifting_matches_ladder_products_on_fock_space(self) -> None:
        basis = ManyBodyBasis.fermions(3, range(4))
        a = _random_hermitian(3, 5)
        expected = np.zeros((basis.dimension, basis.dimension), dtype=complex)
        for s in range(3):
            for t in range(3):
                expected += a[s, t] * (_dense(create(basis, s)) @ _dense(destroy(basis, t)))
        np.testing.assert_allclose(_dense(manybody_operator(basis, a)), expected, atol=1e-12)

    def test_sparse_matches_dense(self) -> None:
        basis = ManyBodyBasis.fermions(5, 2)
        a = _random_hermitian(5, 3)
        sparse = manybody_operator(basis, a, sparse=True)
        self.assertTrue(sparse.is_sparse)
        np.testing.assert_allclose(
            _dense(sparse), _dense(manybody_operator(basis, a)), atol=1e-12
        )

    def test_real_dtype(self) -> None:
        basis = ManyBodyBasis.bosons(3, 2)
        lifted = manybody_operator(basis, np.eye(3), dtype=jnp.float64)
        self.assertEqual(lifted.dtype, jnp.float64)
        with self.assertRaises(ValueError):
            manybody_operator(basis, 1j * np.eye(3), dtype=jnp.float64)

    def test_dimension_mismatch(self) -> None:
        basis = ManyBodyBasis.fermions(4, 2)
        with self.assertRaises(DimensionMismatchError):
            manybody_operator(basis, identity_operator(SingleParticleSpace(3)))
        with self.assertRaises(DimensionMismatchError):
            manybody_operator(basis, np.eye(5))

    def test_inconsistent_explicit_basis_raises(self) -> None:
        basis = ManyBodyBasis(FERMIONS, 3, [(1, 0, 0), (0, 1, 0)])
        space = SingleParticleSpace(3)
        # (0, 1, 0) <-> (1, 0, 0) stays inside the basis.
        manybody_operator(basis, transition_operator(space, 1, 0))
        with self.assertRaises(StateNotInBasisError):
            manybody_operator(basis, transition_operator(space, 2, 0))


class LadderOperatorTest(unittest.TestCase):
    def test_scenario_bosonic_destroy(self) -> None:
        basis = ManyBodyBasis.bosons(4, max_occupation=3)
        lowered = _dense(destroy(basis, 0))
        i = basis.index((3, 0, 0, 0))
        j = basis.index((2, 0, 0, 0))
        self.assertAlmostEqual(complex(lowered[j, i]), math.sqrt(3))
        self.assertEqual(int(np.count_nonzero(lowered[:, i])), 1)

    def test_create_is_adjoint_of_destroy(self) -> None:
        for basis in (
            ManyBodyBasis.bosons(3, max_occupation=3),
            ManyBodyBasis.fermions(4, range(5)),
        ):
            for mode in range(basis.n_modes):
                np.testing.assert_allclose(
                    _dense(create(basis, mode)),
                    _dense(destroy(basis, mode)).conj().T,
                    atol=1e-12,
                )

    def test_fermionic_anticommutation(self) -> None:
        basis = ManyBodyBasis.fermions(3, range(4))
        eye = np.eye(basis.dimension)
        for i in range(3):
            for j in range(3):
                ci, cj = _dense(destroy(basis, i)), _dense(destroy(basis, j))
                cdj = _dense(create(basis, j))
                np.testing.assert_allclose(
                    ci @ cdj + cdj @ ci, eye if i == j else 0 * eye, atol=1e-12
                )
                np.testing.assert_allclose(ci @ cj + cj @ ci, 0 * eye, atol=1e-12)

    def test_bosonic_number_from_ladders(self) -> None:
        basis = ManyBodyBasis.bosons(2, max_occupation=4)
        for mode in range(2):
            product = _dense(create(basis, mode)) @ _dense(destroy(basis, mode))
            np.testing.assert_allclose(product, _dense(number_operator(basis, mode)), atol=1e-12)

    def test_destroy_leaves_fixed_particle_sector(self) -> None:
        basis = ManyBodyBasis.fermions(4, 2)
        np.testing.assert_allclose(_dense(destroy(basis, 1)), 0.0)

    def test_bad_mode(self) -> None:
        basis = ManyBodyBasis.bosons(2, 1)
        with self.assertRaises(IndexOutOfRangeError):
            destroy(basis, 2)
        with self.assertRaises(IndexOutOfRangeError):
            number_operator(basis, -1)

    def test_number_operator(self) -> None:
        basis = ManyBodyBasis.bosons(3, 2)
        n1 = np.diag(_dense(number_operator(basis, 1))).real
        np.testing.assert_allclose(n1, [state[1] for state in basis])
        total = _dense(number_operator(basis, sparse=True))
        np.testing.assert_allclose(total, 2 * np.eye(basis.dimension))


class TwoBodyLiftingTest(unittest.TestCase):
    def test_pair_identity_counts_pairs(self) -> None:
        for basis in (
            ManyBodyBasis.fermions(4, [1, 2, 3]),
            ManyBodyBasis.bosons(3, [1, 2, 3]),
        ):
            n = basis.n_modes
            lifted = _dense(two_body_operator(basis, np.eye(n * n)))
            counts = np.array([sum(state) for state in basis])
            np.testing.assert_allclose(
                lifted, np.diag(counts * (counts - 1) / 2), atol=1e-12
            )

    def test_manybody_operator_dispatches_on_shape(self) -> None:
        basis = ManyBodyBasis.bosons(2, 2)
        # On-site interaction U/2 n (n - 1) written as a pair operator.
        u = 3.0
        pair = np.zeros((4, 4))
        for s in range(2):
            pair[s * 2 + s, s * 2 + s] = u
        lifted = _dense(manybody_operator(basis, pair))
        expected = np.diag([u / 2 * sum(n * (n - 1) for n in state) for state in basis])
        np.testing.assert_allclose(lifted, expected, atol=1e-12)

    def test_hermitian_pair_operator_stays_hermitian(self) -> None:
        basis = ManyBodyBasis.fermions(3, 2)
        pair = _random_hermitian(9, 7)
        lifted = _dense(two_body_operator(basis, pair))
        np.testing.assert_allclose(lifted, lifted.conj().T, atol=1e-12)

    def test_two_body_dimension_mismatch(self) -> None:
        basis = ManyBodyBasis.fermions(3, 2)
        with self.assertRaises(DimensionMismatchError):
            two_body_operator(basis, np.eye(3))


if __name__ == "__main__":
    unittest.main()
