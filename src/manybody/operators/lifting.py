"""Second quantization: lifting single- and two-particle operators.

A one-body operator ``A`` on the single-particle space becomes

    A_mb = sum_{s,t} A[s, t] c_s^+ c_t

and a two-body operator ``V`` on the two-particle product space (pair index
``s1 * N + s2``) becomes

    V_mb = 1/2 sum V[(s1, s2), (t1, t2)] c_s1^+ c_s2^+ c_t2 c_t1.

Ladder strings are applied state by state. A result that leaves the sector
declared by the basis (particle numbers, occupation caps) is dropped, so the
lifted operator is the projection onto that sector. A result inside the sector
that the basis does not contain raises StateNotInBasisError.
"""
from __future__ import annotations

from manybody import config  # noqa: F401 - JAX config must be imported first

import logging
from collections import defaultdict
from collections.abc import Callable, Sequence

import jax.numpy as jnp
import numpy as np

from manybody.errors import DimensionMismatchError, StateNotInBasisError
from manybody.operators.many_body import ManyBodyOperator, from_triplets
from manybody.operators.single_particle import SingleParticleOperator
from manybody.spaces import statistics as stats
from manybody.spaces.basis import ManyBodyBasis
from manybody.spaces.statistics import Occupation

logger = logging.getLogger(__name__)

Ladder = tuple[Callable, int]

__all__ = [
    "manybody_operator",
    "one_body_operator",
    "two_body_operator",
    "destroy",
    "create",
    "number_operator",
]


def _as_matrix(op) -> np.ndarray:
    if isinstance(op, SingleParticleOperator):
        return np.asarray(op.matrix)
    return np.asarray(op)


def _default_dtype(matrix: np.ndarray, dtype):
    if dtype is not None:
        return dtype
    return jnp.promote_types(matrix.dtype, jnp.float64)


def _apply_string(
    basis: ManyBodyBasis, occupation: Occupation, ladder: Sequence[Ladder]
) -> tuple[Occupation, float] | None:
    """Apply ladder operators in order (first element acts first)."""
    amplitude = 1.0
    for action, mode in ladder:
        step = action(basis.statistics, occupation, mode)
        if step is None:
            return None
        occupation, factor = step
        amplitude *= factor
    return occupation, amplitude


def _target_index(basis: ManyBodyBasis, occupation: Occupation) -> int | None:
    index = basis.find(occupation)
    if index is not None:
        return index
    if not basis.in_sector(occupation):
        return None
    raise StateNotInBasisError(
        f"Occupation {occupation} is inside the declared sector but missing "
        f"from the {basis.statistics.name} basis; the enumeration is inconsistent."
    )


class _TripletBuilder:
    """Accumulates ``(row, col, value)`` entries of a lifted operator."""

    def __init__(self) -> None:
        self.rows: list[int] = []
        self.cols: list[int] = []
        self.values: list[complex] = []

    def add(self, row: int, col: int, value: complex) -> None:
        self.rows.append(row)
        self.cols.append(col)
        self.values.append(value)

    def build(self, dim: int, *, sparse: bool, dtype) -> ManyBodyOperator:
        return from_triplets(
            self.rows, self.cols, self.values, dim, sparse=sparse, dtype=dtype
        )


def one_body_operator(
    basis: ManyBodyBasis, op, *, sparse: bool = False, dtype=None
) -> ManyBodyOperator:
    """Lift an ``N x N`` single-particle operator to ``sum A[s,t] c_s^+ c_t``."""
    matrix = _as_matrix(op)
    n = basis.n_modes
    if matrix.shape != (n, n):
        raise DimensionMismatchError(
            f"One-body operator of shape {matrix.shape} does not match "
            f"{n} single-particle modes."
        )

    # Column t -> [(s, A[s, t])]: annihilate once per occupied column.
    by_source: dict[int, list[tuple[int, complex]]] = defaultdict(list)
    for s, t in zip(*np.nonzero(matrix)):
        by_source[int(t)].append((int(s), matrix[s, t].item()))

    triplets = _TripletBuilder()
    for i, occupation in enumerate(basis.states):
        for t, entries in by_source.items():
            removed = stats.annihilate(basis.statistics, occupation, t)
            if removed is None:
                continue
            intermediate, amp_t = removed
            for s, coeff in entries:
                added = stats.create(basis.statistics, intermediate, s)
                if added is None:
                    continue
                final, amp_s = added
                j = _target_index(basis, final)
                if j is None:
                    continue
                triplets.add(j, i, coeff * amp_t * amp_s)

    logger.debug(
        "Lifted one-body operator: dim=%d nonzero_single=%d entries=%d",
        basis.dimension,
        sum(len(v) for v in by_source.values()),
        len(triplets.values),
    )
    return triplets.build(
        basis.dimension, sparse=sparse, dtype=_default_dtype(matrix, dtype)
    )


def two_body_operator(
    basis: ManyBodyBasis, op, *, sparse: bool = False, dtype=None
) -> ManyBodyOperator:
    """Lift an ``N^2 x N^2`` pair operator to ``1/2 sum V c^+ c^+ c c``."""
    matrix = _as_matrix(op)
    n = basis.n_modes
    if matrix.shape != (n * n, n * n):
        raise DimensionMismatchError(
            f"Two-body operator of shape {matrix.shape} does not match "
            f"{n} single-particle modes (expected {(n * n, n * n)})."
        )

    terms = []
    for row, col in zip(*np.nonzero(matrix)):
        s1, s2 = divmod(int(row), n)
        t1, t2 = divmod(int(col), n)
        ladder = (
            (stats.annihilate, t1),
            (stats.annihilate, t2),
            (stats.create, s2),
            (stats.create, s1),
        )
        terms.append((0.5 * matrix[row, col].item(), ladder))

    triplets = _TripletBuilder()
    for i, occupation in enumerate(basis.states):
        for coeff, ladder in terms:
            result = _apply_string(basis, occupation, ladder)
            if result is None:
                continue
            final, amplitude = result
            j = _target_index(basis, final)
            if j is None:
                continue
            triplets.add(j, i, coeff * amplitude)

    logger.debug(
        "Lifted two-body operator: dim=%d terms=%d entries=%d",
        basis.dimension,
        len(terms),
        len(triplets.values),
    )
    return triplets.build(
        basis.dimension, sparse=sparse, dtype=_default_dtype(matrix, dtype)
    )


def manybody_operator(
    basis: ManyBodyBasis, op, *, sparse: bool = False, dtype=None
) -> ManyBodyOperator:
    """Lift a one-body (``N x N``) or two-body (``N^2 x N^2``) operator."""
    matrix = _as_matrix(op)
    n = basis.n_modes
    if matrix.shape == (n, n):
        return one_body_operator(basis, matrix, sparse=sparse, dtype=dtype)
    if matrix.shape == (n * n, n * n):
        return two_body_operator(basis, matrix, sparse=sparse, dtype=dtype)
    raise DimensionMismatchError(
        f"Operator of shape {matrix.shape} is neither one-body {(n, n)} "
        f"nor two-body {(n * n, n * n)} for {n} modes."
    )


def _ladder_operator(
    basis: ManyBodyBasis, mode: int, action: Callable, sparse: bool, dtype
) -> ManyBodyOperator:
    mode = basis.check_mode(mode)
    triplets = _TripletBuilder()
    for i, occupation in enumerate(basis.states):
        result = action(basis.statistics, occupation, mode)
        if result is None:
            continue
        final, amplitude = result
        j = _target_index(basis, final)
        if j is None:
            continue
        triplets.add(j, i, amplitude)
    return triplets.build(basis.dimension, sparse=sparse, dtype=dtype)


def destroy(
    basis: ManyBodyBasis, mode: int, *, sparse: bool = False, dtype=jnp.complex128
) -> ManyBodyOperator:
    """Annihilation operator ``c_mode`` on ``basis``."""
    return _ladder_operator(basis, mode, stats.annihilate, sparse, dtype)


def create(
    basis: ManyBodyBasis, mode: int, *, sparse: bool = False, dtype=jnp.complex128
) -> ManyBodyOperator:
    """Creation operator ``c_mode^+`` on ``basis``."""
    return _ladder_operator(basis, mode, stats.create, sparse, dtype)


def number_operator(
    basis: ManyBodyBasis,
    mode: int | None = None,
    *,
    sparse: bool = False,
    dtype=jnp.complex128,
) -> ManyBodyOperator:
    """Occupation of ``mode``, or the total particle number if ``mode`` is None."""
    if mode is None:
        counts = [sum(occupation) for occupation in basis.states]
    else:
        mode = basis.check_mode(mode)
        counts = [occupation[mode] for occupation in basis.states]
    indices = list(range(basis.dimension))
    return from_triplets(
        indices, indices, counts, basis.dimension, sparse=sparse, dtype=dtype
    )
