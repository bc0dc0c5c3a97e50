"""Basis states, expectation values and reduced one-body densities."""
from __future__ import annotations

from manybody import config  # noqa: F401 - JAX config must be imported first

from collections.abc import Sequence

import jax
import jax.numpy as jnp
import numpy as np

from manybody.errors import DimensionMismatchError
from manybody.operators.lifting import one_body_operator
from manybody.operators.many_body import ManyBodyOperator
from manybody.spaces.basis import ManyBodyBasis

__all__ = [
    "basis_state_vector",
    "basis_state_density",
    "expect",
    "one_body_density",
]


def basis_state_vector(
    basis: ManyBodyBasis, occupation: Sequence[int], dtype=jnp.complex128
) -> jax.Array:
    """Unit vector of ``occupation``; raises StateNotInBasisError if absent."""
    index = basis.index(occupation)
    return jnp.zeros((basis.dimension,), dtype=dtype).at[index].set(1)


def basis_state_density(
    basis: ManyBodyBasis, occupation: Sequence[int], dtype=jnp.complex128
) -> jax.Array:
    """Projector ``|u><u|`` onto a basis state."""
    index = basis.index(occupation)
    dim = basis.dimension
    return jnp.zeros((dim, dim), dtype=dtype).at[index, index].set(1)


def _as_state(state, dim: int) -> jax.Array:
    state = jnp.asarray(state)
    if state.shape not in ((dim,), (dim, dim)):
        raise DimensionMismatchError(
            f"State of shape {state.shape} does not match basis dimension {dim}."
        )
    return state


def expect(op: ManyBodyOperator, state) -> jax.Array:
    """``<psi|op|psi>`` for a state vector or ``tr(op rho)`` for a density matrix."""
    state = _as_state(state, op.dim)
    if state.ndim == 1:
        return jnp.vdot(state, op @ state)
    return jnp.trace(op.to_dense() @ state)


def one_body_density(basis: ManyBodyBasis, state) -> jax.Array:
    """Single-particle reduced density matrix ``rho[s, t] = <c_t^+ c_s>``.

    For any one-body operator ``A``: ``expect(lift(A), state) == tr(A @ rho)``.
    """
    state = _as_state(state, basis.dimension)
    n = basis.n_modes
    rho = np.zeros((n, n), dtype=np.complex128)
    for s in range(n):
        for t in range(n):
            hop = np.zeros((n, n))
            hop[t, s] = 1.0
            rho[s, t] = complex(expect(one_body_operator(basis, hop), state))
    return jnp.asarray(rho)
