"""Lindblad master-equation evolution of lifted many-body operators.

The integration itself is delegated to ``qutip.mesolve``; this module only
checks shapes, converts between JAX arrays and ``qutip.Qobj`` and scales jump
operators by their rates:

    d rho/dt = -i [H, rho] + sum_k gamma_k (J_k rho J_k^+ - 1/2 {J_k^+ J_k, rho})
"""
from __future__ import annotations

from manybody import config  # noqa: F401 - JAX config must be imported first

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import jax
import jax.numpy as jnp
import numpy as np
import qutip

from manybody.errors import DimensionMismatchError
from manybody.operators.many_body import ManyBodyOperator

logger = logging.getLogger(__name__)

__all__ = ["MasterEquationResult", "master_equation", "to_qobj"]


@dataclass(frozen=True)
class MasterEquationResult:
    """Output of :func:`master_equation`.

    Attributes:
        times: Time grid, shape ``(n_times,)``.
        states: Density matrices (or kets for closed evolution of a ket), one
            per time point. Empty if states were not stored.
        expectations: Expectation values, shape ``(n_observables, n_times)``.
    """

    times: jax.Array
    states: tuple[jax.Array, ...]
    expectations: jax.Array


def to_qobj(value) -> qutip.Qobj:
    """Convert a ManyBodyOperator, state vector or density matrix to a Qobj."""
    if isinstance(value, ManyBodyOperator):
        return qutip.Qobj(np.asarray(value.to_dense()))
    array = np.asarray(value)
    if array.ndim == 1:
        return qutip.Qobj(array.reshape(-1, 1))
    return qutip.Qobj(array)


def _check_operator(op: ManyBodyOperator, dim: int, label: str) -> None:
    if op.dim != dim:
        raise DimensionMismatchError(
            f"{label} has dimension {op.dim}, expected {dim}."
        )


def master_equation(
    times: Sequence[float],
    initial_state,
    hamiltonian: ManyBodyOperator,
    jump_operators: Sequence[ManyBodyOperator] = (),
    rates: Sequence[float] | None = None,
    expectation_operators: Sequence[ManyBodyOperator] = (),
    *,
    store_states: bool = True,
) -> MasterEquationResult:
    """Integrate the Lindblad equation on a many-body basis.

    Args:
        times: Output time grid; the first entry is the initial time.
        initial_state: State vector ``(M,)`` or density matrix ``(M, M)``.
        hamiltonian: Lifted Hamiltonian.
        jump_operators: Lifted jump operators ``J_k``.
        rates: Decay rates ``gamma_k``; defaults to 1 for every jump operator.
        expectation_operators: Observables evaluated at every time point.
        store_states: Keep the state at every time point.

    Returns:
        MasterEquationResult with times, states and expectation values.
    """
    dim = hamiltonian.dim
    jump_operators = tuple(jump_operators)
    expectation_operators = tuple(expectation_operators)
    rates = (1.0,) * len(jump_operators) if rates is None else tuple(rates)
    if len(rates) != len(jump_operators):
        raise DimensionMismatchError(
            f"Got {len(rates)} rates for {len(jump_operators)} jump operators."
        )
    if any(rate < 0 for rate in rates):
        raise ValueError(f"Rates must be non-negative, got {rates}.")
    for k, op in enumerate(jump_operators):
        _check_operator(op, dim, f"Jump operator {k}")
    for k, op in enumerate(expectation_operators):
        _check_operator(op, dim, f"Observable {k}")
    state = np.asarray(initial_state)
    if state.shape not in ((dim,), (dim, dim)):
        raise DimensionMismatchError(
            f"Initial state of shape {state.shape} does not match dimension {dim}."
        )

    tlist = np.asarray(times, dtype=float)
    c_ops = [
        np.sqrt(rate) * to_qobj(op) for rate, op in zip(rates, jump_operators)
    ]
    e_ops = [to_qobj(op) for op in expectation_operators]
    logger.info(
        "mesolve: dim=%d n_times=%d n_jumps=%d n_observables=%d",
        dim,
        tlist.size,
        len(c_ops),
        len(e_ops),
    )
    result = qutip.mesolve(
        to_qobj(hamiltonian),
        to_qobj(state),
        tlist,
        c_ops=c_ops,
        e_ops=e_ops,
        options={"store_states": store_states},
    )

    states = tuple(
        jnp.asarray(s.full().reshape(-1) if s.isket else s.full())
        for s in (result.states if store_states else ())
    )
    expectations = np.asarray(
        [np.asarray(values) for values in result.expect]
    ).reshape(len(e_ops), tlist.size)
    return MasterEquationResult(
        times=jnp.asarray(tlist),
        states=states,
        expectations=jnp.asarray(expectations),
    )
