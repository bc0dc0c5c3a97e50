"""Two particles in a driven, decaying three-level system.

Builds the same single-particle model for fermions and for bosons, lifts the
Hamiltonian and the decay jump operators to the many-body basis and follows
the level populations under the Lindblad equation.

Single-particle model:
    H = sum_i E_i |i><i| + Omega (|1><0| + |0><1|)
    J_k = |k-1><k|  with rate gamma (cascade 2 -> 1 -> 0)

Run with MANYBODY_LOG_LEVEL=INFO to see the populations.
"""

from __future__ import annotations

from manybody import config  # noqa: F401 - JAX config must be imported first

import logging

import jax.numpy as jnp

from manybody.dynamics import master_equation
from manybody.operators import (
    basis_state_vector,
    diagonal_operator,
    manybody_operator,
    number_operator,
    transition_operator,
)
from manybody.spaces import ManyBodyBasis, SingleParticleSpace

logger = logging.getLogger(__name__)


def build_single_particle_model(
    energies: tuple[float, ...] = (0.0, 1.0, 2.5),
    omega: float = 0.5,
):
    """Return the single-particle space, Hamiltonian and decay jumps."""
    space = SingleParticleSpace(len(energies))
    drive = transition_operator(space, 1, 0) + transition_operator(space, 0, 1)
    hamiltonian = diagonal_operator(space, energies) + omega * drive
    jumps = [
        transition_operator(space, target=k - 1, source=k)
        for k in range(1, space.dimension)
    ]
    return space, hamiltonian, jumps


def run(
    basis: ManyBodyBasis,
    initial_occupation: tuple[int, ...],
    gamma: float = 0.2,
    t_final: float = 20.0,
    n_times: int = 201,
):
    """Evolve ``initial_occupation`` and return times and level populations."""
    space, h_single, jumps_single = build_single_particle_model()
    if space.dimension != basis.n_modes:
        raise ValueError("Basis does not match the three-level model.")

    hamiltonian = manybody_operator(basis, h_single)
    jumps = [manybody_operator(basis, j) for j in jumps_single]
    populations = [number_operator(basis, mode) for mode in space.modes]
    psi0 = basis_state_vector(basis, initial_occupation)

    result = master_equation(
        jnp.linspace(0.0, t_final, n_times),
        psi0,
        hamiltonian,
        jumps,
        rates=[gamma] * len(jumps),
        expectation_operators=populations,
        store_states=False,
    )
    return result.times, jnp.real(result.expectations)


def main() -> None:
    cases = (
        ("fermions", ManyBodyBasis.fermions(3, 2), (0, 1, 1)),
        ("bosons", ManyBodyBasis.bosons(3, 2), (0, 0, 2)),
    )
    for label, basis, occupation in cases:
        times, populations = run(basis, occupation)
        logger.info("=" * 60)
        logger.info("%s: dim=%d initial=%s", label, basis.dimension, occupation)
        for k in range(0, times.size, 50):
            logger.info(
                "t=%6.2f populations=%s",
                float(times[k]),
                ", ".join(f"{float(p):.4f}" for p in populations[:, k]),
            )


if __name__ == "__main__":
    main()
