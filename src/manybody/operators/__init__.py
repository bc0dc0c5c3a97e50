"""Single-particle and many-body operator construction."""
from __future__ import annotations

from manybody.operators.lifting import (
    create,
    destroy,
    manybody_operator,
    number_operator,
    one_body_operator,
    two_body_operator,
)
from manybody.operators.many_body import ManyBodyOperator, from_triplets
from manybody.operators.observables import (
    basis_state_density,
    basis_state_vector,
    expect,
    one_body_density,
)
from manybody.operators.single_particle import (
    SingleParticleOperator,
    diagonal_operator,
    identity_operator,
    single_particle_operator,
    transition_operator,
)

__all__ = [
    "ManyBodyOperator",
    "SingleParticleOperator",
    "basis_state_density",
    "basis_state_vector",
    "create",
    "destroy",
    "diagonal_operator",
    "expect",
    "from_triplets",
    "identity_operator",
    "manybody_operator",
    "number_operator",
    "one_body_density",
    "one_body_operator",
    "single_particle_operator",
    "transition_operator",
    "two_body_operator",
]
