"""Single-particle spaces, exchange statistics and many-body bases."""
from __future__ import annotations

from manybody.spaces.basis import (
    ManyBodyBasis,
    boson_states,
    boson_states_with_cutoff,
    fermion_states,
)
from manybody.spaces.single_particle import SingleParticleSpace
from manybody.spaces.statistics import (
    BOSONS,
    FERMIONS,
    Bosons,
    Fermions,
    Occupation,
    Statistics,
)

__all__ = [
    "BOSONS",
    "Bosons",
    "FERMIONS",
    "Fermions",
    "ManyBodyBasis",
    "Occupation",
    "SingleParticleSpace",
    "Statistics",
    "boson_states",
    "boson_states_with_cutoff",
    "fermion_states",
]
