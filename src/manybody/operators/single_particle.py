"""Linear operators on a single-particle space."""
from __future__ import annotations

from manybody import config  # noqa: F401 - JAX config must be imported first

from collections.abc import Sequence
from dataclasses import dataclass
from numbers import Number

import jax
import jax.numpy as jnp

from manybody.errors import DimensionMismatchError
from manybody.spaces.single_particle import SingleParticleSpace

__all__ = [
    "SingleParticleOperator",
    "single_particle_operator",
    "diagonal_operator",
    "transition_operator",
    "identity_operator",
]


@jax.tree_util.register_pytree_node_class
@dataclass(frozen=True)
class SingleParticleOperator:
    """Dense ``N x N`` matrix bound to a single-particle space."""

    space: SingleParticleSpace
    matrix: jax.Array

    def __post_init__(self) -> None:
        matrix = jnp.asarray(self.matrix)
        n = self.space.dimension
        if matrix.shape != (n, n):
            raise DimensionMismatchError(
                f"Operator of shape {matrix.shape} does not act on a "
                f"{n}-dimensional space."
            )
        object.__setattr__(self, "matrix", matrix)

    def tree_flatten(self):
        return (self.matrix,), (self.space,)

    @classmethod
    def tree_unflatten(cls, aux_data, children):
        (matrix,) = children
        (space,) = aux_data
        return cls(space=space, matrix=matrix)

    @property
    def dtype(self):
        return self.matrix.dtype

    def dag(self) -> SingleParticleOperator:
        return SingleParticleOperator(self.space, jnp.conj(self.matrix).T)

    def _check_same_space(self, other: SingleParticleOperator) -> None:
        if other.space != self.space:
            raise DimensionMismatchError(
                f"Cannot combine operators on {self.space} and {other.space}."
            )

    def __add__(self, other):
        if not isinstance(other, SingleParticleOperator):
            return NotImplemented
        self._check_same_space(other)
        return SingleParticleOperator(self.space, self.matrix + other.matrix)

    def __sub__(self, other):
        if not isinstance(other, SingleParticleOperator):
            return NotImplemented
        self._check_same_space(other)
        return SingleParticleOperator(self.space, self.matrix - other.matrix)

    def __neg__(self):
        return SingleParticleOperator(self.space, -self.matrix)

    def __mul__(self, scalar):
        if not isinstance(scalar, (Number, jax.Array)):
            return NotImplemented
        return SingleParticleOperator(self.space, scalar * self.matrix)

    __rmul__ = __mul__

    def __matmul__(self, other):
        if not isinstance(other, SingleParticleOperator):
            return NotImplemented
        self._check_same_space(other)
        return SingleParticleOperator(self.space, self.matrix @ other.matrix)


def single_particle_operator(
    space: SingleParticleSpace, matrix, dtype=jnp.complex128
) -> SingleParticleOperator:
    """Wrap an arbitrary square matrix as an operator on ``space``."""
    return SingleParticleOperator(space, jnp.asarray(matrix, dtype=dtype))


def diagonal_operator(
    space: SingleParticleSpace, energies: Sequence[float], dtype=jnp.complex128
) -> SingleParticleOperator:
    """Diagonal operator with ``energies`` in basis order."""
    diag = jnp.asarray(energies, dtype=dtype)
    if diag.shape != (space.dimension,):
        raise DimensionMismatchError(
            f"Got {diag.size} energies for a {space.dimension}-dimensional space."
        )
    return SingleParticleOperator(space, jnp.diag(diag))


def transition_operator(
    space: SingleParticleSpace, target: int, source: int, dtype=jnp.complex128
) -> SingleParticleOperator:
    """``|target><source|``: maps basis state ``source`` onto ``target``."""
    row = space.check_mode(target)
    col = space.check_mode(source)
    n = space.dimension
    return SingleParticleOperator(
        space, jnp.zeros((n, n), dtype=dtype).at[row, col].set(1)
    )


def identity_operator(
    space: SingleParticleSpace, dtype=jnp.complex128
) -> SingleParticleOperator:
    return SingleParticleOperator(space, jnp.eye(space.dimension, dtype=dtype))
