"""Finite single-particle basis (an N-level system)."""
from __future__ import annotations

from manybody import config  # noqa: F401 - JAX config must be imported first

import operator
from dataclasses import dataclass

import jax
import jax.numpy as jnp

from manybody.errors import IndexOutOfRangeError, InvalidDimensionError

__all__ = ["SingleParticleSpace"]


@dataclass(frozen=True)
class SingleParticleSpace:
    """Labeled orthonormal basis ``|0>, ..., |N-1>`` of one particle.

    Attributes:
        dimension: Number of modes N.
    """

    dimension: int

    def __post_init__(self) -> None:
        try:
            dimension = operator.index(self.dimension)
        except TypeError as exc:
            raise InvalidDimensionError(
                f"Dimension must be an integer, got {self.dimension!r}."
            ) from exc
        if dimension < 1:
            raise InvalidDimensionError(
                f"Dimension must be at least 1, got {dimension}."
            )
        object.__setattr__(self, "dimension", dimension)

    @classmethod
    def create(cls, dimension: int) -> SingleParticleSpace:
        return cls(dimension)

    @property
    def modes(self) -> range:
        return range(self.dimension)

    def check_mode(self, mode: int) -> int:
        """Return ``mode`` as an int, raising if it is outside ``0..N-1``."""
        try:
            index = operator.index(mode)
        except TypeError as exc:
            raise IndexOutOfRangeError(f"Mode must be an integer, got {mode!r}.") from exc
        if not 0 <= index < self.dimension:
            raise IndexOutOfRangeError(
                f"Mode {index} is outside 0..{self.dimension - 1}."
            )
        return index

    def basis_vector(self, mode: int, dtype=jnp.complex128) -> jax.Array:
        """Unit vector for single-particle state ``|mode>``."""
        index = self.check_mode(mode)
        return jnp.zeros((self.dimension,), dtype=dtype).at[index].set(1)
