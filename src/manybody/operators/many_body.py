"""Matrix container for operators on a many-body basis."""
from __future__ import annotations

from manybody import config  # noqa: F401 - JAX config must be imported first

from collections.abc import Sequence
from dataclasses import dataclass
from numbers import Number

import jax
import jax.numpy as jnp
import numpy as np
from jax.experimental import sparse as jsparse

from manybody.errors import DimensionMismatchError

__all__ = ["ManyBodyOperator", "from_triplets"]


@dataclass(frozen=True)
class ManyBodyOperator:
    """``M x M`` operator stored densely or as a ``BCOO`` sparse matrix.

    Only the dimension of the basis is kept. Dimension compatibility is checked
    on construction and whenever operators are combined.
    """

    data: jax.Array | jsparse.BCOO

    def __post_init__(self) -> None:
        data = self.data
        if not isinstance(data, jsparse.BCOO):
            data = jnp.asarray(data)
        if data.ndim != 2 or data.shape[0] != data.shape[1]:
            raise DimensionMismatchError(
                f"Many-body operator must be square, got shape {data.shape}."
            )
        object.__setattr__(self, "data", data)

    @property
    def dim(self) -> int:
        return int(self.data.shape[0])

    @property
    def shape(self) -> tuple[int, int]:
        return (self.dim, self.dim)

    @property
    def dtype(self):
        return self.data.dtype

    @property
    def is_sparse(self) -> bool:
        return isinstance(self.data, jsparse.BCOO)

    def to_dense(self) -> jax.Array:
        if self.is_sparse:
            return self.data.todense()
        return self.data

    def to_sparse(self) -> ManyBodyOperator:
        if self.is_sparse:
            return self
        return ManyBodyOperator(jsparse.BCOO.fromdense(self.data))

    def as_dense(self) -> ManyBodyOperator:
        return ManyBodyOperator(self.to_dense())

    def dag(self) -> ManyBodyOperator:
        if self.is_sparse:
            return ManyBodyOperator(
                jsparse.BCOO(
                    (jnp.conj(self.data.data), self.data.indices[:, ::-1]),
                    shape=self.shape,
                )
            )
        return ManyBodyOperator(jnp.conj(self.data).T)

    def _check_dim(self, other_dim: int) -> None:
        if other_dim != self.dim:
            raise DimensionMismatchError(
                f"Dimension {other_dim} does not match operator dimension {self.dim}."
            )

    def _combine(self, other: ManyBodyOperator, sign: float) -> ManyBodyOperator:
        self._check_dim(other.dim)
        if self.is_sparse and other.is_sparse:
            data = jnp.concatenate([self.data.data, sign * other.data.data])
            indices = jnp.concatenate([self.data.indices, other.data.indices])
            return ManyBodyOperator(
                jsparse.BCOO((data, indices), shape=self.shape).sum_duplicates()
            )
        return ManyBodyOperator(self.to_dense() + sign * other.to_dense())

    def __add__(self, other):
        if not isinstance(other, ManyBodyOperator):
            return NotImplemented
        return self._combine(other, 1.0)

    def __sub__(self, other):
        if not isinstance(other, ManyBodyOperator):
            return NotImplemented
        return self._combine(other, -1.0)

    def __neg__(self):
        return -1.0 * self

    def __mul__(self, scalar):
        if not isinstance(scalar, (Number, jax.Array)):
            return NotImplemented
        if self.is_sparse:
            return ManyBodyOperator(
                jsparse.BCOO(
                    (scalar * self.data.data, self.data.indices), shape=self.shape
                )
            )
        return ManyBodyOperator(scalar * self.data)

    __rmul__ = __mul__

    def __matmul__(self, other):
        if isinstance(other, ManyBodyOperator):
            self._check_dim(other.dim)
            if self.is_sparse and other.is_sparse:
                return ManyBodyOperator(self.data @ other.data)
            return ManyBodyOperator(self.to_dense() @ other.to_dense())
        vec = jnp.asarray(other)
        self._check_dim(vec.shape[0])
        return self.data @ vec


def from_triplets(
    rows: Sequence[int],
    cols: Sequence[int],
    values: Sequence[complex],
    dim: int,
    *,
    sparse: bool = False,
    dtype=jnp.complex128,
) -> ManyBodyOperator:
    """Assemble an operator from COO triplets, summing repeated entries."""
    rows = jnp.asarray(np.asarray(rows, dtype=np.int32).reshape(-1))
    cols = jnp.asarray(np.asarray(cols, dtype=np.int32).reshape(-1))
    values = np.asarray(values).reshape(-1)
    if not jnp.issubdtype(dtype, jnp.complexfloating) and np.iscomplexobj(values):
        if np.any(values.imag != 0):
            raise ValueError(f"Complex matrix elements cannot be stored as {dtype}.")
        values = values.real
    values = jnp.asarray(values, dtype=dtype)
    if sparse:
        indices = jnp.stack([rows, cols], axis=1)
        mat = jsparse.BCOO((values, indices), shape=(dim, dim))
        if values.size:
            mat = mat.sum_duplicates()
        return ManyBodyOperator(mat)
    dense = jnp.zeros((dim, dim), dtype=dtype).at[rows, cols].add(values)
    return ManyBodyOperator(dense)
