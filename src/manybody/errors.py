"""Exception types raised by basis construction and operator lifting.

Every error derives from :class:`ManyBodyError` and from the builtin that a
caller would naturally catch for the same condition, so ``except ValueError``
keeps working for shape and occupation problems.
"""
from __future__ import annotations

__all__ = [
    "ManyBodyError",
    "InvalidDimensionError",
    "IndexOutOfRangeError",
    "DimensionMismatchError",
    "InvalidOccupationError",
    "StateNotInBasisError",
]


class ManyBodyError(Exception):
    """Base class for all errors raised by this package."""


class InvalidDimensionError(ManyBodyError, ValueError):
    """A single-particle space was requested with a non-positive dimension."""


class IndexOutOfRangeError(ManyBodyError, IndexError):
    """A mode index lies outside ``0..N-1``."""


class DimensionMismatchError(ManyBodyError, ValueError):
    """An operator, vector or parameter list does not match the declared size."""


class InvalidOccupationError(ManyBodyError, ValueError):
    """An occupation state violates the bosonic or fermionic constraints."""


class StateNotInBasisError(ManyBodyError, KeyError):
    """A valid occupation state is absent from the enumerated basis.

    Raised during lookups and while lifting operators. During lifting it means
    the basis enumeration is inconsistent with the operator being lifted and
    should be treated as fatal.
    """

    def __str__(self) -> str:
        # KeyError repr-quotes its argument; keep the plain message.
        return str(self.args[0]) if self.args else ""
