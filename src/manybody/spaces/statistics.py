"""Exchange statistics and the ladder-operator matrix elements they imply.

The statistics tag is stored on every many-body basis. Everything that depends
on it (occupation validation, ladder amplitudes, fermionic signs) is selected
through ``plum`` multiple dispatch on the tag type.

Fermionic sign convention (Jordan-Wigner ordering by mode index):

    c_j   |..., n_j, ...> = (-1)**(n_0 + ... + n_{j-1}) |..., n_j - 1, ...>
    c_j^+ |..., n_j, ...> = (-1)**(n_0 + ... + n_{j-1}) |..., n_j + 1, ...>

with the sign evaluated on the state the operator acts on. Bosonic ladder
operators carry ``sqrt(n)`` and ``sqrt(n + 1)`` with no sign.
"""
from __future__ import annotations

import abc
import math
import operator
from collections.abc import Sequence
from dataclasses import dataclass

from plum import dispatch

from manybody.errors import InvalidOccupationError

Occupation = tuple[int, ...]
LadderResult = tuple[Occupation, float]

__all__ = [
    "Occupation",
    "Statistics",
    "Fermions",
    "Bosons",
    "FERMIONS",
    "BOSONS",
    "as_statistics",
    "validate_occupation",
    "mode_capacity",
    "annihilate",
    "create",
]


class Statistics(abc.ABC):
    """Abstract base class for particle exchange statistics."""

    name: str


@dataclass(frozen=True)
class Fermions(Statistics):
    """Antisymmetric statistics: occupations in {0, 1}."""

    name: str = "fermions"


@dataclass(frozen=True)
class Bosons(Statistics):
    """Symmetric statistics: any non-negative occupation."""

    name: str = "bosons"


FERMIONS = Fermions()
BOSONS = Bosons()


def as_statistics(value: Statistics | str) -> Statistics:
    """Accept a statistics instance or one of ``"fermions"``/``"bosons"``."""
    if isinstance(value, Statistics):
        return value
    key = str(value).lower()
    if key in ("fermion", "fermions", "fermionic"):
        return FERMIONS
    if key in ("boson", "bosons", "bosonic"):
        return BOSONS
    raise ValueError(f"Unknown statistics {value!r}.")


def _as_occupation(occupation: Sequence[int], n_modes: int) -> Occupation:
    try:
        entries = tuple(operator.index(n) for n in occupation)
    except TypeError as exc:
        raise InvalidOccupationError(
            f"Occupation entries must be integers, got {tuple(occupation)!r}."
        ) from exc
    if len(entries) != n_modes:
        raise InvalidOccupationError(
            f"Occupation {entries} has {len(entries)} entries, expected {n_modes}."
        )
    if any(n < 0 for n in entries):
        raise InvalidOccupationError(f"Occupation {entries} has negative entries.")
    return entries


@dispatch
def validate_occupation(statistics: Statistics, occupation, n_modes) -> Occupation:
    """Return ``occupation`` as a tuple of ints or raise InvalidOccupationError."""
    raise TypeError(f"Unsupported statistics type: {type(statistics)!r}")


@validate_occupation.dispatch
def validate_occupation(statistics: Bosons, occupation, n_modes) -> Occupation:
    del statistics
    return _as_occupation(occupation, n_modes)


@validate_occupation.dispatch
def validate_occupation(statistics: Fermions, occupation, n_modes) -> Occupation:
    del statistics
    entries = _as_occupation(occupation, n_modes)
    if any(n > 1 for n in entries):
        raise InvalidOccupationError(
            f"Occupation {entries} puts more than one fermion in a mode."
        )
    return entries


@dispatch
def mode_capacity(statistics: Statistics) -> int | None:
    """Largest occupation a single mode may hold, ``None`` if unbounded."""
    raise TypeError(f"Unsupported statistics type: {type(statistics)!r}")


@mode_capacity.dispatch
def mode_capacity(statistics: Bosons) -> int | None:
    del statistics
    return None


@mode_capacity.dispatch
def mode_capacity(statistics: Fermions) -> int | None:
    del statistics
    return 1


def _shifted(occupation: Occupation, mode: int, delta: int) -> Occupation:
    entries = list(occupation)
    entries[mode] += delta
    return tuple(entries)


def _parity_sign(occupation: Occupation, mode: int) -> float:
    return -1.0 if sum(occupation[:mode]) % 2 else 1.0


@dispatch
def annihilate(statistics: Statistics, occupation, mode) -> LadderResult | None:
    """Apply ``c_mode`` to a basis state.

    Returns:
        ``(new_occupation, amplitude)``, or ``None`` when the mode is empty.
    """
    raise TypeError(f"Unsupported statistics type: {type(statistics)!r}")


@annihilate.dispatch
def annihilate(statistics: Bosons, occupation, mode) -> LadderResult | None:
    del statistics
    n = occupation[mode]
    if n == 0:
        return None
    return _shifted(occupation, mode, -1), math.sqrt(n)


@annihilate.dispatch
def annihilate(statistics: Fermions, occupation, mode) -> LadderResult | None:
    del statistics
    if occupation[mode] == 0:
        return None
    return _shifted(occupation, mode, -1), _parity_sign(occupation, mode)


@dispatch
def create(statistics: Statistics, occupation, mode) -> LadderResult | None:
    """Apply ``c_mode^+`` to a basis state.

    Returns:
        ``(new_occupation, amplitude)``, or ``None`` when the action violates
        Pauli exclusion.
    """
    raise TypeError(f"Unsupported statistics type: {type(statistics)!r}")


@create.dispatch
def create(statistics: Bosons, occupation, mode) -> LadderResult | None:
    del statistics
    n = occupation[mode]
    return _shifted(occupation, mode, 1), math.sqrt(n + 1)


@create.dispatch
def create(statistics: Fermions, occupation, mode) -> LadderResult | None:
    del statistics
    if occupation[mode] == 1:
        return None
    return _shifted(occupation, mode, 1), _parity_sign(occupation, mode)
