"""Occupation-number enumeration and the many-body basis."""
from __future__ import annotations

import itertools
import logging
import operator
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field

from manybody.errors import (
    DimensionMismatchError,
    IndexOutOfRangeError,
    InvalidDimensionError,
    InvalidOccupationError,
    StateNotInBasisError,
)
from manybody.spaces.single_particle import SingleParticleSpace
from manybody.spaces.statistics import (
    BOSONS,
    FERMIONS,
    Occupation,
    Statistics,
    as_statistics,
    mode_capacity,
    validate_occupation,
)

logger = logging.getLogger(__name__)

ParticleNumbers = int | Sequence[int]

__all__ = [
    "ManyBodyBasis",
    "fermion_states",
    "boson_states",
    "boson_states_with_cutoff",
]


def _n_modes(space_or_n: SingleParticleSpace | int) -> int:
    if isinstance(space_or_n, SingleParticleSpace):
        return space_or_n.dimension
    return SingleParticleSpace(space_or_n).dimension


def _particle_numbers(n_particles: ParticleNumbers) -> tuple[int, ...]:
    if isinstance(n_particles, Iterable):
        values = tuple(operator.index(k) for k in n_particles)
    else:
        values = (operator.index(n_particles),)
    if not values:
        raise ValueError("At least one particle number is required.")
    if any(k < 0 for k in values):
        raise InvalidOccupationError(f"Particle numbers must be >= 0, got {values}.")
    return tuple(sorted(set(values)))


def _max_occupation(
    max_occupation: int | Sequence[int], n_modes: int
) -> tuple[int, ...]:
    if isinstance(max_occupation, Iterable):
        caps = tuple(operator.index(m) for m in max_occupation)
        if len(caps) != n_modes:
            raise DimensionMismatchError(
                f"Got {len(caps)} occupation caps for {n_modes} modes."
            )
    else:
        caps = (operator.index(max_occupation),) * n_modes
    if any(m < 0 for m in caps):
        raise InvalidOccupationError(f"Occupation caps must be >= 0, got {caps}.")
    return caps


def _compositions(total: int, n_modes: int) -> Iterator[Occupation]:
    """Stars and bars: all ``n_modes``-tuples of non-negative ints summing to ``total``."""
    for bars in itertools.combinations(range(total + n_modes - 1), n_modes - 1):
        edges = (-1,) + bars + (total + n_modes - 1,)
        yield tuple(edges[i + 1] - edges[i] - 1 for i in range(n_modes))


def fermion_states(
    space_or_n: SingleParticleSpace | int, n_particles: ParticleNumbers
) -> list[Occupation]:
    """All {0, 1} occupations whose total is one of ``n_particles``.

    Each total ``k`` contributes ``C(N, k)`` states. The result is sorted
    lexicographically over the occupation tuple.
    """
    n_modes = _n_modes(space_or_n)
    states = []
    for k in _particle_numbers(n_particles):
        for occupied in itertools.combinations(range(n_modes), k):
            occupation = [0] * n_modes
            for mode in occupied:
                occupation[mode] = 1
            states.append(tuple(occupation))
    return sorted(states)


def boson_states(
    space_or_n: SingleParticleSpace | int, n_particles: ParticleNumbers
) -> list[Occupation]:
    """All non-negative occupations whose total is one of ``n_particles``.

    Each total ``k`` contributes ``C(N + k - 1, k)`` states.
    """
    n_modes = _n_modes(space_or_n)
    states = []
    for k in _particle_numbers(n_particles):
        states.extend(_compositions(k, n_modes))
    return sorted(states)


def boson_states_with_cutoff(
    space_or_n: SingleParticleSpace | int,
    max_occupation: int | Sequence[int],
    n_particles: ParticleNumbers | None = None,
) -> list[Occupation]:
    """Cartesian product of ``0..max_i`` per mode, optionally filtered by total."""
    n_modes = _n_modes(space_or_n)
    caps = _max_occupation(max_occupation, n_modes)
    allowed = None if n_particles is None else set(_particle_numbers(n_particles))
    ranges = [range(cap + 1) for cap in caps]
    return [
        occupation
        for occupation in itertools.product(*ranges)
        if allowed is None or sum(occupation) in allowed
    ]


@dataclass(frozen=True, eq=False)
class ManyBodyBasis:
    """Ordered, deduplicated set of occupation states.

    The basis index of a state is its position in ``states``; ``index`` is a
    dict lookup. ``particle_numbers`` and ``max_occupation`` declare the
    sector the basis spans. Lifted operators are projected onto that sector,
    while a state that lies inside the sector but is missing from ``states``
    is an enumeration error.

    Attributes:
        statistics: Exchange statistics shared by every state.
        n_modes: Number of single-particle modes N.
        states: Occupation tuples in basis order.
        particle_numbers: Allowed particle totals, or ``None`` if undeclared.
        max_occupation: Per-mode occupation caps, or ``None`` if undeclared.
    """

    statistics: Statistics
    n_modes: int
    states: tuple[Occupation, ...]
    particle_numbers: tuple[int, ...] | None = None
    max_occupation: tuple[int, ...] | None = None
    _lookup: dict[Occupation, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        statistics = as_statistics(self.statistics)
        try:
            n_modes = operator.index(self.n_modes)
        except TypeError as exc:
            raise InvalidDimensionError(
                f"Number of modes must be an integer, got {self.n_modes!r}."
            ) from exc
        if n_modes < 1:
            raise InvalidDimensionError(f"Number of modes must be >= 1, got {n_modes}.")
        particle_numbers = (
            None
            if self.particle_numbers is None
            else _particle_numbers(self.particle_numbers)
        )
        max_occupation = (
            None
            if self.max_occupation is None
            else _max_occupation(self.max_occupation, n_modes)
        )

        lookup: dict[Occupation, int] = {}
        states: list[Occupation] = []
        for raw in self.states:
            occupation = validate_occupation(statistics, raw, n_modes)
            if particle_numbers is not None and sum(occupation) not in particle_numbers:
                raise InvalidOccupationError(
                    f"Occupation {occupation} has {sum(occupation)} particles, "
                    f"allowed totals are {particle_numbers}."
                )
            if max_occupation is not None and any(
                n > cap for n, cap in zip(occupation, max_occupation)
            ):
                raise InvalidOccupationError(
                    f"Occupation {occupation} exceeds the caps {max_occupation}."
                )
            if occupation in lookup:
                continue
            lookup[occupation] = len(states)
            states.append(occupation)

        object.__setattr__(self, "statistics", statistics)
        object.__setattr__(self, "n_modes", n_modes)
        object.__setattr__(self, "states", tuple(states))
        object.__setattr__(self, "particle_numbers", particle_numbers)
        object.__setattr__(self, "max_occupation", max_occupation)
        object.__setattr__(self, "_lookup", lookup)
        logger.debug(
            "Built %s basis: n_modes=%d dim=%d particle_numbers=%s",
            statistics.name,
            n_modes,
            len(states),
            particle_numbers,
        )

    @classmethod
    def fermions(
        cls,
        space_or_n: SingleParticleSpace | int,
        n_particles: ParticleNumbers,
    ) -> ManyBodyBasis:
        """Fermionic basis with the given particle number(s)."""
        n_modes = _n_modes(space_or_n)
        numbers = _particle_numbers(n_particles)
        return cls(
            statistics=FERMIONS,
            n_modes=n_modes,
            states=tuple(fermion_states(n_modes, numbers)),
            particle_numbers=numbers,
        )

    @classmethod
    def bosons(
        cls,
        space_or_n: SingleParticleSpace | int,
        n_particles: ParticleNumbers | None = None,
        *,
        max_occupation: int | Sequence[int] | None = None,
    ) -> ManyBodyBasis:
        """Bosonic basis with fixed particle number(s), per-mode caps, or both."""
        n_modes = _n_modes(space_or_n)
        if max_occupation is None:
            if n_particles is None:
                raise ValueError(
                    "A bosonic basis needs n_particles, max_occupation, or both."
                )
            numbers = _particle_numbers(n_particles)
            states = boson_states(n_modes, numbers)
            caps = None
        else:
            numbers = None if n_particles is None else _particle_numbers(n_particles)
            caps = _max_occupation(max_occupation, n_modes)
            states = boson_states_with_cutoff(n_modes, caps, numbers)
        return cls(
            statistics=BOSONS,
            n_modes=n_modes,
            states=tuple(states),
            particle_numbers=numbers,
            max_occupation=caps,
        )

    @property
    def dimension(self) -> int:
        return len(self.states)

    def __len__(self) -> int:
        return len(self.states)

    def __iter__(self) -> Iterator[Occupation]:
        return iter(self.states)

    def __getitem__(self, index: int) -> Occupation:
        return self.states[index]

    def __contains__(self, occupation: object) -> bool:
        try:
            return tuple(occupation) in self._lookup  # type: ignore[arg-type]
        except TypeError:
            return False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ManyBodyBasis):
            return NotImplemented
        return (
            self.statistics == other.statistics
            and self.n_modes == other.n_modes
            and self.states == other.states
            and self.particle_numbers == other.particle_numbers
            and self.max_occupation == other.max_occupation
        )

    def __hash__(self) -> int:
        return hash(
            (
                self.statistics,
                self.n_modes,
                self.states,
                self.particle_numbers,
                self.max_occupation,
            )
        )

    def check_mode(self, mode: int) -> int:
        try:
            index = operator.index(mode)
        except TypeError as exc:
            raise IndexOutOfRangeError(f"Mode must be an integer, got {mode!r}.") from exc
        if not 0 <= index < self.n_modes:
            raise IndexOutOfRangeError(
                f"Mode {index} is outside 0..{self.n_modes - 1}."
            )
        return index

    def index(self, occupation: Sequence[int]) -> int:
        """Basis index of ``occupation``.

        Raises:
            InvalidOccupationError: If the occupation violates the statistics.
            StateNotInBasisError: If it is valid but not part of this basis.
        """
        key = validate_occupation(self.statistics, occupation, self.n_modes)
        try:
            return self._lookup[key]
        except KeyError:
            raise StateNotInBasisError(
                f"Occupation {key} is not in this {self.statistics.name} basis."
            ) from None

    def find(self, occupation: Occupation) -> int | None:
        """Index of an already validated occupation tuple, or ``None``."""
        return self._lookup.get(occupation)

    def in_sector(self, occupation: Occupation) -> bool:
        """Whether ``occupation`` satisfies the declared sector constraints."""
        if (
            self.particle_numbers is not None
            and sum(occupation) not in self.particle_numbers
        ):
            return False
        if self.max_occupation is not None and any(
            n > cap for n, cap in zip(occupation, self.max_occupation)
        ):
            return False
        capacity = mode_capacity(self.statistics)
        return capacity is None or all(n <= capacity for n in occupation)
