"""Tests for ladder matrix elements selected by exchange statistics."""
from __future__ import annotations

import math
import unittest

from manybody.errors import InvalidOccupationError
from manybody.spaces import BOSONS, FERMIONS
from manybody.spaces.statistics import (
    annihilate,
    as_statistics,
    create,
    mode_capacity,
    validate_occupation,
)


class StatisticsTest(unittest.TestCase):
    def test_bosonic_ladder_elements(self) -> None:
        self.assertEqual(annihilate(BOSONS, (0, 3, 1), 1), ((0, 2, 1), math.sqrt(3)))
        self.assertEqual(create(BOSONS, (0, 3, 1), 1), ((0, 4, 1), 2.0))
        self.assertIsNone(annihilate(BOSONS, (0, 3, 1), 0))

    def test_fermionic_signs_count_lower_modes(self) -> None:
        self.assertEqual(annihilate(FERMIONS, (1, 1, 0, 1), 3), ((1, 1, 0, 0), 1.0))
        self.assertEqual(annihilate(FERMIONS, (1, 0, 0, 1), 3), ((1, 0, 0, 0), -1.0))
        self.assertEqual(create(FERMIONS, (1, 0, 1, 0), 3), ((1, 0, 1, 1), 1.0))
        self.assertEqual(create(FERMIONS, (0, 0, 1, 0), 3), ((0, 0, 1, 1), -1.0))
        self.assertEqual(create(FERMIONS, (0, 1, 1, 0), 0), ((1, 1, 1, 0), 1.0))

    def test_pauli_exclusion(self) -> None:
        self.assertIsNone(create(FERMIONS, (0, 1), 1))
        self.assertIsNone(annihilate(FERMIONS, (0, 1), 0))

    def test_validate_occupation(self) -> None:
        self.assertEqual(validate_occupation(BOSONS, [2, 0, 5], 3), (2, 0, 5))
        with self.assertRaises(InvalidOccupationError):
            validate_occupation(FERMIONS, (2, 0, 0), 3)
        with self.assertRaises(InvalidOccupationError):
            validate_occupation(BOSONS, (1, 0), 3)
        with self.assertRaises(InvalidOccupationError):
            validate_occupation(BOSONS, (1, -1, 0), 3)

    def test_mode_capacity(self) -> None:
        self.assertEqual(mode_capacity(FERMIONS), 1)
        self.assertIsNone(mode_capacity(BOSONS))

    def test_as_statistics(self) -> None:
        self.assertIs(as_statistics("Fermions"), FERMIONS)
        self.assertIs(as_statistics("boson"), BOSONS)
        self.assertIs(as_statistics(BOSONS), BOSONS)
        with self.assertRaises(ValueError):
            as_statistics("parafermions")


if __name__ == "__main__":
    unittest.main()
