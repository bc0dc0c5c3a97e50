"""Open-system time evolution of many-body operators."""
from __future__ import annotations

from manybody.dynamics.master_equation import (
    MasterEquationResult,
    master_equation,
    to_qobj,
)

__all__ = [
    "MasterEquationResult",
    "master_equation",
    "to_qobj",
]
