"""Geometric domain model: rectangles, placements, bins, solutions."""

from .bin import BoxBin
from .errors import InvariantViolation, PackingError, PreconditionError
from .models import Instance, Placement, Rect
from .solution import PackingSolution, PermutationSolution

__all__ = [
    "BoxBin",
    "Instance",
    "InvariantViolation",
    "PackingError",
    "PackingSolution",
    "PermutationSolution",
    "Placement",
    "PreconditionError",
    "Rect",
]
