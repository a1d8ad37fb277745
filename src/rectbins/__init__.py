"""
rectbins — 2D rectangle bin packing by greedy and local search.

Public API:
    from rectbins import Rect, Instance, PackingSolution, PermutationSolution
    from rectbins import solve_greedy, local_search, run_overlap_annealing
    from rectbins import GeometricNeighborhood, RuleBasedNeighborhood, OverlappingNeighborhood
"""

from rectbins.core import (
    BoxBin,
    Instance,
    InvariantViolation,
    PackingError,
    PackingSolution,
    PermutationSolution,
    Placement,
    PreconditionError,
    Rect,
)
from rectbins.algorithms.annealing import OverlapSchedule, run_overlap_annealing
from rectbins.algorithms.greedy import run_greedy
from rectbins.algorithms.greedy_packing import (
    LargestAreaFirst,
    LongestSideFirst,
    RectangleGreedyState,
    solve_greedy,
)
from rectbins.algorithms.local_search import local_search
from rectbins.algorithms.neighborhoods import (
    GeometricNeighborhood,
    OverlappingNeighborhood,
    RuleBasedNeighborhood,
)

__version__ = "0.1.0"

__all__ = [
    "BoxBin",
    "GeometricNeighborhood",
    "Instance",
    "InvariantViolation",
    "LargestAreaFirst",
    "LongestSideFirst",
    "OverlapSchedule",
    "OverlappingNeighborhood",
    "PackingError",
    "PackingSolution",
    "PermutationSolution",
    "Placement",
    "PreconditionError",
    "Rect",
    "RectangleGreedyState",
    "RuleBasedNeighborhood",
    "local_search",
    "run_greedy",
    "run_overlap_annealing",
    "solve_greedy",
]
