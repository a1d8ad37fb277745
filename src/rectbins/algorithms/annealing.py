"""
Overlap-tolerant annealing — phased relax-then-tighten local search.

Schedule (defaults):
  phase k = 0..9:  local search with OverlappingNeighborhood(tolerance_k)
                   under the penalised cost, then
                   tolerance_{k+1} = tolerance_k - initial_tolerance / phases
                   penalty_{k+1}   = penalty_k * penalty_growth
  closing:         clear the penalty, legalise residual overlap, then one
                   strict GeometricNeighborhood local search.

Letting rectangles overlap early lets bins empty out in ways that strictly
non-overlapping moves cannot reach; the growing penalty pushes the overlap
back out before the closing pass.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from rectbins.algorithms.local_search import local_search
from rectbins.algorithms.neighborhoods import GeometricNeighborhood, OverlappingNeighborhood
from rectbins.core.errors import PreconditionError
from rectbins.core.solution import PackingSolution

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OverlapSchedule:
    """
    Parameters of the annealing schedule.

    Attributes:
        phases:            Number of overlap-tolerant local searches.
        initial_penalty:   Penalty factor of the first phase.
        penalty_growth:    Multiplier applied to the penalty after each phase.
        initial_tolerance: Overlap ratio allowed in the first phase (0..1).
    """
    phases: int = 10
    initial_penalty: int = 10
    penalty_growth: int = 5
    initial_tolerance: float = 1.0

    def __post_init__(self) -> None:
        if self.phases < 1:
            raise PreconditionError(f"phases must be >= 1, got {self.phases}")
        if self.initial_penalty < 1:
            raise PreconditionError(f"initial_penalty must be >= 1, got {self.initial_penalty}")
        if self.penalty_growth < 1:
            raise PreconditionError(f"penalty_growth must be >= 1, got {self.penalty_growth}")
        if not 0.0 <= self.initial_tolerance <= 1.0:
            raise PreconditionError(
                f"initial_tolerance must be within [0, 1], got {self.initial_tolerance}"
            )

    def tolerance(self, phase: int) -> float:
        """Overlap tolerance used during *phase* (0-based)."""
        step = self.initial_tolerance / self.phases
        return max(0.0, self.initial_tolerance - phase * step)

    def penalty(self, phase: int) -> int:
        return self.initial_penalty * self.penalty_growth ** phase

    def to_dict(self) -> dict:
        return {
            "phases": self.phases,
            "initial_penalty": self.initial_penalty,
            "penalty_growth": self.penalty_growth,
            "initial_tolerance": self.initial_tolerance,
        }


def legalize(solution: PackingSolution) -> PackingSolution:
    """
    Strict copy of *solution*: any placement that intersects an earlier one
    in its bin is lifted out and re-inserted first-fit (possibly into a new
    bin). Conflict-free placements keep their positions.
    """
    result = PackingSolution(solution.instance)
    evicted = []
    for b in solution.bins:
        kept = result.new_bin()
        for p in b.placements:
            if not kept.try_place(p.rect, p.x, p.y, p.rotated):
                evicted.append(p.rect)
    for rect in evicted:
        result.insert_first_fit(rect)
    if evicted:
        logger.info("Legalised %d overlapping rectangles", len(evicted))
    return result


def run_overlap_annealing(
    trivial: PackingSolution,
    schedule: Optional[OverlapSchedule] = None,
) -> PackingSolution:
    """
    Run the phased overlap-tolerant search from *trivial* (normally the
    one-rectangle-per-bin solution) and return a strictly valid packing.
    """
    schedule = schedule or OverlapSchedule()
    current = trivial.with_penalty(schedule.initial_penalty)

    for phase in range(schedule.phases):
        tolerance = schedule.tolerance(phase)
        current.penalty_factor = schedule.penalty(phase)
        current = local_search(current, OverlappingNeighborhood(tolerance))
        logger.info(
            "Phase %d/%d: tolerance=%.2f penalty=%d bins=%d overlap=%d cost=%s",
            phase + 1, schedule.phases, tolerance, current.penalty_factor,
            current.bin_count, current.total_overlap_area(), current.cost(),
        )

    strict = legalize(current.with_penalty(None))
    return local_search(strict, GeometricNeighborhood())
