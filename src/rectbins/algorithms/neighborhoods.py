"""
Local-search neighborhoods.

GeometricNeighborhood    — move one rectangle into another existing bin
RuleBasedNeighborhood    — swap two positions of a permutation
OverlappingNeighborhood  — like geometric, but tolerate bounded overlap and
                           fall back to opening a new bin

All neighborhoods are generators: neighbors are built only when the local
search pulls them, so first improvement stops the enumeration early.
"""

from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

import numpy as np

from rectbins.algorithms.base import Neighborhood
from rectbins.core.bin import BoxBin, Position
from rectbins.core.errors import PreconditionError
from rectbins.core.models import Placement
from rectbins.core.solution import PackingSolution, PermutationSolution


def swap_remove(items: list, index: int):
    """Remove and return ``items[index]``, moving the last item into its slot."""
    last = items.pop()
    if index == len(items):
        return last
    removed = items[index]
    items[index] = last
    return removed


def relocate(
    solution: PackingSolution,
    src_idx: int,
    p_idx: int,
    tgt_idx: Optional[int],
    position: Position,
) -> PackingSolution:
    """
    Copy of *solution* with placement ``p_idx`` of bin ``src_idx`` moved.

    ``tgt_idx=None`` opens a new bin at the end. The placement and, once
    empty, the source bin are swap-removed: the last element takes the
    freed slot.
    """
    new_solution = solution.copy()
    src = new_solution.bins[src_idx]
    rect = swap_remove(src.placements, p_idx).rect
    x, y, rotated = position
    if tgt_idx is None:
        target = BoxBin(solution.instance.box_size)
        new_solution.bins.append(target)
    else:
        target = new_solution.bins[tgt_idx]
    target.placements.append(Placement(rect, x, y, rotated))
    if src.is_empty():
        swap_remove(new_solution.bins, src_idx)
    return new_solution


# ─────────────────────────────────────────────────────────────────────────────
# Geometric
# ─────────────────────────────────────────────────────────────────────────────

class GeometricNeighborhood(Neighborhood[PackingSolution]):
    """
    For every placement and every other bin: if the rectangle fits the other
    bin at a candidate anchor, yield the solution with it moved there.

    Never opens bins, so the bin count can only go down.
    """

    name = "geometric"

    def neighbors(self, solution: PackingSolution) -> Iterator[PackingSolution]:
        bins = solution.bins
        for src_idx, src in enumerate(bins):
            for p_idx, placement in enumerate(src.placements):
                for tgt_idx, tgt in enumerate(bins):
                    if tgt_idx == src_idx:
                        continue
                    pos = tgt.find_position(placement.rect)
                    if pos is not None:
                        yield relocate(solution, src_idx, p_idx, tgt_idx, pos)


# ─────────────────────────────────────────────────────────────────────────────
# Rule-based (permutation)
# ─────────────────────────────────────────────────────────────────────────────

class RuleBasedNeighborhood(Neighborhood[PermutationSolution]):
    """
    Swap two positions of the rectangle sequence.

    Args:
        sample_size: None enumerates every pair i < j in order. Otherwise
                     draw this many uniformly random index pairs and skip
                     pairs with i == j, so fewer neighbors may be yielded.
        rng:         Random source for sampling; required for reproducible
                     runs (a fresh unseeded generator is used if omitted).
    """

    name = "rule_based"

    def __init__(
        self,
        sample_size: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        if sample_size is not None and sample_size < 1:
            raise PreconditionError(f"sample_size must be >= 1, got {sample_size}")
        self.sample_size = sample_size
        self.rng = rng if rng is not None else np.random.default_rng()

    def swap_pairs(self, n: int) -> Iterator[Tuple[int, int]]:
        if self.sample_size is None:
            for i in range(n):
                for j in range(i + 1, n):
                    yield i, j
            return
        if n < 2:
            return
        for _ in range(self.sample_size):
            i, j = (int(v) for v in self.rng.integers(0, n, size=2))
            if i != j:
                yield i, j

    def neighbors(self, solution: PermutationSolution) -> Iterator[PermutationSolution]:
        for i, j in self.swap_pairs(len(solution.sequence)):
            yield solution.swapped(i, j)


# ─────────────────────────────────────────────────────────────────────────────
# Overlap-tolerant
# ─────────────────────────────────────────────────────────────────────────────

class OverlappingNeighborhood(Neighborhood[PackingSolution]):
    """
    Relocation moves that accept partial overlap.

    A rectangle may go to an anchor where its overlap with every placement,
    divided by the larger of the two areas, is at most ``max_overlap``
    (0 forbids overlap, 1 allows anything). All such existing-bin moves are
    yielded first; afterwards, every rectangle that no other bin admits gets
    a move into a brand-new bin (unless it is already alone in its bin).

    Only meaningful under the penalised cost, so the solution must carry a
    penalty factor.
    """

    name = "overlapping"

    def __init__(self, max_overlap: float) -> None:
        if not 0.0 <= max_overlap <= 1.0:
            raise PreconditionError(f"max_overlap must be within [0, 1], got {max_overlap}")
        self.max_overlap = max_overlap

    def neighbors(self, solution: PackingSolution) -> Iterator[PackingSolution]:
        if solution.penalty_factor is None:
            raise PreconditionError("OverlappingNeighborhood requires a solution with a penalty factor")

        homeless: List[Tuple[int, int]] = []
        bins = solution.bins
        for src_idx, src in enumerate(bins):
            for p_idx, placement in enumerate(src.placements):
                admitted = False
                for tgt_idx, tgt in enumerate(bins):
                    if tgt_idx == src_idx:
                        continue
                    pos = tgt.find_position_with_overlap(placement.rect, self.max_overlap)
                    if pos is not None:
                        admitted = True
                        yield relocate(solution, src_idx, p_idx, tgt_idx, pos)
                if not admitted and len(src.placements) > 1:
                    homeless.append((src_idx, p_idx))

        for src_idx, p_idx in homeless:
            yield relocate(solution, src_idx, p_idx, None, (0, 0, False))
