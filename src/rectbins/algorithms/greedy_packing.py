"""
Greedy rectangle packing — first-fit over bins, bottom-left fit within a bin.

Algorithm:
  1. Ask the selection strategy for the next remaining rectangle.
  2. Try every existing bin in order; inside a bin, try the candidate
     anchors bottom-left first, axis-aligned before rotated.
  3. The first bin that accepts the rectangle wins (first fit, not best fit).
  4. Otherwise open a new bin and put the rectangle at the origin.

Selection strategies:
  largest_area  — remaining rectangle with the largest area
  longest_side  — remaining rectangle with the longest side
Ties go to the rectangle that comes first in the remaining list.
"""

from __future__ import annotations

from typing import List, Optional, Union

from rectbins.algorithms.base import (
    GreedyState,
    SelectionStrategy,
    get_selection,
    register_selection,
)
from rectbins.algorithms.greedy import run_greedy
from rectbins.core.models import Instance, Rect
from rectbins.core.solution import PackingSolution


class RectangleGreedyState(GreedyState):
    """Packing built so far plus the rectangles still waiting."""

    def __init__(self, instance: Instance) -> None:
        self.solution = PackingSolution(instance)
        self.remaining: List[Rect] = list(instance.rects)

    def is_finished(self) -> bool:
        return not self.remaining

    def apply(self, rect: Rect) -> None:
        for pos, r in enumerate(self.remaining):
            if r.id == rect.id:
                del self.remaining[pos]
                break
        self.solution.insert_first_fit(rect)


# ─────────────────────────────────────────────────────────────────────────────
# Selection strategies
# ─────────────────────────────────────────────────────────────────────────────

@register_selection
class LargestAreaFirst(SelectionStrategy[RectangleGreedyState]):
    """Pick the remaining rectangle with the largest area."""

    name = "largest_area"

    def next_candidate(self, state: RectangleGreedyState) -> Optional[Rect]:
        if not state.remaining:
            return None
        return max(state.remaining, key=lambda r: r.area)


@register_selection
class LongestSideFirst(SelectionStrategy[RectangleGreedyState]):
    """Pick the remaining rectangle with the longest side, width or height."""

    name = "longest_side"

    def next_candidate(self, state: RectangleGreedyState) -> Optional[Rect]:
        if not state.remaining:
            return None
        return max(state.remaining, key=lambda r: r.longest_side)


def solve_greedy(
    instance: Instance,
    strategy: Union[SelectionStrategy, str] = "largest_area",
) -> PackingSolution:
    """Pack *instance* greedily; *strategy* may be an instance or a registered name."""
    if isinstance(strategy, str):
        strategy = get_selection(strategy)
    state = RectangleGreedyState(instance)
    run_greedy(state, strategy)
    return state.solution
