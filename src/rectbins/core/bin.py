"""
BoxBin — a fixed-capacity square container holding placements.

The bin is the single collision authority of the package:

  Placement checks:
    .can_place(rect, x, y, rotated)        — bounds + no-intersection test
    .try_place(rect, x, y, rotated)        — same test, appends on success

  Candidate-anchor search (bottom-left fit):
    .candidate_anchors()                   — origin + corners of placements
    .find_position(rect)                   — first non-overlapping anchor
    .find_position_with_overlap(rect, tol) — first anchor within tolerance
    .place_first_fit(rect)                 — find_position + append

  Inspection:
    .used_area, .utilization, .overlap_area(), .to_dict()
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from rectbins.core.models import Placement, Rect

Position = Tuple[int, int, bool]  # (x, y, rotated)


class BoxBin:
    """
    A square bin of side ``capacity`` with an insertion-ordered list of
    placements.

    In strict use no two placements intersect and every placement lies in
    [0, capacity) on both axes. The overlap-tolerant search relaxes only the
    first half of that invariant.
    """

    __slots__ = ("capacity", "placements")

    def __init__(self, capacity: int, placements: Optional[List[Placement]] = None) -> None:
        self.capacity: int = capacity
        self.placements: List[Placement] = list(placements) if placements else []

    # ── Placement checks ─────────────────────────────────────────────────

    def fits_bounds(self, rect: Rect, x: int, y: int, rotated: bool) -> bool:
        w = rect.height if rotated else rect.width
        h = rect.width if rotated else rect.height
        return x >= 0 and y >= 0 and x + w <= self.capacity and y + h <= self.capacity

    def can_place(self, rect: Rect, x: int, y: int, rotated: bool = False) -> bool:
        """True if *rect* fits at (x, y) without leaving the bin or intersecting."""
        if not self.fits_bounds(rect, x, y, rotated):
            return False
        candidate = Placement(rect, x, y, rotated)
        return not any(candidate.intersects(p) for p in self.placements)

    def try_place(self, rect: Rect, x: int, y: int, rotated: bool = False) -> bool:
        """Append the placement if it is legal. Returns whether it was added."""
        if not self.can_place(rect, x, y, rotated):
            return False
        self.placements.append(Placement(rect, x, y, rotated))
        return True

    def can_place_with_overlap(
        self, rect: Rect, x: int, y: int, rotated: bool, tolerance: float,
    ) -> bool:
        """Bounds check plus pairwise overlap ratio <= *tolerance*."""
        if not self.fits_bounds(rect, x, y, rotated):
            return False
        candidate = Placement(rect, x, y, rotated)
        return all(candidate.overlap_ratio(p) <= tolerance for p in self.placements)

    # ── Candidate anchors ────────────────────────────────────────────────

    def candidate_anchors(self) -> List[Tuple[int, int]]:
        """
        Candidate lower-left anchors sorted bottom-left (y, then x).

        The origin plus, for every placement, its bottom-right corner
        (x + width, y) and its top-left corner (x, y + height); corners on or
        beyond the bin edge are dropped.
        """
        anchors = {(0, 0)}
        cap = self.capacity
        for p in self.placements:
            right = (p.x_max, p.y)
            top = (p.x, p.y_max)
            if right[0] < cap and right[1] < cap:
                anchors.add(right)
            if top[0] < cap and top[1] < cap:
                anchors.add(top)
        return sorted(anchors, key=lambda a: (a[1], a[0]))

    def find_position(self, rect: Rect) -> Optional[Position]:
        """First anchor (axis-aligned before rotated) where *rect* fits."""
        for x, y in self.candidate_anchors():
            if self.can_place(rect, x, y, False):
                return x, y, False
            if self.can_place(rect, x, y, True):
                return x, y, True
        return None

    def find_position_with_overlap(self, rect: Rect, tolerance: float) -> Optional[Position]:
        """Like :meth:`find_position` but accepts overlap up to *tolerance*."""
        for x, y in self.candidate_anchors():
            if self.can_place_with_overlap(rect, x, y, False, tolerance):
                return x, y, False
            if self.can_place_with_overlap(rect, x, y, True, tolerance):
                return x, y, True
        return None

    def place_first_fit(self, rect: Rect) -> bool:
        """Place *rect* at the first legal candidate anchor, if any."""
        pos = self.find_position(rect)
        if pos is None:
            return False
        x, y, rotated = pos
        return self.try_place(rect, x, y, rotated)

    # ── Inspection ───────────────────────────────────────────────────────

    @property
    def used_area(self) -> int:
        return sum(p.area for p in self.placements)

    @property
    def utilization(self) -> float:
        """Fraction of the bin area covered by rectangle areas."""
        return self.used_area / (self.capacity * self.capacity)

    def overlap_area(self) -> int:
        """Total pairwise intersection area between placements."""
        total = 0
        ps = self.placements
        for i in range(len(ps)):
            for j in range(i + 1, len(ps)):
                total += ps[i].intersection_area(ps[j])
        return total

    def is_empty(self) -> bool:
        return not self.placements

    def copy(self) -> "BoxBin":
        # Placement is frozen, a shallow list copy is enough
        return BoxBin(self.capacity, self.placements)

    def to_dict(self) -> dict:
        return {
            "capacity": self.capacity,
            "used_area": self.used_area,
            "placements": [p.to_dict() for p in self.placements],
        }

    def __len__(self) -> int:
        return len(self.placements)

    def __repr__(self) -> str:
        return (
            f"BoxBin(L={self.capacity}, rects={len(self.placements)}, "
            f"util={self.utilization:.1%})"
        )
