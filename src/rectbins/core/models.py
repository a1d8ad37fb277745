"""
Core value types for 2D rectangle bin packing.

Classes:
    Rect      — immutable rectangle with a stable id
    Placement — a rectangle anchored at its lower-left corner, maybe rotated
    Instance  — bin capacity plus the rectangles to pack
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple

from rectbins.core.errors import PreconditionError


# ─────────────────────────────────────────────────────────────────────────────
# Rect
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Rect:
    """
    A rectangle to be packed.

    Rotation is not part of the rectangle; it belongs to a Placement.

    Attributes:
        id:     Stable identifier, unique within an Instance.
        width:  X-axis extent.
        height: Y-axis extent.
    """
    id: int
    width: int
    height: int

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def longest_side(self) -> int:
        return max(self.width, self.height)

    def to_dict(self) -> dict:
        return {"id": self.id, "width": self.width, "height": self.height}


# ─────────────────────────────────────────────────────────────────────────────
# Placement
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Placement:
    """
    A rectangle positioned inside a bin.

    (x, y) is the lower-left corner. When ``rotated`` is set the effective
    width and height are swapped.
    """
    rect: Rect
    x: int
    y: int
    rotated: bool = False

    @property
    def width(self) -> int:
        return self.rect.height if self.rotated else self.rect.width

    @property
    def height(self) -> int:
        return self.rect.width if self.rotated else self.rect.height

    @property
    def x_max(self) -> int:
        return self.x + self.width

    @property
    def y_max(self) -> int:
        return self.y + self.height

    @property
    def area(self) -> int:
        return self.rect.area

    def intersects(self, other: "Placement") -> bool:
        """True if both footprints share a region of nonzero area.

        Touching edges or corners do not count.
        """
        return not (
            self.x_max <= other.x
            or other.x_max <= self.x
            or self.y_max <= other.y
            or other.y_max <= self.y
        )

    def intersection_area(self, other: "Placement") -> int:
        """Area of the rectangular overlap region (0 when disjoint)."""
        dx = min(self.x_max, other.x_max) - max(self.x, other.x)
        dy = min(self.y_max, other.y_max) - max(self.y, other.y)
        if dx <= 0 or dy <= 0:
            return 0
        return dx * dy

    def overlap_ratio(self, other: "Placement") -> float:
        """Overlap area divided by the larger of the two rectangle areas."""
        overlap = self.intersection_area(other)
        if overlap == 0:
            return 0.0
        return overlap / max(self.area, other.area)

    def to_dict(self) -> dict:
        return {
            "rect": self.rect.to_dict(),
            "position": [self.x, self.y],
            "dims": [self.width, self.height],
            "rotated": self.rotated,
        }

    def __repr__(self) -> str:
        r = "R" if self.rotated else ""
        return f"Placement(#{self.rect.id} {self.width}x{self.height}{r} @ ({self.x}, {self.y}))"


# ─────────────────────────────────────────────────────────────────────────────
# Instance
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Instance:
    """
    A problem instance: square bins of side ``box_size`` and the rectangles.

    Every rectangle must fit an empty bin without rotation; violating
    instances are rejected here instead of being repaired later.
    """
    box_size: int
    rects: Tuple[Rect, ...]

    def __init__(self, box_size: int, rects: Iterable[Rect]) -> None:
        object.__setattr__(self, "box_size", box_size)
        object.__setattr__(self, "rects", tuple(rects))
        self._validate()

    def _validate(self) -> None:
        if self.box_size <= 0:
            raise PreconditionError(f"Box size must be positive, got {self.box_size}")
        seen = set()
        for r in self.rects:
            if r.width <= 0 or r.height <= 0:
                raise PreconditionError(
                    f"Rectangle {r.id} has non-positive side ({r.width}, {r.height})"
                )
            if r.width > self.box_size or r.height > self.box_size:
                raise PreconditionError(
                    f"Rectangle {r.id} ({r.width}, {r.height}) doesn't fit in box ({self.box_size})"
                )
            if r.id in seen:
                raise PreconditionError(f"Duplicate rectangle id {r.id}")
            seen.add(r.id)

    @property
    def total_area(self) -> int:
        return sum(r.area for r in self.rects)

    @property
    def area_lower_bound(self) -> int:
        """Minimum number of bins any packing needs (area argument)."""
        capacity = self.box_size * self.box_size
        return -(-self.total_area // capacity)

    def __len__(self) -> int:
        return len(self.rects)

    def __repr__(self) -> str:
        return f"Instance(L={self.box_size}, rects={len(self.rects)})"
