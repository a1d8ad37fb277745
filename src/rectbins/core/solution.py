"""
Solution representations and their cost functions.

PackingSolution
    Explicit bins and placements. Cost is lexicographic
    ``(bin_count, -sum(used_area ** 2))`` or, with a penalty factor set,
    the overlap-tolerant scalar ``(0, penalised_score)``.

PermutationSolution
    A sequence of rectangles. Its packing is derived on demand by placing
    the sequence first-fit into bins; nothing is cached.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from rectbins.algorithms.base import Solution
from rectbins.core.bin import BoxBin
from rectbins.core.errors import InvariantViolation
from rectbins.core.models import Instance, Rect

Cost = Tuple[int, int]


class PackingSolution(Solution):
    """
    An ordered list of bins for an instance.

    The solution owns its bins; neighbors are produced from ``copy()``.
    Setting ``penalty_factor`` switches ``cost()`` to overlap-tolerant mode.
    """

    def __init__(
        self,
        instance: Instance,
        bins: Optional[Iterable[BoxBin]] = None,
        penalty_factor: Optional[int] = None,
    ) -> None:
        self.instance = instance
        self.bins: List[BoxBin] = list(bins) if bins is not None else []
        self.penalty_factor = penalty_factor

    @classmethod
    def trivial(cls, instance: Instance) -> "PackingSolution":
        """One rectangle per bin, each at the origin, in instance order."""
        bins = []
        for rect in instance.rects:
            b = BoxBin(instance.box_size)
            if not b.try_place(rect, 0, 0, False):
                raise InvariantViolation(f"Rectangle {rect.id} rejected by an empty bin")
            bins.append(b)
        return cls(instance, bins)

    # ── Construction helpers ─────────────────────────────────────────────

    def new_bin(self) -> BoxBin:
        b = BoxBin(self.instance.box_size)
        self.bins.append(b)
        return b

    def insert_first_fit(self, rect: Rect) -> int:
        """
        Place *rect* into the first bin that accepts it via candidate anchors,
        opening a new bin anchored at the origin if none does.

        Returns the index of the bin that received the rectangle.
        """
        for idx, b in enumerate(self.bins):
            if b.place_first_fit(rect):
                return idx
        b = BoxBin(self.instance.box_size)
        if not b.try_place(rect, 0, 0, False):
            raise InvariantViolation(
                f"Couldn't place rectangle {rect.id} ({rect.width}x{rect.height}) "
                f"in a new box of size {self.instance.box_size}"
            )
        self.bins.append(b)
        return len(self.bins) - 1

    # ── Cost ─────────────────────────────────────────────────────────────

    @property
    def bin_count(self) -> int:
        return len(self.bins)

    @property
    def bin_weight(self) -> int:
        """Per-bin weight in penalty mode; exceeds any attainable density term."""
        return self.instance.box_size ** 4 + 1

    def density_score(self) -> int:
        """Sum over bins of the squared used area."""
        return sum(b.used_area ** 2 for b in self.bins)

    def total_overlap_area(self) -> int:
        return sum(b.overlap_area() for b in self.bins)

    def cost(self) -> Cost:
        score = self.density_score()
        if self.penalty_factor is None:
            return self.bin_count, -score
        penalised = (
            self.total_overlap_area() * self.penalty_factor
            - score
            + self.bin_count * self.bin_weight
        )
        return 0, penalised

    # ── Copies ───────────────────────────────────────────────────────────

    def copy(self) -> "PackingSolution":
        return PackingSolution(self.instance, [b.copy() for b in self.bins], self.penalty_factor)

    def with_penalty(self, penalty_factor: Optional[int]) -> "PackingSolution":
        clone = self.copy()
        clone.penalty_factor = penalty_factor
        return clone

    # ── Inspection ───────────────────────────────────────────────────────

    def density(self) -> List[float]:
        """Utilisation of each bin, in bin order."""
        return [b.utilization for b in self.bins]

    def mean_density(self) -> float:
        if not self.bins:
            return 0.0
        return float(np.mean(self.density()))

    def placed_ids(self) -> List[int]:
        return [p.rect.id for b in self.bins for p in b.placements]

    def validate(self) -> None:
        """
        Check the strict packing invariants.

        Raises:
            InvariantViolation: a rectangle is missing or duplicated, a
                placement leaves its bin, a bin is empty, or two
                placements in one bin intersect.
        """
        expected = sorted(r.id for r in self.instance.rects)
        placed = sorted(self.placed_ids())
        if placed != expected:
            missing = set(expected) - set(placed)
            raise InvariantViolation(
                f"Coverage mismatch: {len(placed)} placed vs {len(expected)} rectangles "
                f"(missing={sorted(missing)})"
            )
        for idx, b in enumerate(self.bins):
            if b.is_empty():
                raise InvariantViolation(f"Bin {idx} is empty")
            for p in b.placements:
                if not b.fits_bounds(p.rect, p.x, p.y, p.rotated):
                    raise InvariantViolation(f"Bin {idx}: {p!r} exceeds capacity {b.capacity}")
            ps = b.placements
            for i in range(len(ps)):
                for j in range(i + 1, len(ps)):
                    if ps[i].intersects(ps[j]):
                        raise InvariantViolation(f"Bin {idx}: {ps[i]!r} intersects {ps[j]!r}")

    def is_valid(self) -> bool:
        try:
            self.validate()
        except InvariantViolation:
            return False
        return True

    def to_dict(self) -> dict:
        return {
            "box_size": self.instance.box_size,
            "bin_count": self.bin_count,
            "penalty_factor": self.penalty_factor,
            "bins": [b.to_dict() for b in self.bins],
        }

    def __repr__(self) -> str:
        mode = "" if self.penalty_factor is None else f", penalty={self.penalty_factor}"
        return f"PackingSolution(bins={self.bin_count}, rects={len(self.instance)}{mode})"


class PermutationSolution(Solution):
    """
    A rectangle sequence whose packing is rebuilt first-fit on every cost query.
    """

    def __init__(self, instance: Instance, sequence: Sequence[Rect]) -> None:
        self.instance = instance
        self.sequence: List[Rect] = list(sequence)

    @classmethod
    def shuffled(cls, instance: Instance, rng: np.random.Generator) -> "PermutationSolution":
        """Random start permutation drawn from *rng*."""
        order = rng.permutation(len(instance.rects))
        return cls(instance, [instance.rects[i] for i in order])

    def decode(self) -> PackingSolution:
        """Derive the packing: each rectangle goes first-fit, in sequence order."""
        packing = PackingSolution(self.instance)
        for rect in self.sequence:
            packing.insert_first_fit(rect)
        return packing

    def cost(self) -> Cost:
        return self.decode().cost()

    def swapped(self, i: int, j: int) -> "PermutationSolution":
        seq = list(self.sequence)
        seq[i], seq[j] = seq[j], seq[i]
        return PermutationSolution(self.instance, seq)

    def __len__(self) -> int:
        return len(self.sequence)

    def __repr__(self) -> str:
        head = ", ".join(str(r.id) for r in self.sequence[:8])
        more = ", ..." if len(self.sequence) > 8 else ""
        return f"PermutationSolution([{head}{more}])"
