"""Random instance generation for benchmark runs."""

from __future__ import annotations

import numpy as np

from rectbins.core.errors import PreconditionError
from rectbins.core.models import Instance, Rect


def make_rng(seed: int | np.random.Generator | None = None) -> np.random.Generator:
    """Return *seed* if it already is a Generator, else a new one seeded with it."""
    if isinstance(seed, np.random.Generator):
        return seed
    return np.random.default_rng(seed)


def generate_instance(
    num_rects: int,
    width_range: tuple[int, int],
    height_range: tuple[int, int],
    box_size: int,
    rng: int | np.random.Generator | None = None,
) -> Instance:
    """
    Generate an instance with uniformly drawn rectangle sides.

    Args:
        num_rects: Number of rectangles; ids are 0..num_rects-1.
        width_range: Inclusive (min, max) for widths.
        height_range: Inclusive (min, max) for heights.
        box_size: Side length L of the square bins.
        rng: Seed or numpy Generator for reproducibility.

    Returns:
        Instance with ``num_rects`` rectangles.

    Raises:
        PreconditionError: If a range is inverted or can produce a side
            larger than ``box_size``.

    Example:
        >>> inst = generate_instance(3, (5, 5), (2, 2), 10, rng=0)
        >>> [(r.width, r.height) for r in inst.rects]
        [(5, 2), (5, 2), (5, 2)]
    """
    min_w, max_w = width_range
    min_h, max_h = height_range
    if min_w > max_w:
        raise PreconditionError(f"Min width must be <= max width, got {width_range}")
    if min_h > max_h:
        raise PreconditionError(f"Min height must be <= max height, got {height_range}")
    if min_w < 1 or min_h < 1:
        raise PreconditionError("Rectangle sides must be at least 1")
    if max_w > box_size or max_h > box_size:
        raise PreconditionError(
            f"Ranges {width_range}x{height_range} can exceed box size {box_size}"
        )

    gen = make_rng(rng)
    widths = gen.integers(min_w, max_w, size=num_rects, endpoint=True)
    heights = gen.integers(min_h, max_h, size=num_rects, endpoint=True)
    rects = [Rect(id=i, width=int(w), height=int(h)) for i, (w, h) in enumerate(zip(widths, heights))]
    return Instance(box_size, rects)
