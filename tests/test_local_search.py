"""
Tests for the local-search skeleton and the three neighborhoods.
"""

import numpy as np
import pytest

from rectbins.algorithms.base import Neighborhood, Solution
from rectbins.algorithms.local_search import local_search
from rectbins.algorithms.neighborhoods import (
    GeometricNeighborhood,
    OverlappingNeighborhood,
    RuleBasedNeighborhood,
    swap_remove,
)
from rectbins.core.bin import BoxBin
from rectbins.core.errors import PreconditionError
from rectbins.core.models import Instance, Placement, Rect
from rectbins.core.solution import PackingSolution, PermutationSolution


# ---------------------------------------------------------------------------
# Toy problem for the skeleton
# ---------------------------------------------------------------------------

class IntSolution(Solution):
    def __init__(self, value):
        self.value = value

    def cost(self):
        return abs(self.value)


class StepNeighborhood(Neighborhood):
    name = "step"

    def __init__(self):
        self.visited = []

    def neighbors(self, solution):
        self.visited.append(solution.value)
        for delta in (-1, -2, 1):
            yield IntSolution(solution.value + delta)


class RecordingGeometric(GeometricNeighborhood):
    def __init__(self):
        self.costs = []

    def neighbors(self, solution):
        self.costs.append(solution.cost())
        yield from super().neighbors(solution)


class TestSkeleton:
    def test_first_improvement_not_best_improvement(self):
        hood = StepNeighborhood()
        result = local_search(IntSolution(5), hood)
        assert result.value == 0
        # -1 is adopted every round even though -2 would be better
        assert hood.visited == [5, 4, 3, 2, 1, 0]

    def test_local_optimum_returned_unchanged(self):
        start = IntSolution(0)
        assert local_search(start, StepNeighborhood()) is start

    def test_neighbors_pulled_lazily(self):
        pulled = []

        class Counting(Neighborhood):
            def neighbors(self, solution):
                for delta in (-1, -2, -3):
                    pulled.append(delta)
                    yield IntSolution(solution.value + delta)

        local_search(IntSolution(1), Counting())
        # round 1 stops at the first neighbor, round 2 scans all three
        assert pulled == [-1, -1, -2, -3]


# ---------------------------------------------------------------------------
# Geometric neighborhood
# ---------------------------------------------------------------------------

class TestGeometric:
    def test_moves_rectangle_and_drops_empty_bin(self):
        inst = Instance(10, [Rect(0, 5, 10), Rect(1, 5, 10)])
        trivial = PackingSolution.trivial(inst)
        first = next(GeometricNeighborhood().neighbors(trivial))
        assert first.bin_count == 1
        assert [p.rect.id for p in first.bins[0].placements] == [1, 0]
        assert trivial.bin_count == 2  # source untouched

    def test_emptied_bin_replaced_by_last_bin(self):
        inst = Instance(10, [Rect(i, 2, 2) for i in range(4)])
        first = next(GeometricNeighborhood().neighbors(PackingSolution.trivial(inst)))
        assert [[p.rect.id for p in b.placements] for b in first.bins] == [[3], [1, 0], [2]]

    def test_moved_placement_replaced_by_last_placement(self):
        a, b, c, d = (Rect(i, 2, 2) for i in range(4))
        inst = Instance(10, [a, b, c, d])
        solution = PackingSolution(inst, [
            BoxBin(10, [Placement(a, 0, 0), Placement(b, 2, 0), Placement(c, 4, 0)]),
            BoxBin(10, [Placement(d, 0, 0)]),
        ])
        first = next(GeometricNeighborhood().neighbors(solution))
        assert [p.rect.id for p in first.bins[0].placements] == [2, 1]
        assert [p.rect.id for p in first.bins[1].placements] == [3, 0]

    def test_never_opens_bins(self, small_instance):
        trivial = PackingSolution.trivial(small_instance)
        for neighbor in GeometricNeighborhood().neighbors(trivial):
            assert neighbor.bin_count <= trivial.bin_count

    def test_accepted_states_strictly_improve(self, medium_instance):
        hood = RecordingGeometric()
        result = local_search(PackingSolution.trivial(medium_instance), hood)
        costs = hood.costs
        assert all(b < a for a, b in zip(costs, costs[1:]))
        bins = [c[0] for c in costs]
        assert bins == sorted(bins, reverse=True)
        result.validate()
        assert result.bin_count < len(medium_instance)

    @pytest.mark.parametrize("index, expected, rest", [
        (0, "a", ["d", "b", "c"]),
        (1, "b", ["a", "d", "c"]),
        (3, "d", ["a", "b", "c"]),
    ])
    def test_swap_remove(self, index, expected, rest):
        items = ["a", "b", "c", "d"]
        assert swap_remove(items, index) == expected
        assert items == rest

    def test_full_squares_cannot_consolidate(self, three_squares):
        trivial = PackingSolution.trivial(three_squares)
        assert list(GeometricNeighborhood().neighbors(trivial)) == []
        assert local_search(trivial, GeometricNeighborhood()).bin_count == 3


# ---------------------------------------------------------------------------
# Rule-based (permutation) neighborhood
# ---------------------------------------------------------------------------

class TestRuleBased:
    def test_exhaustive_enumerates_all_pairs_in_order(self, small_instance):
        perm = PermutationSolution(small_instance, small_instance.rects[:5])
        hood = RuleBasedNeighborhood()
        pairs = list(hood.swap_pairs(5))
        assert len(pairs) == 10
        assert pairs[0] == (0, 1)
        assert pairs[-1] == (3, 4)
        first = next(hood.neighbors(perm))
        ids = [r.id for r in perm.sequence]
        assert [r.id for r in first.sequence] == [ids[1], ids[0]] + ids[2:]

    def test_sampled_yields_at_most_sample_size_distinct_swaps(self, small_instance):
        perm = PermutationSolution(small_instance, small_instance.rects)
        hood = RuleBasedNeighborhood(sample_size=30, rng=np.random.default_rng(0))
        neighbors = list(hood.neighbors(perm))
        assert 0 < len(neighbors) <= 30
        base = [r.id for r in perm.sequence]
        for n in neighbors:
            diff = [k for k, r in enumerate(n.sequence) if r.id != base[k]]
            assert len(diff) == 2

    def test_sampled_is_reproducible_with_seed(self, small_instance):
        perm = PermutationSolution(small_instance, small_instance.rects)
        runs = []
        for _ in range(2):
            hood = RuleBasedNeighborhood(sample_size=10, rng=np.random.default_rng(42))
            runs.append([[r.id for r in n.sequence] for n in hood.neighbors(perm)])
        assert runs[0] == runs[1]

    def test_sampled_single_rect_has_no_neighbors(self):
        inst = Instance(10, [Rect(0, 2, 2)])
        hood = RuleBasedNeighborhood(sample_size=5, rng=np.random.default_rng(1))
        assert list(hood.neighbors(PermutationSolution(inst, inst.rects))) == []

    def test_invalid_sample_size(self):
        with pytest.raises(PreconditionError):
            RuleBasedNeighborhood(sample_size=0)

    def test_permutation_cost_is_stable(self, medium_instance):
        perm = PermutationSolution.shuffled(medium_instance, np.random.default_rng(3))
        assert perm.cost() == perm.cost()
        assert perm.decode().to_dict() == perm.decode().to_dict()

    def test_decode_covers_every_rectangle(self, medium_instance):
        perm = PermutationSolution.shuffled(medium_instance, np.random.default_rng(5))
        perm.decode().validate()

    def test_search_does_not_worsen(self, small_instance):
        start = PermutationSolution.shuffled(small_instance, np.random.default_rng(9))
        result = local_search(start, RuleBasedNeighborhood())
        assert result.cost() <= start.cost()
        result.decode().validate()


# ---------------------------------------------------------------------------
# Overlap-tolerant neighborhood
# ---------------------------------------------------------------------------

def _overlap_fixture():
    """bin 0: 10x10 and 5x5 overlapping at the origin; bin 1: a lone 5x5."""
    a, c, g = Rect(0, 10, 10), Rect(1, 5, 5), Rect(2, 5, 5)
    inst = Instance(10, [a, c, g])
    bins = [
        BoxBin(10, [Placement(a, 0, 0), Placement(c, 0, 0)]),
        BoxBin(10, [Placement(g, 0, 0)]),
    ]
    return PackingSolution(inst, bins, penalty_factor=10)


class TestOverlapping:
    def test_requires_penalty_factor(self, small_instance):
        trivial = PackingSolution.trivial(small_instance)
        with pytest.raises(PreconditionError):
            next(OverlappingNeighborhood(0.5).neighbors(trivial))

    @pytest.mark.parametrize("tolerance", [-0.1, 1.5])
    def test_tolerance_bounds(self, tolerance):
        with pytest.raises(PreconditionError):
            OverlappingNeighborhood(tolerance)

    def test_new_bin_moves_come_last(self):
        neighbors = list(OverlappingNeighborhood(0.0).neighbors(_overlap_fixture()))
        assert len(neighbors) == 2

        moved = neighbors[0]
        assert moved.bin_count == 2
        assert [p.rect.id for p in moved.bins[1].placements] == [2, 1]
        assert (moved.bins[1].placements[1].x, moved.bins[1].placements[1].y) == (5, 0)

        opened = neighbors[1]
        assert opened.bin_count == 3
        assert [p.rect.id for p in opened.bins[2].placements] == [0]

    def test_tolerance_one_admits_any_overlap(self):
        neighbors = list(OverlappingNeighborhood(1.0).neighbors(_overlap_fixture()))
        assert all(n.bin_count <= 2 for n in neighbors)
        assert len(neighbors) == 3

    def test_neighbors_keep_penalty(self):
        for n in OverlappingNeighborhood(0.5).neighbors(_overlap_fixture()):
            assert n.penalty_factor == 10
