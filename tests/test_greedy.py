"""
Tests for the greedy skeleton, the packing state and the selection strategies.
"""

import pytest

from rectbins.algorithms.base import SELECTION_REGISTRY, SelectionStrategy, get_selection
from rectbins.algorithms.greedy import run_greedy
from rectbins.algorithms.greedy_packing import (
    LargestAreaFirst,
    LongestSideFirst,
    RectangleGreedyState,
    solve_greedy,
)
from rectbins.core.errors import InvariantViolation
from rectbins.core.models import Instance, Rect

STRATEGIES = ["largest_area", "longest_side"]


class GiveUp(SelectionStrategy):
    name = "give_up"

    def next_candidate(self, state):
        return None


class TestRegistry:
    def test_both_strategies_registered(self):
        for name in STRATEGIES:
            assert name in SELECTION_REGISTRY

    def test_unknown_strategy(self):
        with pytest.raises(ValueError, match="Unknown selection strategy"):
            get_selection("best_fit")


class TestSelection:
    def test_largest_area_first(self):
        state = RectangleGreedyState(Instance(20, [Rect(0, 3, 3), Rect(1, 2, 10), Rect(2, 5, 4)]))
        assert LargestAreaFirst().next_candidate(state).id == 1

    def test_longest_side_first(self):
        state = RectangleGreedyState(Instance(20, [Rect(0, 6, 6), Rect(1, 2, 10), Rect(2, 9, 1)]))
        assert LongestSideFirst().next_candidate(state).id == 1

    def test_ties_go_to_first_remaining(self):
        state = RectangleGreedyState(Instance(20, [Rect(5, 4, 6), Rect(3, 6, 4), Rect(9, 3, 8)]))
        assert LargestAreaFirst().next_candidate(state).id == 5
        state = RectangleGreedyState(Instance(20, [Rect(5, 2, 8), Rect(3, 8, 8)]))
        assert LongestSideFirst().next_candidate(state).id == 5

    def test_empty_state_yields_none(self):
        state = RectangleGreedyState(Instance(10, []))
        assert LargestAreaFirst().next_candidate(state) is None
        assert LongestSideFirst().next_candidate(state) is None


class TestSkeleton:
    def test_early_stop_returns_partial_state(self, small_instance):
        state = RectangleGreedyState(small_instance)
        assert run_greedy(state, GiveUp()) is False
        assert state.solution.bin_count == 0
        assert len(state.remaining) == len(small_instance)

    def test_finishes_normally(self, small_instance):
        state = RectangleGreedyState(small_instance)
        assert run_greedy(state, LargestAreaFirst()) is True
        assert state.is_finished()


class TestGreedyPacking:
    @pytest.mark.parametrize("strategy", STRATEGIES)
    def test_full_squares_need_one_bin_each(self, strategy, three_squares):
        solution = solve_greedy(three_squares, strategy)
        assert solution.bin_count == 3
        for b in solution.bins:
            assert len(b.placements) == 1
            p = b.placements[0]
            assert (p.x, p.y) == (0, 0)

    @pytest.mark.parametrize("strategy", STRATEGIES)
    def test_rotation_lets_both_strips_share_a_bin(self, strategy, rotation_pair):
        solution = solve_greedy(rotation_pair, strategy)
        assert solution.bin_count == 1
        placements = solution.bins[0].placements
        assert any(p.rotated for p in placements)
        solution.validate()

    @pytest.mark.parametrize("strategy", STRATEGIES)
    def test_rectangles_4x6_and_6x4_share_a_bin(self, strategy):
        solution = solve_greedy(Instance(10, [Rect(0, 4, 6), Rect(1, 6, 4)]), strategy)
        assert solution.bin_count == 1
        solution.validate()

    @pytest.mark.parametrize("strategy", STRATEGIES)
    def test_every_rectangle_placed_exactly_once(self, strategy, medium_instance):
        solution = solve_greedy(medium_instance, strategy)
        assert sorted(solution.placed_ids()) == sorted(r.id for r in medium_instance.rects)
        solution.validate()
        assert solution.bin_count >= medium_instance.area_lower_bound

    @pytest.mark.parametrize("strategy", STRATEGIES)
    def test_deterministic(self, strategy, medium_instance):
        a = solve_greedy(medium_instance, strategy)
        b = solve_greedy(medium_instance, strategy)
        assert a.to_dict() == b.to_dict()

    def test_accepts_strategy_instance(self, three_squares):
        assert solve_greedy(three_squares, LongestSideFirst()).bin_count == 3

    def test_first_fit_not_best_fit(self):
        # 7x7 leaves room in bin 0; 6x6 opens bin 1; the 3x3 goes to bin 0
        # although bin 1 would leave less waste.
        inst = Instance(10, [Rect(0, 7, 7), Rect(1, 6, 6), Rect(2, 3, 3)])
        solution = solve_greedy(inst, "largest_area")
        assert solution.bin_count == 2
        assert [p.rect.id for p in solution.bins[0].placements] == [0, 2]

    def test_new_bin_refusal_is_fatal(self):
        state = RectangleGreedyState(Instance(10, [Rect(0, 5, 5)]))
        with pytest.raises(InvariantViolation):
            state.apply(Rect(99, 11, 11))
