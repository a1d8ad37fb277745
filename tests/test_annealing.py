"""
Tests for the overlap-annealing schedule and driver.
"""

import pytest

from rectbins.algorithms.annealing import OverlapSchedule, legalize, run_overlap_annealing
from rectbins.core.bin import BoxBin
from rectbins.core.errors import PreconditionError
from rectbins.core.models import Instance, Placement, Rect
from rectbins.core.solution import PackingSolution


class TestSchedule:
    def test_defaults(self):
        s = OverlapSchedule()
        assert (s.phases, s.initial_penalty, s.penalty_growth) == (10, 10, 5)
        assert s.tolerance(0) == pytest.approx(1.0)
        assert s.tolerance(9) == pytest.approx(0.1)
        assert s.penalty(0) == 10
        assert s.penalty(3) == 1250

    def test_tolerance_never_negative(self):
        s = OverlapSchedule(phases=4, initial_tolerance=0.5)
        assert s.tolerance(10) == 0.0

    @pytest.mark.parametrize("kwargs", [
        {"phases": 0},
        {"initial_penalty": 0},
        {"penalty_growth": 0},
        {"initial_tolerance": 1.2},
    ])
    def test_invalid_schedule(self, kwargs):
        with pytest.raises(PreconditionError):
            OverlapSchedule(**kwargs)


class TestLegalize:
    def test_overlapping_placement_moves_out(self):
        a, b = Rect(0, 6, 6), Rect(1, 6, 6)
        inst = Instance(10, [a, b])
        sol = PackingSolution(inst, [BoxBin(10, [Placement(a, 0, 0), Placement(b, 3, 3)])])
        fixed = legalize(sol)
        fixed.validate()
        assert fixed.bin_count == 2
        assert fixed.bins[0].placements == [Placement(a, 0, 0)]

    def test_valid_solution_unchanged(self, small_instance):
        trivial = PackingSolution.trivial(small_instance)
        assert legalize(trivial).to_dict() == trivial.to_dict()


class TestAnnealing:
    def test_result_is_strictly_valid(self, small_instance):
        result = run_overlap_annealing(PackingSolution.trivial(small_instance))
        assert result.penalty_factor is None
        assert result.total_overlap_area() == 0
        result.validate()
        assert result.bin_count < len(small_instance)

    def test_short_schedule(self, small_instance):
        schedule = OverlapSchedule(phases=2, initial_penalty=5, penalty_growth=10)
        result = run_overlap_annealing(PackingSolution.trivial(small_instance), schedule)
        result.validate()

    def test_input_not_mutated(self, small_instance):
        trivial = PackingSolution.trivial(small_instance)
        run_overlap_annealing(trivial, OverlapSchedule(phases=2))
        assert trivial.bin_count == len(small_instance)
        assert trivial.penalty_factor is None

    def test_full_squares_stay_apart(self, three_squares):
        result = run_overlap_annealing(PackingSolution.trivial(three_squares))
        assert result.bin_count == 3
        result.validate()
