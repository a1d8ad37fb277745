"""
algorithms — generic search skeletons and the packing strategies built on them.

Public API:
    from rectbins.algorithms.base import Solution, Neighborhood, GreedyState, SelectionStrategy
    from rectbins.algorithms.greedy import run_greedy
    from rectbins.algorithms.local_search import local_search
    from rectbins.algorithms.greedy_packing import solve_greedy
    from rectbins.algorithms.neighborhoods import GeometricNeighborhood, RuleBasedNeighborhood, OverlappingNeighborhood
    from rectbins.algorithms.annealing import OverlapSchedule, run_overlap_annealing
"""
