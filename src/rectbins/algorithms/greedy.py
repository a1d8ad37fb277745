"""Generic greedy skeleton."""

from __future__ import annotations

import logging

from rectbins.algorithms.base import GreedyState, SelectionStrategy

logger = logging.getLogger(__name__)


def run_greedy(state: GreedyState, strategy: SelectionStrategy) -> bool:
    """
    Drive *state* to completion with items chosen by *strategy*.

    Args:
        state:    Mutable problem state; updated in place.
        strategy: Picks the next item for the current state.

    Returns:
        True if the state finished, False if the strategy ran out of
        candidates first (the state then holds a partial result).
    """
    while not state.is_finished():
        candidate = strategy.next_candidate(state)
        if candidate is None:
            logger.warning("Strategy %s returned no candidate before completion", strategy.name)
            return False
        state.apply(candidate)
    return True
