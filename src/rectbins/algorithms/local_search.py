"""Generic first-improvement local search."""

from __future__ import annotations

import logging
from typing import TypeVar

from rectbins.algorithms.base import Neighborhood, Solution

logger = logging.getLogger(__name__)

S = TypeVar("S", bound=Solution)


def local_search(initial: S, neighborhood: Neighborhood[S]) -> S:
    """
    Hill-climb from *initial* until no neighbor is strictly cheaper.

    Each round computes the current cost once, then scans the neighbors in
    the order the neighborhood yields them and adopts the first one whose
    cost is strictly lower. No randomness is added here.

    Returns:
        A local optimum with respect to *neighborhood*.
    """
    current = initial
    rounds = 0
    while True:
        current_cost = current.cost()
        for neighbor in neighborhood.neighbors(current):
            neighbor_cost = neighbor.cost()
            if neighbor_cost < current_cost:
                logger.debug(
                    "%s round %d: %s -> %s", neighborhood.name, rounds, current_cost, neighbor_cost,
                )
                current = neighbor
                rounds += 1
                break
        else:
            logger.debug("%s converged after %d improvements at %s", neighborhood.name, rounds, current_cost)
            return current
