"""
Search interfaces — abstract base classes shared by both skeletons.

Local search:
    Solution        — anything with a totally ordered ``cost()``.
    Neighborhood    — lazily enumerates neighbor solutions of a solution.

Greedy:
    GreedyState       — tracks completion and applies a chosen item.
    SelectionStrategy — inspects the state (read-only) and picks the next
                        item, or returns None when it has nothing to offer.

Creating a selection strategy
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
1. Subclass ``SelectionStrategy``, set ``name``, implement ``next_candidate()``
2. Decorate with ``@register_selection``
3. Look it up later with ``get_selection(name)``
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Iterator, Optional, Type, TypeVar

S = TypeVar("S", bound="Solution")
P = TypeVar("P", bound="GreedyState")


# ─────────────────────────────────────────────────────────────────────────────
# Local search
# ─────────────────────────────────────────────────────────────────────────────

class Solution(ABC):
    """A candidate solution. Lower cost is better; costs must be totally ordered."""

    @abstractmethod
    def cost(self) -> Any:
        """Return a comparable cost value (typically a tuple of ints)."""
        ...


class Neighborhood(ABC, Generic[S]):
    """Produces the neighbors of a solution.

    The iteration order is significant: local search adopts the first
    improving neighbor, so implementations must yield in a fixed order
    (or, for randomized ones, an order fixed by their random source).
    """

    name: str = "unnamed"

    @abstractmethod
    def neighbors(self, solution: S) -> Iterator[S]:
        """Yield neighbor solutions lazily. Must not mutate *solution*."""
        ...


# ─────────────────────────────────────────────────────────────────────────────
# Greedy
# ─────────────────────────────────────────────────────────────────────────────

class GreedyState(ABC):
    """Mutable problem state driven by the greedy skeleton."""

    @abstractmethod
    def is_finished(self) -> bool:
        ...

    @abstractmethod
    def apply(self, item: Any) -> None:
        """Add *item* to the partial solution."""
        ...


class SelectionStrategy(ABC, Generic[P]):
    """Chooses the next item for a greedy state."""

    name: str = "unnamed"

    @abstractmethod
    def next_candidate(self, state: P) -> Optional[Any]:
        """Return the next item to apply, or None if nothing can be selected.

        The state is read-only here; only the skeleton calls ``apply``.
        """
        ...


# ─────────────────────────────────────────────────────────────────────────────
# Selection strategy registry
# ─────────────────────────────────────────────────────────────────────────────

SELECTION_REGISTRY: Dict[str, Type[SelectionStrategy]] = {}


def register_selection(cls: Type[SelectionStrategy]) -> Type[SelectionStrategy]:
    """Class decorator — registers a selection strategy under ``cls.name``."""
    SELECTION_REGISTRY[cls.name] = cls
    return cls


def get_selection(name: str) -> SelectionStrategy:
    """Look up a selection strategy by name and return a new instance."""
    if name not in SELECTION_REGISTRY:
        available = ", ".join(sorted(SELECTION_REGISTRY.keys()))
        raise ValueError(f"Unknown selection strategy '{name}'.  Available: [{available}]")
    return SELECTION_REGISTRY[name]()
