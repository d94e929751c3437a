"""
Bounded best-k pool of design results.

The pool keeps at most `capacity` results in best-first order. Insertion is a
linear scan: a newcomer goes in front of the first held result it is better
than, so ties keep arrival order. Whatever falls off the end is evicted.

The ranking predicate under OrderingPolicy.ORIGINAL is not a strict weak
ordering, so the held order depends on arrival order. Feed results in a
deterministic order to get reproducible pools.
"""

from __future__ import annotations

from collections.abc import Iterator

from .design_result import DesignResult, ResultOrdering

__all__ = ["ResultPool"]


class ResultPool:
    """Best-first collection of at most `capacity` DesignResult values.

    Not thread-safe; insert from a single driver thread.
    """

    def __init__(self, capacity: int, ordering: ResultOrdering | None = None) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1 (got {capacity})")
        self.capacity = int(capacity)
        self.ordering = ordering if ordering is not None else ResultOrdering()
        self._items: list[DesignResult] = []
        self.offered = 0
        self.evicted = 0

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[DesignResult]:
        return iter(tuple(self._items))

    def offer(self, result: DesignResult) -> bool:
        """Insert a result, evicting the worst one on overflow.

        Args:
            result: Freshly evaluated candidate

        Returns:
            True if `result` is held by the pool after insertion
        """
        self.offered += 1
        pos = len(self._items)
        for idx, held in enumerate(self._items):
            if self.ordering(result, held):
                pos = idx
                break

        if pos >= self.capacity:
            self.evicted += 1
            return False

        self._items.insert(pos, result)
        if len(self._items) > self.capacity:
            self._items.pop()
            self.evicted += 1
        return True

    def best(self) -> DesignResult | None:
        return self._items[0] if self._items else None

    def results(self) -> tuple[DesignResult, ...]:
        """Snapshot of held results, best first."""
        return tuple(self._items)

    def clear(self) -> None:
        self._items.clear()
        self.offered = 0
        self.evicted = 0
