"""
Candidate result record and ranking predicate for RNA sequence design.

A design run evaluates each candidate sequence twice with the folding engine
(once under the target constraint, once unconstrained) plus one partition
function call, and keeps the outcome as an immutable DesignResult.

Ranking uses a two-step predicate:

    better(x, y) = x.final_energy < y.final_energy
                   or x.restricted_energy < y.restricted_energy

The second test runs even when the final energies do not tie, so the
predicate is neither transitive nor antisymmetric. OrderingPolicy.ORIGINAL
keeps it as is; OrderingPolicy.LEXICOGRAPHIC swaps in a strict lexicographic
order on (final_energy, restricted_energy).
"""

from __future__ import annotations

import functools
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Callable, Iterable

__all__ = [
    "DesignResult",
    "OrderingPolicy",
    "ResultOrdering",
    "result_better",
    "lexicographic_better",
    "rank_results",
]


@dataclass(frozen=True)
class DesignResult:
    """One completed evaluation of one candidate sequence.

    Values are stored verbatim; nothing is parsed or validated here.

    Attributes:
        sequence: Nucleotide sequence evaluated
        restricted: Structure predicted under the structural constraint
        restricted_energy: Free energy of `restricted`
        final_structure: Unconstrained predicted structure
        final_energy: Free energy of `final_structure`
        pf_energy: Partition-function ensemble free energy
    """

    sequence: str
    restricted: str
    restricted_energy: float
    final_structure: str
    final_energy: float
    pf_energy: float

    def get_sequence(self) -> str:
        return self.sequence

    def get_restricted(self) -> str:
        return self.restricted

    def get_restricted_energy(self) -> float:
        return self.restricted_energy

    def get_final_structure(self) -> str:
        return self.final_structure

    def get_final_energy(self) -> float:
        return self.final_energy

    def get_pf_energy(self) -> float:
        return self.pf_energy

    def as_dict(self) -> dict[str, Any]:
        """Return the six fields as a plain dict (field order preserved)."""
        return asdict(self)


def result_better(x: DesignResult, y: DesignResult) -> bool:
    """Return True if x ranks ahead of y under the two-step energy rule.

    Args:
        x: Candidate being tested
        y: Candidate compared against

    Returns:
        True if x has the lower final energy, or failing that the lower
        restricted energy
    """
    if x.final_energy < y.final_energy:
        return True
    if x.restricted_energy < y.restricted_energy:
        return True
    return False


def lexicographic_better(x: DesignResult, y: DesignResult) -> bool:
    """Strict lexicographic less-than on (final_energy, restricted_energy)."""
    return (x.final_energy, x.restricted_energy) < (y.final_energy, y.restricted_energy)


class OrderingPolicy(Enum):
    """Which predicate ResultOrdering applies."""

    ORIGINAL = "original"
    LEXICOGRAPHIC = "lexicographic"


_PREDICATES: dict[OrderingPolicy, Callable[[DesignResult, DesignResult], bool]] = {
    OrderingPolicy.ORIGINAL: result_better,
    OrderingPolicy.LEXICOGRAPHIC: lexicographic_better,
}


class ResultOrdering:
    """Stateless "is x preferable to y" predicate over DesignResult values.

    Instances are callable: ``ordering(x, y)`` answers whether x ranks ahead
    of y. ``compare`` and ``sort_key`` adapt the predicate for ``sorted()``.
    """

    __slots__ = ("policy", "_better")

    def __init__(self, policy: OrderingPolicy | str = OrderingPolicy.ORIGINAL) -> None:
        if isinstance(policy, str):
            try:
                policy = OrderingPolicy(policy.lower())
            except ValueError:
                known = ", ".join(p.value for p in OrderingPolicy)
                raise ValueError(f"Unknown ordering policy {policy!r} (expected one of: {known})") from None
        self.policy = policy
        self._better = _PREDICATES[policy]

    def __call__(self, x: DesignResult, y: DesignResult) -> bool:
        return self._better(x, y)

    def __repr__(self) -> str:
        return f"ResultOrdering({self.policy.value!r})"

    def compare(self, x: DesignResult, y: DesignResult) -> int:
        """Three-way comparison: -1 if x ranks first, 1 if y does, else 0.

        Under ORIGINAL both better(x, y) and better(y, x) can hold; x wins then.
        """
        if self._better(x, y):
            return -1
        if self._better(y, x):
            return 1
        return 0

    def sort_key(self) -> Callable[[DesignResult], Any]:
        return functools.cmp_to_key(self.compare)


def rank_results(
    results: Iterable[DesignResult],
    policy: OrderingPolicy | str = OrderingPolicy.ORIGINAL,
) -> list[DesignResult]:
    """Return results sorted best-first under the given policy.

    Under ORIGINAL the order is deterministic for a fixed input order but is
    not guaranteed to be a consistent total order.
    """
    ordering = ResultOrdering(policy)
    return sorted(results, key=ordering.sort_key())
