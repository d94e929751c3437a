"""
Turn one candidate sequence into a DesignResult.

A result is only built once all three engine calls have returned:
restricted fold, unrestricted fold, then partition function.
"""

from __future__ import annotations

import sys

from .design_result import DesignResult
from .folding import FoldingEngine, FoldingError

__all__ = ["evaluate_sequence", "try_evaluate"]


def evaluate_sequence(engine: FoldingEngine, sequence: str, constraint: str) -> DesignResult:
    """Fold `sequence` with and without `constraint` and record the outcome.

    Args:
        engine: Folding engine
        sequence: Candidate sequence
        constraint: Structural constraint for the restricted fold

    Returns:
        Completed DesignResult

    Raises:
        FoldingError: If any engine call fails
    """
    restricted = engine.fold(sequence, constraint)
    final = engine.fold(sequence)
    pf_energy = engine.partition_function(sequence)
    return DesignResult(
        sequence=sequence,
        restricted=restricted.structure,
        restricted_energy=restricted.energy,
        final_structure=final.structure,
        final_energy=final.energy,
        pf_energy=pf_energy,
    )


def try_evaluate(engine: FoldingEngine, sequence: str, constraint: str) -> DesignResult | None:
    """Like evaluate_sequence, but report engine failures and return None."""
    try:
        return evaluate_sequence(engine, sequence, constraint)
    except FoldingError as exc:
        sys.stderr.write(f"[WARN] Skipping candidate {sequence}: {exc}\n")
        return None
