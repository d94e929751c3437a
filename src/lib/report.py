"""Ranked-result tables."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import pandas as pd

from .design_result import DesignResult
from .seq_strings import hamming_distance

RESULT_COLUMNS = [
    "rank",
    "sequence",
    "restricted",
    "restricted_energy",
    "final_structure",
    "final_energy",
    "pf_energy",
    "restricted_distance",
]


def results_to_frame(results: Iterable[DesignResult]) -> pd.DataFrame:
    """One row per result, in the given (best-first) order."""
    rows = []
    for rank, res in enumerate(results, start=1):
        row = {"rank": rank}
        row.update(res.as_dict())
        # Positions where the unconstrained fold departs from the constrained one.
        row["restricted_distance"] = hamming_distance(res.final_structure, res.restricted)
        rows.append(row)
    return pd.DataFrame(rows, columns=RESULT_COLUMNS)


def write_results_tsv(results: Iterable[DesignResult], path: str | Path) -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    results_to_frame(results).to_csv(out, sep="\t", index=False)
    return out


def format_result(result: DesignResult) -> str:
    return (
        f"{result.sequence} final={result.final_structure} ({result.final_energy:.2f}) "
        f"restricted={result.restricted} ({result.restricted_energy:.2f}) "
        f"pf={result.pf_energy:.2f}"
    )
