# tests/conftest.py
"""Shared test fixtures for design-result ranking tests."""

import sys
import threading
from pathlib import Path

import pytest

# Repo root = parent of this file's directory
ROOT = Path(__file__).resolve().parents[1]

# Ensure the repo root is on sys.path so `import src...` works
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.lib.design_result import DesignResult  # noqa: E402
from src.lib.folding import FoldingError, FoldOutcome  # noqa: E402


class StubEngine:
    """Deterministic folding engine keyed on GC content.

    - unconstrained fold: all-unpaired structure, energy -0.5 per G/C
    - constrained fold: the constraint itself, energy one unit above the final fold
    - partition function: final energy minus 0.4
    Sequences listed in `fail_on` raise FoldingError.
    """

    def __init__(self, fail_on: set[str] | None = None) -> None:
        self.fail_on = fail_on or set()
        self.calls: list[tuple[str, str, str | None]] = []
        self._lock = threading.Lock()

    def _record(self, op: str, sequence: str, constraint: str | None = None) -> None:
        with self._lock:
            self.calls.append((op, sequence, constraint))
        if sequence in self.fail_on:
            raise FoldingError(f"stub failure for {sequence}")

    @staticmethod
    def _gc_energy(sequence: str) -> float:
        return round(-0.5 * sum(1 for ch in sequence if ch in "GC"), 2)

    def fold(self, sequence: str, constraint: str | None = None) -> FoldOutcome:
        self._record("fold", sequence, constraint)
        energy = self._gc_energy(sequence)
        if constraint is None:
            return FoldOutcome(structure="." * len(sequence), energy=energy)
        return FoldOutcome(structure=constraint, energy=round(energy + 1.0, 2))

    def partition_function(self, sequence: str) -> float:
        self._record("pf", sequence)
        return round(self._gc_energy(sequence) - 0.4, 2)


@pytest.fixture
def stub_engine() -> StubEngine:
    return StubEngine()


@pytest.fixture
def make_result():
    """Factory for results that only differ in the two ranked energies."""

    def _make(final: float, restricted: float, sequence: str = "GGGGAAAACCCC") -> DesignResult:
        return DesignResult(
            sequence=sequence,
            restricted="((((....))))",
            restricted_energy=restricted,
            final_structure="((((....))))",
            final_energy=final,
            pf_energy=final - 0.4,
        )

    return _make


@pytest.fixture
def hairpin_result() -> DesignResult:
    """The GGGGAAAACCCC hairpin scenario."""
    return DesignResult(
        sequence="GGGGAAAACCCC",
        restricted="((((....))))",
        restricted_energy=-5.2,
        final_structure="((((....))))",
        final_energy=-5.2,
        pf_energy=-5.6,
    )


@pytest.fixture
def rnafold_mfe_stdout() -> str:
    return ">cand\nGGGGAAAACCCC\n((((....)))) ( -5.20)\n"


@pytest.fixture
def rnafold_pf_stdout() -> str:
    return (
        ">cand\n"
        "GGGGAAAACCCC\n"
        "((((....)))) ( -5.20)\n"
        "((((....)))) [ -5.60]\n"
        "((((....)))) { -5.20 d=0.05}\n"
        " frequency of mfe structure in ensemble 0.523; ensemble diversity 0.10  \n"
    )
