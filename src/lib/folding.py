"""
Folding-engine capability used to evaluate design candidates.

The ranking core only needs two operations from a folding engine:

    fold(sequence, constraint=None) -> FoldOutcome(structure, energy)
    partition_function(sequence)    -> ensemble free energy

`FoldingEngine` names that contract so tests can plug in deterministic stubs.
`RNAfoldEngine` implements it on top of the ViennaRNA ``RNAfold`` executable.
Engines signal failure by raising FoldingError; they never return partial
outcomes.
"""

from __future__ import annotations

import re
import subprocess
import tempfile
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from .seq_strings import seq_to_rna, seq_toupper

__all__ = [
    "CONSTRAINT_CHARS",
    "FoldOutcome",
    "FoldingEngine",
    "FoldingError",
    "RNAfoldRecord",
    "RNAfoldEngine",
    "normalize_sequence",
    "parse_rnafold_output",
]

RNA_ALPHABET = frozenset("ACGU")
# Hard-constraint symbols accepted by RNAfold -C.
CONSTRAINT_CHARS = frozenset(".()|x<>")

_MFE_LINE = re.compile(r"^(?P<struct>\S+)\s+\(\s*(?P<energy>[-+]?\d+(?:\.\d+)?)\s*\)\s*$")
_ENSEMBLE_LINE = re.compile(r"^(?P<struct>\S+)\s+\[\s*(?P<energy>[-+]?\d+(?:\.\d+)?)\s*\]\s*$")


class FoldingError(RuntimeError):
    """Raised when the folding engine cannot produce a result for a sequence."""


@dataclass(frozen=True)
class FoldOutcome:
    """Structure and free energy returned by one fold call."""

    structure: str
    energy: float


class FoldingEngine(Protocol):
    def fold(self, sequence: str, constraint: str | None = None) -> FoldOutcome:
        ...

    def partition_function(self, sequence: str) -> float:
        ...


@dataclass
class RNAfoldRecord:
    """Parsed RNAfold stdout for one sequence.

    Attributes:
        sequence: Sequence echoed by RNAfold
        structure: MFE structure
        energy: MFE free energy
        ensemble_energy: Ensemble free energy (only present with -p)
    """

    sequence: str
    structure: str
    energy: float
    ensemble_energy: float | None = None


def normalize_sequence(seq: str) -> str:
    """Uppercase, strip whitespace, convert T->U, and reject non-ACGU characters."""
    norm = seq_to_rna(seq_toupper("".join(str(seq or "").split())))
    bad = sorted(set(norm) - RNA_ALPHABET)
    if bad:
        raise FoldingError(f"Sequence contains characters outside ACGU: {''.join(bad)}")
    return norm


def parse_rnafold_output(text: str) -> RNAfoldRecord:
    """Parse RNAfold stdout (optionally with a FASTA header and -p output).

    Raises:
        FoldingError: If no MFE line can be found
    """
    seq = ""
    record: RNAfoldRecord | None = None
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith(">"):
            continue
        if record is None:
            m = _MFE_LINE.match(line)
            if m:
                record = RNAfoldRecord(
                    sequence=seq,
                    structure=m.group("struct"),
                    energy=float(m.group("energy")),
                )
            elif not seq:
                seq = line
            continue
        m = _ENSEMBLE_LINE.match(line)
        if m and record.ensemble_energy is None:
            record.ensemble_energy = float(m.group("energy"))

    if record is None:
        raise FoldingError("RNAfold output contains no MFE structure line")
    return record


class RNAfoldEngine:
    """FoldingEngine backed by the ViennaRNA ``RNAfold`` executable.

    Each call runs RNAfold once inside a scratch directory (``-p`` writes
    dot-plot files into the working directory).
    """

    def __init__(
        self,
        rnafold_exe: str | Path = "RNAfold",
        temperature: float | None = None,
        extra_args: Sequence[str] | None = None,
        enforce_constraint: bool = False,
    ) -> None:
        self.rnafold_exe = str(rnafold_exe)
        self.temperature = temperature
        self.extra_args = list(extra_args) if extra_args else []
        self.enforce_constraint = enforce_constraint

    def _base_cmd(self) -> list[str]:
        cmd = [self.rnafold_exe, "--noPS"]
        if self.temperature is not None:
            cmd += ["-T", str(self.temperature)]
        return cmd

    def _run(self, cmd: list[str], stdin_text: str) -> RNAfoldRecord:
        with tempfile.TemporaryDirectory() as tmpdir:
            try:
                proc = subprocess.run(
                    cmd + self.extra_args,
                    input=stdin_text,
                    check=True,
                    text=True,
                    capture_output=True,
                    cwd=tmpdir,
                )
            except FileNotFoundError as exc:
                raise FoldingError(f"RNAfold executable not found: {self.rnafold_exe}") from exc
            except subprocess.CalledProcessError as exc:
                msg = (exc.stderr or "").strip().splitlines()
                detail = msg[-1] if msg else f"exit status {exc.returncode}"
                raise FoldingError(f"RNAfold failed: {detail}") from exc
        return parse_rnafold_output(proc.stdout)

    def fold(self, sequence: str, constraint: str | None = None) -> FoldOutcome:
        seq = normalize_sequence(sequence)
        cmd = self._base_cmd()
        stdin_text = f">cand\n{seq}\n"
        if constraint is not None:
            if len(constraint) != len(seq):
                raise FoldingError(
                    f"Constraint length {len(constraint)} does not match sequence length {len(seq)}"
                )
            cmd.append("-C")
            if self.enforce_constraint:
                cmd.append("--enforceConstraint")
            stdin_text += constraint + "\n"
        record = self._run(cmd, stdin_text)
        return FoldOutcome(structure=record.structure, energy=record.energy)

    def partition_function(self, sequence: str) -> float:
        seq = normalize_sequence(sequence)
        record = self._run(self._base_cmd() + ["-p"], f">cand\n{seq}\n")
        if record.ensemble_energy is None:
            raise FoldingError("RNAfold -p output contains no ensemble energy line")
        return record.ensemble_energy
