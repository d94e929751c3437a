"""
Sequence string helpers.

The design loop and report layer use random_string, hamming_distance and the
case/alphabet/gap conversions. The splitting, joining, bounded Hamming and
cut-point helpers are library functions for callers that handle multi-strand
input; the design driver itself only accepts single-strand targets.

Cut points follow the multi-strand convention: a single ``&`` separates two
strands, and the cut point is the 1-based position of the first nucleotide
of the second strand.
"""

from __future__ import annotations

import random
from collections.abc import Iterable

__all__ = [
    "CUT_POINT_CHAR",
    "GAP_CHARS",
    "strsplit",
    "strjoin",
    "random_string",
    "hamming_distance",
    "hamming_distance_bound",
    "seq_to_rna",
    "seq_toupper",
    "seq_ungapped",
    "cut_point_insert",
    "cut_point_remove",
]

CUT_POINT_CHAR = "&"
GAP_CHARS = frozenset("-_~.")


def strsplit(string: str, delimiter: str | None = None) -> list[str]:
    """Split on a single delimiter character (default ``&``), dropping empty tokens."""
    delim = CUT_POINT_CHAR if not delimiter else delimiter[0]
    if delim not in string:
        return [string]
    return [tok for tok in string.split(delim) if tok]


def strjoin(strings: Iterable[str], delimiter: str | None = None) -> str:
    return (delimiter or "").join(strings)


def random_string(length: int, symbols: str, rng: random.Random | None = None) -> str:
    """Draw `length` characters uniformly from `symbols`.

    Args:
        length: Number of characters
        symbols: Symbol set to draw from
        rng: Random generator (module-level generator if None)

    Returns:
        Random string of the requested length
    """
    if length < 0:
        raise ValueError(f"length must be >= 0 (got {length})")
    if not symbols:
        raise ValueError("symbols must not be empty")
    rng = rng or random.Random()
    return "".join(rng.choice(symbols) for _ in range(length))


def hamming_distance(s1: str, s2: str) -> int:
    """Count mismatches over the common prefix of two strings."""
    return sum(1 for a, b in zip(s1, s2) if a != b)


def hamming_distance_bound(s1: str, s2: str, n: int) -> int:
    """Count mismatches over the first `n` characters only."""
    if n <= 0:
        return 0
    return hamming_distance(s1[:n], s2[:n])


def seq_to_rna(seq: str) -> str:
    return seq.replace("T", "U").replace("t", "u")


def seq_toupper(seq: str) -> str:
    return seq.upper()


def seq_ungapped(seq: str) -> str:
    return "".join(ch for ch in seq if ch not in GAP_CHARS)


def cut_point_insert(string: str, cp: int) -> str:
    """Insert ``&`` before 1-based position `cp`; `cp <= 0` leaves the string unchanged."""
    if cp <= 0:
        return string
    if cp > len(string) + 1:
        raise ValueError(f"cut point {cp} outside string of length {len(string)}")
    return string[: cp - 1] + CUT_POINT_CHAR + string[cp - 1 :]


def cut_point_remove(string: str) -> tuple[str, int]:
    """Slice out the ``&`` separator.

    Returns:
        Tuple of (string without ``&``, 1-based cut point or -1 if absent)
    """
    idx = string.find(CUT_POINT_CHAR)
    if idx < 0:
        return string, -1
    return string[:idx] + string[idx + 1 :], idx + 1
