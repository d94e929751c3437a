#!/usr/bin/env python3
"""
Random-sampling design driver: generate → evaluate → rank → report.

For a target structure (used as the hard constraint of the restricted
fold), the driver:

    1. draws `n_candidates` random sequences of matching length
       (plus any user-supplied sequences),
    2. evaluates each one with the folding engine
       (restricted fold, unrestricted fold, partition function),
    3. offers every completed DesignResult to a bounded best-k pool,
    4. writes the surviving results best-first as a TSV table.

Evaluation may run on a thread pool; results are offered to the pool in
candidate order so a fixed seed gives a reproducible ranking.

The driver does no steering: it is a plain sampler around the ranking core.
"""

from __future__ import annotations

import argparse
import json
import random
import sys
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional, Sequence

import yaml

from .design_result import DesignResult, OrderingPolicy, ResultOrdering
from .evaluate import try_evaluate
from .folding import CONSTRAINT_CHARS, FoldingEngine, RNAfoldEngine
from .report import format_result, results_to_frame, write_results_tsv
from .result_pool import ResultPool
from .seq_strings import random_string, seq_to_rna, seq_toupper, seq_ungapped

__all__ = [
    "DesignConfig",
    "DesignRun",
    "load_design_config",
    "validate_config",
    "generate_candidates",
    "run_design",
    "main",
]


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

@dataclass
class DesignConfig:
    """Parameters for one design run.

    Attributes:
        target: Target structure, used as the constraint of the restricted fold
        n_candidates: Number of random sequences to draw
        top_k: Capacity of the best-k pool
        seed: Random seed for reproducibility
        alphabet: Symbols random sequences are drawn from
        policy: Ranking policy ("original" or "lexicographic")
        workers: Number of concurrent folding workers
        rnafold_exe: RNAfold executable
        temperature: Folding temperature in Celsius (engine default if None)
        enforce_constraint: Force constrained pairs to form in the restricted fold
        extra_args: Extra RNAfold arguments
        sequences: Additional user-supplied sequences to evaluate first
        out_tsv: Output table (stdout if None)
    """

    target: str = ""
    n_candidates: int = 100
    top_k: int = 10
    seed: Optional[int] = None
    alphabet: str = "ACGU"
    policy: str = OrderingPolicy.ORIGINAL.value
    workers: int = 1
    rnafold_exe: str = "RNAfold"
    temperature: Optional[float] = None
    enforce_constraint: bool = False
    extra_args: Sequence[str] = ()
    sequences: Sequence[str] = field(default_factory=list)
    out_tsv: Optional[Path] = None


@dataclass
class DesignRun:
    """Outcome of run_design."""

    pool: ResultPool
    evaluated: int = 0
    failed: int = 0
    wall_seconds: float = 0.0

    def ranked(self) -> tuple[DesignResult, ...]:
        return self.pool.results()

    def summary(self) -> dict[str, Any]:
        best = self.pool.best()
        return {
            "evaluated": self.evaluated,
            "failed": self.failed,
            "kept": len(self.pool),
            "evicted": self.pool.evicted,
            "wall_seconds": self.wall_seconds,
            "best_final_energy": best.final_energy if best is not None else None,
        }


def load_design_config(path: Path) -> DesignConfig:
    """
    Load a design config from YAML (.yaml/.yml) or JSON.

    Relative `out_tsv` paths are resolved against the config file's directory.
    """
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")
    text = path.read_text()
    if path.suffix in {".yaml", ".yml"}:
        raw = yaml.safe_load(text) or {}
    else:
        raw = json.loads(text)
    if not isinstance(raw, dict):
        raise ValueError(f"Config {path} must contain a mapping at top level")

    known = {f.name for f in fields(DesignConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"Unknown config keys in {path}: {', '.join(unknown)}")

    for key in ("extra_args", "sequences"):
        value = raw.get(key)
        if value is not None and not isinstance(value, list):
            raise ValueError(f"{key} must be a list in {path} (got {type(value).__name__})")

    cfg = DesignConfig(**raw)
    if cfg.out_tsv is not None:
        out = Path(cfg.out_tsv)
        if not out.is_absolute():
            out = path.parent / out
        cfg.out_tsv = out
    cfg.extra_args = tuple(str(arg) for arg in cfg.extra_args or ())
    cfg.sequences = list(cfg.sequences or [])
    return cfg


def _check_type(name: str, value: Any, expected: tuple[type, ...], optional: bool = False) -> None:
    if value is None and optional:
        return
    # bool is an int subclass; reject it for numeric settings.
    if isinstance(value, bool) and bool not in expected:
        raise ValueError(f"{name} must not be a boolean (got {value!r})")
    if not isinstance(value, expected):
        names = " or ".join(t.__name__ for t in expected)
        raise ValueError(f"{name} must be {names} (got {type(value).__name__} {value!r})")


def validate_config(cfg: DesignConfig) -> None:
    """Raise ValueError describing the first invalid setting."""
    for name in ("target", "alphabet", "policy", "rnafold_exe"):
        _check_type(name, getattr(cfg, name), (str,))
    for name in ("n_candidates", "top_k", "workers"):
        _check_type(name, getattr(cfg, name), (int,))
    _check_type("seed", cfg.seed, (int,), optional=True)
    _check_type("temperature", cfg.temperature, (int, float), optional=True)
    _check_type("enforce_constraint", cfg.enforce_constraint, (bool,))
    _check_type("extra_args", cfg.extra_args, (list, tuple))
    _check_type("sequences", cfg.sequences, (list, tuple))
    for seq in cfg.sequences:
        _check_type("sequences entry", seq, (str,))
    if not cfg.target:
        raise ValueError("target structure must not be empty")
    bad = sorted(set(cfg.target) - CONSTRAINT_CHARS)
    if bad:
        raise ValueError(f"target contains invalid constraint symbols: {''.join(bad)}")
    if cfg.n_candidates < 1:
        raise ValueError(f"n_candidates must be >= 1 (got {cfg.n_candidates})")
    if cfg.top_k < 1:
        raise ValueError(f"top_k must be >= 1 (got {cfg.top_k})")
    if cfg.workers < 1:
        raise ValueError(f"workers must be >= 1 (got {cfg.workers})")
    if not cfg.alphabet:
        raise ValueError("alphabet must not be empty")
    # Raises ValueError for unknown policies.
    ResultOrdering(cfg.policy)
    for seq in cfg.sequences:
        if len(_clean_sequence(seq)) != len(cfg.target):
            raise ValueError(
                f"sequence {seq!r} does not match target length {len(cfg.target)}"
            )


# ---------------------------------------------------------------------------
# Driver
# ---------------------------------------------------------------------------

def _clean_sequence(seq: str) -> str:
    return seq_to_rna(seq_toupper(seq_ungapped(seq.strip())))


def generate_candidates(cfg: DesignConfig) -> list[str]:
    """User-supplied sequences first, then `n_candidates` random draws."""
    rng = random.Random(cfg.seed)
    candidates = [_clean_sequence(s) for s in cfg.sequences]
    length = len(cfg.target)
    for _ in range(cfg.n_candidates):
        candidates.append(random_string(length, cfg.alphabet, rng))
    return candidates


def _default_engine(cfg: DesignConfig) -> RNAfoldEngine:
    return RNAfoldEngine(
        rnafold_exe=cfg.rnafold_exe,
        temperature=cfg.temperature,
        extra_args=cfg.extra_args,
        enforce_constraint=cfg.enforce_constraint,
    )


def _evaluate_all(
    engine: FoldingEngine,
    candidates: list[str],
    target: str,
    workers: int,
) -> list[Optional[DesignResult]]:
    if workers <= 1 or len(candidates) <= 1:
        return [try_evaluate(engine, seq, target) for seq in candidates]

    results: list[Optional[DesignResult]] = [None] * len(candidates)
    with ThreadPoolExecutor(max_workers=min(workers, len(candidates))) as ex:
        futures = {
            ex.submit(try_evaluate, engine, seq, target): idx
            for idx, seq in enumerate(candidates)
        }
        for fut in as_completed(futures):
            results[futures[fut]] = fut.result()
    return results


def run_design(cfg: DesignConfig, engine: Optional[FoldingEngine] = None) -> DesignRun:
    """Evaluate candidates for `cfg.target` and keep the best `cfg.top_k`.

    Args:
        cfg: Design configuration
        engine: Folding engine (RNAfold built from `cfg` if None)

    Returns:
        DesignRun with the filled pool and run counters
    """
    validate_config(cfg)
    engine = engine if engine is not None else _default_engine(cfg)
    pool = ResultPool(cfg.top_k, ResultOrdering(cfg.policy))
    run = DesignRun(pool=pool)

    candidates = generate_candidates(cfg)
    sys.stderr.write(
        f"[DESIGN] Target {cfg.target} (L={len(cfg.target)}): "
        f"evaluating {len(candidates)} candidates with {cfg.workers} worker(s), "
        f"policy={pool.ordering.policy.value}\n"
    )

    t0 = time.perf_counter()
    evaluated = _evaluate_all(engine, candidates, cfg.target, cfg.workers)
    for idx, result in enumerate(evaluated):
        if result is None:
            run.failed += 1
            continue
        run.evaluated += 1
        if pool.offer(result) and pool.best() is result:
            sys.stderr.write(f"[DESIGN] New best at candidate {idx + 1}: {format_result(result)}\n")
    run.wall_seconds = time.perf_counter() - t0

    sys.stderr.write(
        f"[DESIGN] Done: evaluated={run.evaluated} failed={run.failed} "
        f"kept={len(pool)} evicted={pool.evicted} ({run.wall_seconds:.1f}s)\n"
    )
    return run


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def _apply_overrides(cfg: DesignConfig, args: argparse.Namespace) -> DesignConfig:
    if args.target is not None:
        cfg.target = args.target
    if args.n_candidates is not None:
        cfg.n_candidates = args.n_candidates
    if args.top_k is not None:
        cfg.top_k = args.top_k
    if args.seed is not None:
        cfg.seed = args.seed
    if args.alphabet is not None:
        cfg.alphabet = args.alphabet
    if args.policy is not None:
        cfg.policy = args.policy
    if args.workers is not None:
        cfg.workers = args.workers
    if args.rnafold_exe is not None:
        cfg.rnafold_exe = args.rnafold_exe
    if args.temperature is not None:
        cfg.temperature = args.temperature
    if args.enforce_constraint:
        cfg.enforce_constraint = True
    if args.sequence:
        cfg.sequences = list(cfg.sequences) + list(args.sequence)
    if args.out is not None:
        cfg.out_tsv = Path(args.out)
    return cfg


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Sample RNA sequences for a target structure and rank them by folding energy.",
    )
    parser.add_argument("-c", "--config", help="JSON or YAML config file (flags override it).")
    parser.add_argument("--target", help="Target structure / hard constraint in dot-bracket.")
    parser.add_argument("--n-candidates", type=int, default=None)
    parser.add_argument("--top-k", type=int, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--alphabet", default=None)
    parser.add_argument(
        "--policy",
        choices=[p.value for p in OrderingPolicy],
        default=None,
        help="Ranking policy (default: original).",
    )
    parser.add_argument("--workers", type=int, default=None)
    parser.add_argument("--rnafold-exe", default=None)
    parser.add_argument("--temperature", type=float, default=None)
    parser.add_argument("--enforce-constraint", action="store_true")
    parser.add_argument(
        "--sequence",
        action="append",
        default=[],
        help="Extra sequence to evaluate (repeatable).",
    )
    parser.add_argument("--out", default=None, help="Output TSV (default: stdout).")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    try:
        cfg = load_design_config(Path(args.config).resolve()) if args.config else DesignConfig()
        cfg = _apply_overrides(cfg, args)
        validate_config(cfg)
    except (ValueError, FileNotFoundError, yaml.YAMLError, json.JSONDecodeError) as exc:
        raise SystemExit(f"[ERROR] Invalid design configuration: {exc}") from exc

    run = run_design(cfg)
    if run.evaluated == 0:
        raise SystemExit(
            f"[ERROR] No candidate could be evaluated ({run.failed} failed); "
            f"check the RNAfold executable ({cfg.rnafold_exe}) and the alphabet ({cfg.alphabet})"
        )
    ranked = run.ranked()
    if cfg.out_tsv is not None:
        out = write_results_tsv(ranked, cfg.out_tsv)
        sys.stderr.write(f"[DESIGN] Wrote {len(ranked)} ranked results to {out}\n")
    else:
        results_to_frame(ranked).to_csv(sys.stdout, sep="\t", index=False)


if __name__ == "__main__":
    main()
