#!/usr/bin/env python3
"""
Batch runner for the design driver.

Loops over a list of named target structures, writes a per-target copy of a
base design config, runs design_cli.py for each, and collects the best
result of every target into one summary table.

Usage:
    python scripts/run_batch.py \
        --config example/design_config.yaml \
        --targets-file example/targets.tsv \
        --output-base example/batch_results
"""

import argparse
import copy
import subprocess
import sys
from pathlib import Path

import pandas as pd
import yaml  # Requires: pip install pyyaml


def parse_targets(text: str) -> list[tuple[str, str]]:
    """
    Parse "name<whitespace>structure" lines; blank lines and '#' comments are skipped.
    """
    targets = []
    for lineno, line in enumerate(text.splitlines(), 1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        parts = line.split()
        if len(parts) != 2:
            raise ValueError(f"line {lineno}: expected 'name structure', got {line!r}")
        targets.append((parts[0], parts[1]))
    return targets


def target_config(base_config: dict, name: str, structure: str, target_dir: Path) -> dict:
    cfg = copy.deepcopy(base_config)
    cfg["target"] = structure
    cfg["out_tsv"] = str(target_dir / f"{name}_ranked.tsv")
    return cfg


def collect_best(output_root: Path, names: list[str]) -> pd.DataFrame:
    """First (best) row of every per-target table that exists."""
    rows = []
    for name in names:
        table = output_root / name / f"{name}_ranked.tsv"
        if not table.is_file():
            continue
        df = pd.read_csv(table, sep="\t")
        if df.empty:
            continue
        row = df.iloc[0].to_dict()
        row["target_name"] = name
        rows.append(row)
    return pd.DataFrame(rows)


def main():
    parser = argparse.ArgumentParser(description="Run the design driver on a batch of targets.")
    parser.add_argument("--targets-file", required=True, help="File with one 'name structure' per line.")
    parser.add_argument("-c", "--config", required=True, help="Path to the base design config YAML.")
    parser.add_argument("-o", "--output-base", required=True, help="Root directory for per-target folders.")
    parser.add_argument("--design-script", default="design_cli.py", help="Path to the design CLI (default: design_cli.py).")

    args = parser.parse_args()

    try:
        targets = parse_targets(Path(args.targets_file).read_text())
    except ValueError as exc:
        print(f"Error parsing targets file: {exc}")
        sys.exit(1)
    if not targets:
        print("No targets found to process.")
        sys.exit(1)

    config_path = Path(args.config).resolve()
    with open(config_path, "r") as f:
        try:
            base_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            print(f"Error parsing YAML config: {exc}")
            sys.exit(1)

    output_root = Path(args.output_base).resolve()
    design_script = Path(args.design_script).resolve()
    if not design_script.exists():
        print(f"Error: design script not found at {design_script}")
        sys.exit(1)

    print(f"Found {len(targets)} targets to process.")
    print(f"Output root: {output_root}")
    print("-" * 60)

    failures = []
    for i, (name, structure) in enumerate(targets, 1):
        print(f"[{i}/{len(targets)}] Designing for target: {name} {structure}")
        target_dir = output_root / name
        target_dir.mkdir(parents=True, exist_ok=True)

        cfg_path = target_dir / f"{name}_config.yaml"
        with open(cfg_path, "w") as f:
            yaml.dump(target_config(base_config, name, structure, target_dir), f)

        cmd = [sys.executable, str(design_script), "--config", str(cfg_path)]
        try:
            subprocess.run(cmd, check=True)
            print(f"  -> Success. Results in {target_dir}")
        except subprocess.CalledProcessError as e:
            print(f"  -> FAILED. Exit code: {e.returncode}")
            failures.append(name)
        print("-" * 60)

    summary = collect_best(output_root, [name for name, _ in targets])
    summary_path = output_root / "best_per_target.tsv"
    summary.to_csv(summary_path, sep="\t", index=False)
    print(f"Wrote summary of {len(summary)} targets to {summary_path}")

    if failures:
        print(f"\nBatch completed with {len(failures)} failures:")
        for name in failures:
            print(f" - {name}")
        sys.exit(1)
    print("\nBatch completed successfully.")


if __name__ == "__main__":
    main()
