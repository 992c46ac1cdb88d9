#!/usr/bin/env python3
"""Dataset generation script for performance testing.

Generates synthetic Format D CSV files with parameterized rows/columns:
- Line 1: #table=<table>
- Line 2: #types=<type1>,<type2>,...
- Line 3: header line
- Line 4+: data rows

Optionally injects invalid cells so the error path (collector cap, error log)
can be exercised at volume too.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

# column type cycle for generated tables (id column is always first)
TYPE_CYCLE = ["text", "decimal", "int", "bool", "date", "timestamp", "uuid"]

# invalid cell per type, used by --invalid-rate
INVALID_VALUES = {
    "int": "abc",
    "decimal": "1e5",
    "bool": "yes",
    "date": "2023-02-30",
    "timestamp": "2024-01-01 25:00:00",
    "uuid": "not-a-uuid",
}


def generate_synthetic_data(
    rows: int,
    cols: int,
    seed: int = 42,
    null_rate: float = 0.02,
    invalid_rate: float = 0.0,
) -> tuple[list[str], pd.DataFrame]:
    """Generate column types and a DataFrame of cell strings.

    Args:
        rows: Number of data rows to generate
        cols: Number of columns (first one is an int id)
        seed: Random seed for reproducible data
        null_rate: Share of non-id cells replaced by NULL
        invalid_rate: Share of non-text, non-id cells replaced by an invalid value

    Returns:
        (types, DataFrame with str cells)
    """
    rng = np.random.default_rng(seed)

    types = ["int"] + [TYPE_CYCLE[i % len(TYPE_CYCLE)] for i in range(cols - 1)]
    data: dict[str, list[Any]] = {"id": [str(i) for i in range(1, rows + 1)]}

    for i, type_id in enumerate(types[1:], start=1):
        name = f"{type_id}_{i}"
        if type_id == "text":
            words = np.array(["alpha", "beta", "O'Reilly", "comma, inside", 'say "hi"', "日本語"])
            values = [f"{w} {n}" for w, n in zip(rng.choice(words, rows), rng.integers(0, 10_000, rows))]
        elif type_id == "decimal":
            values = [f"{v:.2f}" for v in rng.uniform(-10_000, 10_000, rows)]
        elif type_id == "int":
            values = [str(v) for v in rng.integers(-(2**31), 2**31 - 1, rows)]
        elif type_id == "bool":
            values = rng.choice(["true", "false", "TRUE", "False"], rows).tolist()
        elif type_id == "date":
            days = pd.to_datetime("2000-01-01") + pd.to_timedelta(rng.integers(0, 9_000, rows), unit="D")
            values = days.strftime("%Y-%m-%d").tolist()
        elif type_id == "timestamp":
            secs = pd.to_datetime("2020-01-01") + pd.to_timedelta(rng.integers(0, 10**8, rows), unit="s")
            values = secs.strftime("%Y-%m-%d %H:%M:%S").tolist()
        else:
            raw = rng.integers(0, 256, (rows, 16), dtype=np.uint8)
            values = [_format_uuid(r.tobytes().hex()) for r in raw]

        nulls = rng.random(rows) < null_rate
        invalid = rng.random(rows) < invalid_rate if type_id in INVALID_VALUES else np.zeros(rows, dtype=bool)
        data[name] = [
            INVALID_VALUES[type_id] if bad else ("NULL" if null else v)
            for v, null, bad in zip(values, nulls, invalid)
        ]

    return types, pd.DataFrame(data)


def _format_uuid(h: str) -> str:
    return f"{h[0:8]}-{h[8:12]}-{h[12:16]}-{h[16:20]}-{h[20:32]}"


def create_csv_file(
    output_path: Path,
    rows: int,
    cols: int,
    table: str = "perf_data",
    seed: int = 42,
    invalid_rate: float = 0.0,
) -> None:
    """Write one Format D CSV file."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    types, df = generate_synthetic_data(rows, cols, seed, invalid_rate=invalid_rate)

    with output_path.open("w", encoding="utf-8", newline="") as f:
        f.write(f"#table={table}\n")
        f.write("#types=" + ",".join(types) + "\n")
        df.to_csv(f, index=False, lineterminator="\n")

    print(f"Created CSV file: {output_path}")
    print(f"  Table: {table}")
    print(f"  Rows: {rows} (+ 3 meta/header lines)")
    print(f"  Columns: {cols} ({', '.join(types)})")
    print(f"  Total data cells: {rows * cols:,}")


def main() -> int:
    """Main CLI interface for dataset generation."""
    parser = argparse.ArgumentParser(
        description="Generate synthetic Format D CSV datasets for performance testing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Generate default 50k rows, 12 columns
  %(prog)s data/perf.csv

  # Generate custom size dataset
  %(prog)s data/large.csv --rows 200000 --cols 20

  # Generate several files with injected invalid cells
  %(prog)s data/bad.csv --files 3 --invalid-rate 0.01
        """
    )

    parser.add_argument("output", type=Path, help="Output CSV file path")
    parser.add_argument("--rows", type=int, default=50_000, help="Number of data rows (default: 50,000)")
    parser.add_argument("--cols", type=int, default=12, help="Number of columns (default: 12)")
    parser.add_argument("--table", default="perf_data", help="Table name (default: perf_data)")
    parser.add_argument(
        "--files", type=int, default=1, help="Number of files; extra files get a _<n> suffix (default: 1)"
    )
    parser.add_argument(
        "--invalid-rate", type=float, default=0.0, help="Share of typed cells made invalid (default: 0)"
    )
    parser.add_argument("--seed", type=int, default=42, help="Random seed for reproducible data (default: 42)")
    parser.add_argument(
        "--dry-run", action="store_true", help="Show what would be generated without creating files"
    )

    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1
    if args.cols <= 0:
        print("Error: --cols must be positive", file=sys.stderr)
        return 1
    if args.files <= 0:
        print("Error: --files must be positive", file=sys.stderr)
        return 1
    if not 0.0 <= args.invalid_rate <= 1.0:
        print("Error: --invalid-rate must be between 0 and 1", file=sys.stderr)
        return 1

    total_cells = args.files * args.rows * args.cols
    total_size_mb = total_cells * 12 / (1024 * 1024)  # rough estimate: 12 bytes per cell

    print("Dataset generation plan:")
    print(f"  Output: {args.output} x {args.files}")
    print(f"  Rows per file: {args.rows:,}")
    print(f"  Columns: {args.cols}")
    print(f"  Total data cells: {total_cells:,}")
    print(f"  Estimated size: ~{total_size_mb:.1f} MB")
    print(f"  Invalid rate: {args.invalid_rate}")
    print(f"  Random seed: {args.seed}")

    if args.dry_run:
        print("\n[DRY RUN] Would generate files but not creating them.")
        return 0

    try:
        print("\nGenerating dataset...")
        for n in range(args.files):
            path = args.output if n == 0 else args.output.with_name(f"{args.output.stem}_{n + 1}{args.output.suffix}")
            create_csv_file(path, args.rows, args.cols, args.table, args.seed + n, args.invalid_rate)
        print("\nDataset generation completed successfully!")
        return 0

    except OSError as e:
        print(f"\nError generating dataset: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
