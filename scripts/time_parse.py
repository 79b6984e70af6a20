#!/usr/bin/env python3
"""Quick perf benchmark for stylesheet parsing."""

from __future__ import annotations

import argparse
import cProfile
import io
from pathlib import Path
import pstats
import statistics
import time

from tqdm import tqdm

from scsspy import Dialect, parse


def _collect_stylesheets(root: Path) -> list[Path]:
    files = sorted([*root.rglob("*.scss"), *root.rglob("*.css")])
    return [path for path in files if path.is_file()]


def _load(files: list[Path]) -> list[tuple[str, Dialect]]:
    return [
        (
            path.read_text(encoding="utf-8"),
            Dialect.CSS if path.suffix.lower() == ".css" else Dialect.SCSS,
        )
        for path in files
    ]


def _run_once(
    sources: list[tuple[str, Dialect]],
    *,
    label: str,
    show_progress: bool,
) -> tuple[float, int, int, int]:
    start = time.perf_counter()
    total_nodes = 0
    total_diagnostics = 0
    iterator = tqdm(sources, desc=label, unit="file") if show_progress else sources
    for text, dialect in iterator:
        parsed = parse(text, dialect=dialect)
        total_nodes += sum(1 for _ in parsed.root.walk())
        total_diagnostics += len(parsed.diagnostics)
    duration = time.perf_counter() - start
    return duration, len(sources), total_nodes, total_diagnostics


def main() -> int:
    parser = argparse.ArgumentParser(description="Benchmark stylesheet parsing throughput")
    parser.add_argument("root", type=Path, help="Directory scanned for .scss/.css files")
    parser.add_argument("--runs", type=int, default=5, help="Measured runs")
    parser.add_argument("--warmups", type=int, default=1, help="Warmup runs")
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable tqdm progress bars (useful for pure timing)",
    )
    parser.add_argument(
        "--profile",
        action="store_true",
        help="Run cProfile and print top hotspots",
    )
    parser.add_argument(
        "--profile-top",
        type=int,
        default=30,
        help="Number of cProfile rows to print (default: 30)",
    )
    parser.add_argument(
        "--profile-sort",
        type=str,
        default="tottime",
        help="cProfile sort key (default: tottime, common: cumulative)",
    )
    parser.add_argument(
        "--limit-files",
        type=int,
        default=0,
        help="Optional file limit for quick profiling/smoke tests (0 = all files)",
    )
    args = parser.parse_args()

    root: Path = args.root
    if not root.exists() or not root.is_dir():
        raise SystemExit(f"Invalid root: {root}")

    files = _collect_stylesheets(root)
    if not files:
        raise SystemExit(f"No .scss/.css files found under {root}")
    if args.limit_files > 0:
        files = files[: args.limit_files]
    sources = _load(files)

    show_progress = not args.no_progress
    warmups = max(args.warmups, 0)
    runs = max(args.runs, 1)

    def _benchmark() -> tuple[list[float], int, int, int]:
        for warmup_idx in range(warmups):
            _run_once(sources, label=f"warmup {warmup_idx + 1}/{warmups}", show_progress=show_progress)

        timings: list[float] = []
        files_count = 0
        nodes_count = 0
        diagnostics_count = 0
        for run_idx in range(runs):
            duration, files_count, nodes_count, diagnostics_count = _run_once(
                sources,
                label=f"run {run_idx + 1}/{runs}",
                show_progress=show_progress,
            )
            timings.append(duration)
        return timings, files_count, nodes_count, diagnostics_count

    if args.profile:
        profiler = cProfile.Profile()
        profiler.enable()
        timings, files_count, nodes_count, diagnostics_count = _benchmark()
        profiler.disable()
        stream = io.StringIO()
        stats = pstats.Stats(profiler, stream=stream)
        stats.sort_stats(args.profile_sort).print_stats(max(args.profile_top, 1))
        print("\n[cProfile top functions]")
        print(stream.getvalue())
    else:
        timings, files_count, nodes_count, diagnostics_count = _benchmark()

    mean = statistics.mean(timings)

    print(f"Dataset: {root}")
    print(f"Files: {files_count}")
    print(f"Nodes: {nodes_count}")
    print(f"Diagnostics: {diagnostics_count}")
    print(f"Runs: {len(timings)} (warmups={warmups})")
    print(f"Best:   {min(timings):.4f}s")
    print(f"Median: {statistics.median(timings):.4f}s")
    print(f"Mean:   {mean:.4f}s")
    print(f"Worst:  {max(timings):.4f}s")
    print(f"Files/s (mean): {files_count / mean:.1f}")
    print(f"Nodes/s (mean): {nodes_count / mean:.1f}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
