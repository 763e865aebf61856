"""Execution helpers for Mandelbrot render workflows."""

from __future__ import annotations

import sys
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

import numpy as np

from .computation import allocate_buffer, render_band
from .config import RenderConfig
from .encoder import write_image
from .report import BandTiming, RenderReport
from .scheduling import RowBand, partition_rows, split_buffer


def _band_log(index: int, message: str) -> None:
    """Emit a progress message from a given worker band."""
    print(f"[Band {index}] {message}", flush=True)


def _render_band_timed(
    config: RenderConfig,
    band: RowBand,
    view: np.ndarray,
    verbose: bool,
) -> BandTiming:
    """Render one band into its view and time it."""
    if verbose:
        _band_log(band.index, f"Rendering rows {band.start}-{band.stop - 1}")
    t0 = time.perf_counter()
    render_band(config, view, band.start)
    return BandTiming(band, time.perf_counter() - t0)


def render(
    config: RenderConfig,
    workers: Optional[int] = None,
    *,
    verbose: bool = False,
) -> RenderReport:
    """Render ``config`` across a pool of threads, one row-band per thread.

    Blocks until every band is done. The buffer is split into disjoint row
    views before any thread starts, so no two workers share a row.
    """
    n_workers = workers if workers is not None else config.n_workers

    t0 = time.perf_counter()
    image = allocate_buffer(config)
    bands = partition_rows(config.height, n_workers)
    views = split_buffer(image, bands)

    timings: List[BandTiming] = []
    if bands:
        with ThreadPoolExecutor(max_workers=len(bands)) as pool:
            futures = [
                pool.submit(_render_band_timed, config, band, view, verbose)
                for band, view in zip(bands, views)
            ]
            timings = [future.result() for future in futures]

    return RenderReport(
        image=image,
        bands=tuple(timings),
        workers=n_workers,
        wall_time=time.perf_counter() - t0,
    )


def run_single_render(
    config: RenderConfig,
    output: str | Path,
    *,
    verbose: bool = False,
) -> RenderReport:
    """Render ``config`` and write it to ``output``.

    ``OSError`` from the write propagates; nothing is left at ``output``.
    """
    n_workers = config.n_workers
    print(
        f"[Run] Starting render '{config.run_name}' "
        f"(size={config.width}x{config.height}, limit={config.limit}, workers={n_workers})",
        flush=True,
    )

    report = render(config, n_workers, verbose=verbose)

    t0 = time.perf_counter()
    write_image(output, report.image)
    report = replace(report, write_time=time.perf_counter() - t0)

    print(f"[Run] Wrote {output}", flush=True)
    print(report.timing_line(), flush=True)
    return report


def run_batch(
    configs: List[RenderConfig],
    descriptor: str = "batch",
    *,
    verbose: bool = False,
) -> int:
    """Run every config in order; return a process exit code."""
    if not configs:
        print("ERROR: No renders found in batch", file=sys.stderr)
        return 1

    print("=" * 70)
    print(f"Running {len(configs)} renders from {descriptor}")
    print("=" * 70)

    successes = 0
    failures: list[tuple[int, str]] = []

    for idx, cfg in enumerate(configs):
        print(f"\n[{idx + 1}/{len(configs)}] {cfg.run_name}")
        try:
            run_single_render(cfg, cfg.output, verbose=verbose)  # type: ignore[arg-type]
        except OSError as exc:
            print(f"    ✗ FAILED: error writing {cfg.output}: {exc}", file=sys.stderr)
            failures.append((idx, cfg.run_name))
            continue
        successes += 1
        print("    ✓ Completed")

    print("\n" + "=" * 70)
    print("Summary")
    print("=" * 70)
    print(f"Total:      {len(configs)}")
    print(f"Successful: {successes}")
    print(f"Failed:     {len(failures)}")

    if failures:
        print("\nFailed renders:")
        for idx, name in failures:
            print(f"  [{idx}] {name}")
        return 1

    return 0
