"""Row-band work partitioning for parallel renders."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List

import numpy as np

FALLBACK_WORKERS = 8


@dataclass(frozen=True)
class RowBand:
    """A contiguous range of image rows ``[start, stop)`` owned by one worker."""
    index: int
    start: int
    stop: int

    @property
    def rows(self) -> int:
        return self.stop - self.start


def default_worker_count() -> int:
    """Number of hardware threads, or a fixed count if it can't be queried."""
    return os.cpu_count() or FALLBACK_WORKERS


def partition_rows(height: int, workers: int) -> List[RowBand]:
    """Split ``[0, height)`` into at most ``workers`` equal contiguous bands.

    Band sizes differ by at most one row; the leading bands take the
    remainder. No band is empty, so an image with no rows has no bands.
    """
    if workers < 1:
        raise ValueError(f"workers must be at least 1, got {workers}")
    n_bands = min(workers, height)
    if n_bands <= 0:
        return []

    base, extra = divmod(height, n_bands)
    bands: List[RowBand] = []
    start = 0
    for index in range(n_bands):
        stop = start + base + (1 if index < extra else 0)
        bands.append(RowBand(index, start, stop))
        start = stop
    return bands


def split_buffer(buffer: np.ndarray, bands: List[RowBand]) -> List[np.ndarray]:
    """Cut ``buffer`` into one non-overlapping row view per band."""
    if not bands:
        return []
    return np.split(buffer, [band.stop for band in bands[:-1]], axis=0)
