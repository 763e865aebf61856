"""Results of a parallel render: the finished buffer plus per-band timings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .scheduling import RowBand


@dataclass(frozen=True)
class BandTiming:
    band: RowBand
    seconds: float


@dataclass(frozen=True)
class RenderReport:
    """What ``render`` hands back once every band has joined.

    ``comp_total`` adds up the time spent inside band kernels; divided by
    ``wall_time`` it shows how much the threads overlapped.
    """

    image: np.ndarray
    bands: Tuple[BandTiming, ...]
    workers: int
    wall_time: float
    write_time: Optional[float] = None

    @property
    def comp_total(self) -> float:
        return sum(timing.seconds for timing in self.bands)

    @property
    def parallelism(self) -> float:
        if self.wall_time <= 0.0:
            return 0.0
        return self.comp_total / self.wall_time

    def timing_line(self) -> str:
        line = (
            f"[Timing] Render: {self.wall_time:.4f}s "
            f"(bands: {self.comp_total:.4f}s over {len(self.bands)}, x{self.parallelism:.2f})"
        )
        if self.write_time is not None:
            line += f", write: {self.write_time:.4f}s"
        return line
