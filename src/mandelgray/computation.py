from __future__ import annotations

from typing import Tuple

import numpy as np
from numba import njit

from .config import RenderConfig

__all__ = ["allocate_buffer", "pixel_to_point", "escape_time", "intensity", "render_band"]


def allocate_buffer(config: RenderConfig) -> np.ndarray:
    return np.zeros((config.height, config.width), dtype=np.uint8)


@njit(nogil=True)
def pixel_to_point(
    bounds: Tuple[int, int],
    pixel: Tuple[int, int],
    upper_left: complex,
    lower_right: complex,
) -> complex:
    """Return the point on the complex plane under pixel ``(column, row)``.

    ``bounds`` is the image ``(width, height)``. Each axis is interpolated
    on its own, so either corner may carry the larger component.
    """
    re = upper_left.real + (pixel[0] / bounds[0]) * (lower_right.real - upper_left.real)
    im = upper_left.imag + (pixel[1] / bounds[1]) * (lower_right.imag - upper_left.imag)
    return complex(re, im)


@njit(nogil=True)
def escape_time(c: complex, limit: int) -> int:
    """Count iterations of ``z = z*z + c`` until ``|z| > 2``, at most ``limit``.

    Returns the index of the iteration on which ``z`` left the circle of
    radius two, or ``limit`` if it never did.
    """
    re = 0.0
    im = 0.0
    for i in range(limit):
        re, im = re * re - im * im + c.real, 2.0 * re * im + c.imag
        if re * re + im * im > 4.0:
            return i
    return limit


@njit(nogil=True)
def intensity(count: int, limit: int) -> int:
    # interior (count == limit) is black
    return limit - count


@njit(nogil=True)
def _render_band(
    band: np.ndarray,
    top: int,
    width: int,
    height: int,
    upper_left: complex,
    lower_right: complex,
    limit: int,
) -> None:
    for local_row in range(band.shape[0]):
        row = top + local_row
        for column in range(width):
            point = pixel_to_point((width, height), (column, row), upper_left, lower_right)
            band[local_row, column] = intensity(escape_time(point, limit), limit)


def render_band(config: RenderConfig, band: np.ndarray, top: int) -> None:
    """Fill ``band``, a view of the image starting at global row ``top``."""
    _render_band(
        band,
        top,
        config.width,
        config.height,
        complex(config.upper_left),
        complex(config.lower_right),
        config.limit,
    )
