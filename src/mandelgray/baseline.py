"""Baseline serial Mandelbrot implementation."""

from __future__ import annotations

from typing import Tuple

import numpy as np


def compute_mandelbrot(
    size: Tuple[int, int],
    upper_left: complex,
    lower_right: complex,
    limit: int = 255,
) -> np.ndarray:
    """Render the viewport row by row in plain Python."""
    width, height = size
    image = np.zeros((height, width), dtype=np.uint8)

    for row in range(height):
        im = upper_left.imag + (row / height) * (lower_right.imag - upper_left.imag)
        for column in range(width):
            re = upper_left.real + (column / width) * (lower_right.real - upper_left.real)
            z_re, z_im = 0.0, 0.0
            count = limit
            for i in range(limit):
                z_re, z_im = z_re * z_re - z_im * z_im + re, 2.0 * z_re * z_im + im
                if z_re * z_re + z_im * z_im > 4.0:
                    count = i
                    break
            image[row, column] = limit - count

    return image
