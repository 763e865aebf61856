"""Grayscale image output."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import numpy as np
from PIL import Image

DEFAULT_FORMAT = "PNG"


def image_format(path: str | Path) -> str:
    """Pick a writable Pillow format from the file extension, PNG otherwise.

    Some registered extensions (.psd, .pcx read plugins and the like) can
    only be opened, not saved.
    """
    suffix = Path(path).suffix.lower()
    fmt = Image.registered_extensions().get(suffix)
    if fmt is None or fmt.upper() not in Image.SAVE:
        return DEFAULT_FORMAT
    return fmt


def write_image(path: str | Path, buffer: np.ndarray) -> Path:
    """Write a ``(height, width)`` uint8 buffer as a single-channel image.

    The file is written next to ``path`` under a temporary name and moved
    into place once complete; on failure nothing is left at ``path``.
    """
    if buffer.ndim != 2 or buffer.dtype != np.uint8:
        raise ValueError(f"expected a 2-D uint8 buffer, got {buffer.dtype} {buffer.shape}")

    target = Path(path)
    image = Image.fromarray(np.ascontiguousarray(buffer))
    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
    try:
        with os.fdopen(fd, "wb") as f:
            image.save(f, format=image_format(target))
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, target)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
    return target
