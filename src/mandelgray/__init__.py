"""Parallel escape-time renderer for grayscale Mandelbrot images."""

__version__ = "1.0.0"

# Core computation and config - lightweight, no image I/O
from .computation import escape_time, pixel_to_point, render_band
from .config import RenderConfig, UsageError, default_render_config, load_batch_configs
from .report import RenderReport
from .scheduling import RowBand, partition_rows


# Conditional imports - only loaded when needed
def __getattr__(name):
    """Lazy loading of modules that pull in Pillow."""
    if name == "render":
        from .execution import render

        return render
    elif name == "write_image":
        from .encoder import write_image

        return write_image
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "RenderConfig",
    "RenderReport",
    "RowBand",
    "UsageError",
    "default_render_config",
    "escape_time",
    "pixel_to_point",
    "render_band",
    "partition_rows",
    "render",
    "write_image",
    "load_batch_configs",
]
