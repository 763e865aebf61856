"""Configuration objects, argument parsing and YAML loading for Mandelbrot renders."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, replace
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, TypeVar

import yaml

T = TypeVar("T")

MAX_LIMIT = 255


class UsageError(ValueError):
    """Raised when command-line or batch input cannot be turned into a render."""


@dataclass(frozen=True)
class RenderConfig:
    """Runtime configuration for a single Mandelbrot render."""

    width: int
    height: int
    upper_left: complex = complex(-1.20, 0.35)
    lower_right: complex = complex(-1.00, 0.20)
    limit: int = MAX_LIMIT
    workers: Optional[int] = None  # None: ask the machine
    output: Optional[str] = None

    @property
    def bounds(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def n_workers(self) -> int:
        if self.workers is not None:
            return self.workers
        from .scheduling import default_worker_count

        return default_worker_count()

    @property
    def run_name(self) -> str:
        """Generate a readable run name embedding the render parameters."""
        return (
            f"{self.width}x{self.height}_"
            f"{_format_complex(self.upper_left)}_{_format_complex(self.lower_right)}_"
            f"l{self.limit}"
        )

    def to_dict(self) -> dict:
        data = asdict(self)
        data["upper_left"] = _format_complex(self.upper_left)
        data["lower_right"] = _format_complex(self.lower_right)
        return data


DEFAULT_RENDER_CONFIG = RenderConfig(width=320, height=200)


def default_render_config(**overrides: object) -> RenderConfig:
    """Return the canonical default config optionally overridden with kwargs."""
    return replace(DEFAULT_RENDER_CONFIG, **_coerce_dimensions(overrides))


def parse_pair(s: str, separator: str, convert: Callable[[str], T]) -> Optional[Tuple[T, T]]:
    """Parse ``s`` as a pair like ``"400x600"`` or ``"1.0,0.5"``.

    ``s`` must have the form ``<left><separator><right>`` where both sides
    are accepted by ``convert``. Returns ``None`` if it doesn't parse.
    """
    index = s.find(separator)
    if index < 0:
        return None
    try:
        return convert(s[:index].strip()), convert(s[index + 1:].strip())
    except ValueError:
        return None


def parse_complex(s: str) -> Optional[complex]:
    """Parse a pair of floats separated by a comma as a complex number."""
    pair = parse_pair(s, ",", float)
    if pair is None:
        return None
    re, im = pair
    if not (math.isfinite(re) and math.isfinite(im)):
        return None
    return complex(re, im)


def parse_image_size(value: str) -> Tuple[int, int]:
    pair = parse_pair(value.lower(), "x", int)
    if pair is None:
        raise UsageError(f"error parsing image dimensions {value!r}")
    width, height = pair
    if width <= 0 or height <= 0:
        raise UsageError(f"image dimensions must be positive, got {value!r}")
    return width, height


def parse_corner(value: str, name: str) -> complex:
    point = parse_complex(value)
    if point is None:
        raise UsageError(f"error parsing {name} corner point {value!r}")
    return point


def parse_limit(value: object) -> int:
    try:
        limit = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise UsageError(f"iteration limit must be an integer, got {value!r}") from None
    if not 1 <= limit <= MAX_LIMIT:
        raise UsageError(f"iteration limit must be in [1, {MAX_LIMIT}], got {limit}")
    return limit


def parse_workers(value: object) -> Optional[int]:
    if value is None:
        return None
    try:
        workers = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise UsageError(f"worker count must be an integer, got {value!r}") from None
    if workers < 1:
        raise UsageError(f"worker count must be at least 1, got {workers}")
    return workers


def build_render_config(
    pixels: str,
    upper_left: str,
    lower_right: str,
    *,
    limit: object = MAX_LIMIT,
    workers: object = None,
    output: Optional[str] = None,
) -> RenderConfig:
    """Build a validated config from the raw command-line strings."""
    width, height = parse_image_size(pixels)
    return RenderConfig(
        width=width,
        height=height,
        upper_left=parse_corner(upper_left, "upper left"),
        lower_right=parse_corner(lower_right, "lower right"),
        limit=parse_limit(limit),
        workers=parse_workers(workers),
        output=output,
    )


def load_batch_configs(yaml_path: str | Path) -> List[RenderConfig]:
    """Load a YAML batch file and return one config per ``renders`` entry.

    Top-level ``defaults`` are merged under every entry.
    """
    with open(yaml_path) as f:
        try:
            cfg = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise UsageError(f"{yaml_path}: invalid YAML: {exc}") from None

    if not isinstance(cfg, dict):
        raise UsageError(f"{yaml_path}: expected a mapping at top level")

    defaults: Dict[str, object] = cfg.get("defaults", {}) or {}
    if not isinstance(defaults, dict):
        raise UsageError(f"{yaml_path}: 'defaults' must be a mapping")
    renders = cfg.get("renders") or []
    if not isinstance(renders, list):
        raise UsageError(f"{yaml_path}: 'renders' must be a list")

    configs: List[RenderConfig] = []
    for idx, entry in enumerate(renders):
        if not isinstance(entry, dict):
            raise UsageError(f"{yaml_path}: render #{idx} must be a mapping")
        data = {**defaults, **entry}
        try:
            configs.append(_build_batch_config(data))
        except (TypeError, ValueError) as exc:
            raise UsageError(f"{yaml_path}: render #{idx}: {exc}") from None
    return configs


def _build_batch_config(raw_data: Dict[str, object]) -> RenderConfig:
    data = _coerce_dimensions(raw_data)
    if "output" not in data or not data["output"]:
        raise UsageError("missing 'output'")
    if "width" not in data or "height" not in data:
        raise UsageError("missing 'image_size'")
    if data["width"] <= 0 or data["height"] <= 0:  # type: ignore[operator]
        raise UsageError("image dimensions must be positive")
    for key in ("upper_left", "lower_right"):
        if key in data:
            data[key] = _normalize_corner_entry(data[key], key.replace("_", " "))
    if "limit" in data:
        data["limit"] = parse_limit(data["limit"])
    if "workers" in data:
        data["workers"] = parse_workers(data["workers"])
    data["output"] = str(data["output"])
    unknown = set(data) - set(RenderConfig.__dataclass_fields__)
    if unknown:
        raise UsageError(f"unknown keys {sorted(unknown)}")
    return RenderConfig(**data)  # type: ignore[arg-type]


def _coerce_dimensions(data: Dict[str, object]) -> Dict[str, object]:
    result = dict(data)
    image = result.pop("image_size", None)
    if image is not None:
        width, height = _normalize_shape_entry(image)
        result.setdefault("width", width)
        result.setdefault("height", height)
    if "width" in result:
        result["width"] = int(result["width"])  # type: ignore[arg-type]
    if "height" in result:
        result["height"] = int(result["height"])  # type: ignore[arg-type]
    return result


def _normalize_shape_entry(entry: object) -> Tuple[int, int]:
    if isinstance(entry, dict):
        width = entry.get("width")
        height = entry.get("height")
        if width is None or height is None:
            raise UsageError("image_size dict must include 'width' and 'height'")
        return int(width), int(height)
    if isinstance(entry, (list, tuple)) and len(entry) == 2:
        return int(entry[0]), int(entry[1])
    if isinstance(entry, str):
        return parse_image_size(entry)
    if isinstance(entry, int) and not isinstance(entry, bool):
        # YAML reads an unquoted 0x10 as hex
        raise UsageError(f"image size read as the number {entry}; quote it, e.g. \"0x10\"")
    raise UsageError(f"Unsupported image size specification: {entry!r}")


def _normalize_corner_entry(entry: object, name: str) -> complex:
    if isinstance(entry, str):
        return parse_corner(entry, name)
    if isinstance(entry, (list, tuple)) and len(entry) == 2:
        point = complex(float(entry[0]), float(entry[1]))
    elif isinstance(entry, (int, float, complex)) and not isinstance(entry, bool):
        point = complex(entry)
    else:
        raise UsageError(f"Unsupported {name} corner specification: {entry!r}")
    if not (math.isfinite(point.real) and math.isfinite(point.imag)):
        raise UsageError(f"{name} corner must be finite, got {entry!r}")
    return point


def _format_complex(value: complex) -> str:
    return f"{value.real:g},{value.imag:g}"
