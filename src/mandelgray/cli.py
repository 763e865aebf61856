"""Command-line entry point."""

from __future__ import annotations

import argparse
import re
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Sequence

from .config import MAX_LIMIT, UsageError, build_render_config, load_batch_configs, parse_limit, parse_workers
from .execution import run_batch, run_single_render

USAGE = "Usage: mandelgray FILE PIXELS UPPERLEFT LOWERRIGHT"
EXAMPLE = "Example: mandelgray mandel.png 1000x750 -1.20,0.35 -1.0,0.20"

# "-1.20,0.35" would otherwise be taken for an option
_NEGATIVE_COORDINATE = re.compile(r"^-[\d.][\d.eE+-]*,")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mandelgray",
        description="Render the Mandelbrot set to a grayscale image.",
        epilog=EXAMPLE,
    )
    parser.add_argument(
        "positional",
        nargs="*",
        metavar="FILE PIXELS UPPERLEFT LOWERRIGHT",
        help="output path, WIDTHxHEIGHT, and the two corners as REAL,IMAGINARY",
    )
    parser.add_argument("--limit", type=str, help="iteration cap, 1-255 (default: 255)")
    parser.add_argument("--workers", type=str, help="number of worker threads (default: CPU count)")
    parser.add_argument("--batch", type=str, help="Path to a YAML file listing renders")
    parser.add_argument("--verbose", "-v", action="store_true", help="log every band")
    return parser


def protect_negative_coordinates(argv: Sequence[str]) -> List[str]:
    return [f" {arg}" if _NEGATIVE_COORDINATE.match(arg) else arg for arg in argv]


def _usage_exit(message: Optional[str] = None) -> int:
    if message:
        print(f"ERROR: {message}", file=sys.stderr)
    print(USAGE, file=sys.stderr)
    print(EXAMPLE, file=sys.stderr)
    return 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    args = build_parser().parse_intermixed_args(protect_negative_coordinates(argv))

    if args.batch:
        if args.positional:
            return _usage_exit("--batch does not take positional arguments")
        return _main_batch(Path(args.batch), args)

    if len(args.positional) != 4:
        return _usage_exit()

    output, pixels, upper_left, lower_right = args.positional
    try:
        config = build_render_config(
            pixels,
            upper_left,
            lower_right,
            limit=args.limit if args.limit is not None else MAX_LIMIT,
            workers=args.workers,
            output=output,
        )
    except UsageError as exc:
        return _usage_exit(str(exc))

    try:
        run_single_render(config, output, verbose=args.verbose)
    except OSError as exc:
        print(f"ERROR: error writing image file {output}: {exc}", file=sys.stderr)
        return 1
    return 0


def _main_batch(batch_path: Path, args: argparse.Namespace) -> int:
    try:
        configs = load_batch_configs(batch_path)
        limit = parse_limit(args.limit) if args.limit is not None else None
        workers = parse_workers(args.workers)
    except UsageError as exc:
        return _usage_exit(str(exc))
    except OSError as exc:
        print(f"ERROR: cannot read batch file {batch_path}: {exc}", file=sys.stderr)
        return 1

    if limit is not None:
        configs = [replace(cfg, limit=limit) for cfg in configs]
    if workers is not None:
        configs = [replace(cfg, workers=workers) for cfg in configs]
    return run_batch(configs, str(batch_path), verbose=args.verbose)
