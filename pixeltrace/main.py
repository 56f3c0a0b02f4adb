"""CLI entry point."""
import argparse
import logging
import sys
from pathlib import Path

from .batch import BatchItem, process_batch
from .errors import PixelTraceError
from .models import MAX_PALETTE_SIZE, MIN_PALETTE_SIZE, ORIGINAL_PALETTE
from .pipeline import ImagePipeline
from .utils.logger import get_logger, set_level

logger = get_logger("cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pixeltrace",
        description="Remove backgrounds, crop, resize and trace images to compact SVGs",
    )

    parser.add_argument("inputs", nargs="+", help="Input image paths (PNG, JPG, WEBP)")
    parser.add_argument(
        "-o",
        "--output-dir",
        default=".",
        help="Directory for the processed files (default: current directory)",
    )
    parser.add_argument(
        "--preset",
        choices=["sticker", "logo", "photo"],
        default=None,
        help="Use a preset configuration",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to custom YAML config file",
    )
    parser.add_argument(
        "--format",
        choices=["raw", "vector"],
        default=None,
        help="Write a PNG (raw) or an SVG (vector)",
    )
    parser.add_argument(
        "--colors",
        type=int,
        default=None,
        help=(
            f"Palette size for SVG output ({MIN_PALETTE_SIZE}-{MAX_PALETTE_SIZE}, "
            f"or {ORIGINAL_PALETTE} to keep the original colors)"
        ),
    )
    parser.add_argument(
        "--width",
        type=int,
        default=None,
        help="Resize to this width, keeping aspect ratio (0 keeps the width)",
    )
    parser.add_argument(
        "--blur",
        type=int,
        default=None,
        help="Blur radius in pixels applied before tracing",
    )
    parser.add_argument(
        "--no-bg-remove",
        action="store_true",
        help="Keep the background",
    )
    parser.add_argument(
        "--no-crop",
        action="store_true",
        help="Disable cropping to the subject",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Process this many images concurrently",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose:
        set_level(logging.DEBUG)

    try:
        pipeline = ImagePipeline(config_path=args.config, preset=args.preset)
        options = pipeline.default_options.merged(
            output_format=args.format,
            palette_size=args.colors,
            target_width=args.width,
            blur_level=args.blur,
            remove_background=False if args.no_bg_remove else None,
            auto_crop=False if args.no_crop else None,
        )
    except FileNotFoundError as e:
        logger.error(f"File not found: {e}")
        return 1
    except (PixelTraceError, ValueError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    items = [BatchItem(id=path, source=Path(path)) for path in args.inputs]
    outcomes = process_batch(items, options, pipeline, max_workers=args.workers)

    failures = 0
    for outcome in outcomes:
        if not outcome.ok:
            failures += 1
            print(f"FAILED  {outcome.id}: {outcome.error}")
            continue

        result = outcome.result
        out_path = output_dir / (Path(outcome.id).stem + result.suggested_suffix)
        result.save(out_path)

        detail = f"{result.width}x{result.height}"
        if result.trace is not None:
            detail += f", {len(result.colors)} colors, {result.trace.byte_size} bytes"
            if not result.trace.within_budget:
                detail += " (over size limit)"
        print(f"OK      {outcome.id} -> {out_path} ({detail})")

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
