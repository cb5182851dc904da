#!/usr/bin/env python3
"""Convert a binary image container to PNG.

Reads the container written by render_voxels, checks that its length matches
the dimensions in its header and writes an 8-bit grayscale or RGB PNG.

Usage:
    python -m examples.bin2png [--input image.bin] [--output image.png]
"""

from __future__ import annotations

import argparse
import logging
import sys

from voxelcast.output.png import bin_to_png

logger = logging.getLogger("bin2png")


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="Convert image.bin to PNG.")
    parser.add_argument(
        "--input",
        type=str,
        default="image.bin",
        help="Container file to read (default: image.bin)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="image.png",
        help="PNG file to write (default: image.png)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args()


def main() -> int:
    """Main entry point."""
    args = parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        bin_to_png(args.input, args.output)
        return 0
    except (OSError, ValueError) as e:
        logger.debug("Conversion failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
