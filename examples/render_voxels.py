#!/usr/bin/env python3
"""Render the compiled-in voxel scene.

This script renders one of the named presets, writes the result to the binary
image container and optionally converts it to PNG right away.

Usage:
    python -m examples.render_voxels [options]

Options:
    --preset NAME       Render preset: normals or depth (default: normals)
    --width WIDTH       Image width in pixels (default: preset width)
    --height HEIGHT     Image height in pixels (default: preset height)
    --output OUTPUT     Container file path (default: image.bin)
    --png PNG           Also write a PNG to this path
    --tile-size SIZE    Pixels per tile (default: 8192)
    --arch ARCH         Taichi backend: gpu or cpu (default: gpu, falls back to cpu)
    --quiet             Suppress progress output
    --verbose           Enable debug logging

Example:
    python -m examples.render_voxels --preset depth --png image.png
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

import taichi as ti

logger = logging.getLogger("render_voxels")


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the voxel scene to a binary image container.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--preset",
        type=str,
        default="normals",
        help="Render preset: normals or depth (default: normals)",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=None,
        help="Image width in pixels (default: preset width)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=None,
        help="Image height in pixels (default: preset height)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="image.bin",
        help="Container file path (default: image.bin)",
    )
    parser.add_argument(
        "--png",
        type=str,
        default=None,
        help="Also write a PNG to this path",
    )
    parser.add_argument(
        "--tile-size",
        type=int,
        default=8192,
        help="Pixels per tile (default: 8192)",
    )
    parser.add_argument(
        "--arch",
        choices=("gpu", "cpu"),
        default="gpu",
        help="Taichi backend (default: gpu, falls back to cpu)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args()


def render_voxels(
    preset_name: str = "normals",
    width: int | None = None,
    height: int | None = None,
    output_path: str = "image.bin",
    png_path: str | None = None,
    tile_size: int = 8192,
    quiet: bool = False,
) -> Path:
    """Render a preset and save it as a binary container.

    Args:
        preset_name: Name of the render preset.
        width: Image width override in pixels.
        height: Image height override in pixels.
        output_path: Container file path.
        png_path: Optional PNG file path.
        tile_size: Number of pixels per tile.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved container file.
    """
    # Lazy imports to allow Taichi initialization first
    from voxelcast.core.tiled import TiledRenderer
    from voxelcast.output.png import save_png_from_array
    from voxelcast.scene.presets import get_preset, prepare_preset

    preset = get_preset(preset_name).with_size(width, height)

    if not quiet:
        print(f"Preparing '{preset.name}' preset ({preset.width}x{preset.height})...")

    prepare_preset(preset)
    renderer = TiledRenderer(preset.width, preset.height, preset.shading, tile_size)

    start_time = time.time()

    def progress_callback(done: int, total: int) -> None:
        if not quiet:
            print(
                f"\r  Progress: {done}/{total} tiles ({done / total * 100:.1f}%)",
                end="",
                flush=True,
            )

    renderer.render(callback=progress_callback)

    if not quiet:
        print()  # Newline after progress

    output_file = Path(output_path)
    renderer.save_bin(output_file)

    if png_path is not None:
        save_png_from_array(renderer.get_image_numpy(), png_path)

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        if png_path is not None:
            print(f"PNG saved to: {Path(png_path).absolute()}")
        print(f"Total time: {total_time:.2f}s")

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Use GPU if requested and available, fall back to CPU
    if args.arch == "gpu":
        try:
            ti.init(arch=ti.gpu)
        except Exception:
            logger.warning("GPU backend unavailable, using CPU")
            ti.init(arch=ti.cpu)
    else:
        ti.init(arch=ti.cpu)

    try:
        render_voxels(
            preset_name=args.preset,
            width=args.width,
            height=args.height,
            output_path=args.output,
            png_path=args.png,
            tile_size=args.tile_size,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        logger.debug("Render failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
