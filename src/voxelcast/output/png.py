"""PNG conversion for rendered images.

The converter reads the binary container written by the renderer and
encodes it as an 8-bit PNG via Pillow: grayscale for 1-byte records, RGB for
3-byte records.

The container stores the first rendered row first, with the kernel's row 0 at
the bottom of the view. PNG rows run top to bottom, so rows are flipped
vertically on the way out.

Example:
    >>> from voxelcast.output.png import bin_to_png
    >>> bin_to_png("image.bin", "image.png")
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from voxelcast.output.container import read_image_bin

logger = logging.getLogger(__name__)

# zlib level used for PNG output
PNG_COMPRESS_LEVEL = 9


def to_png_rows(pixels: npt.NDArray[np.uint8]) -> npt.NDArray[np.uint8]:
    """Reorder container rows into PNG (top to bottom) order."""
    return np.ascontiguousarray(np.flipud(pixels))


def save_png_from_array(
    pixels: npt.NDArray[np.uint8],
    filepath: str | Path,
    *,
    flip: bool = True,
) -> None:
    """Save a uint8 pixel array as a PNG file.

    Args:
        pixels: Array of shape (H, W) for grayscale or (H, W, 3) for RGB,
            in container row order.
        filepath: Output file path (should end in .png).
        flip: Whether to flip rows vertically before saving.

    Raises:
        ValueError: If the array has an unsupported dtype or shape.
    """
    if pixels.dtype != np.uint8:
        raise ValueError(f"Pixels must be uint8, got {pixels.dtype}")

    # 2D arrays become mode "L", (H, W, 3) arrays mode "RGB"
    if not (pixels.ndim == 2 or (pixels.ndim == 3 and pixels.shape[2] == 3)):
        raise ValueError(f"Pixels must have shape (H, W) or (H, W, 3), got {pixels.shape}")

    rows = to_png_rows(pixels) if flip else np.ascontiguousarray(pixels)

    pil_image = PILImage.fromarray(rows)
    pil_image.save(filepath, format="PNG", compress_level=PNG_COMPRESS_LEVEL)


def bin_to_png(
    input_path: str | Path = "image.bin",
    output_path: str | Path = "image.png",
) -> tuple[int, int]:
    """Convert a binary container file to a PNG file.

    The container is fully read and validated before the output file is
    opened, so a corrupt input never produces a PNG.

    Args:
        input_path: Container file to read.
        output_path: PNG file to write.

    Returns:
        The (width, height) of the converted image.

    Raises:
        FileNotFoundError: If the input does not exist.
        ImageContainerError: If the input is corrupt.
        OSError: If the output cannot be written.
    """
    pixels = read_image_bin(input_path)
    save_png_from_array(pixels, output_path)

    height, width = pixels.shape[:2]
    logger.info("Converted %s (%dx%d) to %s", input_path, width, height, output_path)
    return width, height
