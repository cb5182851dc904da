"""Binary image container handed from the renderer to the PNG converter.

Layout (``image.bin``):
    - 2 bytes: width, little-endian unsigned 16-bit
    - 2 bytes: height, little-endian unsigned 16-bit
    - width * height pixel records, row-major, first row first

A pixel record is 3 bytes (RGB) for normal shading or 1 byte (gray) for
distance shading; one file never mixes the two. Rows are stored exactly as
the renderer produced them; any flip for a target format belongs to the
converter.

A file whose length is not ``4 + width * height * record_size`` is rejected
as corrupt. Decoding validates the whole buffer before building the image,
so a partially decoded image is never returned.

Example:
    >>> import numpy as np
    >>> from voxelcast.output.container import decode_image, encode_image
    >>> pixels = np.zeros((2, 3, 3), dtype=np.uint8)
    >>> decode_image(encode_image(pixels)).shape
    (2, 3, 3)
"""

from __future__ import annotations

import logging
import struct
from pathlib import Path

import numpy as np
import numpy.typing as npt

logger = logging.getLogger(__name__)

# Little-endian width, height
HEADER = struct.Struct("<HH")
HEADER_SIZE = HEADER.size

# Largest dimension the u16 header can carry
MAX_DIMENSION = 0xFFFF

# Record sizes a container may use
GRAY_RECORD_SIZE = 1
RGB_RECORD_SIZE = 3


class ImageContainerError(ValueError):
    """Raised when container bytes are corrupt or do not match their header."""


def _pixel_layout(pixels: npt.NDArray[np.uint8]) -> tuple[int, int, int]:
    """Get (width, height, record_size) of a pixel array.

    Raises:
        ValueError: If the array is not a uint8 image of a supported shape.
    """
    if pixels.dtype != np.uint8:
        raise ValueError(f"Pixels must be uint8, got {pixels.dtype}")

    if pixels.ndim == 2:
        height, width = pixels.shape
        record_size = GRAY_RECORD_SIZE
    elif pixels.ndim == 3 and pixels.shape[2] == RGB_RECORD_SIZE:
        height, width = pixels.shape[:2]
        record_size = RGB_RECORD_SIZE
    else:
        raise ValueError(
            f"Pixels must have shape (H, W) or (H, W, 3), got {pixels.shape}"
        )

    if width > MAX_DIMENSION or height > MAX_DIMENSION:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed container maximum ({MAX_DIMENSION})"
        )

    return width, height, record_size


def encode_image(pixels: npt.NDArray[np.uint8]) -> bytes:
    """Serialize a pixel array to container bytes.

    Args:
        pixels: uint8 array of shape (H, W) for gray or (H, W, 3) for RGB.

    Returns:
        The header followed by the row-major pixel records.

    Raises:
        ValueError: If the array has an unsupported dtype or shape.
    """
    width, height, _ = _pixel_layout(pixels)
    return HEADER.pack(width, height) + np.ascontiguousarray(pixels).tobytes()


def decode_image(
    data: bytes,
    record_size: int | None = None,
) -> npt.NDArray[np.uint8]:
    """Parse container bytes into a pixel array.

    Args:
        data: The complete container contents.
        record_size: Expected bytes per pixel (1 or 3). When None, the size
            is inferred from the payload length.

    Returns:
        uint8 array of shape (height, width) or (height, width, 3).

    Raises:
        ImageContainerError: If the data is shorter than the header, or the
            payload length does not match the header dimensions.
        ValueError: If record_size is not 1 or 3.
    """
    if record_size not in (None, GRAY_RECORD_SIZE, RGB_RECORD_SIZE):
        raise ValueError(f"Unsupported record size: {record_size}")

    if len(data) < HEADER_SIZE:
        raise ImageContainerError(
            f"Container truncated: {len(data)} bytes is shorter than the header"
        )

    width, height = HEADER.unpack_from(data)
    payload = len(data) - HEADER_SIZE
    pixel_count = width * height

    if record_size is None:
        if payload == pixel_count * GRAY_RECORD_SIZE:
            record_size = GRAY_RECORD_SIZE
        elif payload == pixel_count * RGB_RECORD_SIZE:
            record_size = RGB_RECORD_SIZE

    if record_size is None or payload != pixel_count * record_size:
        raise ImageContainerError(
            f"Input dimensions mismatch: header says {width}x{height} but payload "
            f"holds {payload} bytes; not an image or corrupt?"
        )

    image = np.frombuffer(data, dtype=np.uint8, offset=HEADER_SIZE)
    if record_size == RGB_RECORD_SIZE:
        return image.reshape(height, width, RGB_RECORD_SIZE).copy()
    return image.reshape(height, width).copy()


def write_image_bin(filepath: str | Path, pixels: npt.NDArray[np.uint8]) -> None:
    """Write a pixel array to a container file.

    Args:
        filepath: Output path (conventionally "image.bin").
        pixels: uint8 array of shape (H, W) or (H, W, 3).

    Raises:
        ValueError: If the array has an unsupported dtype or shape.
        OSError: If the file cannot be written.
    """
    data = encode_image(pixels)
    path = Path(filepath)
    with path.open("wb") as f:
        f.write(data)
    logger.debug("Wrote %d bytes to %s", len(data), path)


def read_image_bin(
    filepath: str | Path,
    record_size: int | None = None,
) -> npt.NDArray[np.uint8]:
    """Read a container file into a pixel array.

    Args:
        filepath: Input path (conventionally "image.bin").
        record_size: Expected bytes per pixel, or None to infer.

    Returns:
        uint8 array of shape (height, width) or (height, width, 3).

    Raises:
        FileNotFoundError: If the file does not exist.
        ImageContainerError: If the path is not a regular file or the
            contents are corrupt.
        OSError: If the file cannot be read.
    """
    path = Path(filepath)
    if path.exists() and not path.is_file():
        raise ImageContainerError(f"Encountered a non-regular file '{path}'")

    data = path.read_bytes()
    logger.debug("Read %d bytes from %s", len(data), path)
    return decode_image(data, record_size)
