"""Output module for handing rendered images to other tools.

Components:
    container: The image.bin binary container (u16 header + pixel records)
    png: Conversion of containers and pixel arrays to PNG via Pillow
"""

from voxelcast.output.container import (
    ImageContainerError,
    decode_image,
    encode_image,
    read_image_bin,
    write_image_bin,
)
from voxelcast.output.png import bin_to_png, save_png_from_array

__all__ = [
    "ImageContainerError",
    "encode_image",
    "decode_image",
    "write_image_bin",
    "read_image_bin",
    "bin_to_png",
    "save_png_from_array",
]
