"""Tiled renderer for evaluating an image in independent pixel spans.

This module wraps the pixel kernel in a small class that supports:
- Splitting the flat pixel range into tiles of a fixed number of pixels
- Rendering tiles in any caller-chosen order
- Progress callbacks and a generator interface
- Export of the finished image to the binary container

Because each pixel is a pure function of its index, the image is
byte-identical for every tile size and tile order.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from voxelcast.core.tiled import TiledRenderer
    >>> from voxelcast.scene.presets import get_preset, prepare_preset
    >>>
    >>> preset = get_preset("normals")
    >>> prepare_preset(preset)
    >>> renderer = TiledRenderer(preset.width, preset.height, preset.shading)
    >>> renderer.render()
    >>> image = renderer.get_image_numpy()
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Generator, Sequence
from pathlib import Path

import numpy as np
import numpy.typing as npt

from voxelcast.core.integrator import (
    ShadingMode,
    get_image_numpy,
    render_span,
    setup_render_target,
)

logger = logging.getLogger(__name__)

# Type alias for progress callback
# Callback receives (tiles_done, total_tiles)
ProgressCallback = Callable[[int, int], None]

# Pixels per tile when none is given: four rows of the largest image
DEFAULT_TILE_SIZE = 8192


class TiledRenderer:
    """Render an image as a sequence of independent pixel spans.

    Tile ``k`` covers flat pixel indices
    ``[k * tile_size, min((k + 1) * tile_size, width * height))``.

    The renderer delegates to the global render target in
    ``voxelcast.core.integrator`` (which lives in Taichi fields), so only one
    renderer should be active at a time.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        shading: The shading policy.
        tile_size: Number of pixels per tile.
    """

    def __init__(
        self,
        width: int,
        height: int,
        shading: ShadingMode = ShadingMode.NORMAL,
        tile_size: int = DEFAULT_TILE_SIZE,
    ) -> None:
        """Initialize the renderer and its render target.

        Args:
            width: Image width in pixels (max 2048).
            height: Image height in pixels (max 2048).
            shading: The shading policy to render with.
            tile_size: Number of pixels per tile.

        Raises:
            ValueError: If dimensions are invalid or tile_size is not positive.
        """
        if tile_size <= 0:
            raise ValueError(f"Tile size must be positive, got {tile_size}")
        self._width = width
        self._height = height
        self._shading = ShadingMode(shading)
        self._tile_size = tile_size
        setup_render_target(width, height, self._shading)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def shading(self) -> ShadingMode:
        """Get the shading policy."""
        return self._shading

    @property
    def tile_size(self) -> int:
        """Get the number of pixels per tile."""
        return self._tile_size

    @property
    def pixel_count(self) -> int:
        return self._width * self._height

    @property
    def tile_count(self) -> int:
        """Get the number of tiles covering the image."""
        return -(-self.pixel_count // self._tile_size)

    def tile_span(self, tile: int) -> tuple[int, int]:
        """Get the flat pixel range [start, stop) covered by a tile.

        Raises:
            IndexError: If ``tile`` is not a valid tile index.
        """
        if not 0 <= tile < self.tile_count:
            raise IndexError(f"Tile {tile} out of range (0..{self.tile_count - 1})")
        start = tile * self._tile_size
        return start, min(start + self._tile_size, self.pixel_count)

    def _resolve_order(self, order: Sequence[int] | None) -> list[int]:
        if order is None:
            return list(range(self.tile_count))
        order = list(order)
        if sorted(order) != list(range(self.tile_count)):
            raise ValueError(
                f"Tile order must be a permutation of 0..{self.tile_count - 1}"
            )
        return order

    def reset(self) -> None:
        """Clear the pixel buffer for a fresh render with the same settings."""
        setup_render_target(self._width, self._height, self._shading)

    def render(
        self,
        order: Sequence[int] | None = None,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Render every tile, optionally in a given order.

        Args:
            order: Permutation of tile indices giving the evaluation order.
                Defaults to ascending order.
            callback: Optional callback function called after each tile.
                Receives (tiles_done, total_tiles).

        Raises:
            ValueError: If ``order`` is not a permutation of the tile indices.

        Example:
            >>> def progress(done, total):
            ...     print(f"Progress: {done}/{total} tiles")
            >>> renderer.render(callback=progress)
        """
        for done, total in self.render_progressive(order):
            if callback is not None:
                callback(done, total)

    def render_progressive(
        self,
        order: Sequence[int] | None = None,
    ) -> Generator[tuple[int, int], None, None]:
        """Render tiles one by one, yielding progress after each.

        This is a generator-based alternative to render() with callbacks.

        Args:
            order: Permutation of tile indices giving the evaluation order.

        Yields:
            Tuple of (tiles_done, total_tiles).
        """
        tiles = self._resolve_order(order)
        total = len(tiles)
        start_time = time.perf_counter()
        logger.info(
            "Rendering %dx%d (%s) in %d tile(s)",
            self._width,
            self._height,
            self._shading.name.lower(),
            total,
        )

        for done, tile in enumerate(tiles, start=1):
            start, stop = self.tile_span(tile)
            render_span(start, stop)
            logger.debug("Tile %d: pixels [%d, %d)", tile, start, stop)
            yield (done, total)

        logger.info("Render finished in %.3fs", time.perf_counter() - start_time)

    def get_image_numpy(self) -> npt.NDArray[np.uint8]:
        """Get the rendered image as a NumPy array.

        Returns:
            uint8 array of shape (height, width, 3) for normal shading or
            (height, width) for distance shading.
        """
        return get_image_numpy()

    def save_bin(self, filepath: str | Path) -> None:
        """Write the rendered image to a binary container file.

        Args:
            filepath: Path to save the image (e.g., "image.bin").
        """
        from voxelcast.output.container import write_image_bin

        write_image_bin(filepath, self.get_image_numpy())

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"TiledRenderer(width={self.width}, height={self.height}, "
            f"shading={self.shading.name}, tile_size={self.tile_size})"
        )
