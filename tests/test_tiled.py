"""Unit tests for the tiled renderer.

Tests cover:
- TiledRenderer construction and tile geometry
- Progress callbacks and the generator interface
- Tile order validation
- Byte-identical output across tile sizes and tile orders
- Saving to the binary container
"""

import random

import numpy as np
import pytest


def _prepare(name="normals", size=32):
    from voxelcast.scene.presets import get_preset, prepare_preset

    preset = get_preset(name).with_size(size, size)
    prepare_preset(preset)
    return preset


class TestTiledRendererInit:
    """Tests for TiledRenderer initialization."""

    def test_init(self):
        """Test renderer properties after construction."""
        from voxelcast.core.integrator import ShadingMode
        from voxelcast.core.tiled import DEFAULT_TILE_SIZE, TiledRenderer

        renderer = TiledRenderer(64, 32)

        assert renderer.width == 64
        assert renderer.height == 32
        assert renderer.shading == ShadingMode.NORMAL
        assert renderer.tile_size == DEFAULT_TILE_SIZE
        assert renderer.pixel_count == 64 * 32

    def test_init_sets_up_render_target(self):
        """Test construction configures the global render target."""
        from voxelcast.core.integrator import (
            ShadingMode,
            get_image_dimensions,
            get_shading_mode,
        )
        from voxelcast.core.tiled import TiledRenderer

        TiledRenderer(40, 20, ShadingMode.DISTANCE)

        assert get_image_dimensions() == (40, 20)
        assert get_shading_mode() == ShadingMode.DISTANCE

    def test_invalid_tile_size(self):
        """Test non-positive tile sizes are rejected."""
        from voxelcast.core.tiled import TiledRenderer

        with pytest.raises(ValueError, match="Tile size"):
            TiledRenderer(16, 16, tile_size=0)

    def test_invalid_dimensions(self):
        """Test invalid image dimensions are rejected."""
        from voxelcast.core.tiled import TiledRenderer

        with pytest.raises(ValueError):
            TiledRenderer(0, 16)

    def test_repr(self):
        """Test the string representation."""
        from voxelcast.core.tiled import TiledRenderer

        renderer = TiledRenderer(16, 8, tile_size=10)

        assert repr(renderer) == (
            "TiledRenderer(width=16, height=8, shading=NORMAL, tile_size=10)"
        )


class TestTileGeometry:
    """Tests for tile spans."""

    def test_tile_count_rounds_up(self):
        """Test a partial last tile is counted."""
        from voxelcast.core.tiled import TiledRenderer

        assert TiledRenderer(10, 10, tile_size=30).tile_count == 4
        assert TiledRenderer(10, 10, tile_size=25).tile_count == 4
        assert TiledRenderer(10, 10, tile_size=100).tile_count == 1
        assert TiledRenderer(10, 10, tile_size=1000).tile_count == 1

    def test_tile_spans_cover_image(self):
        """Test consecutive tiles cover every pixel exactly once."""
        from voxelcast.core.tiled import TiledRenderer

        renderer = TiledRenderer(10, 10, tile_size=30)

        spans = [renderer.tile_span(k) for k in range(renderer.tile_count)]

        assert spans == [(0, 30), (30, 60), (60, 90), (90, 100)]

    def test_tile_span_out_of_range(self):
        """Test invalid tile indices raise."""
        from voxelcast.core.tiled import TiledRenderer

        renderer = TiledRenderer(10, 10, tile_size=30)

        with pytest.raises(IndexError):
            renderer.tile_span(4)
        with pytest.raises(IndexError):
            renderer.tile_span(-1)


class TestRenderProgress:
    """Tests for callbacks and the generator interface."""

    def test_callback_called_per_tile(self):
        """Test the callback receives (done, total) after each tile."""
        from voxelcast.core.tiled import TiledRenderer

        _prepare(size=16)
        renderer = TiledRenderer(16, 16, tile_size=100)
        calls = []

        renderer.render(callback=lambda done, total: calls.append((done, total)))

        assert calls == [(1, 3), (2, 3), (3, 3)]

    def test_render_progressive_yields(self):
        """Test the generator yields once per tile."""
        from voxelcast.core.tiled import TiledRenderer

        _prepare(size=16)
        renderer = TiledRenderer(16, 16, tile_size=64)

        progress = list(renderer.render_progressive())

        assert progress == [(1, 4), (2, 4), (3, 4), (4, 4)]

    def test_generator_is_lazy(self):
        """Test nothing is rendered until the generator is advanced."""
        from voxelcast.core.tiled import TiledRenderer

        _prepare(size=16)
        renderer = TiledRenderer(16, 16)

        gen = renderer.render_progressive()
        assert not renderer.get_image_numpy().any()

        for _ in gen:
            pass
        assert renderer.get_image_numpy().any()

    @pytest.mark.parametrize("order", [[0, 1], [0, 0, 1, 2], [1, 2, 3], [0, 1, 2, 3]])
    def test_invalid_order(self, order):
        """Test orders that are not a permutation of the tiles raise."""
        from voxelcast.core.tiled import TiledRenderer

        renderer = TiledRenderer(16, 16, tile_size=100)

        with pytest.raises(ValueError, match="permutation"):
            renderer.render(order=order)


class TestDeterminism:
    """Tests for byte-identical output across schedules."""

    @pytest.mark.parametrize("name", ["normals", "depth"])
    def test_tile_size_does_not_matter(self, name):
        """Test different tile sizes produce identical images."""
        from voxelcast.core.tiled import TiledRenderer

        preset = _prepare(name, size=48)

        images = []
        for tile_size in (1, 7, 48, 500, 48 * 48, 100_000):
            renderer = TiledRenderer(preset.width, preset.height, preset.shading, tile_size)
            renderer.render()
            images.append(renderer.get_image_numpy())

        for image in images[1:]:
            assert np.array_equal(image, images[0])

    def test_tile_order_does_not_matter(self):
        """Test ascending, reversed and shuffled orders agree."""
        from voxelcast.core.tiled import TiledRenderer

        preset = _prepare(size=48)
        renderer = TiledRenderer(preset.width, preset.height, preset.shading, tile_size=37)
        tiles = list(range(renderer.tile_count))

        renderer.render()
        reference = renderer.get_image_numpy()

        shuffled = tiles[:]
        random.Random(7).shuffle(shuffled)
        for order in (tiles[::-1], shuffled):
            renderer.reset()
            assert not renderer.get_image_numpy().any()
            renderer.render(order=order)
            assert np.array_equal(renderer.get_image_numpy(), reference)

    def test_rerender_is_identical(self):
        """Test rendering twice gives the same bytes."""
        from voxelcast.core.tiled import TiledRenderer

        preset = _prepare(size=32)
        renderer = TiledRenderer(preset.width, preset.height, preset.shading)

        renderer.render()
        first = renderer.get_image_numpy()
        renderer.reset()
        renderer.render()

        assert np.array_equal(renderer.get_image_numpy(), first)


class TestSaveBin:
    """Tests for writing the rendered image to a container."""

    def test_save_bin(self, tmp_path):
        """Test the saved container decodes to the rendered image."""
        from voxelcast.core.tiled import TiledRenderer
        from voxelcast.output.container import read_image_bin

        preset = _prepare("depth", size=24)
        renderer = TiledRenderer(preset.width, preset.height, preset.shading)
        renderer.render()
        path = tmp_path / "image.bin"

        renderer.save_bin(path)

        assert path.stat().st_size == 4 + 24 * 24
        assert np.array_equal(read_image_bin(path, record_size=1), renderer.get_image_numpy())
