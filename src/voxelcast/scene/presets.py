"""Compiled-in voxel scene and named render presets.

The scene is a fixed list of two overlapping unit-ish cubes centred on the
origin. Two presets render it:

- ``normals``: RGB shading by face axis, rolled by pi/8 and turned by pi/4
  about the vertical axis.
- ``depth``: grayscale shading by hit distance, turned by pi/4 and tipped by
  pi/8 about the horizontal axis.

Both place the camera at (0, 0, 2.125) in normalized camera space and render
256x256 by default.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from voxelcast.scene.presets import get_preset, prepare_preset
    >>> preset = get_preset("normals")
    >>> basis = prepare_preset(preset)  # scene loaded, camera uploaded
"""

from __future__ import annotations

import dataclasses
import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass, field

from voxelcast.camera.view import CameraBasis, VoxelCamera, compute_camera_basis, setup_camera
from voxelcast.core.integrator import ShadingMode
from voxelcast.scene.bounds import BBox, Voxel, compute_scene_bbox
from voxelcast.scene.intersection import load_scene

logger = logging.getLogger(__name__)

# =============================================================================
# Scene Constants
# =============================================================================

# Scene content in world space
VOXEL_SCENE: tuple[Voxel, ...] = (
    Voxel.from_tuples((-0.75, -0.75, -0.75), (0.25, 0.25, 0.25)),
    Voxel.from_tuples((-0.25, -0.25, -0.25), (0.75, 0.75, 0.75)),
)

DEFAULT_IMAGE_SIZE = 256

# Camera position in normalized camera space
DEFAULT_CAMERA_POSITION = (0.0, 0.0, 2.125)


# =============================================================================
# Presets
# =============================================================================


@dataclass(frozen=True)
class RenderPreset:
    """A named combination of camera, shading policy and image size.

    Attributes:
        name: Preset name used for lookup.
        camera: Camera configuration.
        shading: Shading policy.
        width: Image width in pixels.
        height: Image height in pixels.
        voxels: The scene to render.
    """

    name: str
    camera: VoxelCamera
    shading: ShadingMode
    width: int = DEFAULT_IMAGE_SIZE
    height: int = DEFAULT_IMAGE_SIZE
    voxels: tuple[Voxel, ...] = field(default=VOXEL_SCENE, repr=False)

    def with_size(self, width: int | None = None, height: int | None = None) -> RenderPreset:
        """Return a copy with the image size overridden where given."""
        return dataclasses.replace(
            self,
            width=self.width if width is None else width,
            height=self.height if height is None else height,
        )


PRESETS: dict[str, RenderPreset] = {
    "normals": RenderPreset(
        name="normals",
        camera=VoxelCamera(
            roll=math.pi / 2 * 0.25,
            azimuth=math.pi / 2 * 0.5,
            declination=0.0,
            position=DEFAULT_CAMERA_POSITION,
        ),
        shading=ShadingMode.NORMAL,
    ),
    "depth": RenderPreset(
        name="depth",
        camera=VoxelCamera(
            roll=0.0,
            azimuth=math.pi / 2 * 0.5,
            declination=math.pi / 2 * 0.25,
            position=DEFAULT_CAMERA_POSITION,
        ),
        shading=ShadingMode.DISTANCE,
    ),
}

DEFAULT_PRESET = "normals"


def get_preset(name: str) -> RenderPreset:
    """Look up a preset by name.

    Raises:
        ValueError: If no preset has that name.
    """
    try:
        return PRESETS[name]
    except KeyError:
        known = ", ".join(sorted(PRESETS))
        raise ValueError(f"Unknown preset '{name}' (known presets: {known})") from None


# =============================================================================
# Scene Setup
# =============================================================================


def create_voxel_scene(voxels: Sequence[BBox] = VOXEL_SCENE) -> BBox:
    """Load voxels into the scene fields and return the scene bounds.

    Args:
        voxels: The boxes to load, in tie-break order.

    Returns:
        The bounding box of the loaded scene.

    Raises:
        ValueError: If ``voxels`` is empty.
    """
    bbox = compute_scene_bbox(voxels)
    load_scene(voxels)
    return bbox


def prepare_preset(preset: RenderPreset) -> CameraBasis:
    """Load a preset's scene and upload its camera.

    Args:
        preset: The preset to prepare.

    Returns:
        The camera basis that was uploaded.
    """
    bbox = create_voxel_scene(preset.voxels)
    basis = compute_camera_basis(bbox, preset.camera, preset.width, preset.height)
    setup_camera(basis)
    logger.info(
        "Prepared preset '%s': %d voxel(s), centre %s, max extent %g",
        preset.name,
        len(preset.voxels),
        bbox.centre.as_tuple(),
        bbox.max_extent,
    )
    return basis
