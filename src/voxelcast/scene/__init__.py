"""Scene module for voxel storage and scene bounds.

Components:
    bounds: BBox value type and scene bounding-box reduction
    intersection: Voxel storage in Taichi fields and closest-hit traversal
    presets: The compiled-in voxel scene and named render presets

Scene data is organized for efficient GPU access as a Structure-of-Arrays
layout of voxel corners, in insertion order.
"""

from .bounds import BBox, Voxel, compute_scene_bbox
from .intersection import (
    MAX_VOXELS,
    add_voxel,
    clear_scene,
    get_voxel,
    get_voxel_count,
    intersect_scene,
    load_scene,
)

# Note: presets is NOT imported here; it depends on core.integrator, which
# imports this package. Import from voxelcast.scene.presets directly.

__all__ = [
    "BBox",
    "Voxel",
    "compute_scene_bbox",
    "MAX_VOXELS",
    "add_voxel",
    "clear_scene",
    "get_voxel",
    "get_voxel_count",
    "intersect_scene",
    "load_scene",
]
