"""Scene-level voxel storage and closest-hit traversal.

The scene is an ordered list of axis-aligned boxes kept in Taichi fields for
GPU-efficient access. Traversal is an exhaustive linear scan: every voxel is
tested and the nearest hit is kept.

Ties are resolved by storage order. A later voxel only replaces the current
closest hit when it is strictly nearer, so when two voxels are entered at
exactly the same distance the one added first wins.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from voxelcast.scene.bounds import BBox
    >>> from voxelcast.scene.intersection import clear_scene, load_scene
    >>> load_scene([BBox.from_tuples((-1, -1, -1), (1, 1, 1))])
    1
    >>> # Use intersect_scene within a Taichi kernel
"""

import logging
from collections.abc import Iterable

import taichi as ti
import taichi.math as tm

from voxelcast.core.ray import Ray
from voxelcast.geometry.box import Box, Hit, intersect_box, make_miss
from voxelcast.scene.bounds import BBox

logger = logging.getLogger(__name__)

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Maximum number of voxels supported in the scene
MAX_VOXELS = 1024

# Voxel storage: Structure of Arrays layout for GPU efficiency
voxel_mins = ti.Vector.field(3, dtype=ti.f32, shape=MAX_VOXELS)
voxel_maxs = ti.Vector.field(3, dtype=ti.f32, shape=MAX_VOXELS)
num_voxels = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Remove all voxels from the scene.

    Resets the voxel count to zero. The field data is left in place and is
    overwritten as new voxels are added.
    """
    num_voxels[None] = 0


def add_voxel(voxel: BBox) -> int:
    """Append a voxel to the scene.

    Args:
        voxel: The box to add.

    Returns:
        The index of the added voxel.

    Raises:
        RuntimeError: If the maximum number of voxels is exceeded.
    """
    idx = num_voxels[None]
    if idx >= MAX_VOXELS:
        raise RuntimeError(f"Maximum number of voxels ({MAX_VOXELS}) exceeded")
    voxel_mins[idx] = voxel.min.as_tuple()
    voxel_maxs[idx] = voxel.max.as_tuple()
    num_voxels[None] = idx + 1
    return idx


def load_scene(voxels: Iterable[BBox]) -> int:
    """Replace the scene with the given voxels, preserving their order.

    Args:
        voxels: The boxes making up the scene.

    Returns:
        The number of voxels loaded.
    """
    clear_scene()
    for voxel in voxels:
        add_voxel(voxel)
    count = get_voxel_count()
    logger.debug("Loaded %d voxel(s) into the scene", count)
    return count


def get_voxel_count() -> int:
    """Get the number of voxels in the scene."""
    return int(num_voxels[None])


def get_voxel(idx: int) -> BBox:
    """Read a stored voxel back as a BBox.

    Values come back at field precision (float32).

    Raises:
        IndexError: If ``idx`` is not a valid voxel index.
    """
    if not 0 <= idx < get_voxel_count():
        raise IndexError(f"Voxel index {idx} out of range")
    lo = voxel_mins[idx]
    hi = voxel_maxs[idx]
    return BBox.from_tuples(
        (float(lo[0]), float(lo[1]), float(lo[2])),
        (float(hi[0]), float(hi[1]), float(hi[2])),
    )


@ti.func
def intersect_scene(ray: Ray) -> Hit:
    """Test a ray against every voxel in the scene.

    Voxels are visited in storage order and a hit replaces the current
    closest only when its distance is strictly smaller.

    Args:
        ray: The ray to trace.

    Returns:
        The closest Hit, or a miss record if no voxel was hit.
    """
    closest = make_miss()

    n_voxels = num_voxels[None]
    for i in range(n_voxels):
        box = Box(min=voxel_mins[i], max=voxel_maxs[i])
        hit = intersect_box(box, ray)
        if hit.dist < closest.dist:
            closest = hit

    return closest
