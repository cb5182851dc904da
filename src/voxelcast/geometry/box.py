"""Axis-aligned box primitive with ray-box intersection.

This module provides the Box and Hit dataclasses and the slab-method
intersection used for every voxel in the scene.

The slab test computes, per axis, the ray parameters where the ray crosses the
two planes bounding the box:

    t0 = (box.min - ray.origin) * ray.rcpdir
    t1 = (box.max - ray.origin) * ray.rcpdir

The entry distance is the largest per-axis near value and the exit distance
the smallest per-axis far value. The ray hits iff 0 < entry < exit.

Besides the distance, the hit records which slab supplied the entry boundary
as a pair of masks. The masks select a face normal for shading:

    b_mask and a_mask      -> X slab
    b_mask and not a_mask  -> Y slab
    not b_mask             -> Z slab

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from voxelcast.geometry.box import Box, intersect_box, vec3
    >>> from voxelcast.core.ray import make_ray
    >>> @ti.kernel
    ... def probe() -> ti.f32:
    ...     box = Box(min=vec3(-1.0), max=vec3(1.0))
    ...     ray = make_ray(vec3(0.0, 0.0, 5.0), vec3(0.0, 0.0, -1.0))
    ...     return intersect_box(box, ray).dist
"""

import taichi as ti
import taichi.math as tm

from voxelcast.core.algebra import MAX_FLOAT
from voxelcast.core.ray import Ray

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Distance reported for a miss
MISS_DISTANCE = MAX_FLOAT


@ti.dataclass
class Box:
    """An axis-aligned box given by its minimum and maximum corners.

    Attributes:
        min: The corner with the smallest coordinates (vec3).
        max: The corner with the largest coordinates (vec3).
    """

    min: vec3
    max: vec3


@ti.dataclass
class Hit:
    """Result of a ray-box intersection.

    Attributes:
        dist: Ray parameter of the entry point, or MISS_DISTANCE on a miss.
        a_mask: 1 if the X slab entry is not nearer than the Y slab entry.
        b_mask: 1 if the X/Y slab entry is not nearer than the Z slab entry.
    """

    dist: ti.f32
    a_mask: ti.i32
    b_mask: ti.i32


@ti.func
def make_miss() -> Hit:
    """Create a Hit indicating no intersection."""
    return Hit(dist=MISS_DISTANCE, a_mask=0, b_mask=0)


@ti.func
def intersect_box(box: Box, ray: Ray) -> Hit:
    """Intersect a ray with an axis-aligned box using the slab method.

    Args:
        box: The box to test.
        ray: The ray, carrying its reciprocal direction.

    Returns:
        A Hit whose dist is the entry distance when 0 < entry < exit and
        MISS_DISTANCE otherwise. The masks are filled in either way.
    """
    t0 = (box.min - ray.origin) * ray.rcpdir
    t1 = (box.max - ray.origin) * ray.rcpdir

    axial_min = ti.min(t0, t1)
    axial_max = ti.max(t0, t1)

    a_mask = 0
    if axial_min.x >= axial_min.y:
        a_mask = 1

    b_mask = 0
    if ti.max(axial_min.x, axial_min.y) >= axial_min.z:
        b_mask = 1

    entry = ti.max(ti.max(axial_min.x, axial_min.y), axial_min.z)
    exit_ = ti.min(ti.min(axial_max.x, axial_max.y), axial_max.z)

    dist = MISS_DISTANCE
    if 0.0 < entry and entry < exit_:
        dist = entry

    return Hit(dist=dist, a_mask=a_mask, b_mask=b_mask)


@ti.func
def hit_normal(hit: Hit) -> vec3:
    """Map a hit's slab masks to a unit face normal.

    Only the axis is recovered; the normal always points along the positive
    axis direction.

    Args:
        hit: A hit record from intersect_box.

    Returns:
        (1, 0, 0), (0, 1, 0) or (0, 0, 1).
    """
    normal = vec3(0.0, 0.0, 1.0)
    if hit.b_mask == 1:
        if hit.a_mask == 1:
            normal = vec3(1.0, 0.0, 0.0)
        else:
            normal = vec3(0.0, 1.0, 0.0)
    return normal


@ti.func
def is_hit(hit: Hit) -> ti.i32:
    """Return 1 if the hit record denotes an intersection, 0 otherwise."""
    result = 0
    if hit.dist != MISS_DISTANCE:
        result = 1
    return result
