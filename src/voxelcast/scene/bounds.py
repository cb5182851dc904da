"""Axis-aligned bounding boxes on the Python side.

BBox is the host-side counterpart of the Taichi ``Box`` struct. It describes
both the voxels that make up a scene and the scene's overall bounds, from
which the camera derives its zoom and pan.

Example:
    >>> from voxelcast.core.algebra import Vector3
    >>> from voxelcast.scene.bounds import BBox, compute_scene_bbox
    >>> scene = [
    ...     BBox(Vector3(-0.75, -0.75, -0.75), Vector3(0.25, 0.25, 0.25)),
    ...     BBox(Vector3(-0.25, -0.25, -0.25), Vector3(0.75, 0.75, 0.75)),
    ... ]
    >>> compute_scene_bbox(scene).max_extent
    0.75
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from voxelcast.core.algebra import MAX_FLOAT, Vector3, vmax, vmin


@dataclass(frozen=True)
class BBox:
    """An axis-aligned box with ``min <= max`` on every axis.

    Attributes:
        min: Corner with the smallest coordinates.
        max: Corner with the largest coordinates.
    """

    min: Vector3
    max: Vector3

    def __post_init__(self) -> None:
        lo, hi = self.min, self.max
        if lo.x > hi.x or lo.y > hi.y or lo.z > hi.z:
            raise ValueError(f"Box min {lo.as_tuple()} exceeds max {hi.as_tuple()}")

    @classmethod
    def from_tuples(
        cls,
        lo: tuple[float, float, float],
        hi: tuple[float, float, float],
    ) -> BBox:
        """Create a box from two coordinate triples."""
        return cls(Vector3(*lo), Vector3(*hi))

    @property
    def centre(self) -> Vector3:
        """Midpoint of the box."""
        return (self.max + self.min) * 0.5

    @property
    def extent(self) -> Vector3:
        """Half of the box diagonal."""
        return (self.max - self.min) * 0.5

    @property
    def max_extent(self) -> float:
        """Largest component of the extent."""
        return self.extent.max_component()


# A voxel is simply a box used as a scene primitive
Voxel = BBox


def compute_scene_bbox(voxels: Iterable[BBox]) -> BBox:
    """Reduce a sequence of boxes to the box enclosing all of them.

    The reduction is a componentwise min over all minimum corners and max
    over all maximum corners, so the result does not depend on order.

    Args:
        voxels: The scene's boxes.

    Returns:
        The bounding box of the scene.

    Raises:
        ValueError: If ``voxels`` is empty.
    """
    bbox_min = Vector3.splat(MAX_FLOAT)
    bbox_max = Vector3.splat(-MAX_FLOAT)
    count = 0

    for voxel in voxels:
        bbox_min = vmin(bbox_min, voxel.min)
        bbox_max = vmax(bbox_max, voxel.max)
        count += 1

    if count == 0:
        raise ValueError("Cannot compute the bounding box of an empty scene")

    return BBox(bbox_min, bbox_max)
