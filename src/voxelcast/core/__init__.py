"""Core rendering module.

This module contains the fundamental building blocks for ray casting:

Components:
    algebra: Vector3, Vector4, Matrix4x4 and rotation matrices (Python side)
    ray: Ray data structure with zero-safe reciprocal direction
    integrator: Shading policies, render target and the pixel kernel
    tiled: Tiled renderer evaluating pixel spans in any order

All per-pixel work runs in Taichi kernels; camera and scene setup run in
plain Python before upload.
"""

from .algebra import (
    MAX_FLOAT,
    Matrix4x4,
    Vector3,
    Vector4,
    clamp,
    rotation_matrix,
    vmax,
    vmin,
)
from .ray import RCP_LIMIT, Ray, make_ray, rcp, vec3

# Note: integrator and tiled are NOT imported here to avoid circular imports.
# Import directly from voxelcast.core.integrator or voxelcast.core.tiled when needed.

__all__ = [
    "MAX_FLOAT",
    "Vector3",
    "Vector4",
    "Matrix4x4",
    "rotation_matrix",
    "vmin",
    "vmax",
    "clamp",
    "Ray",
    "RCP_LIMIT",
    "make_ray",
    "rcp",
    "vec3",
]
