"""Ray data structure for GPU-accelerated ray casting.

A ray stores its origin and the per-axis reciprocal of its direction. The slab
test only ever divides by the direction, so the reciprocal is computed once
when the ray is built and the hot loop multiplies instead.

Zero direction components would produce infinite reciprocals. They are
replaced by MAX_FLOAT and the result is clamped to [-MAX_FLOAT/2, MAX_FLOAT/2],
which keeps axis-aligned rays finite (0 * rcpdir stays 0, never NaN).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from voxelcast.core.ray import make_ray, vec3
    >>> @ti.kernel
    ... def build():
    ...     ray = make_ray(vec3(0.0, 0.0, 2.0), vec3(0.0, 0.0, -1.0))
"""

import taichi as ti
import taichi.math as tm

from voxelcast.core.algebra import MAX_FLOAT

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Bound for reciprocal direction components
RCP_LIMIT = MAX_FLOAT / 2


@ti.dataclass
class Ray:
    """A ray with an origin point and reciprocal direction.

    Attributes:
        origin: The starting point of the ray (vec3).
        rcpdir: Per-axis reciprocal of the ray direction (vec3), clamped to
            [-RCP_LIMIT, RCP_LIMIT].
    """

    origin: vec3
    rcpdir: vec3


@ti.func
def _rcp_component(value: ti.f32) -> ti.f32:
    result = MAX_FLOAT
    if value != 0.0:
        result = 1.0 / value
    return result


@ti.func
def rcp(v: vec3) -> vec3:
    """Per-component reciprocal with zero mapped to MAX_FLOAT.

    Args:
        v: The input vector.

    Returns:
        (1/v.x, 1/v.y, 1/v.z) with MAX_FLOAT in place of any division by zero.
    """
    return vec3(_rcp_component(v.x), _rcp_component(v.y), _rcp_component(v.z))


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from an origin and a raw (unnormalized) direction.

    Args:
        origin: The starting point of the ray.
        direction: The direction vector. Its length scales hit distances;
            it is not normalized.

    Returns:
        A Ray holding the clamped reciprocal of ``direction``.
    """
    rcpdir = tm.clamp(rcp(direction), -RCP_LIMIT, RCP_LIMIT)
    return Ray(origin=origin, rcpdir=rcpdir)
