"""Orbit camera derived from the scene bounding box.

The camera is positioned by three rotations (roll about Z, azimuth about Y,
declination about X) and a position given in normalized camera space. The
inverse view matrix is composed on the Python side as

    view_inverse = eye @ rotation.T @ zoom_and_pan

where ``eye`` translates by the camera position, ``rotation.T`` undoes the
orbit rotation and ``zoom_and_pan`` scales by the scene's largest half extent
and moves to the scene centre. The order is part of the contract: swapping
factors renders a different view.

The four rows of the inverse view matrix (dropping the homogeneous column)
form the camera basis handed to the kernel:

    right   = row 0
    up      = row 1 * (height / width)
    forward = -row 2
    origin  = row 3

A pixel's ray direction is ``right * ndc_x + up * ndc_y + forward``.

Example:
    >>> import math
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from voxelcast.camera.view import VoxelCamera, compute_camera_basis, setup_camera
    >>> from voxelcast.scene.bounds import BBox
    >>> bbox = BBox.from_tuples((-1, -1, -1), (1, 1, 1))
    >>> camera = VoxelCamera(roll=math.pi / 8, azimuth=math.pi / 4)
    >>> setup_camera(compute_camera_basis(bbox, camera, 256, 256))
"""

import logging
import math
from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from voxelcast.core.algebra import Matrix4x4, Vector3, rotation_matrix
from voxelcast.core.ray import Ray, make_ray
from voxelcast.scene.bounds import BBox

logger = logging.getLogger(__name__)

vec3 = tm.vec3

# World axes the orbit rotations turn about
ROLL_AXIS = (0.0, 0.0, 1.0)
AZIMUTH_AXIS = (0.0, 1.0, 0.0)
DECLINATION_AXIS = (1.0, 0.0, 0.0)

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass(frozen=True)
class VoxelCamera:
    """Configuration for the orbit camera.

    Attributes:
        roll: Rotation about the world Z axis, in radians.
        azimuth: Rotation about the world Y axis, in radians.
        declination: Rotation about the world X axis, in radians.
        position: Camera position in normalized camera space. It is scaled
            by the scene's largest half extent and offset by the scene
            centre, so (0, 0, 2.125) sits a little more than two half
            extents from the centre regardless of scene size.
    """

    roll: float = 0.0
    azimuth: float = 0.0
    declination: float = 0.0
    position: tuple[float, float, float] = (0.0, 0.0, 2.125)


@dataclass(frozen=True)
class CameraBasis:
    """The four vectors the pixel kernel uses to build rays.

    Attributes:
        right: Offset per unit of horizontal normalized device coordinate.
        up: Offset per unit of vertical normalized device coordinate,
            already scaled by the image aspect.
        forward: Direction through the image centre.
        origin: Camera position in world space.
    """

    right: Vector3
    up: Vector3
    forward: Vector3
    origin: Vector3

    def rows(self) -> tuple[Vector3, Vector3, Vector3, Vector3]:
        return (self.right, self.up, self.forward, self.origin)


# =============================================================================
# View Transform (Python-side, called once per camera configuration)
# =============================================================================


def build_rotation(camera: VoxelCamera) -> Matrix4x4:
    """Compose the roll, azimuth and declination rotations.

    Args:
        camera: Camera configuration holding the three angles.

    Returns:
        ``R(roll) @ R(azimuth) @ R(declination)``.
    """
    roll = rotation_matrix(math.sin(camera.roll), math.cos(camera.roll), *ROLL_AXIS)
    azim = rotation_matrix(math.sin(camera.azimuth), math.cos(camera.azimuth), *AZIMUTH_AXIS)
    decl = rotation_matrix(
        math.sin(camera.declination), math.cos(camera.declination), *DECLINATION_AXIS
    )
    return roll @ azim @ decl


def build_eye(position: tuple[float, float, float]) -> Matrix4x4:
    """Identity with the camera position in the translation row."""
    x, y, z = position
    return Matrix4x4.from_values(
        1.0, 0.0, 0.0, 0.0,
        0.0, 1.0, 0.0, 0.0,
        0.0, 0.0, 1.0, 0.0,
        x, y, z, 1.0,
    )  # fmt: skip


def build_zoom_and_pan(bbox: BBox) -> Matrix4x4:
    """Uniform scale by the largest half extent, translated to the centre."""
    s = bbox.max_extent
    c = bbox.centre
    return Matrix4x4.from_values(
        s, 0.0, 0.0, 0.0,
        0.0, s, 0.0, 0.0,
        0.0, 0.0, s, 0.0,
        c.x, c.y, c.z, 1.0,
    )  # fmt: skip


def build_view_inverse(bbox: BBox, camera: VoxelCamera) -> Matrix4x4:
    """Build the camera-to-world matrix.

    Composed as ``eye @ rotation.transpose() @ zoom_and_pan`` in row-vector
    convention, so a camera-space point is first offset by the eye position,
    then un-rotated, then scaled and moved into the scene. The transpose of
    the orthonormal rotation is its inverse.

    Args:
        bbox: Bounding box of the scene.
        camera: Camera configuration.

    Returns:
        The inverse view matrix.
    """
    rotation = build_rotation(camera)
    return build_eye(camera.position) @ rotation.transpose() @ build_zoom_and_pan(bbox)


def compute_camera_basis(
    bbox: BBox,
    camera: VoxelCamera,
    width: int,
    height: int,
) -> CameraBasis:
    """Derive the kernel's camera basis from the scene bounds.

    Args:
        bbox: Bounding box of the scene.
        camera: Camera configuration.
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        The camera basis with aspect correction applied to ``up`` and the
        forward axis flipped.

    Raises:
        ValueError: If width or height is not positive.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")

    mv_inv = build_view_inverse(bbox, camera)

    def row(i: int) -> Vector3:
        return Vector3(mv_inv[i][0], mv_inv[i][1], mv_inv[i][2])

    return CameraBasis(
        right=row(0),
        up=row(1) * (float(height) / width),
        forward=row(2) * -1.0,
        origin=row(3),
    )


# =============================================================================
# Taichi Fields for Camera State (GPU-accessible)
# =============================================================================

# right, up, forward, origin
_camera_basis = ti.Vector.field(3, dtype=ti.f32, shape=4)


def setup_camera(basis: CameraBasis) -> None:
    """Upload a camera basis for use by get_ray.

    Note:
        This function writes to Taichi fields and should be called from
        Python (not from within a Taichi kernel).
    """
    for i, v in enumerate(basis.rows()):
        _camera_basis[i] = v.as_tuple()
    logger.debug(
        "Camera basis set: origin=%s forward=%s",
        basis.origin.as_tuple(),
        basis.forward.as_tuple(),
    )


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Get the uploaded camera basis for debugging.

    Returns:
        Dictionary with right, up, forward and origin at field precision.
    """
    info = {}
    for i, name in enumerate(("right", "up", "forward", "origin")):
        v = _camera_basis[i]
        info[name] = (float(v[0]), float(v[1]), float(v[2]))
    return info


# =============================================================================
# Ray Generation (Taichi-compatible, GPU-callable)
# =============================================================================


@ti.func
def get_ray(idx: ti.i32, idy: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Generate the primary ray for pixel (idx, idy).

    Pixel coordinates map to normalized device coordinates
    ``((2 * idx - width) / width, (2 * idy - height) / height)``, which
    covers [-1, 1) and samples pixel corners rather than centres.

    Args:
        idx: Pixel column (0 = first column).
        idy: Pixel row (0 = first row).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        A Ray from the camera origin with a clamped reciprocal direction.
    """
    ndc_x = ti.cast(idx * 2 - width, ti.f32) * (1.0 / ti.cast(width, ti.f32))
    ndc_y = ti.cast(idy * 2 - height, ti.f32) * (1.0 / ti.cast(height, ti.f32))

    direction = _camera_basis[0] * ndc_x + _camera_basis[1] * ndc_y + _camera_basis[2]

    return make_ray(_camera_basis[3], direction)
