"""Vector and matrix value types for camera and scene setup.

This module provides the small linear algebra layer used on the Python side
before anything is uploaded to Taichi fields:

- Vector3: points and directions in 3-space
- Vector4: homogeneous rows for 4x4 matrices
- Matrix4x4: row-major 4x4 matrix with transpose and products
- rotation_matrix: Rodrigues-style rotation about a unit axis

All types are immutable and every operation returns a new value. Vectors use
row-vector convention: a point is transformed as ``v @ M``, which computes
``M[0] * v.x + M[1] * v.y + M[2] * v.z + M[3]``.

Example:
    >>> from voxelcast.core.algebra import Matrix4x4, Vector3, rotation_matrix
    >>> import math
    >>> rot = rotation_matrix(math.sin(0.5), math.cos(0.5), 0.0, 1.0, 0.0)
    >>> p = Vector3(1.0, 0.0, 0.0) @ rot
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

import numpy as np
import numpy.typing as npt

# Largest finite single precision float, the precision the kernels run in
MAX_FLOAT = float(np.finfo(np.float32).max)

Scalar = Union[float, int]


def _rcp(value: float) -> float:
    """Reciprocal that substitutes MAX_FLOAT for a zero input."""
    return 1.0 / value if value != 0.0 else MAX_FLOAT


# =============================================================================
# Vector3
# =============================================================================


@dataclass(frozen=True)
class Vector3:
    """A point or direction in 3-space.

    Multiplication and division are elementwise. A scalar operand is
    broadcast to all three components.

    Attributes:
        x: X component.
        y: Y component.
        z: Z component.
    """

    x: float
    y: float
    z: float

    @classmethod
    def splat(cls, value: Scalar) -> Vector3:
        """Create a vector with all components set to ``value``."""
        return cls(float(value), float(value), float(value))

    def __neg__(self) -> Vector3:
        return Vector3(-self.x, -self.y, -self.z)

    def __add__(self, rhs: Vector3 | Scalar) -> Vector3:
        rhs = _as_vector3(rhs)
        return Vector3(self.x + rhs.x, self.y + rhs.y, self.z + rhs.z)

    def __sub__(self, rhs: Vector3 | Scalar) -> Vector3:
        return self + -_as_vector3(rhs)

    def __mul__(self, rhs: Vector3 | Scalar) -> Vector3:
        rhs = _as_vector3(rhs)
        return Vector3(self.x * rhs.x, self.y * rhs.y, self.z * rhs.z)

    __rmul__ = __mul__

    def __truediv__(self, rhs: Vector3 | Scalar) -> Vector3:
        return self * _as_vector3(rhs).rcp()

    def __matmul__(self, m: Matrix4x4) -> Vector3:
        """Transform this point by ``m`` (row vector on the left)."""
        r = m[0] * self.x + m[1] * self.y + m[2] * self.z + m[3]
        return Vector3(r[0], r[1], r[2])

    def rcp(self) -> Vector3:
        """Per-component reciprocal.

        Zero components map to MAX_FLOAT instead of infinity so that rays
        along a coordinate axis stay finite through the slab test.
        """
        return Vector3(_rcp(self.x), _rcp(self.y), _rcp(self.z))

    def max_component(self) -> float:
        """Return the largest of the three components."""
        return max(self.x, max(self.y, self.z))

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def to_numpy(self) -> npt.NDArray[np.float32]:
        return np.array(self.as_tuple(), dtype=np.float32)


def _as_vector3(value: Vector3 | Scalar) -> Vector3:
    if isinstance(value, Vector3):
        return value
    return Vector3.splat(value)


def vmin(a: Vector3, b: Vector3) -> Vector3:
    """Componentwise minimum."""
    return Vector3(min(a.x, b.x), min(a.y, b.y), min(a.z, b.z))


def vmax(a: Vector3, b: Vector3) -> Vector3:
    """Componentwise maximum."""
    return Vector3(max(a.x, b.x), max(a.y, b.y), max(a.z, b.z))


def clamp(x: Vector3, lo: Vector3 | Scalar, hi: Vector3 | Scalar) -> Vector3:
    """Clamp each component of ``x`` into ``[lo, hi]``."""
    return vmax(vmin(x, _as_vector3(hi)), _as_vector3(lo))


# =============================================================================
# Vector4
# =============================================================================


@dataclass(frozen=True)
class Vector4:
    """Four floats forming one row of a 4x4 matrix.

    Supports the same elementwise algebra as Vector3 plus indexing.
    """

    x: float
    y: float
    z: float
    w: float

    @classmethod
    def splat(cls, value: Scalar) -> Vector4:
        v = float(value)
        return cls(v, v, v, v)

    def __getitem__(self, index: int) -> float:
        return (self.x, self.y, self.z, self.w)[index]

    def __neg__(self) -> Vector4:
        return Vector4(-self.x, -self.y, -self.z, -self.w)

    def __add__(self, rhs: Vector4 | Scalar) -> Vector4:
        rhs = _as_vector4(rhs)
        return Vector4(self.x + rhs.x, self.y + rhs.y, self.z + rhs.z, self.w + rhs.w)

    def __sub__(self, rhs: Vector4 | Scalar) -> Vector4:
        return self + -_as_vector4(rhs)

    def __mul__(self, rhs: Vector4 | Scalar) -> Vector4:
        rhs = _as_vector4(rhs)
        return Vector4(self.x * rhs.x, self.y * rhs.y, self.z * rhs.z, self.w * rhs.w)

    __rmul__ = __mul__

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.x, self.y, self.z, self.w)


def _as_vector4(value: Vector4 | Scalar) -> Vector4:
    if isinstance(value, Vector4):
        return value
    return Vector4.splat(value)


# =============================================================================
# Matrix4x4
# =============================================================================


@dataclass(frozen=True)
class Matrix4x4:
    """A 4x4 matrix stored as four Vector4 rows.

    Products follow row-major convention: row ``i`` of ``A @ B`` is
    ``sum(A[i][k] * B[k] for k in range(4))``. Multiplication order therefore
    matters for the view transform built in ``camera.view``.

    Attributes:
        rows: The four rows, top to bottom.
    """

    rows: tuple[Vector4, Vector4, Vector4, Vector4]

    @classmethod
    def from_values(cls, *values: Scalar) -> Matrix4x4:
        """Build a matrix from 16 values given in row-major order."""
        if len(values) != 16:
            raise ValueError(f"Matrix4x4 needs 16 values, got {len(values)}")
        v = [float(c) for c in values]
        return cls(
            (
                Vector4(v[0], v[1], v[2], v[3]),
                Vector4(v[4], v[5], v[6], v[7]),
                Vector4(v[8], v[9], v[10], v[11]),
                Vector4(v[12], v[13], v[14], v[15]),
            )
        )

    @classmethod
    def identity(cls) -> Matrix4x4:
        return cls.from_values(
            1.0, 0.0, 0.0, 0.0,
            0.0, 1.0, 0.0, 0.0,
            0.0, 0.0, 1.0, 0.0,
            0.0, 0.0, 0.0, 1.0,
        )  # fmt: skip

    def __getitem__(self, index: int) -> Vector4:
        return self.rows[index]

    def transpose(self) -> Matrix4x4:
        m = self.rows
        return Matrix4x4.from_values(
            m[0][0], m[1][0], m[2][0], m[3][0],
            m[0][1], m[1][1], m[2][1], m[3][1],
            m[0][2], m[1][2], m[2][2], m[3][2],
            m[0][3], m[1][3], m[2][3], m[3][3],
        )  # fmt: skip

    def __matmul__(self, rhs: Matrix4x4) -> Matrix4x4:
        if not isinstance(rhs, Matrix4x4):
            return NotImplemented

        def combine(row: Vector4) -> Vector4:
            return (
                rhs[0] * row[0]
                + rhs[1] * row[1]
                + rhs[2] * row[2]
                + rhs[3] * row[3]
            )

        return Matrix4x4(
            (combine(self[0]), combine(self[1]), combine(self[2]), combine(self[3]))
        )

    def to_numpy(self) -> npt.NDArray[np.float64]:
        """Return the matrix as a (4, 4) float64 array."""
        return np.array([row.as_tuple() for row in self.rows], dtype=np.float64)


def rotation_matrix(sin_a: float, cos_a: float, x: float, y: float, z: float) -> Matrix4x4:
    """Build a rotation about the axis (x, y, z).

    The axis must already be unit length; it is not normalized here and a
    non-unit axis produces a matrix that is not a rotation.

    Args:
        sin_a: Sine of the rotation angle.
        cos_a: Cosine of the rotation angle.
        x: Axis X component.
        y: Axis Y component.
        z: Axis Z component.

    Returns:
        A 4x4 matrix with the rotation in its upper-left 3x3 block and an
        identity homogeneous row and column.
    """
    return Matrix4x4.from_values(
        x * x + cos_a * (1 - x * x),
        x * y - cos_a * (x * y) + sin_a * z,
        x * z - cos_a * (x * z) - sin_a * y,
        0.0,
        y * x - cos_a * (y * x) - sin_a * z,
        y * y + cos_a * (1 - y * y),
        y * z - cos_a * (y * z) + sin_a * x,
        0.0,
        z * x - cos_a * (z * x) + sin_a * y,
        z * y - cos_a * (z * y) - sin_a * x,
        z * z + cos_a * (1 - z * z),
        0.0,
        0.0,
        0.0,
        0.0,
        1.0,
    )
