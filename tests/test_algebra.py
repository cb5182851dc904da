"""Unit tests for the vector and matrix value types.

Tests cover:
- Vector3 arithmetic, broadcast and zero-safe reciprocal
- Vector4 arithmetic and indexing
- Matrix4x4 transpose and products (including order dependence)
- Point transformation with the row-vector convention
- Rotation matrix orthonormality and known rotations
"""

import math

import numpy as np
import pytest


class TestVector3:
    """Tests for Vector3 operations."""

    def test_add_sub_neg(self):
        """Test elementwise addition, subtraction and negation."""
        from voxelcast.core.algebra import Vector3

        a = Vector3(1.0, 2.0, 3.0)
        b = Vector3(0.5, -1.0, 4.0)

        assert a + b == Vector3(1.5, 1.0, 7.0)
        assert a - b == Vector3(0.5, 3.0, -1.0)
        assert -a == Vector3(-1.0, -2.0, -3.0)

    def test_elementwise_multiply(self):
        """Test that multiplication is elementwise, not a dot product."""
        from voxelcast.core.algebra import Vector3

        a = Vector3(1.0, 2.0, 3.0)
        b = Vector3(2.0, 3.0, 4.0)

        assert a * b == Vector3(2.0, 6.0, 12.0)

    def test_scalar_broadcast(self):
        """Test that scalars broadcast to all components on either side."""
        from voxelcast.core.algebra import Vector3

        a = Vector3(1.0, 2.0, 3.0)

        assert a * 0.5 == Vector3(0.5, 1.0, 1.5)
        assert 2 * a == Vector3(2.0, 4.0, 6.0)
        assert a + 1 == Vector3(2.0, 3.0, 4.0)
        assert Vector3.splat(0.5) == Vector3(0.5, 0.5, 0.5)

    def test_divide_is_multiply_by_reciprocal(self):
        """Test elementwise division."""
        from voxelcast.core.algebra import Vector3

        result = Vector3(1.0, 4.0, 9.0) / Vector3(2.0, 4.0, 3.0)

        assert result.x == pytest.approx(0.5)
        assert result.y == pytest.approx(1.0)
        assert result.z == pytest.approx(3.0)

    def test_rcp(self):
        """Test per-component reciprocal."""
        from voxelcast.core.algebra import Vector3

        result = Vector3(2.0, -4.0, 0.5).rcp()

        assert result == Vector3(0.5, -0.25, 2.0)

    def test_rcp_zero_is_max_float(self):
        """Test that zero components map to MAX_FLOAT, not infinity."""
        from voxelcast.core.algebra import MAX_FLOAT, Vector3

        result = Vector3(0.0, 2.0, -0.0).rcp()

        assert result.x == MAX_FLOAT
        assert result.y == 0.5
        assert result.z == MAX_FLOAT
        assert all(math.isfinite(c) for c in result.as_tuple())

    def test_divide_by_zero_stays_finite(self):
        """Test that dividing by a zero component gives a finite value."""
        from voxelcast.core.algebra import Vector3

        result = Vector3(1e-30, 1.0, 1.0) / Vector3(0.0, 1.0, 1.0)

        assert math.isfinite(result.x)

    def test_max_float_is_float32_max(self):
        """Test MAX_FLOAT matches single precision."""
        from voxelcast.core.algebra import MAX_FLOAT

        assert MAX_FLOAT == float(np.finfo(np.float32).max)

    def test_min_max_clamp(self):
        """Test componentwise min, max and clamp."""
        from voxelcast.core.algebra import Vector3, clamp, vmax, vmin

        a = Vector3(1.0, 5.0, -3.0)
        b = Vector3(2.0, 4.0, -4.0)

        assert vmin(a, b) == Vector3(1.0, 4.0, -4.0)
        assert vmax(a, b) == Vector3(2.0, 5.0, -3.0)
        assert clamp(Vector3(-10.0, 0.5, 10.0), -1.0, 1.0) == Vector3(-1.0, 0.5, 1.0)

    def test_immutable(self):
        """Test that vectors cannot be modified in place."""
        import dataclasses

        from voxelcast.core.algebra import Vector3

        v = Vector3(1.0, 2.0, 3.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            v.x = 5.0  # type: ignore[misc]


class TestVector4:
    """Tests for Vector4 operations."""

    def test_indexing(self):
        """Test indexed access to the four components."""
        from voxelcast.core.algebra import Vector4

        v = Vector4(1.0, 2.0, 3.0, 4.0)

        assert [v[i] for i in range(4)] == [1.0, 2.0, 3.0, 4.0]
        with pytest.raises(IndexError):
            v[4]

    def test_arithmetic(self):
        """Test elementwise algebra."""
        from voxelcast.core.algebra import Vector4

        a = Vector4(1.0, 2.0, 3.0, 4.0)
        b = Vector4(4.0, 3.0, 2.0, 1.0)

        assert a + b == Vector4.splat(5.0)
        assert a - b == Vector4(-3.0, -1.0, 1.0, 3.0)
        assert a * b == Vector4(4.0, 6.0, 6.0, 4.0)
        assert a * 2.0 == Vector4(2.0, 4.0, 6.0, 8.0)
        assert -a == Vector4(-1.0, -2.0, -3.0, -4.0)


class TestMatrix4x4:
    """Tests for Matrix4x4 operations."""

    def test_from_values_requires_sixteen(self):
        """Test that from_values rejects the wrong number of values."""
        from voxelcast.core.algebra import Matrix4x4

        with pytest.raises(ValueError, match="16 values"):
            Matrix4x4.from_values(1.0, 2.0, 3.0)

    def test_transpose(self):
        """Test that transpose swaps rows and columns."""
        from voxelcast.core.algebra import Matrix4x4

        m = Matrix4x4.from_values(*range(16))
        t = m.transpose()

        assert np.array_equal(t.to_numpy(), m.to_numpy().T)
        assert t.transpose() == m

    def test_product_matches_numpy(self):
        """Test matrix product against NumPy's row-major matmul."""
        from voxelcast.core.algebra import Matrix4x4

        a_values = [float(i) for i in range(16)]
        b_values = [float((i * 7) % 11 - 5) for i in range(16)]
        a = Matrix4x4.from_values(*a_values)
        b = Matrix4x4.from_values(*b_values)

        expected = np.array(a_values).reshape(4, 4) @ np.array(b_values).reshape(4, 4)

        assert np.allclose((a @ b).to_numpy(), expected)

    def test_product_order_matters(self):
        """Test that A @ B differs from B @ A for non-commuting matrices."""
        from voxelcast.core.algebra import Matrix4x4

        a = Matrix4x4.from_values(*range(16))
        b = Matrix4x4.from_values(*range(15, -1, -1))

        assert not np.allclose((a @ b).to_numpy(), (b @ a).to_numpy())

    def test_identity_is_neutral(self):
        """Test that the identity leaves matrices unchanged."""
        from voxelcast.core.algebra import Matrix4x4

        m = Matrix4x4.from_values(*range(16))
        identity = Matrix4x4.identity()

        assert identity @ m == m
        assert m @ identity == m

    def test_point_transform_row_vector(self):
        """Test v @ M = M[0]*x + M[1]*y + M[2]*z + M[3]."""
        from voxelcast.core.algebra import Matrix4x4, Vector3

        m = Matrix4x4.from_values(
            1.0, 0.0, 0.0, 0.0,
            0.0, 2.0, 0.0, 0.0,
            0.0, 0.0, 3.0, 0.0,
            10.0, 20.0, 30.0, 1.0,
        )  # fmt: skip

        result = Vector3(1.0, 1.0, 1.0) @ m

        assert result == Vector3(11.0, 22.0, 33.0)

    def test_point_transform_matches_numpy(self):
        """Test point transform against homogeneous NumPy multiplication."""
        from voxelcast.core.algebra import Matrix4x4, Vector3

        values = [float((i * 5) % 9 - 4) for i in range(16)]
        m = Matrix4x4.from_values(*values)
        v = Vector3(0.5, -1.5, 2.0)

        expected = np.array([0.5, -1.5, 2.0, 1.0]) @ np.array(values).reshape(4, 4)
        result = v @ m

        assert np.allclose(result.as_tuple(), expected[:3])


class TestRotationMatrix:
    """Tests for rotation matrix construction."""

    @pytest.mark.parametrize("angle", [0.0, math.pi / 8, math.pi / 4, 1.0, math.pi, -2.5])
    @pytest.mark.parametrize(
        "axis",
        [
            (1.0, 0.0, 0.0),
            (0.0, 1.0, 0.0),
            (0.0, 0.0, 1.0),
            (1 / math.sqrt(3), 1 / math.sqrt(3), 1 / math.sqrt(3)),
        ],
    )
    def test_orthonormal(self, angle, axis):
        """Test that R @ R.T is the identity for unit axes."""
        from voxelcast.core.algebra import rotation_matrix

        r = rotation_matrix(math.sin(angle), math.cos(angle), *axis)

        assert np.allclose((r @ r.transpose()).to_numpy(), np.eye(4), atol=1e-12)

    def test_zero_angle_is_identity(self):
        """Test that a zero rotation is the identity."""
        from voxelcast.core.algebra import rotation_matrix

        r = rotation_matrix(0.0, 1.0, 0.0, 1.0, 0.0)

        assert np.allclose(r.to_numpy(), np.eye(4))

    def test_quarter_turn_about_z(self):
        """Test a quarter turn about Z in the row-vector convention."""
        from voxelcast.core.algebra import Vector3, rotation_matrix

        r = rotation_matrix(1.0, 0.0, 0.0, 0.0, 1.0)

        result = Vector3(1.0, 0.0, 0.0) @ r

        assert np.allclose(result.as_tuple(), (0.0, 1.0, 0.0))

    def test_axis_is_fixed_point(self):
        """Test that the rotation axis maps to itself."""
        from voxelcast.core.algebra import Vector3, rotation_matrix

        axis = (0.0, 0.6, 0.8)
        r = rotation_matrix(math.sin(0.7), math.cos(0.7), *axis)

        result = Vector3(*axis) @ r

        assert np.allclose(result.as_tuple(), axis)

    def test_homogeneous_row_and_column(self):
        """Test that translation row and w column are untouched."""
        from voxelcast.core.algebra import rotation_matrix

        m = rotation_matrix(math.sin(0.3), math.cos(0.3), 1.0, 0.0, 0.0).to_numpy()

        assert np.array_equal(m[3], [0.0, 0.0, 0.0, 1.0])
        assert np.array_equal(m[:3, 3], [0.0, 0.0, 0.0])
