"""Tests for the Orientation value and elementary frame rotations."""

import math

import jax
import jax.numpy as jnp
import pytest

from aerojax.attitude import Orientation, frame_rotation


def _rotation(angles=(0.3, -0.7, 1.1)) -> jnp.ndarray:
    """A generic rotation matrix built from three elementary rotations."""
    return frame_rotation(2, angles[2]) @ frame_rotation(1, angles[1]) @ frame_rotation(0, angles[0])


# ---------------------------------------------------------------------------
# frame_rotation
# ---------------------------------------------------------------------------


class TestFrameRotation:
    def test_z_rotation_matches_passive_convention(self):
        R = frame_rotation(2, math.pi / 2)
        # The x-axis of the old frame is the -y axis of the rotated frame
        assert jnp.allclose(R @ jnp.array([1.0, 0.0, 0.0]), jnp.array([0.0, -1.0, 0.0]), atol=1e-15)

    def test_y_rotation_matches_passive_convention(self):
        R = frame_rotation(1, math.pi / 2)
        assert jnp.allclose(R @ jnp.array([1.0, 0.0, 0.0]), jnp.array([0.0, 0.0, 1.0]), atol=1e-15)

    def test_x_rotation_matches_passive_convention(self):
        R = frame_rotation(0, math.pi / 2)
        assert jnp.allclose(R @ jnp.array([0.0, 1.0, 0.0]), jnp.array([0.0, 0.0, -1.0]), atol=1e-15)

    @pytest.mark.parametrize("axis", [0, 1, 2])
    def test_orthonormal(self, axis):
        R = frame_rotation(axis, 0.813)
        assert jnp.allclose(R @ R.T, jnp.eye(3), atol=1e-15)
        assert float(jnp.linalg.det(R)) == pytest.approx(1.0, abs=1e-15)

    def test_invalid_axis_raises(self):
        with pytest.raises(ValueError, match="axis must be"):
            frame_rotation(3, 0.1)


# ---------------------------------------------------------------------------
# Orientation
# ---------------------------------------------------------------------------


class TestOrientationConstruction:
    def test_from_matrix_accepts_rotation(self):
        orientation = Orientation.from_matrix(_rotation(), "inertial", "body")
        assert orientation.base_frame == "inertial"
        assert orientation.target_frame == "body"

    def test_from_matrix_rejects_non_orthonormal(self):
        with pytest.raises(ValueError, match="not a proper rotation"):
            Orientation.from_matrix(2.0 * jnp.eye(3))

    def test_from_matrix_rejects_reflection(self):
        with pytest.raises(ValueError, match="not a proper rotation"):
            Orientation.from_matrix(jnp.diag(jnp.array([1.0, 1.0, -1.0])))

    def test_from_matrix_without_validation(self):
        orientation = Orientation.from_matrix(2.0 * jnp.eye(3), validate=False)
        assert jnp.allclose(orientation.to_matrix(), 2.0 * jnp.eye(3))

    def test_identity(self):
        assert jnp.array_equal(Orientation.identity().to_matrix(), jnp.eye(3))


class TestOrientationQuaternion:
    def test_identity_quaternion(self):
        q = Orientation.identity().to_quaternion()
        assert jnp.allclose(q, jnp.array([1.0, 0.0, 0.0, 0.0]), atol=1e-15)

    def test_quaternion_roundtrip(self):
        orientation = Orientation(_rotation())
        restored = Orientation.from_quaternion(orientation.to_quaternion())
        assert jnp.allclose(restored.to_matrix(), orientation.to_matrix(), atol=1e-14)

    def test_scalar_part_non_negative(self):
        for angles in [(0.1, 0.2, 3.0), (3.1, -0.2, 0.5), (0.0, 3.1, 0.0)]:
            assert float(Orientation(_rotation(angles)).to_quaternion()[0]) >= 0.0

    def test_half_turn_about_x(self):
        q = Orientation(jnp.diag(jnp.array([1.0, -1.0, -1.0]))).to_quaternion()
        assert jnp.allclose(jnp.abs(q), jnp.array([0.0, 1.0, 0.0, 0.0]), atol=1e-15)

    def test_active_sense_matches_matrix(self):
        """A quaternion [cos(a/2), 0, 0, sin(a/2)] rotates x toward y."""
        a = 0.4
        orientation = Orientation.from_quaternion([math.cos(a / 2), 0.0, 0.0, math.sin(a / 2)])
        v = orientation.rotate([1.0, 0.0, 0.0])
        assert jnp.allclose(v, jnp.array([math.cos(a), math.sin(a), 0.0]), atol=1e-15)

    def test_from_quaternion_normalizes(self):
        orientation = Orientation.from_quaternion([2.0, 0.0, 0.0, 0.0])
        assert jnp.allclose(orientation.to_matrix(), jnp.eye(3), atol=1e-15)


class TestOrientationAlgebra:
    def test_inverse_swaps_frames(self):
        orientation = Orientation(_rotation(), "inertial", "body")
        inverse = orientation.inverse()
        assert inverse.base_frame == "body"
        assert inverse.target_frame == "inertial"
        assert jnp.allclose(inverse.to_matrix(), orientation.to_matrix().T)

    def test_composition_with_inverse_is_identity(self):
        orientation = Orientation(_rotation(), "inertial", "body")
        assert orientation @ orientation.inverse() == Orientation.identity("inertial", "inertial")

    def test_composition_rotates_in_sequence(self):
        a = Orientation(_rotation((0.1, 0.2, 0.3)), "A", "B")
        b = Orientation(_rotation((-0.4, 0.5, 0.9)), "B", "C")
        v = jnp.array([0.3, -1.2, 2.0])
        assert jnp.allclose((a @ b).rotate(v), a.rotate(b.rotate(v)), atol=1e-14)
        assert (a @ b).base_frame == "A"
        assert (a @ b).target_frame == "C"

    def test_composition_frame_mismatch_raises(self):
        a = Orientation(jnp.eye(3), "A", "B")
        b = Orientation(jnp.eye(3), "C", "D")
        with pytest.raises(ValueError, match="Cannot compose"):
            a @ b

    def test_rotate(self):
        orientation = Orientation(frame_rotation(2, math.pi / 2).T)
        assert jnp.allclose(orientation.rotate([1.0, 0.0, 0.0]), jnp.array([0.0, 1.0, 0.0]), atol=1e-15)


class TestOrientationEquality:
    def test_equal_up_to_quaternion_sign(self):
        q = jnp.array([0.5, 0.5, -0.5, 0.5])
        assert Orientation.from_quaternion(q) == Orientation.from_quaternion(-q)

    def test_different_rotations_not_equal(self):
        assert Orientation(_rotation()) != Orientation(jnp.eye(3))

    def test_frame_labels_compared(self):
        R = _rotation()
        assert Orientation(R, "A", "B") != Orientation(R, "A", "C")

    def test_not_hashable(self):
        with pytest.raises(TypeError):
            hash(Orientation.identity())

    def test_repr_contains_frames(self):
        text = repr(Orientation.identity("inertial", "body"))
        assert "inertial" in text and "body" in text


class TestOrientationPytree:
    def test_flatten_unflatten_keeps_frames(self):
        orientation = Orientation(_rotation(), "inertial", "body")
        leaves, treedef = jax.tree_util.tree_flatten(orientation)
        assert len(leaves) == 1
        restored = jax.tree_util.tree_unflatten(treedef, leaves)
        assert restored == orientation

    def test_through_jit(self):
        @jax.jit
        def invert(orientation):
            return orientation.inverse()

        orientation = Orientation(_rotation(), "inertial", "body")
        assert invert(orientation) == orientation.inverse()
