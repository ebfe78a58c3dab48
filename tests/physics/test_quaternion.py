"""Tests for Quaternion."""

import numpy as np
import pytest

from aerotrack.physics.quaternion import Quaternion
from aerotrack.physics.vectors import Vector3


def assert_vec_approx(actual: Vector3, expected: Vector3, abs_tol: float = 1e-9) -> None:
    assert actual.x == pytest.approx(expected.x, abs=abs_tol)
    assert actual.y == pytest.approx(expected.y, abs=abs_tol)
    assert actual.z == pytest.approx(expected.z, abs=abs_tol)


class TestQuaternionBasics:
    """Test construction and normalization."""

    def test_identity_leaves_vectors_unchanged(self) -> None:
        """Test identity rotation."""
        v = Vector3(1.0, 2.0, 3.0)
        assert_vec_approx(Quaternion.identity().rotate(v), v)

    def test_axes_of_identity(self) -> None:
        """Test identity body axes match world axes."""
        q = Quaternion.identity()
        assert_vec_approx(q.forward(), Vector3.forward())
        assert_vec_approx(q.up(), Vector3.up())
        assert_vec_approx(q.right(), Vector3.right())

    def test_normalized_has_unit_norm(self) -> None:
        """Test normalization."""
        assert Quaternion(2.0, 1.0, -1.0, 0.5).normalized().norm() == pytest.approx(1.0)

    def test_degenerate_normalizes_to_identity(self) -> None:
        """Test a zero quaternion falls back to identity."""
        assert Quaternion(0.0, 0.0, 0.0, 0.0).normalized() == Quaternion.identity()

    def test_zero_axis_gives_identity(self) -> None:
        """Test zero axis in from_axis_angle."""
        assert Quaternion.from_axis_angle(Vector3.zero(), 45.0) == Quaternion.identity()


class TestQuaternionRotation:
    """Test rotation sign conventions."""

    def test_yaw_about_up_turns_forward_right(self) -> None:
        """Test positive rotation about up swings forward toward +X."""
        q = Quaternion.from_axis_angle(Vector3.up(), 90.0)
        assert_vec_approx(q.rotate(Vector3.forward()), Vector3.right())

    def test_positive_rotation_about_right_pitches_nose_down(self) -> None:
        """Test positive rotation about right swings forward toward -Y."""
        q = Quaternion.from_axis_angle(Vector3.right(), 90.0)
        assert_vec_approx(q.forward(), Vector3(0.0, -1.0, 0.0))

    def test_positive_rotation_about_forward_rolls_left(self) -> None:
        """Test positive rotation about forward tilts up toward -X."""
        q = Quaternion.from_axis_angle(Vector3.forward(), 90.0)
        assert_vec_approx(q.up(), Vector3(-1.0, 0.0, 0.0))

    def test_inverse_rotate_undoes_rotate(self) -> None:
        """Test world-to-body is the inverse of body-to-world."""
        q = Quaternion.from_axis_angle(Vector3(1.0, 2.0, 3.0), 37.0)
        v = Vector3(-4.0, 0.5, 2.0)
        assert_vec_approx(q.inverse_rotate(q.rotate(v)), v)

    def test_composition_order(self) -> None:
        """Test (a * b).rotate(v) == a.rotate(b.rotate(v))."""
        a = Quaternion.from_axis_angle(Vector3.up(), 30.0)
        b = Quaternion.from_axis_angle(Vector3.right(), 50.0)
        v = Vector3(0.3, -0.2, 1.0)
        assert_vec_approx((a * b).rotate(v), a.rotate(b.rotate(v)))


class TestFromToRotation:
    """Test shortest-arc rotation."""

    def test_maps_from_onto_to(self) -> None:
        """Test the rotation maps one direction onto the other."""
        a = Vector3(1.0, 1.0, 0.0)
        b = Vector3(0.0, 0.0, 2.0)
        q = Quaternion.from_to_rotation(a, b)
        assert_vec_approx(q.rotate(a.normalized()), b.normalized())

    def test_antiparallel_is_half_turn(self) -> None:
        """Test exactly opposite vectors give a valid 180 degree rotation."""
        q = Quaternion.from_to_rotation(Vector3.forward(), -Vector3.forward())
        angle, _ = q.to_angle_axis()
        assert angle == pytest.approx(180.0)
        assert_vec_approx(q.rotate(Vector3.forward()), -Vector3.forward())

    def test_parallel_is_identity(self) -> None:
        """Test identical vectors give no rotation."""
        q = Quaternion.from_to_rotation(Vector3.up(), Vector3.up())
        assert q.angle_to(Quaternion.identity()) == pytest.approx(0.0, abs=1e-4)


class TestLookRotation:
    """Test look rotation frames."""

    def test_forward_and_up_are_honored(self) -> None:
        """Test the resulting frame points along forward with up closest to the hint."""
        forward = Vector3(1.0, 0.0, 1.0)
        q = Quaternion.look_rotation(forward, Vector3.up())
        assert_vec_approx(q.forward(), forward.normalized())
        assert_vec_approx(q.up(), Vector3.up())

    def test_up_hint_is_orthogonalized(self) -> None:
        """Test a non-perpendicular hint still yields an orthonormal frame."""
        q = Quaternion.look_rotation(Vector3(0.0, 0.5, 1.0), Vector3.up())
        assert q.forward().dot(q.up()) == pytest.approx(0.0, abs=1e-9)
        assert q.up().y > 0.0

    def test_parallel_up_hint_falls_back(self) -> None:
        """Test looking straight up still produces a unit rotation."""
        q = Quaternion.look_rotation(Vector3.up(), Vector3.up())
        assert q.norm() == pytest.approx(1.0)
        assert_vec_approx(q.forward(), Vector3.up())

    def test_round_trip_through_matrix(self) -> None:
        """Test matrix conversion preserves the rotation."""
        q = Quaternion.from_axis_angle(Vector3(0.2, 1.0, -0.4), 123.0)
        basis = np.column_stack(
            (q.right().to_array(), q.up().to_array(), q.forward().to_array())
        )
        back = Quaternion.from_rotation_matrix(basis)
        assert back.angle_to(q) == pytest.approx(0.0, abs=1e-4)


class TestRotateTowards:
    """Test bounded rotation."""

    def test_step_is_bounded(self) -> None:
        """Test the step never exceeds max_degrees."""
        start = Quaternion.identity()
        target = Quaternion.from_axis_angle(Vector3.up(), 90.0)
        result = start.rotate_towards(target, 10.0)
        assert start.angle_to(result) == pytest.approx(10.0, abs=1e-6)

    def test_reaches_target_without_overshoot(self) -> None:
        """Test a large step lands exactly on the target."""
        target = Quaternion.from_axis_angle(Vector3.right(), 5.0)
        result = Quaternion.identity().rotate_towards(target, 45.0)
        assert result.angle_to(target) == pytest.approx(0.0, abs=1e-4)

    def test_opposite_target_is_bounded(self) -> None:
        """Test a half-turn target is approached by exactly the step size."""
        target = Quaternion.from_axis_angle(Vector3.up(), 180.0)
        result = Quaternion.identity().rotate_towards(target, 3.0)
        assert Quaternion.identity().angle_to(result) == pytest.approx(3.0, abs=1e-6)
        assert result.norm() == pytest.approx(1.0)

    def test_zero_step_keeps_orientation(self) -> None:
        """Test a non-positive step returns the current orientation."""
        start = Quaternion.from_axis_angle(Vector3.up(), 20.0)
        target = Quaternion.identity()
        assert start.rotate_towards(target, 0.0).angle_to(start) == pytest.approx(0.0, abs=1e-4)


class TestAngleAxis:
    """Test angle-axis decomposition."""

    def test_decomposition(self) -> None:
        """Test angle and axis are recovered."""
        q = Quaternion.from_axis_angle(Vector3(0.0, 0.0, 2.0), 60.0)
        angle, axis = q.to_angle_axis()
        assert angle == pytest.approx(60.0)
        assert_vec_approx(axis, Vector3.forward())

    def test_identity_reports_zero_angle(self) -> None:
        """Test identity decomposition."""
        angle, axis = Quaternion.identity().to_angle_axis()
        assert angle == 0.0
        assert axis.magnitude() == pytest.approx(1.0)

    def test_slerp_midpoint(self) -> None:
        """Test slerp halfway between two rotations."""
        target = Quaternion.from_axis_angle(Vector3.up(), 80.0)
        mid = Quaternion.identity().slerp(target, 0.5)
        assert Quaternion.identity().angle_to(mid) == pytest.approx(40.0, abs=1e-6)
