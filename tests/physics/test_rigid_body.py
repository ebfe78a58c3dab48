"""Tests for the reference rigid-body integrator."""

import pytest

from aerotrack.physics.flight_model.base import BodyState
from aerotrack.physics.quaternion import Quaternion
from aerotrack.physics.rigid_body import GRAVITY, RigidBodyIntegrator
from aerotrack.physics.vectors import Vector3


class TestLinearIntegration:
    """Test force and gravity integration."""

    def test_gravity_accelerates_downward(self) -> None:
        """Test a body at rest starts falling."""
        body = RigidBodyIntegrator(BodyState(position=Vector3(0.0, 100.0, 0.0)))
        state = body.step(0.1)
        assert state.linear_velocity.y == pytest.approx(-GRAVITY * 0.1)
        assert state.position.y < 100.0

    def test_zero_gravity_keeps_velocity(self) -> None:
        """Test a coasting body with gravity disabled keeps its velocity."""
        state = BodyState(linear_velocity=Vector3(0.0, 0.0, 80.0))
        body = RigidBodyIntegrator(state, gravity=0.0)
        body.step(0.5)
        assert state.linear_velocity == Vector3(0.0, 0.0, 80.0)
        assert state.position.z == pytest.approx(40.0)

    def test_force_divided_by_mass(self) -> None:
        """Test acceleration = F / m."""
        body = RigidBodyIntegrator(BodyState(mass=10.0), gravity=0.0)
        body.add_force(Vector3(0.0, 0.0, 100.0))
        state = body.step(1.0)
        assert state.linear_velocity.z == pytest.approx(10.0)

    def test_forces_accumulate(self) -> None:
        """Test several forces sum before a step."""
        body = RigidBodyIntegrator(BodyState(), gravity=0.0)
        body.add_force(Vector3(1.0, 0.0, 0.0))
        body.add_force(Vector3(2.0, 3.0, 0.0))
        assert body.get_pending_force() == Vector3(3.0, 3.0, 0.0)

    def test_step_clears_accumulators(self) -> None:
        """Test step resets pending force and torque."""
        body = RigidBodyIntegrator(BodyState(), gravity=0.0)
        body.add_force(Vector3(1.0, 0.0, 0.0))
        body.add_torque(Vector3(0.0, 5.0, 0.0))
        body.step(0.02)
        assert body.get_pending_force() == Vector3.zero()
        assert body.get_pending_torque() == Vector3.zero()

    def test_non_positive_step_only_clears(self) -> None:
        """Test dt <= 0 does not move the body."""
        body = RigidBodyIntegrator(BodyState(linear_velocity=Vector3(0.0, 0.0, 10.0)))
        body.add_force(Vector3(0.0, 0.0, 1000.0))
        state = body.step(0.0)
        assert state.position == Vector3.zero()
        assert body.get_pending_force() == Vector3.zero()
        assert body.get_step_count() == 0


class TestAngularIntegration:
    """Test orientation handling."""

    def test_set_orientation_normalizes(self) -> None:
        """Test kinematic orientation is stored as a unit quaternion."""
        body = RigidBodyIntegrator(BodyState())
        body.set_orientation(Quaternion(2.0, 0.0, 0.0, 0.0))
        assert body.get_state().orientation.norm() == pytest.approx(1.0)

    def test_torque_about_right_pitches_nose_down(self) -> None:
        """Test a positive angular acceleration about right lowers the nose."""
        body = RigidBodyIntegrator(BodyState(), gravity=0.0)
        body.add_torque(Vector3(10.0, 0.0, 0.0))
        state = body.step(0.1)
        assert body.get_angular_velocity().x == pytest.approx(1.0 * 0.95)
        assert state.forward().y < 0.0

    def test_angular_velocity_is_damped(self) -> None:
        """Test angular velocity decays without torque."""
        body = RigidBodyIntegrator(BodyState(), gravity=0.0, angular_damping=0.5)
        body.add_torque(Vector3(0.0, 100.0, 0.0))
        body.step(0.1)
        first = body.get_angular_velocity().y
        body.step(0.1)
        assert body.get_angular_velocity().y == pytest.approx(first * 0.95)

    def test_orientation_stays_unit_length(self) -> None:
        """Test many steps keep the quaternion normalized."""
        body = RigidBodyIntegrator(BodyState(), gravity=0.0, angular_damping=0.0)
        body.add_torque(Vector3(30.0, 45.0, -20.0))
        for _ in range(500):
            body.step(0.02)
        assert body.get_state().orientation.norm() == pytest.approx(1.0)

    def test_step_count(self) -> None:
        """Test the step counter."""
        body = RigidBodyIntegrator(BodyState())
        for _ in range(3):
            body.step(0.02)
        assert body.get_step_count() == 3
