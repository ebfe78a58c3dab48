"""Reference rigid-body integrator.

A minimal ``IRigidBody`` used by the application and tests. It applies
gravity, integrates linear motion with semi-implicit Euler and turns
accumulated angular accelerations into a damped angular velocity. There is
no collision or constraint handling.

Typical usage example:
    from aerotrack.physics.rigid_body import RigidBodyIntegrator

    body = RigidBodyIntegrator(BodyState.spawn(Vector3(0.0, 1000.0, 0.0), mass=8500.0))
    body.add_force(thrust)
    state = body.step(0.02)
"""

from aerotrack.physics.flight_model.base import BodyState, IRigidBody
from aerotrack.physics.quaternion import Quaternion
from aerotrack.physics.vectors import Vector3

GRAVITY = 9.81

# Fraction of angular velocity lost per second
DEFAULT_ANGULAR_DAMPING = 0.5


class RigidBodyIntegrator(IRigidBody):
    """Point-mass integrator with kinematic or torque-driven orientation.

    Forces and torques accumulate between steps and are cleared by ``step``.

    Attributes:
        gravity: Downward acceleration (m/s^2). Zero disables gravity.
        angular_damping: Angular velocity decay per second, in [0, 1].
    """

    def __init__(
        self,
        state: BodyState,
        gravity: float = GRAVITY,
        angular_damping: float = DEFAULT_ANGULAR_DAMPING,
    ) -> None:
        self.state = state
        self.gravity = gravity
        self.angular_damping = angular_damping
        self.state.orientation = self.state.orientation.normalized()

        self._angular_velocity = Vector3.zero()
        self._force_accumulator = Vector3.zero()
        self._torque_accumulator = Vector3.zero()
        self._steps = 0

    def get_state(self) -> BodyState:
        return self.state

    def get_angular_velocity(self) -> Vector3:
        return self._angular_velocity

    def add_force(self, force: Vector3) -> None:
        self._force_accumulator = self._force_accumulator + force

    def add_torque(self, torque: Vector3) -> None:
        self._torque_accumulator = self._torque_accumulator + torque

    def set_orientation(self, orientation: Quaternion) -> None:
        self.state.orientation = orientation.normalized()

    def get_pending_force(self) -> Vector3:
        """Force accumulated since the last step."""
        return self._force_accumulator

    def get_pending_torque(self) -> Vector3:
        """Angular acceleration accumulated since the last step (deg/s^2)."""
        return self._torque_accumulator

    def get_step_count(self) -> int:
        return self._steps

    def step(self, dt: float) -> BodyState:
        """Integrate one time step.

        Args:
            dt: Time step in seconds. Non-positive steps only clear the
                accumulators.

        Returns:
            Updated state (reference to internal state).
        """
        if dt > 0.0:
            self._integrate_linear(dt)
            self._integrate_angular(dt)
            self._steps += 1

        self._force_accumulator = Vector3.zero()
        self._torque_accumulator = Vector3.zero()
        return self.state

    def _integrate_linear(self, dt: float) -> None:
        state = self.state
        # a = F/m, plus gravity
        acceleration = self._force_accumulator / state.mass + Vector3(0.0, -self.gravity, 0.0)
        state.linear_velocity = state.linear_velocity + acceleration * dt
        state.position = state.position + state.linear_velocity * dt

    def _integrate_angular(self, dt: float) -> None:
        omega = self._angular_velocity + self._torque_accumulator * dt
        omega = omega * max(0.0, 1.0 - self.angular_damping * dt)
        self._angular_velocity = omega

        rate = omega.magnitude()
        if rate * dt <= 1e-9:
            return
        spin = Quaternion.from_axis_angle(omega, rate * dt)
        self.state.orientation = (spin * self.state.orientation).normalized()
