"""Attitude tracking controllers.

Both controllers steer the body toward a desired look direction. They share
the same target construction:

1. Stall intensity ``s = (1 - speed / stall_speed)^2`` below stall speed.
2. Roll error toward the input frame's up, blended with the error toward
   the world horizon by ``world_level_blend``.
3. While stalling, pitch/yaw/roll authority is attenuated and the aim is
   pulled toward a forced nose-down attitude, measured from the horizon
   along the current heading, that deepens the longer the stall lasts.

``AttitudeController`` then rotates the orientation toward the target by a
bounded angle each tick. ``PDAttitudeController`` instead returns an angular
acceleration command for the integrator.

Sign conventions (body frame, right-handed): a positive rotation about body
right pitches the nose down, a positive rotation about body up yaws the nose
right, and a positive rotation about body forward rolls left.
"""

import math
from dataclasses import dataclass

from aerotrack.aircraft.profile import AerodynamicProfile
from aerotrack.physics.quaternion import Quaternion
from aerotrack.physics.vectors import Vector3

# Attenuation of each axis at full stall intensity
STALL_PITCH_ATTENUATION = 0.9
STALL_YAW_ATTENUATION = 0.95
STALL_ROLL_ATTENUATION = 0.9

# Forced nose-down angle grows from MIN to MAX over RAMP seconds of stall
STALL_PITCH_DOWN_MIN = 45.0
STALL_PITCH_DOWN_MAX = 80.0
STALL_PITCH_DOWN_RAMP = 3.0


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def _lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def stall_intensity(speed: float, stall_speed: float) -> float:
    """Stall intensity in [0, 1]: 0 at or above stall speed, 1 when stopped.

    Examples:
        >>> stall_intensity(25.0, 50.0)
        0.25
    """
    if stall_speed <= 0.0 or speed >= stall_speed:
        return 0.0
    deficit = _clamp01(1.0 - speed / stall_speed)
    return deficit * deficit


def roll_error(orientation: Quaternion, up_reference: Vector3) -> float:
    """Signed roll (degrees about body forward) that brings body up toward ``up_reference``.

    Measured in the body right/up plane; positive rolls left.
    """
    local = orientation.inverse_rotate(up_reference)
    if abs(local.x) < 1e-12 and abs(local.y) < 1e-12:
        return 0.0
    return math.degrees(math.atan2(-local.x, local.y))


def pitch_yaw_error(orientation: Quaternion, target_forward: Vector3) -> tuple[float, float]:
    """Split the shortest-arc turn to ``target_forward`` into body pitch and yaw.

    Returns:
        (pitch, yaw) in degrees; pitch about body right (positive nose down),
        yaw about body up (positive nose right).
    """
    turn = Quaternion.from_to_rotation(orientation.forward(), target_forward)
    angle, axis = turn.to_angle_axis()
    if angle == 0.0:
        return 0.0, 0.0
    local_axis = orientation.inverse_rotate(axis)
    return local_axis.x * angle, local_axis.y * angle


def stall_aim(orientation: Quaternion, pitch_down: float) -> Vector3:
    """Direction ``pitch_down`` degrees below the horizon along the current heading.

    The heading is the body forward projected on the horizontal plane. With
    the nose vertical, body up lies along the heading instead.
    """
    world_up = Vector3.up()
    forward = orientation.forward()
    heading = forward.project_on_plane(world_up)
    if heading.magnitude() < 1e-6:
        sign = 1.0 if forward.y < 0.0 else -1.0
        heading = orientation.up().project_on_plane(world_up) * sign
    heading = heading.normalized_or(Vector3.forward())
    angle = math.radians(pitch_down)
    return heading * math.cos(angle) - world_up * math.sin(angle)


@dataclass
class AttitudeTarget:
    """Target frame computed for one tick.

    Attributes:
        orientation: Orientation to steer toward.
        pitch_error: Pitch error after stall shaping (degrees).
        yaw_error: Yaw error after stall shaping (degrees).
        roll_error: Blended roll error after stall shaping (degrees).
        max_delta: Largest rotation allowed this tick (degrees).
    """

    orientation: Quaternion
    pitch_error: float
    yaw_error: float
    roll_error: float
    max_delta: float


class AttitudeController:
    """Rate-limited kinematic attitude controller.

    Each tick the orientation moves toward the target by at most
    ``max(pitch_rate, roll_rate) * multiplier * dt`` degrees along the
    shortest arc, where ``multiplier`` is the profile's AoA rate multiplier
    while the limiter is disabled and 1 otherwise.

    Attributes:
        profile: Aircraft tuning.
        stall_intensity: Intensity computed on the last update, in [0, 1].
        stall_duration: Seconds spent continuously below stall speed.

    Examples:
        >>> controller = AttitudeController(AerodynamicProfile())
        >>> new = controller.update(orientation, target_fwd, target_up, speed=80.0,
        ...                         limiter_disabled=False, dt=0.02)
    """

    def __init__(self, profile: AerodynamicProfile) -> None:
        self.profile = profile
        self.stall_intensity = 0.0
        self.stall_duration = 0.0
        self.last_target: AttitudeTarget | None = None

    def reset(self) -> None:
        self.stall_intensity = 0.0
        self.stall_duration = 0.0
        self.last_target = None

    def update_stall(self, speed: float, dt: float) -> None:
        """Advance the stall intensity and timer without steering."""
        intensity = stall_intensity(speed, self.profile.stall_speed)
        if intensity > 0.0:
            self.stall_duration += dt
        else:
            self.stall_duration = 0.0
        self.stall_intensity = intensity

    def max_delta(self, limiter_disabled: bool, dt: float) -> float:
        """Largest rotation allowed in one tick (degrees)."""
        multiplier = self.profile.aoa_rate_multiplier if limiter_disabled else 1.0
        return self.profile.max_rotation_rate * multiplier * dt

    def compute_target(
        self,
        orientation: Quaternion,
        target_forward: Vector3,
        target_up: Vector3 | None,
        speed: float,
        limiter_disabled: bool,
        dt: float,
    ) -> AttitudeTarget:
        """Build this tick's target frame and update the stall state.

        Args:
            orientation: Current body orientation.
            target_forward: Desired forward (need not be unit length).
            target_up: Desired up hint; world up if None.
            speed: Current airspeed.
            limiter_disabled: Whether the AoA limiter is disabled.
            dt: Tick length in seconds.

        Returns:
            Target orientation and the shaped errors.
        """
        profile = self.profile
        self.update_stall(speed, dt)
        s = self.stall_intensity

        body_forward = orientation.forward()
        aim = target_forward.normalized_or(body_forward)
        hint = target_up.normalized_or(Vector3.up()) if target_up is not None else Vector3.up()

        pitch, yaw = pitch_yaw_error(orientation, aim)
        roll = _lerp(
            roll_error(orientation, hint),
            roll_error(orientation, Vector3.up()),
            profile.world_level_blend,
        )

        if s > 0.0:
            pitch *= 1.0 - s * STALL_PITCH_ATTENUATION
            yaw *= 1.0 - s * STALL_YAW_ATTENUATION
            roll *= 1.0 - s * STALL_ROLL_ATTENUATION

            steer = Quaternion.from_axis_angle(orientation.up(), yaw) * Quaternion.from_axis_angle(
                orientation.right(), pitch
            )
            commanded = steer.rotate(body_forward).normalized_or(body_forward)

            pitch_down = _lerp(
                STALL_PITCH_DOWN_MIN,
                STALL_PITCH_DOWN_MAX,
                _clamp01(self.stall_duration / STALL_PITCH_DOWN_RAMP),
            ) * s
            forced = stall_aim(orientation, pitch_down)

            aim = commanded.lerp(forced, s).normalized_or(forced)
            pitch = _lerp(pitch, pitch_yaw_error(orientation, forced)[0], s)

        rolled_up = Quaternion.from_axis_angle(body_forward, roll).rotate(orientation.up())
        target = AttitudeTarget(
            orientation=Quaternion.look_rotation(aim, rolled_up),
            pitch_error=pitch,
            yaw_error=yaw,
            roll_error=roll,
            max_delta=self.max_delta(limiter_disabled, dt),
        )
        self.last_target = target
        return target

    def update(
        self,
        orientation: Quaternion,
        target_forward: Vector3,
        target_up: Vector3 | None,
        speed: float,
        limiter_disabled: bool,
        dt: float,
    ) -> Quaternion:
        """Compute the new orientation for this tick.

        Returns:
            Unit orientation no more than ``max_delta`` degrees from
            ``orientation``.
        """
        target = self.compute_target(
            orientation, target_forward, target_up, speed, limiter_disabled, dt
        )
        return orientation.rotate_towards(target.orientation, target.max_delta).normalized()


class PDAttitudeController(AttitudeController):
    """Torque-driven variant using the profile's PD gains.

    Produces ``P * error - D * angular_velocity`` in deg/s^2, where ``error``
    is the world-space rotation axis toward the target scaled by its angle.
    The command magnitude is clamped to ``max_rotation_rate * multiplier * P``.
    """

    def command(
        self,
        orientation: Quaternion,
        target_forward: Vector3,
        target_up: Vector3 | None,
        speed: float,
        limiter_disabled: bool,
        angular_velocity: Vector3,
        dt: float,
    ) -> Vector3:
        """Compute the angular acceleration command for this tick.

        Args:
            angular_velocity: Current world-space angular velocity (deg/s).

        Returns:
            World-space angular acceleration (deg/s^2).
        """
        profile = self.profile
        target = self.compute_target(
            orientation, target_forward, target_up, speed, limiter_disabled, dt
        )

        delta = target.orientation * orientation.inverse()
        angle, axis = delta.to_angle_axis()
        error = axis * angle if angle > 0.0 else Vector3.zero()

        torque = error * profile.rotation_gain_p - angular_velocity * profile.rotation_gain_d

        multiplier = profile.aoa_rate_multiplier if limiter_disabled else 1.0
        limit = profile.max_rotation_rate * multiplier * profile.rotation_gain_p
        magnitude = torque.magnitude()
        if magnitude > limit > 0.0:
            torque = torque * (limit / magnitude)
        elif limit <= 0.0:
            torque = Vector3.zero()
        return torque
