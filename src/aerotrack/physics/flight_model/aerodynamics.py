"""Aerodynamic force model.

Computes per-tick thrust, directional drag, lift and induced drag for a body
described by an ``AerodynamicProfile``. All returned forces are world-space
vectors in Newtons; the caller hands them to the integrator.

The model never raises in the tick path. Every interpolation factor is
clamped and every denominator guarded.

Typical usage example:
    from aerotrack.physics.flight_model.aerodynamics import AerodynamicModel

    model = AerodynamicModel(profile)
    forces = model.compute(body.get_state(), throttle=0.8)
    body.add_force(forces.total())
"""

import math

from aerotrack.aircraft.profile import AerodynamicProfile
from aerotrack.physics.flight_model.base import AerodynamicForces, BodyState
from aerotrack.physics.vectors import Vector3

# Below this airspeed AoA is undefined and only thrust applies
MIN_AERO_SPEED = 0.1

# Induced drag only above this airspeed
MIN_INDUCED_DRAG_SPEED = 1.0

# AoA lift curve breakpoints (degrees)
AOA_LIFT_RAMP_END = 15.0
AOA_LIFT_PLATEAU_END = 25.0
AOA_LIFT_ZERO = 40.0
AOA_LIFT_FLOOR = 0.2

# Vertical drag uses half the lateral coefficient
VERTICAL_DRAG_SCALE = 0.5

# Lift keeps a fraction of its strength when inverted
MIN_UP_ALIGNMENT = -0.5


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def altitude_efficiency(profile: AerodynamicProfile, altitude: float) -> float:
    """Thrust and lift derating factor for an altitude.

    1.0 up to ``altitude_effect_start``, falling linearly to 0.0 at
    ``max_altitude`` and staying there above it.

    Examples:
        >>> altitude_efficiency(AerodynamicProfile(), 11500.0)
        0.5
    """
    if altitude <= profile.altitude_effect_start:
        return 1.0
    span = profile.max_altitude - profile.altitude_effect_start
    if span <= 0.0:
        return 0.0
    return _clamp01(1.0 - (altitude - profile.altitude_effect_start) / span)


def lift_speed_factor(profile: AerodynamicProfile, speed: float) -> float:
    """Lift scaling with airspeed.

    0 at or below ``min_lift_speed``, quadratic up to ``stall_speed`` and 1
    above it. Equal speeds produce a step.
    """
    if speed > profile.stall_speed:
        return 1.0
    if speed <= profile.min_lift_speed:
        return 0.0
    span = profile.stall_speed - profile.min_lift_speed
    if span <= 0.0:
        return 1.0
    t = _clamp01((speed - profile.min_lift_speed) / span)
    return t * t


def aoa_lift_factor(aoa: float) -> float:
    """Lift curve as a function of angle of attack (degrees, sign ignored).

    Rises from 0.2 to 1.0 over [0, 15], holds 1.0 through 25, falls to 0.0
    at 40 and stays at zero beyond.

    Examples:
        >>> aoa_lift_factor(30.0)
        0.6666666666666667
    """
    a = abs(aoa)
    if a <= AOA_LIFT_RAMP_END:
        return AOA_LIFT_FLOOR + (a / AOA_LIFT_RAMP_END) * (1.0 - AOA_LIFT_FLOOR)
    if a <= AOA_LIFT_PLATEAU_END:
        return 1.0
    if a <= AOA_LIFT_ZERO:
        return _clamp01(1.0 - (a - AOA_LIFT_PLATEAU_END) / (AOA_LIFT_ZERO - AOA_LIFT_PLATEAU_END))
    return 0.0


def angle_of_attack(state: BodyState) -> float:
    """Angle of attack in degrees, or 0.0 when the body is (nearly) still.

    Positive when the velocity points above the nose, measured in the body
    up/forward plane.
    """
    if state.speed < MIN_AERO_SPEED:
        return 0.0
    local = state.orientation.inverse_rotate(state.linear_velocity)
    return math.degrees(math.atan2(local.y, local.z))


class AerodynamicModel:
    """Per-tick aerodynamic force computation for one profile.

    Attributes:
        profile: Tuning in use.
        current_aoa: AoA computed on the last ``compute`` call (degrees).

    Examples:
        >>> model = AerodynamicModel(AerodynamicProfile())
        >>> forces = model.compute(BodyState.spawn(Vector3(0.0, 500.0, 0.0)), throttle=1.0)
        >>> forces.thrust.z
        100.0
    """

    def __init__(self, profile: AerodynamicProfile) -> None:
        self.profile = profile
        self.current_aoa = 0.0

    def compute(self, state: BodyState, throttle: float) -> AerodynamicForces:
        """Compute the forces for the current state.

        Args:
            state: Body state at the start of the tick.
            throttle: Throttle position, clamped to [0, 1].

        Returns:
            World-space forces plus the AoA, speed and altitude efficiency
            they were computed from.
        """
        profile = self.profile
        throttle = _clamp01(throttle)
        efficiency = altitude_efficiency(profile, state.altitude)
        speed = state.speed
        forward = state.forward()

        forces = AerodynamicForces(
            thrust=forward * (throttle * profile.engine_power * efficiency),
            speed=speed,
            altitude_efficiency=efficiency,
        )

        if speed < MIN_AERO_SPEED:
            self.current_aoa = 0.0
            return forces

        aoa = angle_of_attack(state)
        self.current_aoa = aoa
        forces.aoa = aoa

        forces.drag = self._directional_drag(state)

        speed_factor = lift_speed_factor(profile, speed)
        if speed_factor > 0.0 and efficiency > 0.0:
            up = state.up()
            alignment = max(MIN_UP_ALIGNMENT, min(1.0, up.dot(Vector3.up())))
            base_lift = speed * speed * profile.lift_coeff * state.mass
            lift = base_lift * aoa_lift_factor(aoa) * speed_factor * alignment * efficiency
            forces.lift = up * lift

        if speed > MIN_INDUCED_DRAG_SPEED:
            ratio = abs(aoa) / AOA_LIFT_RAMP_END
            magnitude = speed * speed * profile.induced_drag_coeff * ratio * ratio * efficiency
            forces.induced_drag = state.linear_velocity * (-magnitude / speed)

        return forces

    def _directional_drag(self, state: BodyState) -> Vector3:
        """Quadratic drag per body axis, returned in world space."""
        profile = self.profile
        v = state.orientation.inverse_rotate(state.linear_velocity)
        local = Vector3(
            -v.x * abs(v.x) * profile.lateral_drag_coeff,
            -v.y * abs(v.y) * profile.lateral_drag_coeff * VERTICAL_DRAG_SCALE,
            -v.z * abs(v.z) * profile.forward_drag_coeff * state.mass,
        )
        return state.orientation.rotate(local)
