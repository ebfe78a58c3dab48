"""Attitude control: tracking controllers, AoA limiter and look-direction rig.

Typical usage:
    from aerotrack.control import AoALimiter, AttitudeController, LookDirectionRig

    limiter = AoALimiter(profile)
    controller = AttitudeController(profile)
"""

from aerotrack.control.aoa_limiter import AoALimiter, AoALimiterState, LimiterMode
from aerotrack.control.attitude import (
    AttitudeController,
    AttitudeTarget,
    PDAttitudeController,
    stall_intensity,
)
from aerotrack.control.look_direction import LookDirectionRig

__all__ = [
    "AoALimiter",
    "AoALimiterState",
    "AttitudeController",
    "AttitudeTarget",
    "LimiterMode",
    "LookDirectionRig",
    "PDAttitudeController",
    "stall_intensity",
]
