"""Look-direction rig driven by the cursor mapper.

The rig keeps its own orientation, separate from the body. Each render frame
the cursor's normalized pitch/roll vector turns the rig; the flight loop then
reads the rig's forward and up as the desired look direction.

Typical usage example:
    rig = LookDirectionRig(rotation_speed=100.0)
    rig.align_to(body.get_state().orientation)

    # Each frame
    pitch, roll = cursor.get_control_vector()
    rig.apply_input(pitch, roll, dt, boosted=limiter.is_limiter_disabled())
"""

from aerotrack.physics.flight_model.base import ITargetDirectionProvider
from aerotrack.physics.quaternion import Quaternion
from aerotrack.physics.vectors import Vector3

DEFAULT_ROTATION_SPEED = 100.0
DEFAULT_AOA_ROTATION_MULTIPLIER = 2.0


class LookDirectionRig(ITargetDirectionProvider):
    """Pointer-steered orientation exposed as a target direction.

    Positive pitch raises the nose, positive roll rolls right.

    Attributes:
        rotation_speed: Turn rate at full deflection (deg/s).
        aoa_rotation_multiplier: Turn rate boost while the AoA limiter is
            disabled.
    """

    def __init__(
        self,
        rotation_speed: float = DEFAULT_ROTATION_SPEED,
        aoa_rotation_multiplier: float = DEFAULT_AOA_ROTATION_MULTIPLIER,
    ) -> None:
        self.rotation_speed = rotation_speed
        self.aoa_rotation_multiplier = aoa_rotation_multiplier
        self._orientation: Quaternion | None = None

    @property
    def is_aligned(self) -> bool:
        return self._orientation is not None

    @property
    def orientation(self) -> Quaternion | None:
        return self._orientation

    def align_to(self, orientation: Quaternion) -> None:
        """Snap the rig to an orientation, typically the body's at spawn."""
        self._orientation = orientation.normalized()

    def apply_input(self, pitch: float, roll: float, dt: float, boosted: bool = False) -> None:
        """Turn the rig by one frame of pointer input.

        Args:
            pitch: Normalized pitch command in [-1, 1] (positive = nose up).
            roll: Normalized roll command in [-1, 1] (positive = roll right).
            dt: Frame time in seconds.
            boosted: Apply the AoA rotation multiplier.
        """
        if self._orientation is None or dt <= 0.0:
            return
        if pitch == 0.0 and roll == 0.0:
            return

        speed = self.rotation_speed * (self.aoa_rotation_multiplier if boosted else 1.0)
        current = self._orientation

        # Rotations are in the rig's own frame: pitch about right, then roll about forward
        pitch_turn = Quaternion.from_axis_angle(Vector3.right(), -pitch * speed * dt)
        roll_turn = Quaternion.from_axis_angle(Vector3.forward(), -roll * speed * dt)
        self._orientation = (current * pitch_turn * roll_turn).normalized()

    def get_look_direction(self) -> tuple[Vector3, Vector3] | None:
        if self._orientation is None:
            return None
        return self._orientation.forward(), self._orientation.up()
