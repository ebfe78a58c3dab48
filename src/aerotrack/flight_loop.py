"""Per-tick flight dynamics and attitude control orchestration.

``FlightLoop.fixed_update`` runs once per fixed physics step, in this order:

1. Sample throttle and the AoA override from the input source.
2. Advance the AoA limiter state machine.
3. Apply aerodynamic forces (thrust, drag, lift, induced drag).
4. Steer toward the look direction, if one is available.
5. Apply the AoA limiter correction.

The integrator is stepped by the caller afterwards. The flight loop is the
only component that mutates the body.

Typical usage example:
    flight = FlightLoop(body, profile, direction_provider=rig, input_source=inputs)

    flight.fixed_update(dt)
    body.step(dt)
    telemetry = flight.get_telemetry()
"""

from dataclasses import dataclass

from aerotrack.aircraft.profile import AerodynamicProfile
from aerotrack.control.aoa_limiter import AoALimiter, LimiterMode
from aerotrack.control.attitude import AttitudeController, PDAttitudeController
from aerotrack.core.logging_system import get_logger
from aerotrack.physics.flight_model.aerodynamics import AerodynamicModel
from aerotrack.physics.flight_model.base import (
    AerodynamicForces,
    ControlInputState,
    IControlInputSource,
    IRigidBody,
    ITargetDirectionProvider,
)

ATTITUDE_MODES = ("kinematic", "pd_torque")

# Debug telemetry roughly once per simulated second
DEBUG_LOG_INTERVAL = 1.0


@dataclass
class FlightTelemetry:
    """Read-only snapshot of the flight state.

    Attributes:
        current_aoa: Angle of attack (degrees).
        stall_intensity: Stall intensity in [0, 1].
        stall_duration: Seconds spent below stall speed.
        limiter_active: Whether the AoA limiter is active.
        limiter_mode: Limiter state.
        max_aoa: AoA ceiling currently in force (degrees).
        cooldown_remaining: Seconds of limiter cooldown left.
        speed: Airspeed.
        altitude: Altitude.
        throttle: Throttle applied on the last tick.
    """

    current_aoa: float = 0.0
    stall_intensity: float = 0.0
    stall_duration: float = 0.0
    limiter_active: bool = True
    limiter_mode: LimiterMode = LimiterMode.NORMAL
    max_aoa: float = 0.0
    cooldown_remaining: float = 0.0
    speed: float = 0.0
    altitude: float = 0.0
    throttle: float = 0.0


class FlightLoop:  # pylint: disable=too-many-instance-attributes
    """Runs aerodynamics, attitude control and the AoA limiter each tick.

    Args:
        body: Integrator owning the body state.
        profile: Aircraft tuning (validated).
        direction_provider: Source of the desired look direction. Without
            one, the body flies uncontrolled.
        input_source: Source of throttle and AoA override. Without one,
            throttle is zero and the override is released.
        attitude_mode: ``"kinematic"`` (orientation set directly) or
            ``"pd_torque"`` (angular acceleration commands).

    Raises:
        ValueError: If ``attitude_mode`` is unknown.
    """

    def __init__(
        self,
        body: IRigidBody,
        profile: AerodynamicProfile,
        direction_provider: ITargetDirectionProvider | None = None,
        input_source: IControlInputSource | None = None,
        attitude_mode: str = "kinematic",
    ) -> None:
        if attitude_mode not in ATTITUDE_MODES:
            raise ValueError(
                f"Unknown attitude mode '{attitude_mode}' (expected one of {ATTITUDE_MODES})"
            )

        self.body = body
        self.profile = profile
        self.direction_provider = direction_provider
        self.input_source = input_source
        self.attitude_mode = attitude_mode

        self.aerodynamics = AerodynamicModel(profile)
        self.limiter = AoALimiter(profile)
        self.attitude: AttitudeController
        if attitude_mode == "pd_torque":
            self.attitude = PDAttitudeController(profile)
        else:
            self.attitude = AttitudeController(profile)

        self.last_inputs = ControlInputState()
        self.last_forces = AerodynamicForces()
        self.last_correction = 0.0
        self.tick_count = 0
        self.simulated_time = 0.0
        self._next_debug_time = 0.0

        self._log = get_logger("flight_loop")
        self._log.info(
            "Flight loop ready: profile '%s', %s attitude mode", profile.name, attitude_mode
        )

    def sample_inputs(self) -> ControlInputState:
        """Read this tick's inputs, substituting safe values for missing sources."""
        throttle = None
        held = False
        if self.input_source is not None:
            throttle = self.input_source.get_throttle()
            held = self.input_source.is_aoa_held()

        forward = up = None
        if self.direction_provider is not None:
            look = self.direction_provider.get_look_direction()
            if look is not None:
                forward, up = look

        return ControlInputState(
            throttle=throttle if throttle is not None else 0.0,
            target_direction=forward,
            target_up_hint=up,
            aoa_held=held,
        )

    def fixed_update(self, dt: float) -> None:
        """Run one fixed physics tick. Never raises for in-range inputs."""
        if dt <= 0.0:
            return

        inputs = self.sample_inputs()
        self.last_inputs = inputs

        self.limiter.update(inputs.aoa_held, dt)

        state = self.body.get_state()
        forces = self.aerodynamics.compute(state, inputs.throttle)
        self.last_forces = forces
        self.body.add_force(forces.thrust)
        self.body.add_force(forces.drag)
        self.body.add_force(forces.lift)
        self.body.add_force(forces.induced_drag)

        if inputs.target_direction is not None:
            self._apply_attitude(inputs, forces.speed, dt)
        else:
            self.attitude.update_stall(forces.speed, dt)

        correction = self.limiter.correction(self.aerodynamics.current_aoa, forces.speed)
        self.last_correction = correction
        if correction != 0.0:
            self.body.add_torque(self.body.get_state().right() * correction)

        self.tick_count += 1
        self.simulated_time += dt
        if self.simulated_time >= self._next_debug_time:
            self._next_debug_time = self.simulated_time + DEBUG_LOG_INTERVAL
            self._log_debug_line()

    def _apply_attitude(self, inputs: ControlInputState, speed: float, dt: float) -> None:
        state = self.body.get_state()
        disabled = self.limiter.is_limiter_disabled()

        if isinstance(self.attitude, PDAttitudeController):
            command = self.attitude.command(
                state.orientation,
                inputs.target_direction,
                inputs.target_up_hint,
                speed,
                disabled,
                self.body.get_angular_velocity(),
                dt,
            )
            self.body.add_torque(command)
        else:
            orientation = self.attitude.update(
                state.orientation,
                inputs.target_direction,
                inputs.target_up_hint,
                speed,
                disabled,
                dt,
            )
            self.body.set_orientation(orientation)

    def _log_debug_line(self) -> None:
        telemetry = self.get_telemetry()
        target = self.attitude.last_target
        self._log.debug(
            "t=%.1fs speed=%.1f alt=%.0f aoa=%.1f stall=%.2f limiter=%s "
            "pitch_err=%.1f yaw_err=%.1f",
            self.simulated_time,
            telemetry.speed,
            telemetry.altitude,
            telemetry.current_aoa,
            telemetry.stall_intensity,
            telemetry.limiter_mode.value,
            target.pitch_error if target else 0.0,
            target.yaw_error if target else 0.0,
        )

    def get_telemetry(self) -> FlightTelemetry:
        state = self.body.get_state()
        return FlightTelemetry(
            current_aoa=self.aerodynamics.current_aoa,
            stall_intensity=self.attitude.stall_intensity,
            stall_duration=self.attitude.stall_duration,
            limiter_active=self.limiter.is_limiter_active(),
            limiter_mode=self.limiter.mode,
            max_aoa=self.limiter.current_max_aoa(),
            cooldown_remaining=self.limiter.cooldown_remaining,
            speed=state.speed,
            altitude=state.altitude,
            throttle=self.last_inputs.throttle,
        )
