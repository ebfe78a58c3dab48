"""Flight model data types and collaborator interfaces.

This module defines the state carried between physics ticks and the
interfaces the flight loop talks to: the rigid-body integrator that turns
forces into motion, the provider of the desired look direction, and the
source of throttle and AoA-hold input.

Typical usage example:
    from aerotrack.physics.flight_model.base import BodyState, IRigidBody

    class MyIntegrator(IRigidBody):
        def step(self, dt: float) -> BodyState:
            # Resolve accumulated forces into motion
            pass
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from aerotrack.physics.quaternion import Quaternion
from aerotrack.physics.vectors import Vector3

# Speed given to a freshly spawned body along its forward axis (m/s)
DEFAULT_SPAWN_SPEED = 80.0


@dataclass
class BodyState:
    """Physical state of the simulated body.

    Attributes:
        position: Position in world space (meters, Y is altitude).
        orientation: Body-to-world rotation. Always unit length.
        linear_velocity: Velocity in world space (m/s).
        mass: Mass (kg).
    """

    position: Vector3 = field(default_factory=Vector3.zero)
    orientation: Quaternion = field(default_factory=Quaternion.identity)
    linear_velocity: Vector3 = field(default_factory=Vector3.zero)
    mass: float = 1.0

    @classmethod
    def spawn(
        cls,
        position: Vector3,
        orientation: Quaternion | None = None,
        mass: float = 1.0,
        initial_speed: float = DEFAULT_SPAWN_SPEED,
    ) -> "BodyState":
        """Create a body already moving along its forward axis.

        Args:
            position: Spawn position.
            orientation: Spawn orientation (identity if None).
            mass: Body mass in kg.
            initial_speed: Seeded forward speed in m/s.

        Returns:
            New body state.

        Examples:
            >>> state = BodyState.spawn(Vector3(0.0, 1000.0, 0.0))
            >>> state.speed
            80.0
        """
        rotation = (orientation or Quaternion.identity()).normalized()
        return cls(
            position=position,
            orientation=rotation,
            linear_velocity=rotation.forward() * initial_speed,
            mass=mass,
        )

    @property
    def speed(self) -> float:
        """Airspeed (magnitude of velocity)."""
        return self.linear_velocity.magnitude()

    @property
    def altitude(self) -> float:
        """Altitude (Y component of position)."""
        return self.position.y

    def forward(self) -> Vector3:
        return self.orientation.forward()

    def up(self) -> Vector3:
        return self.orientation.up()

    def right(self) -> Vector3:
        return self.orientation.right()


@dataclass
class ControlInputState:
    """Inputs sampled once per physics tick.

    Attributes:
        throttle: Throttle position (0.0 = idle, 1.0 = full power).
        target_direction: Desired unit forward vector, or None when no
            look direction is available this tick.
        target_up_hint: Desired unit up vector used for roll framing.
        aoa_held: Whether the AoA-limiter disable input is held.
    """

    throttle: float = 0.0
    target_direction: Vector3 | None = None
    target_up_hint: Vector3 | None = None
    aoa_held: bool = False

    def __post_init__(self) -> None:
        """Clamp throttle to its valid range."""
        self.throttle = max(0.0, min(1.0, self.throttle))


@dataclass
class AerodynamicForces:
    """Forces produced by the aerodynamic model in one tick.

    All forces are world-space vectors in Newtons.

    Attributes:
        thrust: Engine thrust along the body forward axis.
        drag: Per-axis directional drag.
        lift: Lift along the body up axis.
        induced_drag: Lift-induced drag opposing velocity.
        aoa: Angle of attack used for this tick (degrees).
        speed: Airspeed used for this tick (m/s).
        altitude_efficiency: Thrust/lift derating factor in [0, 1].
    """

    thrust: Vector3 = field(default_factory=Vector3.zero)
    drag: Vector3 = field(default_factory=Vector3.zero)
    lift: Vector3 = field(default_factory=Vector3.zero)
    induced_drag: Vector3 = field(default_factory=Vector3.zero)
    aoa: float = 0.0
    speed: float = 0.0
    altitude_efficiency: float = 1.0

    def total(self) -> Vector3:
        """Sum of all force components."""
        return self.thrust + self.drag + self.lift + self.induced_drag


class IRigidBody(ABC):
    """Interface to the rigid-body integrator.

    The flight loop accumulates forces and torques and may set the
    orientation directly; ``step`` then resolves motion for the tick. Only
    the flight loop may call the mutating methods.

    Examples:
        >>> body.add_force(Vector3(0.0, 0.0, 50.0))
        >>> body.set_orientation(new_orientation)
        >>> state = body.step(dt=0.02)
    """

    @abstractmethod
    def get_state(self) -> BodyState:
        """Get the current body state.

        Returns:
            Current state (reference, do not modify directly).
        """

    @abstractmethod
    def get_angular_velocity(self) -> Vector3:
        """Get angular velocity in world space (degrees per second)."""

    @abstractmethod
    def add_force(self, force: Vector3) -> None:
        """Accumulate a world-space force (N) for the next step."""

    @abstractmethod
    def add_torque(self, torque: Vector3) -> None:
        """Accumulate an angular acceleration for the next step.

        Args:
            torque: World-space axis scaled by angular acceleration in
                degrees per second squared. Mass-independent.
        """

    @abstractmethod
    def set_orientation(self, orientation: Quaternion) -> None:
        """Set the orientation directly (kinematic, not force based)."""

    @abstractmethod
    def step(self, dt: float) -> BodyState:
        """Resolve accumulated forces and torques over ``dt`` seconds.

        Returns:
            Updated state.
        """


class ITargetDirectionProvider(ABC):
    """Source of the desired look direction (e.g. a look rig or camera)."""

    @abstractmethod
    def get_look_direction(self) -> tuple[Vector3, Vector3] | None:
        """Get the desired direction.

        Returns:
            (unit forward, unit up hint), or None if no direction is available.
        """


class IControlInputSource(ABC):
    """Source of throttle and AoA-hold input."""

    @abstractmethod
    def get_throttle(self) -> float | None:
        """Throttle in [0, 1], or None if no throttle input exists."""

    @abstractmethod
    def is_aoa_held(self) -> bool:
        """Whether the AoA-limiter disable input is currently held."""
