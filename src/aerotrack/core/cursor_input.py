"""Virtual cursor mapping from raw pointer motion to pitch/roll commands.

The real pointer is hidden and grabbed; its relative motion moves a virtual
cursor that always drifts back toward the screen center and never strays
further than half the larger screen dimension from it. The cursor's offset
from center, normalized by half the screen size, becomes a bounded pitch/roll
command with a small dead zone.

Screen coordinates follow pygame: y grows downward, so a cursor above the
center commands nose-up pitch.

Typical usage example:
    mapper = CursorInputMapper(CursorConfig.from_dict(config.get_section("cursor")))
    mapper.initialize(width, height)

    # Each frame
    pitch, roll = mapper.update(Vector2(dx, dy), dt)
"""

import logging
from dataclasses import dataclass, field, fields
from typing import Any

from aerotrack.core.config import ConfigError
from aerotrack.physics.vectors import Vector2

logger = logging.getLogger(__name__)

# Cursor snaps to center within this distance (pixels)
CENTER_SNAP_DISTANCE = 1.0

# Screen center must move further than this to count as a resize (pixels)
RESIZE_TOLERANCE = 1.0


@dataclass
class CursorConfig:
    """Virtual cursor tuning.

    Attributes:
        sensitivity: Multiplier applied to raw pointer deltas.
        input_threshold: Scaled deltas at or below this length are ignored.
        center_return_time: Seconds to drift from the edge (half the larger
            screen dimension) back to the center.
        confine: Keep the cursor inside the screen minus ``margin``.
        margin: Horizontal and vertical confinement margin (pixels).
        dead_zone: Normalized commands below this magnitude read as zero.
        warmup_ticks: Ticks after (re)initialization whose deltas are dropped.
    """

    sensitivity: float = 2.0
    input_threshold: float = 0.1
    center_return_time: float = 2.5
    confine: bool = False
    margin: tuple[float, float] = (10.0, 10.0)
    dead_zone: float = 0.03
    warmup_ticks: int = 3

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "CursorConfig":
        """Build from a ``cursor:`` settings section; missing keys use defaults.

        Raises:
            ConfigError: On unknown keys or invalid values.
        """
        data = dict(data or {})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown cursor settings: {', '.join(unknown)}")

        if "margin" in data:
            margin = data["margin"]
            if not isinstance(margin, (list, tuple)) or len(margin) != 2:
                raise ConfigError(f"cursor.margin must be a pair of numbers (got {margin!r})")
            data["margin"] = (float(margin[0]), float(margin[1]))

        config = cls(**data)
        if config.center_return_time <= 0.0:
            raise ConfigError("cursor.center_return_time must be positive")
        if config.sensitivity < 0.0 or config.input_threshold < 0.0 or config.dead_zone < 0.0:
            raise ConfigError(
                "cursor sensitivity, input_threshold and dead_zone must be non-negative"
            )
        if config.warmup_ticks < 0:
            raise ConfigError("cursor.warmup_ticks must be non-negative")
        return config


@dataclass
class CursorState:
    """Virtual cursor state in screen space.

    Attributes:
        position: Cursor position (pixels, y down).
        center: Screen center.
        last_delta: Scaled delta applied on the last update.
        has_active_input: Whether the last update carried pointer motion.
    """

    position: Vector2 = field(default_factory=Vector2.zero)
    center: Vector2 = field(default_factory=Vector2.zero)
    last_delta: Vector2 = field(default_factory=Vector2.zero)
    has_active_input: bool = False


class CursorInputMapper:
    """Maps relative pointer motion to a self-centering pitch/roll command.

    Examples:
        >>> mapper = CursorInputMapper(CursorConfig(warmup_ticks=0))
        >>> mapper.initialize(800, 600)
        >>> mapper.update(Vector2(0.0, -75.0), dt=0.0)
        (0.5, 0.0)
    """

    def __init__(self, config: CursorConfig | None = None) -> None:
        self.config = config or CursorConfig()
        self.state: CursorState | None = None
        self._width = 0.0
        self._height = 0.0
        self._warmup_remaining = 0
        self._command = (0.0, 0.0)

    @property
    def is_initialized(self) -> bool:
        return self.state is not None

    @property
    def max_radius(self) -> float:
        """Half the larger screen dimension."""
        return max(self._width, self._height) * 0.5

    def initialize(self, width: float, height: float) -> None:
        """Center the cursor on a screen of the given size and arm warm-up.

        Raises:
            ValueError: If either dimension is not positive.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Screen size must be positive (got {width}x{height})")

        self._width = float(width)
        self._height = float(height)
        center = Vector2(self._width * 0.5, self._height * 0.5)
        self.state = CursorState(position=Vector2(center.x, center.y), center=center)
        self._warmup_remaining = self.config.warmup_ticks
        self._command = (0.0, 0.0)
        logger.debug("Cursor initialized: center %s on %dx%d", center, width, height)

    def update(
        self, raw_delta: Vector2, dt: float, screen_size: tuple[float, float] | None = None
    ) -> tuple[float, float]:
        """Advance the cursor by one frame.

        Args:
            raw_delta: Relative pointer motion since the last frame (pixels).
            dt: Frame time in seconds.
            screen_size: Current (width, height). A changed center recenters
                the cursor and re-arms warm-up.

        Returns:
            (pitch, roll) command, each in [-1, 1] with the dead zone applied.
        """
        if screen_size is not None:
            self._check_resize(*screen_size)
        if self.state is None:
            return 0.0, 0.0

        state = self.state
        config = self.config

        if self._warmup_remaining > 0:
            self._warmup_remaining -= 1
            raw_delta = Vector2.zero()

        scaled = raw_delta * config.sensitivity
        state.has_active_input = scaled.magnitude() > config.input_threshold
        state.last_delta = scaled if state.has_active_input else Vector2.zero()
        if state.has_active_input:
            offset = (state.position + scaled - state.center).clamp_magnitude(self.max_radius)
            state.position = state.center + offset

        if dt > 0.0:
            return_speed = self.max_radius / config.center_return_time
            state.position = state.position.move_towards(state.center, return_speed * dt)
        if state.position.distance_to(state.center) < CENTER_SNAP_DISTANCE:
            state.position = Vector2(state.center.x, state.center.y)

        if config.confine:
            mx, my = config.margin
            state.position = Vector2(
                max(mx, min(self._width - mx, state.position.x)),
                max(my, min(self._height - my, state.position.y)),
            )

        self._command = self._compute_command()
        return self._command

    def _check_resize(self, width: float, height: float) -> None:
        if self.state is None:
            self.initialize(width, height)
            return
        center = Vector2(width * 0.5, height * 0.5)
        if center.distance_to(self.state.center) > RESIZE_TOLERANCE:
            logger.info("Screen size changed to %dx%d, recentering cursor", width, height)
            self.initialize(width, height)

    def _compute_command(self) -> tuple[float, float]:
        offset = self.get_normalized_offset().clamp_magnitude(1.0)
        pitch = -offset.y
        roll = offset.x
        dead_zone = self.config.dead_zone
        if abs(pitch) < dead_zone:
            pitch = 0.0
        if abs(roll) < dead_zone:
            roll = 0.0
        return pitch, roll

    def get_control_vector(self) -> tuple[float, float]:
        """(pitch, roll) command from the last update."""
        return self._command

    def get_cursor_position(self) -> Vector2:
        if self.state is None:
            return Vector2.zero()
        return Vector2(self.state.position.x, self.state.position.y)

    def get_normalized_offset(self) -> Vector2:
        """Offset from center divided by half the screen size (unclamped, no dead zone)."""
        if self.state is None:
            return Vector2.zero()
        offset = self.state.position - self.state.center
        return Vector2(offset.x / (self._width * 0.5), offset.y / (self._height * 0.5))

    def has_active_input(self) -> bool:
        return self.state is not None and self.state.has_active_input

    def is_near_center(self, threshold: float = 0.05) -> bool:
        return self.get_normalized_offset().magnitude() < threshold

    def reset_to_center(self) -> None:
        if self.state is None:
            return
        self.state.position = Vector2(self.state.center.x, self.state.center.y)
        self.state.has_active_input = False
        self._command = (0.0, 0.0)

    def rearm_warmup(self) -> None:
        """Recenter and drop the next few deltas, as after initialization."""
        self.reset_to_center()
        self._warmup_remaining = self.config.warmup_ticks
