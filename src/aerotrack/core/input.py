"""Keyboard and mouse input for the flight loop.

This module turns pygame events into the inputs the simulator needs:
a smoothed throttle, the AoA-limiter override (held key or mouse button),
accumulated relative pointer motion for the virtual cursor, and discrete
actions such as pause and quit.

Typical usage example:
    from aerotrack.core.input import InputManager, InputConfig

    input_manager = InputManager(InputConfig.from_dict(config.get_section("input")))

    # In game loop
    input_manager.process_events(pygame.event.get())
    input_manager.update(dt)
    delta = input_manager.consume_pointer_delta()
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import pygame  # pylint: disable=no-member

from aerotrack.core.config import ConfigError
from aerotrack.physics.flight_model.base import IControlInputSource
from aerotrack.physics.vectors import Vector2

logger = logging.getLogger(__name__)

# Throttle slews toward its target at this rate (units per second)
THROTTLE_RATE = 2.0

RIGHT_MOUSE_BUTTON = 3


class InputAction(Enum):
    """Logical inputs that can be bound to keys."""

    THROTTLE_INCREASE = "throttle_increase"
    THROTTLE_DECREASE = "throttle_decrease"
    THROTTLE_FULL = "throttle_full"
    THROTTLE_IDLE = "throttle_idle"
    AOA_OVERRIDE = "aoa_override"  # Hold to disable the AoA limiter
    RECENTER_CURSOR = "recenter_cursor"
    PAUSE = "pause"
    QUIT = "quit"


def _default_bindings() -> dict[int, InputAction]:
    return {
        pygame.K_w: InputAction.THROTTLE_INCREASE,
        pygame.K_s: InputAction.THROTTLE_DECREASE,
        pygame.K_PAGEUP: InputAction.THROTTLE_FULL,
        pygame.K_PAGEDOWN: InputAction.THROTTLE_IDLE,
        pygame.K_LSHIFT: InputAction.AOA_OVERRIDE,
        pygame.K_c: InputAction.RECENTER_CURSOR,
        pygame.K_SPACE: InputAction.PAUSE,
        pygame.K_ESCAPE: InputAction.QUIT,
    }


@dataclass
class InputConfig:
    """Input configuration.

    Attributes:
        keyboard_bindings: Map of pygame key constants to actions.
        throttle_increment: Throttle change per increase/decrease press.
        initial_throttle: Throttle at startup.
        aoa_mouse_button: Mouse button that also holds the AoA override
            (None to disable).
    """

    keyboard_bindings: dict[int, InputAction] = field(default_factory=_default_bindings)
    throttle_increment: float = 0.05
    initial_throttle: float = 0.5
    aoa_mouse_button: int | None = RIGHT_MOUSE_BUTTON

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "InputConfig":
        """Build from an ``input:`` settings section.

        Bindings are given as ``action: key name`` pairs (pygame key names,
        e.g. ``"left shift"``) and replace the default binding of that action.

        Raises:
            ConfigError: On unknown actions or key names.
        """
        data = data or {}
        config = cls(
            throttle_increment=float(data.get("throttle_increment", 0.05)),
            initial_throttle=max(0.0, min(1.0, float(data.get("initial_throttle", 0.5)))),
            aoa_mouse_button=data.get("aoa_mouse_button", RIGHT_MOUSE_BUTTON),
        )

        for action_name, key_name in (data.get("bindings") or {}).items():
            try:
                action = InputAction(action_name)
            except ValueError as e:
                raise ConfigError(f"Unknown input action: {action_name}") from e
            try:
                key = pygame.key.key_code(str(key_name))
            except ValueError as e:
                raise ConfigError(f"Unknown key name for {action_name}: {key_name}") from e

            config.keyboard_bindings = {
                k: a for k, a in config.keyboard_bindings.items() if a != action
            }
            config.keyboard_bindings[key] = action

        return config


@dataclass
class InputState:
    """Processed input state.

    Attributes:
        throttle: Smoothed throttle (0.0 to 1.0).
        aoa_held: Whether the AoA override is held by key or mouse button.
    """

    throttle: float = 0.0
    aoa_held: bool = False


class InputManager(IControlInputSource):  # pylint: disable=too-many-instance-attributes
    """Manages keyboard and mouse input.

    Examples:
        >>> manager = InputManager()
        >>> manager.process_events(pygame.event.get())
        >>> manager.update(dt)
        >>> manager.get_throttle()
        0.5
    """

    def __init__(self, config: InputConfig | None = None) -> None:
        self.config = config if config is not None else InputConfig()
        self.state = InputState(throttle=self.config.initial_throttle)

        self._keys_pressed: set[int] = set()
        self._mouse_buttons: set[int] = set()
        self._actions_just_pressed: set[InputAction] = set()
        self._pointer_delta = Vector2.zero()
        self._target_throttle = self.config.initial_throttle
        self._quit_requested = False

        # Held throttle keys repeat through pygame key repeat; others are one-shot
        self._repeatable_actions = {InputAction.THROTTLE_INCREASE, InputAction.THROTTLE_DECREASE}

        logger.info(
            "Input manager initialized with %d key bindings", len(self.config.keyboard_bindings)
        )

    def process_events(self, events: list[pygame.event.Event]) -> None:
        """Consume one frame of pygame events."""
        self._actions_just_pressed.clear()

        for event in events:
            if event.type == pygame.KEYDOWN:
                self._handle_key_down(event.key)
            elif event.type == pygame.KEYUP:
                self._keys_pressed.discard(event.key)
            elif event.type == pygame.MOUSEBUTTONDOWN:
                self._mouse_buttons.add(event.button)
            elif event.type == pygame.MOUSEBUTTONUP:
                self._mouse_buttons.discard(event.button)
            elif event.type == pygame.MOUSEMOTION:
                dx, dy = event.rel
                self._pointer_delta = self._pointer_delta + Vector2(float(dx), float(dy))
            elif event.type == pygame.WINDOWFOCUSLOST:
                self.release_all()
            elif event.type == pygame.QUIT:
                self._quit_requested = True

    def release_all(self) -> None:
        """Forget held keys, held buttons and pending pointer motion.

        Release events never arrive for keys let go while the window is
        unfocused.
        """
        self._keys_pressed.clear()
        self._mouse_buttons.clear()
        self._pointer_delta = Vector2.zero()
        self.state.aoa_held = False
        logger.info("Window focus lost, releasing held inputs")

    def _handle_key_down(self, key: int) -> None:
        is_repeat = key in self._keys_pressed
        self._keys_pressed.add(key)

        action = self.config.keyboard_bindings.get(key)
        if action is None:
            return
        if is_repeat and action not in self._repeatable_actions:
            return

        self._actions_just_pressed.add(action)

        if action == InputAction.QUIT:
            self._quit_requested = True
        elif action == InputAction.THROTTLE_INCREASE:
            self._set_target_throttle(self._target_throttle + self.config.throttle_increment)
        elif action == InputAction.THROTTLE_DECREASE:
            self._set_target_throttle(self._target_throttle - self.config.throttle_increment)
        elif action == InputAction.THROTTLE_FULL:
            self._set_target_throttle(1.0)
        elif action == InputAction.THROTTLE_IDLE:
            self._set_target_throttle(0.0)

    def _set_target_throttle(self, value: float) -> None:
        self._target_throttle = max(0.0, min(1.0, value))
        logger.debug("Throttle target %.2f", self._target_throttle)

    def update(self, dt: float) -> None:
        """Slew the throttle and refresh held inputs. Call once per frame."""
        delta = self._target_throttle - self.state.throttle
        if abs(delta) > 0.001:
            max_change = THROTTLE_RATE * dt
            self.state.throttle += max(-max_change, min(max_change, delta))
        self.state.throttle = max(0.0, min(1.0, self.state.throttle))

        held = self.is_action_pressed(InputAction.AOA_OVERRIDE)
        if self.config.aoa_mouse_button is not None:
            held = held or self.config.aoa_mouse_button in self._mouse_buttons
        self.state.aoa_held = held

    def consume_pointer_delta(self) -> Vector2:
        """Return pointer motion accumulated since the last call and reset it."""
        delta = self._pointer_delta
        self._pointer_delta = Vector2.zero()
        return delta

    def get_state(self) -> InputState:
        return self.state

    def get_throttle(self) -> float | None:
        return self.state.throttle

    def is_aoa_held(self) -> bool:
        return self.state.aoa_held

    def is_quit_requested(self) -> bool:
        return self._quit_requested

    def is_action_pressed(self, action: InputAction) -> bool:
        """Check if any key bound to ``action`` is held."""
        return any(
            bound == action and key in self._keys_pressed
            for key, bound in self.config.keyboard_bindings.items()
        )

    def is_action_just_pressed(self, action: InputAction) -> bool:
        """Check if ``action`` was triggered during the last ``process_events``."""
        return action in self._actions_just_pressed
