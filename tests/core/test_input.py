"""Tests for keyboard and mouse input management."""

import pygame
import pytest

from aerotrack.core.config import ConfigError
from aerotrack.core.input import InputAction, InputConfig, InputManager, InputState
from aerotrack.physics.vectors import Vector2


def key_down(key: int) -> pygame.event.Event:
    return pygame.event.Event(pygame.KEYDOWN, key=key)


def key_up(key: int) -> pygame.event.Event:
    return pygame.event.Event(pygame.KEYUP, key=key)


class TestInputAction:
    """Test InputAction enum."""

    def test_has_flight_controls(self) -> None:
        """Test flight control actions exist."""
        assert InputAction.THROTTLE_INCREASE.value == "throttle_increase"
        assert InputAction.AOA_OVERRIDE.value == "aoa_override"

    def test_has_system_controls(self) -> None:
        """Test system control actions exist."""
        assert InputAction.PAUSE.value == "pause"
        assert InputAction.QUIT.value == "quit"


class TestInputState:
    """Test InputState dataclass."""

    def test_default_state(self) -> None:
        """Test default input state."""
        state = InputState()
        assert state.throttle == 0.0
        assert not state.aoa_held


class TestInputConfig:
    """Test InputConfig dataclass."""

    def test_default_config(self) -> None:
        """Test default configuration."""
        config = InputConfig()
        assert config.keyboard_bindings[pygame.K_LSHIFT] == InputAction.AOA_OVERRIDE
        assert config.throttle_increment == 0.05
        assert config.initial_throttle == 0.5
        assert config.aoa_mouse_button == 3

    def test_from_dict_values(self) -> None:
        """Test settings values are read."""
        config = InputConfig.from_dict(
            {"throttle_increment": 0.1, "initial_throttle": 1.5, "aoa_mouse_button": None}
        )
        assert config.throttle_increment == 0.1
        assert config.initial_throttle == 1.0
        assert config.aoa_mouse_button is None

    def test_binding_replaces_default(self) -> None:
        """Test a configured binding replaces the action's default key."""
        config = InputConfig.from_dict({"bindings": {"aoa_override": "left ctrl"}})
        assert config.keyboard_bindings[pygame.K_LCTRL] == InputAction.AOA_OVERRIDE
        assert pygame.K_LSHIFT not in config.keyboard_bindings

    def test_unknown_action(self) -> None:
        """Test unknown actions are rejected."""
        with pytest.raises(ConfigError, match="barrel_roll"):
            InputConfig.from_dict({"bindings": {"barrel_roll": "r"}})

    def test_unknown_key_name(self) -> None:
        """Test unknown key names are rejected."""
        with pytest.raises(ConfigError, match="pause"):
            InputConfig.from_dict({"bindings": {"pause": "not a key"}})


class TestInputManager:
    """Test InputManager event handling."""

    @pytest.fixture
    def manager(self) -> InputManager:
        return InputManager(InputConfig())

    def test_initial_throttle(self, manager: InputManager) -> None:
        """Test the throttle starts at the configured value."""
        assert manager.get_throttle() == 0.5

    def test_throttle_increase_slews(self, manager: InputManager) -> None:
        """Test throttle moves toward its target at a bounded rate."""
        manager.process_events([key_down(pygame.K_PAGEUP)])
        manager.update(0.1)
        assert manager.get_throttle() == pytest.approx(0.7)
        manager.update(1.0)
        assert manager.get_throttle() == pytest.approx(1.0)

    def test_throttle_increment(self, manager: InputManager) -> None:
        """Test one press changes the target by the increment."""
        manager.process_events([key_down(pygame.K_s)])
        manager.update(1.0)
        assert manager.get_throttle() == pytest.approx(0.45)

    def test_throttle_key_repeat(self, manager: InputManager) -> None:
        """Test held throttle keys repeat."""
        manager.process_events([key_down(pygame.K_w), key_down(pygame.K_w)])
        manager.update(1.0)
        assert manager.get_throttle() == pytest.approx(0.6)

    def test_throttle_idle_clamps(self, manager: InputManager) -> None:
        """Test throttle never goes below zero."""
        manager.process_events([key_down(pygame.K_PAGEDOWN), key_down(pygame.K_s)])
        manager.update(1.0)
        assert manager.get_throttle() == 0.0

    def test_aoa_held_by_key(self, manager: InputManager) -> None:
        """Test the override key holds the AoA override."""
        manager.process_events([key_down(pygame.K_LSHIFT)])
        manager.update(0.016)
        assert manager.is_aoa_held()
        manager.process_events([key_up(pygame.K_LSHIFT)])
        manager.update(0.016)
        assert not manager.is_aoa_held()

    def test_aoa_held_by_mouse(self, manager: InputManager) -> None:
        """Test the right mouse button holds the AoA override."""
        manager.process_events([pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=3, pos=(0, 0))])
        manager.update(0.016)
        assert manager.is_aoa_held()
        manager.process_events([pygame.event.Event(pygame.MOUSEBUTTONUP, button=3, pos=(0, 0))])
        manager.update(0.016)
        assert not manager.is_aoa_held()

    def test_pointer_delta_accumulates(self, manager: InputManager) -> None:
        """Test relative motion accumulates until consumed."""
        manager.process_events(
            [
                pygame.event.Event(pygame.MOUSEMOTION, rel=(3, -2), pos=(0, 0), buttons=(0, 0, 0)),
                pygame.event.Event(pygame.MOUSEMOTION, rel=(4, 1), pos=(0, 0), buttons=(0, 0, 0)),
            ]
        )
        assert manager.consume_pointer_delta() == Vector2(7.0, -1.0)
        assert manager.consume_pointer_delta() == Vector2.zero()

    def test_quit_event(self, manager: InputManager) -> None:
        """Test a window close requests quit."""
        manager.process_events([pygame.event.Event(pygame.QUIT)])
        assert manager.is_quit_requested()

    def test_quit_key(self, manager: InputManager) -> None:
        """Test escape requests quit."""
        manager.process_events([key_down(pygame.K_ESCAPE)])
        assert manager.is_quit_requested()
        assert manager.is_action_just_pressed(InputAction.QUIT)

    def test_just_pressed_is_one_shot(self, manager: InputManager) -> None:
        """Test just-pressed actions last one frame and do not repeat."""
        manager.process_events([key_down(pygame.K_SPACE)])
        assert manager.is_action_just_pressed(InputAction.PAUSE)
        manager.process_events([key_down(pygame.K_SPACE)])
        assert not manager.is_action_just_pressed(InputAction.PAUSE)
        assert manager.is_action_pressed(InputAction.PAUSE)

    def test_unbound_key_ignored(self, manager: InputManager) -> None:
        """Test keys without a binding do nothing."""
        manager.process_events([key_down(pygame.K_F12)])
        manager.update(0.1)
        assert manager.get_throttle() == 0.5
        assert not manager.is_quit_requested()


class TestFocusLoss:
    """Test held inputs are released when the window loses focus."""

    @pytest.fixture
    def manager(self) -> InputManager:
        return InputManager(InputConfig())

    def test_focus_lost_releases_override_key(self, manager: InputManager) -> None:
        """Test a key held when focus is lost no longer holds the override."""
        manager.process_events([key_down(pygame.K_LSHIFT)])
        manager.update(0.016)
        assert manager.is_aoa_held()

        manager.process_events([pygame.event.Event(pygame.WINDOWFOCUSLOST)])
        assert not manager.is_aoa_held()
        manager.update(0.016)
        assert not manager.is_aoa_held()
        assert not manager.is_action_pressed(InputAction.AOA_OVERRIDE)

    def test_focus_lost_releases_mouse_button(self, manager: InputManager) -> None:
        """Test a held override button is released on focus loss."""
        manager.process_events([pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=3, pos=(0, 0))])
        manager.process_events([pygame.event.Event(pygame.WINDOWFOCUSLOST)])
        manager.update(0.016)
        assert not manager.is_aoa_held()

    def test_focus_lost_drops_pointer_motion(self, manager: InputManager) -> None:
        """Test pointer motion pending at focus loss is discarded."""
        motion = pygame.event.Event(
            pygame.MOUSEMOTION, rel=(30, -10), pos=(0, 0), buttons=(0, 0, 0)
        )
        manager.process_events([motion, pygame.event.Event(pygame.WINDOWFOCUSLOST)])
        assert manager.consume_pointer_delta() == Vector2.zero()
