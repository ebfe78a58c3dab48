"""AeroTrack - pointer-steered fixed-wing flight sandbox.

Main entry point. Loads settings and the aircraft preset, wires the input,
cursor, look-direction rig and flight loop together, and runs the game loop
either in a pygame window or headless for a fixed simulated duration.

Typical usage:
    aerotrack
    aerotrack --aircraft fighter_f16
    aerotrack --headless --duration 30
"""

import argparse
import os
import sys
from collections.abc import Sequence

import pygame

from aerotrack.aircraft.profile import AerodynamicProfile, load_preset, load_profile
from aerotrack.control.look_direction import LookDirectionRig
from aerotrack.core.config import ConfigLoader
from aerotrack.core.cursor_input import CursorConfig, CursorInputMapper
from aerotrack.core.game_loop import GameLoop
from aerotrack.core.input import InputAction, InputConfig, InputManager
from aerotrack.core.logging_system import get_logger, initialize_logging
from aerotrack.core.resource_path import get_config_path
from aerotrack.flight_loop import FlightLoop
from aerotrack.physics.flight_model.base import BodyState
from aerotrack.physics.rigid_body import RigidBodyIntegrator
from aerotrack.physics.vectors import Vector3

DEFAULT_WINDOW_SIZE = (1280, 720)
DEFAULT_DURATION = 10.0

BACKGROUND_COLOR = (12, 18, 30)
RETICLE_COLOR = (90, 110, 140)
CURSOR_COLOR = (0, 220, 120)
CURSOR_ACTIVE_COLOR = (80, 160, 255)
LIMITER_OFF_COLOR = (255, 120, 40)


class AeroTrackApp:  # pylint: disable=too-many-instance-attributes
    """Application wiring and lifecycle.

    Initialization order: logging, settings, aircraft profile, pygame, body,
    inputs and flight loop. ``run`` then drives the game loop until quit (or
    for ``--duration`` simulated seconds when headless).
    """

    def __init__(self, args: argparse.Namespace | None = None) -> None:
        self.args = args or parse_args([])

        logging_config = get_config_path("logging.yaml")
        if logging_config.exists():
            initialize_logging(logging_config, use_platform_dir=True)
        else:
            initialize_logging(use_platform_dir=True)
        self._log = get_logger("aerotrack")
        self._log.info("AeroTrack starting up...")

        self.settings = self._load_settings()
        self.profile = self._load_profile()
        self.headless: bool = bool(self.args.headless)

        if self.headless:
            os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
        pygame.init()
        width = int(self.settings.get("window.width", DEFAULT_WINDOW_SIZE[0]))
        height = int(self.settings.get("window.height", DEFAULT_WINDOW_SIZE[1]))
        pygame.display.set_caption(self.settings.get("window.title", "AeroTrack"))
        self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)

        spawn_altitude = float(self.settings.get("simulation.spawn_altitude", 1000.0))
        spawn_speed = float(self.settings.get("simulation.spawn_speed", 80.0))
        self.body = RigidBodyIntegrator(
            BodyState.spawn(
                Vector3(0.0, spawn_altitude, 0.0),
                mass=self.profile.mass,
                initial_speed=spawn_speed,
            )
        )

        self.input_manager = InputManager(InputConfig.from_dict(self.settings.get("input")))
        self.cursor = CursorInputMapper(CursorConfig.from_dict(self.settings.get("cursor")))
        self.cursor.initialize(width, height)
        self.look_rig = LookDirectionRig(
            rotation_speed=float(self.settings.get("look.rotation_speed", 100.0)),
            aoa_rotation_multiplier=float(self.settings.get("look.aoa_rotation_multiplier", 2.0)),
        )
        self.look_rig.align_to(self.body.get_state().orientation)

        self.flight_loop = FlightLoop(
            self.body,
            self.profile,
            direction_provider=self.look_rig,
            input_source=self.input_manager,
            attitude_mode=self.settings.get("simulation.attitude_mode", "kinematic"),
        )
        self.game_loop = GameLoop(
            self.flight_loop,
            self.body,
            frame_callback=self._frame,
            target_fps=int(self.settings.get("simulation.target_fps", 60)),
            physics_hz=int(self.settings.get("simulation.physics_hz", 50)),
        )

        if not self.headless:
            pygame.mouse.set_visible(False)
            pygame.event.set_grab(True)

        self._log.info("AeroTrack initialized with aircraft '%s'", self.profile.name)

    def _load_settings(self) -> ConfigLoader:
        settings = ConfigLoader.load_settings()
        if self.args.config:
            settings.merge(ConfigLoader.load(self.args.config))
        if self.args.aircraft:
            settings.set("aircraft.preset", self.args.aircraft)
        return settings

    def _load_profile(self) -> AerodynamicProfile:
        preset = self.settings.get("aircraft.preset")
        if self.args.profile:
            profile = load_profile(self.args.profile)
        elif preset:
            profile = load_preset(preset)
        else:
            self._log.info("No aircraft preset configured, using default profile")
            profile = AerodynamicProfile()

        overrides = self.settings.get_section("aircraft.overrides", default={})
        if overrides:
            self._log.info("Applying profile overrides: %s", ", ".join(sorted(overrides)))
            profile = profile.with_overrides(overrides)
        return profile

    def run(self) -> None:
        """Run until quit, or for the configured duration when headless."""
        self._log.info("Starting main loop")
        try:
            if self.headless:
                self.run_headless(self.args.duration)
            else:
                self.game_loop.run()
        finally:
            self._shutdown()

    def run_headless(self, duration: float) -> None:
        """Simulate ``duration`` seconds as fast as possible, one physics step per frame."""
        dt = self.game_loop.physics_dt
        while self.game_loop.simulated_time < duration - 1e-9:
            self.game_loop.advance(dt)
            if self.input_manager.is_quit_requested():
                break

        telemetry = self.flight_loop.get_telemetry()
        self._log.info(
            "Headless run finished: %.1fs simulated, speed %.1f, altitude %.0f, AoA %.1f",
            self.game_loop.simulated_time,
            telemetry.speed,
            telemetry.altitude,
            telemetry.current_aoa,
        )

    def _frame(self, dt: float) -> None:
        """Per-frame work: events, input, cursor, look rig and drawing."""
        events = pygame.event.get()
        for event in events:
            if event.type == pygame.VIDEORESIZE:
                self.screen = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                self._log.debug("Window resized to %dx%d", event.w, event.h)
            elif event.type == pygame.WINDOWFOCUSGAINED:
                self.cursor.rearm_warmup()

        self.input_manager.process_events(events)
        self.input_manager.update(dt)

        if self.input_manager.is_quit_requested():
            self.game_loop.stop()
        if self.input_manager.is_action_just_pressed(InputAction.PAUSE):
            self.game_loop.toggle_pause()
        if self.input_manager.is_action_just_pressed(InputAction.RECENTER_CURSOR):
            self.cursor.reset_to_center()

        delta = self.input_manager.consume_pointer_delta()
        if not self.game_loop.is_paused():
            pitch, roll = self.cursor.update(delta, dt, self.screen.get_size())
            boosted = self.flight_loop.limiter.is_limiter_disabled()
            self.look_rig.apply_input(pitch, roll, dt, boosted=boosted)

        if not self.headless:
            self._render()
            pygame.display.flip()

    def _render(self) -> None:
        """Draw the screen-center reticle and the virtual cursor."""
        self.screen.fill(BACKGROUND_COLOR)

        width, height = self.screen.get_size()
        center = (width // 2, height // 2)
        pygame.draw.circle(self.screen, RETICLE_COLOR, center, 12, width=1)

        position = self.cursor.get_cursor_position()
        marker = (int(position.x), int(position.y))
        if self.flight_loop.limiter.is_limiter_disabled():
            color = LIMITER_OFF_COLOR
        elif self.cursor.has_active_input():
            color = CURSOR_ACTIVE_COLOR
        else:
            color = CURSOR_COLOR
        if not self.cursor.is_near_center():
            pygame.draw.line(self.screen, RETICLE_COLOR, center, marker, 1)
        pygame.draw.circle(self.screen, color, marker, 6)

    def _shutdown(self) -> None:
        self._log.info("AeroTrack shutting down...")
        pygame.event.set_grab(False)
        pygame.mouse.set_visible(True)
        pygame.quit()
        self._log.info("Shutdown complete")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="AeroTrack - pointer-steered flight sandbox")

    parser.add_argument(
        "--aircraft",
        type=str,
        help="Aircraft preset under config/aircraft (e.g. fighter_f16, attacker_a10)",
    )
    parser.add_argument(
        "--profile",
        type=str,
        help="Path to an aircraft profile YAML file (overrides --aircraft)",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Settings file merged over config/settings.yaml",
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Run without a window for --duration simulated seconds",
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=DEFAULT_DURATION,
        help="Simulated seconds to run in headless mode (default: %(default)s)",
    )

    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success, 1 on a fatal error).
    """
    try:
        args = parse_args(argv)
        app = AeroTrackApp(args)
        app.run()
        return 0
    except Exception as e:  # pylint: disable=broad-exception-caught
        get_logger("aerotrack").exception("Fatal error: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
