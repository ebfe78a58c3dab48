"""Pytest configuration and fixtures for all tests."""

import os

import pygame
import pytest

from aerotrack.aircraft.profile import AerodynamicProfile
from aerotrack.core.logging_system import initialize_logging, shutdown_logging
from aerotrack.physics.flight_model.base import BodyState
from aerotrack.physics.rigid_body import RigidBodyIntegrator
from aerotrack.physics.vectors import Vector3


@pytest.fixture(scope="session", autouse=True)
def initialize_pygame():
    """Initialize pygame with the dummy video driver for headless testing."""
    os.environ["SDL_VIDEODRIVER"] = "dummy"
    pygame.init()

    yield

    pygame.quit()


@pytest.fixture(scope="session", autouse=True)
def session_logging(tmp_path_factory):
    """Send session logs to a temporary directory instead of the user's home."""
    log_dir = tmp_path_factory.mktemp("logs")
    config = log_dir / "logging.yaml"
    config.write_text(f"log_dir: {log_dir.as_posix()}\nconsole:\n  enabled: false\n")
    initialize_logging(config, use_platform_dir=False)

    yield

    shutdown_logging()


@pytest.fixture
def pygame_display():
    """Create a pygame display for tests that need one."""
    screen = pygame.display.set_mode((640, 480))
    yield screen


@pytest.fixture
def profile() -> AerodynamicProfile:
    """Default aerodynamic profile."""
    return AerodynamicProfile()


@pytest.fixture
def body(profile: AerodynamicProfile) -> RigidBodyIntegrator:
    """Body in level flight at 1000 m and 80 m/s, with gravity disabled."""
    state = BodyState.spawn(Vector3(0.0, 1000.0, 0.0), mass=profile.mass, initial_speed=80.0)
    return RigidBodyIntegrator(state, gravity=0.0)
