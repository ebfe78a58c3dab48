"""Resource path resolution for source checkouts and packaged builds.

Configuration files (settings, logging, aircraft presets) ship in the
top-level ``config/`` directory. When frozen with PyInstaller they are
extracted next to the bundle instead.

Typical usage:
    from aerotrack.core.resource_path import get_config_path

    logging_config = get_config_path("logging.yaml")
    f16 = get_aircraft_config_path("fighter_f16")
"""

import sys
from pathlib import Path


def is_bundled() -> bool:
    """Check if running from a PyInstaller bundle."""
    return hasattr(sys, "_MEIPASS")


def get_project_root() -> Path:
    """Get the directory holding ``config/``.

    Returns:
        The bundle directory when frozen, else the repository root
        (three levels above ``src/aerotrack/core``).
    """
    if is_bundled():
        return Path(getattr(sys, "_MEIPASS"))
    return Path(__file__).resolve().parent.parent.parent.parent


def get_resource_path(relative_path: str) -> Path:
    """Get the absolute path of a resource relative to the project root.

    Examples:
        >>> get_resource_path("config/logging.yaml").name
        'logging.yaml'
    """
    return get_project_root() / relative_path


def get_config_path(config_file: str) -> Path:
    """Get the path of a file under ``config/``.

    Args:
        config_file: Filename or relative path, e.g. ``"settings.yaml"``.
    """
    return get_resource_path(f"config/{config_file}")


def get_aircraft_config_dir() -> Path:
    """Directory holding the aircraft preset YAML files."""
    return get_config_path("aircraft")


def get_aircraft_config_path(preset: str) -> Path:
    """Path of a named aircraft preset (``.yaml`` appended)."""
    return get_aircraft_config_dir() / f"{preset}.yaml"
