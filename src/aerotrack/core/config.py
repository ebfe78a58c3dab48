"""YAML configuration loading.

Settings for the window, simulation rates, cursor mapping and input bindings
live in ``config/settings.yaml``. Values are read with dot notation so callers
never walk nested dictionaries themselves.

Typical usage example:
    from aerotrack.core.config import ConfigLoader

    config = ConfigLoader.load_settings()
    physics_hz = config.get("simulation.physics_hz", default=50)
"""

import logging
from pathlib import Path
from typing import Any

import yaml

from aerotrack.core.resource_path import get_config_path

logger = logging.getLogger(__name__)

SETTINGS_FILE = "settings.yaml"


class ConfigError(Exception):
    """Raised when configuration cannot be read or interpreted."""


class ConfigLoader:
    """Nested configuration backed by a dictionary loaded from YAML.

    Examples:
        >>> config = ConfigLoader({"cursor": {"sensitivity": 2.0}})
        >>> config.get("cursor.sensitivity")
        2.0
        >>> config.get("cursor.missing", default=0.1)
        0.1
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data if data is not None else {}

    @classmethod
    def load(cls, path: str | Path) -> "ConfigLoader":
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML file.

        Returns:
            Loader holding the file's mapping (empty for an empty file).

        Raises:
            ConfigError: If the file is missing, unreadable, or its top level
                is not a mapping.
        """
        path = Path(path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load configuration {path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration root must be a mapping: {path}")

        logger.info("Loaded configuration from: %s", path)
        return cls(data)

    @classmethod
    def load_settings(cls, path: str | Path | None = None) -> "ConfigLoader":
        """Load the application settings file.

        Args:
            path: Explicit settings file. Defaults to ``config/settings.yaml``
                under the project root.
        """
        return cls.load(path if path is not None else get_config_path(SETTINGS_FILE))

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value using dot notation (e.g. ``"simulation.physics_hz"``).

        Returns:
            The value, or ``default`` if any part of the path is missing.
        """
        value: Any = self._data

        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value: Any) -> None:
        """Set a value using dot notation, creating sections as needed.

        Raises:
            ConfigError: If an intermediate key holds a non-section value.
        """
        keys = key.split(".")
        data = self._data

        for k in keys[:-1]:
            if k not in data:
                data[k] = {}
            elif not isinstance(data[k], dict):
                raise ConfigError(f"Cannot set {key}: {k} is not a section")
            data = data[k]

        data[keys[-1]] = value

    def get_section(self, key: str, default: dict[str, Any] | None = None) -> dict[str, Any]:
        """Get an entire configuration section.

        Args:
            key: Section key (dot notation).
            default: Returned when the section is absent. If None, a missing
                section is an error.

        Returns:
            The section dictionary.

        Raises:
            ConfigError: If the section is missing (and no default was given)
                or the key holds a scalar.
        """
        value = self.get(key)

        if value is None:
            if default is not None:
                return default
            raise ConfigError(f"Configuration section not found: {key}")

        if not isinstance(value, dict):
            raise ConfigError(f"Configuration key is not a section: {key}")

        return value

    def merge(self, other: "ConfigLoader") -> None:
        """Merge another configuration into this one; ``other`` wins on conflicts."""
        self._data = _merge_dicts(self._data, other._data)


def _merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _merge_dicts(result[key], value)
        else:
            result[key] = value

    return result
