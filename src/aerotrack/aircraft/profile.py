"""Aerodynamic profiles describing how an aircraft type flies.

A profile is immutable tuning data: engine power and altitude derating, drag
and lift coefficients, control rates, AoA limiter settings and stability
gains. Profiles are validated once when loaded, never in the tick loop.

Presets live as YAML files under ``config/aircraft/``:

    aircraft:
      name: F-16 Fighting Falcon
      engine_power: 120.0
      stall_speed: 60.0
      ...

Typical usage example:
    from aerotrack.aircraft.profile import load_preset

    profile = load_preset("fighter_f16")
    print(profile.stall_speed)
"""

import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from aerotrack.core.config import ConfigError
from aerotrack.core.resource_path import get_aircraft_config_dir, get_aircraft_config_path

logger = logging.getLogger(__name__)

DEFAULT_PRESET = "default"


class ProfileError(ConfigError):
    """Raised when a profile is malformed or violates its invariants."""


@dataclass(frozen=True)
class AerodynamicProfile:
    """Per-aircraft-type tuning.

    Defaults describe a generic medium jet.

    Attributes:
        name: Display name.
        description: Free-form description.
        engine_power: Thrust at full throttle, sea level (N per unit throttle).
        max_altitude: Altitude at which thrust and lift reach zero.
        altitude_effect_start: Altitude where thrust and lift start derating.
        forward_drag_coeff: Drag along the body forward axis (scaled by mass).
        lateral_drag_coeff: Drag along body right; half of it applies on body up.
        induced_drag_coeff: Lift-induced drag coefficient.
        lift_coeff: Lift coefficient (scaled by mass).
        min_lift_speed: Speed below which no lift is produced.
        stall_speed: Speed above which lift has full effect.
        pitch_rate: Pitch authority (deg/s).
        yaw_rate: Yaw authority (deg/s).
        roll_rate: Roll authority (deg/s).
        rotation_gain_p: Proportional gain for PD attitude mode.
        rotation_gain_d: Derivative gain for PD attitude mode.
        world_level_blend: Roll target blend, 0 = input frame, 1 = world horizon.
        max_aoa_with_limiter: AoA ceiling enforced by the limiter (deg).
        max_aoa_without_limiter: AoA ceiling with the limiter disabled (deg).
        limiter_strength: Correction per degree of excess AoA (deg/s^2).
        aoa_rate_multiplier: Rate boost while the limiter is disabled.
        cooldown_seconds: Forced limiter time after a disable is released.
        mass: Body mass (kg).
    """

    name: str = "Default"
    description: str = "Generic balanced profile"

    engine_power: float = 100.0
    max_altitude: float = 15000.0
    altitude_effect_start: float = 8000.0

    forward_drag_coeff: float = 0.001
    lateral_drag_coeff: float = 0.3
    induced_drag_coeff: float = 0.05

    lift_coeff: float = 0.0003
    min_lift_speed: float = 30.0
    stall_speed: float = 50.0

    pitch_rate: float = 30.0
    yaw_rate: float = 20.0
    roll_rate: float = 50.0

    rotation_gain_p: float = 5.0
    rotation_gain_d: float = 2.5
    world_level_blend: float = 0.3

    max_aoa_with_limiter: float = 15.0
    max_aoa_without_limiter: float = 45.0
    limiter_strength: float = 30.0
    aoa_rate_multiplier: float = 1.5
    cooldown_seconds: float = 5.0

    mass: float = 10000.0

    @property
    def max_rotation_rate(self) -> float:
        """Largest of the pitch and roll authorities (deg/s)."""
        return max(self.pitch_rate, self.roll_rate)

    def validate(self) -> None:
        """Check the profile invariants.

        Raises:
            ProfileError: Listing every violated invariant.
        """
        problems = []

        for f in fields(self):
            if f.type in (float, "float"):
                value = getattr(self, f.name)
                if value < 0.0:
                    problems.append(f"{f.name} must be non-negative (got {value})")

        if self.stall_speed < self.min_lift_speed:
            problems.append(
                f"stall_speed ({self.stall_speed}) "
                f"must be >= min_lift_speed ({self.min_lift_speed})"
            )
        if self.altitude_effect_start >= self.max_altitude:
            problems.append(
                f"altitude_effect_start ({self.altitude_effect_start}) "
                f"must be < max_altitude ({self.max_altitude})"
            )
        if not 0.0 <= self.world_level_blend <= 1.0:
            problems.append(
                f"world_level_blend must be within [0, 1] (got {self.world_level_blend})"
            )
        if self.mass <= 0.0:
            problems.append(f"mass must be positive (got {self.mass})")

        if problems:
            raise ProfileError(f"Invalid profile '{self.name}': " + "; ".join(problems))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AerodynamicProfile":
        """Build and validate a profile from a mapping.

        Keys not present fall back to the defaults.

        Raises:
            ProfileError: On unknown keys, non-numeric values, or invariant
                violations.
        """
        known = {f.name: f for f in fields(cls)}
        unknown = sorted(set(data) - set(known))
        if unknown:
            raise ProfileError(f"Unknown profile keys: {', '.join(unknown)}")

        values: dict[str, Any] = {}
        for key, raw in data.items():
            if known[key].type in (str, "str"):
                values[key] = str(raw)
                continue
            if isinstance(raw, bool):
                raise ProfileError(f"{key} must be a number (got {raw!r})")
            try:
                values[key] = float(raw)
            except (TypeError, ValueError) as e:
                raise ProfileError(f"{key} must be a number (got {raw!r})") from e

        profile = cls(**values)
        profile.validate()
        return profile

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def with_overrides(self, overrides: dict[str, Any]) -> "AerodynamicProfile":
        """Return a validated copy with some fields replaced.

        Overrides go through the same checks as ``from_dict``.

        Raises:
            ProfileError: On unknown keys, non-numeric values, or invariant
                violations.
        """
        return AerodynamicProfile.from_dict({**self.to_dict(), **overrides})


def load_profile(path: str | Path) -> AerodynamicProfile:
    """Load a profile from a YAML file with a top-level ``aircraft`` mapping.

    Args:
        path: Preset file.

    Returns:
        Validated profile.

    Raises:
        ConfigError: If the file is missing or unreadable.
        ProfileError: If the content is not a valid profile.
    """
    path = Path(path)

    if not path.exists():
        raise ConfigError(f"Aircraft profile not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to read aircraft profile {path}: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("aircraft"), dict):
        raise ProfileError(f"Aircraft profile must define an 'aircraft' mapping: {path}")

    profile = AerodynamicProfile.from_dict(data["aircraft"])
    logger.info("Loaded aircraft profile '%s' from %s", profile.name, path)
    return profile


def load_preset(preset: str = DEFAULT_PRESET) -> AerodynamicProfile:
    """Load a named preset from ``config/aircraft/``.

    Examples:
        >>> load_preset("attacker_a10").stall_speed
        35.0
    """
    path = get_aircraft_config_path(preset)
    if not path.exists():
        available = ", ".join(list_presets()) or "none"
        raise ConfigError(f"Unknown aircraft preset '{preset}' (available: {available})")
    return load_profile(path)


def list_presets() -> list[str]:
    """Names of the preset files available under ``config/aircraft/``."""
    directory = get_aircraft_config_dir()
    if not directory.is_dir():
        return []
    return sorted(p.stem for p in directory.glob("*.yaml"))
