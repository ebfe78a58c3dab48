"""Tests for aerodynamic profiles and presets."""

from pathlib import Path

import pytest

from aerotrack.aircraft.profile import (
    AerodynamicProfile,
    ProfileError,
    list_presets,
    load_preset,
    load_profile,
)
from aerotrack.core.config import ConfigError


class TestAerodynamicProfile:
    """Test profile defaults and validation."""

    def test_defaults_are_valid(self) -> None:
        """Test the default profile passes validation."""
        AerodynamicProfile().validate()

    def test_max_rotation_rate(self) -> None:
        """Test the rotation rate is the larger of pitch and roll rates."""
        profile = AerodynamicProfile(pitch_rate=30.0, roll_rate=50.0)
        assert profile.max_rotation_rate == 50.0

    def test_is_immutable(self) -> None:
        """Test profiles cannot be mutated."""
        profile = AerodynamicProfile()
        with pytest.raises(AttributeError):
            profile.mass = 1.0  # type: ignore[misc]

    def test_negative_value_rejected(self) -> None:
        """Test negative coefficients are rejected."""
        with pytest.raises(ProfileError, match="lift_coeff"):
            AerodynamicProfile(lift_coeff=-0.1).validate()

    def test_stall_below_min_lift_rejected(self) -> None:
        """Test stall_speed must not be below min_lift_speed."""
        with pytest.raises(ProfileError, match="stall_speed"):
            AerodynamicProfile(min_lift_speed=60.0, stall_speed=50.0).validate()

    def test_altitude_order_rejected(self) -> None:
        """Test altitude_effect_start must be below max_altitude."""
        with pytest.raises(ProfileError, match="altitude_effect_start"):
            AerodynamicProfile(altitude_effect_start=15000.0).validate()

    def test_blend_range_rejected(self) -> None:
        """Test world_level_blend must be within [0, 1]."""
        with pytest.raises(ProfileError, match="world_level_blend"):
            AerodynamicProfile(world_level_blend=1.5).validate()

    def test_zero_mass_rejected(self) -> None:
        """Test mass must be positive."""
        with pytest.raises(ProfileError, match="mass"):
            AerodynamicProfile(mass=0.0).validate()

    def test_all_problems_reported(self) -> None:
        """Test every violation is listed in one error."""
        with pytest.raises(ProfileError) as exc_info:
            AerodynamicProfile(pitch_rate=-1.0, mass=0.0).validate()
        assert "pitch_rate" in str(exc_info.value)
        assert "mass" in str(exc_info.value)

    def test_profile_error_is_config_error(self) -> None:
        """Test callers can catch profile problems as configuration errors."""
        assert issubclass(ProfileError, ConfigError)


class TestFromDict:
    """Test building profiles from mappings."""

    def test_partial_mapping_uses_defaults(self) -> None:
        """Test missing keys fall back to defaults."""
        profile = AerodynamicProfile.from_dict({"name": "Glider", "engine_power": 0})
        assert profile.name == "Glider"
        assert profile.engine_power == 0.0
        assert profile.stall_speed == 50.0

    def test_integers_become_floats(self) -> None:
        """Test integer YAML values are accepted."""
        profile = AerodynamicProfile.from_dict({"mass": 9000})
        assert isinstance(profile.mass, float)

    def test_unknown_key_rejected(self) -> None:
        """Test unknown keys are reported."""
        with pytest.raises(ProfileError, match="wingspan"):
            AerodynamicProfile.from_dict({"wingspan": 10.0})

    def test_non_numeric_rejected(self) -> None:
        """Test non-numeric values are reported."""
        with pytest.raises(ProfileError, match="stall_speed"):
            AerodynamicProfile.from_dict({"stall_speed": "fast"})

    def test_bool_rejected(self) -> None:
        """Test booleans are not accepted as numbers."""
        with pytest.raises(ProfileError, match="mass"):
            AerodynamicProfile.from_dict({"mass": True})

    def test_result_is_validated(self) -> None:
        """Test invariants are checked after building."""
        with pytest.raises(ProfileError):
            AerodynamicProfile.from_dict({"min_lift_speed": 80.0})

    def test_to_dict_round_trip(self) -> None:
        """Test to_dict output can rebuild the same profile."""
        profile = AerodynamicProfile(name="Test", stall_speed=55.0)
        assert AerodynamicProfile.from_dict(profile.to_dict()) == profile

    def test_with_overrides(self) -> None:
        """Test a validated copy with replaced fields."""
        base = AerodynamicProfile(name="Base", stall_speed=55.0)
        profile = base.with_overrides({"cooldown_seconds": 0.0})
        assert profile.cooldown_seconds == 0.0
        assert profile.name == "Base"
        assert profile.stall_speed == 55.0
        with pytest.raises(ProfileError):
            base.with_overrides({"mass": -5.0})

    def test_with_overrides_rejects_unknown_keys(self) -> None:
        """Test override keys are checked like profile files."""
        with pytest.raises(ProfileError, match="wingspan"):
            AerodynamicProfile().with_overrides({"wingspan": 10.0})


class TestLoading:
    """Test loading profiles from YAML."""

    def test_load_profile(self, tmp_path: Path) -> None:
        """Test loading a profile file."""
        path = tmp_path / "glider.yaml"
        path.write_text("aircraft:\n  name: Glider\n  engine_power: 0.0\n  stall_speed: 30.0\n")
        profile = load_profile(path)
        assert profile.name == "Glider"
        assert profile.stall_speed == 30.0

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test a missing file raises ConfigError."""
        with pytest.raises(ConfigError, match="not found"):
            load_profile(tmp_path / "missing.yaml")

    def test_missing_aircraft_section(self, tmp_path: Path) -> None:
        """Test a file without an aircraft mapping raises ProfileError."""
        path = tmp_path / "bad.yaml"
        path.write_text("engine_power: 10.0\n")
        with pytest.raises(ProfileError, match="aircraft"):
            load_profile(path)

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Test malformed YAML raises ConfigError."""
        path = tmp_path / "broken.yaml"
        path.write_text("aircraft: [unclosed\n")
        with pytest.raises(ConfigError):
            load_profile(path)


class TestPresets:
    """Test the shipped presets."""

    def test_list_presets(self) -> None:
        """Test the shipped preset names."""
        presets = list_presets()
        for name in ("default", "fighter_f16", "attacker_a10", "transport_c130"):
            assert name in presets

    @pytest.mark.parametrize("preset", ["default", "fighter_f16", "attacker_a10", "transport_c130"])
    def test_presets_load_and_validate(self, preset: str) -> None:
        """Test every shipped preset is a valid profile."""
        profile = load_preset(preset)
        profile.validate()
        assert profile.name

    def test_attacker_values(self) -> None:
        """Test a preset's values come from its file."""
        profile = load_preset("attacker_a10")
        assert profile.stall_speed == 35.0
        assert profile.mass == 12000.0

    def test_unknown_preset_lists_available(self) -> None:
        """Test an unknown preset names the available ones."""
        with pytest.raises(ConfigError, match="fighter_f16"):
            load_preset("zeppelin")
