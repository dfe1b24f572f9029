"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import Dict

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.models import ALLOWED_SLOT_DURATIONS
from .domain.selection import DEFAULT_MOBILE_BREAKPOINT
from .domain.time_utils import format_time, minutes_of_day, parse_time
from .domain.weekly_availability import DEFAULT_PRESETS, TimePreset


def _validate_hhmm(value: str) -> str:
    return format_time(parse_time(value))


class PresetConfig(BaseModel):
    """Open/close pair of a quick preset."""
    open: str
    close: str

    @field_validator("open", "close")
    @classmethod
    def validate_time(cls, value: str) -> str:
        """Validate HH:MM format."""
        return _validate_hhmm(value)

    @model_validator(mode="after")
    def validate_order(self) -> "PresetConfig":
        """Ensure the preset opens before it closes."""
        if minutes_of_day(parse_time(self.close)) <= minutes_of_day(parse_time(self.open)):
            raise ValueError(f"Preset closes ({self.close}) before it opens ({self.open})")
        return self


def _default_presets() -> Dict[str, PresetConfig]:
    return {
        name: PresetConfig(open=format_time(preset.open), close=format_time(preset.close))
        for name, preset in DEFAULT_PRESETS.items()
    }


class DefaultsConfig(BaseModel):
    """Default settings for new opening hours."""
    slot_duration_minutes: int = 30
    standard_open: str = "09:00"
    standard_close: str = "17:00"

    @field_validator("slot_duration_minutes")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        """Ensure the slot duration is one the pickers offer."""
        if value not in ALLOWED_SLOT_DURATIONS:
            raise ValueError(
                f"slot_duration_minutes must be one of {ALLOWED_SLOT_DURATIONS}, got {value}"
            )
        return value

    @field_validator("standard_open", "standard_close")
    @classmethod
    def validate_time(cls, value: str) -> str:
        return _validate_hhmm(value)

    @model_validator(mode="after")
    def validate_hours_order(self) -> "DefaultsConfig":
        """Ensure the standard hours open before they close."""
        if minutes_of_day(parse_time(self.standard_close)) <= minutes_of_day(parse_time(self.standard_open)):
            raise ValueError("standard_close must be later than standard_open")
        return self


class AppConfig(BaseModel):
    """Application configuration."""
    shop_id: str = "default"
    data_dir: Path = Path("data")
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    presets: Dict[str, PresetConfig] = Field(default_factory=_default_presets)
    mobile_breakpoint_px: int = DEFAULT_MOBILE_BREAKPOINT

    @field_validator("mobile_breakpoint_px")
    @classmethod
    def validate_breakpoint(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("mobile_breakpoint_px must be greater than zero")
        return value

    @field_validator("presets")
    @classmethod
    def validate_presets(cls, value: Dict[str, PresetConfig]) -> Dict[str, PresetConfig]:
        if not value:
            raise ValueError("At least one preset must be configured")
        return value

    def get_presets(self) -> Dict[str, TimePreset]:
        """Presets as domain objects."""
        return {
            name: TimePreset.from_strings(name, preset.open, preset.close)
            for name, preset in self.presets.items()
        }

    def resolve_data_dir(self, config_path: Path | None = None) -> Path:
        """Resolve a relative data_dir against the config file location."""
        if self.data_dir.is_absolute() or config_path is None:
            return self.data_dir
        return config_path.parent / self.data_dir

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
