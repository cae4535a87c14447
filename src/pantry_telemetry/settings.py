"""Application settings and configuration management."""

from pathlib import Path

import yaml
from pydantic import ValidationError as PydanticValidationError
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import ReconstructionDefaults
from .exceptions import ConfigurationError


class Settings(BaseSettings):
    """
    Application settings for Pantry Telemetry.

    Settings are loaded in the following order of precedence (highest to lowest):
    1. YAML config file passed to ``load_settings``
    2. Environment variables (e.g., PANTRY_TELEMETRY_RECENT_ACTIVITY_LIMIT)
    3. .env file (if found)
    4. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="PANTRY_TELEMETRY_", env_file=".env", extra="ignore"
    )

    # --- File Paths ---
    data_dir: Path = Path("data")
    telemetry_file: Path | None = None  # Saved payload, relative to data_dir

    # --- Reconstruction ---
    # None keeps the boundary fallback scan unbounded
    fallback_radius_minutes: float | None = None
    delta_precision: int = ReconstructionDefaults.DELTA_PRECISION

    # --- Presentation ---
    recent_activity_limit: int = ReconstructionDefaults.RECENT_ACTIVITY_LIMIT

    @field_validator("recent_activity_limit")
    @classmethod
    def check_limit(cls, v: int) -> int:
        """Validate that at least one cycle can be shown."""
        if v < 1:
            raise ValueError("recent_activity_limit must be at least 1")
        return v

    @field_validator("fallback_radius_minutes")
    @classmethod
    def check_radius(cls, v: float | None) -> float | None:
        """Validate that an explicit radius is positive."""
        if v is not None and v <= 0:
            raise ValueError("fallback_radius_minutes must be positive")
        return v

    @field_validator("delta_precision")
    @classmethod
    def check_precision(cls, v: int) -> int:
        """Validate rounding precision."""
        if v < 0:
            raise ValueError("delta_precision cannot be negative")
        return v


def load_settings(config_file: Path | None = None) -> Settings:
    """Load settings from a YAML file, environment variables, and defaults."""
    try:
        if config_file:
            with open(config_file, encoding="utf-8") as f:
                yaml_settings = yaml.safe_load(f) or {}

            if not isinstance(yaml_settings, dict):
                raise ConfigurationError(
                    f"Config file must contain a mapping: {config_file}"
                )

            # Resolve data_dir relative to the config file
            data_dir = Path(yaml_settings.get("data_dir", "data")).expanduser()
            if not data_dir.is_absolute():
                data_dir = config_file.parent / data_dir
            yaml_settings["data_dir"] = str(data_dir)

            # Join a relative payload path with data_dir
            if (
                yaml_settings.get("telemetry_file")
                and not Path(yaml_settings["telemetry_file"]).is_absolute()
            ):
                yaml_settings["telemetry_file"] = str(
                    data_dir / yaml_settings["telemetry_file"]
                )

            return Settings(**yaml_settings)

        return Settings()

    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse config file: {e}") from e
