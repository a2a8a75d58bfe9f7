"""Settings management using Pydantic for type validation and configuration."""

import logging
import os
from pathlib import Path
from typing import Any, Optional, cast

import yaml
from pydantic import BaseModel, Field, PrivateAttr
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

CONFIG_FILE_ENV = "RRULEZONE_CONFIG_FILE"


class LoggingSettings(BaseModel):
    """Logging configuration settings."""

    # Console Logging
    console_enabled: bool = Field(default=True, description="Enable console logging")
    console_level: str = Field(
        default="WARNING",
        description="Console log level: DEBUG, VERBOSE, INFO, WARNING, ERROR, CRITICAL",
    )
    console_colors: bool = Field(
        default=True, description="Enable colored console output (auto-detected)"
    )

    # File Logging
    file_enabled: bool = Field(default=False, description="Enable file logging")
    file_level: str = Field(
        default="DEBUG",
        description="File log level: DEBUG, VERBOSE, INFO, WARNING, ERROR, CRITICAL",
    )
    file_directory: Optional[str] = Field(
        default=None, description="Custom log directory (defaults to config_dir/logs)"
    )
    file_prefix: str = Field(default="rrulezone", description="Log file prefix")
    max_log_files: int = Field(
        default=5, description="Rotated log files kept beside the active one"
    )
    max_log_bytes: int = Field(
        default=1_000_000, description="Size at which the active log file is rotated"
    )
    include_function_names: bool = Field(
        default=True, description="Include function names and line numbers in file logs"
    )

    # Third-party Libraries
    third_party_level: str = Field(
        default="WARNING", description="Log level for third-party libraries"
    )


class RRuleZoneSettings(BaseSettings):
    """Application settings with environment variable and YAML support.

    Priority: explicit keyword arguments > environment > YAML file > defaults.
    """

    # Private attributes
    _explicit_args: set = PrivateAttr(default_factory=set)
    _env_vars_set: set = PrivateAttr(default_factory=set)
    _config_file: Optional[Path] = PrivateAttr(default=None)

    # Expansion limits
    default_occurrence_limit: int = Field(
        default=1000,
        ge=1,
        description="Occurrence ceiling applied when a rule has neither COUNT nor UNTIL",
    )
    max_cursor_steps: int = Field(
        default=100_000,
        ge=1,
        description="Maximum cursor advances per expansion before giving up",
    )

    # Projection defaults
    default_target_zone: str = Field(
        default="UTC", description="Target zone used by the CLI when --zone is omitted"
    )

    # File Paths
    config_dir: Path = Field(default_factory=lambda: Path.home() / ".config" / "rrulezone")

    # Logging Configuration
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings, description="Logging settings"
    )

    model_config = SettingsConfigDict(
        env_prefix="RRULEZONE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    def __init__(self, config_file: Optional[Path] = None, **kwargs: Any) -> None:
        # Track which environment variables are set before calling parent
        env_vars_set = set()
        for key in os.environ:
            if key.upper().startswith("RRULEZONE_"):
                env_vars_set.add(key[len("RRULEZONE_") :].lower().split("__")[0])

        super().__init__(**kwargs)

        self._explicit_args = set(kwargs.keys())
        self._env_vars_set = env_vars_set

        self._load_yaml_config(config_file)

    def _find_config_file(self) -> Optional[Path]:
        """Find config file: environment override, project directory, then user home."""
        env_path = os.environ.get(CONFIG_FILE_ENV)
        if env_path:
            path = Path(env_path).expanduser()
            if path.exists():
                return path
            logger.warning(f"{CONFIG_FILE_ENV} points to missing file: {path}")
            return None

        project_config = Path.cwd() / "config" / "config.yaml"
        if project_config.exists():
            return project_config

        user_config = self.config_dir / "config.yaml"
        if user_config.exists():
            return user_config

        return None

    def _load_yaml_config(self, config_file: Optional[Path] = None) -> None:
        """Load configuration from YAML file if it exists."""
        path = Path(config_file) if config_file is not None else self._find_config_file()
        if path is None:
            return

        try:
            with path.open(encoding="utf-8") as f:
                config_data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Could not load YAML config from {path}: {e}")
            return

        if not isinstance(config_data, dict):
            logger.warning(f"Ignoring YAML config {path}: top level must be a mapping")
            return

        self._config_file = path
        self._load_expansion_config(config_data)
        self._load_logging_config(config_data)
        logger.debug(f"Loaded configuration from {path}")

    def _is_overridden(self, setting: str) -> bool:
        return setting in self._explicit_args or setting in self._env_vars_set

    def _load_expansion_config(self, config_data: dict) -> None:
        """Load expansion settings from YAML data."""
        expansion_config = config_data.get("expansion") or {}
        mapping = {
            "default_occurrence_limit": expansion_config.get("default_occurrence_limit"),
            "max_cursor_steps": expansion_config.get("max_cursor_steps"),
            "default_target_zone": expansion_config.get("default_target_zone"),
        }

        for setting, value in mapping.items():
            if value is not None and not self._is_overridden(setting):
                setattr(self, setting, value)

    def _load_logging_config(self, config_data: dict) -> None:
        """Load logging configuration from YAML data."""
        if "logging" not in config_data or self._is_overridden("logging"):
            return

        logging_config = config_data["logging"] or {}
        for setting in LoggingSettings.model_fields:
            if setting in logging_config:
                setattr(self.logging, setting, logging_config[setting])

    @property
    def config_file(self) -> Optional[Path]:
        """Path of the YAML file the settings were loaded from, if any."""
        return self._config_file

    @property
    def log_dir(self) -> Path:
        """Directory for log files."""
        if self.logging.file_directory:
            return Path(self.logging.file_directory)
        return self.config_dir / "logs"


# Global settings management
_settings_instance: Optional[RRuleZoneSettings] = None


def get_settings() -> RRuleZoneSettings:
    """Get the global settings instance, creating it lazily if needed.

    Returns:
        RRuleZoneSettings: The global settings instance
    """
    if globals()["_settings_instance"] is None:
        globals()["_settings_instance"] = RRuleZoneSettings()
    return cast(RRuleZoneSettings, globals()["_settings_instance"])


def reset_settings() -> None:
    """Reset the global settings instance (primarily for testing)."""
    globals()["_settings_instance"] = None
