"""
Configuration system using Pydantic for type-safe settings management.

Settings are read from ``HETZNER_CLI_*`` environment variables. They only
control where credentials are kept and how chatty the CLI is; the secrets
themselves are resolved by :mod:`hetzner_cli.credentials`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from hetzner_cli.exceptions import ConfigurationError

DEFAULT_CONFIG_DIR = Path.home() / ".hetzner-cli"
DEFAULT_KEYCHAIN_SERVICE = "hetzner-cli"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class CliSettings(BaseSettings):
    """Process-wide settings for the hetzner CLI.

    Example:
        >>> settings = CliSettings.load()
        >>> settings.config_dir
        PosixPath('/home/alice/.hetzner-cli')
    """

    model_config = SettingsConfigDict(
        env_prefix="HETZNER_CLI_",
        case_sensitive=False,
        extra="ignore",
    )

    config_dir: Path = Field(
        default=DEFAULT_CONFIG_DIR,
        description="Per-user directory holding config.json and cloud-contexts.json",
    )
    keychain_service: str = Field(
        default=DEFAULT_KEYCHAIN_SERVICE,
        min_length=1,
        description="Service identifier for all OS keychain entries",
    )
    log_level: LogLevel = Field(default="WARNING", description="Minimum log level")

    @field_validator("config_dir", mode="after")
    @classmethod
    def expand_config_dir(cls, value: Path) -> Path:
        """Expand ``~`` so the directory can be given as ``~/somewhere``."""
        return value.expanduser()

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.upper()
        return value

    @classmethod
    def load(cls, **overrides: object) -> CliSettings:
        """Build settings from the environment plus explicit overrides.

        Args:
            **overrides: Values that take precedence over the environment
                (e.g. ``log_level`` from the ``--log-level`` flag)

        Returns:
            CliSettings instance

        Raises:
            ConfigurationError: If a setting has an invalid value
        """
        values = {key: value for key, value in overrides.items() if value is not None}
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid hetzner-cli settings: {e}") from e
