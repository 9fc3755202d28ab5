"""Configuration system for hetzner-cli.

Key Components:
    - CliSettings: Process-wide settings read from ``HETZNER_CLI_*``
      environment variables (config directory, keychain service, log level)

Example:
    >>> from hetzner_cli.config import CliSettings
    >>> settings = CliSettings.load(log_level="DEBUG")
"""

from hetzner_cli.config.settings import CliSettings

__all__ = ["CliSettings"]
