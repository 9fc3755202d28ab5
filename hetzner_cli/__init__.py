"""hetzner-cli: command-line client for the Hetzner Robot and Cloud APIs.

This package holds the credential and context resolution layer shared by
every authenticated command.
"""

__version__ = "2.0.0"
