"""Credential-related exceptions.

This module re-exports credential exceptions from hetzner_cli.exceptions
so that credential code can import them from its own package.
"""

from hetzner_cli.exceptions import (
    BackendNotAvailableError,
    CredentialError,
    NoCredentialsFoundError,
    ProfileNotFoundError,
)

__all__ = [
    "CredentialError",
    "NoCredentialsFoundError",
    "ProfileNotFoundError",
    "BackendNotAvailableError",
]
