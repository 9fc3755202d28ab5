"""Enumerations shared by the credential layer."""

from enum import Enum


class CredentialSource(str, Enum):
    """Where an in-memory credential set was obtained.

    Purely observational: the value is shown by ``hetzner auth status`` and
    logged, but never persisted on its own.
    """

    FLAG = "flag"
    ENVIRONMENT = "environment"
    KEYCHAIN = "keychain"
    FILE = "file"
    NONE = "none"

    def __str__(self) -> str:
        return self.value

    @property
    def label(self) -> str:
        """Human-readable description of the source."""
        return {
            CredentialSource.FLAG: "command-line flags",
            CredentialSource.ENVIRONMENT: "environment variables",
            CredentialSource.KEYCHAIN: "keychain",
            CredentialSource.FILE: "config file",
            CredentialSource.NONE: "unknown",
        }[self]


class StoreDomain(str, Enum):
    """Credential domains persisted by the file store.

    The value is the file name inside the per-user config directory.
    """

    ROBOT = "config.json"
    CLOUD_CONTEXTS = "cloud-contexts.json"

    def __str__(self) -> str:
        return self.value
