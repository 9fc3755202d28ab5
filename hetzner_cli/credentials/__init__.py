"""Credential and cloud-context resolution for hetzner-cli.

Robot credentials (username/password) are resolved from, in order: explicit
flags, the ``HETZNER_ROBOT_USER``/``HETZNER_ROBOT_PASSWORD`` environment
variables, the OS keychain, and ``~/.hetzner-cli/config.json``.

Cloud API tokens are resolved from, in order: ``--token``, the
``HETZNER_CLOUD_TOKEN`` environment variable, and the active named context
(keychain first, inline token in ``cloud-contexts.json`` second).

Example:
    >>> from hetzner_cli.credentials import build_credential_services
    >>> services = build_credential_services(CliSettings.load())
    >>> token = services.contexts.resolve_token()
"""

from dataclasses import dataclass

from hetzner_cli.config.settings import CliSettings

from .backend import KeychainBackend
from .contexts import ContextRegistry
from .environment_backend import EnvironmentBackend
from .exceptions import (
    BackendNotAvailableError,
    CredentialError,
    NoCredentialsFoundError,
    ProfileNotFoundError,
)
from .file_store import FileStore
from .keyring_backend import KeyringBackend
from .login import CANCELLED, Cancelled, ClickPrompter, Prompter, prompt_login, require_credentials
from .models import ContextEntry, ContextSummary, CredentialSet, ResolvedCredentials
from .resolver import CredentialResolver


@dataclass
class CredentialServices:
    """The credential components of one CLI process, sharing one keychain."""

    environment: EnvironmentBackend
    keychain: KeychainBackend
    file_store: FileStore
    resolver: CredentialResolver
    contexts: ContextRegistry


def build_credential_services(
    settings: CliSettings,
    keychain: KeychainBackend | None = None,
    environment: EnvironmentBackend | None = None,
) -> CredentialServices:
    """Wire up the credential components for a process.

    Args:
        settings: Process settings (config directory, keychain service)
        keychain: Keychain capability; a KeyringBackend by default
        environment: Environment probe; reads os.environ by default
    """
    keychain = keychain if keychain is not None else KeyringBackend(service=settings.keychain_service)
    environment = environment if environment is not None else EnvironmentBackend()
    file_store = FileStore(settings.config_dir)
    return CredentialServices(
        environment=environment,
        keychain=keychain,
        file_store=file_store,
        resolver=CredentialResolver(environment, keychain, file_store),
        contexts=ContextRegistry(environment, keychain, file_store),
    )


__all__ = [
    "CANCELLED",
    "BackendNotAvailableError",
    "Cancelled",
    "ClickPrompter",
    "ContextEntry",
    "ContextRegistry",
    "ContextSummary",
    "CredentialError",
    "CredentialResolver",
    "CredentialServices",
    "CredentialSet",
    "EnvironmentBackend",
    "FileStore",
    "KeychainBackend",
    "KeyringBackend",
    "NoCredentialsFoundError",
    "ProfileNotFoundError",
    "Prompter",
    "ResolvedCredentials",
    "build_credential_services",
    "prompt_login",
    "require_credentials",
]
