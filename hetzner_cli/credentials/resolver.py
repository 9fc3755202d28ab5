"""Robot credential resolution with automatic backend fallback."""

import json
from collections.abc import Callable
from pathlib import Path

import structlog

from hetzner_cli.enums import CredentialSource, StoreDomain

from .backend import KeychainBackend
from .environment_backend import ROBOT_PASSWORD_VAR, ROBOT_USER_VAR, EnvironmentBackend
from .exceptions import NoCredentialsFoundError
from .file_store import FileStore
from .keyring_backend import ROBOT_ACCOUNT
from .models import CredentialSet, ResolvedCredentials, StoredCredentials, parse_document

log = structlog.get_logger(__name__)

NO_CREDENTIALS_SUGGESTION = (
    "Use one of:\n"
    "  --user <user> --password <password>        Pass credentials directly\n"
    f"  {ROBOT_USER_VAR} / {ROBOT_PASSWORD_VAR}    Set environment variables\n"
    "  hetzner auth login                         Store credentials"
)


class CredentialResolver:
    """Resolve the Robot web-service credentials for an invocation.

    Backends are consulted in strict priority order and the first hit wins;
    lower-priority backends are never queried once a higher one succeeds:

    1. Explicit override (``--user``/``--password``)
    2. Environment (``HETZNER_ROBOT_USER`` + ``HETZNER_ROBOT_PASSWORD``)
    3. OS keychain (JSON ``{"user", "password"}`` under ``robot-api``)
    4. ``config.json`` in the config directory

    Example:
        >>> resolver = CredentialResolver(EnvironmentBackend(), KeyringBackend(), FileStore(path))
        >>> creds = resolver.resolve()
        >>> creds.source
        <CredentialSource.KEYCHAIN: 'keychain'>
    """

    def __init__(
        self,
        environment: EnvironmentBackend,
        keychain: KeychainBackend,
        file_store: FileStore,
    ) -> None:
        """Initialize credential resolver.

        Args:
            environment: Environment probe
            keychain: Keychain capability (real or fake)
            file_store: JSON file store for the config directory
        """
        self.environment = environment
        self.keychain = keychain
        self.file_store = file_store

    @property
    def config_path(self) -> Path:
        """File used when credentials are stored without the keychain."""
        return self.file_store.path_for(StoreDomain.ROBOT)

    def _sources(self) -> tuple[tuple[CredentialSource, Callable[[], CredentialSet | None]], ...]:
        return (
            (CredentialSource.ENVIRONMENT, self.from_environment),
            (CredentialSource.KEYCHAIN, self.from_keychain),
            (CredentialSource.FILE, self.from_file),
        )

    def from_environment(self) -> CredentialSet | None:
        return self.environment.read_robot_credentials()

    def from_keychain(self) -> CredentialSet | None:
        """Read credentials from the keychain; malformed entries count as absent."""
        stored = self.keychain.get(ROBOT_ACCOUNT)
        if not stored:
            return None

        try:
            data = json.loads(stored)
        except json.JSONDecodeError:
            log.warning("keychain_entry_malformed", account=ROBOT_ACCOUNT)
            return None

        document = parse_document(StoredCredentials, data)
        return document.to_credentials() if document else None

    def from_file(self) -> CredentialSet | None:
        document = parse_document(StoredCredentials, self.file_store.load(StoreDomain.ROBOT))
        return document.to_credentials() if document else None

    def lookup(self, override: CredentialSet | None = None) -> ResolvedCredentials | None:
        """Find credentials without raising.

        Args:
            override: Credentials given explicitly by the caller

        Returns:
            Credentials tagged with their source, or None if no backend has any
        """
        if override is not None:
            return ResolvedCredentials(user=override.user, password=override.password, source=CredentialSource.FLAG)

        for source, read in self._sources():
            credentials = read()
            if credentials is not None:
                log.debug("credentials_resolved", source=str(source))
                return ResolvedCredentials(user=credentials.user, password=credentials.password, source=source)

        log.debug("credentials_not_found")
        return None

    def resolve(self, override: CredentialSet | None = None) -> ResolvedCredentials:
        """Resolve credentials or fail with guidance.

        Args:
            override: Credentials given explicitly by the caller

        Returns:
            Credentials tagged with their source

        Raises:
            NoCredentialsFoundError: If no backend yields a credential set
        """
        resolved = self.lookup(override)
        if resolved is None:
            raise NoCredentialsFoundError("No Robot credentials found.", suggestion=NO_CREDENTIALS_SUGGESTION)
        return resolved

    def has_credentials(self, include_keychain: bool = True) -> bool:
        """Check whether any backend holds credentials.

        Args:
            include_keychain: Set to False for a cheap check that only looks
                at the environment and the config file
        """
        if self.from_environment() is not None or self.from_file() is not None:
            return True
        return include_keychain and self.from_keychain() is not None

    def save_to_keychain(self, credentials: CredentialSet) -> bool:
        """Store credentials in the keychain; returns False if it refused."""
        payload = json.dumps({"user": credentials.user, "password": credentials.password})
        return self.keychain.set(ROBOT_ACCOUNT, payload)

    def save_to_file(self, credentials: CredentialSet) -> None:
        self.file_store.save(StoreDomain.ROBOT, {"user": credentials.user, "password": credentials.password})

    def clear_file(self) -> None:
        self.file_store.clear(StoreDomain.ROBOT)

    def clear(self) -> None:
        """Erase stored credentials from every backend that might hold them.

        The keychain part is best-effort, so logging out never fails because
        the keychain is locked or missing. Environment variables belong to
        the caller's shell and are left alone.
        """
        self.keychain.delete(ROBOT_ACCOUNT)
        self.clear_file()
        log.info("credentials_cleared")
