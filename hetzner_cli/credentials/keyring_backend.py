"""OS-level keyring backend using system credential stores.

Platform Support:
- Linux: Secret Service API (GNOME Keyring, KWallet)
- macOS: Keychain
- Windows: Windows Credential Locker

The ``keyring`` package is imported on first use, and only once per
backend instance. If that import fails, or the platform keyring is locked
or refuses access, every operation degrades to "unavailable": reads return
None, writes return False, deletes do nothing.
"""

import importlib
from collections.abc import Callable
from types import ModuleType
from typing import Any

import structlog

from hetzner_cli.config.settings import DEFAULT_KEYCHAIN_SERVICE

from .exceptions import BackendNotAvailableError

log = structlog.get_logger(__name__)

ROBOT_ACCOUNT = "robot-api"
CONTEXT_ACCOUNT_PREFIX = "cloud-token:"


def context_account(name: str) -> str:
    """Keychain account holding the token of a cloud context.

    The prefix keeps context entries from ever colliding with the Robot
    account, whatever the context is called.
    """
    return f"{CONTEXT_ACCOUNT_PREFIX}{name}"


def _import_keyring() -> ModuleType:
    return importlib.import_module("keyring")


class KeyringBackend:
    """OS-level secret storage using the system keyring.

    One instance is created per process and handed to the resolver and the
    context registry. Tests substitute an in-memory fake implementing
    :class:`~hetzner_cli.credentials.backend.KeychainBackend`.

    Example:
        >>> backend = KeyringBackend()
        >>> if backend.set('robot-api', '{"user": "u", "password": "p"}'):
        ...     stored = backend.get('robot-api')
        >>> backend.delete('robot-api')
    """

    def __init__(
        self,
        service: str = DEFAULT_KEYCHAIN_SERVICE,
        loader: Callable[[], ModuleType] = _import_keyring,
    ) -> None:
        """Initialize keyring backend.

        Args:
            service: Service identifier shared by every entry of the application
            loader: Callable returning the keyring module; called at most once
        """
        self.service = service
        self._loader = loader
        self._module: ModuleType | None = None
        self._load_attempted = False

    @property
    def name(self) -> str:
        """Get backend identifier.

        Returns:
            Backend name constant "keyring"
        """
        return "keyring"

    @property
    def available(self) -> bool:
        """Check if the keyring package could be loaded.

        A loaded package does not guarantee a usable keychain; see probe().
        """
        return self._load() is not None

    def _load(self) -> ModuleType | None:
        if self._load_attempted:
            return self._module

        self._load_attempted = True
        try:
            self._module = self._loader()
        except Exception as e:
            log.debug("keychain_load_failed", error=str(e))
            self._module = None
        return self._module

    def _call(self, operation: str, account: str, *args: str) -> Any:
        """Run a keyring function, coercing every failure to BackendNotAvailableError."""
        module = self._load()
        if module is None:
            raise BackendNotAvailableError(
                "Keychain backend is not available",
                suggestion="Install keyring: pip install keyring",
            )

        try:
            return getattr(module, operation)(self.service, account, *args)
        except Exception as e:
            raise BackendNotAvailableError(f"Keychain {operation} failed: {e}") from e

    def probe(self) -> bool:
        """Perform a harmless read to check the keychain is usable right now."""
        try:
            self._call("get_password", ROBOT_ACCOUNT)
            return True
        except BackendNotAvailableError as e:
            log.debug("keychain_unavailable", reason=e.message)
            return False

    def get(self, account: str) -> str | None:
        """Retrieve a secret from the OS keyring.

        Args:
            account: Account key (e.g. 'robot-api' or 'cloud-token:prod')

        Returns:
            Secret value, or None if missing or the keychain is inaccessible
        """
        try:
            value = self._call("get_password", account)
        except BackendNotAvailableError as e:
            log.debug("keychain_get_failed", account=account, reason=e.message)
            return None

        if value is not None:
            log.debug("keychain_entry_found", account=account)
        return value

    def set(self, account: str, value: str) -> bool:
        """Store a secret in the OS keyring.

        Args:
            account: Account key
            value: Secret value

        Returns:
            True if stored, False on any failure (including an empty value)
        """
        if not value:
            log.debug("keychain_set_skipped", account=account, reason="empty value")
            return False

        try:
            self._call("set_password", account, value)
        except BackendNotAvailableError as e:
            log.info("keychain_set_failed", account=account, reason=e.message)
            return False

        log.info("keychain_entry_stored", account=account)
        return True

    def delete(self, account: str) -> None:
        """Delete a secret from the OS keyring, best-effort.

        Missing entries and keychain failures are ignored, so clearing a
        secret never fails a logout or context deletion.

        Args:
            account: Account key
        """
        try:
            self._call("delete_password", account)
            log.info("keychain_entry_deleted", account=account)
        except BackendNotAvailableError as e:
            log.debug("keychain_delete_ignored", account=account, reason=e.message)
