"""Protocol for the OS keychain capability."""

from typing import Protocol


class KeychainBackend(Protocol):
    """Interface the resolver and context registry expect from a keychain.

    Every method is total: implementations report failures through return
    values and never raise. "Entry missing" and "keychain inaccessible" look
    the same to callers.
    """

    @property
    def name(self) -> str:
        """Backend identifier (e.g., 'keyring')."""
        ...

    @property
    def available(self) -> bool:
        """Whether the underlying capability could be loaded at all."""
        ...

    def probe(self) -> bool:
        """Check that the keychain is usable right now.

        Returns:
            False if the capability is missing, locked, or denies access
        """
        ...

    def get(self, account: str) -> str | None:
        """Retrieve a secret.

        Args:
            account: Account key within the application's service

        Returns:
            Secret value, or None if missing or inaccessible
        """
        ...

    def set(self, account: str, value: str) -> bool:
        """Store a secret.

        Args:
            account: Account key within the application's service
            value: Secret value to store

        Returns:
            True if the keychain accepted the value
        """
        ...

    def delete(self, account: str) -> None:
        """Remove a secret, ignoring every failure.

        Args:
            account: Account key within the application's service
        """
        ...
