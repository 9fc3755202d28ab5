"""Custom exception hierarchy for hetzner-cli.

This module defines the structured exception hierarchy used by the
credential and profile resolution layer, so that the command dispatch
boundary can turn every expected failure into a one-line message and a
non-zero exit code.

Exception Hierarchy:
    HetznerCliError (base)
    ├── ConfigurationError
    ├── CredentialError
    │   ├── NoCredentialsFoundError
    │   ├── ProfileNotFoundError
    │   └── BackendNotAvailableError
    └── LookupReferenceError
        ├── ResourceNotFoundError
        └── AmbiguousReferenceError

BackendNotAvailableError is internal to the keychain adapter: it never
escapes to callers, who only see success flags or ``None``.

Example Usage:
    >>> from hetzner_cli.exceptions import ProfileNotFoundError
    >>> raise ProfileNotFoundError("staging")
"""

from collections.abc import Sequence


class HetznerCliError(Exception):
    """Base exception for all hetzner-cli errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        """Initialize exception.

        Args:
            message: Error message
        """
        self.message = message
        super().__init__(message)


class ConfigurationError(HetznerCliError):
    """Settings could not be loaded or are invalid."""

    pass


class CredentialError(HetznerCliError):
    """Credential-related errors.

    Base class for everything that goes wrong while looking up a secret.

    Attributes:
        message: Human-readable error description
        suggestion: Optional guidance telling the user what to do next
    """

    def __init__(self, message: str, suggestion: str | None = None) -> None:
        """Initialize exception.

        Args:
            message: Error message
            suggestion: Optional suggestion for resolution
        """
        self.suggestion = suggestion

        full_message = message
        if suggestion:
            full_message = f"{message}\n{suggestion}"

        super().__init__(full_message)
        # Keep the short form; the guidance is available via .suggestion
        self.message = message


class NoCredentialsFoundError(CredentialError):
    """No backend yielded a secret for the requested domain."""

    pass


class ProfileNotFoundError(CredentialError):
    """A named cloud context does not exist in the registry."""

    def __init__(self, name: str, suggestion: str | None = None) -> None:
        self.name = name
        super().__init__(f"Context '{name}' not found.", suggestion=suggestion)


class BackendNotAvailableError(CredentialError):
    """The OS keychain could not be loaded or refused the operation."""

    pass


class LookupReferenceError(HetznerCliError):
    """A human-given resource reference could not be turned into an ID."""

    pass


class ResourceNotFoundError(LookupReferenceError):
    """No resource matches the given name."""

    def __init__(self, resource: str, name: str) -> None:
        self.resource = resource
        self.name = name
        super().__init__(f"No {resource} found with name '{name}'.")


class AmbiguousReferenceError(LookupReferenceError):
    """More than one resource matches the given name.

    Attributes:
        resource: Human-readable resource kind (e.g. "server")
        name: The name that was looked up
        ids: Numeric identifiers of every match
    """

    def __init__(self, resource: str, name: str, ids: Sequence[int]) -> None:
        self.resource = resource
        self.name = name
        self.ids = list(ids)
        id_list = ", ".join(str(i) for i in self.ids)
        super().__init__(
            f"Multiple {resource}s found with name '{name}' (IDs: {id_list}). Use the ID instead."
        )
