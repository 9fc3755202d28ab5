"""Environment variable backend for CI/CD and scripted usage."""

import os
from collections.abc import Mapping

import structlog

from .models import CredentialSet

log = structlog.get_logger(__name__)

ROBOT_USER_VAR = "HETZNER_ROBOT_USER"
ROBOT_PASSWORD_VAR = "HETZNER_ROBOT_PASSWORD"
CLOUD_TOKEN_VAR = "HETZNER_CLOUD_TOKEN"


class EnvironmentBackend:
    """Read credentials from the process environment.

    This backend always wins over stored credentials, which makes it the
    natural choice for CI pipelines and containers where secrets are
    injected at runtime.

    The Robot pair only counts when both variables are set and non-empty;
    a partial pair is treated as absent.

    Example:
        >>> backend = EnvironmentBackend({"HETZNER_CLOUD_TOKEN": "abc"})
        >>> backend.read_cloud_token()
        'abc'
    """

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        """Initialize the backend.

        Args:
            environ: Mapping to read from; defaults to ``os.environ`` and is
                read on every call, never cached
        """
        self._environ = environ if environ is not None else os.environ

    @property
    def name(self) -> str:
        return "environment"

    def get(self, var_name: str) -> str | None:
        """Return a variable's value, treating empty strings as unset."""
        value = self._environ.get(var_name)
        return value or None

    def read_robot_credentials(self) -> CredentialSet | None:
        """Return the Robot credential pair if both halves are set."""
        user = self.get(ROBOT_USER_VAR)
        password = self.get(ROBOT_PASSWORD_VAR)
        if user and password:
            log.debug("environment_credentials_found", variables=[ROBOT_USER_VAR, ROBOT_PASSWORD_VAR])
            return CredentialSet(user=user, password=password)
        return None

    def read_cloud_token(self) -> str | None:
        """Return the Cloud API token from the environment, if set."""
        token = self.get(CLOUD_TOKEN_VAR)
        if token:
            log.debug("environment_token_found", variable=CLOUD_TOKEN_VAR)
        return token
