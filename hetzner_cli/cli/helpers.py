"""Shared helpers for commands that need credentials.

This is the command dispatch boundary: ``handle_errors`` turns every
expected failure into ``✗ <message>`` on stderr and exit status 1, while a
cancelled prompt (the ``Cancelled`` result) exits with status 0.

Resource commands use :func:`robot_credentials` and :func:`cloud_token` to
obtain a secret, and :func:`resolve_id_or_name` to turn a user-supplied
name into a numeric ID.
"""

import functools
import re
import sys
from collections.abc import Callable, Iterable
from typing import Any, NoReturn, TypeVar

import click
import structlog
from pydantic import ValidationError

from hetzner_cli.credentials import (
    CANCELLED,
    Cancelled,
    ClickPrompter,
    CredentialError,
    CredentialServices,
    CredentialSet,
    Prompter,
    require_credentials,
)
from hetzner_cli.exceptions import AmbiguousReferenceError, HetznerCliError, ResourceNotFoundError

from .formatter import error

log = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

NUMERIC_ID = re.compile(r"[0-9]+")
STDIN_PASSWORD = "-"


def fail(message: str, suggestion: str | None = None) -> NoReturn:
    """Print an error in the CLI's fixed style and exit with status 1."""
    click.echo(error(message), err=True)
    if suggestion:
        click.echo(suggestion, err=True)
    sys.exit(1)


def exit_if_cancelled(result: object) -> None:
    """Exit with status 0 if an interactive prompt was cancelled."""
    if isinstance(result, Cancelled):
        log.debug("prompt_cancelled")
        sys.exit(0)


def handle_errors(func: F) -> F:
    """Map hetzner-cli errors raised by a command to the exit-code contract."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except CredentialError as e:
            log.debug("command_failed", error=type(e).__name__)
            fail(e.message, e.suggestion)
        except HetznerCliError as e:
            log.debug("command_failed", error=type(e).__name__)
            fail(e.message)
        except ValidationError as e:
            fail(_validation_message(e))
        except ValueError as e:
            fail(str(e))

    return wrapper  # type: ignore[return-value]


def _validation_message(e: ValidationError) -> str:
    first = e.errors()[0]
    field = ".".join(str(part) for part in first["loc"]) or "value"
    return f"Invalid {field}: {first['msg']}"


def get_services(ctx: click.Context) -> CredentialServices:
    return ctx.find_root().obj["services"]


def prompt_secret(message: str, prompter: Prompter | None = None) -> str | Cancelled:
    """Ask for a hidden, non-empty value; CANCELLED if the user aborts."""
    prompter = prompter or ClickPrompter()
    try:
        return prompter.secret(message)
    except click.Abort:
        return CANCELLED


def read_password_option(password: str | None) -> str | None:
    """Expand ``--password -`` to a password read from stdin.

    Keeps the password out of shell history, e.g.
    ``echo "$PASSWORD" | hetzner server list -u myuser -p -``.

    Raises:
        CredentialError: If stdin is empty or cannot be read
    """
    if password != STDIN_PASSWORD:
        return password

    try:
        value = sys.stdin.read().strip()
    except OSError as e:
        raise CredentialError("Failed to read password from stdin") from e

    if not value:
        raise CredentialError("Failed to read password from stdin")
    return value


def credentials_override(user: str | None, password: str | None) -> CredentialSet | None:
    """Build an explicit override from ``--user``/``--password``; both are required."""
    password = read_password_option(password)
    if user and password:
        return CredentialSet(user=user, password=password)
    return None


def robot_credentials(
    services: CredentialServices,
    user: str | None = None,
    password: str | None = None,
    prompter: Prompter | None = None,
) -> CredentialSet:
    """Credentials for a Robot API call, prompting for a login if none are stored.

    Exits with status 0 if the user cancels the login prompt.
    """
    override = credentials_override(user, password)
    result = require_credentials(services.resolver, prompter or ClickPrompter(), override)
    exit_if_cancelled(result)
    return result  # type: ignore[return-value]


def cloud_token(services: CredentialServices, token: str | None = None) -> str:
    """Token for a Cloud API call; raises NoCredentialsFoundError if none is configured."""
    return services.contexts.resolve_token(token)


def resolve_id_or_name(value: str, resource: str, lookup: Callable[[str], Iterable[Any]]) -> int:
    """Turn a user-supplied ID or name into a numeric resource ID.

    All-digit input is taken as an ID without calling ``lookup``. Otherwise
    ``lookup(name)`` must return exactly one match; matches may be mappings
    or objects with an ``id``.

    Args:
        value: ID or name given on the command line
        resource: Human-readable resource kind for error messages
        lookup: Returns the resources whose name equals the given name

    Returns:
        The numeric ID

    Raises:
        ResourceNotFoundError: If nothing matches
        AmbiguousReferenceError: If several resources match; lists their IDs
    """
    if NUMERIC_ID.fullmatch(value):
        return int(value)

    ids = [_resource_id(match) for match in lookup(value)]
    if not ids:
        raise ResourceNotFoundError(resource, value)
    if len(ids) > 1:
        raise AmbiguousReferenceError(resource, value, ids)
    return ids[0]


def _resource_id(match: Any) -> int:
    if isinstance(match, dict):
        return int(match["id"])
    return int(match.id)
