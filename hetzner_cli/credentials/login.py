"""Interactive Robot login and file-to-keychain migration.

The flow is linear:

1. If the keychain is usable and ``config.json`` already holds credentials,
   offer to migrate them. On success the file is cleared and the existing
   credentials are returned without further prompting; if the keychain
   refuses the write, the file is left untouched and the flow continues.
2. Prompt for username and password (both required).
3. Offer to save them (keychain when usable, otherwise the config file).
4. Persist to the keychain, falling back to the config file.

Aborting any prompt (Ctrl-C, EOF) ends the flow with :data:`CANCELLED`
instead of raising, so the command dispatch boundary can exit with status
0 rather than treating the abort as a failure.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

import click
import structlog

from .models import CredentialSet
from .resolver import CredentialResolver

log = structlog.get_logger(__name__)

LOGIN_BANNER = """\
Hetzner Robot API Authentication
────────────────────────────────────────

To get your API credentials:
1. Go to https://robot.hetzner.com
2. Navigate to: Settings > Web service settings
3. Create a new web service user

Note: This is separate from your main Hetzner login.
"""


@dataclass(frozen=True)
class Cancelled:
    """The user aborted an interactive prompt."""


CANCELLED = Cancelled()


class Prompter(Protocol):
    """Terminal interaction used by the login flow.

    Implementations raise :class:`click.Abort` when the user aborts.
    """

    def text(self, message: str) -> str: ...

    def secret(self, message: str) -> str: ...

    def confirm(self, message: str, default: bool = True) -> bool: ...

    def echo(self, message: str = "") -> None: ...


class ClickPrompter:
    """Prompter backed by click's prompt helpers.

    ``click.prompt`` re-asks on empty input when there is no default, and
    raises ``click.Abort`` on Ctrl-C or end of input.
    """

    def text(self, message: str) -> str:
        return click.prompt(message, type=str)

    def secret(self, message: str) -> str:
        return click.prompt(message, type=str, hide_input=True)

    def confirm(self, message: str, default: bool = True) -> bool:
        return click.confirm(message, default=default)

    def echo(self, message: str = "") -> None:
        click.echo(message)


def _ask_required(ask: Callable[[str], str], prompter: Prompter, message: str, field: str) -> str:
    while True:
        value = ask(message)
        if value:
            return value
        prompter.echo(f"{field} is required")


def prompt_login(resolver: CredentialResolver, prompter: Prompter) -> CredentialSet | Cancelled:
    """Run the interactive login flow.

    Args:
        resolver: Resolver whose keychain and config file receive the result
        prompter: Terminal interaction

    Returns:
        The entered (or migrated) credentials, or CANCELLED if the user
        aborted a prompt
    """
    try:
        return _run_login(resolver, prompter)
    except click.Abort:
        log.debug("login_cancelled")
        return CANCELLED


def _run_login(resolver: CredentialResolver, prompter: Prompter) -> CredentialSet:
    prompter.echo()
    prompter.echo(LOGIN_BANNER)

    keychain_available = resolver.keychain.probe()
    existing = resolver.from_file()

    if keychain_available and existing is not None:
        if prompter.confirm("Migrate existing credentials to secure keychain storage?", default=True):
            if resolver.save_to_keychain(existing):
                resolver.clear_file()
                prompter.echo()
                prompter.echo("Credentials migrated to keychain.")
                log.info("credentials_migrated", source="file", target="keychain")
                return existing
            # The file copy stays so the secret remains recoverable
            log.warning("credentials_migration_failed")
            prompter.echo("Could not write to the keychain; keeping the config file.")

    user = _ask_required(prompter.text, prompter, "Web service username", "Username")
    password = _ask_required(prompter.secret, prompter, "Web service password", "Password")
    credentials = CredentialSet(user=user, password=password)

    if keychain_available:
        save_message = "Save credentials to secure keychain?"
    else:
        save_message = f"Save credentials to {resolver.config_path}?"

    if not prompter.confirm(save_message, default=True):
        return credentials

    saved_to_keychain = keychain_available and resolver.save_to_keychain(credentials)
    prompter.echo()
    if saved_to_keychain:
        prompter.echo("Credentials saved to keychain.")
    else:
        resolver.save_to_file(credentials)
        prompter.echo("Credentials saved to config file.")

    log.info("credentials_saved", target="keychain" if saved_to_keychain else "file")
    return credentials


def require_credentials(
    resolver: CredentialResolver,
    prompter: Prompter,
    override: CredentialSet | None = None,
) -> CredentialSet | Cancelled:
    """Resolve credentials, falling back to the interactive login flow.

    Args:
        resolver: Credential resolver
        prompter: Terminal interaction used if nothing is stored
        override: Credentials given explicitly by the caller

    Returns:
        Credentials, or CANCELLED if the user aborted the login prompt
    """
    resolved = resolver.lookup(override)
    if resolved is not None:
        return resolved.credentials()
    return prompt_login(resolver, prompter)
