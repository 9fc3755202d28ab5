"""CLI commands for Robot API authentication.

This module provides the ``hetzner auth`` command group.

Credential sources, in priority order:
    - flags: ``--user``/``--password`` on Robot commands
    - environment: ``HETZNER_ROBOT_USER`` and ``HETZNER_ROBOT_PASSWORD``
    - keychain: OS-level secure storage, written by ``auth login``
    - file: ``~/.hetzner-cli/config.json`` (mode 0600), used when the
      keychain is unavailable

Commands:
    - login: Interactively configure credentials (offers keychain migration)
    - logout: Clear saved credentials from keychain and config file
    - status: Show which user is configured and where it came from

Example::

    $ hetzner auth login
    $ hetzner auth status
    $ hetzner auth logout
"""

import click

from hetzner_cli.credentials import ClickPrompter, prompt_login

from .formatter import info, success, warning
from .helpers import exit_if_cancelled, get_services, handle_errors


@click.group(name="auth")
def auth_group():
    """Manage Robot API authentication.

    Examples:

        # Store credentials (keychain when available, config file otherwise)
        hetzner auth login

        # Show where credentials are resolved from
        hetzner auth status

        # Remove stored credentials
        hetzner auth logout
    """
    pass


@auth_group.command(name="login")
@click.pass_context
@handle_errors
def login_command(ctx: click.Context):
    """Interactively configure credentials."""
    services = get_services(ctx)
    result = prompt_login(services.resolver, ClickPrompter())
    exit_if_cancelled(result)

    click.echo()
    click.echo(success("Authentication configured successfully."))


@auth_group.command(name="logout")
@click.pass_context
@handle_errors
def logout_command(ctx: click.Context):
    """Clear saved credentials from the keychain and the config file."""
    get_services(ctx).resolver.clear()
    click.echo(success("Credentials cleared."))


@auth_group.command(name="status")
@click.pass_context
@handle_errors
def status_command(ctx: click.Context):
    """Check authentication status."""
    services = get_services(ctx)
    resolved = services.resolver.lookup()

    if resolved is None:
        click.echo(warning("Not authenticated. Run: hetzner auth login"))
    else:
        click.echo(success(f"Authenticated as: {resolved.user}"))
        click.echo(info(f"Stored in: {resolved.source.label}"))

    if not services.keychain.available:
        keychain_state = "not installed (pip install keyring)"
    elif services.keychain.probe():
        keychain_state = "available"
    else:
        keychain_state = "not available"
    click.echo(info(f"Keychain: {keychain_state}"))
