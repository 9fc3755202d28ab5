"""CLI commands for named Cloud API contexts.

This module provides the ``hetzner cloud context`` command group. Each
context holds one Cloud API token, stored in the OS keychain when possible
and inline in ``~/.hetzner-cli/cloud-contexts.json`` otherwise. Exactly one
context is active at a time; Cloud commands use its token unless
``--token`` or ``HETZNER_CLOUD_TOKEN`` is given.

Example::

    $ hetzner cloud context create prod
    $ hetzner cloud context create staging --token "$TOKEN"
    $ hetzner cloud context use staging
    $ hetzner cloud context list
    $ hetzner cloud context delete prod
"""

import click

from hetzner_cli.enums import StoreDomain

from .formatter import format_context_list, success, warning
from .helpers import exit_if_cancelled, get_services, handle_errors, prompt_secret


@click.group(name="context")
def context_group():
    """Cloud context (token) management."""
    pass


@context_group.command(name="create")
@click.argument("name")
@click.option("--token", "-t", help="API token (will prompt if not provided)")
@click.pass_context
@handle_errors
def create_context(ctx: click.Context, name: str, token: str | None):
    """Create a new cloud context.

    The first context created becomes the active one.
    """
    registry = get_services(ctx).contexts

    if not token:
        entered = prompt_secret(f"Enter Hetzner Cloud API token for '{name}'")
        exit_if_cancelled(entered)
        token = str(entered)

    stored_in_keychain = registry.create(name, token)
    if not stored_in_keychain:
        path = registry.file_store.path_for(StoreDomain.CLOUD_CONTEXTS)
        click.echo(
            warning(f"System keychain unavailable. Cloud token stored in plaintext at {path}"),
            err=True,
        )

    if registry.active() == name:
        click.echo(success(f"Context '{name}' created and activated."))
    else:
        click.echo(success(f"Context '{name}' created."))


@context_group.command(name="use")
@click.argument("name")
@click.pass_context
@handle_errors
def use_context(ctx: click.Context, name: str):
    """Switch to a different cloud context."""
    get_services(ctx).contexts.use(name)
    click.echo(success(f"Switched to context '{name}'."))


@context_group.command(name="delete")
@click.argument("name")
@click.pass_context
@handle_errors
def delete_context(ctx: click.Context, name: str):
    """Delete a cloud context."""
    registry = get_services(ctx).contexts
    registry.delete(name)
    click.echo(success(f"Context '{name}' deleted."))

    active = registry.active()
    if active is not None:
        click.echo(f"Active context: {active}")


@context_group.command(name="list")
@click.pass_context
@handle_errors
def list_contexts(ctx: click.Context):
    """List all cloud contexts."""
    click.echo(format_context_list(get_services(ctx).contexts.list()))


@context_group.command(name="active")
@click.pass_context
@handle_errors
def active_context(ctx: click.Context):
    """Show the active cloud context."""
    active = get_services(ctx).contexts.active()
    if active:
        click.echo(success(f"Active context: {active}"))
    else:
        click.echo(warning("No active context. Run: hetzner cloud context create"))


context_group.add_command(delete_context, name="rm")
context_group.add_command(list_contexts, name="ls")
