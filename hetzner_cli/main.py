"""CLI entry point for hetzner-cli."""

import sys

import click
import structlog

from hetzner_cli.cli.auth import auth_group
from hetzner_cli.cli.context import context_group
from hetzner_cli.cli.formatter import error
from hetzner_cli.config.settings import CliSettings
from hetzner_cli.credentials import build_credential_services
from hetzner_cli.exceptions import ConfigurationError
from hetzner_cli.utils.logging_config import configure_logging

log = structlog.get_logger(__name__)


@click.group()
@click.option(
    "--log-level",
    default=None,
    help="Logging level (default: WARNING, or HETZNER_CLI_LOG_LEVEL)",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """hetzner: command-line client for the Hetzner Robot and Cloud APIs."""
    try:
        settings = CliSettings.load(log_level=log_level)
    except ConfigurationError as e:
        click.echo(error(e.message), err=True)
        sys.exit(1)

    configure_logging(settings.log_level)

    # Callers (and tests) may inject pre-built services through obj
    ctx.ensure_object(dict)
    ctx.obj.setdefault("settings", settings)
    if "services" not in ctx.obj:
        ctx.obj["services"] = build_credential_services(settings)
    log.debug("cli_started", command=ctx.invoked_subcommand, config_dir=str(settings.config_dir))


@cli.group(name="cloud")
def cloud_group() -> None:
    """Hetzner Cloud API commands."""
    pass


cli.add_command(auth_group)
cloud_group.add_command(context_group)


if __name__ == "__main__":
    cli()
