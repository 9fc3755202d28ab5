"""Status-line and table formatting for credential commands."""

from collections.abc import Sequence

import click

from hetzner_cli.credentials.models import ContextSummary


def success(message: str) -> str:
    return f"{click.style('✓', fg='green')} {message}"


def error(message: str) -> str:
    return f"{click.style('✗', fg='red')} {message}"


def warning(message: str) -> str:
    return f"{click.style('⚠', fg='yellow')} {message}"


def info(message: str) -> str:
    return f"{click.style('ℹ', fg='blue')} {message}"


def format_context_list(contexts: Sequence[ContextSummary]) -> str:
    """Render contexts as a two-column table, marking the active one with ``*``."""
    if not contexts:
        return info("No contexts configured. Run: hetzner cloud context create")

    width = max(len("Name"), *(len(ctx.name) for ctx in contexts))
    lines = [
        click.style(f"{'Name':<{width}}  Active", bold=True),
        f"{'─' * width}  {'─' * len('Active')}",
    ]
    for ctx in contexts:
        marker = click.style("*", fg="green") if ctx.active else ""
        lines.append(f"{ctx.name:<{width}}  {marker}".rstrip())
    return "\n".join(lines)
