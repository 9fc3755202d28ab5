"""CLI commands for hetzner-cli.

The CLI is built using Click with the main entry point ``hetzner``.

Key Commands:
    auth (hetzner_cli.cli.auth):
        Robot API login, logout and status. Login stores credentials in the
        OS keychain when available and offers to migrate credentials from
        the config file into it.

    cloud context (hetzner_cli.cli.context):
        Named Cloud API tokens: create, use, delete, list, active.

Module Structure:
    - auth.py: ``auth`` command group
    - context.py: ``cloud context`` command group
    - helpers.py: error handling boundary and credential helpers shared by
      resource commands
    - formatter.py: ``✓ ✗ ⚠ ℹ`` status lines and the context table
"""

from hetzner_cli.cli.auth import auth_group
from hetzner_cli.cli.context import context_group

__all__ = ["auth_group", "context_group"]
