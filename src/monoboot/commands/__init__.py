"""Subcommand modules for monoboot.

Provides register_commands() which uses deferred imports to keep
``monoboot --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from monoboot.commands.audit import audit
    from monoboot.commands.bootstrap import bootstrap
    from monoboot.commands.graph import graph
    from monoboot.commands.ls import ls

    cli.add_command(bootstrap)
    cli.add_command(ls)
    cli.add_command(graph)
    cli.add_command(audit)
