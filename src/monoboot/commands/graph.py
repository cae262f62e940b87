"""Command: show intra-repo dependency edges."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from monoboot.commands._base import MonoCommand
from monoboot.services.repo import RepoService

if TYPE_CHECKING:
    from monoboot.commands._context import AppContext


@click.command(
    cls=MonoCommand,
    examples="""\
  monoboot graph
  monoboot graph @acme/core
  monoboot --json graph""",
)
@click.argument("name", required=False)
@click.pass_obj
def graph(app: AppContext, name: str | None) -> None:
    """Show which sibling packages each package depends on."""
    app.emit(RepoService(app.settings).graph(name))
