"""Command: list packages in the repo."""

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
  monoboot ls
  monoboot --json ls""",
)
@click.pass_obj
def ls(app: AppContext) -> None:
    """List packages with their versions."""
    app.emit(RepoService(app.settings).list_packages())
