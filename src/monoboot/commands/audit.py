"""Command: report declared ranges that disagree with actual versions."""

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
  monoboot audit
  monoboot audit --installed
  monoboot --json audit""",
)
@click.option(
    "--installed",
    is_flag=True,
    help="Also check external dependencies against copies under node_modules.",
)
@click.pass_obj
def audit(app: AppContext, installed: bool) -> None:
    """Warn where a declared range does not match a sibling's version."""
    app.emit(RepoService(app.settings).audit(installed=installed))
