"""Command: install every package's dependencies in dependency order."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from monoboot.commands._base import MonoCommand
from monoboot.services.bootstrap import BootstrapService

if TYPE_CHECKING:
    from monoboot.commands._context import AppContext


@click.command(
    cls=MonoCommand,
    examples="""\
  monoboot bootstrap
  monoboot bootstrap --ignore 'example-*' --ignore '@acme/docs'
  monoboot bootstrap --concurrency 1
  monoboot --json bootstrap""",
)
@click.option(
    "--ignore",
    "ignore",
    multiple=True,
    help="Skip packages whose name matches this glob (repeatable).",
)
@click.option(
    "--concurrency",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum installs running at once.",
)
@click.pass_obj
def bootstrap(app: AppContext, ignore: tuple[str, ...], concurrency: int | None) -> None:
    """Install package dependencies, siblings first."""
    service = BootstrapService(app.settings)
    app.emit(
        service.bootstrap(
            ignore=list(ignore) or None,
            concurrency=concurrency,
            progress=app.progress(),
        )
    )
