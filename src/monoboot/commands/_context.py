"""AppContext: shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. Configures logging and centralizes result emission
(stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from monoboot.config.logging import configure_logging
from monoboot.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from monoboot.config.settings import MonoSettings
    from monoboot.services.result import ServiceResult
    from monoboot.services.scheduler import ProgressReporter


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: MonoSettings) -> None:
        self.settings = settings
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    def progress(self) -> ProgressReporter:
        """Rich progress bar, or a silent reporter for --quiet / --json."""
        from monoboot.services.scheduler import NullProgress

        if self.settings.quiet or self.settings.json_output:
            return NullProgress()
        from monoboot.output.progress import RichProgress

        return RichProgress()

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout. Warnings go to stderr so they don't
          pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = self.output_settings
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
        else:
            click.echo(output, err=True)
        if not settings.json_output:
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)
        if not result.ok:
            raise SystemExit(1)
