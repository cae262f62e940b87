"""Progress reporters for bootstrap runs, backed by ``rich.progress``."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

from monoboot.output.console import create_stderr_console


class RichProgress:
    """Progress bar with one tick per finished package."""

    def __init__(self, console: Console | None = None, *, description: str = "Bootstrapping") -> None:
        self._console = console or create_stderr_console()
        self._description = description
        self._progress: Progress | None = None
        self._task: TaskID | None = None

    def init(self, total: int) -> None:
        self._progress = Progress(
            TextColumn("[mono.op]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TextColumn("[mono.name]{task.fields[label]}"),
            TimeElapsedColumn(),
            console=self._console,
            transient=True,
        )
        self._task = self._progress.add_task(self._description, total=total, label="")
        self._progress.start()

    def tick(self, label: str) -> None:
        if self._progress is None or self._task is None:
            return
        self._progress.update(self._task, advance=1, label=escape(label))

    def terminate(self) -> None:
        if self._progress is None:
            return
        self._progress.stop()
        self._progress = None
        self._task = None

    @property
    def completed(self) -> int:
        """Ticks recorded so far (0 before ``init`` or after ``terminate``)."""
        if self._progress is None or self._task is None:
            return 0
        return int(self._progress.tasks[0].completed)
