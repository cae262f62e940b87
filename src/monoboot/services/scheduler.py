"""BootstrapScheduler: batched topological execution of package installs.

Packages are processed in waves. Each wave is every not-yet-completed
package whose intra-repo dependencies have all completed, computed as a
pure function of the completed set. A wave runs concurrently on a thread
pool shared by the whole run, so never more than ``concurrency`` installs
are in flight. Results are applied only at the wave barrier.

INVARIANT: A failed install lets its wave drain, then stops the run.
INVARIANT: An empty wave with packages left is a cycle and fails fast.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from concurrent.futures import Executor, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Protocol, TypeAlias

from monoboot.domain.package import Package
from monoboot.infrastructure.graph import PackageGraph
from monoboot.services.result import ErrorCode, ServiceError, ServiceResult

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 4

Installer: TypeAlias = Callable[[Package], ServiceResult]


class ProgressReporter(Protocol):
    """Observer notified at run start, per package completion, and run end."""

    def init(self, total: int) -> None: ...

    def tick(self, label: str) -> None: ...

    def terminate(self) -> None: ...


class NullProgress:
    """Progress reporter that records nothing."""

    def init(self, total: int) -> None:
        pass

    def tick(self, label: str) -> None:
        pass

    def terminate(self) -> None:
        pass


@dataclass(frozen=True)
class InstallOutcome:
    """Terminal state of one package's install step, reported by a worker."""

    name: str
    ok: bool
    error: ServiceError | None = None


class BootstrapScheduler:
    """Run *install* for every package, dependencies first.

    Parameters:
        graph: Graph built from exactly *packages* (the filtered subset).
        packages: Packages to bootstrap.
        install: Collaborator performing one package's install. Returns a
            ServiceResult; a raised exception counts as that package failing.
        concurrency: Global bound on installs in flight (>= 1).
        progress: Optional :class:`ProgressReporter`.
    """

    def __init__(
        self,
        graph: PackageGraph,
        packages: Sequence[Package],
        install: Installer,
        *,
        concurrency: int = DEFAULT_CONCURRENCY,
        progress: ProgressReporter | None = None,
    ) -> None:
        if concurrency < 1:
            msg = f"concurrency must be >= 1, got {concurrency}"
            raise ValueError(msg)
        missing = [pkg.name for pkg in packages if pkg.name not in graph]
        if missing:
            msg = f"packages not in graph: {', '.join(missing)}"
            raise ValueError(msg)
        self._graph = graph
        self._packages = list(packages)
        self._install = install
        self._concurrency = concurrency
        self._progress = progress or NullProgress()

    # ------------------------------------------------------------------
    # Wave computation
    # ------------------------------------------------------------------

    def next_wave(self, todo: Sequence[Package], done: Mapping[str, bool]) -> list[Package]:
        """Members of *todo* whose every graph dependency is in *done*."""
        wave: list[Package] = []
        for pkg in todo:
            if all(done.get(dep) for dep in self._graph[pkg.name].dependency_names):
                wave.append(pkg)
        return wave

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def run(self) -> ServiceResult:
        """Bootstrap every package; return success or the first failure."""
        todo: list[Package] = list(self._packages)
        done: dict[str, bool] = {}
        completed: list[str] = []
        waves: list[list[str]] = []
        total = len(todo)

        self._progress.init(total)
        try:
            with ThreadPoolExecutor(
                max_workers=self._concurrency,
                thread_name_prefix="monoboot-install",
            ) as pool:
                while todo:
                    wave = self.next_wave(todo, done)
                    if not wave:
                        return self._stalled(todo, completed, waves, total)

                    names = [pkg.name for pkg in wave]
                    waves.append(names)
                    logger.debug("Wave %d: %s", len(waves), ", ".join(names))
                    outcomes = self._run_wave(pool, wave)

                    # Apply the whole wave at the barrier.
                    finished = {outcome.name for outcome in outcomes}
                    todo = [pkg for pkg in todo if pkg.name not in finished]
                    failures: list[InstallOutcome] = []
                    for outcome in outcomes:
                        if outcome.ok:
                            done[outcome.name] = True
                            completed.append(outcome.name)
                        else:
                            failures.append(outcome)

                    if failures:
                        return self._failed(failures, completed, waves, total)
        finally:
            self._progress.terminate()

        return ServiceResult(
            ok=True,
            op="bootstrap",
            data=self._summary(completed, waves, total, processed=len(completed)),
        )

    def _run_wave(self, pool: Executor, wave: Sequence[Package]) -> list[InstallOutcome]:
        """Dispatch *wave* and block until every member reaches a terminal state."""
        futures = [pool.submit(self._install_one, pkg) for pkg in wave]
        outcomes: list[InstallOutcome] = []
        for future in as_completed(futures):
            outcome = future.result()
            self._progress.tick(outcome.name)
            outcomes.append(outcome)
        return outcomes

    def _install_one(self, pkg: Package) -> InstallOutcome:
        """Worker body: call the installer, never touch shared state."""
        try:
            result = self._install(pkg)
        except Exception as exc:
            logger.debug("Installer raised for %s", pkg.name, exc_info=True)
            return InstallOutcome(
                name=pkg.name,
                ok=False,
                error=ServiceError(
                    code=ErrorCode.INSTALL_FAILED,
                    message=f"{pkg.name}: {exc}",
                    detail={"package": pkg.name},
                ),
            )
        if result.ok:
            return InstallOutcome(name=pkg.name, ok=True)
        error = result.error or ServiceError(
            code=ErrorCode.INSTALL_FAILED,
            message=f"{pkg.name}: install failed",
        )
        return InstallOutcome(
            name=pkg.name,
            ok=False,
            error=error.model_copy(update={"detail": {**error.detail, "package": pkg.name}}),
        )

    # ------------------------------------------------------------------
    # Terminal results
    # ------------------------------------------------------------------

    @staticmethod
    def _summary(
        completed: list[str],
        waves: list[list[str]],
        total: int,
        *,
        processed: int,
    ) -> dict[str, object]:
        return {
            "total": total,
            "processed": processed,
            "completed": list(completed),
            "waves": [list(w) for w in waves],
        }

    def _failed(
        self,
        failures: list[InstallOutcome],
        completed: list[str],
        waves: list[list[str]],
        total: int,
    ) -> ServiceResult:
        first, *rest = failures
        for outcome in failures:
            logger.info("Install failed for %s", outcome.name)
        processed = sum(len(w) for w in waves)
        return ServiceResult(
            ok=False,
            op="bootstrap",
            data={
                **self._summary(completed, waves, total, processed=processed),
                "failed": [outcome.name for outcome in failures],
            },
            warnings=[self._outcome_error(o).message for o in rest],
            error=self._outcome_error(first),
        )

    @staticmethod
    def _outcome_error(outcome: InstallOutcome) -> ServiceError:
        return outcome.error or ServiceError(
            code=ErrorCode.INSTALL_FAILED,
            message=f"{outcome.name}: install failed",
            detail={"package": outcome.name},
        )

    def _stalled(
        self,
        todo: list[Package],
        completed: list[str],
        waves: list[list[str]],
        total: int,
    ) -> ServiceResult:
        stalled = [pkg.name for pkg in todo]
        cycles = self._graph.find_cycles(stalled)
        logger.info("No package can proceed; stalled: %s", ", ".join(stalled))
        if cycles:
            described = "; ".join(" <-> ".join(cycle) for cycle in cycles)
            message = f"Cyclic dependency between packages: {described}"
        else:
            message = f"Unsatisfiable dependency ordering for: {', '.join(stalled)}"
        return ServiceResult(
            ok=False,
            op="bootstrap",
            data=self._summary(completed, waves, total, processed=len(completed)),
            error=ServiceError(
                code=ErrorCode.CYCLIC_DEPENDENCY,
                message=message,
                detail={"packages": stalled, "cycles": cycles},
            ),
        )
