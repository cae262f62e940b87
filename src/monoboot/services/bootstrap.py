"""BootstrapService: discover, filter, graph, then schedule installs.

The install collaborator for each package creates its ``node_modules``
directory and runs the configured npm client there.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from monoboot.domain.package import Package
from monoboot.infrastructure.graph import PackageGraph
from monoboot.infrastructure.npm import NpmClient, NpmError
from monoboot.infrastructure.repository import filter_packages
from monoboot.services.audit import DependencyAuditor
from monoboot.services.base import BaseService
from monoboot.services.result import ErrorCode, ServiceError, ServiceResult
from monoboot.services.scheduler import BootstrapScheduler, Installer, ProgressReporter

logger = logging.getLogger(__name__)


class NpmInstaller:
    """Install collaborator: ``mkdir -p node_modules`` then ``<client> install``."""

    def __init__(self, client: NpmClient) -> None:
        self._client = client

    def __call__(self, pkg: Package) -> ServiceResult:
        try:
            pkg.install_root.mkdir(parents=True, exist_ok=True)
            self._client.install_in_dir(pkg.location)
        except NpmError as exc:
            return ServiceResult(
                ok=False,
                op="install",
                error=ServiceError(
                    code=ErrorCode.INSTALL_FAILED,
                    message=f"{pkg.name}: {exc}",
                    detail={
                        "package": pkg.name,
                        "returncode": exc.returncode,
                        "stderr": exc.stderr_tail,
                    },
                ),
            )
        except OSError as exc:
            return ServiceResult(
                ok=False,
                op="install",
                error=ServiceError(
                    code=ErrorCode.INSTALL_FAILED,
                    message=f"{pkg.name}: could not create {pkg.install_root}: {exc}",
                    detail={"package": pkg.name},
                ),
            )
        return ServiceResult(ok=True, op="install", data={"package": pkg.name})


class BootstrapService(BaseService):
    """Install every (non-ignored) package's dependencies in dependency order."""

    def bootstrap(
        self,
        *,
        ignore: Sequence[str] | None = None,
        concurrency: int | None = None,
        progress: ProgressReporter | None = None,
        install: Installer | None = None,
    ) -> ServiceResult:
        """Bootstrap the repo.

        Args:
            ignore: Package-name globs to skip; defaults to ``[bootstrap] ignore``.
            concurrency: Max installs in flight; defaults to ``[bootstrap] concurrency``.
            progress: Progress reporter for per-package ticks.
            install: Install collaborator; defaults to :class:`NpmInstaller`.
        """
        cfg = self._settings.bootstrap
        warnings: list[str] = []
        packages = self._discover(warnings)
        if not packages:
            return ServiceResult(
                ok=False,
                op="bootstrap",
                warnings=warnings,
                error=ServiceError(
                    code=ErrorCode.NO_PACKAGES,
                    message=f"No packages found under {self._settings.repo_root}",
                    detail={"globs": list(self._settings.packages.globs)},
                ),
            )

        todo = filter_packages(packages, cfg.ignore if ignore is None else ignore)
        graph = PackageGraph(todo)
        warnings.extend(DependencyAuditor(warn=logger.debug).audit(todo).warnings)

        if install is None:
            install = NpmInstaller(NpmClient(cfg.npm_client, cfg.npm_client_args))

        logger.info("Linking all dependencies for %d packages", len(todo))
        scheduler = BootstrapScheduler(
            graph,
            todo,
            install,
            concurrency=cfg.concurrency if concurrency is None else concurrency,
            progress=progress,
        )
        result = scheduler.run()

        data = {**result.data, "ignored": len(packages) - len(todo)}
        if result.ok:
            data["message"] = f"Successfully bootstrapped {len(todo)} packages."
        return result.model_copy(
            update={"data": data, "warnings": [*warnings, *result.warnings]},
        )
