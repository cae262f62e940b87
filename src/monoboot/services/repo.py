"""RepoService: read-only views of the monorepo: packages, graph, audit."""

from __future__ import annotations

from typing import Any

from monoboot.infrastructure.graph import PackageGraph
from monoboot.services.audit import DependencyAuditor
from monoboot.services.base import BaseService
from monoboot.services.result import ErrorCode, ServiceError, ServiceResult


class RepoService(BaseService):
    """Inspect discovered packages without installing anything."""

    def list_packages(self) -> ServiceResult:
        warnings: list[str] = []
        packages = self._discover(warnings)
        items = [
            {
                "name": pkg.name,
                "version": pkg.version,
                "location": str(pkg.location.relative_to(self._settings.repo_root)),
            }
            for pkg in packages
        ]
        return ServiceResult(
            ok=True,
            op="ls",
            data={"count": len(items), "items": items},
            warnings=warnings,
        )

    def graph(self, name: str | None = None) -> ServiceResult:
        """Intra-repo edges for every package, or for *name* alone.

        Cycles are reported as warnings; they only become errors when a
        bootstrap actually stalls on them.
        """
        warnings: list[str] = []
        graph = PackageGraph(self._discover(warnings))

        if name is not None:
            node = graph.get(name)
            if node is None:
                return ServiceResult(
                    ok=False,
                    op="graph",
                    warnings=warnings,
                    error=ServiceError(
                        code=ErrorCode.NOT_FOUND,
                        message=f"Package '{name}' not found in repo",
                    ),
                )
            return ServiceResult(
                ok=True,
                op="graph",
                data={
                    "name": node.name,
                    "version": node.package.version,
                    "dependencies": list(node.dependency_names),
                    "dependents": graph.dependents_of(node.name),
                },
                warnings=warnings,
            )

        items: list[dict[str, Any]] = [
            {"name": node.name, "dependencies": list(node.dependency_names)} for node in graph
        ]
        cycles = graph.find_cycles()
        warnings.extend(f"Dependency cycle: {' <-> '.join(cycle)}" for cycle in cycles)
        return ServiceResult(
            ok=True,
            op="graph",
            data={
                "count": len(items),
                "edges": sum(len(item["dependencies"]) for item in items),
                "items": items,
                "cycles": cycles,
            },
            warnings=warnings,
        )

    def audit(self, *, installed: bool = False) -> ServiceResult:
        """Advisory version-mismatch report. Always ok.

        Siblings are always compared; *installed* adds the copies already
        present in each package's ``node_modules``.
        """
        warnings: list[str] = []
        packages = self._discover(warnings)
        result = DependencyAuditor(warn=lambda _msg: None).audit(packages, installed=installed)
        return result.model_copy(update={"warnings": [*warnings, *result.warnings]})
