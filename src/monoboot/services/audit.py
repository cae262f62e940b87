"""DependencyAuditor: advisory version-mismatch warnings.

Compares what a package declares against the version actually present,
either a sibling in the repo or a copy installed under ``node_modules``.
Mismatches are warnings only and never block a bootstrap.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Sequence
from enum import StrEnum

from monoboot.domain.dependencies import LocalLink, SemverRange
from monoboot.domain.package import MANIFEST_FILENAME, Package
from monoboot.domain.versions import is_compatible
from monoboot.services.result import ServiceResult

logger = logging.getLogger(__name__)


class AuditStatus(StrEnum):
    """Outcome of checking one declared dependency."""

    SATISFIED = "satisfied"
    MISMATCHED = "mismatched"
    NOT_APPLICABLE = "not_applicable"
    MISSING = "missing"


def mismatch_message(pkg: Package, dependency: str, expected: str, actual: str) -> str:
    return (
        f'Version mismatch inside "{pkg.name}". '
        f'Depends on "{dependency}@{expected}" '
        f'instead of "{dependency}@{actual}".'
    )


class DependencyAuditor:
    """Check declared ranges against actual versions.

    Args:
        warn: Receives each mismatch message. Defaults to the module logger.
    """

    def __init__(self, warn: Callable[[str], None] | None = None) -> None:
        self._warn = warn or logger.warning

    def check(self, pkg: Package, dependency: str, actual_version: str) -> AuditStatus:
        """Test *pkg*'s declaration for *dependency* against *actual_version*."""
        spec = pkg.all_dependencies.get(dependency)
        if spec is None:
            return AuditStatus.NOT_APPLICABLE
        if isinstance(spec, LocalLink) or is_compatible(actual_version, spec.range):
            return AuditStatus.SATISFIED
        self._warn(mismatch_message(pkg, dependency, spec.raw, actual_version))
        return AuditStatus.MISMATCHED

    def installed_version(self, pkg: Package, dependency: str) -> str | None:
        """Version of *dependency* under *pkg*'s ``node_modules``, or None if absent."""
        manifest = pkg.install_root / dependency / MANIFEST_FILENAME
        try:
            data = json.loads(manifest.read_text(encoding="utf-8"))
            return str(data["version"])
        except (OSError, ValueError, KeyError, TypeError):
            logger.debug("No installed manifest for %s at %s", dependency, manifest)
            return None

    def check_installed(self, pkg: Package, dependency: str) -> AuditStatus:
        """Check the copy of *dependency* installed in *pkg*'s ``node_modules``."""
        if dependency not in pkg.all_dependencies:
            return AuditStatus.NOT_APPLICABLE
        version = self.installed_version(pkg, dependency)
        if version is None:
            return AuditStatus.MISSING
        return self.check(pkg, dependency, version)

    def audit(self, packages: Sequence[Package], *, installed: bool = False) -> ServiceResult:
        """Check every sibling dependency declared within *packages*.

        With *installed*, external ranged dependencies are also checked
        against the copies under each package's ``node_modules``; those
        with no installed copy are listed under ``missing``.
        """
        by_name = {pkg.name: pkg for pkg in packages}
        warnings: list[str] = []
        mismatches: list[dict[str, str]] = []
        missing: list[dict[str, str]] = []
        checked = 0

        for pkg in packages:
            for dep_name, spec in pkg.all_dependencies.items():
                sibling = by_name.get(dep_name)
                if sibling is not None:
                    actual: str | None = sibling.version
                    source = "sibling"
                elif installed and isinstance(spec, SemverRange):
                    actual = self.installed_version(pkg, dep_name)
                    source = "installed"
                else:
                    continue
                if actual is None:
                    missing.append({"package": pkg.name, "dependency": dep_name})
                    continue
                checked += 1
                if self.check(pkg, dep_name, actual) is AuditStatus.MISMATCHED:
                    warnings.append(mismatch_message(pkg, dep_name, spec.raw, actual))
                    mismatches.append(
                        {
                            "package": pkg.name,
                            "dependency": dep_name,
                            "expected": spec.raw,
                            "actual": actual,
                            "source": source,
                        }
                    )

        return ServiceResult(
            ok=True,
            op="audit",
            data={
                "checked": checked,
                "count": len(mismatches),
                "mismatches": mismatches,
                "missing": missing,
            },
            warnings=warnings,
        )
