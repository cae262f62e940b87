"""Repository scanning: locate package manifests and filter by name.

Package globs are resolved relative to the repo root (``packages/*`` by
default). Directories without a ``package.json`` are skipped.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from fnmatch import fnmatchcase
from pathlib import Path

from monoboot.domain.package import MANIFEST_FILENAME, ManifestError, Package

logger = logging.getLogger(__name__)

DEFAULT_PACKAGE_GLOBS = ("packages/*",)


def discover_packages(
    root: Path,
    globs: Iterable[str] = DEFAULT_PACKAGE_GLOBS,
    *,
    warnings: list[str] | None = None,
) -> list[Package]:
    """Return every package under *root* matching *globs*, sorted by location.

    Unreadable manifests are skipped. When *warnings* is given, a message
    for each skipped manifest is appended to it.
    """
    locations: set[Path] = set()
    for pattern in globs:
        for candidate in root.glob(pattern):
            if candidate.is_dir() and (candidate / MANIFEST_FILENAME).is_file():
                locations.add(candidate)

    packages: list[Package] = []
    for location in sorted(locations):
        try:
            packages.append(Package.from_manifest(location))
        except ManifestError as exc:
            logger.info("Skipping package at %s: %s", location, exc.reason)
            if warnings is not None:
                warnings.append(str(exc))
    logger.debug("Discovered %d packages under %s", len(packages), root)
    return packages


def matches_any(name: str, patterns: Iterable[str]) -> bool:
    """True when *name* matches at least one glob in *patterns*."""
    return any(fnmatchcase(name, pattern) for pattern in patterns)


def filter_packages(packages: Sequence[Package], ignore: Iterable[str] = ()) -> list[Package]:
    """Drop packages whose name matches any *ignore* glob, preserving order."""
    patterns = [p for p in ignore if p]
    if not patterns:
        return list(packages)
    kept = [pkg for pkg in packages if not matches_any(pkg.name, patterns)]
    logger.debug("Ignored %d of %d packages", len(packages) - len(kept), len(packages))
    return kept
