"""Shared pytest fixtures and test helpers for monoboot tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from monoboot.config.settings import MonoSettings
from monoboot.domain.dependencies import parse_dependency_map
from monoboot.domain.package import Package


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def repo_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Empty monorepo with a ``packages/`` directory and no config env override."""
    monkeypatch.delenv("MONOBOOT_CONFIG", raising=False)
    (tmp_path / "packages").mkdir()
    return tmp_path


@pytest.fixture
def settings(repo_root: Path) -> MonoSettings:
    return MonoSettings.from_cli(repo_root=repo_root)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def make_package(
    name: str,
    version: str = "1.0.0",
    deps: dict[str, str] | None = None,
    dev_deps: dict[str, str] | None = None,
    location: Path | None = None,
) -> Package:
    """Build a Package in memory from raw manifest-style dependency maps."""
    return Package(
        name=name,
        version=version,
        location=location or Path("/repo/packages") / name,
        dependencies=parse_dependency_map(deps),
        dev_dependencies=parse_dependency_map(dev_deps),
    )


def write_manifest(root: Path, dirname: str, **manifest: Any) -> Path:
    """Write ``packages/<dirname>/package.json`` under *root*; return the directory.

    Manifests default to version ``1.0.0`` so ``^1.0.0`` ranges resolve.
    """
    manifest.setdefault("version", "1.0.0")
    location = root / "packages" / dirname
    location.mkdir(parents=True, exist_ok=True)
    (location / "package.json").write_text(json.dumps(manifest), encoding="utf-8")
    return location
