"""Package: read-only descriptor of one monorepo member.

Built from a ``package.json`` manifest by the repository scanner. The
graph and scheduler only read these; nothing mutates a Package.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from monoboot.domain.dependencies import DependencySpec, parse_dependency_map

MANIFEST_FILENAME = "package.json"
INSTALL_DIRNAME = "node_modules"


class ManifestError(ValueError):
    """Raised when a package manifest cannot be read or is incomplete."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Invalid manifest {path}: {reason}")
        self.path = path
        self.reason = reason


class Package(BaseModel):
    """A monorepo package as declared by its manifest."""

    model_config = {"frozen": True}

    name: str
    version: str = "0.0.0"
    location: Path = Field(default_factory=Path.cwd)
    dependencies: dict[str, DependencySpec] = Field(default_factory=dict)
    dev_dependencies: dict[str, DependencySpec] = Field(default_factory=dict)

    @property
    def install_root(self) -> Path:
        """Directory the package's external dependencies install into."""
        return self.location / INSTALL_DIRNAME

    @property
    def all_dependencies(self) -> dict[str, DependencySpec]:
        """Dev and regular declarations merged; regular entries win on a clash."""
        return {**self.dev_dependencies, **self.dependencies}

    @classmethod
    def from_manifest_data(cls, data: dict[str, Any], location: Path) -> Package:
        """Build a Package from already-parsed manifest JSON."""
        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise ManifestError(location / MANIFEST_FILENAME, "missing 'name'")
        return cls(
            name=name,
            version=str(data.get("version") or "0.0.0"),
            location=location,
            dependencies=parse_dependency_map(data.get("dependencies")),
            dev_dependencies=parse_dependency_map(data.get("devDependencies")),
        )

    @classmethod
    def from_manifest(cls, path: Path) -> Package:
        """Read ``package.json`` at *path* (a file, or a directory containing one)."""
        manifest = path / MANIFEST_FILENAME if path.is_dir() else path
        try:
            data = json.loads(manifest.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ManifestError(manifest, str(exc)) from exc
        if not isinstance(data, dict):
            raise ManifestError(manifest, "top-level value is not an object")
        return cls.from_manifest_data(data, manifest.parent)
