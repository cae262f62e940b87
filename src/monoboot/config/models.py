"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults live here, ``monoboot.toml`` only holds
overrides. An empty file (or none at all) is a valid configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from monoboot.infrastructure.repository import DEFAULT_PACKAGE_GLOBS
from monoboot.services.scheduler import DEFAULT_CONCURRENCY


class PackagesConfig(BaseModel):
    """[packages] section."""

    model_config = {"frozen": True}

    globs: list[str] = Field(default_factory=lambda: list(DEFAULT_PACKAGE_GLOBS))


class BootstrapConfig(BaseModel):
    """[bootstrap] section."""

    model_config = {"frozen": True}

    ignore: list[str] = Field(default_factory=list)
    concurrency: int = Field(default=DEFAULT_CONCURRENCY, ge=1)
    npm_client: str = "npm"
    npm_client_args: list[str] = Field(default_factory=list)
