"""BaseService: shared foundation for monoboot services.

Every service receives the frozen :class:`MonoSettings` at construction
time and discovers packages from the configured repo root on demand.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from monoboot.infrastructure.repository import discover_packages

if TYPE_CHECKING:
    from monoboot.config.settings import MonoSettings
    from monoboot.domain.package import Package

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service-layer classes.

    Usage::

        class ListService(BaseService):
            def list_packages(self) -> ServiceResult:
                warnings: list[str] = []
                packages = self._discover(warnings)
                ...
    """

    def __init__(self, settings: MonoSettings) -> None:
        self._settings = settings

    def _discover(self, warnings: list[str]) -> list[Package]:
        """Scan the repo root using the configured package globs."""
        return discover_packages(
            self._settings.repo_root,
            self._settings.packages.globs,
            warnings=warnings,
        )
