"""Locate ``monoboot.toml`` for a repository.

Parsing happens in :class:`monoboot.config.settings.TomlSettingsSource`;
this module only answers "which file".
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "monoboot.toml"
CONFIG_ENV_VAR = "MONOBOOT_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the nearest ``monoboot.toml`` at or above *start* (default: cwd).

    ``MONOBOOT_CONFIG`` wins when set; a path there that is not a file
    yields None instead of falling back to the walk.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    start_dir = (start or Path.cwd()).resolve()
    for directory in (start_dir, *start_dir.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
