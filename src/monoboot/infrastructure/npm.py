"""npm client: run the package manager's install command in a directory.

The client binary is configurable (``npm``, ``yarn``, ``pnpm``); anything
accepting ``<client> install [args...]`` works.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path

logger = logging.getLogger(__name__)

_STDERR_TAIL_LINES = 20


class NpmError(RuntimeError):
    """The install command could not be started or exited non-zero."""

    def __init__(self, message: str, *, returncode: int | None = None, stderr: str = "") -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr

    @property
    def stderr_tail(self) -> str:
        return "\n".join(self.stderr.strip().splitlines()[-_STDERR_TAIL_LINES:])


class NpmClient:
    """Thin wrapper over ``subprocess.run`` for ``install``."""

    def __init__(self, client: str = "npm", args: Sequence[str] = ()) -> None:
        self.client = client
        self.args = list(args)

    def install_command(self) -> list[str]:
        return [self.client, "install", *self.args]

    def install_in_dir(self, location: Path) -> None:
        """Run the install command with *location* as the working directory.

        Raises:
            NpmError: If the binary is missing or the command fails.
        """
        cmd = self.install_command()
        logger.debug("Running %s in %s", " ".join(cmd), location)
        try:
            subprocess.run(
                cmd,
                cwd=location,
                check=True,
                capture_output=True,
                text=True,
            )
        except subprocess.CalledProcessError as exc:
            raise NpmError(
                f"'{' '.join(cmd)}' exited with status {exc.returncode}",
                returncode=exc.returncode,
                stderr=exc.stderr or "",
            ) from exc
        except OSError as exc:
            raise NpmError(f"Could not run '{self.client}': {exc}") from exc
