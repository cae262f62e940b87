"""Dependency declarations as a tagged variant.

A manifest entry such as ``"^1.2.0"`` or ``"file:../core"`` is classified
exactly once, at parse time, into :class:`SemverRange` or :class:`LocalLink`.
Downstream code branches on the type, never on string prefixes.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, Field

LOCAL_LINK_PREFIX = "file:"


class SemverRange(BaseModel):
    """A published dependency constrained by an npm semver range."""

    model_config = {"frozen": True}

    kind: Literal["semver"] = "semver"
    range: str

    @property
    def raw(self) -> str:
        return self.range


class LocalLink(BaseModel):
    """A dependency bound to a sibling's location on disk. Always satisfied."""

    model_config = {"frozen": True}

    kind: Literal["link"] = "link"
    path: str

    @property
    def raw(self) -> str:
        return f"{LOCAL_LINK_PREFIX}{self.path}"


DependencySpec = Annotated[SemverRange | LocalLink, Field(discriminator="kind")]


def parse_dependency_spec(raw: str) -> SemverRange | LocalLink:
    """Classify a raw manifest version string.

    >>> parse_dependency_spec("file:../core").path
    '../core'
    >>> parse_dependency_spec("^1.0.0").raw
    '^1.0.0'
    """
    value = raw.strip()
    if value.startswith(LOCAL_LINK_PREFIX):
        return LocalLink(path=value[len(LOCAL_LINK_PREFIX) :])
    return SemverRange(range=value)


def parse_dependency_map(raw: dict[str, str] | None) -> dict[str, SemverRange | LocalLink]:
    """Parse a ``{"name": "range"}`` manifest section, preserving declaration order."""
    if not raw:
        return {}
    return {name: parse_dependency_spec(str(value)) for name, value in raw.items()}
