"""npm-compatible version range checks."""

from __future__ import annotations

import re

from semantic_version import NpmSpec, Version

from monoboot.domain.dependencies import LocalLink, SemverRange

_OPERATOR_GAP = re.compile(r"(<=|>=|<|>|=|\^|~)\s+")
_VERSION_PREFIX = re.compile(r"^[v=\s]+")


def normalize_range(expected: str) -> str:
    """Rewrite *expected* into the form ``NpmSpec`` parses.

    npm tolerates whitespace between an operator and its version.

    >>> normalize_range(">= 1.2.0 <  2.0.0")
    '>=1.2.0 <2.0.0'
    >>> normalize_range("")
    '*'
    """
    return _OPERATOR_GAP.sub(r"\1", expected.strip()) or "*"


def normalize_version(actual: str) -> str:
    """Strip the leading ``v`` or ``=`` npm allows on a concrete version.

    >>> normalize_version("v1.2.3")
    '1.2.3'
    """
    return _VERSION_PREFIX.sub("", actual.strip())


def is_compatible(actual: str, expected: str) -> bool:
    """Return True when version *actual* falls within npm range *expected*.

    Unparseable versions or ranges are reported as incompatible rather
    than raising, matching ``semver.satisfies``.
    """
    try:
        return NpmSpec(normalize_range(expected)).match(Version(normalize_version(actual)))
    except ValueError:
        return False


def satisfies(actual: str, spec: SemverRange | LocalLink) -> bool:
    if isinstance(spec, LocalLink):
        return True
    return is_compatible(actual, spec.range)
