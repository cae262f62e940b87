"""ServiceResult and ServiceError: the return contract of every service.

The CLI consumes this type for both human and ``--json`` output. A failed
run carries exactly one terminal ``error``; secondary problems travel in
``warnings``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ErrorCode:
    """Stable error codes surfaced in ``ServiceError.code``."""

    CYCLIC_DEPENDENCY = "CYCLIC_DEPENDENCY"
    INSTALL_FAILED = "INSTALL_FAILED"
    NO_PACKAGES = "NO_PACKAGES"
    NOT_FOUND = "NOT_FOUND"


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Universal return type for service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"bootstrap"``).
        data: Operation-specific payload (present on failure too, e.g. counts).
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (timing, counts, etc.).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None
