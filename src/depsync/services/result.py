"""ServiceResult, ServiceError and InstallOutcome — the service contracts.

The CLI consumes ServiceResult. Install returns an InstallOutcome, whose
partial-success shape (an error *alongside* success flags) does not fit
``ok``/``error`` directly; :meth:`InstallOutcome.to_service_result` bridges.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Universal return type for CLI-facing operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"install"``).
        data: Operation-specific payload.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None


class InstallOutcome(BaseModel):
    """What one ``install`` call achieved.

    Callers must inspect both the flags and ``error``: a dependency can be
    installed while its typings failed, in which case ``installed`` is True
    and ``error`` is set.
    """

    model_config = {"frozen": True}

    installed: bool = False
    types_installed: bool = False
    error: ServiceError | None = None
    references: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    def to_service_result(self, op: str = "install", **data: Any) -> ServiceResult:
        return ServiceResult(
            ok=self.error is None,
            op=op,
            data={
                **data,
                "installed": self.installed,
                "types_installed": self.types_installed,
                "references": self.references,
            },
            warnings=self.warnings,
            error=self.error,
        )
