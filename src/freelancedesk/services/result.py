"""Result envelope returned by every service operation.

Services do not raise for expected failures (an unreachable API, an
unknown project, a malformed month).  They return ``ok=False`` with a
ServiceError whose ``code`` is one of the constants below, and the
command layer picks the exit status from ``ok``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

SOURCE_FETCH = "SOURCE_FETCH"
NOT_FOUND = "NOT_FOUND"
INVALID_LANE = "INVALID_LANE"
UPDATE_FAILED = "UPDATE_FAILED"
INVALID_MONTH = "INVALID_MONTH"


class ServiceError(BaseModel):
    """Why an operation failed: a stable code and a readable message."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one operation.

    ``op`` names the operation (``"dashboard_tasks"``, ``"move_project"``).
    On success ``data`` holds a JSON-ready payload; ``meta`` carries the
    snapshot time, record counts and, under ``--verbose``, the span tree.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(cls, op: str, code: str, message: str, **detail: Any) -> ServiceResult:
        """Shorthand for ``ok=False`` with a ServiceError attached."""
        return cls(ok=False, op=op, error=ServiceError(code=code, message=message, detail=detail))
