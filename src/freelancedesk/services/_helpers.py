"""Shared service-layer helper functions."""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from pydantic import BaseModel

from freelancedesk.domain.snapshot import Snapshot

_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")


def dump(model: BaseModel) -> dict[str, Any]:
    """JSON-ready dict for one domain model."""
    return model.model_dump(mode="json")


def dump_all(models: Iterable[BaseModel]) -> list[dict[str, Any]]:
    return [m.model_dump(mode="json") for m in models]


def snapshot_meta(snapshot: Snapshot) -> dict[str, Any]:
    """Metadata attached to every result computed from *snapshot*."""
    return {"taken_at": snapshot.taken_at.isoformat(), "counts": snapshot.counts()}


def parse_month(value: str | None, now: datetime) -> tuple[int, int]:
    """Parse ``YYYY-MM``; None means *now*'s month.

    Raises:
        ValueError: the value is not a real ``YYYY-MM`` month.

    Examples:
        >>> parse_month("2024-02", datetime(2025, 1, 1))
        (2024, 2)
    """
    if value is None:
        return now.year, now.month
    match = _MONTH_RE.match(value.strip())
    if match is None:
        msg = f"expected YYYY-MM, got {value!r}"
        raise ValueError(msg)
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        msg = f"month must be 01-12, got {value!r}"
        raise ValueError(msg)
    if year < 1:
        msg = f"year must be 0001 or later, got {value!r}"
        raise ValueError(msg)
    return year, month
