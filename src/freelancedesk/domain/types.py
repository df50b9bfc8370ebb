"""Status and classification enums for the freelancer data model.

Values match the strings the backend API stores, so they round-trip
through JSON unchanged.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum
from typing import Protocol, TypeVar


class _HasPriority(Protocol):
    @property
    def priority(self) -> str: ...


_Ranked = TypeVar("_Ranked", bound=_HasPriority)


class InvoiceStatus(StrEnum):
    """Payment state of an invoice."""

    UNPAID = "Unpaid"
    PAID = "Paid"


class ProjectStatus(StrEnum):
    """Delivery state of a project."""

    ACTIVE = "Active"
    ON_HOLD = "On Hold"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class PaymentStatus(StrEnum):
    """Payment state of a project."""

    PENDING = "Pending"
    PARTIALLY_PAID = "Partially Paid"
    PAID = "Paid"


class RecurringType(StrEnum):
    """Repeat cadence for recurring meetings."""

    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"


class Priority(StrEnum):
    """Priority shared by generated tasks and insights."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ActivityType(StrEnum):
    """Source entity of an activity feed entry."""

    CLIENT = "client"
    INVOICE = "invoice"
    MEETING = "meeting"


class InsightType(StrEnum):
    """Tone of a generated insight."""

    SUCCESS = "success"
    WARNING = "warning"
    ALERT = "alert"
    INFO = "info"


# Higher rank sorts first.
PRIORITY_RANK: dict[str, int] = {
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}


def priority_rank(priority: str) -> int:
    """Sort rank for *priority*; unknown values rank below ``low``."""
    return PRIORITY_RANK.get(priority, 0)


def rank_by_priority(items: Iterable[_Ranked]) -> list[_Ranked]:
    """Stable sort, highest priority first; equal priorities keep input order."""
    return sorted(items, key=lambda item: priority_rank(item.priority), reverse=True)
