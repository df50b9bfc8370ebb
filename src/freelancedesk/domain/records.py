"""Canonical record models for clients, invoices, meetings and projects.

The backend returns loosely typed JSON: ids under ``_id``, camelCase keys,
amounts that may be strings or missing, dates in several shapes.  Each
model's ``from_raw()`` constructor is the only place that interprets that
payload; every calculator downstream works on these frozen, fully
populated records.

Coercion never raises:

- monetary fields: absent / non-numeric / NaN / negative -> ``0.0``
- progress: same rules, then clamped to ``[0, 100]`` and truncated
- required timestamps: absent / unparseable -> the snapshot's ``now``
- unknown enum values -> the value the entry forms default to
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import UTC, date, datetime, timedelta
from enum import StrEnum
from typing import Any, TypeVar

from pydantic import BaseModel, field_serializer

from freelancedesk.domain.types import (
    InvoiceStatus,
    PaymentStatus,
    ProjectStatus,
    RecurringType,
)

DEFAULT_SOURCE = "Direct"
DORMANCY_DAYS = 30

_E = TypeVar("_E", bound=StrEnum)


# ---------------------------------------------------------------------------
# Field coercion
# ---------------------------------------------------------------------------


def record_id(raw: Mapping[str, Any]) -> str:
    """Return the record id, accepting both ``_id`` and ``id`` keys."""
    value = raw.get("_id", raw.get("id"))
    return "" if value is None else str(value)


def reference_id(value: Any) -> str:
    """Resolve a foreign key that may be a bare id or a populated object."""
    if isinstance(value, Mapping):
        return record_id(value)
    return "" if value is None else str(value)


def coerce_text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return str(value).strip()


def coerce_amount(value: Any) -> float:
    """Parse a monetary value; anything unusable counts as zero.

    Examples:
        >>> coerce_amount("120.50")
        120.5
        >>> coerce_amount(None)
        0.0
        >>> coerce_amount(-4)
        0.0
    """
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def coerce_progress(value: Any) -> int:
    """Parse a completion percentage into an integer in ``[0, 100]``."""
    return int(min(coerce_amount(value), 100.0))


def coerce_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"true", "1", "yes"}
    return value is True or value == 1


def coerce_choice(value: Any, choices: type[_E], default: _E | None) -> _E | None:
    """Map *value* onto the enum *choices*, falling back to *default*."""
    if isinstance(value, str):
        try:
            return choices(value.strip())
        except ValueError:
            return default
    return default


def _as_utc(value: datetime, default: datetime | None) -> datetime | None:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    try:
        return value.astimezone(UTC)
    except (OverflowError, ValueError):
        # offset pushes the instant outside year 1..9999
        return default


def coerce_timestamp(value: Any, default: datetime | None) -> datetime | None:
    """Parse a timestamp into an aware UTC datetime.

    Accepts ISO-8601 strings (``Z`` suffix allowed; date-only strings are
    UTC midnight), epoch milliseconds, and ``date``/``datetime`` objects.
    Naive values are read as UTC; offsets are converted to UTC.  Anything
    else, including instants that fall outside the datetime range once in
    UTC, yields *default*.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, datetime):
        return _as_utc(value, default)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=UTC)
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return default
        try:
            return datetime.fromtimestamp(value / 1000, tz=UTC)
        except (OverflowError, OSError, ValueError):
            return default
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return default
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return default
        return _as_utc(parsed, default)
    return default


def coerce_tags(value: Any) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(str(tag).strip() for tag in value if tag is not None and str(tag).strip())


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class Client(BaseModel):
    """A customer of the freelancer."""

    model_config = {"frozen": True}

    id: str
    name: str = ""
    email: str = ""
    tags: frozenset[str] = frozenset()
    source: str = DEFAULT_SOURCE
    created_at: datetime

    @field_serializer("tags")
    def _sorted_tags(self, tags: frozenset[str]) -> list[str]:
        return sorted(tags)

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any], *, now: datetime) -> Client:
        return cls(
            id=record_id(raw),
            name=coerce_text(raw.get("name")),
            email=coerce_text(raw.get("email")),
            tags=frozenset(coerce_tags(raw.get("tags"))),
            source=coerce_text(raw.get("source")) or DEFAULT_SOURCE,
            created_at=coerce_timestamp(raw.get("createdAt"), now),
        )


class Invoice(BaseModel):
    """A bill issued to a client."""

    model_config = {"frozen": True}

    id: str
    client_id: str
    amount: float = 0.0
    due_date: datetime
    status: InvoiceStatus | None = None
    created_at: datetime
    description: str | None = None

    @property
    def is_paid(self) -> bool:
        return self.status == InvoiceStatus.PAID

    def is_overdue(self, now: datetime) -> bool:
        """Not paid and past its due date."""
        return not self.is_paid and self.due_date < now

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any], *, now: datetime) -> Invoice:
        return cls(
            id=record_id(raw),
            client_id=reference_id(raw.get("client")),
            amount=coerce_amount(raw.get("amount")),
            due_date=coerce_timestamp(raw.get("dueDate"), now),
            status=coerce_choice(raw.get("status"), InvoiceStatus, None),
            created_at=coerce_timestamp(raw.get("createdAt"), now),
            description=coerce_text(raw.get("description")) or None,
        )


class Meeting(BaseModel):
    """A scheduled meeting with a client."""

    model_config = {"frozen": True}

    id: str
    client_id: str
    date: datetime
    notes: str | None = None
    recurring: bool = False
    recurring_type: RecurringType | None = None

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any], *, now: datetime) -> Meeting:
        recurring = coerce_flag(raw.get("recurring"))
        return cls(
            id=record_id(raw),
            client_id=reference_id(raw.get("client")),
            date=coerce_timestamp(raw.get("date"), now),
            notes=coerce_text(raw.get("notes")) or None,
            recurring=recurring,
            recurring_type=(
                coerce_choice(raw.get("recurringType"), RecurringType, None) if recurring else None
            ),
        )


class Project(BaseModel):
    """A piece of contracted work for a client."""

    model_config = {"frozen": True}

    id: str
    client_id: str
    name: str = ""
    platform: str = DEFAULT_SOURCE
    status: ProjectStatus = ProjectStatus.ACTIVE
    progress: int = 0
    budget: float = 0.0
    amount_paid: float = 0.0
    payment_status: PaymentStatus = PaymentStatus.PENDING
    start_date: datetime | None = None
    deadline: datetime
    completed_date: datetime | None = None
    tags: tuple[str, ...] = ()

    def is_overdue(self, now: datetime) -> bool:
        """Not completed and past its deadline."""
        return self.status != ProjectStatus.COMPLETED and self.deadline < now

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any], *, now: datetime) -> Project:
        return cls(
            id=record_id(raw),
            client_id=reference_id(raw.get("client")),
            name=coerce_text(raw.get("name")),
            platform=coerce_text(raw.get("platform")) or DEFAULT_SOURCE,
            status=coerce_choice(raw.get("status"), ProjectStatus, ProjectStatus.ACTIVE),
            progress=coerce_progress(raw.get("progress")),
            budget=coerce_amount(raw.get("budget")),
            amount_paid=coerce_amount(raw.get("amountPaid")),
            payment_status=coerce_choice(
                raw.get("paymentStatus"), PaymentStatus, PaymentStatus.PENDING
            ),
            start_date=coerce_timestamp(raw.get("startDate"), None),
            deadline=coerce_timestamp(raw.get("deadline"), now),
            completed_date=coerce_timestamp(raw.get("completedDate"), None),
            tags=coerce_tags(raw.get("tags")),
        )


# ---------------------------------------------------------------------------
# Dormancy
# ---------------------------------------------------------------------------


def days_since(moment: datetime, now: datetime) -> float:
    """Fractional days elapsed from *moment* to *now*."""
    return (now - moment) / timedelta(days=1)


def is_dormant(client: Client, now: datetime, threshold_days: int = DORMANCY_DAYS) -> bool:
    """A client is dormant once its last activity is more than *threshold_days* old.

    ``created_at`` stands in for last activity; the backend keeps no
    separate activity timestamp.
    """
    return days_since(client.created_at, now) > threshold_days


def is_recent(client: Client, now: datetime, window_days: int = DORMANCY_DAYS) -> bool:
    """Client was added within the last *window_days*."""
    return client.created_at > now - timedelta(days=window_days)
