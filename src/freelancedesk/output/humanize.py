"""Human-friendly relative times for task and activity lists."""

from __future__ import annotations

import math
from datetime import datetime


def _parse(value: datetime | str) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def _days(count: int) -> str:
    return f"{count} day" if count == 1 else f"{count} days"


def time_ago(moment: datetime | str, now: datetime) -> str:
    """``Just now``, ``5m ago``, ``3h ago``, ``2d ago``, or the date after a week."""
    minutes = math.floor((now - _parse(moment)).total_seconds() / 60)
    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    days = hours // 24
    if days < 7:
        return f"{days}d ago"
    return _parse(moment).strftime("%Y-%m-%d")


def due_text(due: datetime | str, now: datetime) -> str:
    """Describe a due date relative to *now* (``Overdue by 2 days``, ``Due tomorrow``)."""
    seconds = (_parse(due) - now).total_seconds()
    days = math.floor(seconds / 86400)
    if seconds < 0:
        return f"Overdue by {_days(abs(days))}"
    if days == 0:
        hours = math.floor(seconds / 3600)
        return f"Due today in {hours} hours"
    if days == 1:
        return "Due tomorrow"
    return f"Due in {_days(days)}"
