"""Follow-up task generation.

Three task families are produced in a fixed order and then ranked by
priority.  The ranking is a stable sort, so within one priority the
family order (overdue invoices, meetings, dormant clients) and each
family's collection order survive.  Which items a user sees first
depends on that order.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable
from datetime import datetime, timedelta

from pydantic import BaseModel

from freelancedesk.domain._format import format_amount
from freelancedesk.domain.records import DORMANCY_DAYS, is_dormant
from freelancedesk.domain.snapshot import UNKNOWN_CLIENT, Snapshot
from freelancedesk.domain.types import Priority, rank_by_priority

MEETING_WINDOW_HOURS = 24
DORMANT_TASK_LIMIT = 3
FOLLOWUP_DAYS = 7


class Task(BaseModel):
    """An actionable follow-up item."""

    model_config = {"frozen": True}

    id: str
    title: str
    description: str
    priority: Priority
    due_date: datetime
    type: str
    action: str


def overdue_invoice_tasks(snapshot: Snapshot) -> list[Task]:
    now = snapshot.taken_at
    directory = snapshot.directory
    return [
        Task(
            id=f"overdue-{invoice.id}",
            title="Follow up on overdue invoice",
            description=(
                f"Invoice #{invoice.id[-8:]} for "
                f"{directory.name_for(invoice.client_id, UNKNOWN_CLIENT)}"
                f" - ${format_amount(invoice.amount)}"
            ),
            priority=Priority.HIGH,
            due_date=invoice.due_date,
            type="invoice",
            action="follow-up",
        )
        for invoice in snapshot.invoices
        if invoice.is_overdue(now)
    ]


def meeting_prep_tasks(
    snapshot: Snapshot,
    *,
    window_hours: int = MEETING_WINDOW_HOURS,
) -> list[Task]:
    """Meetings starting after now and no later than *window_hours* from now."""
    now = snapshot.taken_at
    horizon = now + timedelta(hours=window_hours)
    directory = snapshot.directory
    return [
        Task(
            id=f"meeting-{meeting.id}",
            title="Prepare for meeting",
            description=(
                f"Meeting with {directory.name_for(meeting.client_id, UNKNOWN_CLIENT)}"
                f" at {meeting.date.strftime('%H:%M')}"
            ),
            priority=Priority.MEDIUM,
            due_date=meeting.date,
            type="meeting",
            action="prepare",
        )
        for meeting in snapshot.meetings
        if now < meeting.date <= horizon
    ]


def dormant_client_tasks(
    snapshot: Snapshot,
    *,
    dormancy_days: int = DORMANCY_DAYS,
    limit: int = DORMANT_TASK_LIMIT,
    followup_days: int = FOLLOWUP_DAYS,
) -> list[Task]:
    now = snapshot.taken_at
    due = now + timedelta(days=followup_days)
    dormant = [c for c in snapshot.clients if is_dormant(c, now, dormancy_days)]
    return [
        Task(
            id=f"followup-{client.id}",
            title="Follow up with inactive client",
            description=(
                f"Reach out to {client.name} - no activity in {dormancy_days}+ days"
            ),
            priority=Priority.LOW,
            due_date=due,
            type="client",
            action="follow-up",
        )
        for client in dormant[: max(limit, 0)]
    ]


def generate_tasks(
    snapshot: Snapshot,
    *,
    dormancy_days: int = DORMANCY_DAYS,
    meeting_window_hours: int = MEETING_WINDOW_HOURS,
    dormant_limit: int = DORMANT_TASK_LIMIT,
    followup_days: int = FOLLOWUP_DAYS,
) -> list[Task]:
    """All follow-up tasks for *snapshot*, highest priority first."""
    tasks: list[Task] = []
    tasks.extend(overdue_invoice_tasks(snapshot))
    tasks.extend(meeting_prep_tasks(snapshot, window_hours=meeting_window_hours))
    tasks.extend(
        dormant_client_tasks(
            snapshot,
            dormancy_days=dormancy_days,
            limit=dormant_limit,
            followup_days=followup_days,
        )
    )
    return rank_by_priority(tasks)


def exclude_completed(tasks: Iterable[Task], completed_ids: Collection[str]) -> list[Task]:
    """Drop tasks the user already marked done, keeping order."""
    if not completed_ids:
        return list(tasks)
    return [task for task in tasks if task.id not in completed_ids]
