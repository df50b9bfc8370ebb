"""Month agenda for the meetings calendar."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from freelancedesk.domain.records import Meeting
from freelancedesk.domain.snapshot import UNKNOWN_CLIENT, Snapshot
from freelancedesk.domain.types import RecurringType


class AgendaEntry(BaseModel):
    model_config = {"frozen": True}

    id: str
    client: str
    date: datetime
    notes: str | None = None
    recurring: bool = False
    recurring_type: RecurringType | None = None


class MonthAgenda(BaseModel):
    model_config = {"frozen": True}

    year: int
    month: int
    label: str
    meeting_count: int = 0
    days: dict[int, list[AgendaEntry]] = Field(default_factory=dict)
    upcoming: list[AgendaEntry] = Field(default_factory=list)


def _entry(meeting: Meeting, snapshot: Snapshot) -> AgendaEntry:
    return AgendaEntry(
        id=meeting.id,
        client=snapshot.directory.name_for(meeting.client_id, UNKNOWN_CLIENT),
        date=meeting.date,
        notes=meeting.notes,
        recurring=meeting.recurring,
        recurring_type=meeting.recurring_type,
    )


def build_agenda(snapshot: Snapshot, year: int, month: int) -> MonthAgenda:
    """Meetings of one calendar month grouped by day, plus what is still ahead.

    Raises:
        ValueError: *month* is outside 1..12.
    """
    first = datetime(year, month, 1, tzinfo=UTC)
    now = snapshot.taken_at

    days: dict[int, list[AgendaEntry]] = {}
    in_month = 0
    for meeting in sorted(snapshot.meetings, key=lambda m: m.date):
        when = meeting.date
        if when.year == year and when.month == month:
            days.setdefault(when.day, []).append(_entry(meeting, snapshot))
            in_month += 1

    upcoming = [
        _entry(m, snapshot) for m in sorted(snapshot.meetings, key=lambda m: m.date) if m.date > now
    ]
    return MonthAgenda(
        year=year,
        month=month,
        label=first.strftime("%B %Y"),
        meeting_count=in_month,
        days=days,
        upcoming=upcoming,
    )
