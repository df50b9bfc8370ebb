"""Recent-activity feed merged from clients, invoices and meetings.

Each source contributes only a short prefix of its collection *in the
order the backend returned it*, and only then is the merged list sorted.
The feed therefore shows the freshest of a bounded candidate set, not the
freshest events overall.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from freelancedesk.domain._format import format_amount
from freelancedesk.domain.records import Client, Invoice, Meeting
from freelancedesk.domain.snapshot import UNKNOWN_CLIENT, ClientDirectory, Snapshot
from freelancedesk.domain.types import ActivityType

CLIENT_PREFIX = 5
INVOICE_PREFIX = 5
MEETING_PREFIX = 3
FEED_LIMIT = 10


class Activity(BaseModel):
    """One entry of the activity feed."""

    model_config = {"frozen": True}

    id: str
    type: ActivityType
    title: str
    description: str
    date: datetime
    icon: str
    color: str


def client_activity(client: Client) -> Activity:
    return Activity(
        id=f"client-{client.id}",
        type=ActivityType.CLIENT,
        title=f"New client added: {client.name}",
        description=f"Client from {client.source} source",
        date=client.created_at,
        icon="👤",
        color="blue",
    )


def invoice_activity(invoice: Invoice, directory: ClientDirectory) -> Activity:
    paid = invoice.is_paid
    return Activity(
        id=f"invoice-{invoice.id}",
        type=ActivityType.INVOICE,
        title=f"Invoice {'paid' if paid else 'created'}: ${format_amount(invoice.amount)}",
        description=f"For {directory.name_for(invoice.client_id, UNKNOWN_CLIENT)}",
        date=invoice.created_at,
        icon="💰" if paid else "📄",
        color="green" if paid else "orange",
    )


def meeting_activity(meeting: Meeting, directory: ClientDirectory) -> Activity:
    return Activity(
        id=f"meeting-{meeting.id}",
        type=ActivityType.MEETING,
        title=f"Meeting scheduled with {directory.name_for(meeting.client_id, UNKNOWN_CLIENT)}",
        description=meeting.notes or "No notes",
        date=meeting.date,
        icon="📅",
        color="purple",
    )


def build_activity_feed(snapshot: Snapshot, *, limit: int = FEED_LIMIT) -> list[Activity]:
    """Merge per-type prefixes and return the *limit* most recent entries.

    The feed never holds more than ``FEED_LIMIT`` entries.

    Ties on ``date`` keep merge order (clients, then invoices, then
    meetings) because ``sorted`` is stable.
    """
    directory = snapshot.directory
    candidates: list[Activity] = []
    candidates.extend(client_activity(c) for c in snapshot.clients[:CLIENT_PREFIX])
    candidates.extend(
        invoice_activity(i, directory) for i in snapshot.invoices[:INVOICE_PREFIX]
    )
    candidates.extend(
        meeting_activity(m, directory) for m in snapshot.meetings[:MEETING_PREFIX]
    )
    ordered = sorted(candidates, key=lambda a: a.date, reverse=True)
    return ordered[: min(max(limit, 0), FEED_LIMIT)]
