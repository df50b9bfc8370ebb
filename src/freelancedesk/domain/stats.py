"""Headline counters for the dashboard."""

from __future__ import annotations

from pydantic import BaseModel

from freelancedesk.domain.snapshot import Snapshot
from freelancedesk.domain.types import InvoiceStatus

ONGOING_TAG = "ongoing"


class StatsSummary(BaseModel):
    model_config = {"frozen": True}

    total_clients: int = 0
    active_projects: int = 0
    pending_invoices: int = 0
    upcoming_meetings: int = 0


def summarize_stats(snapshot: Snapshot) -> StatsSummary:
    """The four headline counters shown at the top of the dashboard.

    ``active_projects`` counts clients tagged ``ongoing``; the dashboard
    predates the projects collection and still reports it that way.
    """
    now = snapshot.taken_at
    return StatsSummary(
        total_clients=len(snapshot.clients),
        active_projects=sum(1 for c in snapshot.clients if ONGOING_TAG in c.tags),
        pending_invoices=sum(1 for i in snapshot.invoices if i.status == InvoiceStatus.UNPAID),
        upcoming_meetings=sum(1 for m in snapshot.meetings if m.date > now),
    )
