"""Rule-based recommendations over the dashboard's derived views.

Rules run in a fixed order and each emits at most one insight.  The
result is ranked by priority with a stable sort, and consumers display
only the first few (:func:`top_insights`).
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import UTC

from pydantic import BaseModel

from freelancedesk.domain._format import format_money, plural
from freelancedesk.domain.records import DORMANCY_DAYS, is_dormant, is_recent
from freelancedesk.domain.snapshot import Snapshot
from freelancedesk.domain.tasks import Task
from freelancedesk.domain.types import InsightType, Priority, rank_by_priority

INSIGHT_LIMIT = 5


class Insight(BaseModel):
    model_config = {"frozen": True}

    type: InsightType
    icon: str
    title: str
    message: str
    action: str
    priority: Priority


Rule = Callable[[Snapshot, Sequence[Task], int], Insight | None]


def dormant_clients_rule(
    snapshot: Snapshot, tasks: Sequence[Task], dormancy_days: int
) -> Insight | None:
    now = snapshot.taken_at
    dormant = sum(1 for c in snapshot.clients if is_dormant(c, now, dormancy_days))
    if not dormant:
        return None
    return Insight(
        type=InsightType.WARNING,
        icon="⚠️",
        title="Client Follow-up Needed",
        message=(
            f"{plural(dormant, 'client')} haven't been active in {dormancy_days}+ days. "
            "Consider reaching out to re-engage."
        ),
        action="View Inactive Clients",
        priority=Priority.HIGH,
    )


def overdue_invoices_rule(
    snapshot: Snapshot, tasks: Sequence[Task], dormancy_days: int
) -> Insight | None:
    now = snapshot.taken_at
    overdue = [i for i in snapshot.invoices if i.is_overdue(now)]
    if not overdue:
        return None
    total = sum(i.amount for i in overdue)
    return Insight(
        type=InsightType.ALERT,
        icon="🚨",
        title="Overdue Invoices",
        message=(
            f"You have {plural(len(overdue), 'overdue invoice')} "
            f"totaling ${format_money(total)}."
        ),
        action="Review Overdue",
        priority=Priority.HIGH,
    )


def monthly_revenue_rule(
    snapshot: Snapshot, tasks: Sequence[Task], dormancy_days: int
) -> Insight | None:
    now = snapshot.taken_at.astimezone(UTC)
    paid = [
        i
        for i in snapshot.invoices
        if i.is_paid
        and i.created_at.year == now.year
        and i.created_at.month == now.month
    ]
    total = sum(i.amount for i in paid)
    if total <= 0:
        return None
    return Insight(
        type=InsightType.SUCCESS,
        icon="💰",
        title="Monthly Revenue",
        message=(
            f"You've earned ${format_money(total)} this month "
            f"from {plural(len(paid), 'paid invoice')}."
        ),
        action="View Details",
        priority=Priority.MEDIUM,
    )


def high_priority_tasks_rule(
    snapshot: Snapshot, tasks: Sequence[Task], dormancy_days: int
) -> Insight | None:
    urgent = sum(1 for t in tasks if t.priority == Priority.HIGH)
    if not urgent:
        return None
    return Insight(
        type=InsightType.INFO,
        icon="📋",
        title="High Priority Tasks",
        message=f"You have {plural(urgent, 'high-priority task')} that need attention.",
        action="View Tasks",
        priority=Priority.HIGH,
    )


def top_source_rule(
    snapshot: Snapshot, tasks: Sequence[Task], dormancy_days: int
) -> Insight | None:
    counts: dict[str, int] = {}
    for client in snapshot.clients:
        counts[client.source] = counts.get(client.source, 0) + 1
    if not counts:
        return None
    # max() keeps the first of equal counts, i.e. the first source seen.
    source, count = max(counts.items(), key=lambda kv: kv[1])
    if count <= 1:
        return None
    return Insight(
        type=InsightType.INFO,
        icon="📊",
        title="Top Client Source",
        message=(
            f"{source} is your best performing platform with {plural(count, 'client')}. "
            "Consider focusing more efforts there."
        ),
        action="View Analytics",
        priority=Priority.LOW,
    )


def client_growth_rule(
    snapshot: Snapshot, tasks: Sequence[Task], dormancy_days: int
) -> Insight | None:
    now = snapshot.taken_at
    recent = sum(1 for c in snapshot.clients if is_recent(c, now, dormancy_days))
    if not recent:
        return None
    return Insight(
        type=InsightType.SUCCESS,
        icon="📈",
        title="Client Growth",
        message=(
            f"You've added {plural(recent, 'new client')} in the last "
            f"{dormancy_days} days. Great momentum!"
        ),
        action="View Growth",
        priority=Priority.MEDIUM,
    )


RULES: tuple[Rule, ...] = (
    dormant_clients_rule,
    overdue_invoices_rule,
    monthly_revenue_rule,
    high_priority_tasks_rule,
    top_source_rule,
    client_growth_rule,
)


def generate_insights(
    snapshot: Snapshot,
    tasks: Sequence[Task],
    *,
    dormancy_days: int = DORMANCY_DAYS,
) -> list[Insight]:
    """Evaluate every rule and rank the emitted insights by priority."""
    emitted = [rule(snapshot, tasks, dormancy_days) for rule in RULES]
    return rank_by_priority(insight for insight in emitted if insight is not None)


def top_insights(insights: Sequence[Insight], limit: int = INSIGHT_LIMIT) -> list[Insight]:
    return list(insights[: max(limit, 0)])
