"""Project portfolio analytics.

Revenue here is project *budget* for projects whose payment status is
``Paid`` (pending and partial payments are reported separately), which
differs from the invoice-based revenue of the dashboard.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from pydantic import BaseModel, Field

from freelancedesk.domain._format import format_money, plural, round_half_up
from freelancedesk.domain.records import Project
from freelancedesk.domain.snapshot import UNKNOWN, Snapshot
from freelancedesk.domain.types import InsightType, PaymentStatus, Priority, ProjectStatus

LEADERBOARD_SIZE = 5
LONG_PROJECT_DAYS = 30


class LeaderboardEntry(BaseModel):
    model_config = {"frozen": True}

    name: str
    count: int
    revenue: float
    share: int


class MonthlyRevenue(BaseModel):
    model_config = {"frozen": True}

    month: str  # YYYY-MM
    label: str  # "Oct 2026"
    revenue: float
    relative: float  # percentage of the best month


class ProjectAnalytics(BaseModel):
    model_config = {"frozen": True}

    total_projects: int = 0
    active_projects: int = 0
    completed_projects: int = 0
    overdue_projects: int = 0
    success_rate: int = 0
    total_revenue: float = 0.0
    pending_revenue: float = 0.0
    partial_revenue: float = 0.0
    avg_duration_days: int = 0
    top_platforms: list[LeaderboardEntry] = Field(default_factory=list)
    top_clients: list[LeaderboardEntry] = Field(default_factory=list)
    monthly_revenue: list[MonthlyRevenue] = Field(default_factory=list)


class ProjectInsight(BaseModel):
    model_config = {"frozen": True}

    type: InsightType
    title: str
    message: str
    priority: Priority


def _leaderboard(
    groups: dict[str, list[Project]],
    total_revenue: float,
    size: int,
) -> list[LeaderboardEntry]:
    entries = []
    for name, projects in groups.items():
        revenue = sum(p.budget for p in projects if p.payment_status == PaymentStatus.PAID)
        share = round_half_up(revenue / total_revenue * 100) if total_revenue > 0 else 0
        entries.append(
            LeaderboardEntry(name=name, count=len(projects), revenue=revenue, share=share)
        )
    ranked = sorted(entries, key=lambda e: e.revenue, reverse=True)
    return ranked[: max(size, 0)]


def average_duration_days(projects: list[Project]) -> int:
    """Mean start-to-completion span of completed projects, in whole days."""
    spans = [
        p.completed_date - p.start_date
        for p in projects
        if p.status == ProjectStatus.COMPLETED and p.start_date and p.completed_date
    ]
    if not spans:
        return 0
    mean = sum(spans, timedelta()) / len(spans)
    return round_half_up(mean / timedelta(days=1))


def monthly_revenue(projects: list[Project]) -> list[MonthlyRevenue]:
    """Paid budget per completion month, oldest month first."""
    totals: dict[tuple[int, int], float] = {}
    for p in projects:
        if p.payment_status != PaymentStatus.PAID or p.completed_date is None:
            continue
        completed = p.completed_date
        key = (completed.year, completed.month)
        totals[key] = totals.get(key, 0.0) + p.budget

    best = max(totals.values(), default=0.0)
    trend = []
    for year, month in sorted(totals):
        revenue = totals[(year, month)]
        trend.append(
            MonthlyRevenue(
                month=f"{year:04d}-{month:02d}",
                label=datetime(year, month, 1, tzinfo=UTC).strftime("%b %Y"),
                revenue=revenue,
                relative=round(revenue / best * 100, 1) if best > 0 else 0.0,
            )
        )
    return trend


def compute_project_analytics(
    snapshot: Snapshot,
    *,
    leaderboard_size: int = LEADERBOARD_SIZE,
) -> ProjectAnalytics:
    now = snapshot.taken_at
    projects = list(snapshot.projects)
    directory = snapshot.directory

    total = len(projects)
    completed = sum(1 for p in projects if p.status == ProjectStatus.COMPLETED)
    total_revenue = sum(p.budget for p in projects if p.payment_status == PaymentStatus.PAID)

    by_platform: dict[str, list[Project]] = {}
    by_client: dict[str, list[Project]] = {}
    for p in projects:
        by_platform.setdefault(p.platform, []).append(p)
        by_client.setdefault(directory.name_for(p.client_id, UNKNOWN), []).append(p)

    return ProjectAnalytics(
        total_projects=total,
        active_projects=sum(1 for p in projects if p.status == ProjectStatus.ACTIVE),
        completed_projects=completed,
        overdue_projects=sum(1 for p in projects if p.is_overdue(now)),
        success_rate=round_half_up(completed / total * 100) if total else 0,
        total_revenue=float(total_revenue),
        pending_revenue=float(
            sum(p.budget for p in projects if p.payment_status == PaymentStatus.PENDING)
        ),
        partial_revenue=float(
            sum(
                p.amount_paid
                for p in projects
                if p.payment_status == PaymentStatus.PARTIALLY_PAID
            )
        ),
        avg_duration_days=average_duration_days(projects),
        top_platforms=_leaderboard(by_platform, total_revenue, leaderboard_size),
        top_clients=_leaderboard(by_client, total_revenue, leaderboard_size),
        monthly_revenue=monthly_revenue(projects),
    )


def project_insights(analytics: ProjectAnalytics) -> list[ProjectInsight]:
    """Recommendations shown under the analytics panels."""
    insights: list[ProjectInsight] = []
    if analytics.overdue_projects > 0:
        insights.append(
            ProjectInsight(
                type=InsightType.ALERT,
                title="Overdue Projects",
                message=(
                    f"You have {plural(analytics.overdue_projects, 'overdue project')}. "
                    "Consider reaching out to clients for updates."
                ),
                priority=Priority.HIGH,
            )
        )
    if analytics.pending_revenue > 0:
        insights.append(
            ProjectInsight(
                type=InsightType.WARNING,
                title="Pending Payments",
                message=(
                    f"You have ${format_money(analytics.pending_revenue)} in pending payments. "
                    "Follow up on outstanding invoices."
                ),
                priority=Priority.MEDIUM,
            )
        )
    if analytics.avg_duration_days > 0:
        verdict = (
            "Consider optimizing your workflow."
            if analytics.avg_duration_days > LONG_PROJECT_DAYS
            else "Great project management!"
        )
        insights.append(
            ProjectInsight(
                type=InsightType.INFO,
                title="Project Duration",
                message=(
                    f"Average project duration is {analytics.avg_duration_days} days. {verdict}"
                ),
                priority=Priority.LOW,
            )
        )
    if analytics.top_platforms:
        leader = analytics.top_platforms[0]
        insights.append(
            ProjectInsight(
                type=InsightType.SUCCESS,
                title="Top Platform",
                message=(
                    f"{leader.name} is your best performing platform with "
                    f"${format_money(leader.revenue)} revenue. "
                    "Consider focusing more efforts there."
                ),
                priority=Priority.LOW,
            )
        )
    return insights
