"""DashboardService: the derived views behind the dashboard screen.

Read-only surfaces, each computed from one freshly loaded snapshot:
- stats: headline counters
- activity: merged recent-activity feed
- tasks: prioritized follow-ups, minus the ones marked done
- financial: income, receivables, revenue by client and platform
- platforms: client split and revenue share per acquisition source
- insights: heuristic observations, highest priority first
- agenda: one calendar month of meetings
- summary: everything above from a single snapshot

A RefreshCoordinator passed at construction turns summary() into a
ticketed refresh: overlapping summaries settle last-wins, and a failed
one leaves the coordinator's views as they were.
"""

from __future__ import annotations

from collections.abc import Collection
from datetime import datetime
from typing import TYPE_CHECKING, Any

from freelancedesk.domain.activity import build_activity_feed
from freelancedesk.domain.calendar import build_agenda
from freelancedesk.domain.financial import FinancialSnapshot, compute_financials
from freelancedesk.domain.insights import generate_insights, top_insights
from freelancedesk.domain.platforms import compute_platform_insights
from freelancedesk.domain.snapshot import Snapshot
from freelancedesk.domain.stats import summarize_stats
from freelancedesk.domain.tasks import Task, exclude_completed, generate_tasks
from freelancedesk.infrastructure.sources import SourceFetchError
from freelancedesk.services._helpers import dump, dump_all, parse_month, snapshot_meta
from freelancedesk.services.base import BaseService
from freelancedesk.services.result import INVALID_MONTH, ServiceResult
from freelancedesk.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from freelancedesk.config.models import DashboardConfig
    from freelancedesk.infrastructure.backend import Backend
    from freelancedesk.services.refresh import RefreshCoordinator


class DashboardService(BaseService):
    """Computes dashboard views from the configured backend."""

    def __init__(
        self,
        backend: Backend,
        *,
        now: datetime | None = None,
        coordinator: RefreshCoordinator | None = None,
    ) -> None:
        super().__init__(backend, now=now)
        self._coordinator = coordinator

    @property
    def _config(self) -> DashboardConfig:
        return self._backend.settings.dashboard

    # ------------------------------------------------------------------
    # calculators shared by single views and the summary
    # ------------------------------------------------------------------

    def _tasks(self, snapshot: Snapshot, completed: Collection[str] = ()) -> list[Task]:
        cfg = self._config
        with trace_span("generate_tasks") as span:
            tasks = generate_tasks(
                snapshot,
                dormancy_days=cfg.dormancy_days,
                meeting_window_hours=cfg.meeting_window_hours,
                dormant_limit=cfg.dormant_task_limit,
                followup_days=cfg.followup_days,
            )
            visible = exclude_completed(tasks, frozenset(completed))
            if span is not None:
                span.annotate("generated", len(tasks))
                span.annotate("visible", len(visible))
        return visible

    def _financial(self, snapshot: Snapshot) -> FinancialSnapshot:
        with trace_span("compute_financials"):
            return compute_financials(snapshot)

    def _platforms(self, snapshot: Snapshot, financial: FinancialSnapshot) -> dict[str, Any]:
        with trace_span("compute_platform_insights"):
            view = compute_platform_insights(
                snapshot,
                financial.revenue_by_platform,
                dormancy_days=self._config.dormancy_days,
            )
        return dump(view)

    def _insights(self, snapshot: Snapshot, tasks: list[Task], limit: int) -> dict[str, Any]:
        with trace_span("generate_insights"):
            insights = generate_insights(snapshot, tasks, dormancy_days=self._config.dormancy_days)
        shown = top_insights(insights, limit)
        return {"items": dump_all(shown), "count": len(shown), "total": len(insights)}

    def _activity(self, snapshot: Snapshot, limit: int) -> dict[str, Any]:
        with trace_span("build_activity_feed"):
            feed = build_activity_feed(snapshot, limit=limit)
        return {"items": dump_all(feed), "count": len(feed)}

    # ------------------------------------------------------------------
    # public operations
    # ------------------------------------------------------------------

    @traced
    def stats(self) -> ServiceResult:
        op = "dashboard_stats"
        try:
            snapshot = self._load_snapshot()
        except SourceFetchError as exc:
            return self._fetch_failed(op, exc)
        return ServiceResult(
            ok=True,
            op=op,
            data=dump(summarize_stats(snapshot)),
            meta=snapshot_meta(snapshot),
        )

    @traced
    def activity(self, *, limit: int | None = None) -> ServiceResult:
        """Most recent client, invoice and meeting events, newest first."""
        op = "dashboard_activity"
        try:
            snapshot = self._load_snapshot()
        except SourceFetchError as exc:
            return self._fetch_failed(op, exc)
        size = self._config.activity_limit if limit is None else limit
        return ServiceResult(
            ok=True,
            op=op,
            data=self._activity(snapshot, size),
            meta=snapshot_meta(snapshot),
        )

    @traced
    def tasks(self, *, completed: Collection[str] = ()) -> ServiceResult:
        """Follow-up tasks, highest priority first.

        Args:
            completed: Task ids the user already finished; they are left out.
        """
        op = "dashboard_tasks"
        try:
            snapshot = self._load_snapshot()
        except SourceFetchError as exc:
            return self._fetch_failed(op, exc)
        tasks = self._tasks(snapshot, completed)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "items": dump_all(tasks),
                "count": len(tasks),
                "completed": sorted(set(completed)),
            },
            meta=snapshot_meta(snapshot),
        )

    @traced
    def financial(self) -> ServiceResult:
        op = "dashboard_financial"
        try:
            snapshot = self._load_snapshot()
        except SourceFetchError as exc:
            return self._fetch_failed(op, exc)
        return ServiceResult(
            ok=True,
            op=op,
            data=dump(self._financial(snapshot)),
            meta=snapshot_meta(snapshot),
        )

    @traced
    def platforms(self) -> ServiceResult:
        op = "dashboard_platforms"
        try:
            snapshot = self._load_snapshot()
        except SourceFetchError as exc:
            return self._fetch_failed(op, exc)
        return ServiceResult(
            ok=True,
            op=op,
            data=self._platforms(snapshot, self._financial(snapshot)),
            meta=snapshot_meta(snapshot),
        )

    @traced
    def insights(self, *, limit: int | None = None) -> ServiceResult:
        """Heuristic insights; ``total`` counts every rule that fired."""
        op = "dashboard_insights"
        try:
            snapshot = self._load_snapshot()
        except SourceFetchError as exc:
            return self._fetch_failed(op, exc)
        size = self._config.insight_limit if limit is None else limit
        return ServiceResult(
            ok=True,
            op=op,
            data=self._insights(snapshot, self._tasks(snapshot), size),
            meta=snapshot_meta(snapshot),
        )

    @traced
    def agenda(self, *, month: str | None = None) -> ServiceResult:
        """Meetings of one month (``YYYY-MM``; default: the snapshot's month)."""
        op = "dashboard_agenda"
        try:
            snapshot = self._load_snapshot()
        except SourceFetchError as exc:
            return self._fetch_failed(op, exc)
        try:
            year, number = parse_month(month, snapshot.taken_at)
        except ValueError as exc:
            return ServiceResult.failure(op, INVALID_MONTH, str(exc))
        with trace_span("build_agenda"):
            agenda = build_agenda(snapshot, year, number)
        return ServiceResult(ok=True, op=op, data=dump(agenda), meta=snapshot_meta(snapshot))

    @traced
    def summary(self, *, completed: Collection[str] = ()) -> ServiceResult:
        """Every dashboard view computed from one snapshot.

        With a coordinator, the result is settled against its ticket and
        ``meta["refresh"]`` records the ticket and whether it was installed.
        A successful summary overtaken by a newer one carries a warning.
        """
        if self._coordinator is None:
            return self._summary(completed)

        ticket = self._coordinator.begin()
        result = self._summary(completed)
        installed = self._coordinator.settle(ticket, result)
        update: dict[str, Any] = {
            "meta": {**(result.meta or {}), "refresh": {"ticket": ticket, "installed": installed}}
        }
        if result.ok and not installed:
            update["warnings"] = [
                *result.warnings,
                f"refresh {ticket} superseded by a newer summary",
            ]
        return result.model_copy(update=update)

    def _summary(self, completed: Collection[str]) -> ServiceResult:
        op = "dashboard_summary"
        try:
            snapshot = self._load_snapshot()
        except SourceFetchError as exc:
            return self._fetch_failed(op, exc)

        cfg = self._config
        tasks = self._tasks(snapshot, completed)
        financial = self._financial(snapshot)
        data = {
            "stats": dump(summarize_stats(snapshot)),
            "activity": self._activity(snapshot, cfg.activity_limit),
            "tasks": {"items": dump_all(tasks), "count": len(tasks)},
            "financial": dump(financial),
            "platforms": self._platforms(snapshot, financial),
            "insights": self._insights(snapshot, tasks, cfg.insight_limit),
        }
        return ServiceResult(ok=True, op=op, data=data, meta=snapshot_meta(snapshot))
