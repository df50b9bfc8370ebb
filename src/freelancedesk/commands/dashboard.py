"""Command group: dashboard views computed from the current data."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from freelancedesk.commands._base import DeskGroup
from freelancedesk.domain.activity import FEED_LIMIT
from freelancedesk.services.dashboard import DashboardService

if TYPE_CHECKING:
    from freelancedesk.commands._context import AppContext

_DASHBOARD_EXAMPLES = """\
  freelancedesk dashboard summary
  freelancedesk dashboard tasks --done overdue-inv_1
  freelancedesk dashboard insights --limit 3
  freelancedesk dashboard agenda --month 2026-11
  freelancedesk --snapshot data.json dashboard financial"""


@click.group(cls=DeskGroup, examples=_DASHBOARD_EXAMPLES)
@click.pass_obj
def dashboard(app: AppContext) -> None:
    """Dashboard views computed from one data snapshot."""


@dashboard.command(
    examples="""\
  freelancedesk dashboard stats
  freelancedesk --json dashboard stats"""
)
@click.pass_obj
def stats(app: AppContext) -> None:
    """Headline counters: clients, ongoing work, unpaid invoices, meetings ahead."""
    app.emit(DashboardService(app.backend).stats())


@dashboard.command(
    examples="""\
  freelancedesk dashboard activity
  freelancedesk dashboard activity --limit 5"""
)
@click.option(
    "--limit", default=None, type=click.IntRange(0, FEED_LIMIT), help="Max entries (0-10)."
)
@click.pass_obj
def activity(app: AppContext, limit: int | None) -> None:
    """Latest events, newest first."""
    app.emit(DashboardService(app.backend).activity(limit=limit))


@dashboard.command(
    examples="""\
  freelancedesk dashboard tasks
  freelancedesk dashboard tasks --done overdue-inv_1 --done followup-c_7
  freelancedesk -q dashboard tasks"""
)
@click.option(
    "--done",
    "completed",
    multiple=True,
    metavar="TASK_ID",
    help="Hide a task already taken care of (repeatable).",
)
@click.pass_obj
def tasks(app: AppContext, completed: tuple[str, ...]) -> None:
    """Follow-ups: overdue invoices, meeting prep, dormant clients."""
    app.emit(DashboardService(app.backend).tasks(completed=completed))


@dashboard.command(
    examples="""\
  freelancedesk dashboard financial
  freelancedesk --json dashboard financial"""
)
@click.pass_obj
def financial(app: AppContext) -> None:
    """Income and receivables, broken down by client and platform."""
    app.emit(DashboardService(app.backend).financial())


@dashboard.command(
    examples="""\
  freelancedesk dashboard platforms"""
)
@click.pass_obj
def platforms(app: AppContext) -> None:
    """Client activity split and revenue share per acquisition platform."""
    app.emit(DashboardService(app.backend).platforms())


@dashboard.command(
    examples="""\
  freelancedesk dashboard insights
  freelancedesk dashboard insights --limit 10"""
)
@click.option("--limit", default=None, type=click.IntRange(min=0), help="Max insights shown.")
@click.pass_obj
def insights(app: AppContext, limit: int | None) -> None:
    """Heuristic observations, most urgent first."""
    app.emit(DashboardService(app.backend).insights(limit=limit))


@dashboard.command(
    examples="""\
  freelancedesk dashboard agenda
  freelancedesk dashboard agenda --month 2026-12"""
)
@click.option("--month", default=None, metavar="YYYY-MM", help="Month to show (default: current).")
@click.pass_obj
def agenda(app: AppContext, month: str | None) -> None:
    """Meetings of one month, grouped by day."""
    app.emit(DashboardService(app.backend).agenda(month=month))


@dashboard.command(
    examples="""\
  freelancedesk dashboard summary
  freelancedesk --json dashboard summary > dashboard.json"""
)
@click.option("--done", "completed", multiple=True, metavar="TASK_ID", help="Hide a task.")
@click.pass_obj
def summary(app: AppContext, completed: tuple[str, ...]) -> None:
    """The whole dashboard from a single refresh."""
    app.emit(DashboardService(app.backend).summary(completed=completed))
