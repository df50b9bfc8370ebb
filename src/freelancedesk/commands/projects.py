"""Command group for project analytics and the kanban board."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from freelancedesk.commands._base import DeskGroup
from freelancedesk.domain.kanban import LANES
from freelancedesk.domain.project_list import SORT_KEYS
from freelancedesk.domain.types import PaymentStatus, ProjectStatus
from freelancedesk.services.projects import ProjectService

if TYPE_CHECKING:
    from freelancedesk.commands._context import AppContext

_PROJECTS_EXAMPLES = """\
  freelancedesk projects analytics
  freelancedesk projects board
  freelancedesk projects list --status Active --sort budget
  freelancedesk projects move p_42 review
  freelancedesk projects move p_42 completed --dry-run"""


@click.group(cls=DeskGroup, examples=_PROJECTS_EXAMPLES)
@click.pass_obj
def projects(app: AppContext) -> None:
    """Project analytics and the kanban board."""


@projects.command(
    examples="""\
  freelancedesk projects analytics
  freelancedesk --json projects analytics"""
)
@click.pass_obj
def analytics(app: AppContext) -> None:
    """Portfolio totals with leaderboards and a monthly trend."""
    app.emit(ProjectService(app.backend).analytics())


@projects.command(
    examples="""\
  freelancedesk projects board
  freelancedesk -q projects board"""
)
@click.pass_obj
def board(app: AppContext) -> None:
    """Projects by kanban lane: To Do, In Progress, Review/Waiting, Completed."""
    app.emit(ProjectService(app.backend).board())


@projects.command(
    name="list",
    examples="""\
  freelancedesk projects list
  freelancedesk projects list --status "On Hold"
  freelancedesk projects list --payment-status Pending --sort budget
  freelancedesk projects list --client c_17 --sort client""",
)
@click.option(
    "--status",
    type=click.Choice([str(s) for s in ProjectStatus]),
    default=None,
    help="Filter by project status.",
)
@click.option(
    "--payment-status",
    type=click.Choice([str(s) for s in PaymentStatus]),
    default=None,
    help="Filter by payment status.",
)
@click.option("--client", "client_id", default=None, help="Filter by client id.")
@click.option(
    "--sort",
    type=click.Choice(list(SORT_KEYS)),
    default="deadline",
    show_default=True,
    help="Sort order.",
)
@click.pass_obj
def list_cmd(
    app: AppContext,
    status: str | None,
    payment_status: str | None,
    client_id: str | None,
    sort: str,
) -> None:
    """List projects with optional filters."""
    svc = ProjectService(app.backend)
    result = svc.list_projects(
        status=status,
        payment_status=payment_status,
        client_id=client_id,
        sort=sort,
    )
    app.emit(result)


@projects.command(
    examples="""\
  freelancedesk projects move p_42 in-progress
  freelancedesk projects move p_42 completed --dry-run"""
)
@click.argument("project_id")
@click.argument("lane", type=click.Choice([str(lane) for lane in LANES]))
@click.option("--dry-run", is_flag=True, help="Show the update without sending it.")
@click.pass_obj
def move(app: AppContext, project_id: str, lane: str, dry_run: bool) -> None:
    """Move a project onto a lane, rewriting its status and progress."""
    app.emit(ProjectService(app.backend).move(project_id, lane, dry_run=dry_run))
