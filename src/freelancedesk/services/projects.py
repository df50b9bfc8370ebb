"""ProjectService: analytics and kanban operations over the project collection.

Four surfaces:
- analytics: totals, revenue split, leaderboards, monthly trend, recommendations
- board: projects partitioned into lanes
- list_projects: filtered and sorted project listing
- move: rewrite a project onto a lane and send the update
"""

from __future__ import annotations

import logging
from typing import Any

from freelancedesk.domain.kanban import (
    LANE_TITLES,
    LANES,
    Lane,
    classify,
    is_lane,
    lane_change,
    partition,
)
from freelancedesk.domain.project_analytics import compute_project_analytics, project_insights
from freelancedesk.domain.project_list import filter_projects, sort_projects
from freelancedesk.domain.records import Project
from freelancedesk.domain.snapshot import UNKNOWN, ClientDirectory
from freelancedesk.infrastructure.sources import ProjectUpdateError, SourceFetchError
from freelancedesk.services._helpers import dump, dump_all, snapshot_meta
from freelancedesk.services.base import BaseService
from freelancedesk.services.result import (
    INVALID_LANE,
    NOT_FOUND,
    UPDATE_FAILED,
    ServiceResult,
)
from freelancedesk.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)


def _project_row(project: Project, directory: ClientDirectory) -> dict[str, Any]:
    """Project as JSON plus its resolved client name and current lane."""
    row = dump(project)
    row["client"] = directory.name_for(project.client_id, UNKNOWN)
    lane = classify(project)
    row["lane"] = str(lane) if lane is not None else None
    return row


class ProjectService(BaseService):
    """Project views plus the one write: moving a project between lanes."""

    @traced
    def analytics(self) -> ServiceResult:
        op = "project_analytics"
        try:
            snapshot = self._load_snapshot()
        except SourceFetchError as exc:
            return self._fetch_failed(op, exc)

        with trace_span("compute_project_analytics"):
            analytics = compute_project_analytics(
                snapshot,
                leaderboard_size=self._backend.settings.projects.leaderboard_size,
            )
        data = dump(analytics)
        data["insights"] = dump_all(project_insights(analytics))
        return ServiceResult(ok=True, op=op, data=data, meta=snapshot_meta(snapshot))

    @traced
    def board(self) -> ServiceResult:
        """Every lane in board order, empty lanes included."""
        op = "project_board"
        try:
            snapshot = self._load_snapshot()
        except SourceFetchError as exc:
            return self._fetch_failed(op, exc)

        board = partition(snapshot.projects)
        lanes = [
            {
                "lane": str(lane),
                "title": LANE_TITLES[lane],
                "count": board.count(lane),
                "projects": [_project_row(p, snapshot.directory) for p in board.lanes[lane]],
            }
            for lane in LANES
        ]
        return ServiceResult(
            ok=True,
            op=op,
            data={"lanes": lanes, "excluded": board.excluded},
            meta=snapshot_meta(snapshot),
        )

    @traced
    def list_projects(
        self,
        *,
        status: str | None = None,
        payment_status: str | None = None,
        client_id: str | None = None,
        sort: str = "deadline",
    ) -> ServiceResult:
        """Filtered project listing.

        Args:
            status: Keep only this project status.
            payment_status: Keep only this payment status.
            client_id: Keep only this client's projects.
            sort: One of ``deadline``, ``client``, ``payment-status``,
                ``status``, ``budget``.
        """
        op = "list_projects"
        try:
            snapshot = self._load_snapshot()
        except SourceFetchError as exc:
            return self._fetch_failed(op, exc)

        matched = filter_projects(
            snapshot.projects,
            status=status,
            payment_status=payment_status,
            client_id=client_id,
        )
        ordered = sort_projects(matched, snapshot.directory, by=sort)
        items = [_project_row(p, snapshot.directory) for p in ordered]
        return ServiceResult(
            ok=True,
            op=op,
            data={"items": items, "count": len(items), "sort": sort},
            meta=snapshot_meta(snapshot),
        )

    @traced
    def move(self, project_id: str, lane: str, *, dry_run: bool = False) -> ServiceResult:
        """Move a project onto *lane* by rewriting its status and progress.

        With *dry_run* the update is computed but not sent.
        """
        op = "move_project"
        if not is_lane(lane):
            return ServiceResult.failure(
                op, INVALID_LANE, f"Unknown lane: {lane}", lanes=[str(item) for item in LANES]
            )
        target = Lane(lane)

        try:
            snapshot = self._load_snapshot()
        except SourceFetchError as exc:
            return self._fetch_failed(op, exc)

        project = snapshot.find_project(project_id)
        if project is None:
            return ServiceResult.failure(op, NOT_FOUND, f"Project not found: {project_id}")

        change = lane_change(target, project)
        previous = classify(project)
        data: dict[str, Any] = {
            "id": project.id,
            "name": project.name,
            "from_lane": str(previous) if previous is not None else None,
            "to_lane": str(target),
            "status": str(change.status),
            "progress": change.progress,
            "dry_run": dry_run,
        }
        if dry_run:
            return ServiceResult(ok=True, op=op, data=data, meta=snapshot_meta(snapshot))

        with trace_span("update_project"):
            try:
                self._backend.update_project(project.id, change.model_dump(mode="json"))
            except ProjectUpdateError as exc:
                logger.debug("Project update failed for %s: %s", project.id, exc)
                return ServiceResult.failure(
                    op,
                    UPDATE_FAILED,
                    f"Could not update project {project.id}: {exc}",
                    id=project.id,
                    change=change.model_dump(mode="json"),
                )
        return ServiceResult(ok=True, op=op, data=data, meta=snapshot_meta(snapshot))
