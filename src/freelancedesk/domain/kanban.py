"""Kanban lanes for projects.

A project's lane is always computed from ``(status, progress)``, never
stored.  Dropping a project on a lane rewrites that pair through a fixed
inverse mapping chosen so that the rewritten project classifies back
into the lane it was dropped on::

    classify(rewrite(lane, project)) == lane

Cancelled projects belong to no lane and are left off the board.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum

from pydantic import BaseModel, Field

from freelancedesk.domain.records import Project
from freelancedesk.domain.types import ProjectStatus


class Lane(StrEnum):
    """Board columns, left to right."""

    TODO = "todo"
    IN_PROGRESS = "in-progress"
    REVIEW = "review"
    COMPLETED = "completed"


LANES: tuple[Lane, ...] = tuple(Lane)

LANE_TITLES: dict[Lane, str] = {
    Lane.TODO: "To Do",
    Lane.IN_PROGRESS: "In Progress",
    Lane.REVIEW: "Review/Waiting",
    Lane.COMPLETED: "Completed",
}

# --- Progress thresholds for Active projects ---

IN_PROGRESS_THRESHOLD = 25  # progress at which work counts as started
REVIEW_THRESHOLD = 90  # progress at which work waits for review


class LaneChange(BaseModel):
    """Update request sent to the project endpoint after a lane drop."""

    model_config = {"frozen": True}

    status: ProjectStatus
    progress: int


class Board(BaseModel):
    """Projects partitioned into lanes, input order preserved per lane."""

    model_config = {"frozen": True}

    lanes: dict[Lane, list[Project]] = Field(default_factory=dict)
    excluded: int = 0

    def count(self, lane: str) -> int:
        return len(self.lanes.get(lane, []))


def is_lane(value: str) -> bool:
    return value in LANES


def classify(project: Project) -> Lane | None:
    """Return the lane for *project*, or None for cancelled projects."""
    status = project.status
    if status == ProjectStatus.COMPLETED:
        return Lane.COMPLETED
    if status == ProjectStatus.ON_HOLD:
        return Lane.REVIEW
    if status == ProjectStatus.ACTIVE:
        if project.progress >= REVIEW_THRESHOLD:
            return Lane.REVIEW
        if project.progress >= IN_PROGRESS_THRESHOLD:
            return Lane.IN_PROGRESS
        return Lane.TODO
    return None


def lane_change(lane: str, project: Project) -> LaneChange:
    """Compute the ``(status, progress)`` a drop on *lane* writes back.

    Raises:
        ValueError: *lane* is not one of :data:`LANES`.
    """
    progress = project.progress
    if lane == Lane.TODO:
        return LaneChange(
            status=ProjectStatus.ACTIVE,
            progress=min(progress, IN_PROGRESS_THRESHOLD - 1),
        )
    if lane == Lane.IN_PROGRESS:
        return LaneChange(
            status=ProjectStatus.ACTIVE,
            progress=max(IN_PROGRESS_THRESHOLD, min(progress, REVIEW_THRESHOLD - 1)),
        )
    if lane == Lane.REVIEW:
        return LaneChange(status=ProjectStatus.ON_HOLD, progress=max(progress, REVIEW_THRESHOLD))
    if lane == Lane.COMPLETED:
        return LaneChange(status=ProjectStatus.COMPLETED, progress=100)
    msg = f"Unknown lane: {lane!r} (expected one of {', '.join(LANES)})"
    raise ValueError(msg)


def rewrite(lane: str, project: Project) -> Project:
    """Return a copy of *project* moved onto *lane*."""
    change = lane_change(lane, project)
    return project.model_copy(update={"status": change.status, "progress": change.progress})


def partition(projects: Iterable[Project]) -> Board:
    """Place every project in its lane; all four lanes are always present."""
    lanes: dict[Lane, list[Project]] = {lane: [] for lane in LANES}
    excluded = 0
    for project in projects:
        lane = classify(project)
        if lane is None:
            excluded += 1
            continue
        lanes[lane].append(project)
    return Board(lanes=lanes, excluded=excluded)
