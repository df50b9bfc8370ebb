"""Filtering and ordering for the project list screen."""

from __future__ import annotations

from collections.abc import Iterable

from freelancedesk.domain.records import Project
from freelancedesk.domain.snapshot import ClientDirectory

SORT_KEYS: tuple[str, ...] = ("deadline", "client", "payment-status", "status", "budget")


def filter_projects(
    projects: Iterable[Project],
    *,
    status: str | None = None,
    payment_status: str | None = None,
    client_id: str | None = None,
) -> list[Project]:
    """Keep projects matching every given filter; None means "all"."""
    return [
        p
        for p in projects
        if (status is None or p.status == status)
        and (payment_status is None or p.payment_status == payment_status)
        and (client_id is None or p.client_id == client_id)
    ]


def sort_projects(
    projects: Iterable[Project],
    directory: ClientDirectory,
    *,
    by: str = "deadline",
) -> list[Project]:
    """Order projects for display.

    ``deadline`` is soonest first, ``budget`` largest first, the rest
    alphabetical.  Unknown keys keep the input order.
    """
    items = list(projects)
    if by == "deadline":
        return sorted(items, key=lambda p: p.deadline)
    if by == "client":
        return sorted(items, key=lambda p: directory.name_for(p.client_id, "").casefold())
    if by == "payment-status":
        return sorted(items, key=lambda p: str(p.payment_status))
    if by == "status":
        return sorted(items, key=lambda p: str(p.status))
    if by == "budget":
        return sorted(items, key=lambda p: p.budget, reverse=True)
    return items
