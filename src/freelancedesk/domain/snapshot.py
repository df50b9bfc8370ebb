"""Snapshot: one immutable, normalized view of the four collections.

A snapshot is built once per refresh from the raw API payloads.  All
derived views are pure functions of it, including its evaluation time
``taken_at``: calculators never consult the wall clock themselves.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from freelancedesk.domain.records import Client, Invoice, Meeting, Project

UNKNOWN_CLIENT = "Unknown client"
UNKNOWN = "Unknown"

COLLECTIONS: tuple[str, ...] = ("clients", "invoices", "meetings", "projects")


class ClientDirectory:
    """Client id -> record mapping built once per snapshot.

    Owns the single definition of the "unknown client" fallback so that
    dangling references never raise.
    """

    def __init__(self, clients: Iterable[Client]) -> None:
        self._by_id: dict[str, Client] = {}
        for client in clients:
            # First record wins for duplicated ids.
            self._by_id.setdefault(client.id, client)

    def __contains__(self, client_id: object) -> bool:
        return client_id in self._by_id

    def __len__(self) -> int:
        return len(self._by_id)

    def get(self, client_id: str) -> Client | None:
        return self._by_id.get(client_id)

    def name_for(self, client_id: str, fallback: str = UNKNOWN_CLIENT) -> str:
        """Display name for *client_id*, or *fallback* when it does not resolve."""
        client = self._by_id.get(client_id)
        if client is None or not client.name:
            return fallback
        return client.name


def _records(raw: Any) -> list[Mapping[str, Any]]:
    """Keep only mapping entries of a raw collection payload."""
    if not isinstance(raw, (list, tuple)):
        return []
    return [item for item in raw if isinstance(item, Mapping)]


@dataclass(frozen=True)
class Snapshot:
    """Point-in-time set of clients, invoices, meetings and projects."""

    taken_at: datetime
    clients: tuple[Client, ...] = ()
    invoices: tuple[Invoice, ...] = ()
    meetings: tuple[Meeting, ...] = ()
    projects: tuple[Project, ...] = ()
    directory: ClientDirectory = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "directory", ClientDirectory(self.clients))

    @property
    def now(self) -> datetime:
        return self.taken_at

    def counts(self) -> dict[str, int]:
        return {
            "clients": len(self.clients),
            "invoices": len(self.invoices),
            "meetings": len(self.meetings),
            "projects": len(self.projects),
        }

    def find_project(self, project_id: str) -> Project | None:
        for project in self.projects:
            if project.id == project_id:
                return project
        return None

    @classmethod
    def from_raw(
        cls,
        raw: Mapping[str, Sequence[Any]],
        *,
        now: datetime | None = None,
    ) -> Snapshot:
        """Normalize raw collection payloads into a snapshot.

        Missing collections are treated as empty; non-object entries are
        dropped.  *now* defaults to the current UTC time.
        """
        taken_at = now or datetime.now(UTC)
        if taken_at.tzinfo is None:
            taken_at = taken_at.replace(tzinfo=UTC)
        return cls(
            taken_at=taken_at,
            clients=tuple(Client.from_raw(r, now=taken_at) for r in _records(raw.get("clients"))),
            invoices=tuple(
                Invoice.from_raw(r, now=taken_at) for r in _records(raw.get("invoices"))
            ),
            meetings=tuple(
                Meeting.from_raw(r, now=taken_at) for r in _records(raw.get("meetings"))
            ),
            projects=tuple(
                Project.from_raw(r, now=taken_at) for r in _records(raw.get("projects"))
            ),
        )
