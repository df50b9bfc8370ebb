"""Backend: the single dependency injected into every service.

Owns the settings and the configured source.  ``--snapshot`` (or
``FREELANCEDESK_SNAPSHOT_PATH``) selects a JSON file; otherwise the
REST API from ``[api]`` is used.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any

from freelancedesk.domain.snapshot import Snapshot
from freelancedesk.infrastructure.api import ApiSnapshotSource
from freelancedesk.infrastructure.sources import FileSnapshotSource, SnapshotSource

if TYPE_CHECKING:
    from freelancedesk.config.settings import DeskSettings

logger = logging.getLogger(__name__)


def source_for(settings: DeskSettings) -> SnapshotSource:
    """Pick the source the settings point at."""
    if settings.snapshot_path is not None:
        return FileSnapshotSource(settings.snapshot_path)
    return ApiSnapshotSource(settings.api)


class Backend:
    """Access to the freelancer data behind one CLI invocation.

    Usage::

        backend = Backend(settings)
        snapshot = backend.load_snapshot()
    """

    def __init__(self, settings: DeskSettings, source: SnapshotSource | None = None) -> None:
        self._settings = settings
        self._source = source if source is not None else source_for(settings)

    @property
    def settings(self) -> DeskSettings:
        return self._settings

    @property
    def source(self) -> SnapshotSource:
        return self._source

    def load_snapshot(self, *, now: datetime | None = None) -> Snapshot:
        """Fetch every collection and normalize them into one snapshot.

        Raises:
            SourceFetchError: when any collection could not be read.
        """
        raw = self._source.fetch()
        snapshot = Snapshot.from_raw(raw, now=now)
        logger.debug("Loaded snapshot %s", snapshot.counts())
        return snapshot

    def update_project(self, project_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        """Send a project update to the source.

        Raises:
            ProjectUpdateError: when the source rejects the update.
        """
        return self._source.update_project(project_id, changes)
