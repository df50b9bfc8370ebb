"""BaseService: common foundation for freelancedesk services.

Every service receives a :class:`Backend` at construction time.  Each
operation loads one snapshot, so a result never mixes data from two
refreshes.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from freelancedesk.infrastructure.sources import SourceFetchError
from freelancedesk.services.result import SOURCE_FETCH, ServiceResult
from freelancedesk.services.telemetry import trace_span

if TYPE_CHECKING:
    from freelancedesk.domain.snapshot import Snapshot
    from freelancedesk.infrastructure.backend import Backend

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service-layer classes.

    *now* pins the snapshot's evaluation time; by default each load uses
    the current UTC time.

    Usage::

        class DashboardService(BaseService):
            def stats(self) -> ServiceResult:
                try:
                    snapshot = self._load_snapshot()
                except SourceFetchError as exc:
                    return self._fetch_failed("dashboard_stats", exc)
                ...
    """

    def __init__(self, backend: Backend, *, now: datetime | None = None) -> None:
        self._backend = backend
        self._now = now

    def _load_snapshot(self) -> Snapshot:
        with trace_span("load_snapshot") as span:
            snapshot = self._backend.load_snapshot(now=self._now)
            if span is not None:
                span.annotate("counts", snapshot.counts())
        return snapshot

    @staticmethod
    def _fetch_failed(op: str, exc: SourceFetchError) -> ServiceResult:
        """Failure result for a snapshot that could not be loaded."""
        logger.debug("Snapshot load failed for %s: %s", op, exc)
        return ServiceResult.failure(
            op, SOURCE_FETCH, f"could not load data: {exc}", sources=exc.sources
        )
