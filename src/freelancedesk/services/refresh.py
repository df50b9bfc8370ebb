"""RefreshCoordinator: last-wins retention of computed dashboard views.

Refreshes may overlap and finish out of order.  Each refresh takes a
ticket from :meth:`RefreshCoordinator.begin`; a completion is installed
only when its ticket is newer than the one on display, so a slow early
refresh can never overwrite a later one.  A failed refresh records its
error and leaves the displayed views in place.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any

import structlog

from freelancedesk.services.result import ServiceResult

log = structlog.get_logger(__name__)


class RefreshCoordinator:
    """Thread-safe ticketing for concurrent refreshes.

    Usage::

        coordinator = RefreshCoordinator()
        service = DashboardService(backend, coordinator=coordinator)
        service.summary()
        coordinator.views  # data of the newest successful summary
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._issued = 0
        self._displayed = 0
        self._error_ticket = 0
        self._views: dict[str, Any] | None = None
        self._error: str | None = None

    @property
    def views(self) -> dict[str, Any] | None:
        with self._lock:
            return self._views

    @property
    def error(self) -> str | None:
        """Error of the newest failed refresh, if nothing newer succeeded."""
        with self._lock:
            return self._error

    @property
    def displayed_ticket(self) -> int:
        with self._lock:
            return self._displayed

    @property
    def pending(self) -> int:
        """Tickets issued after the newest settled one."""
        with self._lock:
            return self._issued - max(self._displayed, self._error_ticket)

    def begin(self) -> int:
        """Issue the next ticket."""
        with self._lock:
            self._issued += 1
            return self._issued

    def complete(self, ticket: int, views: dict[str, Any]) -> bool:
        """Install *views* unless a newer refresh is already on display.

        Returns True when the views were installed.
        """
        with self._lock:
            if ticket <= self._displayed:
                log.debug("refresh.discarded", ticket=ticket, displayed=self._displayed)
                return False
            self._displayed = ticket
            self._views = views
            if self._error_ticket < ticket:
                self._error = None
            return True

    def fail(self, ticket: int, error: str) -> bool:
        """Record a failed refresh; displayed views stay as they are.

        Returns False when a newer refresh already settled.
        """
        with self._lock:
            if ticket <= self._displayed or ticket <= self._error_ticket:
                return False
            self._error_ticket = ticket
            self._error = error
            log.debug("refresh.failed", ticket=ticket, error=error)
            return True

    def settle(self, ticket: int, result: ServiceResult) -> bool:
        """Complete or fail *ticket* according to *result*.

        Returns True when the result's data was installed.
        """
        if result.ok:
            return self.complete(ticket, result.data)
        message = result.error.message if result.error is not None else "refresh failed"
        self.fail(ticket, message)
        return False

    def run(self, compute: Callable[[], ServiceResult]) -> bool:
        """Run one refresh through *compute* and settle its ticket."""
        ticket = self.begin()
        return self.settle(ticket, compute())
