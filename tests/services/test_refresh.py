"""Tests for last-wins refresh coordination."""

from __future__ import annotations

import threading

from freelancedesk.services.refresh import RefreshCoordinator
from freelancedesk.services.result import ServiceError, ServiceResult


def _ok(value: int) -> ServiceResult:
    return ServiceResult(ok=True, op="dashboard_summary", data={"value": value})


def _failed(message: str) -> ServiceResult:
    return ServiceResult(
        ok=False,
        op="dashboard_summary",
        error=ServiceError(code="SOURCE_FETCH", message=message),
    )


class TestTickets:
    def test_monotonic(self) -> None:
        coordinator = RefreshCoordinator()
        assert [coordinator.begin() for _ in range(3)] == [1, 2, 3]
        assert coordinator.pending == 3

    def test_out_of_order_completion_is_discarded(self) -> None:
        coordinator = RefreshCoordinator()
        first = coordinator.begin()
        second = coordinator.begin()
        assert coordinator.complete(second, {"value": 2}) is True
        assert coordinator.complete(first, {"value": 1}) is False
        assert coordinator.views == {"value": 2}
        assert coordinator.displayed_ticket == second
        assert coordinator.pending == 0

    def test_failure_keeps_stale_views(self) -> None:
        coordinator = RefreshCoordinator()
        coordinator.complete(coordinator.begin(), {"value": 1})
        assert coordinator.fail(coordinator.begin(), "clients: HTTP 500") is True
        assert coordinator.views == {"value": 1}
        assert coordinator.error == "clients: HTTP 500"

    def test_newer_success_clears_error(self) -> None:
        coordinator = RefreshCoordinator()
        failing = coordinator.begin()
        succeeding = coordinator.begin()
        coordinator.fail(failing, "timed out")
        coordinator.complete(succeeding, {"value": 2})
        assert coordinator.error is None

    def test_older_success_keeps_newer_error(self) -> None:
        coordinator = RefreshCoordinator()
        older = coordinator.begin()
        newer = coordinator.begin()
        coordinator.fail(newer, "timed out")
        assert coordinator.complete(older, {"value": 1}) is True
        assert coordinator.error == "timed out"

    def test_stale_failure_ignored(self) -> None:
        coordinator = RefreshCoordinator()
        older = coordinator.begin()
        coordinator.complete(coordinator.begin(), {"value": 2})
        assert coordinator.fail(older, "late") is False
        assert coordinator.error is None


class TestSettle:
    def test_ok_result_installs_data(self) -> None:
        coordinator = RefreshCoordinator()
        assert coordinator.settle(coordinator.begin(), _ok(1))
        assert coordinator.views == {"value": 1}

    def test_failed_result_records_message(self) -> None:
        coordinator = RefreshCoordinator()
        coordinator.settle(coordinator.begin(), _ok(1))
        assert not coordinator.settle(coordinator.begin(), _failed("timeout"))
        assert coordinator.views == {"value": 1}
        assert coordinator.error == "timeout"

    def test_overtaken_ok_result_is_discarded(self) -> None:
        coordinator = RefreshCoordinator()
        first, second = coordinator.begin(), coordinator.begin()
        assert coordinator.settle(second, _ok(2))
        assert not coordinator.settle(first, _ok(1))
        assert coordinator.views == {"value": 2}


class TestRun:
    def test_success(self) -> None:
        coordinator = RefreshCoordinator()
        assert coordinator.run(lambda: _ok(7)) is True
        assert coordinator.views == {"value": 7}

    def test_failure(self) -> None:
        coordinator = RefreshCoordinator()
        coordinator.run(lambda: _ok(1))
        assert coordinator.run(lambda: _failed("could not load data")) is False
        assert coordinator.views == {"value": 1}
        assert coordinator.error == "could not load data"

    def test_concurrent_refreshes_settle_on_newest(self) -> None:
        coordinator = RefreshCoordinator()
        tickets = [coordinator.begin() for _ in range(20)]
        threads = [
            threading.Thread(target=coordinator.complete, args=(t, {"value": t}))
            for t in reversed(tickets)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert coordinator.views == {"value": 20}
