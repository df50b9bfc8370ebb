"""Tests for DashboardService."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from freelancedesk.config.settings import DeskSettings
from freelancedesk.domain.snapshot import Snapshot
from freelancedesk.infrastructure.backend import Backend
from freelancedesk.services.dashboard import DashboardService
from freelancedesk.services.refresh import RefreshCoordinator
from tests.conftest import FIXED_NOW


@pytest.fixture
def service(backend: Backend) -> DashboardService:
    return DashboardService(backend, now=FIXED_NOW)


class TestStats:
    def test_counts(self, service: DashboardService) -> None:
        result = service.stats()
        assert result.ok
        assert result.op == "dashboard_stats"
        assert result.data == {
            "total_clients": 3,
            "active_projects": 2,
            "pending_invoices": 2,
            "upcoming_meetings": 2,
        }

    def test_meta(self, service: DashboardService) -> None:
        meta = service.stats().meta
        assert meta is not None
        assert meta["taken_at"] == FIXED_NOW.isoformat()
        assert meta["counts"] == {"clients": 3, "invoices": 4, "meetings": 3, "projects": 5}


class TestActivity:
    def test_default_limit(self, service: DashboardService) -> None:
        data = service.activity().data
        assert data["count"] == 10
        assert data["items"][0]["id"] == "meeting-m3"

    def test_explicit_limit(self, service: DashboardService) -> None:
        data = service.activity(limit=3).data
        assert [item["id"] for item in data["items"]] == [
            "meeting-m3",
            "meeting-m1",
            "invoice-i4",
        ]

    def test_limit_above_ten_is_capped(self, service: DashboardService) -> None:
        assert service.activity(limit=50).data["count"] == 10


class TestTasks:
    def test_all(self, service: DashboardService) -> None:
        data = service.tasks().data
        assert [t["id"] for t in data["items"]] == ["overdue-i2", "meeting-m1", "followup-c1"]
        assert data["completed"] == []

    def test_completed_are_hidden(self, service: DashboardService) -> None:
        data = service.tasks(completed=["meeting-m1", "meeting-m1", "unknown"]).data
        assert [t["id"] for t in data["items"]] == ["overdue-i2", "followup-c1"]
        assert data["count"] == 2
        assert data["completed"] == ["meeting-m1", "unknown"]


class TestFinancialAndPlatforms:
    def test_financial(self, service: DashboardService) -> None:
        data = service.financial().data
        assert data["monthly_income"] == 500
        assert data["pending_payments"] == 175
        assert [row["name"] for row in data["revenue_by_client"]] == ["Acme", "Initech"]

    def test_platforms(self, service: DashboardService) -> None:
        data = service.platforms().data
        assert data["total_clients"] == 3
        assert data["active_percentage"] == 66.7
        assert [row["platform"] for row in data["revenue"]] == ["Upwork", "Direct"]


class TestInsights:
    def test_default_limit(self, service: DashboardService) -> None:
        data = service.insights().data
        assert data["count"] == 5
        assert data["total"] == 6
        assert data["items"][0]["title"] == "Client Follow-up Needed"

    def test_configured_limit(
        self, snapshot_file: Path, monkeypatch: pytest.MonkeyPatch, _isolated_env: None
    ) -> None:
        monkeypatch.setenv("FREELANCEDESK_DASHBOARD__INSIGHT_LIMIT", "2")
        settings = DeskSettings.from_cli(snapshot_path=snapshot_file)
        data = DashboardService(Backend(settings), now=FIXED_NOW).insights().data
        assert data["count"] == 2
        assert data["total"] == 6


class TestAgenda:
    def test_current_month(self, service: DashboardService) -> None:
        data = service.agenda().data
        assert (data["year"], data["month"], data["meeting_count"]) == (2026, 10, 3)
        assert [e["id"] for e in data["upcoming"]] == ["m1", "m3"]

    def test_other_month(self, service: DashboardService) -> None:
        data = service.agenda(month="2026-11").data
        assert data["label"] == "November 2026"
        assert data["meeting_count"] == 0

    def test_invalid_month(self, service: DashboardService) -> None:
        result = service.agenda(month="2026-13")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_MONTH"

    def test_year_zero_is_invalid_month(self, service: DashboardService) -> None:
        result = service.agenda(month="0000-05")
        assert result.error is not None
        assert result.error.code == "INVALID_MONTH"

    def test_last_representable_month(self, service: DashboardService) -> None:
        result = service.agenda(month="9999-12")
        assert result.ok
        assert result.data["label"] == "December 9999"


class TestSummary:
    def test_sections(self, service: DashboardService) -> None:
        data = service.summary().data
        assert set(data) == {"stats", "activity", "tasks", "financial", "platforms", "insights"}
        assert data["tasks"]["count"] == 3
        assert data["insights"]["total"] == 6

    def test_completed_tasks_feed_insights(self, service: DashboardService) -> None:
        data = service.summary(completed=["overdue-i2"]).data
        assert data["tasks"]["count"] == 2
        titles = [i["title"] for i in data["insights"]["items"]]
        assert "High Priority Tasks" not in titles
        assert data["insights"]["total"] == 5


class TestSourceFailure:
    def test_missing_file(self, tmp_path: Path, _isolated_env: None) -> None:
        missing = tmp_path / "missing.json"
        settings = DeskSettings.from_cli(snapshot_path=missing)
        service = DashboardService(Backend(settings))
        for result in (service.stats(), service.summary(), service.agenda()):
            assert not result.ok
            assert result.error is not None
            assert result.error.code == "SOURCE_FETCH"
            assert result.error.message.startswith("could not load data:")
            assert result.error.detail == {"sources": [str(missing)]}


class TestCoordinatedSummary:
    def test_installs_views(self, backend: Backend) -> None:
        coordinator = RefreshCoordinator()
        result = DashboardService(backend, now=FIXED_NOW, coordinator=coordinator).summary()
        assert result.ok
        assert result.meta is not None
        assert result.meta["refresh"] == {"ticket": 1, "installed": True}
        assert coordinator.views == result.data
        assert result.warnings == []

    def test_failure_keeps_previous_views(self, backend: Backend, snapshot_file: Path) -> None:
        coordinator = RefreshCoordinator()
        service = DashboardService(backend, now=FIXED_NOW, coordinator=coordinator)
        first = service.summary()
        snapshot_file.unlink()

        failed = service.summary()
        assert not failed.ok
        assert failed.meta == {"refresh": {"ticket": 2, "installed": False}}
        assert coordinator.views == first.data
        assert coordinator.error is not None
        assert coordinator.error.startswith("could not load data:")

    def test_overtaken_summary_is_not_installed(
        self, backend: Backend, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        coordinator = RefreshCoordinator()
        load = backend.load_snapshot

        def load_while_newer_refresh_lands(*, now: datetime | None = None) -> Snapshot:
            coordinator.complete(coordinator.begin(), {"newer": True})
            return load(now=now)

        monkeypatch.setattr(backend, "load_snapshot", load_while_newer_refresh_lands)
        result = DashboardService(backend, now=FIXED_NOW, coordinator=coordinator).summary()

        assert result.ok
        assert result.meta is not None
        assert result.meta["refresh"] == {"ticket": 1, "installed": False}
        assert result.warnings == ["refresh 1 superseded by a newer summary"]
        assert coordinator.views == {"newer": True}
        assert coordinator.displayed_ticket == 2

    def test_without_coordinator_meta_has_no_refresh(self, service: DashboardService) -> None:
        meta = service.summary().meta
        assert meta is not None
        assert "refresh" not in meta
