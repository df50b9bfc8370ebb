"""Shared pytest fixtures and test helpers for freelancedesk tests."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Generator
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from freelancedesk.config.settings import DeskSettings
from freelancedesk.domain.snapshot import Snapshot
from freelancedesk.infrastructure.backend import Backend
from freelancedesk.services.telemetry import disable_telemetry

FIXED_NOW = datetime(2026, 10, 15, 12, 0, tzinfo=UTC)


def iso(**delta: float) -> str:
    """ISO timestamp offset from FIXED_NOW, e.g. ``iso(days=-3)``."""
    return (FIXED_NOW + timedelta(**delta)).isoformat().replace("+00:00", "Z")


def sample_raw() -> dict[str, list[dict[str, Any]]]:
    """A small but complete data set, shaped like the API's JSON.

    Clients: Acme is dormant (40 days), Globex and Initech are recent.
    Invoice i2 is overdue; meeting m1 is within the next day; project p2
    is overdue and p4 is cancelled.
    """
    return {
        "clients": [
            {
                "_id": "c1",
                "name": "Acme",
                "email": "ops@acme.test",
                "source": "Upwork",
                "tags": ["ongoing"],
                "createdAt": iso(days=-40),
            },
            {
                "_id": "c2",
                "name": "Globex",
                "email": "hi@globex.test",
                "source": "Upwork",
                "tags": [],
                "createdAt": iso(days=-5),
            },
            {
                "_id": "c3",
                "name": "Initech",
                "email": "it@initech.test",
                "tags": ["ongoing", "vip"],
                "createdAt": iso(days=-2),
            },
        ],
        "invoices": [
            {
                "_id": "i1",
                "client": "c1",
                "amount": 500,
                "status": "Paid",
                "dueDate": iso(days=10),
                "createdAt": iso(days=-3),
            },
            {
                "_id": "i2",
                "client": "c2",
                "amount": "100",
                "status": "Unpaid",
                "dueDate": iso(days=-1),
                "createdAt": iso(days=-20),
            },
            {
                "_id": "i3",
                "client": {"_id": "c3", "name": "Initech"},
                "amount": 250.5,
                "status": "Paid",
                "dueDate": "2026-10-01",
                "createdAt": "2026-09-20T00:00:00Z",
            },
            {
                "_id": "i4",
                "client": "ghost",
                "amount": 75,
                "status": "Unpaid",
                "dueDate": iso(days=5),
                "createdAt": iso(days=-1),
            },
        ],
        "meetings": [
            {"_id": "m1", "client": "c2", "date": iso(hours=3), "notes": "Kickoff"},
            {"_id": "m2", "client": "c1", "date": iso(days=-2)},
            {
                "_id": "m3",
                "client": "c3",
                "date": iso(days=3),
                "recurring": True,
                "recurringType": "weekly",
            },
        ],
        "projects": [
            {
                "_id": "p1",
                "client": "c1",
                "name": "Website",
                "platform": "Upwork",
                "status": "Active",
                "progress": 10,
                "budget": 1000,
                "paymentStatus": "Paid",
                "startDate": "2026-08-01",
                "deadline": iso(days=30),
            },
            {
                "_id": "p2",
                "client": "c2",
                "name": "App",
                "platform": "Fiverr",
                "status": "Active",
                "progress": 95,
                "budget": 2000,
                "amountPaid": 500,
                "paymentStatus": "Partially Paid",
                "deadline": iso(days=-2),
            },
            {
                "_id": "p3",
                "client": "c3",
                "name": "Logo",
                "platform": "Direct",
                "status": "Completed",
                "progress": 100,
                "budget": 300,
                "paymentStatus": "Paid",
                "startDate": "2026-09-01T00:00:00Z",
                "completedDate": "2026-09-11T00:00:00Z",
                "deadline": "2026-09-15",
            },
            {
                "_id": "p4",
                "client": "c1",
                "name": "Audit",
                "platform": "Upwork",
                "status": "Cancelled",
                "budget": 800,
                "paymentStatus": "Pending",
            },
            {
                "_id": "p5",
                "client": "c3",
                "name": "Docs",
                "platform": "",
                "status": "On Hold",
                "progress": 50,
                "budget": 400,
                "paymentStatus": "Pending",
                "deadline": iso(days=10),
            },
        ],
    }


def make_snapshot(raw: dict[str, Any] | None = None, now: datetime = FIXED_NOW) -> Snapshot:
    """Normalize *raw* (default: the sample data) at a fixed time."""
    return Snapshot.from_raw(sample_raw() if raw is None else raw, now=now)


@pytest.fixture(autouse=True)
def _reset_global_state() -> Generator[None]:
    """Undo what a CLI invocation leaves behind: telemetry and log handlers."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    disable_telemetry()
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def snapshot() -> Snapshot:
    return make_snapshot()


@pytest.fixture
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run in an empty directory with no FREELANCEDESK_* variables set.

    Keeps a developer's own freelancedesk.toml or environment out of tests.
    """
    for name in list(os.environ):
        if name.startswith("FREELANCEDESK_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def snapshot_file(tmp_path: Path) -> Path:
    """Sample data written as a snapshot JSON file."""
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(sample_raw()), encoding="utf-8")
    return path


@pytest.fixture
def settings(snapshot_file: Path, _isolated_env: None) -> DeskSettings:
    return DeskSettings.from_cli(snapshot_path=snapshot_file)


@pytest.fixture
def backend(settings: DeskSettings) -> Backend:
    return Backend(settings)
