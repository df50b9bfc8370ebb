"""Tests for the dashboard command group, run against a snapshot file."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner, Result

from freelancedesk.cli import cli

pytestmark = pytest.mark.usefixtures("_isolated_env")


def _invoke(runner: CliRunner, snapshot_file: Path, *args: str) -> Result:
    return runner.invoke(cli, ["--snapshot", str(snapshot_file), *args])


class TestStats:
    def test_rich(self, cli_runner: CliRunner, snapshot_file: Path) -> None:
        result = _invoke(cli_runner, snapshot_file, "dashboard", "stats")
        assert result.exit_code == 0, result.output
        assert "total_clients: 3" in result.output

    def test_json(self, cli_runner: CliRunner, snapshot_file: Path) -> None:
        result = _invoke(cli_runner, snapshot_file, "--json", "dashboard", "stats")
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["ok"] is True
        assert payload["op"] == "dashboard_stats"
        assert payload["data"]["total_clients"] == 3
        assert payload["data"]["pending_invoices"] == 2
        assert payload["meta"]["counts"]["projects"] == 5


class TestViews:
    @pytest.mark.parametrize(
        ("command", "op"),
        [
            ("activity", "dashboard_activity"),
            ("tasks", "dashboard_tasks"),
            ("financial", "dashboard_financial"),
            ("platforms", "dashboard_platforms"),
            ("insights", "dashboard_insights"),
            ("agenda", "dashboard_agenda"),
            ("summary", "dashboard_summary"),
        ],
    )
    def test_json_ops(
        self, cli_runner: CliRunner, snapshot_file: Path, command: str, op: str
    ) -> None:
        result = _invoke(cli_runner, snapshot_file, "--json", "dashboard", command)
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["op"] == op
        assert payload["ok"] is True

    def test_activity_limit(self, cli_runner: CliRunner, snapshot_file: Path) -> None:
        result = _invoke(
            cli_runner, snapshot_file, "--json", "dashboard", "activity", "--limit", "2"
        )
        assert json.loads(result.stdout)["data"]["count"] == 2

    def test_tasks_done(self, cli_runner: CliRunner, snapshot_file: Path) -> None:
        result = _invoke(
            cli_runner, snapshot_file, "--json", "dashboard", "tasks", "--done", "x", "--done", "y"
        )
        assert json.loads(result.stdout)["data"]["completed"] == ["x", "y"]

    def test_agenda_month(self, cli_runner: CliRunner, snapshot_file: Path) -> None:
        result = _invoke(
            cli_runner, snapshot_file, "--json", "dashboard", "agenda", "--month", "2031-01"
        )
        data = json.loads(result.stdout)["data"]
        assert (data["year"], data["month"], data["meeting_count"]) == (2031, 1, 0)

    def test_summary_renders(self, cli_runner: CliRunner, snapshot_file: Path) -> None:
        result = _invoke(cli_runner, snapshot_file, "dashboard", "summary")
        assert result.exit_code == 0, result.output
        assert "Overview" in result.output
        assert "Platforms" in result.output


class TestFailures:
    def test_bad_month(self, cli_runner: CliRunner, snapshot_file: Path) -> None:
        result = _invoke(cli_runner, snapshot_file, "dashboard", "agenda", "--month", "13/2026")
        assert result.exit_code == 1
        assert "expected YYYY-MM" in result.output

    def test_year_zero_month(self, cli_runner: CliRunner, snapshot_file: Path) -> None:
        result = _invoke(cli_runner, snapshot_file, "dashboard", "agenda", "--month", "0000-05")
        assert result.exit_code == 1
        assert "year must be 0001 or later" in result.output

    def test_missing_snapshot(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        missing = tmp_path / "gone.json"
        result = _invoke(cli_runner, missing, "dashboard", "stats")
        assert result.exit_code == 1
        assert "could not load data" in result.output

    def test_missing_snapshot_json(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = _invoke(cli_runner, tmp_path / "gone.json", "--json", "dashboard", "tasks")
        assert result.exit_code == 1
        assert '"SOURCE_FETCH"' in result.output

    def test_negative_limit_rejected(self, cli_runner: CliRunner, snapshot_file: Path) -> None:
        result = _invoke(cli_runner, snapshot_file, "dashboard", "insights", "--limit", "-1")
        assert result.exit_code == 2

    def test_activity_limit_above_ten_rejected(
        self, cli_runner: CliRunner, snapshot_file: Path
    ) -> None:
        result = _invoke(cli_runner, snapshot_file, "dashboard", "activity", "--limit", "11")
        assert result.exit_code == 2
        assert "0<=x<=10" in result.output


def test_verbose_shows_telemetry(cli_runner: CliRunner, snapshot_file: Path) -> None:
    result = _invoke(cli_runner, snapshot_file, "-v", "dashboard", "stats")
    assert result.exit_code == 0, result.output
    assert "DashboardService.stats" in result.output


def test_quiet_tasks_prints_ids(cli_runner: CliRunner, snapshot_file: Path) -> None:
    result = _invoke(cli_runner, snapshot_file, "-q", "dashboard", "tasks")
    assert result.exit_code == 0
    assert all("-" in line for line in result.stdout.splitlines())
