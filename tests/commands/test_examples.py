"""Tests for --help and --examples on every command group."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from freelancedesk.cli import cli

pytestmark = pytest.mark.usefixtures("_isolated_env")


@pytest.mark.parametrize(
    "args",
    [
        ["dashboard"],
        ["dashboard", "stats"],
        ["dashboard", "tasks"],
        ["dashboard", "agenda"],
        ["projects"],
        ["projects", "list"],
        ["projects", "move"],
    ],
)
def test_examples(cli_runner: CliRunner, args: list[str]) -> None:
    result = cli_runner.invoke(cli, [*args, "--examples"])
    assert result.exit_code == 0
    assert f"Examples for 'cli {' '.join(args)}'" in result.output
    assert "freelancedesk" in result.output


def test_group_help_lists_subcommands(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["dashboard", "--help"])
    assert result.exit_code == 0
    for name in ("stats", "activity", "tasks", "financial", "platforms", "insights", "agenda"):
        assert name in result.output


def test_projects_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["projects", "--help"])
    assert result.exit_code == 0
    for name in ("analytics", "board", "list", "move"):
        assert name in result.output


def test_examples_are_dedented(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["dashboard", "stats", "--examples"])
    assert "\nfreelancedesk dashboard stats\n" in result.output


def test_examples_flag_absent_without_examples() -> None:
    from freelancedesk.commands._base import DeskCommand

    command = DeskCommand("plain")
    assert command.examples is None
    assert all(param.name != "examples" for param in command.params)
