"""Subcommand modules for freelancedesk.

register_commands() imports the groups lazily to keep
``freelancedesk --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register every command group on the root CLI group."""
    from freelancedesk.commands.dashboard import dashboard
    from freelancedesk.commands.projects import projects

    cli.add_command(dashboard)
    cli.add_command(projects)
