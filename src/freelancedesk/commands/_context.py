"""AppContext: the object every command receives through ``@click.pass_obj``.

The root group builds one per invocation.  It configures logging, owns
the lazily created Backend, and turns a ServiceResult into output and an
exit status.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from freelancedesk.config.logging import configure_logging
from freelancedesk.output.formatters import OutputSettings, format_result
from freelancedesk.services.telemetry import enable_telemetry

if TYPE_CHECKING:
    from freelancedesk.config.settings import DeskSettings
    from freelancedesk.infrastructure.backend import Backend
    from freelancedesk.services.result import ServiceResult


class AppContext:
    """Per-invocation state shared by the command tree.

    Nothing here touches the network until :attr:`backend` is read, so
    ``--help`` and ``--examples`` stay offline.
    """

    def __init__(self, settings: DeskSettings, backend: Backend | None = None) -> None:
        self.settings = settings
        self._backend = backend

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)
        if settings.verbose:
            enable_telemetry()

    @property
    def backend(self) -> Backend:
        if self._backend is None:
            from freelancedesk.infrastructure.backend import Backend

            self._backend = Backend(self.settings)
        return self._backend

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    def emit(self, result: ServiceResult) -> None:
        """Print *result* and exit 1 if it failed.

        Successful output goes to stdout so it can be piped.  Failures and
        human-mode warnings go to stderr.
        """
        out = self.output_settings
        text = format_result(result, settings=out)
        if not result.ok:
            click.echo(text, err=True)
            raise SystemExit(1)

        click.echo(text)
        if out.json_output:
            # warnings already travel inside the JSON document
            return
        for warning in result.warnings:
            click.echo(f"WARNING: {warning}", err=True)
