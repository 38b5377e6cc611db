"""AppContext — shared Click context for all commands.

Created once by the root CLI group and handed to subcommands via
``@click.pass_obj``. Opens the editor session lazily and routes results
to stdout/stderr with the right exit code.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from lineageflow.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from lineageflow.config.settings import LineageSettings
    from lineageflow.services.editor import EditorService
    from lineageflow.services.result import ServiceResult
    from lineageflow.services.session import EditorSession


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The session is opened on first use so ``--help``, ``--version`` and
    ``--examples`` never touch local storage.
    """

    def __init__(self, settings: LineageSettings) -> None:
        self.settings = settings
        self._session: EditorSession | None = None

        from lineageflow.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def session(self) -> EditorSession:
        """The hydrated editor session (opened lazily)."""
        if self._session is None:
            from lineageflow.plugins.manager import PluginManager
            from lineageflow.services.session import EditorSession

            plugins = PluginManager()
            plugins.discover_and_load()
            self._session = EditorSession.open(self.settings, plugins=plugins)
            self._session.__enter__()
        return self._session

    @property
    def editor(self) -> EditorService:
        from lineageflow.services.editor import EditorService

        return EditorService(self.session)

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout. Warnings go to stderr so piped output
          stays clean.
        * Failure: writes to stderr and exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # JSON output already carries the warnings.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
