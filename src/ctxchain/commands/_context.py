"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Configures logging, loads plugins lazily, and
centralizes result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

import click

from ctxchain.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from ctxchain.config.settings import CtxSettings
    from ctxchain.plugins.manager import PluginManager
    from ctxchain.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: CtxSettings) -> None:
        self.settings = settings
        self._plugins: PluginManager | None = None

        from ctxchain.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        # Inspection targets are usually modules of the project being inspected.
        root = str(settings.project_root)
        if root not in sys.path:
            sys.path.insert(0, root)

    def load_plugins(self) -> PluginManager:
        """Discover plugins once, on first use, so --help never imports them."""
        if self._plugins is None:
            from ctxchain.plugins.manager import PluginManager

            self._plugins = PluginManager()
            if self.settings.plugins.enabled:
                local_dir = self.settings.resolve_path(self.settings.plugins.local_dir)
                self._plugins.discover_and_load(local_dir=local_dir)
        return self._plugins

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
