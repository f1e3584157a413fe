"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy Marketplace initialization and
centralized result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from commctl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from commctl.config.settings import CommSettings
    from commctl.infrastructure.market import Marketplace
    from commctl.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``.  The market is lazily
    opened on first use so ``--help``, ``--version`` and ``init`` never
    create a ledger in the wrong place.
    """

    def __init__(self, settings: CommSettings) -> None:
        self.settings = settings
        self._market: Marketplace | None = None

        from commctl.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose,
            log_json=settings.log_json,
            market=settings.market.name,
        )

        if settings.verbose:
            from commctl.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def market(self) -> Marketplace:
        """The market instance (created lazily on first access)."""
        if self._market is None:
            from commctl.infrastructure.market import Marketplace

            self._market = Marketplace(self.settings)
            self._market.init_plugins()
        return self._market

    def close(self) -> None:
        """Release the market's pooled connections, if it was opened."""
        if self._market is not None:
            self._market.close()
            self._market = None

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
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
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
