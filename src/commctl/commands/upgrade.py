"""Command: ledger schema migration."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from commctl.commands._base import CommCommand

if TYPE_CHECKING:
    from commctl.commands._context import AppContext


@click.command(
    cls=CommCommand,
    examples="""\
  commctl upgrade
  commctl upgrade --check
  commctl --json upgrade --check""",
)
@click.option(
    "--check", "check_only", is_flag=True, help="Show pending migrations without applying."
)
@click.pass_obj
def upgrade(app: AppContext, check_only: bool) -> None:
    """Run pending ledger migrations."""
    from commctl.services.upgrade import UpgradeService

    svc = UpgradeService(app.market)
    app.emit(svc.check_pending() if check_only else svc.apply())
