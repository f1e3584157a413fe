"""Command: ledger integrity checking and backup restore."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from commctl.commands._base import CommCommand

if TYPE_CHECKING:
    from commctl.commands._context import AppContext


@click.command(
    cls=CommCommand,
    examples="""\
  commctl check
  commctl check --errors-only
  commctl check --min-severity error
  commctl check --rollback""",
)
@click.option(
    "--min-severity",
    type=click.Choice(["warning", "error"]),
    default="warning",
    help="Hide issues below this severity.",
)
@click.option("--errors-only", is_flag=True, help="Shortcut for --min-severity error.")
@click.option("--rollback", is_flag=True, help="Restore from latest backup.")
@click.pass_obj
def check(app: AppContext, min_severity: str, errors_only: bool, rollback: bool) -> None:
    """Check ledger integrity or restore the latest backup."""
    from commctl.services.check import CheckService

    svc = CheckService(app.market)

    if rollback:
        app.emit(svc.rollback())
    else:
        threshold = "error" if errors_only else min_severity
        app.emit(svc.check(min_severity=threshold))
