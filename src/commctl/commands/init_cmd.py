"""Command: market initialization (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from commctl.commands._base import CommCommand

if TYPE_CHECKING:
    from commctl.commands._context import AppContext

_INIT_EXAMPLES = """\
  commctl init
  commctl init /srv/market --name studio-row
  commctl init . --name atelier --currency USD"""


@click.command("init", cls=CommCommand, examples=_INIT_EXAMPLES)
@click.argument("path", required=False, default=".")
@click.option("--name", default=None, help="Market name (default: directory name).")
@click.option("--currency", default="ICP", show_default=True, help="Display currency.")
@click.pass_obj
def init_cmd(app: AppContext, path: str, name: str | None, currency: str) -> None:
    """Initialize a new commctl market."""
    from commctl.services.init import InitService

    market_path = Path(path).resolve()
    app.emit(
        InitService.init_market(
            market_path,
            name=name if name is not None else market_path.name,
            currency=currency,
        )
    )
