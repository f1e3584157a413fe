"""Command group: artist registration and lookup."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from commctl.commands._base import CommGroup
from commctl.services.registry import RegistryService

if TYPE_CHECKING:
    from commctl.commands._context import AppContext

_ARTIST_EXAMPLES = """\
  commctl artist create "Mira Okafor" --price 250 --revisions 2
  commctl artist list
  commctl artist show art_3f9c2a0d41b84e6f9a1c7d5e2b8f0a13"""


@click.group(cls=CommGroup, examples=_ARTIST_EXAMPLES)
def artist() -> None:
    """Register and look up artists."""


@artist.command(
    examples="""\
  commctl artist create "Mira Okafor" --price 250 --revisions 2
  commctl --json artist create Ren --price 1000 --revisions 0"""
)
@click.argument("name")
@click.option("--price", type=int, required=True, help="Fixed commission price.")
@click.option(
    "--revisions",
    "revision_budget",
    type=int,
    default=0,
    show_default=True,
    help="Revisions each commission may request.",
)
@click.pass_obj
def create(app: AppContext, name: str, price: int, revision_budget: int) -> None:
    """Register a new artist."""
    app.emit(RegistryService(app.market).create_artist(name, price, revision_budget))


@artist.command(
    "list",
    examples="""\
  commctl artist list
  commctl -q artist list""",
)
@click.pass_obj
def list_artists(app: AppContext) -> None:
    """List all artists."""
    app.emit(RegistryService(app.market).read_artists())


@artist.command(examples="  commctl artist show art_3f9c2a0d41b84e6f9a1c7d5e2b8f0a13")
@click.argument("artist_id")
@click.pass_obj
def show(app: AppContext, artist_id: str) -> None:
    """Show one artist."""
    app.emit(RegistryService(app.market).read_artist(artist_id))
