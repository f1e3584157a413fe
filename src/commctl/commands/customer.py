"""Command group: customer registration and lookup."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from commctl.commands._base import CommGroup
from commctl.services.registry import RegistryService

if TYPE_CHECKING:
    from commctl.commands._context import AppContext


@click.group(
    cls=CommGroup,
    examples="""\
  commctl customer create "Tomas Reyes"
  commctl customer list
  commctl customer show cus_9b1e04c7a2d3458f8e6a0c1d7f2b3e49""",
)
def customer() -> None:
    """Register and look up customers."""


@customer.command(examples='  commctl customer create "Tomas Reyes"')
@click.argument("name")
@click.pass_obj
def create(app: AppContext, name: str) -> None:
    """Register a new customer."""
    app.emit(RegistryService(app.market).create_customer(name))


@customer.command("list", examples="  commctl customer list")
@click.pass_obj
def list_customers(app: AppContext) -> None:
    """List all customers."""
    app.emit(RegistryService(app.market).read_customers())


@customer.command(examples="  commctl customer show cus_9b1e04c7a2d3458f8e6a0c1d7f2b3e49")
@click.argument("customer_id")
@click.pass_obj
def show(app: AppContext, customer_id: str) -> None:
    """Show one customer."""
    app.emit(RegistryService(app.market).read_customer(customer_id))
