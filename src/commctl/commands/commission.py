"""Command group: commission requests and lifecycle transitions."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from commctl.commands._base import CommGroup
from commctl.domain.lifecycle import CommissionStatus
from commctl.services.commission import CommissionService

if TYPE_CHECKING:
    from commctl.commands._context import AppContext

_ID = "com_5d2a7c91e03f4b6a8d1e9c0b7a4f2e36"

_COMMISSION_EXAMPLES = f"""\
  commctl commission request --artist art_3f9c... --customer cus_9b1e...
  commctl commission list --status pending
  commctl commission accept {_ID}
  commctl commission submit {_ID} https://example.com/art/final.png
  commctl commission revise {_ID}
  commctl commission approve {_ID}"""


@click.group(cls=CommGroup, examples=_COMMISSION_EXAMPLES)
def commission() -> None:
    """Request commissions and move them through their lifecycle."""


# ── Creation and reads ────────────────────────────────────────────────


@commission.command(
    examples="""\
  commctl commission request --artist art_3f9c2a0d41b84e6f9a1c7d5e2b8f0a13 \\
      --customer cus_9b1e04c7a2d3458f8e6a0c1d7f2b3e49"""
)
@click.option("--artist", "artist_id", required=True, help="Artist to commission.")
@click.option("--customer", "customer_id", required=True, help="Requesting customer.")
@click.pass_obj
def request(app: AppContext, artist_id: str, customer_id: str) -> None:
    """Request a new commission from an artist."""
    app.emit(CommissionService(app.market).create_commission(artist_id, customer_id))


@commission.command(
    "list",
    examples="""\
  commctl commission list
  commctl commission list --status artwork_submitted
  commctl commission list --artist art_3f9c2a0d41b84e6f9a1c7d5e2b8f0a13""",
)
@click.option(
    "--status",
    type=click.Choice([s.value for s in CommissionStatus]),
    default=None,
    help="Only commissions in this status.",
)
@click.option("--artist", "artist_id", default=None, help="Only this artist's commissions.")
@click.option("--customer", "customer_id", default=None, help="Only this customer's commissions.")
@click.pass_obj
def list_commissions(
    app: AppContext,
    status: str | None,
    artist_id: str | None,
    customer_id: str | None,
) -> None:
    """List commissions."""
    app.emit(
        CommissionService(app.market).read_commissions(
            status=status, artist_id=artist_id, customer_id=customer_id
        )
    )


@commission.command(examples=f"  commctl commission show {_ID}")
@click.argument("commission_id")
@click.pass_obj
def show(app: AppContext, commission_id: str) -> None:
    """Show one commission."""
    app.emit(CommissionService(app.market).read_commission(commission_id))


# ── Artist actions ────────────────────────────────────────────────────


@commission.command(examples=f"  commctl commission accept {_ID}")
@click.argument("commission_id")
@click.pass_obj
def accept(app: AppContext, commission_id: str) -> None:
    """Accept a pending commission (artist)."""
    app.emit(CommissionService(app.market).accept(commission_id))


@commission.command(examples=f"  commctl commission reject {_ID}")
@click.argument("commission_id")
@click.pass_obj
def reject(app: AppContext, commission_id: str) -> None:
    """Reject a pending commission (artist)."""
    app.emit(CommissionService(app.market).reject(commission_id))


@commission.command(examples=f"  commctl commission submit {_ID} https://example.com/art/v2.png")
@click.argument("commission_id")
@click.argument("artwork_url")
@click.pass_obj
def submit(app: AppContext, commission_id: str, artwork_url: str) -> None:
    """Submit or resubmit artwork for an accepted commission (artist)."""
    app.emit(CommissionService(app.market).submit_artwork(commission_id, artwork_url))


# ── Customer actions ──────────────────────────────────────────────────


@commission.command(examples=f"  commctl commission revise {_ID}")
@click.argument("commission_id")
@click.pass_obj
def revise(app: AppContext, commission_id: str) -> None:
    """Send submitted artwork back for a revision (customer)."""
    app.emit(CommissionService(app.market).request_revision(commission_id))


@commission.command(examples=f"  commctl commission approve {_ID}")
@click.argument("commission_id")
@click.pass_obj
def approve(app: AppContext, commission_id: str) -> None:
    """Approve submitted artwork, closing the commission (customer)."""
    app.emit(CommissionService(app.market).approve(commission_id))


@commission.command(examples=f"  commctl commission cancel {_ID}")
@click.argument("commission_id")
@click.pass_obj
def cancel(app: AppContext, commission_id: str) -> None:
    """Cancel a commission that has not yet ended (either party)."""
    app.emit(CommissionService(app.market).cancel(commission_id))
