"""RegistryService — artist and customer registration and lookup.

Artists and customers form an append-only identity registry: created
once, then read-only. There are no update or delete operations.

Pipeline for creation: VALIDATE → GENERATE → PERSIST → EVENT → RESPOND
"""

from __future__ import annotations

import logging

from commctl.domain.ids import generate_id
from commctl.domain.models import Artist, Customer, validate_artist, validate_customer
from commctl.services.base import BaseService
from commctl.services.result import ErrorCode, ServiceResult
from commctl.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)


class RegistryService(BaseService):
    """Registers and reads artists and customers."""

    # ------------------------------------------------------------------
    # Artists
    # ------------------------------------------------------------------

    @traced
    def create_artist(self, name: str, price: int, revision_budget: int) -> ServiceResult:
        """Register a new artist with a fixed price and revision budget."""
        op = "create_artist"
        ledger = self._market.settings.ledger

        vr = validate_artist(
            name,
            price,
            revision_budget,
            max_revision_budget=ledger.max_revision_budget,
        )
        if not vr.valid:
            return ServiceResult.failure(
                op,
                ErrorCode.INVALID_INPUT,
                f"cannot create artist: {'; '.join(vr.errors)}",
                errors=vr.errors,
            )

        artist = Artist(
            id=generate_id("artist", nbytes=ledger.id_bytes),
            name=name.strip(),
            price=price,
            revision_budget=revision_budget,
        )
        with trace_span("persist"), self._market.transaction() as txn:
            txn.artists.put(artist.id, artist)
        logger.debug("Created artist %s", artist.id)

        warnings: list[str] = []
        self._dispatch_event(
            "post_create", {"entity_type": "artist", "entity_id": artist.id}, warnings
        )
        return ServiceResult(
            ok=True, op=op, data=artist.model_dump(mode="json"), warnings=warnings
        )

    @traced
    def read_artists(self) -> ServiceResult:
        """List every registered artist in key order."""
        with self._market.snapshot() as txn:
            items = [a.model_dump(mode="json") for a in txn.artists.values()]
        return ServiceResult(
            ok=True, op="read_artists", data={"items": items, "count": len(items)}
        )

    @traced
    def read_artist(self, artist_id: str) -> ServiceResult:
        """Fetch one artist by ID."""
        op = "read_artist"
        with self._market.snapshot() as txn:
            artist = txn.artists.get(artist_id)
        if artist is None:
            return ServiceResult.failure(
                op,
                ErrorCode.NOT_FOUND,
                f"cannot read artist: artist={artist_id} not found",
                artist_id=artist_id,
            )
        return ServiceResult(ok=True, op=op, data=artist.model_dump(mode="json"))

    # ------------------------------------------------------------------
    # Customers
    # ------------------------------------------------------------------

    @traced
    def create_customer(self, name: str) -> ServiceResult:
        """Register a new customer."""
        op = "create_customer"

        vr = validate_customer(name)
        if not vr.valid:
            return ServiceResult.failure(
                op,
                ErrorCode.INVALID_INPUT,
                f"cannot create customer: {'; '.join(vr.errors)}",
                errors=vr.errors,
            )

        customer = Customer(
            id=generate_id("customer", nbytes=self._market.settings.ledger.id_bytes),
            name=name.strip(),
        )
        with trace_span("persist"), self._market.transaction() as txn:
            txn.customers.put(customer.id, customer)
        logger.debug("Created customer %s", customer.id)

        warnings: list[str] = []
        self._dispatch_event(
            "post_create", {"entity_type": "customer", "entity_id": customer.id}, warnings
        )
        return ServiceResult(
            ok=True, op=op, data=customer.model_dump(mode="json"), warnings=warnings
        )

    @traced
    def read_customers(self) -> ServiceResult:
        """List every registered customer in key order."""
        with self._market.snapshot() as txn:
            items = [c.model_dump(mode="json") for c in txn.customers.values()]
        return ServiceResult(
            ok=True, op="read_customers", data={"items": items, "count": len(items)}
        )

    @traced
    def read_customer(self, customer_id: str) -> ServiceResult:
        """Fetch one customer by ID."""
        op = "read_customer"
        with self._market.snapshot() as txn:
            customer = txn.customers.get(customer_id)
        if customer is None:
            return ServiceResult.failure(
                op,
                ErrorCode.NOT_FOUND,
                f"cannot read customer: customer={customer_id} not found",
                customer_id=customer_id,
            )
        return ServiceResult(ok=True, op=op, data=customer.model_dump(mode="json"))
