"""CommissionService — request a commission and drive it through its lifecycle.

Every mutation follows one pipeline inside a single write transaction:
LOOKUP → GUARD → APPLY → PERSIST. The plugin event fires after commit.

Guard denials come back as ``INVALID_TRANSACTION`` with the guard's reason
(``cannot <operation>: <reason>``), except an exhausted revision budget,
which is ``NO_REMAINING_REVISION``. A failed operation leaves the ledger
exactly as it was.
"""

from __future__ import annotations

import logging

from commctl.domain.ids import generate_id
from commctl.domain.lifecycle import CommissionAction, DenialKind, apply_transition, guard
from commctl.domain.models import Commission
from commctl.services.base import BaseService
from commctl.services.result import ErrorCode, ServiceResult
from commctl.services.telemetry import get_current_span, trace_span, traced

logger = logging.getLogger(__name__)


class CommissionService(BaseService):
    """Creates, lists, and transitions commissions."""

    # ------------------------------------------------------------------
    # Creation and reads
    # ------------------------------------------------------------------

    @traced
    def create_commission(self, artist_id: str, customer_id: str) -> ServiceResult:
        """Open a pending commission from a customer to an artist.

        The artist's current price and revision budget are copied onto the
        commission; later reads never consult the artist again.
        """
        op = "create_commission"
        with self._market.transaction() as txn:
            artist = txn.artists.get(artist_id)
            if artist is None:
                return ServiceResult.failure(
                    op,
                    ErrorCode.NOT_FOUND,
                    f"cannot create the commission: artist={artist_id} not found",
                    artist_id=artist_id,
                )
            customer = txn.customers.get(customer_id)
            if customer is None:
                return ServiceResult.failure(
                    op,
                    ErrorCode.NOT_FOUND,
                    f"cannot create the commission: customer={customer_id} not found",
                    customer_id=customer_id,
                )

            commission_id = generate_id(
                "commission", nbytes=self._market.settings.ledger.id_bytes
            )
            commission = Commission.request(commission_id, artist=artist, customer=customer)
            with trace_span("persist"):
                txn.commissions.put(commission.id, commission)
        logger.debug("Created commission %s (%s -> %s)", commission.id, customer_id, artist_id)

        warnings: list[str] = []
        self._dispatch_event(
            "post_create", {"entity_type": "commission", "entity_id": commission.id}, warnings
        )
        return ServiceResult(
            ok=True, op=op, data=commission.model_dump(mode="json"), warnings=warnings
        )

    @traced
    def read_commissions(
        self,
        *,
        status: str | None = None,
        artist_id: str | None = None,
        customer_id: str | None = None,
    ) -> ServiceResult:
        """List commissions in key order, optionally filtered."""
        with self._market.snapshot() as txn:
            items = [
                c.model_dump(mode="json")
                for c in txn.commissions.values(
                    status=status, artist_id=artist_id, customer_id=customer_id
                )
            ]
        return ServiceResult(
            ok=True, op="read_commissions", data={"items": items, "count": len(items)}
        )

    @traced
    def read_commission(self, commission_id: str) -> ServiceResult:
        """Fetch one commission by ID."""
        op = "read_commission"
        with self._market.snapshot() as txn:
            commission = txn.commissions.get(commission_id)
        if commission is None:
            return ServiceResult.failure(
                op,
                ErrorCode.NOT_FOUND,
                f"cannot read commission: commission={commission_id} not found",
                commission_id=commission_id,
            )
        return ServiceResult(ok=True, op=op, data=commission.model_dump(mode="json"))

    # ------------------------------------------------------------------
    # Artist-side transitions
    # ------------------------------------------------------------------

    def accept(self, commission_id: str) -> ServiceResult:
        """Artist takes on a pending commission."""
        return self._transition("accept_commission", CommissionAction.ACCEPT, commission_id)

    def reject(self, commission_id: str) -> ServiceResult:
        """Artist declines a pending commission."""
        return self._transition("reject_commission", CommissionAction.REJECT, commission_id)

    def submit_artwork(self, commission_id: str, artwork_url: str) -> ServiceResult:
        """Artist delivers (or re-delivers) the artwork URL."""
        return self._transition(
            "submit_artwork",
            CommissionAction.SUBMIT_ARTWORK,
            commission_id,
            artwork_url=artwork_url,
        )

    # ------------------------------------------------------------------
    # Customer-side transitions
    # ------------------------------------------------------------------

    def request_revision(self, commission_id: str) -> ServiceResult:
        """Customer sends submitted artwork back, spending one revision."""
        return self._transition(
            "request_revision", CommissionAction.REQUEST_REVISION, commission_id
        )

    def approve(self, commission_id: str) -> ServiceResult:
        """Customer signs off on submitted artwork."""
        return self._transition("approve_commission", CommissionAction.APPROVE, commission_id)

    def cancel(self, commission_id: str) -> ServiceResult:
        """Either party abandons a non-terminal commission."""
        return self._transition("cancel_commission", CommissionAction.CANCEL, commission_id)

    # ------------------------------------------------------------------
    # Shared pipeline
    # ------------------------------------------------------------------

    @traced
    def _transition(
        self,
        op: str,
        action: CommissionAction,
        commission_id: str,
        *,
        artwork_url: str | None = None,
    ) -> ServiceResult:
        with self._market.transaction() as txn:
            current = txn.commissions.get(commission_id)
            if current is None:
                return ServiceResult.failure(
                    op,
                    ErrorCode.NOT_FOUND,
                    f"cannot {action}: commission={commission_id} not found",
                    commission_id=commission_id,
                )

            decision = guard(
                current.status, action, remaining_revisions=current.remaining_revisions
            )
            span = get_current_span()
            if span:
                span.annotate("permitted", decision.permitted)
            if not decision.permitted:
                code = (
                    ErrorCode.NO_REMAINING_REVISION
                    if decision.kind == DenialKind.NO_REMAINING_REVISION
                    else ErrorCode.INVALID_TRANSACTION
                )
                return ServiceResult.failure(
                    op,
                    code,
                    f"cannot {action}: {decision.reason}",
                    commission_id=commission_id,
                    status=str(current.status),
                )

            try:
                updated = apply_transition(current, action, artwork_url=artwork_url)
            except ValueError as exc:
                code = (
                    ErrorCode.INVALID_INPUT
                    if action == CommissionAction.SUBMIT_ARTWORK
                    else ErrorCode.NO_REMAINING_REVISION
                )
                return ServiceResult.failure(
                    op, code, f"cannot {action}: {exc}", commission_id=commission_id
                )

            txn.commissions.put(commission_id, updated)

        logger.debug(
            "Commission %s: %s -> %s", commission_id, current.status, updated.status
        )
        warnings: list[str] = []
        self._dispatch_event(
            "post_transition",
            {
                "commission_id": commission_id,
                "action": str(action),
                "previous_status": str(current.status),
                "status": str(updated.status),
            },
            warnings,
        )
        return ServiceResult(
            ok=True, op=op, data=updated.model_dump(mode="json"), warnings=warnings
        )
