"""Commission status lifecycle and the transition guard.

A commission moves through a single status at a time. The guard is a
precedence-ordered rule chain: the first matching rule decides, so the
order of checks in :func:`guard` is part of the contract.

Terminal statuses (approved, rejected, cancelled) admit no further
transitions.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from commctl.domain.models import Commission


class CommissionStatus(StrEnum):
    """Lifecycle status of a commission."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    ARTWORK_SUBMITTED = "artwork_submitted"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class CommissionAction(StrEnum):
    """Operations that move a commission between statuses.

    Values double as the human-readable operation name used in
    ``cannot <operation>: <reason>`` messages.
    """

    ACCEPT = "accept commission"
    REJECT = "reject commission"
    SUBMIT_ARTWORK = "submit artwork"
    REQUEST_REVISION = "request revision"
    APPROVE = "approve commission"
    CANCEL = "cancel commission"


class DenialKind(StrEnum):
    """Why the guard refused a transition."""

    INVALID_TRANSACTION = "invalid_transaction"
    NO_REMAINING_REVISION = "no_remaining_revision"


TERMINAL_STATUSES: frozenset[CommissionStatus] = frozenset(
    {
        CommissionStatus.APPROVED,
        CommissionStatus.REJECTED,
        CommissionStatus.CANCELLED,
    }
)

# Statuses in which the artist has taken the commission on.
_ACCEPTED_STATUSES = frozenset({CommissionStatus.ACCEPTED, CommissionStatus.ARTWORK_SUBMITTED})

# Actions allowed before the artist accepts.
_PRE_ACCEPTANCE_ACTIONS = frozenset(
    {CommissionAction.ACCEPT, CommissionAction.REJECT, CommissionAction.CANCEL}
)

_DECISION_ACTIONS = frozenset({CommissionAction.ACCEPT, CommissionAction.REJECT})

_REVIEW_ACTIONS = frozenset({CommissionAction.APPROVE, CommissionAction.REQUEST_REVISION})


# --- Transition map ---

COMMISSION_TRANSITIONS: dict[str, list[str]] = {
    "pending": ["accepted", "rejected", "cancelled"],
    "accepted": ["artwork_submitted", "cancelled"],
    "artwork_submitted": ["artwork_submitted", "accepted", "approved", "cancelled"],
    "approved": [],
    "rejected": [],
    "cancelled": [],
}

# Status each action leads to when permitted.
ACTION_TARGETS: dict[CommissionAction, CommissionStatus] = {
    CommissionAction.ACCEPT: CommissionStatus.ACCEPTED,
    CommissionAction.REJECT: CommissionStatus.REJECTED,
    CommissionAction.SUBMIT_ARTWORK: CommissionStatus.ARTWORK_SUBMITTED,
    CommissionAction.REQUEST_REVISION: CommissionStatus.ACCEPTED,
    CommissionAction.APPROVE: CommissionStatus.APPROVED,
    CommissionAction.CANCEL: CommissionStatus.CANCELLED,
}


@dataclass(frozen=True)
class GuardDecision:
    """Outcome of :func:`guard`.

    Attributes:
        permitted: Whether the transition may proceed.
        reason: Human-readable denial reason (empty when permitted).
        kind: Denial category, None when permitted.
    """

    permitted: bool
    reason: str = ""
    kind: DenialKind | None = None


PERMITTED = GuardDecision(permitted=True)


def _deny(reason: str, kind: DenialKind = DenialKind.INVALID_TRANSACTION) -> GuardDecision:
    return GuardDecision(permitted=False, reason=reason, kind=kind)


def is_terminal(status: str) -> bool:
    """Return True if *status* admits no further transitions."""
    return status in TERMINAL_STATUSES


def is_accepted(status: str) -> bool:
    """Return True once the artist has accepted and before a terminal status."""
    return status in _ACCEPTED_STATUSES


def is_valid_transition(
    current: str,
    target: str,
    transitions: dict[str, list[str]] = COMMISSION_TRANSITIONS,
) -> bool:
    """Check if moving from *current* to *target* appears in the transition map."""
    allowed = transitions.get(current, [])
    return target in allowed


def guard(
    status: CommissionStatus,
    action: CommissionAction,
    *,
    remaining_revisions: int,
) -> GuardDecision:
    """Decide whether *action* is legal for a commission in *status*.

    Rules are evaluated in order; the first match wins:

    1. cancelled -> "commission has been cancelled"
    2. approved -> "commission has ended"
    3. rejected -> "commission has been rejected"
    4. not yet accepted and action is not accept/reject/cancel
       -> "commission has yet to be accepted"
    5. accepted and action is accept/reject -> "commission has been accepted"
    6. approve/request revision without submitted artwork -> "artwork not finished"
    7. request revision with no budget left -> "no more revision can be made"
       (kind ``NO_REMAINING_REVISION``)
    """
    if status == CommissionStatus.CANCELLED:
        return _deny("commission has been cancelled")
    if status == CommissionStatus.APPROVED:
        return _deny("commission has ended")
    if status == CommissionStatus.REJECTED:
        return _deny("commission has been rejected")

    accepted = is_accepted(status)
    if not accepted and action not in _PRE_ACCEPTANCE_ACTIONS:
        return _deny("commission has yet to be accepted")
    if accepted and action in _DECISION_ACTIONS:
        return _deny("commission has been accepted")
    if action in _REVIEW_ACTIONS and status != CommissionStatus.ARTWORK_SUBMITTED:
        return _deny("artwork not finished")
    if action == CommissionAction.REQUEST_REVISION and remaining_revisions == 0:
        return _deny("no more revision can be made", DenialKind.NO_REMAINING_REVISION)
    return PERMITTED


def apply_transition(
    commission: Commission,
    action: CommissionAction,
    *,
    artwork_url: str | None = None,
) -> Commission:
    """Return a new commission with the side effect of *action* applied.

    Callers must have obtained a permitting :func:`guard` decision first.

    Raises:
        ValueError: Submitting without an artwork URL, or requesting a
            revision with no budget left.
    """
    changes: dict[str, object] = {"status": ACTION_TARGETS[action]}

    if action == CommissionAction.SUBMIT_ARTWORK:
        if not artwork_url or not artwork_url.strip():
            raise ValueError("artwork URL is required")
        changes["artwork_url"] = artwork_url.strip()
    elif action == CommissionAction.REQUEST_REVISION:
        if commission.remaining_revisions <= 0:
            raise ValueError("no more revision can be made")
        changes["remaining_revisions"] = commission.remaining_revisions - 1

    return commission.model_copy(update=changes)
