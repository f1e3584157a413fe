"""Pluggy hook specifications for commctl lifecycle events.

Hooks are called synchronously after the surrounding transaction has
committed, so implementations always observe persisted state.
"""

from __future__ import annotations

import pluggy

PROJECT_NAME = "commctl"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class CommctlHookSpec:
    """Hook specifications for the commctl plugin system."""

    @hookspec
    def post_create(self, entity_type: str, entity_id: str) -> None:
        """Called after an artist, customer, or commission is created."""

    @hookspec
    def post_transition(
        self,
        commission_id: str,
        action: str,
        previous_status: str,
        status: str,
    ) -> None:
        """Called after a commission moves through the lifecycle."""

    @hookspec
    def post_check(self, issues_found: int) -> None:
        """Called after a ledger integrity check."""

    @hookspec
    def post_init(self, market_name: str) -> None:
        """Called after a market is initialized."""
