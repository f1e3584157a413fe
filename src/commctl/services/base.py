"""BaseService — abstract foundation for all commctl services.

Every service receives a :class:`Marketplace` at construction time. The
Marketplace provides serialized write transactions and read snapshots over
the ledger stores. Services own their transaction boundaries via
``self._market.transaction()``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from commctl.infrastructure.market import Marketplace

logger = logging.getLogger(__name__)


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class CommissionService(BaseService):
            def accept(self, commission_id: str) -> ServiceResult:
                with self._market.transaction() as txn:
                    ...
    """

    def __init__(self, market: Marketplace) -> None:
        self._market = market

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Call a plugin hook. No-op if no plugin manager is initialized.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        plugins = self._market.plugins
        if plugins is None:
            return
        hook_fn = getattr(plugins.hook, hook_name, None)
        if hook_fn is None:
            return
        try:
            hook_fn(**payload)
        except Exception:
            logger.debug("Event dispatch failed for %s", hook_name, exc_info=True)
            warnings.append(f"Event dispatch failed for {hook_name}")
