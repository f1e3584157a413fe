"""InitService — market creation.

Pipeline: VALIDATE → CONFIG → DATABASE → STAMP → EVENT → RESPOND
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from commctl.config.discovery import CONFIG_FILENAME, load_config
from commctl.config.settings import CommSettings
from commctl.infrastructure.database.engine import DATA_DIRNAME
from commctl.infrastructure.database.migrations import stamp_head
from commctl.infrastructure.market import Marketplace
from commctl.services.base import BaseService
from commctl.services.result import ErrorCode, ServiceResult

logger = logging.getLogger(__name__)


def _render_config(name: str, currency: str) -> str:
    # JSON string escapes are valid TOML basic-string escapes.
    return (
        "[market]\n"
        f"name = {json.dumps(name)}\n"
        f"currency = {json.dumps(currency)}\n"
    )


class InitService(BaseService):
    """Creates a new market directory with config, ledger and plugin dir."""

    @staticmethod
    def init_market(path: Path, *, name: str, currency: str = "ICP") -> ServiceResult:
        """Initialize a market at *path*.

        Writes ``commctl.toml``, creates the empty ledger under
        ``.commctl/`` and stamps it at the current migration head.
        """
        op = "init_market"
        config_path = path / CONFIG_FILENAME

        if not name.strip():
            return ServiceResult.failure(
                op, ErrorCode.INVALID_INPUT, "Market name must not be empty"
            )
        if config_path.exists():
            return ServiceResult.failure(
                op,
                ErrorCode.INVALID_INPUT,
                f"Market already initialized at {path}",
                path=str(path),
            )

        path.mkdir(parents=True, exist_ok=True)
        config_path.write_text(_render_config(name.strip(), currency), encoding="utf-8")
        config = load_config(config_path)

        settings = CommSettings(
            market_root=path,
            config_path=config_path,
            market=config.market,
        )
        market = Marketplace(settings)
        warnings: list[str] = []
        try:
            try:
                stamp_head(path)
            except Exception as exc:
                logger.debug("Stamp failed during init", exc_info=True)
                warnings.append(f"Failed to stamp migration head: {exc}")

            market.init_plugins()
            InitService(market)._dispatch_event(
                "post_init", {"market_name": config.market.name}, warnings
            )
        finally:
            market.close()

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "market_name": config.market.name,
                "currency": config.market.currency,
                "path": str(path),
                "files_created": [CONFIG_FILENAME, f"{DATA_DIRNAME}/commctl.db"],
            },
            warnings=warnings,
        )
