"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, commctl.toml only contains overrides.
A fresh market needs only [market] name.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- commctl.toml sections ---


class MarketConfig(BaseModel):
    """[market] section."""

    model_config = {"frozen": True}

    name: str = "my-market"
    currency: str = "ICP"


class LedgerConfig(BaseModel):
    """[ledger] section."""

    model_config = {"frozen": True}

    max_revision_budget: int = Field(default=127, ge=0, le=127)
    id_bytes: int = Field(default=16, ge=8)


class CheckConfig(BaseModel):
    """[check] section."""

    model_config = {"frozen": True}

    backup_max_count: int = Field(default=10, ge=1)


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    local_dir: str = ".commctl/plugins"


class CommConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    market: MarketConfig = Field(default_factory=MarketConfig)
    ledger: LedgerConfig = Field(default_factory=LedgerConfig)
    check: CheckConfig = Field(default_factory=CheckConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
