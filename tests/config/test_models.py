"""Tests for the commctl.toml section models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from commctl.config.models import CommConfig, LedgerConfig


class TestCommConfig:
    def test_defaults(self) -> None:
        config = CommConfig()
        assert config.market.currency == "ICP"
        assert config.plugins.local_dir == ".commctl/plugins"

    def test_model_validate_partial(self) -> None:
        config = CommConfig.model_validate({"market": {"name": "m"}})
        assert config.market.name == "m"
        assert config.check.backup_max_count == 10


class TestLedgerConfig:
    @pytest.mark.parametrize(
        "data",
        [
            {"max_revision_budget": -1},
            {"max_revision_budget": 128},
            {"id_bytes": 4},
        ],
    )
    def test_rejects_out_of_range(self, data: dict[str, int]) -> None:
        with pytest.raises(ValidationError):
            LedgerConfig.model_validate(data)
