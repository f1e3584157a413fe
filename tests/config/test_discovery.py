"""Tests for config discovery and loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from commctl.config.discovery import CONFIG_ENV_VAR, find_config, load_config


@pytest.fixture(autouse=True)
def _no_env_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)


class TestFindConfig:
    def test_in_start_dir(self, tmp_path: Path) -> None:
        (tmp_path / "commctl.toml").write_text("", encoding="utf-8")
        assert find_config(tmp_path) == (tmp_path / "commctl.toml").resolve()

    def test_walks_up(self, tmp_path: Path) -> None:
        (tmp_path / "commctl.toml").write_text("", encoding="utf-8")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config(nested) == (tmp_path / "commctl.toml").resolve()

    def test_not_found(self, tmp_path: Path) -> None:
        assert find_config(tmp_path) is None

    def test_env_var_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        elsewhere = tmp_path / "elsewhere.toml"
        elsewhere.write_text("", encoding="utf-8")
        (tmp_path / "commctl.toml").write_text("", encoding="utf-8")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(elsewhere))
        assert find_config(tmp_path) == elsewhere

    def test_env_var_missing_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "nope.toml"))
        assert find_config(tmp_path) is None


class TestLoadConfig:
    def test_sparse_overrides(self, tmp_path: Path) -> None:
        path = tmp_path / "commctl.toml"
        path.write_text(
            '[market]\nname = "Back Room"\n\n[check]\nbackup_max_count = 3\n',
            encoding="utf-8",
        )
        config = load_config(path)
        assert config.market.name == "Back Room"
        assert config.market.currency == "ICP"
        assert config.check.backup_max_count == 3
        assert config.ledger.max_revision_budget == 127

    def test_explicit_none_discovers(self, tmp_path: Path) -> None:
        (tmp_path / "commctl.toml").write_text('[market]\nname = "x"\n', encoding="utf-8")
        assert load_config(cwd=tmp_path).market.name == "x"
