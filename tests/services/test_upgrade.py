"""Tests for UpgradeService and the Alembic migration scripts."""

from __future__ import annotations

from pathlib import Path

from alembic import command
from sqlalchemy import create_engine, inspect

from commctl.infrastructure.database.migrations import build_config, db_url_for, stamp_head
from commctl.infrastructure.market import Marketplace
from commctl.services.upgrade import UpgradeService


class TestCheckPending:
    def test_unversioned_market_has_pending_baseline(self, market: Marketplace) -> None:
        result = UpgradeService(market).check_pending()
        assert result.ok
        assert result.data["current"] is None
        assert result.data["head"] == "001_baseline"
        assert result.data["pending_count"] == 1
        assert result.data["pending"][0]["revision"] == "001_baseline"

    def test_stamped_market_is_current(self, market: Marketplace) -> None:
        stamp_head(market.root)
        result = UpgradeService(market).check_pending()
        assert result.data["pending_count"] == 0
        assert result.data["current"] == "001_baseline"


class TestApply:
    def test_stamps_existing_tables(self, market: Marketplace) -> None:
        result = UpgradeService(market).apply()
        assert result.ok
        assert result.data["applied_count"] == 1
        assert result.data["current"] == "001_baseline"
        assert Path(result.data["backup_path"]).is_file()
        assert result.warnings == []

        again = UpgradeService(market).check_pending()
        assert again.data["pending_count"] == 0

    def test_noop_when_current(self, market: Marketplace) -> None:
        stamp_head(market.root)
        result = UpgradeService(market).apply()
        assert result.ok
        assert result.data["applied_count"] == 0
        assert result.data["message"] == "Database is already up to date"


class TestStampCurrent:
    def test_stamp(self, market: Marketplace) -> None:
        result = UpgradeService(market).stamp_current()
        assert result.ok
        assert result.data == {"stamped": True, "current": "001_baseline"}


class TestBaselineMigration:
    def test_upgrade_creates_ledger_tables(self, tmp_path: Path) -> None:
        (tmp_path / ".commctl").mkdir()
        url = db_url_for(tmp_path)
        command.upgrade(build_config(url), "head")

        engine = create_engine(url)
        try:
            insp = inspect(engine)
            names = set(insp.get_table_names())
            assert {"artists", "customers", "commissions", "alembic_version"} <= names
            index_names = {ix["name"] for ix in insp.get_indexes("commissions")}
            assert "ix_commissions_status" in index_names
        finally:
            engine.dispose()

    def test_downgrade_drops_tables(self, tmp_path: Path) -> None:
        (tmp_path / ".commctl").mkdir()
        cfg = build_config(db_url_for(tmp_path))
        command.upgrade(cfg, "head")
        command.downgrade(cfg, "base")

        engine = create_engine(db_url_for(tmp_path))
        try:
            names = set(inspect(engine).get_table_names())
            assert "commissions" not in names
        finally:
            engine.dispose()
