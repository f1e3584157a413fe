"""Tests for Marketplace — transactions, snapshots, persistence, plugins."""

from __future__ import annotations

import threading
from pathlib import Path

import pytest

from commctl.config.settings import CommSettings
from commctl.domain.models import Artist, Customer
from commctl.infrastructure.market import Marketplace
from commctl.plugins.hookspecs import hookimpl


def _open(root: Path) -> Marketplace:
    return Marketplace(CommSettings.from_cli(market_root=root))


class TestTransaction:
    def test_commit_on_success(self, market: Marketplace) -> None:
        with market.transaction() as txn:
            txn.customers.put("cus_aaaaaaaa", Customer(id="cus_aaaaaaaa", name="C"))
        with market.snapshot() as txn:
            assert txn.customers.count() == 1

    def test_rollback_on_error(self, market: Marketplace) -> None:
        with pytest.raises(RuntimeError), market.transaction() as txn:
            txn.customers.put("cus_aaaaaaaa", Customer(id="cus_aaaaaaaa", name="C"))
            raise RuntimeError("boom")
        with market.snapshot() as txn:
            assert txn.customers.count() == 0

    def test_snapshot_is_read_only_flagged(self, market: Marketplace) -> None:
        with market.snapshot() as txn:
            assert txn.read_only
        with market.transaction() as txn:
            assert not txn.read_only

    def test_concurrent_writers_serialize(self, market: Marketplace) -> None:
        """Every writer commits; none is lost to a lock error."""
        errors: list[BaseException] = []

        def writer(n: int) -> None:
            try:
                with market.transaction() as txn:
                    cid = f"cus_{n:08x}"
                    txn.customers.put(cid, Customer(id=cid, name=str(n)))
            except BaseException as exc:  # noqa: BLE001
                errors.append(exc)

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(16)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        with market.snapshot() as txn:
            assert txn.customers.count() == 16


class TestPersistence:
    def test_empty_on_first_boot(self, market: Marketplace) -> None:
        with market.snapshot() as txn:
            assert txn.artists.count() == 0
            assert txn.customers.count() == 0
            assert txn.commissions.count() == 0

    def test_rehydrates_across_instances(self, tmp_path: Path) -> None:
        first = _open(tmp_path)
        artist = Artist(id="art_aaaaaaaa", name="Mira", price=2**64 - 1, revision_budget=3)
        with first.transaction() as txn:
            txn.artists.put(artist.id, artist)
        first.close()

        second = _open(tmp_path)
        try:
            with second.snapshot() as txn:
                assert txn.artists.get(artist.id) == artist
        finally:
            second.close()


class TestBackupRestore:
    def test_backup_contains_committed_rows(self, market: Marketplace) -> None:
        with market.transaction() as txn:
            txn.customers.put("cus_aaaaaaaa", Customer(id="cus_aaaaaaaa", name="Before"))
        dest = market.root / "copy.db"
        market.backup_to(dest)
        assert dest.is_file()

        with market.transaction() as txn:
            txn.customers.put("cus_bbbbbbbb", Customer(id="cus_bbbbbbbb", name="After"))

        market.restore_from(dest)
        with market.snapshot() as txn:
            assert [c.id for c in txn.customers.values()] == ["cus_aaaaaaaa"]


class _Recorder:
    def __init__(self) -> None:
        self.created: list[tuple[str, str]] = []

    @hookimpl
    def post_create(self, entity_type: str, entity_id: str) -> None:
        self.created.append((entity_type, entity_id))


class TestPlugins:
    def test_no_manager_until_requested(self, market: Marketplace) -> None:
        assert market.plugins is None

    def test_register_plugin_creates_manager(self, market: Marketplace) -> None:
        market.register_plugin(_Recorder(), name="recorder")
        assert market.plugins is not None
        assert "recorder" in market.plugins.list_plugin_names()

    def test_init_plugins_respects_disabled(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("COMMCTL_PLUGINS__ENABLED", "false")
        m = _open(tmp_path)
        try:
            m.init_plugins()
            assert m.plugins is None
        finally:
            m.close()

    def test_init_plugins_loads_local_dir(self, tmp_path: Path) -> None:
        plugin_dir = tmp_path / ".commctl" / "plugins"
        plugin_dir.mkdir(parents=True)
        (plugin_dir / "audit.py").write_text(
            "import pluggy\n"
            "hookimpl = pluggy.HookimplMarker('commctl')\n"
            "class AuditPlugin:\n"
            "    @hookimpl\n"
            "    def post_init(self, market_name):\n"
            "        pass\n",
            encoding="utf-8",
        )
        m = _open(tmp_path)
        try:
            m.init_plugins()
            assert m.plugins is not None
            assert any(name.endswith("AuditPlugin") for name in m.plugins.list_plugin_names())
        finally:
            m.close()
