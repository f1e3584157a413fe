"""Tests for RegistryService — artist and customer registration."""

from __future__ import annotations

from pathlib import Path

import pytest

from commctl.config.settings import CommSettings
from commctl.domain.ids import validate_id
from commctl.domain.models import UINT64_MAX
from commctl.infrastructure.market import Marketplace
from commctl.plugins.hookspecs import hookimpl
from commctl.services.registry import RegistryService
from commctl.services.result import ErrorCode


def _counts(market: Marketplace) -> tuple[int, int]:
    with market.snapshot() as txn:
        return txn.artists.count(), txn.customers.count()


class TestCreateArtist:
    def test_success(self, market: Marketplace) -> None:
        result = RegistryService(market).create_artist("Mira Okafor", 250, 2)
        assert result.ok
        assert result.op == "create_artist"
        assert validate_id(result.data["id"], "artist")
        assert result.data["name"] == "Mira Okafor"
        assert result.data["price"] == 250
        assert result.data["revision_budget"] == 2

    def test_name_is_stripped(self, market: Marketplace) -> None:
        result = RegistryService(market).create_artist("  Ren  ", 1, 0)
        assert result.data["name"] == "Ren"

    def test_max_price(self, market: Marketplace) -> None:
        result = RegistryService(market).create_artist("Ren", UINT64_MAX, 0)
        assert result.ok
        fetched = RegistryService(market).read_artist(result.data["id"])
        assert fetched.data["price"] == UINT64_MAX

    @pytest.mark.parametrize(
        ("name", "price", "budget"),
        [
            ("", 100, 1),
            ("   ", 100, 1),
            ("Mira", 0, 1),
            ("Mira", UINT64_MAX + 1, 1),
            ("Mira", 100, -1),
            ("Mira", 100, 128),
        ],
    )
    def test_invalid_input_writes_nothing(
        self, market: Marketplace, name: str, price: int, budget: int
    ) -> None:
        result = RegistryService(market).create_artist(name, price, budget)
        assert not result.ok
        assert result.error is not None
        assert result.error.code == ErrorCode.INVALID_INPUT
        assert result.error.message.startswith("cannot create artist:")
        assert _counts(market) == (0, 0)

    def test_budget_ceiling_from_config(self, tmp_path: Path) -> None:
        (tmp_path / "commctl.toml").write_text(
            "[ledger]\nmax_revision_budget = 3\n", encoding="utf-8"
        )
        m = Marketplace(CommSettings.from_cli(market_root=tmp_path))
        try:
            svc = RegistryService(m)
            assert svc.create_artist("Mira", 1, 3).ok
            assert not svc.create_artist("Mira", 1, 4).ok
        finally:
            m.close()


class TestReadArtists:
    def test_empty(self, market: Marketplace) -> None:
        result = RegistryService(market).read_artists()
        assert result.ok
        assert result.data == {"items": [], "count": 0}

    def test_lists_in_key_order(self, market: Marketplace) -> None:
        svc = RegistryService(market)
        ids = [svc.create_artist(f"A{i}", 10, 0).data["id"] for i in range(4)]
        result = svc.read_artists()
        assert result.data["count"] == 4
        assert [a["id"] for a in result.data["items"]] == sorted(ids)

    def test_read_missing(self, market: Marketplace) -> None:
        result = RegistryService(market).read_artist("art_missing")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == ErrorCode.NOT_FOUND
        assert "artist=art_missing" in result.error.message


class TestCustomers:
    def test_create_and_read(self, market: Marketplace) -> None:
        svc = RegistryService(market)
        created = svc.create_customer("Tomas Reyes")
        assert created.ok
        assert validate_id(created.data["id"], "customer")

        fetched = svc.read_customer(created.data["id"])
        assert fetched.ok
        assert fetched.data == created.data

    def test_blank_name(self, market: Marketplace) -> None:
        result = RegistryService(market).create_customer(" ")
        assert result.error is not None
        assert result.error.code == ErrorCode.INVALID_INPUT
        assert _counts(market) == (0, 0)

    def test_list(self, market: Marketplace) -> None:
        svc = RegistryService(market)
        svc.create_customer("One")
        svc.create_customer("Two")
        assert svc.read_customers().data["count"] == 2

    def test_read_missing(self, market: Marketplace) -> None:
        result = RegistryService(market).read_customer("cus_missing")
        assert result.error is not None
        assert result.error.code == ErrorCode.NOT_FOUND


class _CreateRecorder:
    def __init__(self) -> None:
        self.events: list[tuple[str, str]] = []

    @hookimpl
    def post_create(self, entity_type: str, entity_id: str) -> None:
        self.events.append((entity_type, entity_id))


class _Exploding:
    @hookimpl
    def post_create(self, entity_type: str, entity_id: str) -> None:
        raise RuntimeError("plugin bug")


class TestCreateEvents:
    def test_post_create_dispatched(self, market: Marketplace) -> None:
        recorder = _CreateRecorder()
        market.register_plugin(recorder)
        svc = RegistryService(market)
        artist = svc.create_artist("Mira", 1, 0).data
        customer = svc.create_customer("Tomas").data
        assert recorder.events == [("artist", artist["id"]), ("customer", customer["id"])]

    def test_no_event_on_invalid_input(self, market: Marketplace) -> None:
        recorder = _CreateRecorder()
        market.register_plugin(recorder)
        RegistryService(market).create_customer("")
        assert recorder.events == []

    def test_plugin_failure_is_warning(self, market: Marketplace) -> None:
        market.register_plugin(_Exploding())
        result = RegistryService(market).create_customer("Tomas")
        assert result.ok
        assert result.warnings == ["Event dispatch failed for post_create"]
        assert _counts(market) == (0, 1)
