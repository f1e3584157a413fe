"""Tests for BaseService event dispatch."""

from __future__ import annotations

from commctl.infrastructure.market import Marketplace
from commctl.plugins.hookspecs import hookimpl
from commctl.services.base import BaseService


class _InitRecorder:
    def __init__(self) -> None:
        self.names: list[str] = []

    @hookimpl
    def post_init(self, market_name: str) -> None:
        self.names.append(market_name)


class _Broken:
    @hookimpl
    def post_init(self, market_name: str) -> None:
        raise RuntimeError("nope")


class TestDispatchEvent:
    def test_calls_hook(self, market: Marketplace) -> None:
        recorder = _InitRecorder()
        market.register_plugin(recorder)
        warnings: list[str] = []
        BaseService(market)._dispatch_event("post_init", {"market_name": "m"}, warnings)
        assert recorder.names == ["m"]
        assert warnings == []

    def test_unknown_hook_is_ignored(self, market: Marketplace) -> None:
        warnings: list[str] = []
        BaseService(market)._dispatch_event("post_nothing", {}, warnings)
        assert warnings == []

    def test_failure_becomes_warning(self, market: Marketplace) -> None:
        market.register_plugin(_Broken())
        warnings: list[str] = []
        BaseService(market)._dispatch_event("post_init", {"market_name": "m"}, warnings)
        assert warnings == ["Event dispatch failed for post_init"]
