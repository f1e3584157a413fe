"""Shared pytest fixtures and test helpers for commctl tests."""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from commctl.config.settings import CommSettings
from commctl.infrastructure.database.engine import init_database
from commctl.infrastructure.market import Marketplace
from commctl.services.telemetry import disable_telemetry


@pytest.fixture(autouse=True)
def _reset_global_state() -> Generator[None]:
    """Undo root-logger and telemetry changes made by CLI invocations."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    disable_telemetry()
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Generator[Engine]:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def market_root(tmp_path: Path) -> Path:
    """Temporary market directory.

    This is the single source of truth for the market directory layout.
    All market-related fixtures (market, _isolated_market) build on this.
    """
    return tmp_path


@pytest.fixture
def market(market_root: Path) -> Generator[Marketplace]:
    """Marketplace with an empty ledger on a temp directory.

    Plugins are not discovered; tests register them explicitly.
    """
    settings = CommSettings.from_cli(market_root=market_root)
    m = Marketplace(settings)
    try:
        yield m
    finally:
        m.close()


@pytest.fixture
def _isolated_market(market_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp market root so the CLI creates an isolated ledger.

    Use via ``@pytest.mark.usefixtures("_isolated_market")`` on command test
    classes. Tests that need the path can also request ``tmp_path`` directly
    (pytest deduplicates, it's the same directory).
    """
    monkeypatch.chdir(market_root)
    monkeypatch.delenv("COMMCTL_CONFIG", raising=False)


# ---------------------------------------------------------------------------
# Entity factories (assert success, return the result data)
# ---------------------------------------------------------------------------


@pytest.fixture
def make_artist(market: Marketplace) -> Callable[..., dict[str, Any]]:
    """Create an artist via RegistryService."""
    from commctl.services.registry import RegistryService

    def _make(name: str = "Mira", price: int = 250, revision_budget: int = 2) -> dict[str, Any]:
        result = RegistryService(market).create_artist(name, price, revision_budget)
        assert result.ok, result.error
        return result.data

    return _make


@pytest.fixture
def make_customer(market: Marketplace) -> Callable[..., dict[str, Any]]:
    """Create a customer via RegistryService."""
    from commctl.services.registry import RegistryService

    def _make(name: str = "Tomas") -> dict[str, Any]:
        result = RegistryService(market).create_customer(name)
        assert result.ok, result.error
        return result.data

    return _make


@pytest.fixture
def make_commission(
    market: Marketplace,
    make_artist: Callable[..., dict[str, Any]],
    make_customer: Callable[..., dict[str, Any]],
) -> Callable[..., dict[str, Any]]:
    """Create a pending commission (and a fresh artist/customer pair)."""
    from commctl.services.commission import CommissionService

    def _make(price: int = 250, revision_budget: int = 2) -> dict[str, Any]:
        artist = make_artist(price=price, revision_budget=revision_budget)
        customer = make_customer()
        result = CommissionService(market).create_commission(artist["id"], customer["id"])
        assert result.ok, result.error
        return result.data

    return _make
