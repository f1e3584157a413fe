"""Alembic migration infrastructure for commctl.

Provides programmatic Alembic configuration — no alembic.ini needed.
The migration scripts live alongside this module.
"""

from __future__ import annotations

from pathlib import Path

from alembic.config import Config

from commctl.infrastructure.database.engine import db_path_for


def build_config(db_url: str) -> Config:
    """Build an Alembic Config pointing at our migration scripts."""
    cfg = Config()
    cfg.set_main_option("script_location", str(Path(__file__).parent))
    cfg.set_main_option("sqlalchemy.url", db_url)
    return cfg


def db_url_for(market_root: Path) -> str:
    """SQLAlchemy URL of the ledger database under *market_root*."""
    return f"sqlite:///{db_path_for(market_root)}"


def stamp_head(market_root: Path) -> None:
    """Stamp a database as at the current head revision.

    Called during ``commctl init`` so freshly created databases start
    at the correct Alembic version without running migrations.
    """
    from alembic import command

    command.stamp(build_config(db_url_for(market_root)), "head")
