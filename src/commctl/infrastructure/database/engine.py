"""Database engine setup for SQLite with WAL mode.

SQLite is the persistence layer: WAL mode lets readers see a consistent
snapshot while a single writer commits. Write transactions open with
``BEGIN IMMEDIATE`` so concurrent writers, in this process or another,
are serialized at the start of the transaction rather than failing at
commit. Read connections flagged with the ``commctl_read_only``
execution option use a deferred ``BEGIN`` instead.

The DB is stored at {market_root}/.commctl/commctl.db.

SQLAlchemy Core (not ORM) is used because commctl is a short-lived
CLI process — no benefit from session management or identity maps.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Connection, Engine

from commctl.infrastructure.database.schema import metadata

DATA_DIRNAME = ".commctl"
DB_FILENAME = "commctl.db"

READ_ONLY_OPTION = "commctl_read_only"


def db_path_for(market_root: Path) -> Path:
    """Return the database file location for *market_root*."""
    return market_root / DATA_DIRNAME / DB_FILENAME


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLite engine with WAL mode, foreign keys, and explicit BEGIN."""
    engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        # Hand transaction control to the "begin" listener below.
        dbapi_conn.isolation_level = None
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _begin(conn: Connection) -> None:
        if conn.get_execution_options().get(READ_ONLY_OPTION):
            conn.exec_driver_sql("BEGIN")
        else:
            conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def init_database(market_root: Path) -> Engine:
    """Initialize the commctl database at ``{market_root}/.commctl/commctl.db``.

    Creates the ``.commctl/`` directory structure and all tables from
    :data:`schema.metadata`.

    Idempotent — safe to call on an existing market; existing rows are
    left untouched, so a restart rehydrates the previous ledger.

    Returns the engine ready for use.
    """
    data_dir = market_root / DATA_DIRNAME
    data_dir.mkdir(parents=True, exist_ok=True)
    (data_dir / "backups").mkdir(exist_ok=True)
    (data_dir / "plugins").mkdir(exist_ok=True)

    engine = create_db_engine(db_path_for(market_root))
    metadata.create_all(engine)
    return engine
