"""SQLite database engine and schema via SQLAlchemy Core."""

from commctl.infrastructure.database.engine import create_db_engine, db_path_for, init_database
from commctl.infrastructure.database.schema import (
    Uint64Text,
    artists,
    commissions,
    customers,
    metadata,
)

__all__ = [
    "Uint64Text",
    "artists",
    "commissions",
    "create_db_engine",
    "customers",
    "db_path_for",
    "init_database",
    "metadata",
]
