"""SQLAlchemy Core table definitions for the commctl ledger.

Three independently keyed tables under fixed names: ``artists``,
``customers``, ``commissions``. The names are part of the persisted
layout and must not change between versions; schema changes ship as
Alembic revisions under ``migrations/versions``.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
)
from sqlalchemy.types import TypeDecorator

_UINT64_DIGITS = 20


class Uint64Text(TypeDecorator[int]):
    """Unsigned 64-bit integer stored as zero-padded decimal text.

    SQLite INTEGER is signed 64-bit, so the upper half of the unsigned
    range would overflow. Fixed-width text keeps the full range and sorts
    in numeric order.
    """

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Any) -> str | None:
        if value is None:
            return None
        number = int(value)
        if number < 0 or number >= 10**_UINT64_DIGITS:
            raise ValueError(f"Value out of unsigned 64-bit range: {number}")
        return f"{number:0{_UINT64_DIGITS}d}"

    def process_result_value(self, value: Any, dialect: Any) -> int | None:
        if value is None:
            return None
        return int(value)


metadata = MetaData()

artists = Table(
    "artists",
    metadata,
    Column("id", Text, primary_key=True),
    Column("name", Text, nullable=False),
    Column("price", Uint64Text, nullable=False),
    Column("revision_budget", Integer, nullable=False),
    CheckConstraint("revision_budget >= 0", name="ck_artists_revision_budget"),
)

customers = Table(
    "customers",
    metadata,
    Column("id", Text, primary_key=True),
    Column("name", Text, nullable=False),
)

commissions = Table(
    "commissions",
    metadata,
    Column("id", Text, primary_key=True),
    Column("customer_id", Text, ForeignKey("customers.id"), nullable=False),
    Column("artist_id", Text, ForeignKey("artists.id"), nullable=False),
    Column("price", Uint64Text, nullable=False),
    Column("remaining_revisions", Integer, nullable=False),
    Column("artwork_url", Text, nullable=False, default="", server_default=""),
    Column("status", Text, nullable=False),
    CheckConstraint("remaining_revisions >= 0", name="ck_commissions_remaining_revisions"),
)

# ---------------------------------------------------------------------------
# Indexes for frequently filtered columns
# ---------------------------------------------------------------------------

Index("ix_commissions_status", commissions.c.status)
Index("ix_commissions_artist", commissions.c.artist_id)
Index("ix_commissions_customer", commissions.c.customer_id)
