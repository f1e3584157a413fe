"""Baseline ledger schema — artists, customers, commissions.

Revision ID: 001_baseline
Revises: None
Create Date: 2026-10-19

Existing databases get stamped at this revision without running it;
databases that predate version tracking are stamped during
``commctl upgrade``.
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision: str = "001_baseline"
down_revision: str | None = None
branch_labels: tuple[str, ...] | None = None
depends_on: tuple[str, ...] | None = None


def upgrade() -> None:
    op.create_table(
        "artists",
        sa.Column("id", sa.Text, primary_key=True),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("price", sa.Text, nullable=False),
        sa.Column("revision_budget", sa.Integer, nullable=False),
        sa.CheckConstraint("revision_budget >= 0", name="ck_artists_revision_budget"),
    )

    op.create_table(
        "customers",
        sa.Column("id", sa.Text, primary_key=True),
        sa.Column("name", sa.Text, nullable=False),
    )

    op.create_table(
        "commissions",
        sa.Column("id", sa.Text, primary_key=True),
        sa.Column("customer_id", sa.Text, sa.ForeignKey("customers.id"), nullable=False),
        sa.Column("artist_id", sa.Text, sa.ForeignKey("artists.id"), nullable=False),
        sa.Column("price", sa.Text, nullable=False),
        sa.Column("remaining_revisions", sa.Integer, nullable=False),
        sa.Column("artwork_url", sa.Text, nullable=False, server_default=""),
        sa.Column("status", sa.Text, nullable=False),
        sa.CheckConstraint(
            "remaining_revisions >= 0", name="ck_commissions_remaining_revisions"
        ),
    )
    op.create_index("ix_commissions_status", "commissions", ["status"])
    op.create_index("ix_commissions_artist", "commissions", ["artist_id"])
    op.create_index("ix_commissions_customer", "commissions", ["customer_id"])


def downgrade() -> None:
    op.drop_index("ix_commissions_customer", table_name="commissions")
    op.drop_index("ix_commissions_artist", table_name="commissions")
    op.drop_index("ix_commissions_status", table_name="commissions")
    op.drop_table("commissions")
    op.drop_table("customers")
    op.drop_table("artists")
