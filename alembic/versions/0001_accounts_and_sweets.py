"""accounts and sweets

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00
"""
from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "accounts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("identity", sa.String(length=256), nullable=False),
        sa.Column("display_name", sa.String(length=256), nullable=False),
        sa.Column("password_hash", sa.String(length=128), nullable=False),
        sa.Column("is_admin", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_accounts"),
    )
    op.create_index("ix_accounts_identity", "accounts", ["identity"], unique=True)

    op.create_table(
        "sweets",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=256), nullable=False),
        sa.Column("category", sa.String(length=128), nullable=False),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("quantity >= 0", name="ck_sweets_quantity_non_negative"),
        sa.CheckConstraint("price >= 0", name="ck_sweets_price_non_negative"),
        sa.PrimaryKeyConstraint("id", name="pk_sweets"),
    )
    op.create_index("ix_sweets_name", "sweets", ["name"], unique=True)
    op.create_index("ix_sweets_category", "sweets", ["category"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_sweets_category", table_name="sweets")
    op.drop_index("ix_sweets_name", table_name="sweets")
    op.drop_table("sweets")
    op.drop_index("ix_accounts_identity", table_name="accounts")
    op.drop_table("accounts")
