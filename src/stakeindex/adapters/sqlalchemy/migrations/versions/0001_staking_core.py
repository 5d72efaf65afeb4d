"""Staking core tables.

Revision ID: 0001_staking_core
Revises:
Create Date: 2026-10-19

"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_staking_core"
down_revision = None
branch_labels = None
depends_on = None

STAKER_ROLES = ("COLLATOR", "DELEGATOR")
EVENT_TYPES = ("REWARDED", "SLASHED", "BONDED", "UNBONDED", "WITHDRAWN")


def upgrade() -> None:
    op.create_table(
        "account",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("last_update_block", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_account"),
    )
    op.create_table(
        "staker",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("stash_id", sa.String(), nullable=False),
        sa.Column(
            "role",
            sa.Enum(*STAKER_ROLES, name="stakerrole", native_enum=False),
            nullable=False,
        ),
        sa.Column("active_bond", sa.String(40), nullable=False),
        sa.Column("total_reward", sa.String(40), nullable=False),
        sa.Column("commission", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(
            ["stash_id"],
            ["account.id"],
            name="fk_staker_stash_id_account",
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_staker"),
        sa.UniqueConstraint("stash_id", name="uq_staker_stash_id"),
    )
    op.create_table(
        "collator",
        sa.Column("id", sa.String(), nullable=False),
        sa.ForeignKeyConstraint(
            ["id"], ["staker.id"], name="fk_collator_id_staker", ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_collator"),
    )
    op.create_table(
        "delegator",
        sa.Column("id", sa.String(), nullable=False),
        sa.ForeignKeyConstraint(
            ["id"], ["staker.id"], name="fk_delegator_id_staker", ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_delegator"),
    )
    op.create_table(
        "history_element",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("block_number", sa.Integer(), nullable=False),
        sa.Column("staker_id", sa.String(), nullable=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "type",
            sa.Enum(*EVENT_TYPES, name="stakingeventtype", native_enum=False),
            nullable=False,
        ),
        sa.Column("amount", sa.String(40), nullable=False),
        sa.ForeignKeyConstraint(
            ["staker_id"],
            ["staker.id"],
            name="fk_history_element_staker_id_staker",
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_history_element"),
    )
    op.create_index(
        "ix_history_element_block_number", "history_element", ["block_number"], unique=False
    )
    op.create_index(
        "ix_history_element_staker_id", "history_element", ["staker_id"], unique=False
    )


def downgrade() -> None:
    op.drop_index("ix_history_element_staker_id", table_name="history_element")
    op.drop_index("ix_history_element_block_number", table_name="history_element")
    op.drop_table("history_element")
    op.drop_table("delegator")
    op.drop_table("collator")
    op.drop_table("staker")
    op.drop_table("account")
