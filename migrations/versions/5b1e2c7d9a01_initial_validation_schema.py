"""initial validation schema

Revision ID: 5b1e2c7d9a01
Revises:
Create Date: 2026-10-19 09:12:44.318201

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5b1e2c7d9a01"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create shares, votes, rate limit counters and ranking tables."""
    op.create_table(
        "user_account",
        sa.Column("user_id", sa.String(length=128), nullable=False),
        sa.Column("display_name", sa.Text(), nullable=True),
        sa.Column("avatar_url", sa.Text(), nullable=True),
        sa.Column("country", sa.String(length=64), nullable=True),
        sa.Column("gym", sa.String(length=128), nullable=True),
        sa.Column("is_admin", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("user_id"),
    )
    op.create_table(
        "shared_item",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("submitter_id", sa.String(length=128), nullable=False),
        sa.Column("exercise", sa.String(length=128), nullable=False),
        sa.Column("weight", sa.Float(), nullable=False),
        sa.Column("reps", sa.Integer(), nullable=False),
        sa.Column("sets", sa.Integer(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("country", sa.String(length=64), nullable=True),
        sa.Column("gym", sa.String(length=128), nullable=True),
        sa.Column("username", sa.Text(), nullable=True),
        sa.Column("avatar_url", sa.Text(), nullable=True),
        sa.Column("computed_score", sa.Integer(), nullable=False),
        sa.Column(
            "status",
            sa.Enum(
                "pending",
                "approved",
                "rejected",
                name="share_status",
                native_enum=False,
                length=16,
            ),
            nullable=False,
        ),
        sa.Column("total_votes", sa.Integer(), nullable=False),
        sa.Column("approve_votes", sa.Integer(), nullable=False),
        sa.Column("reject_votes", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("finalized_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.CheckConstraint(
            "total_votes = approve_votes + reject_votes",
            name="ck_shared_item_vote_totals",
        ),
        sa.CheckConstraint("approve_votes >= 0 AND reject_votes >= 0", name="ck_shared_item_votes"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_shared_item_submitter_id", "shared_item", ["submitter_id"])
    op.create_index("ix_shared_item_status_created", "shared_item", ["status", "created_at"])
    op.create_table(
        "share_voter",
        sa.Column("share_id", sa.String(length=32), nullable=False),
        sa.Column("voter_id", sa.String(length=128), nullable=False),
        sa.Column("approve", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["share_id"], ["shared_item.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("share_id", "voter_id"),
    )
    op.create_table(
        "rate_limit_counter",
        sa.Column("actor_id", sa.String(length=128), nullable=False),
        sa.Column("action", sa.String(length=32), nullable=False),
        sa.Column("window_start", sa.DateTime(timezone=True), nullable=False),
        sa.Column("count", sa.Integer(), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.CheckConstraint("count >= 0", name="ck_rate_limit_counter_count"),
        sa.PrimaryKeyConstraint("actor_id", "action"),
    )
    op.create_table(
        "ranking_entry",
        sa.Column("scope_key", sa.String(length=320), nullable=False),
        sa.Column("share_id", sa.String(length=32), nullable=False),
        sa.Column("scope_kind", sa.String(length=16), nullable=False),
        sa.Column("scope_value", sa.String(length=128), nullable=True),
        sa.Column("exercise", sa.String(length=128), nullable=False),
        sa.Column("user_id", sa.String(length=128), nullable=False),
        sa.Column("username", sa.Text(), nullable=False),
        sa.Column("avatar_url", sa.Text(), nullable=True),
        sa.Column("weight", sa.Float(), nullable=False),
        sa.Column("reps", sa.Integer(), nullable=False),
        sa.Column("computed_score", sa.Integer(), nullable=False),
        sa.Column("gym", sa.String(length=128), nullable=True),
        sa.Column("country", sa.String(length=64), nullable=True),
        sa.Column("record_date", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["share_id"], ["shared_item.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("scope_key", "share_id"),
    )
    op.create_index("ix_ranking_entry_share_id", "ranking_entry", ["share_id"])
    op.create_table(
        "leaderboard",
        sa.Column("scope_key", sa.String(length=320), nullable=False),
        sa.Column("scope_kind", sa.String(length=16), nullable=False),
        sa.Column("scope_value", sa.String(length=128), nullable=True),
        sa.Column("exercise", sa.String(length=128), nullable=False),
        sa.Column("entries", sa.JSON(), nullable=False),
        sa.Column("last_updated", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("scope_key"),
    )


def downgrade() -> None:
    """Drop every table created by this revision."""
    op.drop_table("leaderboard")
    op.drop_index("ix_ranking_entry_share_id", table_name="ranking_entry")
    op.drop_table("ranking_entry")
    op.drop_table("rate_limit_counter")
    op.drop_table("share_voter")
    op.drop_index("ix_shared_item_status_created", table_name="shared_item")
    op.drop_index("ix_shared_item_submitter_id", table_name="shared_item")
    op.drop_table("shared_item")
    op.drop_table("user_account")
