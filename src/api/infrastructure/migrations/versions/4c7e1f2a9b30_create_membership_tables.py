"""create membership tables

Revision ID: 4c7e1f2a9b30
Revises:
Create Date: 2026-10-18 09:12:44.381207

Creates users, channels, groups, both membership tables and both pending
join request tables. The (scope, requestor) unique constraints on the
join request tables back the idempotent create.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "4c7e1f2a9b30"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Create all membership tables."""
    op.create_table(
        "users",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column("provider_user_id", sa.String(255), nullable=False, unique=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("nickname", sa.String(255), nullable=True),
        sa.Column("email", sa.String(320), nullable=True),
        sa.Column("picture_url", sa.String(2048), nullable=True),
        sa.Column("last_updated_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "channels",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "groups",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column(
            "channel_id",
            sa.String(26),
            sa.ForeignKey("channels.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(255), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_groups_channel_id", "groups", ["channel_id"])

    op.create_table(
        "channel_memberships",
        sa.Column(
            "user_id",
            sa.String(26),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "channel_id",
            sa.String(26),
            sa.ForeignKey("channels.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("role", sa.String(20), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "group_memberships",
        sa.Column(
            "user_id",
            sa.String(26),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "group_id",
            sa.String(26),
            sa.ForeignKey("groups.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        *_timestamps(),
    )

    op.create_table(
        "channel_join_requests",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column(
            "channel_id",
            sa.String(26),
            sa.ForeignKey("channels.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "requestor_id",
            sa.String(26),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("comment", sa.Text, nullable=False),
        *_timestamps(),
        sa.UniqueConstraint(
            "channel_id", "requestor_id", name="uq_channel_join_requests_requestor"
        ),
    )
    op.create_index(
        "ix_channel_join_requests_channel_id", "channel_join_requests", ["channel_id"]
    )

    op.create_table(
        "group_join_requests",
        sa.Column("id", sa.String(26), primary_key=True),
        sa.Column(
            "channel_id",
            sa.String(26),
            sa.ForeignKey("channels.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "group_id",
            sa.String(26),
            sa.ForeignKey("groups.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "requestor_id",
            sa.String(26),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("comment", sa.Text, nullable=False),
        *_timestamps(),
        sa.UniqueConstraint(
            "group_id", "requestor_id", name="uq_group_join_requests_requestor"
        ),
    )
    op.create_index(
        "ix_group_join_requests_group_id", "group_join_requests", ["group_id"]
    )


def downgrade() -> None:
    """Drop all membership tables."""
    op.drop_index("ix_group_join_requests_group_id", table_name="group_join_requests")
    op.drop_table("group_join_requests")
    op.drop_index(
        "ix_channel_join_requests_channel_id", table_name="channel_join_requests"
    )
    op.drop_table("channel_join_requests")
    op.drop_table("group_memberships")
    op.drop_table("channel_memberships")
    op.drop_index("ix_groups_channel_id", table_name="groups")
    op.drop_table("groups")
    op.drop_table("channels")
    op.drop_table("users")
