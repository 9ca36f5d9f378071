"""SQLAlchemy ORM models for channel and group memberships.

The composite primary keys make a second membership for the same pair a
constraint violation.
"""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class ChannelMembershipModel(Base, TimestampMixin):
    """ORM model for channel_memberships table."""

    __tablename__ = "channel_memberships"

    user_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    channel_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("channels.id", ondelete="CASCADE"), primary_key=True
    )
    role: Mapped[str] = mapped_column(String(20), nullable=False)

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<ChannelMembershipModel(user_id={self.user_id}, "
            f"channel_id={self.channel_id}, role={self.role})>"
        )


class GroupMembershipModel(Base, TimestampMixin):
    """ORM model for group_memberships table."""

    __tablename__ = "group_memberships"

    user_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    group_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("groups.id", ondelete="CASCADE"), primary_key=True
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<GroupMembershipModel(user_id={self.user_id}, group_id={self.group_id})>"
        )
