"""SQLAlchemy ORM models for pending join requests.

A row exists only while its request is pending. The unique constraint on
(scope, requestor) is what serializes concurrent creates: the losing
insert fails and the caller re-reads the winner.
"""

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class ChannelJoinRequestModel(Base, TimestampMixin):
    """ORM model for channel_join_requests table."""

    __tablename__ = "channel_join_requests"
    __table_args__ = (
        UniqueConstraint(
            "channel_id", "requestor_id", name="uq_channel_join_requests_requestor"
        ),
    )

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    channel_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("channels.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    requestor_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    comment: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<ChannelJoinRequestModel(id={self.id}, channel_id={self.channel_id}, "
            f"requestor_id={self.requestor_id})>"
        )


class GroupJoinRequestModel(Base, TimestampMixin):
    """ORM model for group_join_requests table.

    channel_id is stored alongside group_id so a request can be checked
    against the channel in the URL without joining groups.
    """

    __tablename__ = "group_join_requests"
    __table_args__ = (
        UniqueConstraint(
            "group_id", "requestor_id", name="uq_group_join_requests_requestor"
        ),
    )

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    channel_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("channels.id", ondelete="CASCADE"), nullable=False
    )
    group_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("groups.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    requestor_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    comment: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<GroupJoinRequestModel(id={self.id}, group_id={self.group_id}, "
            f"requestor_id={self.requestor_id})>"
        )
