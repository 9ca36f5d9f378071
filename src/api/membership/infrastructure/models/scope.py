"""SQLAlchemy ORM models for the channels and groups tables."""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class ChannelModel(Base, TimestampMixin):
    """ORM model for channels table."""

    __tablename__ = "channels"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<ChannelModel(id={self.id}, name={self.name})>"


class GroupModel(Base, TimestampMixin):
    """ORM model for groups table.

    Foreign Key Constraint:
    - channel_id references channels.id with CASCADE delete; a group
      never outlives its channel
    """

    __tablename__ = "groups"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    channel_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("channels.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<GroupModel(id={self.id}, channel_id={self.channel_id}, name={self.name})>"
        )
