"""Chat channels, per-user channel permissions and messages."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Text
from sqlmodel import Field, SQLModel

from src.portal.models.base import utc_now


class Channel(SQLModel, table=True):
    __tablename__ = "channels"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(foreign_key="projects.id", index=True, ondelete="CASCADE")
    name: str = Field(max_length=100)
    description: str | None = Field(default=None, max_length=500)
    is_private: bool = Field(default=False)
    created_by_id: UUID = Field(foreign_key="users.id")
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class ChannelPermission(SQLModel, table=True):
    """Explicit access grant. Public channels need none."""

    __tablename__ = "channel_permissions"

    channel_id: UUID = Field(foreign_key="channels.id", primary_key=True, ondelete="CASCADE")
    user_id: UUID = Field(foreign_key="users.id", primary_key=True, ondelete="CASCADE")
    can_view: bool = Field(default=True)
    can_post: bool = Field(default=True)


class Message(SQLModel, table=True):
    __tablename__ = "messages"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    channel_id: UUID = Field(foreign_key="channels.id", index=True, ondelete="CASCADE")
    user_id: UUID = Field(foreign_key="users.id")
    content: str = Field(sa_type=Text)
    created_at: datetime = Field(default_factory=utc_now, index=True)
