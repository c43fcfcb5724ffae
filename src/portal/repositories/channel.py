"""Repositories for chat channels, channel permissions and messages."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, or_
from sqlmodel import select

from src.portal.models import Channel, ChannelPermission, Message, User
from src.portal.repositories.base import BaseRepository


class ChannelRepository(BaseRepository[Channel]):
    model = Channel

    async def list_visible(
        self, project_id: UUID, user_id: UUID
    ) -> list[tuple[Channel, ChannelPermission | None]]:
        """Channels the user can see, with their explicit permission if any.

        Visible means public, or private with a can_view grant.
        """
        result = await self.session.execute(
            select(Channel, ChannelPermission)
            .outerjoin(
                ChannelPermission,
                (ChannelPermission.channel_id == Channel.id)  # type: ignore[arg-type]
                & (ChannelPermission.user_id == user_id),
            )
            .where(
                Channel.project_id == project_id,
                or_(
                    Channel.is_private == False,  # type: ignore[arg-type]  # noqa: E712
                    ChannelPermission.can_view == True,  # type: ignore[arg-type]  # noqa: E712
                ),
            )
            .order_by(Channel.created_at)  # type: ignore[arg-type]
        )
        return [(channel, permission) for channel, permission in result.all()]

    async def get_for_project(self, channel_id: UUID, project_id: UUID) -> Channel | None:
        result = await self.session.execute(
            select(Channel).where(Channel.id == channel_id, Channel.project_id == project_id)
        )
        return result.scalar_one_or_none()


class ChannelPermissionRepository(BaseRepository[ChannelPermission]):
    model = ChannelPermission

    async def get(self, channel_id: UUID, user_id: UUID) -> ChannelPermission | None:
        result = await self.session.execute(
            select(ChannelPermission).where(
                ChannelPermission.channel_id == channel_id,
                ChannelPermission.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_for_channel(self, channel_id: UUID) -> list[ChannelPermission]:
        result = await self.session.execute(
            select(ChannelPermission).where(ChannelPermission.channel_id == channel_id)
        )
        return list(result.scalars().all())

    async def replace_all(
        self, channel_id: UUID, entries: list[tuple[UUID, bool, bool]]
    ) -> list[ChannelPermission]:
        """Swap the full permission set of a channel (no commit).

        Args:
            entries: (user_id, can_view, can_post); a repeated user keeps the last entry.
        """
        await self.session.execute(
            delete(ChannelPermission).where(ChannelPermission.channel_id == channel_id)  # type: ignore[arg-type]
        )
        by_user = {user_id: (can_view, can_post) for user_id, can_view, can_post in entries}
        permissions = [
            ChannelPermission(
                channel_id=channel_id, user_id=user_id, can_view=can_view, can_post=can_post
            )
            for user_id, (can_view, can_post) in by_user.items()
        ]
        self.session.add_all(permissions)
        return permissions


class MessageRepository(BaseRepository[Message]):
    model = Message

    async def list_recent(
        self,
        channel_id: UUID,
        limit: int = 50,
        before: datetime | None = None,
    ) -> list[tuple[Message, str]]:
        """Latest `limit` messages (older than `before`), returned oldest first."""
        query = (
            select(Message, User.name)
            .join(User, User.id == Message.user_id)  # type: ignore[arg-type]
            .where(Message.channel_id == channel_id)
        )
        if before is not None:
            query = query.where(Message.created_at < before)
        query = query.order_by(Message.created_at.desc()).limit(limit)  # type: ignore[attr-defined]

        result = await self.session.execute(query)
        rows = [(message, name) for message, name in result.all()]
        rows.reverse()
        return rows
