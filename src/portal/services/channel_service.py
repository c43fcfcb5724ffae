"""Project chat channels and their messages.

Public channels are open to every tenant member. Private channels are
visible only through an explicit permission row, which also decides
whether the user may post.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.portal.core.exceptions import ForbiddenError, NotFoundError, PortalError
from src.portal.core.logging import get_logger
from src.portal.models import Channel, ChannelPermission, Message
from src.portal.models.base import utc_now
from src.portal.repositories import (
    ChannelPermissionRepository,
    ChannelRepository,
    MembershipRepository,
    MessageRepository,
    ProjectRepository,
)
from src.portal.schemas.channel import (
    ChannelAccess,
    ChannelCreate,
    ChannelPermissionsUpdate,
    ChannelRead,
    ChannelUpdate,
    MessageRead,
)
from src.portal.services.context import Actor

logger = get_logger(__name__)

MAX_MESSAGE_PAGE = 100


def effective_access(channel: Channel, permission: ChannelPermission | None) -> ChannelAccess:
    """What a user may do in a channel given their explicit grant, if any."""
    if permission is not None:
        return ChannelAccess(can_view=permission.can_view, can_post=permission.can_post)
    if channel.is_private:
        return ChannelAccess(can_view=False, can_post=False)
    return ChannelAccess(can_view=True, can_post=True)


def to_read(channel: Channel, access: ChannelAccess) -> ChannelRead:
    return ChannelRead(
        id=channel.id,
        project_id=channel.project_id,
        name=channel.name,
        description=channel.description,
        is_private=channel.is_private,
        created_by_id=channel.created_by_id,
        created_at=channel.created_at,
        updated_at=channel.updated_at,
        user_permissions=access,
    )


class ChannelService:
    def __init__(
        self,
        channel_repo: ChannelRepository,
        permission_repo: ChannelPermissionRepository,
        message_repo: MessageRepository,
        project_repo: ProjectRepository,
        membership_repo: MembershipRepository,
        session: AsyncSession,
    ):
        self.channel_repo = channel_repo
        self.permission_repo = permission_repo
        self.message_repo = message_repo
        self.project_repo = project_repo
        self.membership_repo = membership_repo
        self.session = session

    async def _project_check(self, actor: Actor, project_id: UUID) -> None:
        if await self.project_repo.get_for_tenant(project_id, actor.tenant_id) is None:
            raise NotFoundError("Project not found", "PROJECT_NOT_FOUND")

    async def _visible(
        self, actor: Actor, project_id: UUID, channel_id: UUID
    ) -> tuple[Channel, ChannelAccess]:
        """Channel plus the actor's access. Invisible channels look missing."""
        await self._project_check(actor, project_id)
        channel = await self.channel_repo.get_for_project(channel_id, project_id)
        if channel is not None:
            permission = await self.permission_repo.get(channel.id, actor.user_id)
            access = effective_access(channel, permission)
            if access.can_view:
                return channel, access
        raise NotFoundError("Channel not found", "CHANNEL_NOT_FOUND")

    @staticmethod
    def _require_control(actor: Actor, channel: Channel) -> None:
        if channel.created_by_id != actor.user_id and not actor.is_manager:
            raise ForbiddenError(
                "Only the channel creator, owners and admins can manage this channel",
                "FORBIDDEN_INSUFFICIENT_PERMISSIONS",
            )

    # --- Channels ---

    async def list_channels(self, actor: Actor, project_id: UUID) -> list[ChannelRead]:
        await self._project_check(actor, project_id)
        rows = await self.channel_repo.list_visible(project_id, actor.user_id)
        return [to_read(channel, effective_access(channel, perm)) for channel, perm in rows]

    async def get_channel(self, actor: Actor, project_id: UUID, channel_id: UUID) -> ChannelRead:
        channel, access = await self._visible(actor, project_id, channel_id)
        return to_read(channel, access)

    async def create_channel(
        self, actor: Actor, project_id: UUID, data: ChannelCreate
    ) -> ChannelRead:
        """Create a channel. The creator of a private channel gets view and post."""
        try:
            await self._project_check(actor, project_id)
            channel = Channel(
                project_id=project_id, created_by_id=actor.user_id, **data.model_dump()
            )
            self.channel_repo.add(channel)
            await self.session.flush()
            permission = None
            if channel.is_private:
                permission = ChannelPermission(
                    channel_id=channel.id, user_id=actor.user_id, can_view=True, can_post=True
                )
                self.permission_repo.add(permission)
            await self.session.commit()
            await self.session.refresh(channel)
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Channel created",
            channel_id=str(channel.id),
            project_id=str(project_id),
            is_private=channel.is_private,
            created_by=str(actor.user_id),
        )
        return to_read(channel, effective_access(channel, permission))

    async def update_channel(
        self, actor: Actor, project_id: UUID, channel_id: UUID, data: ChannelUpdate
    ) -> ChannelRead:
        try:
            channel, access = await self._visible(actor, project_id, channel_id)
            self._require_control(actor, channel)
            for field, value in data.changes().items():
                setattr(channel, field, value)
            channel.updated_at = utc_now()
            await self.session.commit()
            await self.session.refresh(channel)
        except Exception:
            await self.session.rollback()
            raise
        return to_read(channel, access)

    async def delete_channel(self, actor: Actor, project_id: UUID, channel_id: UUID) -> None:
        try:
            channel, _ = await self._visible(actor, project_id, channel_id)
            self._require_control(actor, channel)
            await self.channel_repo.delete(channel)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info(
            "Channel deleted",
            channel_id=str(channel_id),
            project_id=str(project_id),
            deleted_by=str(actor.user_id),
        )

    # --- Permissions ---

    async def get_permissions(
        self, actor: Actor, project_id: UUID, channel_id: UUID
    ) -> list[ChannelPermission]:
        channel, _ = await self._visible(actor, project_id, channel_id)
        return await self.permission_repo.list_for_channel(channel.id)

    async def set_permissions(
        self, actor: Actor, project_id: UUID, channel_id: UUID, data: ChannelPermissionsUpdate
    ) -> list[ChannelPermission]:
        """Replace every explicit grant on the channel."""
        try:
            channel, _ = await self._visible(actor, project_id, channel_id)
            self._require_control(actor, channel)

            user_ids = [entry.user_id for entry in data.permissions]
            members = await self.membership_repo.member_ids(actor.tenant_id, user_ids)
            if any(user_id not in members for user_id in user_ids):
                raise PortalError(
                    "All users must be members of this tenant", "USER_NOT_TENANT_MEMBER"
                )

            permissions = await self.permission_repo.replace_all(
                channel.id,
                [(e.user_id, e.can_view, e.can_post) for e in data.permissions],
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Channel permissions replaced",
            channel_id=str(channel_id),
            changed_by=str(actor.user_id),
            grant_count=len(permissions),
        )
        return permissions

    # --- Messages ---

    async def list_messages(
        self,
        actor: Actor,
        project_id: UUID,
        channel_id: UUID,
        before: datetime | None = None,
        limit: int = 50,
    ) -> list[MessageRead]:
        """Most recent messages in chronological order."""
        channel, _ = await self._visible(actor, project_id, channel_id)
        limit = max(1, min(limit, MAX_MESSAGE_PAGE))
        rows = await self.message_repo.list_recent(channel.id, limit=limit, before=before)
        return [
            MessageRead(
                id=message.id,
                channel_id=message.channel_id,
                user_id=message.user_id,
                author_name=author_name,
                content=message.content,
                created_at=message.created_at,
            )
            for message, author_name in rows
        ]

    async def post_message(
        self, actor: Actor, project_id: UUID, channel_id: UUID, content: str
    ) -> MessageRead:
        try:
            channel, access = await self._visible(actor, project_id, channel_id)
            if not access.can_post:
                raise ForbiddenError(
                    "You do not have permission to post in this channel",
                    "FORBIDDEN_CANNOT_POST",
                )
            message = Message(channel_id=channel.id, user_id=actor.user_id, content=content)
            self.message_repo.add(message)
            await self.session.commit()
            await self.session.refresh(message)
        except Exception:
            await self.session.rollback()
            raise
        return MessageRead(
            id=message.id,
            channel_id=message.channel_id,
            user_id=message.user_id,
            content=message.content,
            created_at=message.created_at,
        )
