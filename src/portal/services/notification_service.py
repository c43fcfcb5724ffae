"""In-app notifications: the user's inbox and the work item events that fill it.

Event helpers only stage rows in the caller's session. The calling service
commits them together with the change they describe.
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.portal.core.exceptions import NotFoundError
from src.portal.core.logging import get_logger
from src.portal.models import Notification, NotificationType, Project, WorkItemType
from src.portal.repositories import MembershipRepository, NotificationRepository, UserRepository
from src.portal.schemas.notification import NotificationRead
from src.portal.services.context import Actor

logger = get_logger(__name__)

# (title, message) per work item type, formatted with `title` and `project`
_CREATED_TEXT: dict[str, tuple[str, str]] = {
    WorkItemType.BUG.value: (
        "New Bug Reported",
        'A new bug "{title}" was reported in project "{project}"',
    ),
    WorkItemType.FEATURE.value: (
        "New Feature Request",
        'A new feature request "{title}" was submitted in project "{project}"',
    ),
    WorkItemType.TASK.value: (
        "New Task Created",
        'A new task "{title}" was created in project "{project}"',
    ),
}


class NotificationService:
    def __init__(
        self,
        notification_repo: NotificationRepository,
        membership_repo: MembershipRepository,
        user_repo: UserRepository,
        session: AsyncSession,
    ):
        self.notification_repo = notification_repo
        self.membership_repo = membership_repo
        self.user_repo = user_repo
        self.session = session

    async def _get(self, actor: Actor, notification_id: UUID) -> Notification:
        notification = await self.notification_repo.get_for_user(notification_id, actor.user_id)
        if notification is None:
            raise NotFoundError("Notification not found", "NOTIFICATION_NOT_FOUND")
        return notification

    # --- Inbox ---

    async def list_notifications(
        self, actor: Actor, unread_only: bool = False, limit: int = 50
    ) -> list[NotificationRead]:
        """Newest first, within the actor's current tenant."""
        rows = await self.notification_repo.list_for_user(
            actor.user_id, actor.tenant_id, unread_only=unread_only, limit=limit
        )
        return [NotificationRead.model_validate(n) for n in rows]

    async def unread_count(self, actor: Actor) -> int:
        return await self.notification_repo.count_unread(actor.user_id, actor.tenant_id)

    async def mark_read(self, actor: Actor, notification_id: UUID) -> NotificationRead:
        try:
            notification = await self._get(actor, notification_id)
            notification.is_read = True
            await self.session.commit()
            await self.session.refresh(notification)
        except Exception:
            await self.session.rollback()
            raise
        return NotificationRead.model_validate(notification)

    async def mark_all_read(self, actor: Actor) -> int:
        try:
            updated = await self.notification_repo.mark_all_read(actor.user_id, actor.tenant_id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return updated

    async def delete_notification(self, actor: Actor, notification_id: UUID) -> None:
        try:
            notification = await self._get(actor, notification_id)
            await self.notification_repo.delete(notification)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

    # --- Work item events (staged, no commit) ---

    def _stage(
        self,
        recipients: list[UUID],
        actor: Actor,
        type: NotificationType,
        title: str,
        message: str,
        item_type: str,
        item_id: UUID,
        project: Project,
    ) -> int:
        # Nobody is notified about their own action
        user_ids = [u for u in dict.fromkeys(recipients) if u != actor.user_id]
        if not user_ids:
            return 0
        self.notification_repo.add_all(
            [
                Notification(
                    user_id=user_id,
                    tenant_id=actor.tenant_id,
                    type=type.value,
                    title=title,
                    message=message,
                    resource_type=item_type,
                    resource_id=item_id,
                    project_id=project.id,
                )
                for user_id in user_ids
            ]
        )
        logger.info(
            "Notifications staged",
            type=type.value,
            item_id=str(item_id),
            recipients=len(user_ids),
        )
        return len(user_ids)

    async def item_created(
        self, actor: Actor, item_type: str, item_id: UUID, item_title: str, project: Project
    ) -> int:
        """Tell the tenant's owners and admins about a new item.

        Returns the number of notifications staged.
        """
        title, template = _CREATED_TEXT[item_type]
        managers = await self.membership_repo.manager_ids(actor.tenant_id)
        return self._stage(
            managers,
            actor,
            NotificationType(f"{item_type}_created"),
            title,
            template.format(title=item_title, project=project.name),
            item_type,
            item_id,
            project,
        )

    async def item_assigned(
        self,
        actor: Actor,
        item_type: str,
        item_id: UUID,
        item_title: str,
        project: Project,
        user_ids: list[UUID],
    ) -> int:
        """Tell newly assigned users who assigned them."""
        if not user_ids:
            return 0
        assigner = await self.user_repo.get_by_id(actor.user_id)
        assigned_by = assigner.name if assigner else "A team member"
        return self._stage(
            user_ids,
            actor,
            NotificationType(f"{item_type}_assigned"),
            f"{item_type.capitalize()} Assigned",
            f'You were assigned to {item_type} "{item_title}" by {assigned_by}',
            item_type,
            item_id,
            project,
        )
