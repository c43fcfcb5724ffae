"""Repository for in-app notifications."""

from uuid import UUID

from sqlalchemy import func, update
from sqlmodel import select

from src.portal.models import Notification
from src.portal.repositories.base import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    """A user's inbox within one tenant."""

    model = Notification

    async def list_for_user(
        self, user_id: UUID, tenant_id: UUID, unread_only: bool = False, limit: int = 50
    ) -> list[Notification]:
        """Newest first."""
        query = select(Notification).where(
            Notification.user_id == user_id, Notification.tenant_id == tenant_id
        )
        if unread_only:
            query = query.where(Notification.is_read == False)  # noqa: E712
        result = await self.session.execute(
            query.order_by(Notification.created_at.desc()).limit(limit)  # type: ignore[attr-defined]
        )
        return list(result.scalars().all())

    async def count_unread(self, user_id: UUID, tenant_id: UUID) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(Notification)
            .where(
                Notification.user_id == user_id,
                Notification.tenant_id == tenant_id,
                Notification.is_read == False,  # noqa: E712
            )
        )
        return int(result.scalar_one())

    async def get_for_user(self, notification_id: UUID, user_id: UUID) -> Notification | None:
        result = await self.session.execute(
            select(Notification).where(
                Notification.id == notification_id, Notification.user_id == user_id
            )
        )
        return result.scalar_one_or_none()

    async def mark_all_read(self, user_id: UUID, tenant_id: UUID) -> int:
        """Mark every unread notification read. Returns the number updated."""
        result = await self.session.execute(
            update(Notification)
            .where(
                Notification.user_id == user_id,  # type: ignore[arg-type]
                Notification.tenant_id == tenant_id,  # type: ignore[arg-type]
                Notification.is_read == False,  # type: ignore[arg-type]  # noqa: E712
            )
            .values(is_read=True)
        )
        return result.rowcount or 0  # type: ignore[attr-defined]

    def add_all(self, notifications: list[Notification]) -> None:
        """Add several notifications to the session (no flush/commit)."""
        self.session.add_all(notifications)
