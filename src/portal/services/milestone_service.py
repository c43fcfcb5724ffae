"""Project milestones. Locked milestones are read-only until unlocked."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.portal.core.exceptions import LockedError, NotFoundError
from src.portal.core.logging import get_logger
from src.portal.models import Milestone
from src.portal.models.base import utc_now
from src.portal.repositories import MilestoneRepository, ProjectRepository
from src.portal.schemas.milestone import MilestoneCreate, MilestoneUpdate
from src.portal.services.context import Actor

logger = get_logger(__name__)


class MilestoneService:
    def __init__(
        self,
        milestone_repo: MilestoneRepository,
        project_repo: ProjectRepository,
        session: AsyncSession,
    ):
        self.milestone_repo = milestone_repo
        self.project_repo = project_repo
        self.session = session

    async def _project_check(self, actor: Actor, project_id: UUID) -> None:
        if await self.project_repo.get_for_tenant(project_id, actor.tenant_id) is None:
            raise NotFoundError("Project not found", "PROJECT_NOT_FOUND")

    async def _get(self, project_id: UUID, milestone_id: UUID) -> Milestone:
        milestone = await self.milestone_repo.get_for_project(milestone_id, project_id)
        if milestone is None:
            raise NotFoundError("Milestone not found", "MILESTONE_NOT_FOUND")
        return milestone

    @staticmethod
    def _ensure_unlocked(milestone: Milestone) -> None:
        if milestone.is_locked:
            raise LockedError(
                "Milestone is locked and cannot be modified", "MILESTONE_LOCKED"
            )

    async def list_milestones(self, actor: Actor, project_id: UUID) -> list[Milestone]:
        await self._project_check(actor, project_id)
        return await self.milestone_repo.list_for_project(project_id)

    async def get_milestone(self, actor: Actor, project_id: UUID, milestone_id: UUID) -> Milestone:
        await self._project_check(actor, project_id)
        return await self._get(project_id, milestone_id)

    async def create_milestone(
        self, actor: Actor, project_id: UUID, data: MilestoneCreate
    ) -> Milestone:
        try:
            await self._project_check(actor, project_id)
            milestone = Milestone(project_id=project_id, **data.model_dump())
            self.milestone_repo.add(milestone)
            await self.session.commit()
            await self.session.refresh(milestone)
            return milestone
        except Exception:
            await self.session.rollback()
            raise

    async def update_milestone(
        self, actor: Actor, project_id: UUID, milestone_id: UUID, data: MilestoneUpdate
    ) -> Milestone:
        """Apply a partial update.

        Raises:
            LockedError: The milestone is locked.
        """
        try:
            await self._project_check(actor, project_id)
            milestone = await self._get(project_id, milestone_id)
            self._ensure_unlocked(milestone)
            for field, value in data.changes().items():
                setattr(milestone, field, value)
            milestone.updated_at = utc_now()
            await self.session.commit()
            await self.session.refresh(milestone)
            return milestone
        except Exception:
            await self.session.rollback()
            raise

    async def delete_milestone(self, actor: Actor, project_id: UUID, milestone_id: UUID) -> None:
        try:
            await self._project_check(actor, project_id)
            milestone = await self._get(project_id, milestone_id)
            self._ensure_unlocked(milestone)
            await self.milestone_repo.delete(milestone)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

    async def set_locked(
        self, actor: Actor, project_id: UUID, milestone_id: UUID, is_locked: bool
    ) -> Milestone:
        try:
            await self._project_check(actor, project_id)
            milestone = await self._get(project_id, milestone_id)
            milestone.is_locked = is_locked
            milestone.updated_at = utc_now()
            await self.session.commit()
            await self.session.refresh(milestone)
        except Exception:
            await self.session.rollback()
            raise
        logger.info(
            "Milestone locked" if is_locked else "Milestone unlocked",
            milestone_id=str(milestone_id),
            project_id=str(project_id),
            user_id=str(actor.user_id),
        )
        return milestone
